"""Errors raised while solving a DNS-01 challenge."""

from __future__ import annotations


class SolverError(Exception):
    """Base class for errors returned to the challenge dispatcher."""


class BackendFailure(SolverError):
    """The DNS provider API rejected a call or could not be reached.

    ``status`` is the HTTP status code, or ``None`` when no response was received.
    """

    def __init__(self, status: int | None, message: str) -> None:
        self.status = status
        self.message = message
        code = f"HTTP {status}" if status is not None else "no response"
        super().__init__(f"Active24 API error ({code}): {message}")


class PageLimitExceeded(SolverError):
    """The TXT record listing still had pages left after ``limit`` fetches."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"Maximum page limit {limit} reached while searching TXT records, "
            "increase maxPages in the issuer configuration"
        )


class ConfigInvalid(SolverError, ValueError):
    """The solver config blob could not be decoded."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid solver config: {reason}")


class SecretMissing(SolverError):
    """A credential could not be read from the secret store."""

    def __init__(self, namespace: str, name: str, key: str, reason: str | None = None) -> None:
        self.namespace = namespace
        self.name = name
        self.key = key
        message = f"Unable to read key '{key}' of secret '{namespace}/{name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ReconcileCancelled(SolverError):
    """The record scan was abandoned before any mutation."""


class InvalidPayload(ValueError):
    """A webhook request body is not a ChallengePayload carrying a request."""
