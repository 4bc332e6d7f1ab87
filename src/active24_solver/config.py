"""Configuration loading and validation.

Two layers: process settings from environment variables (``load_config``) and
the per-issuer solver config blob carried by every challenge (``SolverConfig``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from active24_solver.exceptions import ConfigInvalid

DEFAULT_API_URL = "https://rest.active24.cz"
DEFAULT_MAX_PAGES = 10

_SECRET_STORES = ("kubernetes", "keyvault")
_DEFAULT_SECRET_STORE = "kubernetes"
_DEFAULT_KUBERNETES_HOST = "kubernetes.default.svc"
_DEFAULT_KUBERNETES_PORT = "443"
_DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class AppConfig:
    """Process configuration loaded from environment variables."""

    group_name: str
    secret_store: str = _DEFAULT_SECRET_STORE
    kubernetes_api_url: str = f"https://{_DEFAULT_KUBERNETES_HOST}:{_DEFAULT_KUBERNETES_PORT}"
    keyvault_url: str | None = None
    log_level: str = _DEFAULT_LOG_LEVEL


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


def load_config() -> AppConfig:
    """Load and validate process configuration from environment variables."""
    group_name = _require_env("GROUP_NAME")

    secret_store = os.environ.get("SECRET_STORE", _DEFAULT_SECRET_STORE).lower()
    if secret_store not in _SECRET_STORES:
        raise ValueError(f"SECRET_STORE must be one of {', '.join(_SECRET_STORES)}, got: {secret_store!r}")

    host = os.environ.get("KUBERNETES_SERVICE_HOST", _DEFAULT_KUBERNETES_HOST)
    port = os.environ.get("KUBERNETES_SERVICE_PORT", _DEFAULT_KUBERNETES_PORT)
    if ":" in host:
        host = f"[{host}]"

    log_level = os.environ.get("LOG_LEVEL", _DEFAULT_LOG_LEVEL).upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be a logging level name, got: {log_level!r}")

    return AppConfig(
        group_name=group_name,
        secret_store=secret_store,
        kubernetes_api_url=f"https://{host}:{port}",
        keyvault_url=os.environ.get("AZURE_KEYVAULT_URL") or None,
        log_level=log_level,
    )


def configure_logging(config: AppConfig) -> None:
    """Apply the configured level to the package logger; handlers belong to the host."""
    logging.getLogger("active24_solver").setLevel(config.log_level)


@dataclass(frozen=True)
class SecretKeySelector:
    """Reference to one key of a named secret."""

    name: str
    key: str

    @classmethod
    def from_dict(cls, data: object, field_name: str, default_key: str) -> SecretKeySelector:
        if not isinstance(data, dict):
            raise ConfigInvalid(f"{field_name} must be an object with a 'name'")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigInvalid(f"{field_name}.name is required")
        key = data.get("key") or default_key
        if not isinstance(key, str):
            raise ConfigInvalid(f"{field_name}.key must be a string")
        return cls(name=name, key=key)


def _optional_str(data: dict, field_name: str) -> str:
    value = data.get(field_name) or ""
    if not isinstance(value, str):
        raise ConfigInvalid(f"{field_name} must be a string, got: {value!r}")
    return value


def _optional_int(data: dict, field_name: str) -> int:
    value = data.get(field_name) or 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigInvalid(f"{field_name} must be an integer, got: {value!r}")
    return value


@dataclass(frozen=True)
class SolverConfig:
    """Issuer-level solver settings decoded from the challenge config blob.

    An empty ``domain`` means "use the challenge's resolved zone".
    """

    api_key_secret_ref: SecretKeySelector
    api_secret_secret_ref: SecretKeySelector
    service_id: int
    domain: str = ""
    api_url: str = DEFAULT_API_URL
    max_pages: int = DEFAULT_MAX_PAGES

    @classmethod
    def from_dict(cls, data: object) -> SolverConfig:
        """Decode the config blob, applying defaults.

        Raises:
            ConfigInvalid: If the blob is missing, malformed or out of range.
        """
        if data is None:
            raise ConfigInvalid("config is required")
        if not isinstance(data, dict):
            raise ConfigInvalid(f"config must be an object, got: {type(data).__name__}")

        service_id = _optional_int(data, "serviceID")
        if service_id <= 0:
            raise ConfigInvalid("serviceID is required and must be a positive integer")

        max_pages = _optional_int(data, "maxPages")
        if max_pages < 0:
            raise ConfigInvalid(f"maxPages must be a positive integer, got: {max_pages}")

        return cls(
            api_key_secret_ref=SecretKeySelector.from_dict(data.get("apiKeySecretRef"), "apiKeySecretRef", "apiKey"),
            api_secret_secret_ref=SecretKeySelector.from_dict(
                data.get("apiSecretSecretRef"), "apiSecretSecretRef", "apiSecret"
            ),
            service_id=service_id,
            domain=_optional_str(data, "domain"),
            api_url=_optional_str(data, "apiUrl") or DEFAULT_API_URL,
            max_pages=max_pages or DEFAULT_MAX_PAGES,
        )


@dataclass(frozen=True)
class ReconcilerConfig:
    """Credentials and scoping for a single reconcile call."""

    api_key: str
    api_secret: str
    service_id: int
    domain: str
    api_url: str = DEFAULT_API_URL
    max_pages: int = DEFAULT_MAX_PAGES

    def __repr__(self) -> str:
        return (
            f"ReconcilerConfig(service_id={self.service_id}, domain={self.domain!r}, "
            f"api_url={self.api_url!r}, max_pages={self.max_pages})"
        )
