"""Active24 DNS-01 solver — the Present/CleanUp callbacks invoked per challenge."""

from __future__ import annotations

import logging
import threading

from active24_solver.config import AppConfig, ReconcilerConfig, SecretKeySelector, SolverConfig
from active24_solver.dns import get_dns_backend
from active24_solver.dns.util import record_name_from_fqdn, trim_trailing_dot
from active24_solver.exceptions import SecretMissing
from active24_solver.models import ChallengeCoords, ChallengeRequest
from active24_solver.reconciler import ChallengeReconciler
from active24_solver.secret_store import SecretStore, get_secret_store

logger = logging.getLogger(__name__)

SOLVER_NAME = "active24"


def challenge_coords(request: ChallengeRequest, domain: str = "") -> ChallengeCoords:
    """Derive the record coordinates of a challenge.

    The zone is the configured ``domain`` when set, otherwise the resolved zone
    without its trailing dot. The record name is always derived from the
    resolved FQDN and zone.
    """
    return ChallengeCoords(
        zone=domain or trim_trailing_dot(request.resolved_zone),
        fqdn=trim_trailing_dot(request.resolved_fqdn),
        record_name=record_name_from_fqdn(request.resolved_fqdn, request.resolved_zone),
        content=request.key,
    )


class Active24Solver:
    """Solve DNS-01 challenges by managing TXT records through the Active24 API.

    Each call reads credentials, builds its own backend and closes it again;
    nothing is shared between challenges except the secret store.
    """

    name = SOLVER_NAME

    def __init__(
        self,
        secret_store: SecretStore | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._secret_store = secret_store
        self._cancel_event = cancel_event

    def initialize(self, config: AppConfig) -> None:
        """Connect to the secret store selected by the process configuration."""
        logger.debug("Initializing %s solver with %s secret store", self.name, config.secret_store)
        if self._secret_store is None:
            self._secret_store = get_secret_store(config)

    def present(self, request: ChallengeRequest) -> None:
        logger.info("Present: fqdn=%s, zone=%s", request.resolved_fqdn, request.resolved_zone)
        config, coords = self._prepare(request)
        with get_dns_backend(config) as backend:
            ChallengeReconciler(backend, config, cancel_event=self._cancel_event).present(coords)

    def clean_up(self, request: ChallengeRequest) -> None:
        logger.info("CleanUp: fqdn=%s, zone=%s", request.resolved_fqdn, request.resolved_zone)
        config, coords = self._prepare(request)
        with get_dns_backend(config) as backend:
            ChallengeReconciler(backend, config, cancel_event=self._cancel_event).clean_up(coords)

    def _prepare(self, request: ChallengeRequest) -> tuple[ReconcilerConfig, ChallengeCoords]:
        solver_config = SolverConfig.from_dict(request.config)
        coords = challenge_coords(request, solver_config.domain)
        return self._reconciler_config(request, solver_config, coords.zone), coords

    def _reconciler_config(self, request: ChallengeRequest, solver_config: SolverConfig, domain: str) -> ReconcilerConfig:
        if self._secret_store is None:
            raise RuntimeError("Solver is not initialized")

        api_key = self._read_secret(request.resource_namespace, solver_config.api_key_secret_ref)
        api_secret = self._read_secret(request.resource_namespace, solver_config.api_secret_secret_ref)

        return ReconcilerConfig(
            api_key=api_key,
            api_secret=api_secret,
            service_id=solver_config.service_id,
            domain=domain,
            api_url=solver_config.api_url,
            max_pages=solver_config.max_pages,
        )

    def _read_secret(self, namespace: str, ref: SecretKeySelector) -> str:
        value = self._secret_store.get(namespace, ref.name, ref.key)
        try:
            return value.decode()
        except UnicodeDecodeError as exc:
            raise SecretMissing(namespace, ref.name, ref.key, "value is not valid UTF-8") from exc
