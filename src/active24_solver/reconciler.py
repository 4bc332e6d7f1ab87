"""Publish and retract challenge TXT records idempotently."""

from __future__ import annotations

import logging
import threading

from active24_solver.config import ReconcilerConfig
from active24_solver.dns.base import DnsBackend
from active24_solver.exceptions import BackendFailure, SolverError
from active24_solver.finder import PagedFinder
from active24_solver.models import TXT, ChallengeCoords, DnsRecord

logger = logging.getLogger(__name__)


class ChallengeReconciler:
    """Upsert or delete the single TXT record identified by (record name, content).

    Records with the same name but other content belong to other challenges
    and are never touched.
    """

    def __init__(
        self,
        backend: DnsBackend,
        config: ReconcilerConfig,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._backend = backend
        self._config = config
        self._finder = PagedFinder(backend, max_pages=config.max_pages, cancel_event=cancel_event)

    def present(self, coords: ChallengeCoords) -> None:
        """Create the challenge record, or rewrite it in place if it already exists."""
        try:
            existing = self._finder.find(coords.record_name, coords.zone, coords.content)
            if existing is None:
                self._backend.create(
                    DnsRecord(name=coords.record_name, type=TXT, content=coords.content, ttl=coords.ttl)
                )
            else:
                self._backend.update(
                    self._record_id(existing),
                    DnsRecord(name=coords.record_name, content=coords.content, ttl=coords.ttl),
                )
        except SolverError as exc:
            self._log_failure("present", coords, exc)
            raise

    def clean_up(self, coords: ChallengeCoords) -> None:
        """Delete the challenge record if present; succeed quietly if it is already gone."""
        try:
            existing = self._finder.find(coords.record_name, coords.zone, coords.content)
            if existing is None:
                logger.warning("TXT record %s.%s not found, skipping delete", coords.record_name, coords.zone)
                return
            self._backend.delete(self._record_id(existing))
        except SolverError as exc:
            self._log_failure("clean_up", coords, exc)
            raise

    @staticmethod
    def _record_id(record: DnsRecord) -> int:
        if record.id is None:
            raise BackendFailure(None, f"Listed record {record.name} carries no id")
        return record.id

    def _log_failure(self, operation: str, coords: ChallengeCoords, exc: SolverError) -> None:
        logger.error(
            "%s failed (service=%d, domain=%s, record=%s, status=%s): %s",
            operation,
            self._config.service_id,
            self._config.domain,
            coords.record_name,
            getattr(exc, "status", None),
            exc,
        )
