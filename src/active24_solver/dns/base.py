"""Abstract base class for DNS record backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Self

from active24_solver.models import DnsRecord, PageCursor, RecordPage


class DnsBackend(ABC):
    """Record API of a DNS provider, scoped to one hosting service and domain.

    Every method raises ``BackendFailure`` on transport or HTTP status errors.
    """

    def close(self) -> None:
        """Release resources. Override in subclasses that hold open connections."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @abstractmethod
    def list_page(self, record_type: str, name: str, cursor: PageCursor = None) -> RecordPage:
        """List one page of records of ``record_type`` named ``name``.

        Args:
            record_type: Record type filter (e.g. "TXT").
            name: Record name relative to the zone (e.g. "_acme-challenge").
            cursor: Cursor from the previous page, or None for the first page.

        Returns:
            The records on the page (absolute names) and the cursor to the next page.
        """

    @abstractmethod
    def create(self, record: DnsRecord) -> None:
        """Create a record. ``record.name`` is relative to the zone."""

    @abstractmethod
    def update(self, record_id: int, record: DnsRecord) -> None:
        """Replace name, content and TTL of the record with ``record_id``."""

    @abstractmethod
    def delete(self, record_id: int) -> None:
        """Delete the record with ``record_id``."""
