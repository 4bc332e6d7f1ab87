"""Locate the TXT record holding a challenge token across a paginated listing."""

from __future__ import annotations

import logging
import threading

from active24_solver.config import DEFAULT_MAX_PAGES
from active24_solver.dns.base import DnsBackend
from active24_solver.exceptions import PageLimitExceeded, ReconcileCancelled
from active24_solver.models import TXT, DnsRecord, PageCursor

logger = logging.getLogger(__name__)


def matches(record: DnsRecord, record_name: str, zone: str, content: str) -> bool:
    """Return True if a listed record is the challenge record.

    The listed name must equal ``record_name.zone`` exactly and the content must
    be present and identical. The type is not checked; listings are already
    filtered by type.
    """
    if record.content is None:
        return False
    return record.name == f"{record_name}.{zone}" and record.content == content


class PagedFinder:
    """Scan TXT listing pages for a matching record, fetching at most ``max_pages`` pages."""

    def __init__(
        self,
        backend: DnsBackend,
        max_pages: int = DEFAULT_MAX_PAGES,
        cancel_event: threading.Event | None = None,
    ) -> None:
        if max_pages < 1:
            raise ValueError(f"max_pages must be a positive integer, got: {max_pages}")
        self._backend = backend
        self._max_pages = max_pages
        self._cancel_event = cancel_event

    def find(self, record_name: str, zone: str, content: str) -> DnsRecord | None:
        """Return the first record matching the challenge, or None if the listing ends without one.

        Raises:
            PageLimitExceeded: If a next page is still outstanding after ``max_pages`` fetches.
            ReconcileCancelled: If the cancel event is set before a page fetch.
        """
        cursor: PageCursor = None
        page_count = 0
        while True:
            page_count += 1
            if page_count > self._max_pages:
                raise PageLimitExceeded(self._max_pages)
            if self._cancel_event is not None and self._cancel_event.is_set():
                raise ReconcileCancelled(f"Search for {record_name}.{zone} cancelled after {page_count - 1} page(s)")

            page = self._backend.list_page(TXT, record_name, cursor)
            logger.debug(
                "Page %d for %s.%s: %d record(s), next=%s",
                page_count,
                record_name,
                zone,
                len(page.records),
                page.next_cursor,
            )
            for record in page.records:
                if matches(record, record_name, zone, content):
                    logger.debug("Found record ID %s on page %d", record.id, page_count)
                    return record

            if page.next_cursor is None:
                logger.debug("No TXT record %s.%s with matching content", record_name, zone)
                return None
            cursor = page.next_cursor
