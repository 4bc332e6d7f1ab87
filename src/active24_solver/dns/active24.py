"""Active24 DNS backend — list/create/update/delete records via the Active24 REST API v2."""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from datetime import UTC, datetime

import httpx

from active24_solver.config import DEFAULT_API_URL
from active24_solver.dns.base import DnsBackend
from active24_solver.exceptions import BackendFailure
from active24_solver.models import ByNumber, ByUrl, DnsRecord, PageCursor, RecordPage

logger = logging.getLogger(__name__)


def _sign(api_secret: str, method: str, path: str, timestamp: int) -> str:
    """Request signature: hex HMAC-SHA1 of "METHOD path unix-timestamp" keyed by the API secret."""
    canonical = f"{method} {path} {timestamp}"
    return hmac.new(api_secret.encode(), canonical.encode(), hashlib.sha1).hexdigest()


def _error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for field in ("title", "message", "detail"):
            if body.get(field):
                return str(body[field])
    return response.text or response.reason_phrase


def _next_cursor(payload: dict) -> PageCursor:
    next_url = payload.get("nextPageUrl")
    if next_url:
        return ByUrl(next_url)
    current, total = payload.get("currentPage"), payload.get("totalPages")
    if isinstance(current, int) and isinstance(total, int) and 0 < current < total:
        return ByNumber(current + 1)
    return None


class Active24DnsBackend(DnsBackend):
    """DNS backend bound to one Active24 hosting service and domain."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        service_id: int,
        domain: str,
        api_url: str = DEFAULT_API_URL,
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self.service_id = service_id
        self.domain = domain
        base_url = api_url.rstrip("/")
        self._api_url = httpx.URL(base_url)
        self._records_url = f"{base_url}/v2/service/{service_id}/dns/record"
        self._client = _http_client or httpx.Client(
            headers={"Accept": "application/json"},
            timeout=30,
        )

    def _request(self, method: str, url: str | httpx.URL, **kwargs) -> httpx.Response:
        """Send a signed request; any failure becomes a BackendFailure."""
        url = httpx.URL(url)
        timestamp = int(time.time())
        headers = {"Date": datetime.fromtimestamp(timestamp, UTC).isoformat()}
        auth = (self._api_key, _sign(self._api_secret, method, url.path, timestamp))
        try:
            resp = self._client.request(method, url, headers=headers, auth=auth, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = _error_message(exc.response)
            logger.error(
                "Active24 API returned HTTP %d for %s %s (service=%d, domain=%s): %s",
                status,
                method,
                url.path,
                self.service_id,
                self.domain,
                message,
            )
            raise BackendFailure(status, message) from exc
        except httpx.TransportError as exc:
            logger.error(
                "Active24 API unreachable for %s %s (service=%d, domain=%s): %s",
                method,
                url.path,
                self.service_id,
                self.domain,
                exc,
            )
            raise BackendFailure(None, str(exc)) from exc
        return resp

    def _page_url(self, cursor: ByUrl) -> httpx.URL:
        """Resolve a next-page URL, refusing to send credentials to another origin."""
        url = self._api_url.join(cursor.url)
        origin = (self._api_url.scheme, self._api_url.host, self._api_url.port)
        if (url.scheme, url.host, url.port) != origin:
            raise BackendFailure(None, f"Next page URL points outside the API host: {cursor.url}")
        return url

    def list_page(self, record_type: str, name: str, cursor: PageCursor = None) -> RecordPage:
        if isinstance(cursor, ByUrl):
            resp = self._request("GET", self._page_url(cursor))
        else:
            params = {"filters[type][]": record_type, "filters[name]": name}
            if isinstance(cursor, ByNumber):
                params["page"] = str(cursor.page)
            resp = self._request("GET", self._records_url, params=params)

        try:
            payload = resp.json()
            if not isinstance(payload, dict):
                raise TypeError(f"expected an object, got {type(payload).__name__}")
            records = tuple(DnsRecord.from_dict(r) for r in payload.get("data") or [])
            next_cursor = _next_cursor(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error(
                "Malformed record listing from Active24 API (service=%d, domain=%s): %s",
                self.service_id,
                self.domain,
                exc,
            )
            raise BackendFailure(resp.status_code, f"malformed list response: {exc!r}") from exc
        return RecordPage(records=records, next_cursor=next_cursor)

    def create(self, record: DnsRecord) -> None:
        self._request("POST", self._records_url, json=record.to_dict())
        logger.info("Created %s record %s in Active24 domain %s", record.type, record.name, self.domain)

    def update(self, record_id: int, record: DnsRecord) -> None:
        self._request("PUT", f"{self._records_url}/{record_id}", json=record.to_dict())
        logger.info("Updated record %d (%s) in Active24 domain %s", record_id, record.name, self.domain)

    def delete(self, record_id: int) -> None:
        self._request("DELETE", f"{self._records_url}/{record_id}")
        logger.info("Deleted record %d from Active24 domain %s", record_id, self.domain)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
