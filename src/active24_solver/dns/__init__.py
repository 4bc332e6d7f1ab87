"""DNS backend factory — build a fresh backend for one reconcile call."""

from __future__ import annotations

from active24_solver.config import ReconcilerConfig
from active24_solver.dns.active24 import Active24DnsBackend
from active24_solver.dns.base import DnsBackend
from active24_solver.exceptions import ConfigInvalid


def get_dns_backend(config: ReconcilerConfig) -> DnsBackend:
    """Instantiate the Active24 backend for the service and domain in ``config``.

    A new backend (and HTTP client) is created per call because credentials
    may differ between challenges; callers close it when the reconcile ends.
    """
    if not config.api_key:
        raise ConfigInvalid("API key is empty")
    if not config.api_secret:
        raise ConfigInvalid("API secret is empty")
    if not config.domain:
        raise ConfigInvalid("domain is empty")

    return Active24DnsBackend(
        api_key=config.api_key,
        api_secret=config.api_secret,
        service_id=config.service_id,
        domain=config.domain,
        api_url=config.api_url,
    )
