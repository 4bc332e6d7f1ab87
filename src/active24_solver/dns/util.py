"""DNS name utility functions."""

from __future__ import annotations


def trim_trailing_dot(name: str) -> str:
    """Convert an absolute name ("example.com.") to the provider's form ("example.com")."""
    return name.removesuffix(".")


def record_name_from_fqdn(fqdn: str, zone: str) -> str:
    """Strip the zone suffix from an FQDN, leaving the record name relative to the zone.

    Both arguments are in the same form (both absolute with a trailing dot, or
    both without). This is a plain suffix trim: an FQDN outside the zone is
    returned unchanged rather than rejected.

    Args:
        fqdn: Fully qualified record name (e.g. "_acme-challenge.example.com.").
        zone: Zone the record lives in (e.g. "example.com.").

    Returns:
        The relative record name (e.g. "_acme-challenge").
    """
    return fqdn.removesuffix(f".{zone}")
