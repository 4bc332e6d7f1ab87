"""Data classes passed between the webhook, the solver and the DNS backend."""

from __future__ import annotations

from dataclasses import dataclass

TXT = "TXT"
DEFAULT_TTL = 300


@dataclass(frozen=True)
class ChallengeRequest:
    """A single DNS-01 challenge as sent by cert-manager."""

    uid: str
    action: str
    resolved_fqdn: str
    resolved_zone: str
    key: str
    resource_namespace: str = ""
    type: str = "dns-01"
    dns_name: str = ""
    allow_ambient_credentials: bool = False
    config: dict | None = None

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "action": self.action,
            "type": self.type,
            "dnsName": self.dns_name,
            "key": self.key,
            "resourceNamespace": self.resource_namespace,
            "resolvedFQDN": self.resolved_fqdn,
            "resolvedZone": self.resolved_zone,
            "allowAmbientCredentials": self.allow_ambient_credentials,
            "config": self.config,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ChallengeRequest:
        return cls(
            uid=data.get("uid", ""),
            action=data["action"],
            resolved_fqdn=data["resolvedFQDN"],
            resolved_zone=data["resolvedZone"],
            key=data["key"],
            resource_namespace=data.get("resourceNamespace", ""),
            type=data.get("type", "dns-01"),
            dns_name=data.get("dnsName", ""),
            allow_ambient_credentials=bool(data.get("allowAmbientCredentials", False)),
            config=data.get("config"),
        )


@dataclass(frozen=True)
class ChallengeCoords:
    """Where a challenge token lives: ``record_name`` within ``zone``, holding ``content``."""

    zone: str
    fqdn: str
    record_name: str
    content: str
    ttl: int = DEFAULT_TTL


@dataclass(frozen=True)
class DnsRecord:
    """A DNS record as listed by, or sent to, the provider API.

    Listed records carry the absolute ``name`` (``record.zone``); records sent
    on create/update carry the name relative to the zone.
    """

    name: str
    id: int | None = None
    type: str | None = None
    content: str | None = None
    ttl: int | None = None

    def to_dict(self) -> dict:
        data: dict = {"name": self.name}
        if self.type is not None:
            data["type"] = self.type
        if self.content is not None:
            data["content"] = self.content
        if self.ttl is not None:
            data["ttl"] = self.ttl
        return data

    @classmethod
    def from_dict(cls, data: dict) -> DnsRecord:
        return cls(
            name=data["name"],
            id=data.get("id"),
            type=data.get("type"),
            content=data.get("content"),
            ttl=data.get("ttl"),
        )


@dataclass(frozen=True)
class ByUrl:
    """Next page addressed by a URL returned from the previous page."""

    url: str


@dataclass(frozen=True)
class ByNumber:
    """Next page addressed by its 1-based page number."""

    page: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"Page number must be positive, got: {self.page}")


PageCursor = ByUrl | ByNumber | None


@dataclass(frozen=True)
class RecordPage:
    """One page of a record listing and the cursor to the page after it."""

    records: tuple[DnsRecord, ...] = ()
    next_cursor: PageCursor = None
