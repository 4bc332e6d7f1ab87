"""Shared test fixtures for active24-acme-solver."""

import pytest

import active24_solver.secret_store as _secret_store
from active24_solver.config import ReconcilerConfig
from active24_solver.dns.base import DnsBackend
from active24_solver.models import ByNumber, DnsRecord, RecordPage


def pytest_runtest_setup(item):
    """Reset module-level caches between tests."""
    _secret_store._credential = None


class InMemoryBackend(DnsBackend):
    """Record store for one zone that lists records ``page_size`` at a time and logs every call."""

    def __init__(self, zone="example.com", records=(), page_size=50):
        self.zone = zone
        self.page_size = page_size
        self.records = [DnsRecord(id=r.id, name=r.name, type="TXT", content=r.content, ttl=r.ttl) for r in records]
        self.calls = []
        self._next_id = max((r.id for r in self.records), default=0) + 1

    def list_page(self, record_type, name, cursor=None):
        self.calls.append(("list_page", record_type, name, cursor))
        page = cursor.page if cursor is not None else 1
        matching = [r for r in self.records if r.name == f"{name}.{self.zone}"]
        start = (page - 1) * self.page_size
        end = start + self.page_size
        next_cursor = ByNumber(page + 1) if end < len(matching) else None
        return RecordPage(records=tuple(matching[start:end]), next_cursor=next_cursor)

    def create(self, record):
        self.calls.append(("create", record))
        self.records.append(
            DnsRecord(id=self._next_id, name=f"{record.name}.{self.zone}", type="TXT", content=record.content, ttl=record.ttl)
        )
        self._next_id += 1

    def update(self, record_id, record):
        self.calls.append(("update", record_id, record))
        self.records = [
            DnsRecord(id=r.id, name=f"{record.name}.{self.zone}", type="TXT", content=record.content, ttl=record.ttl)
            if r.id == record_id
            else r
            for r in self.records
        ]

    def delete(self, record_id):
        self.calls.append(("delete", record_id))
        self.records = [r for r in self.records if r.id != record_id]

    def mutations(self):
        return [c for c in self.calls if c[0] != "list_page"]

    def list_calls(self):
        return [c for c in self.calls if c[0] == "list_page"]


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def reconciler_config():
    return ReconcilerConfig(
        api_key="key",
        api_secret="secret",
        service_id=12345,
        domain="example.com",
    )
