"""Tests for PendingSignupStore (company name held between signup steps)."""

import pytest

from tenantdesk.application.services.pending_signup_store import PendingSignupStore
from tenantdesk.domain.exceptions import CacheUnavailableException
from tenantdesk.infrastructure.cache.keys import pending_signup_key
from tests.helpers import FakeCache


async def test_put_normalizes_email_and_sets_ttl(fake_cache: FakeCache) -> None:
    store = PendingSignupStore(fake_cache, ttl_seconds=300)
    await store.put("  Jane@Example.COM ", {"company_name": "Acme"})
    key = pending_signup_key("jane@example.com")
    assert fake_cache.data[key] == {"company_name": "Acme"}
    assert fake_cache.ttls[key] == 300


async def test_get_leaves_entry_in_place(fake_cache: FakeCache) -> None:
    store = PendingSignupStore(fake_cache)
    await store.put("jane@example.com", {"company_name": "Acme"})
    assert await store.get("JANE@example.com") == {"company_name": "Acme"}
    assert await store.get("jane@example.com") == {"company_name": "Acme"}


async def test_put_replaces_previous_entry(fake_cache: FakeCache) -> None:
    store = PendingSignupStore(fake_cache)
    await store.put("jane@example.com", {"company_name": "Old"})
    await store.put("jane@example.com", {"company_name": "New"})
    assert await store.get("jane@example.com") == {"company_name": "New"}


async def test_discard(fake_cache: FakeCache) -> None:
    store = PendingSignupStore(fake_cache)
    await store.put("jane@example.com", {"company_name": "Acme"})
    await store.discard("jane@example.com")
    assert fake_cache.data == {}


async def test_put_without_cache_raises() -> None:
    with pytest.raises(CacheUnavailableException):
        await PendingSignupStore(None).put("jane@example.com", {"company_name": "Acme"})


async def test_put_when_cache_down_raises() -> None:
    with pytest.raises(CacheUnavailableException):
        await PendingSignupStore(FakeCache(available=False)).put("a@b.co", {})


async def test_reads_without_cache_are_empty() -> None:
    store = PendingSignupStore(None)
    assert await store.get("jane@example.com") is None
    await store.discard("jane@example.com")
