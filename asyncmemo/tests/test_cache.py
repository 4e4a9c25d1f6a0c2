import asyncio
from unittest.mock import MagicMock

import pytest
from asyncmemo.cache import Cache, CacheEntry


@pytest.fixture
def cache():
    return Cache()


@pytest.fixture
def entry():
    return CacheEntry(
        outcome=MagicMock(spec=asyncio.Future),
        expiry_timer=MagicMock(spec=asyncio.TimerHandle),
        prefetch_timer=MagicMock(spec=asyncio.TimerHandle),
    )


def test_cache_set_and_get(cache, entry):
    cache.set("key", entry)
    assert cache.get("key") is entry
    assert cache.holds("key", entry)


def test_cache_get_missing(cache):
    assert cache.get("key") is None


def test_cache_holds_exact_entry(cache, entry):
    cache.set("key", entry)
    assert cache.holds("key", entry)
    assert not cache.holds("key", CacheEntry(outcome=MagicMock()))
    assert not cache.holds("other", entry)


def test_cache_delete_cancels_timers(cache, entry):
    expiry, prefetch = entry.expiry_timer, entry.prefetch_timer
    cache.set("key", entry)
    assert cache.delete("key")
    expiry.cancel.assert_called_once()
    prefetch.cancel.assert_called_once()
    assert entry.expiry_timer is None
    assert entry.prefetch_timer is None
    assert cache.get("key") is None


def test_cache_delete_missing(cache):
    assert not cache.delete("key")


def test_cache_override_cancels_previous(cache, entry):
    expiry = entry.expiry_timer
    cache.set("key", entry)
    replacement = CacheEntry(outcome=MagicMock())
    cache.set("key", replacement)
    expiry.cancel.assert_called_once()
    assert cache.get("key") is replacement


def test_cache_clear(cache, entry):
    expiry = entry.expiry_timer
    cache.set("a", entry)
    cache.set("b", CacheEntry(outcome=MagicMock()))
    assert cache.clear() == 2
    assert cache.get("a") is None
    assert cache.get("b") is None
    expiry.cancel.assert_called_once()
    assert cache.clear() == 0
