from unittest.mock import MagicMock

import pytest

from themepreview.core.cache import (
    CacheBackend,
    MemoryCacheBackend,
    RenderCache,
    SqliteCacheBackend,
    cache_key,
    canonical_json,
    fnv1a_64,
    settings_fingerprint,
)
from themepreview.exceptions import CacheBackendError

from conftest import FakeClock


def _put(cache: RenderCache, key: str, component: str = "hero-banner", preset=None, ttl_minutes: int = 60):
    return cache.put(key, component, preset, html=f"<p>{key}</p>", css=".a{}", render_time_ms=12, ttl_minutes=ttl_minutes)


def test_fnv1a_64_known_vectors():
    assert fnv1a_64(b"") == 0xCBF29CE484222325
    assert fnv1a_64(b"a") == 0xAF63DC4C8601EC8C


def test_cache_key_shapes():
    assert cache_key("hero-banner") == "hero-banner"
    assert cache_key("hero-banner", "slate") == "hero-banner:slate"
    fingerprint = settings_fingerprint({"heading": "Hi"})
    assert len(fingerprint) == 16
    assert cache_key("hero-banner", "slate", {"heading": "Hi"}) == f"hero-banner:slate:{fingerprint}"
    assert cache_key("hero-banner", None, {"heading": "Hi"}) == f"hero-banner:{fingerprint}"


def test_empty_overrides_are_the_same_as_none():
    assert cache_key("hero-banner", "slate", {}) == cache_key("hero-banner", "slate", None)


def test_override_order_does_not_change_key():
    first = cache_key("hero-banner", None, {"heading": "Hi", "show_overlay": False, "nested": {"a": 1, "b": 2}})
    second = cache_key("hero-banner", None, {"nested": {"b": 2, "a": 1}, "show_overlay": False, "heading": "Hi"})
    assert first == second
    assert first != cache_key("hero-banner", None, {"heading": "Hello"})


def test_canonical_json_accepts_mixed_key_types():
    assert canonical_json({"b": [{2: "x"}], 1: "a"}) == '{"1":"a","b":[{"2":"x"}]}'
    assert cache_key("hero-banner", None, {1: "a"}) == cache_key("hero-banner", None, {"1": "a"})


def test_get_returns_stored_entry(memory_cache):
    _put(memory_cache, "hero-banner")
    entry = memory_cache.get("hero-banner")
    assert entry.html == "<p>hero-banner</p>"
    assert entry.render_time_ms == 12
    assert memory_cache.get("missing") is None


def test_expired_entries_are_never_returned(memory_cache, clock: FakeClock):
    _put(memory_cache, "hero-banner", ttl_minutes=60)
    clock.advance(minutes=59)
    assert memory_cache.get("hero-banner") is not None
    clock.advance(minutes=1)
    assert memory_cache.get("hero-banner") is None
    assert memory_cache.stats().expired == 1


def test_put_is_an_upsert(memory_cache):
    _put(memory_cache, "hero-banner")
    memory_cache.put("hero-banner", "hero-banner", None, html="<p>new</p>", css="", render_time_ms=3)
    assert memory_cache.get("hero-banner").html == "<p>new</p>"
    assert memory_cache.stats().total == 1


def test_invalidation_is_targeted(memory_cache):
    _put(memory_cache, "hero-banner", "hero-banner")
    _put(memory_cache, "hero-banner:slate", "hero-banner", "slate")
    _put(memory_cache, "site-footer:slate", "site-footer", "slate")
    _put(memory_cache, "site-footer", "site-footer")

    assert memory_cache.invalidate_by_component("hero-banner") == 2
    assert memory_cache.get("site-footer:slate") is not None
    assert memory_cache.get("site-footer") is not None

    assert memory_cache.invalidate_by_preset("slate") == 1
    assert memory_cache.get("site-footer:slate") is None
    assert memory_cache.get("site-footer") is not None


def test_sweep_removes_only_expired(memory_cache, clock: FakeClock):
    _put(memory_cache, "short", ttl_minutes=5)
    _put(memory_cache, "long", ttl_minutes=120)
    clock.advance(minutes=10)
    assert memory_cache.sweep_expired() == 1
    assert memory_cache.stats().total == 1
    assert memory_cache.get("long") is not None


def test_backend_failures_degrade_gracefully():
    backend = MagicMock(spec=CacheBackend)
    for name in ("get", "upsert", "delete_by_component", "delete_by_preset", "delete_expired", "stats"):
        getattr(backend, name).side_effect = CacheBackendError("disk on fire")
    cache = RenderCache(backend)

    assert cache.get("hero-banner") is None
    assert _put(cache, "hero-banner") is None
    assert cache.invalidate_by_component("hero-banner") == 0
    assert cache.invalidate_by_preset("slate") == 0
    assert cache.sweep_expired() == 0
    stats = cache.stats()
    assert (stats.total, stats.expired, stats.approx_size_kb) == (0, 0, 0)


def test_memory_backend_len():
    backend = MemoryCacheBackend()
    cache = RenderCache(backend)
    _put(cache, "a")
    _put(cache, "b")
    assert len(backend) == 2


class TestSqliteBackend:
    @pytest.fixture
    def sqlite_cache(self, tmp_path, clock):
        return RenderCache(SqliteCacheBackend(tmp_path / "cache" / "previews.db"), clock=clock)

    def test_round_trip_and_upsert(self, sqlite_cache, clock):
        _put(sqlite_cache, "hero-banner:slate", preset="slate")
        entry = sqlite_cache.get("hero-banner:slate")
        assert entry.component_slug == "hero-banner"
        assert entry.preset_slug == "slate"
        assert entry.css == ".a{}"
        assert entry.created_at == clock.now

        sqlite_cache.put("hero-banner:slate", "hero-banner", "slate", html="<p>v2</p>", css="", render_time_ms=1)
        assert sqlite_cache.get("hero-banner:slate").html == "<p>v2</p>"
        assert sqlite_cache.stats().total == 1

    def test_expiry_and_sweep(self, sqlite_cache, clock):
        _put(sqlite_cache, "short", ttl_minutes=1)
        _put(sqlite_cache, "long", ttl_minutes=60)
        clock.advance(minutes=2)
        assert sqlite_cache.get("short") is None
        assert sqlite_cache.stats().expired == 1
        assert sqlite_cache.sweep_expired() == 1
        assert sqlite_cache.get("long") is not None

    def test_targeted_invalidation(self, sqlite_cache):
        _put(sqlite_cache, "hero-banner", "hero-banner")
        _put(sqlite_cache, "hero-banner:slate", "hero-banner", "slate")
        _put(sqlite_cache, "site-footer:slate", "site-footer", "slate")
        assert sqlite_cache.invalidate_by_preset("slate") == 2
        assert sqlite_cache.invalidate_by_component("hero-banner") == 1
        assert sqlite_cache.stats().total == 0

    def test_entries_survive_a_new_backend_instance(self, tmp_path, clock):
        db_path = tmp_path / "shared.db"
        _put(RenderCache(SqliteCacheBackend(db_path), clock=clock), "hero-banner")
        assert RenderCache(SqliteCacheBackend(db_path), clock=clock).get("hero-banner") is not None

    def test_unusable_path_raises_backend_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        with pytest.raises(CacheBackendError):
            SqliteCacheBackend(blocker / "previews.db")
