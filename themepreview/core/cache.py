# themepreview/core/cache.py
"""
Render cache: content-addressed storage of rendered previews with TTL expiry.

Cache keys are `<component>[:<preset>][:<fingerprint>]`, where the fingerprint
is a 64-bit FNV-1a hash of the canonical JSON encoding of the setting
overrides (sorted keys, compact separators). Two override maps with the same
entries always share a key; with 2**64 possible fingerprints a collision
between distinct override maps of one component is possible but improbable,
and it would serve one map's render for the other until the entry expires.

Every RenderCache operation is best-effort: backend failures are logged and
degrade to a miss, a skipped write, or a zero count.
"""
import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import structlog

from themepreview.core.models import CacheEntry, CacheStats
from themepreview.exceptions import CacheBackendError

log = structlog.get_logger(__name__)

DEFAULT_TTL_MINUTES = 60
KEY_SEPARATOR = ":"

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
_FNV64_MASK = 0xFFFFFFFFFFFFFFFF


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fnv1a_64(data: bytes) -> int:
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & _FNV64_MASK
    return h


def _string_keys(value: Any) -> Any:
    # json.dumps cannot sort mixed-type keys
    if isinstance(value, Mapping):
        return {str(k): _string_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(v) for v in value]
    return value


def canonical_json(value: Any) -> str:
    return json.dumps(_string_keys(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def settings_fingerprint(settings: Mapping[str, Any]) -> str:
    """16 hex digit FNV-1a fingerprint of the canonical JSON form of `settings`."""
    return f"{fnv1a_64(canonical_json(settings).encode('utf-8')):016x}"


def cache_key(component_slug: str, preset_slug: Optional[str] = None,
              setting_overrides: Optional[Mapping[str, Any]] = None) -> str:
    parts = [component_slug]
    if preset_slug:
        parts.append(preset_slug)
    if setting_overrides:
        parts.append(settings_fingerprint(setting_overrides))
    return KEY_SEPARATOR.join(parts)


class CacheBackend(ABC):
    """Key-addressed storage for cache entries. Implementations raise CacheBackendError on failure."""

    @abstractmethod
    def get(self, key: str) -> Optional[CacheEntry]: ...

    @abstractmethod
    def upsert(self, entry: CacheEntry) -> None: ...

    @abstractmethod
    def delete_by_component(self, component_slug: str) -> int: ...

    @abstractmethod
    def delete_by_preset(self, preset_slug: str) -> int: ...

    @abstractmethod
    def delete_expired(self, now: datetime) -> int: ...

    @abstractmethod
    def stats(self, now: datetime) -> Tuple[int, int, int]:
        """Returns (total entries, expired entries, stored bytes)."""


class MemoryCacheBackend(CacheBackend):
    # process-local store; point operations are serialized by one lock.
    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def upsert(self, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[entry.key] = entry

    def _delete_where(self, predicate: Callable[[CacheEntry], bool]) -> int:
        with self._lock:
            doomed = [k for k, e in self._entries.items() if predicate(e)]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def delete_by_component(self, component_slug: str) -> int:
        return self._delete_where(lambda e: e.component_slug == component_slug)

    def delete_by_preset(self, preset_slug: str) -> int:
        return self._delete_where(lambda e: e.preset_slug == preset_slug)

    def delete_expired(self, now: datetime) -> int:
        return self._delete_where(lambda e: e.is_expired(now))

    def stats(self, now: datetime) -> Tuple[int, int, int]:
        with self._lock:
            entries = list(self._entries.values())
        expired = sum(1 for e in entries if e.is_expired(now))
        return len(entries), expired, sum(e.size_bytes for e in entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS rendered_previews (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    cache_key TEXT UNIQUE NOT NULL,
    section_slug TEXT NOT NULL,
    preset_slug TEXT,
    html TEXT NOT NULL,
    css TEXT,
    render_time_ms INTEGER,
    created_at TEXT NOT NULL,
    expires_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_previews_section ON rendered_previews(section_slug);
CREATE INDEX IF NOT EXISTS idx_previews_preset ON rendered_previews(preset_slug);
CREATE INDEX IF NOT EXISTS idx_previews_expires ON rendered_previews(expires_at);
"""


def _to_db_time(value: datetime) -> str:
    # fixed-width UTC ISO strings compare correctly as text
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _from_db_time(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%fZ").replace(tzinfo=timezone.utc)


class SqliteCacheBackend(CacheBackend):
    """SQLite-backed cache shared across processes; one connection per operation."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
            try:
                conn.executescript(_SCHEMA_SQL)
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise CacheBackendError(f"Could not initialize cache database {self.db_path}: {e}") from e
        log.debug("sqlite_cache_initialized", path=str(self.db_path))

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=30.0)

    def _execute(self, sql: str, params: Tuple[Any, ...] = ()) -> int:
        """Runs one write statement in its own transaction; returns the affected row count."""
        conn = self._connect()
        try:
            with conn:
                return conn.execute(sql, params).rowcount
        except sqlite3.Error as e:
            raise CacheBackendError(f"Cache query failed: {e}") from e
        finally:
            conn.close()

    def _fetchone(self, sql: str, params: Tuple[Any, ...] = ()) -> Optional[Tuple[Any, ...]]:
        conn = self._connect()
        try:
            return conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise CacheBackendError(f"Cache query failed: {e}") from e
        finally:
            conn.close()

    def get(self, key: str) -> Optional[CacheEntry]:
        row = self._fetchone(
            "SELECT cache_key, section_slug, preset_slug, html, css, render_time_ms, created_at, expires_at "
            "FROM rendered_previews WHERE cache_key = ?",
            (key,),
        )
        if row is None:
            return None
        return CacheEntry(
            key=row[0],
            component_slug=row[1],
            preset_slug=row[2],
            html=row[3],
            css=row[4] or "",
            render_time_ms=row[5] or 0,
            created_at=_from_db_time(row[6]),
            expires_at=_from_db_time(row[7]),
        )

    def upsert(self, entry: CacheEntry) -> None:
        self._execute(
            "INSERT OR REPLACE INTO rendered_previews "
            "(cache_key, section_slug, preset_slug, html, css, render_time_ms, created_at, expires_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                entry.key,
                entry.component_slug,
                entry.preset_slug,
                entry.html,
                entry.css,
                entry.render_time_ms,
                _to_db_time(entry.created_at),
                _to_db_time(entry.expires_at),
            ),
        )

    def delete_by_component(self, component_slug: str) -> int:
        return self._execute("DELETE FROM rendered_previews WHERE section_slug = ?", (component_slug,))

    def delete_by_preset(self, preset_slug: str) -> int:
        return self._execute("DELETE FROM rendered_previews WHERE preset_slug = ?", (preset_slug,))

    def delete_expired(self, now: datetime) -> int:
        return self._execute("DELETE FROM rendered_previews WHERE expires_at <= ?", (_to_db_time(now),))

    def stats(self, now: datetime) -> Tuple[int, int, int]:
        row = self._fetchone(
            "SELECT COUNT(*), "
            "COALESCE(SUM(CASE WHEN expires_at <= ? THEN 1 ELSE 0 END), 0), "
            "COALESCE(SUM(LENGTH(html) + COALESCE(LENGTH(css), 0)), 0) "
            "FROM rendered_previews",
            (_to_db_time(now),),
        )
        if row is None:
            return 0, 0, 0
        return int(row[0]), int(row[1]), int(row[2])


class RenderCache:
    """Best-effort facade over a CacheBackend; expired entries are never served."""

    def __init__(self, backend: Optional[CacheBackend] = None, clock: Callable[[], datetime] = utc_now):
        self.backend = backend if backend is not None else MemoryCacheBackend()
        self.clock = clock

    def get(self, key: str) -> Optional[CacheEntry]:
        try:
            entry = self.backend.get(key)
        except Exception as e:
            log.warning("cache_backend_get_failed", key=key, error=str(e))
            return None
        if entry is None:
            log.debug("render_cache_miss", key=key)
            return None
        if entry.is_expired(self.clock()):
            log.debug("render_cache_entry_expired", key=key, expires_at=entry.expires_at.isoformat())
            return None
        log.debug("render_cache_hit", key=key)
        return entry

    def put(self, key: str, component_slug: str, preset_slug: Optional[str], *, html: str, css: str,
            render_time_ms: int, ttl_minutes: int = DEFAULT_TTL_MINUTES) -> Optional[CacheEntry]:
        created_at = self.clock()
        entry = CacheEntry(
            key=key,
            component_slug=component_slug,
            preset_slug=preset_slug,
            html=html,
            css=css,
            render_time_ms=render_time_ms,
            created_at=created_at,
            expires_at=created_at + timedelta(minutes=ttl_minutes),
        )
        try:
            self.backend.upsert(entry)
        except Exception as e:
            log.warning("cache_backend_put_failed", key=key, error=str(e))
            return None
        log.debug("render_cache_stored", key=key, ttl_minutes=ttl_minutes)
        return entry

    def invalidate_by_component(self, component_slug: str) -> int:
        try:
            removed = self.backend.delete_by_component(component_slug)
        except Exception as e:
            log.warning("cache_invalidation_failed", component=component_slug, error=str(e))
            return 0
        log.info("cache_invalidated_for_component", component=component_slug, removed=removed)
        return removed

    def invalidate_by_preset(self, preset_slug: str) -> int:
        try:
            removed = self.backend.delete_by_preset(preset_slug)
        except Exception as e:
            log.warning("cache_invalidation_failed", preset=preset_slug, error=str(e))
            return 0
        log.info("cache_invalidated_for_preset", preset=preset_slug, removed=removed)
        return removed

    def sweep_expired(self) -> int:
        try:
            removed = self.backend.delete_expired(self.clock())
        except Exception as e:
            log.warning("cache_sweep_failed", error=str(e))
            return 0
        log.info("cache_expired_entries_swept", removed=removed)
        return removed

    def stats(self) -> CacheStats:
        try:
            total, expired, size_bytes = self.backend.stats(self.clock())
        except Exception as e:
            log.warning("cache_stats_failed", error=str(e))
            return CacheStats()
        return CacheStats(total=total, expired=expired, approx_size_kb=round(size_bytes / 1024))
