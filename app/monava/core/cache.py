"""TTL cache for detection and enumeration results.

Every entry carries an absolute expiry computed at write time. Reads expire
entries lazily, and writes trigger a periodic sweep once the sweep interval
has elapsed (there is no background thread). Entries written with a
watched file are also dropped once that file's modification time moves
past the one recorded at write.

Mutations hold a per-key advisory lock. A writer that finds the key locked
retries a bounded number of times and then reports failure instead of
blocking. Sweeps take a global lock that waits for all per-key locks to
drain first.
"""

import functools
import json
import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300
DEFAULT_SWEEP_INTERVAL = 60.0
NAMESPACE_SEPARATOR = ":"

T = TypeVar("T")

_MISSING = object()


class CacheLockTimeout(Exception):
    """Raised internally when a cache lock cannot be acquired in time."""


@dataclass(slots=True)
class CacheEntry:
    """A stored value plus its bookkeeping.

    Attributes:
        value: Cached value.
        created_at: Write time (seconds since the epoch).
        expires_at: Absolute expiry time.
        access_count: Number of successful reads.
        file_path: Watched file for mtime invalidation, if any.
        file_mtime: Modification time of file_path recorded at write.
    """

    value: Any
    created_at: float
    expires_at: float
    access_count: int = 0
    file_path: Path | None = None
    file_mtime: float | None = None

    def is_expired(self, now: float) -> bool:
        """Check if the entry has outlived its TTL."""
        return now > self.expires_at

    def is_stale(self, file_path: Path | None = None) -> bool:
        """Check if the watched file changed since the entry was written.

        Args:
            file_path: File to compare; defaults to the one recorded at write.

        Returns:
            True if the file's current mtime is newer than the recorded one.
        """
        watched = file_path or self.file_path
        if watched is None or self.file_mtime is None:
            return False
        return get_mtime(watched) > self.file_mtime


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of cache occupancy.

    Attributes:
        total_entries: Entries currently stored (including expired ones).
        expired_entries: Stored entries past their expiry.
        active_entries: Stored entries still valid.
        total_access: Sum of access counts across stored entries.
        enabled: Whether the cache accepts reads and writes.
        max_entries: Configured size ceiling, if any.
    """

    total_entries: int
    expired_entries: int
    active_entries: int
    total_access: int
    enabled: bool
    max_entries: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_entries": self.total_entries,
            "expired_entries": self.expired_entries,
            "active_entries": self.active_entries,
            "total_access": self.total_access,
            "enabled": self.enabled,
            "max_entries": self.max_entries,
        }


def get_mtime(path: Path) -> float:
    """Return a file's modification time, or 0.0 if it cannot be read."""
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def generate_key(*parts: object) -> str:
    """Build a cache key from several values.

    Strings are used as-is; anything else is JSON-encoded.
    """
    encoded: list[str] = []
    for part in parts:
        if isinstance(part, str):
            encoded.append(part)
        else:
            encoded.append(json.dumps(part, sort_keys=True, default=str))
    return "|".join(encoded)


class Cache:
    """Thread-safe TTL cache with namespaces and file invalidation.

    Example:
        >>> cache = Cache(ttl=60)
        >>> cache.set("detection:/repo", result)
        True
        >>> cache.get("detection:/repo")
        DetectionResult(...)
    """

    LOCK_RETRIES = 3
    LOCK_RETRY_DELAY = 0.001
    DRAIN_WAITS = 100

    def __init__(
        self,
        enabled: bool = True,
        ttl: float = DEFAULT_TTL,
        max_entries: int | None = None,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the cache.

        Args:
            enabled: When False, writes fail and reads always miss.
            ttl: Default time-to-live in seconds.
            max_entries: Optional size ceiling; the oldest-written entries
                are evicted once it is exceeded.
            sweep_interval: Minimum seconds between expiry sweeps.
            clock: Time source (seconds since the epoch).
            sleep: Delay function used between lock retries.
        """
        if ttl <= 0:
            msg = f"Default TTL must be positive, got {ttl}"
            raise ValueError(msg)
        if max_entries is not None and max_entries < 1:
            msg = f"max_entries must be at least 1, got {max_entries}"
            raise ValueError(msg)

        self._enabled = enabled
        self._ttl = ttl
        self._max_entries = max_entries
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._sleep = sleep

        self._entries: dict[str, CacheEntry] = {}
        self._store_lock = threading.RLock()
        self._guard = threading.Lock()
        self._held: set[str] = set()
        self._sweeping = False
        self._last_sweep = clock()

    @property
    def enabled(self) -> bool:
        """Whether the cache accepts reads and writes."""
        return self._enabled

    @property
    def ttl(self) -> float:
        """Default time-to-live in seconds."""
        return self._ttl

    @property
    def max_entries(self) -> int | None:
        """Configured size ceiling."""
        return self._max_entries

    # -------------------------------------------------------------------------
    # Locking
    # -------------------------------------------------------------------------

    @contextmanager
    def _locked(self, key: str) -> Iterator[None]:
        """Hold the advisory lock for one key.

        Raises:
            CacheLockTimeout: If the key (or a sweep) stays locked through
                all retries.
        """
        for attempt in range(self.LOCK_RETRIES):
            with self._guard:
                if key not in self._held and not self._sweeping:
                    self._held.add(key)
                    break
            if attempt < self.LOCK_RETRIES - 1:
                self._sleep(self.LOCK_RETRY_DELAY)
        else:
            msg = f"Cache operation timed out after {self.LOCK_RETRIES} retries"
            raise CacheLockTimeout(msg)

        try:
            yield
        finally:
            with self._guard:
                self._held.discard(key)

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold the global lock once all per-key locks have drained.

        Raises:
            CacheLockTimeout: If another sweep is running or key locks do
                not drain in time.
        """
        with self._guard:
            if self._sweeping:
                msg = "Global cache operation in progress"
                raise CacheLockTimeout(msg)
            self._sweeping = True

        try:
            for _ in range(self.DRAIN_WAITS):
                with self._guard:
                    if not self._held:
                        break
                self._sleep(self.LOCK_RETRY_DELAY)
            else:
                msg = "Timed out waiting for cache key locks to drain"
                raise CacheLockTimeout(msg)
            yield
        finally:
            with self._guard:
                self._sweeping = False

    # -------------------------------------------------------------------------
    # Core operations
    # -------------------------------------------------------------------------

    def _resolve_ttl(self, ttl: float | None) -> float | None:
        value = self._ttl if ttl is None else ttl
        if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
            return None
        return value

    def _write(self, key: str, entry: CacheEntry) -> None:
        with self._store_lock:
            # Re-inserting moves the key to the newest position
            self._entries.pop(key, None)
            self._entries[key] = entry
            self._evict_overflow()

    def _evict_overflow(self) -> None:
        if self._max_entries is None:
            return
        while len(self._entries) > self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("Evicted oldest cache entry %s", oldest)

    def _store(self, key: str, value: Any, ttl: float | None, file_path: Path | None) -> bool:
        if not self._enabled:
            logger.debug("Cache disabled; not storing %s", key)
            return False

        resolved_ttl = self._resolve_ttl(ttl)
        if resolved_ttl is None:
            logger.warning("Invalid TTL value %r for cache key %s", ttl, key)
            return False

        self._maybe_sweep()

        now = self._clock()
        entry = CacheEntry(
            value=value,
            created_at=now,
            expires_at=now + resolved_ttl,
            file_path=file_path,
            file_mtime=get_mtime(file_path) if file_path is not None else None,
        )

        try:
            with self._locked(key):
                self._write(key, entry)
        except CacheLockTimeout as e:
            logger.warning("Failed to store cache key %s: %s", key, e)
            return False

        return True

    def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Store a value.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time-to-live in seconds; defaults to the cache TTL.

        Returns:
            True if stored. False if the cache is disabled, the TTL is
            invalid, or the key stayed locked by another writer.
        """
        return self._store(key, value, ttl, None)

    def set_with_file(
        self,
        key: str,
        value: Any,
        file_path: Path,
        ttl: float | None = None,
    ) -> bool:
        """Store a value that is invalidated when a file changes.

        Args:
            key: Cache key.
            value: Value to store.
            file_path: File whose modification time is recorded now.
            ttl: Time-to-live in seconds; defaults to the cache TTL.

        Returns:
            True if stored, False otherwise (see :meth:`set`).
        """
        return self._store(key, value, ttl, file_path)

    def _read(self, key: str, default: Any, file_path: Path | None, check_file: bool) -> Any:
        if not self._enabled:
            return default

        try:
            with self._locked(key):
                with self._store_lock:
                    entry = self._entries.get(key)
                    if entry is None:
                        return default

                    if check_file and entry.file_path is not None and entry.is_stale(file_path):
                        del self._entries[key]
                        logger.debug("Cache entry %s invalidated by file change", key)
                        return default

                    if entry.is_expired(self._clock()):
                        del self._entries[key]
                        return default

                    entry.access_count += 1
                    return entry.value
        except CacheLockTimeout as e:
            logger.debug("Cache read of %s skipped: %s", key, e)
            return default

    def get(self, key: str, default: Any = None) -> Any:
        """Return a cached value, expiring it lazily.

        Args:
            key: Cache key.
            default: Returned when the key is absent or expired.

        Returns:
            The cached value or default.
        """
        return self._read(key, default, None, check_file=False)

    def get_with_file(self, key: str, file_path: Path | None = None, default: Any = None) -> Any:
        """Return a cached value unless its watched file has changed.

        Args:
            key: Cache key.
            file_path: File to compare; defaults to the one given at write.
            default: Returned when the key is absent, expired or stale.

        Returns:
            The cached value or default.
        """
        return self._read(key, default, file_path, check_file=True)

    def has(self, key: str) -> bool:
        """Check whether a non-expired value is stored for a key.

        Unlike :meth:`get`, this does not count as an access.
        """
        if not self._enabled:
            return False
        with self._store_lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def delete(self, key: str) -> bool:
        """Remove an entry.

        Returns:
            True if an entry was removed, False if absent or locked.
        """
        try:
            with self._locked(key), self._store_lock:
                return self._entries.pop(key, None) is not None
        except CacheLockTimeout as e:
            logger.warning("Failed to delete cache key %s: %s", key, e)
            return False

    def keys(self) -> list[str]:
        """Return a snapshot of the stored keys, oldest-written first."""
        with self._store_lock:
            return list(self._entries)

    def clear(self) -> int:
        """Remove every entry under the global lock.

        Returns:
            Number of entries removed (0 if key locks did not drain).
        """
        try:
            with self._exclusive(), self._store_lock:
                count = len(self._entries)
                self._entries.clear()
        except CacheLockTimeout as e:
            logger.warning("Cache clear skipped: %s", e)
            return 0
        return count

    def cleanup_expired(self) -> int:
        """Sweep all expired entries under the global lock.

        Returns:
            Number of entries removed (0 if the sweep could not run).
        """
        try:
            with self._exclusive(), self._store_lock:
                now = self._clock()
                expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
                for key in expired:
                    del self._entries[key]
        except CacheLockTimeout as e:
            logger.debug("Cache sweep skipped: %s", e)
            return 0

        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def _maybe_sweep(self) -> None:
        now = self._clock()
        if now - self._last_sweep < self._sweep_interval:
            return
        self._last_sweep = now
        self.cleanup_expired()

    def stats(self) -> CacheStats:
        """Return occupancy statistics."""
        now = self._clock()
        with self._store_lock:
            entries = list(self._entries.values())

        expired = sum(1 for entry in entries if entry.is_expired(now))
        return CacheStats(
            total_entries=len(entries),
            expired_entries=expired,
            active_entries=len(entries) - expired,
            total_access=sum(entry.access_count for entry in entries),
            enabled=self._enabled,
            max_entries=self._max_entries,
        )

    def namespace(self, name: str) -> "CacheNamespace":
        """Return an accessor whose keys are prefixed with 'name:'."""
        return CacheNamespace(self, name)

    def memoize(
        self,
        ttl: float | None = None,
        key_fn: Callable[..., str] | None = None,
    ) -> Callable[[Callable[..., T]], Callable[..., T]]:
        """Decorate a function so its results are cached.

        Args:
            ttl: Time-to-live for cached results.
            key_fn: Builds the key from the call arguments; defaults to
                the function's qualified name plus the arguments.

        Returns:
            Decorator for the function.
        """

        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> T:
                if key_fn is not None:
                    key = key_fn(*args, **kwargs)
                else:
                    key = generate_key(func.__qualname__, *args, sorted(kwargs.items()))

                cached = self.get(key, _MISSING)
                if cached is not _MISSING:
                    return cached

                result = func(*args, **kwargs)
                self.set(key, result, ttl)
                return result

            return wrapper

        return decorator


class CacheNamespace:
    """Key-prefixing view over a :class:`Cache`.

    ``cache.namespace("ns").get("k")`` is ``cache.get("ns:k")``.
    """

    def __init__(self, cache: Cache, name: str) -> None:
        if not name:
            msg = "Namespace name cannot be empty"
            raise ValueError(msg)
        self._cache = cache
        self._prefix = f"{name}{NAMESPACE_SEPARATOR}"
        self.name = name

    def key(self, key: str) -> str:
        """Return the fully-qualified key for a namespaced key."""
        return f"{self._prefix}{key}"

    def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Store a value under the namespace."""
        return self._cache.set(self.key(key), value, ttl)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a value stored under the namespace."""
        return self._cache.get(self.key(key), default)

    def delete(self, key: str) -> bool:
        """Remove a value stored under the namespace."""
        return self._cache.delete(self.key(key))

    def has(self, key: str) -> bool:
        """Check whether a value is stored under the namespace."""
        return self._cache.has(self.key(key))

    def set_with_file(
        self,
        key: str,
        value: Any,
        file_path: Path,
        ttl: float | None = None,
    ) -> bool:
        """Store a file-invalidated value under the namespace."""
        return self._cache.set_with_file(self.key(key), value, file_path, ttl)

    def get_with_file(self, key: str, file_path: Path | None = None, default: Any = None) -> Any:
        """Return a file-invalidated value stored under the namespace."""
        return self._cache.get_with_file(self.key(key), file_path, default)

    def clear(self) -> int:
        """Remove every entry sharing this namespace's prefix.

        Returns:
            Number of entries removed.
        """
        removed = 0
        for key in self._cache.keys():
            if key.startswith(self._prefix) and self._cache.delete(key):
                removed += 1
        return removed
