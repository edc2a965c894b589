"""Durable key-value cache for resolved icons.

Providers that do expensive work (HTTP fetches, JSON collection parsing)
write their results through an IconCache so later lookups, in this
process or the next, skip the work.

Implementations:
    FileCache: one JSON file per key, sharded by key hash, TTL expiry on
        read, atomic writes (temp file + os.replace).
    NullCache: the same contract without persistence. Every read misses,
        every write "succeeds". Used when caching is disabled so callers
        never special-case it.

TTL semantics:
    ``None`` uses the cache's default TTL, ``0`` never expires, a negative
    value deletes the key immediately. ``datetime.timedelta`` is accepted
    wherever seconds are.

Thread Safety:
    FileCache holds no in-memory state besides its configuration. Writers
    never modify an entry in place, so concurrent readers (threads or
    processes) see either the old or the new file, never a partial one.
    There is no cross-process locking; racing writers both succeed and the
    last rename wins.

Example:
    >>> cache = FileCache("/tmp/colmena-cache", default_ttl=3600)
    >>> cache.set("greeting", "hello")
    True
    >>> cache.get("greeting")
    'hello'
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from colmena.errors import InvalidKeyError, StorageError
from colmena.icon import Icon
from colmena.utils.hashing import hash_str
from colmena.utils.logger import get_logger

logger = get_logger(__name__)

Ttl = int | timedelta | None

# Characters reserved in cache keys
RESERVED_KEY_CHARACTERS = frozenset("{}()/\\@:")

_CACHE_SUFFIX = ".cache"


@runtime_checkable
class IconCache(Protocol):
    """Protocol for icon caches.

    Batch operations are defined in terms of the single-item ones and are
    not atomic across the batch.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default on a miss."""
        ...

    def set(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        """Store a value; return True on success."""
        ...

    def delete(self, key: str) -> bool:
        """Remove a key; deleting a missing key succeeds."""
        ...

    def has(self, key: str) -> bool:
        """Check for a live (unexpired) entry."""
        ...

    def clear(self) -> bool:
        """Remove every entry."""
        ...

    def get_many(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Return a dict of key -> value (default for misses)."""
        ...

    def set_many(self, values: Mapping[str, Any], ttl: Ttl = None) -> bool:
        """Store several values; True only if every write succeeded."""
        ...

    def delete_many(self, keys: Iterable[str]) -> bool:
        """Remove several keys; True only if every delete succeeded."""
        ...


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Entry count and total size on disk."""

    files: int
    size: int


class FileCache:
    """Filesystem cache with TTL expiry and atomic writes.

    Layout: ``<cache_dir>/<sha256[:2]>/<sha256>.cache``, where the hash is
    of the key. Each file holds ``{"value", "expires_at", "created_at"}``
    as JSON; Icon values are tagged so they round-trip exactly.

    Thread Safety:
        See module docstring.
    """

    __slots__ = ("_cache_dir", "_clock", "_default_ttl", "_dir_mode", "_file_mode")

    def __init__(
        self,
        cache_dir: str | Path,
        *,
        default_ttl: int | timedelta = 0,
        dir_mode: int = 0o755,
        file_mode: int = 0o644,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache, creating its directory if needed.

        Args:
            cache_dir: Directory owned by this cache
            default_ttl: TTL applied when ``set`` is called with ``ttl=None``
                (``0`` = never expire)
            dir_mode: Permission bits for created directories
            file_mode: Permission bits for entry files
            clock: Time source returning epoch seconds (injectable for tests)

        Raises:
            StorageError: If the directory cannot be created
        """
        self._cache_dir = Path(cache_dir)
        self._default_ttl = default_ttl
        self._dir_mode = dir_mode
        self._file_mode = file_mode
        self._clock = clock
        self._ensure_directory(self._cache_dir)

    @property
    def cache_dir(self) -> Path:
        """Directory holding the cache entries."""
        return self._cache_dir

    @property
    def default_ttl(self) -> int | timedelta:
        """TTL used when none is given."""
        return self._default_ttl

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default if missing or expired."""
        entry = self._read_live(key)
        if entry is None:
            return default
        return _decode_value(entry["value"])

    def set(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        """Store a value.

        Args:
            key: Cache key (no reserved characters)
            value: JSON-compatible value, Icon, or containers of those
            ttl: Seconds or timedelta; None = default, 0 = never,
                negative = delete the key instead

        Returns:
            True on success

        Raises:
            InvalidKeyError: If the key is empty or has reserved characters
            StorageError: If the entry could not be written
        """
        self._validate_key(key)

        seconds = self._ttl_seconds(ttl)
        if seconds < 0:
            return self.delete(key)

        now = self._clock()
        entry = {
            "value": _encode_value(value),
            "expires_at": now + seconds if seconds else None,
            "created_at": now,
        }
        self._write_atomic(self._path_for(key), json.dumps(entry, separators=(",", ":")))
        return True

    def delete(self, key: str) -> bool:
        """Remove a key. Missing keys count as success."""
        self._validate_key(key)
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError:
            logger.debug("Failed to delete cache entry %r", key, exc_info=True)
            return False
        return True

    def has(self, key: str) -> bool:
        """Check for a live entry, evicting it if expired."""
        return self._read_live(key) is not None

    def clear(self) -> bool:
        """Remove every entry, keeping the cache directory itself."""
        if not self._cache_dir.is_dir():
            return True

        success = True
        for child in self._cache_dir.iterdir():
            try:
                if child.is_dir():
                    shutil.rmtree(child)
                else:
                    child.unlink()
            except OSError:
                logger.debug("Failed to remove %s", child, exc_info=True)
                success = False
        return success

    def get_many(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Return key -> value for every key (default for misses)."""
        return {key: self.get(key, default) for key in keys}

    def set_many(self, values: Mapping[str, Any], ttl: Ttl = None) -> bool:
        """Store several values. Not atomic across the batch."""
        success = True
        for key, value in values.items():
            if not self.set(str(key), value, ttl):
                success = False
        return success

    def delete_many(self, keys: Iterable[str]) -> bool:
        """Remove several keys. Not atomic across the batch."""
        success = True
        for key in keys:
            if not self.delete(key):
                success = False
        return success

    def stats(self) -> CacheStats:
        """Count entry files and their total size."""
        files = 0
        size = 0
        if self._cache_dir.is_dir():
            for path in self._cache_dir.rglob(f"*{_CACHE_SUFFIX}"):
                if path.is_file():
                    files += 1
                    size += path.stat().st_size
        return CacheStats(files=files, size=size)

    # =========================================================================
    # Internals
    # =========================================================================

    def _path_for(self, key: str) -> Path:
        digest = hash_str(key)
        return self._cache_dir / digest[:2] / f"{digest}{_CACHE_SUFFIX}"

    @staticmethod
    def _validate_key(key: str) -> None:
        if not isinstance(key, str) or key == "":
            raise InvalidKeyError(str(key), "Cache key cannot be empty")
        if any(ch in RESERVED_KEY_CHARACTERS for ch in key):
            raise InvalidKeyError(key)

    def _ttl_seconds(self, ttl: Ttl) -> float:
        if ttl is None:
            ttl = self._default_ttl
        if isinstance(ttl, timedelta):
            return ttl.total_seconds()
        return float(ttl)

    def _read_live(self, key: str) -> dict[str, Any] | None:
        """Read an entry, deleting it and returning None when expired."""
        self._validate_key(key)
        path = self._path_for(key)

        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.debug("Unreadable cache entry for %r", key, exc_info=True)
            return None

        try:
            entry = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Corrupt cache entry for %r", key)
            return None

        if not isinstance(entry, dict) or "value" not in entry:
            return None

        expires_at = entry.get("expires_at")
        if expires_at is not None and expires_at < self._clock():
            self.delete(key)
            return None

        return entry

    def _write_atomic(self, path: Path, payload: str) -> None:
        """Write payload to a temp file in the target directory, then rename."""
        self._ensure_directory(path.parent)

        try:
            fd, temp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.stem[:16]}.", suffix=".tmp"
            )
        except OSError as e:
            msg = f"Failed to create temporary cache file in {path.parent}: {e}"
            raise StorageError(msg) from e

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.chmod(temp_path, self._file_mode)
            os.replace(temp_path, path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            msg = f"Failed to write cache entry {path}: {e}"
            raise StorageError(msg) from e

    def _ensure_directory(self, directory: Path) -> None:
        if directory.is_dir():
            return
        try:
            directory.mkdir(mode=self._dir_mode, parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create cache directory: {directory}"
            raise StorageError(msg) from e


class NullCache:
    """Cache that stores nothing.

    Every read misses and every write reports success without effect.
    """

    __slots__ = ()

    def get(self, key: str, default: Any = None) -> Any:
        return default

    def set(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        return True

    def delete(self, key: str) -> bool:
        return True

    def has(self, key: str) -> bool:
        return False

    def clear(self) -> bool:
        return True

    def get_many(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        return dict.fromkeys(keys, default)

    def set_many(self, values: Mapping[str, Any], ttl: Ttl = None) -> bool:
        return True

    def delete_many(self, keys: Iterable[str]) -> bool:
        return True


# =============================================================================
# Value encoding
# =============================================================================


def _encode_value(value: Any) -> Any:
    """Convert a value to JSON-compatible form, tagging Icons."""
    if isinstance(value, Icon):
        return {"_type": "Icon", **value.to_dict()}
    if isinstance(value, dict):
        return {"_type": "dict", "items": {str(k): _encode_value(v) for k, v in value.items()}}
    if isinstance(value, list | tuple):
        return [_encode_value(v) for v in value]
    return value


def _decode_value(value: Any) -> Any:
    """Inverse of _encode_value."""
    if isinstance(value, dict):
        kind = value.get("_type")
        if kind == "Icon":
            return Icon.from_dict(value)
        if kind == "dict":
            return {k: _decode_value(v) for k, v in value.get("items", {}).items()}
        return value
    if isinstance(value, list):
        return [_decode_value(v) for v in value]
    return value


__all__ = [
    "RESERVED_KEY_CHARACTERS",
    "CacheStats",
    "FileCache",
    "IconCache",
    "NullCache",
    "Ttl",
]
