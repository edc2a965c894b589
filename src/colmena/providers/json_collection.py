"""JSON collection provider: a bundled Iconify icon-set file.

Reads an Iconify collection document (``{"prefix", "icons", "aliases",
"width", "height"}``) from disk on first use. Nothing is read at
construction time, so registering dozens of collections is free until an
icon is actually requested.

Aliases:
    An alias entry names a ``parent`` (an icon or another alias) and may
    override ``body``, ``width``, ``height``, ``rotate``, ``hFlip`` and
    ``vFlip``. Chains are followed to at most MAX_ALIAS_DEPTH levels; a
    cycle, a missing parent or a missing ``parent`` key resolves to
    not-found rather than an error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from colmena.cache import IconCache, NullCache
from colmena.errors import InvalidSourceDataError, ProviderError
from colmena.icon import Icon
from colmena.utils.hashing import cache_key
from colmena.utils.logger import get_logger

logger = get_logger(__name__)

MAX_ALIAS_DEPTH = 10

# Alias fields that override the parent record
_OVERRIDE_FIELDS = ("hFlip", "vFlip", "rotate", "width", "height", "body")


class JsonCollectionProvider:
    """Provider backed by an Iconify JSON collection file.

    Args:
        json_path: Path to the collection document
        cache: Cache for resolved icons (defaults to NullCache)
        cache_ttl: TTL for cached icons in seconds (0 = never expire)

    Example:
        >>> provider = JsonCollectionProvider("icons/tabler.json")
        >>> provider.get("home").get_attribute("viewBox")
        '0 0 24 24'
    """

    __slots__ = ("_cache", "_cache_ttl", "_data", "_json_path")

    def __init__(
        self,
        json_path: str | Path,
        *,
        cache: IconCache | None = None,
        cache_ttl: int = 0,
    ) -> None:
        self._json_path = Path(json_path)
        self._cache: IconCache = cache if cache is not None else NullCache()
        self._cache_ttl = cache_ttl
        self._data: dict[str, Any] | None = None

    @property
    def json_path(self) -> Path:
        """Path of the collection document."""
        return self._json_path

    @property
    def cache(self) -> IconCache:
        return self._cache

    def get(self, name: str) -> Icon | None:
        """Resolve an icon or alias, consulting the cache first.

        Raises:
            ProviderError: If the collection file cannot be loaded, or the
                resolved record cannot be turned into an Icon
        """
        key = self._cache_key(name)
        cached = self._cache.get(key)
        if isinstance(cached, Icon):
            logger.debug("Cache hit for %s in %s", name, self._json_path.name)
            return cached

        data = self._load()
        record = self._resolve(data, name)
        if record is None:
            return None

        for dimension in ("width", "height"):
            if dimension in data:
                record.setdefault(dimension, data[dimension])

        try:
            icon = Icon.from_iconify_data(record)
        except InvalidSourceDataError as e:
            msg = f"Failed to create icon {name!r} from {self._json_path}: {e}"
            raise ProviderError(msg) from e

        self._cache.set(key, icon, self._cache_ttl)
        return icon

    def has(self, name: str) -> bool:
        if self._cache.has(self._cache_key(name)):
            return True
        data = self._load()
        return name in data["icons"] or name in data.get("aliases", {})

    def all(self) -> list[str]:
        """Icon names followed by alias names."""
        data = self._load()
        return [*data["icons"], *data.get("aliases", {})]

    def _resolve(self, data: dict[str, Any], name: str) -> dict[str, Any] | None:
        icons = data["icons"]
        if name in icons:
            record = icons[name]
            return dict(record) if isinstance(record, dict) else {}
        if name in data.get("aliases", {}):
            return self._resolve_alias(data, name)
        return None

    def _resolve_alias(
        self, data: dict[str, Any], name: str, depth: int = 0
    ) -> dict[str, Any] | None:
        """Follow an alias to its parent record, applying overrides."""
        if depth > MAX_ALIAS_DEPTH:
            logger.debug("Alias chain too deep at %r in %s", name, self._json_path.name)
            return None

        alias = data.get("aliases", {}).get(name)
        if not isinstance(alias, dict) or "parent" not in alias:
            return None

        parent = alias["parent"]
        if parent in data["icons"]:
            parent_record = data["icons"][parent]
            record = dict(parent_record) if isinstance(parent_record, dict) else {}
        elif parent in data.get("aliases", {}):
            resolved = self._resolve_alias(data, parent, depth + 1)
            if resolved is None:
                return None
            record = resolved
        else:
            return None

        for field_name in _OVERRIDE_FIELDS:
            if alias.get(field_name) is not None:
                record[field_name] = alias[field_name]
        return record

    def _load(self) -> dict[str, Any]:
        """Read and validate the collection document once."""
        if self._data is not None:
            return self._data

        path = self._json_path
        if not path.is_file():
            msg = f"JSON collection file does not exist: {path}"
            raise ProviderError(msg)

        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            msg = f"Failed to read JSON collection file: {path}"
            raise ProviderError(msg) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f"Invalid JSON in collection file: {path}"
            raise ProviderError(msg) from e

        if not isinstance(data, dict):
            msg = f"Invalid JSON in collection file: {path}"
            raise ProviderError(msg)
        if not isinstance(data.get("icons"), dict):
            msg = f"JSON collection file missing 'icons' key: {path}"
            raise ProviderError(msg)
        if not isinstance(data.get("aliases", {}), dict):
            data["aliases"] = {}

        logger.debug("Loaded %d icons from %s", len(data["icons"]), path.name)
        self._data = data
        return data

    def _cache_key(self, name: str) -> str:
        return cache_key("json_collection", str(self._json_path), name)
