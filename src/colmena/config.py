"""Configuration for building an IconManager.

Two layers:

IconSettings:
    Frozen dataclass of plain values (prefixes, TTLs, attribute defaults).
    Built from a dict or a TOML file, so applications can keep icon
    settings next to the rest of their configuration.

IconConfig:
    Fluent builder that registers icon sets and produces a configured
    IconManager. Iconify and JSON collection sets are deferred until
    ``build()``, so they are wired to the final cache no matter in which
    order ``cache_path()`` / ``cache()`` / ``no_cache()`` were called.

Usage:
    manager = (
        IconConfig()
        .add_directory("ui", "resources/icons")
        .add_iconify_set("tabler")
        .cache_path("var/cache/icons", ttl=86400)
        .default_prefix("ui")
        .default_attributes({"class": "icon"})
        .build()
    )

    # Or from pyproject.toml:
    #   [tool.colmena]
    #   default_prefix = "ui"
    #   cache_ttl = 86400
    settings = IconSettings.from_toml("pyproject.toml")
    manager = IconConfig().apply_settings(settings).add_iconify_set("tabler").build()

"""

from __future__ import annotations

import tempfile
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from colmena.attributes import AttributeValue
from colmena.cache import FileCache, IconCache, NullCache
from colmena.errors import ColmenaError
from colmena.manager import IconManager
from colmena.providers.chain import ChainProvider
from colmena.providers.directory import DirectoryProvider
from colmena.providers.iconify import IconifyProvider
from colmena.providers.json_collection import JsonCollectionProvider
from colmena.renderer import IconRenderer
from colmena.utils.logger import get_logger

logger = get_logger(__name__)

# Default cache location when a deferred set needs one and none was given
DEFAULT_CACHE_DIRNAME = "colmena"


@dataclass(frozen=True, slots=True)
class IconSettings:
    """Immutable icon settings.

    Attributes:
        default_prefix: Prefix for names given without one
        fallback_icon: Icon substituted when a lookup misses
        ignore_not_found: Render missing icons as empty instead of raising
        cache_path: Directory for the durable cache (None = default location)
        cache_ttl: TTL for cached icons in seconds (0 = never expire)
        timeout: Per-request timeout for remote icon sets, in seconds
        api_hosts: Iconify API hosts to try in order (empty = built-in list)
        default_attributes: Attributes applied to every rendered icon
        prefix_attributes: Attributes applied per prefix
        aliases: Alias name -> full icon name

    """

    default_prefix: str | None = None
    fallback_icon: str | None = None
    ignore_not_found: bool = False
    cache_path: str | None = None
    cache_ttl: int = 0
    timeout: float = 10
    api_hosts: tuple[str, ...] = ()
    default_attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    prefix_attributes: Mapping[str, Mapping[str, AttributeValue]] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> IconSettings:
        """Create IconSettings from a dictionary.

        Only keys that are IconSettings fields are used; unknown keys are
        ignored.

        Example:
            >>> settings = IconSettings.from_dict({
            ...     "default_prefix": "ui",
            ...     "cache_ttl": 3600,
            ...     "unknown_key": "ignored",
            ... })
            >>> settings.cache_ttl
            3600

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "api_hosts" in filtered:
            filtered["api_hosts"] = tuple(filtered["api_hosts"] or ())
        return cls(**filtered)

    @classmethod
    def from_toml(cls, path: str | Path) -> IconSettings:
        """Load settings from a TOML file.

        Reads the ``[tool.colmena]`` table when present (pyproject.toml
        style), otherwise the whole document.

        Raises:
            ColmenaError: If the file cannot be read or is not valid TOML
        """
        toml_path = Path(path)
        try:
            with toml_path.open("rb") as f:
                document = tomllib.load(f)
        except OSError as e:
            msg = f"Failed to read settings file: {toml_path}"
            raise ColmenaError(msg) from e
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in settings file {toml_path}: {e}"
            raise ColmenaError(msg) from e

        table = document.get("tool", {}).get("colmena")
        return cls.from_dict(table if isinstance(table, dict) else document)


class IconConfig:
    """Fluent builder for an IconManager.

    Every method returns the builder; ``build()`` returns the manager.
    """

    def __init__(self) -> None:
        self._manager = IconManager()
        self._cache: IconCache | None = None
        self._cache_path: Path | None = None
        self._cache_ttl = 0
        self._timeout: float = 10
        self._api_hosts: tuple[str, ...] = ()
        self._default_attributes: dict[str, AttributeValue] = {}
        self._prefix_attributes: dict[str, dict[str, AttributeValue]] = {}
        self._suffix_attributes: list[tuple[str, str, dict[str, AttributeValue]]] = []
        self._deferred_iconify: list[tuple[str, float | None]] = []
        self._deferred_json: list[tuple[str, Path]] = []
        self._deferred_hybrid: list[tuple[str, Path, bool, float | None]] = []

    # =========================================================================
    # Icon sets
    # =========================================================================

    def add_directory(self, prefix: str, directory: str | Path, *, recursive: bool = True) -> IconConfig:
        """Register a directory of SVG files.

        Raises:
            ProviderError: If the directory does not exist
        """
        self._manager.register(prefix, DirectoryProvider(directory, recursive=recursive))
        return self

    def add_iconify_set(self, prefix: str, *, timeout: float | None = None) -> IconConfig:
        """Register a remote Iconify set (wired to the cache at build time)."""
        self._deferred_iconify.append((prefix, timeout))
        return self

    def add_json_collection(self, prefix: str, json_path: str | Path) -> IconConfig:
        """Register a local Iconify JSON collection (loaded on first use)."""
        self._deferred_json.append((prefix, Path(json_path)))
        return self

    def add_hybrid_set(
        self,
        prefix: str,
        directory: str | Path,
        *,
        recursive: bool = True,
        timeout: float | None = None,
    ) -> IconConfig:
        """Register local SVG overrides backed by the Iconify set of the same prefix."""
        self._deferred_hybrid.append((prefix, Path(directory), recursive, timeout))
        return self

    def discover_json_sets(self, json_dir: str | Path) -> IconConfig:
        """Register every ``*.json`` in a directory, prefix = file stem.

        A missing directory registers nothing.
        """
        directory = Path(json_dir)
        if not directory.is_dir():
            logger.debug("No JSON collection directory at %s", directory)
            return self
        for json_path in sorted(directory.glob("*.json")):
            self.add_json_collection(json_path.stem, json_path)
        return self

    # =========================================================================
    # Cache
    # =========================================================================

    def cache_path(self, path: str | Path, *, ttl: int = 0) -> IconConfig:
        """Use a FileCache at ``path``, replacing any explicit cache."""
        self._cache_path = Path(path)
        self._cache_ttl = ttl
        self._cache = None
        return self

    def cache(self, cache: IconCache) -> IconConfig:
        """Use an existing cache instance."""
        self._cache = cache
        return self

    def no_cache(self) -> IconConfig:
        """Disable caching for deferred sets."""
        self._cache = NullCache()
        return self

    # =========================================================================
    # Rendering and resolution policy
    # =========================================================================

    def default_prefix(self, prefix: str | None) -> IconConfig:
        self._manager.default_prefix = prefix
        return self

    def default_attributes(self, attributes: Mapping[str, AttributeValue]) -> IconConfig:
        """Add global default attributes (merged with earlier calls)."""
        self._default_attributes.update(attributes)
        return self

    def prefix_attributes(self, prefix: str, attributes: Mapping[str, AttributeValue]) -> IconConfig:
        """Add default attributes for one prefix (merged with earlier calls)."""
        self._prefix_attributes.setdefault(prefix, {}).update(attributes)
        return self

    def suffix_attributes(
        self, prefix: str, suffix: str, attributes: Mapping[str, AttributeValue]
    ) -> IconConfig:
        """Add attributes for names in ``prefix`` ending in ``-suffix``."""
        self._suffix_attributes.append((prefix, suffix, dict(attributes)))
        return self

    def fallback_icon(self, name: str | None) -> IconConfig:
        self._manager.fallback_icon = name
        return self

    def ignore_not_found(self, ignore: bool = True) -> IconConfig:
        self._manager.ignore_not_found = ignore
        return self

    def alias(self, alias: str, target: str) -> IconConfig:
        self._manager.set_alias(alias, target)
        return self

    def remote_options(
        self, *, timeout: float | None = None, api_hosts: Sequence[str] | None = None
    ) -> IconConfig:
        """Set the default timeout and host list for Iconify sets."""
        if timeout is not None:
            self._timeout = timeout
        if api_hosts is not None:
            self._api_hosts = tuple(api_hosts)
        return self

    def apply_settings(self, settings: IconSettings) -> IconConfig:
        """Apply every value of an IconSettings."""
        if settings.default_prefix is not None:
            self.default_prefix(settings.default_prefix)
        if settings.fallback_icon is not None:
            self.fallback_icon(settings.fallback_icon)
        self.ignore_not_found(settings.ignore_not_found)
        if settings.cache_path is not None:
            self.cache_path(settings.cache_path, ttl=settings.cache_ttl)
        else:
            self._cache_ttl = settings.cache_ttl
        self.remote_options(timeout=settings.timeout, api_hosts=settings.api_hosts or None)
        self.default_attributes(settings.default_attributes)
        for prefix, attributes in settings.prefix_attributes.items():
            self.prefix_attributes(prefix, attributes)
        for alias, target in settings.aliases.items():
            self.alias(alias, target)
        return self

    # =========================================================================
    # Build
    # =========================================================================

    def build(self) -> IconManager:
        """Register deferred sets and install the renderer.

        Returns:
            The configured IconManager

        Raises:
            ProviderError: If a hybrid set's directory does not exist
            StorageError: If the default cache directory cannot be created
        """
        if self._deferred_iconify or self._deferred_json or self._deferred_hybrid:
            cache = self._get_or_create_cache()
            ttl = self._cache_ttl

            for prefix, timeout in self._deferred_iconify:
                self._manager.register(prefix, self._iconify(prefix, cache, timeout))

            for prefix, json_path in self._deferred_json:
                provider = JsonCollectionProvider(json_path, cache=cache, cache_ttl=ttl)
                self._manager.register(prefix, provider)

            for prefix, directory, recursive, timeout in self._deferred_hybrid:
                chain = ChainProvider(
                    [
                        DirectoryProvider(directory, recursive=recursive),
                        self._iconify(prefix, cache, timeout),
                    ]
                )
                self._manager.register(prefix, chain)

        renderer = IconRenderer(self._default_attributes, self._prefix_attributes)
        for prefix, suffix, attributes in self._suffix_attributes:
            renderer.set_suffix_attributes(prefix, suffix, attributes)
        self._manager.renderer = renderer
        return self._manager

    def _iconify(self, prefix: str, cache: IconCache, timeout: float | None) -> IconifyProvider:
        return IconifyProvider(
            prefix,
            cache=cache,
            timeout=timeout if timeout is not None else self._timeout,
            cache_ttl=self._cache_ttl,
            api_hosts=self._api_hosts or None,
        )

    def _get_or_create_cache(self) -> IconCache:
        if self._cache is not None:
            return self._cache
        path = self._cache_path
        if path is None:
            path = Path(tempfile.gettempdir()) / DEFAULT_CACHE_DIRNAME
        self._cache = FileCache(path, default_ttl=self._cache_ttl)
        logger.debug("Using file cache at %s", path)
        return self._cache


__all__ = [
    "DEFAULT_CACHE_DIRNAME",
    "IconConfig",
    "IconSettings",
]
