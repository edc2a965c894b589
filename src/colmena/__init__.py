"""
Colmena: SVG icon resolution for Python templates

Resolves symbolic icon names ("tabler:home") to inline SVG, applying
attribute defaults, accessibility rules and Iconify transforms, over
local SVG directories, bundled Iconify JSON collections and the Iconify
HTTP API.

Quick Start:
    >>> from colmena import IconConfig
    >>> manager = (
    ...     IconConfig()
    ...     .add_directory("ui", "resources/icons")
    ...     .add_iconify_set("tabler")
    ...     .default_attributes({"class": "icon"})
    ...     .build()
    ... )
    >>> print(manager.get("tabler:home", {"class": "w-6"}))
    <svg viewBox="0 0 24 24" width="24" height="24" class="icon w-6" aria-hidden="true">...</svg>

Lower level:
    >>> from colmena import IconManager, DirectoryProvider
    >>> manager = IconManager(default_prefix="ui")
    >>> manager.register("ui", DirectoryProvider("resources/icons"))
    >>> manager.has("ui:home")
    True

Installation:
    pip install colmena
"""

from colmena.attributes import Attributes, AttributeValue
from colmena.cache import CacheStats, FileCache, IconCache, NullCache
from colmena.config import IconConfig, IconSettings
from colmena.errors import (
    CacheError,
    ColmenaError,
    IconNotFoundError,
    InvalidKeyError,
    InvalidNameError,
    InvalidSourceDataError,
    InvalidSvgError,
    ManagerNotSetError,
    ProviderError,
    ProviderNotFoundError,
    StorageError,
)
from colmena.icon import EMPTY_ICON, Icon
from colmena.manager import IconManager, parse_icon_name
from colmena.providers import (
    ChainProvider,
    DirectoryProvider,
    IconifyProvider,
    IconProvider,
    JsonCollectionProvider,
)
from colmena.renderer import IconRenderer
from colmena.shared import get_manager, has_manager, icon, reset_manager, set_manager
from colmena.sprite import SpriteSheet
from colmena.stack import IconStack

__version__ = "0.1.0"

__all__ = [
    "EMPTY_ICON",
    "AttributeValue",
    "Attributes",
    "CacheError",
    "CacheStats",
    "ChainProvider",
    "ColmenaError",
    "DirectoryProvider",
    "FileCache",
    "Icon",
    "IconCache",
    "IconConfig",
    "IconManager",
    "IconNotFoundError",
    "IconProvider",
    "IconRenderer",
    "IconSettings",
    "IconStack",
    "IconifyProvider",
    "InvalidKeyError",
    "InvalidNameError",
    "InvalidSourceDataError",
    "InvalidSvgError",
    "JsonCollectionProvider",
    "ManagerNotSetError",
    "NullCache",
    "ProviderError",
    "ProviderNotFoundError",
    "SpriteSheet",
    "StorageError",
    "__version__",
    "get_manager",
    "has_manager",
    "icon",
    "parse_icon_name",
    "reset_manager",
    "set_manager",
]
