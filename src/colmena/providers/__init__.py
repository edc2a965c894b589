"""Icon source providers.

Every provider satisfies :class:`IconProvider`: ``get(name)`` returns an
Icon or None, ``has(name)`` and ``all()`` answer membership. The manager
maps prefixes to providers; ChainProvider puts several behind one prefix.

Example:
    >>> from colmena.providers import ChainProvider, DirectoryProvider, IconifyProvider
    >>> provider = ChainProvider([DirectoryProvider("icons"), IconifyProvider("tabler")])
"""

from colmena.providers.chain import ChainProvider
from colmena.providers.directory import DirectoryProvider
from colmena.providers.iconify import DEFAULT_API_HOSTS, IconifyProvider
from colmena.providers.json_collection import MAX_ALIAS_DEPTH, JsonCollectionProvider
from colmena.providers.protocol import IconProvider

__all__ = [
    "DEFAULT_API_HOSTS",
    "MAX_ALIAS_DEPTH",
    "ChainProvider",
    "DirectoryProvider",
    "IconProvider",
    "IconifyProvider",
    "JsonCollectionProvider",
]
