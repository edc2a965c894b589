"""Exception classes for colmena.

Provides standardized exceptions for error handling throughout colmena.

Hierarchy:
    ColmenaError
    ├── InvalidNameError
    ├── IconNotFoundError
    │   └── ProviderNotFoundError
    ├── ProviderError
    │   ├── InvalidSourceDataError
    │   └── InvalidSvgError
    ├── CacheError
    │   ├── InvalidKeyError
    │   └── StorageError
    └── ManagerNotSetError
"""

from __future__ import annotations


class ColmenaError(Exception):
    """Base exception for all colmena errors.

    Subclass this for specific error categories.
    """

    pass


class InvalidNameError(ColmenaError):
    """Malformed icon identifier.

    Raised for empty names, names with an empty prefix or local part,
    and prefix-less names when no default prefix is configured.
    """

    def __init__(self, name: str, message: str | None = None) -> None:
        """Initialize with the offending name.

        Args:
            name: The icon name as given by the caller
            message: Optional override for the default message
        """
        self.name = name
        super().__init__(message or f"Invalid icon name format: {name!r}")


class IconNotFoundError(ColmenaError):
    """A provider was consulted but does not have the requested icon."""

    def __init__(self, name: str, message: str | None = None) -> None:
        """Initialize with the requested name.

        Args:
            name: Icon name that could not be resolved
            message: Optional override for the default message
        """
        self.name = name
        super().__init__(message or f"Icon not found: {name}")


class ProviderNotFoundError(IconNotFoundError):
    """No provider is registered for the parsed prefix."""

    def __init__(self, name: str, prefix: str) -> None:
        """Initialize with the requested name and its prefix.

        Args:
            name: Icon name that was requested
            prefix: Prefix with no registered provider
        """
        self.prefix = prefix
        super().__init__(name, f"No provider registered for prefix: {prefix}")


class ProviderError(ColmenaError):
    """A provider failed to load or build icon data.

    Raised for unreadable sources (missing directory, broken JSON file)
    rather than for icons that are simply absent.
    """

    pass


class InvalidSourceDataError(ProviderError):
    """An icon data record lacks required fields (e.g. ``body``)."""

    pass


class InvalidSvgError(ProviderError):
    """SVG text could not be split into a root element and its content."""

    pass


class CacheError(ColmenaError):
    """Base class for cache failures."""

    pass


class InvalidKeyError(CacheError, ValueError):
    """Cache key is empty or contains reserved characters."""

    def __init__(self, key: str, message: str | None = None) -> None:
        """Initialize with the rejected key.

        Args:
            key: The rejected cache key
            message: Optional override for the default message
        """
        self.key = key
        super().__init__(message or f"Invalid cache key: {key!r}")


class StorageError(CacheError):
    """The cache directory could not be created or an entry not written."""

    pass


class ManagerNotSetError(ColmenaError):
    """The process-wide manager slot was read before it was set."""

    pass
