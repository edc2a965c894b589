"""IconProvider protocol: the contract every icon source satisfies.

A provider resolves a local icon name (the part after ``prefix:``) to an
Icon, or None when it does not have that icon. Providers never apply
rendering rules; the IconManager does that after resolution.

Example:
    from colmena.providers.protocol import IconProvider

    def first_icon(provider: IconProvider) -> Icon | None:
        for name in provider.all():
            return provider.get(name)
        return None

"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from colmena.icon import Icon


@runtime_checkable
class IconProvider(Protocol):
    """Protocol for icon sources.

    Implementations: DirectoryProvider, JsonCollectionProvider,
    IconifyProvider and ChainProvider (which composes the others).

    """

    def get(self, name: str) -> Icon | None:
        """Resolve a local icon name.

        Args:
            name: Icon name without prefix (may contain ``/`` for grouping)

        Returns:
            Icon, or None if this provider does not have it

        """
        ...

    def has(self, name: str) -> bool:
        """Check whether the provider can resolve ``name``."""
        ...

    def all(self) -> Iterable[str]:
        """List every local name the provider knows.

        The result is finite and may be iterated more than once, but
        producing it is not necessarily cheap.

        """
        ...
