"""Chain provider: several providers behind one prefix.

Used for hybrid sets, e.g. local SVG overrides first and the Iconify API
second. The chain is itself an IconProvider, so chains nest.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from colmena.icon import Icon
    from colmena.providers.protocol import IconProvider


class ChainProvider:
    """Ordered list of providers; first match wins.

    Example:
        >>> chain = ChainProvider([local, remote])
        >>> chain.get("home")  # local copy if present, else remote
    """

    __slots__ = ("_providers",)

    def __init__(self, providers: Iterable[IconProvider] = ()) -> None:
        self._providers: list[IconProvider] = list(providers)

    def add_provider(self, provider: IconProvider) -> ChainProvider:
        """Append a provider to the end of the chain.

        Returns:
            Self for chaining
        """
        self._providers.append(provider)
        return self

    @property
    def providers(self) -> tuple[IconProvider, ...]:
        """Providers in lookup order."""
        return tuple(self._providers)

    def get(self, name: str) -> Icon | None:
        for provider in self._providers:
            icon = provider.get(name)
            if icon is not None:
                return icon
        return None

    def has(self, name: str) -> bool:
        return any(provider.has(name) for provider in self._providers)

    def all(self) -> list[str]:
        """Union of every provider's names, deduplicated."""
        names: dict[str, None] = {}
        for provider in self._providers:
            for name in provider.all():
                names[name] = None
        return list(names)

    def __len__(self) -> int:
        """Number of providers in the chain."""
        return len(self._providers)
