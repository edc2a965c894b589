"""SVG sprite sheets.

Instead of inlining every icon, a page can reference symbols from one
hidden sprite: ``use()`` returns a small ``<svg><use href="#id"/></svg>``
and records the icon, ``render()`` emits the ``<symbol>`` definitions
once, typically at the end of the page.

Symbols are keyed by icon name. Names that flatten to the same id
(``a:b/c`` and ``a:b-c``) get distinct ids through a numeric suffix.

A sprite sheet accumulates symbols and is therefore mutable; call
``reset()`` between pages.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from colmena.attributes import Attributes, AttributeValue
from colmena.stack import DEFAULT_VIEW_BOX
from colmena.utils.text import escape_html

if TYPE_CHECKING:
    from colmena.icon import Icon
    from colmena.manager import IconManager


def symbol_id(name: str) -> str:
    """Turn an icon name into a symbol id.

    Example:
        >>> symbol_id("tabler:brands/github")
        'tabler-brands-github'
    """
    return name.replace(":", "-").replace("/", "-")


class SpriteSheet:
    """Collects icons used on a page and renders them as ``<symbol>``s."""

    __slots__ = ("_ids", "_manager", "_symbols")

    def __init__(self, manager: IconManager) -> None:
        self._manager = manager
        # icon name -> (symbol id, icon); ids in use, for collision checks
        self._symbols: dict[str, tuple[str, Icon]] = {}
        self._ids: set[str] = set()

    def use(self, name: str, attributes: Mapping[str, AttributeValue] | None = None) -> str:
        """Reference an icon, registering its symbol on first use.

        Raises:
            InvalidNameError: If the name is malformed
            IconNotFoundError: If the icon cannot be resolved
        """
        if name not in self._symbols:
            icon = self._manager.get(name)
            self._symbols[name] = (self._allocate_id(name), icon)
        sid = self._symbols[name][0]
        return f'<svg{Attributes(attributes).to_markup()}><use href="#{escape_html(sid)}"/></svg>'

    def has(self, name: str) -> bool:
        """Check whether the icon's symbol has been registered."""
        return name in self._symbols

    def symbol_id_for(self, name: str) -> str | None:
        """Id of the registered symbol for ``name``, or None."""
        entry = self._symbols.get(name)
        return entry[0] if entry is not None else None

    def __len__(self) -> int:
        return len(self._symbols)

    def render(self) -> str:
        """Emit the hidden sprite, or an empty string if nothing was used."""
        if not self._symbols:
            return ""

        symbols = []
        for sid, icon in self._symbols.values():
            view_box = icon.get_attribute("viewBox") or DEFAULT_VIEW_BOX
            symbols.append(
                f'<symbol id="{escape_html(sid)}" viewBox="{escape_html(view_box)}">'
                f"{icon.content}</symbol>"
            )
        return f'<svg xmlns="http://www.w3.org/2000/svg" style="display:none">{"".join(symbols)}</svg>'

    def reset(self) -> None:
        """Forget all registered symbols."""
        self._symbols.clear()
        self._ids.clear()

    def __str__(self) -> str:
        return self.render()

    def _allocate_id(self, name: str) -> str:
        """Readable id for ``name``, suffixed when another name already took it."""
        base = symbol_id(name)
        sid = base
        counter = 2
        while sid in self._ids:
            sid = f"{base}-{counter}"
            counter += 1
        self._ids.add(sid)
        return sid


__all__ = [
    "SpriteSheet",
    "symbol_id",
]
