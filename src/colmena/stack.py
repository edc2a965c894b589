"""Layered icons: several icons drawn on top of each other.

Each layer keeps its own content inside a ``<g>`` group; the container
takes its viewBox from the first layer. Like Icon, a stack is immutable
and every method returns a new one.

Example:
    >>> stack = IconStack().push(circle).push(check, {"fill": "white"})
    >>> stack.with_size(32).to_markup()
    '<svg viewBox="0 0 24 24" width="32" height="32"><g>...</g><g fill="white">...</g></svg>'
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from colmena.attributes import Attributes, AttributeValue, normalize_value
from colmena.icon import Icon

DEFAULT_VIEW_BOX = "0 0 24 24"


@dataclass(frozen=True, slots=True)
class StackLayer:
    """One icon in a stack, with attributes for its ``<g>`` wrapper."""

    icon: Icon
    attributes: Attributes = field(default_factory=Attributes)


@dataclass(frozen=True, slots=True)
class IconStack:
    """Immutable stack of icon layers, first pushed drawn first."""

    layers: tuple[StackLayer, ...] = ()
    attributes: Attributes = field(default_factory=Attributes)

    def push(self, icon: Icon, attributes: Mapping[str, AttributeValue] | None = None) -> IconStack:
        """Add a layer on top."""
        layer = StackLayer(icon, Attributes(attributes))
        return IconStack((*self.layers, layer), self.attributes)

    def with_attributes(self, attributes: Mapping[str, AttributeValue]) -> IconStack:
        """Merge attributes into the container ``<svg>``."""
        return IconStack(self.layers, self.attributes.merge(attributes))

    def with_size(self, size: str | int | float) -> IconStack:
        value = normalize_value(size)
        return self.with_attributes({"width": value, "height": value})

    def with_class(self, classes: str | Iterable[str]) -> IconStack:
        if isinstance(classes, str):
            class_string = " ".join(classes.split())
        else:
            class_string = " ".join(c.strip() for c in classes if c and c.strip())
        if not class_string:
            return self
        return self.with_attributes({"class": class_string})

    def __len__(self) -> int:
        return len(self.layers)

    def to_markup(self) -> str:
        """Render the container and one ``<g>`` per layer.

        An empty stack renders as ``<svg></svg>``.
        """
        if not self.layers:
            return "<svg></svg>"

        view_box = self.layers[0].icon.get_attribute("viewBox") or DEFAULT_VIEW_BOX
        container = Attributes({"viewBox": view_box, **self.attributes})
        groups = "".join(
            f"<g{layer.attributes.to_markup()}>{layer.icon.content}</g>" for layer in self.layers
        )
        return f"<svg{container.to_markup()}>{groups}</svg>"

    def __str__(self) -> str:
        return self.to_markup()


__all__ = [
    "DEFAULT_VIEW_BOX",
    "IconStack",
    "StackLayer",
]
