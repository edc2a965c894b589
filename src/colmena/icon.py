"""Immutable SVG icon value.

An Icon is the pair (content, attributes): the markup inside the root
``<svg>`` element and the root element's attributes. Every ``with_*``
method returns a new Icon; the original is never touched, so icons are
safe to cache, share and serialize.

Iconify data:
    :meth:`Icon.from_iconify_data` turns an Iconify icon record into an Icon,
    composing the record's rotation and flips into nested ``<g>`` groups.
    Rotation is always the inner group and flips the outer one: a flip
    must operate in the coordinate frame the rotation produced.

Example:
    >>> icon = Icon('<path d="M0 0"/>', {"class": "icon"})
    >>> icon.with_class("w-6 h-6").with_size(24).to_markup()
    '<svg class="icon w-6 h-6" width="24" height="24"><path d="M0 0"/></svg>'
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from colmena.attributes import Attributes, AttributeValue, normalize_value
from colmena.errors import InvalidSourceDataError
from colmena.svg import parse, parse_file
from colmena.utils.text import format_number

MergeMode = Literal["merge", "replace"]

# Width and height Iconify assumes when a record omits them
DEFAULT_ICONIFY_SIZE = 16


@dataclass(frozen=True, slots=True)
class Icon:
    """Resolved SVG icon.

    Attributes:
        content: Inner SVG markup (without the <svg> wrapper). Opaque;
            never re-parsed.
        attributes: Root <svg> attributes.

    Thread Safety:
        Frozen (immutable) and safe to share across threads.
    """

    content: str = ""
    attributes: Attributes = field(default_factory=Attributes)

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, Attributes):
            object.__setattr__(self, "attributes", Attributes(self.attributes))

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_string(cls, svg_text: str) -> Icon:
        """Create an Icon from a complete SVG document.

        Raises:
            InvalidSvgError: If the markup has no root <svg> element
        """
        parsed = parse(svg_text)
        return cls(parsed.content, Attributes(parsed.attributes))

    @classmethod
    def from_file(cls, path: str | Path) -> Icon:
        """Create an Icon from an SVG file.

        Raises:
            InvalidSvgError: If the file is unreadable or not SVG
        """
        parsed = parse_file(path)
        return cls(parsed.content, Attributes(parsed.attributes))

    @classmethod
    def from_iconify_data(cls, data: Mapping[str, Any]) -> Icon:
        """Create an Icon from an Iconify icon record.

        Args:
            data: Record with ``body`` and optional ``width``, ``height``,
                ``left``, ``top``, ``rotate`` (quarter turns), ``hFlip``
                and ``vFlip``.

        Returns:
            Icon with the transforms baked into its content

        Raises:
            InvalidSourceDataError: If ``body`` is missing
        """
        if data.get("body") is None:
            raise InvalidSourceDataError('Invalid Iconify data: missing "body" field')

        body = str(data["body"])
        width = data.get("width")
        height = data.get("height")
        rotate = int(data.get("rotate") or 0) % 4
        h_flip = bool(data.get("hFlip"))
        v_flip = bool(data.get("vFlip"))

        if width is None or height is None:
            if not (rotate or h_flip or v_flip):
                attributes: dict[str, AttributeValue] = {"width": width, "height": height}
                return cls(body, Attributes(attributes))
            # Transforms need a frame; use the Iconify default size
            width = DEFAULT_ICONIFY_SIZE if width is None else width
            height = DEFAULT_ICONIFY_SIZE if height is None else height

        left = data.get("left") or 0
        top = data.get("top") or 0

        if rotate or h_flip or v_flip:
            body, width, height = _apply_transforms(body, width, height, rotate, h_flip, v_flip)
            left = top = 0

        view_box = " ".join(format_number(n) for n in (left, top, width, height))
        return cls(
            body,
            Attributes({"viewBox": view_box, "width": width, "height": height}),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Icon:
        """Rebuild an Icon produced by :meth:`to_dict`."""
        return cls(str(data.get("content", "")), Attributes(data.get("attributes") or {}))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {"content": self.content, "attributes": self.attributes.to_dict()}

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        """Get a single attribute value."""
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        """Check if an attribute is set."""
        return name in self.attributes

    @property
    def is_empty(self) -> bool:
        """True for the inert placeholder icon (no content, no attributes)."""
        return not self.content and not self.attributes

    # =========================================================================
    # Transforms (each returns a new Icon)
    # =========================================================================

    def with_attributes(
        self,
        attributes: Mapping[str, AttributeValue] | None = None,
        mode: MergeMode = "merge",
    ) -> Icon:
        """Set or merge attributes.

        Args:
            attributes: Patch to apply. ``None`` values are ignored.
            mode: ``"merge"`` applies the patch on top of the current
                attributes (``class`` concatenates); ``"replace"`` makes the
                patch the complete attribute set.

        Returns:
            New Icon
        """
        if mode == "replace":
            new_attributes = self.attributes.replace(attributes)
        elif mode == "merge":
            new_attributes = self.attributes.merge(attributes)
        else:
            msg = f"Unknown merge mode: {mode!r}"
            raise ValueError(msg)
        return Icon(self.content, new_attributes)

    def with_class(self, classes: str | Iterable[str]) -> Icon:
        """Append CSS classes.

        Args:
            classes: Space-separated string or iterable of class names
        """
        if isinstance(classes, str):
            class_string = " ".join(classes.split())
        else:
            class_string = " ".join(c.strip() for c in classes if c and c.strip())
        if not class_string:
            return Icon(self.content, self.attributes)
        return self.with_attributes({"class": class_string})

    def with_size(self, size: str | int | float) -> Icon:
        """Set width and height to the same value (e.g. ``24``, ``"1.5rem"``)."""
        value = normalize_value(size)
        return self.with_attributes({"width": value, "height": value})

    def with_stroke_width(self, width: str | int | float) -> Icon:
        """Set the stroke-width attribute."""
        return self.with_attributes({"stroke-width": width})

    def with_fill(self, fill: str) -> Icon:
        """Set the fill attribute."""
        return self.with_attributes({"fill": fill})

    def with_stroke(self, stroke: str) -> Icon:
        """Set the stroke attribute."""
        return self.with_attributes({"stroke": stroke})

    def with_rotation(self, degrees: int | float) -> Icon:
        """Rotate via inline CSS, keeping any existing style directives.

        Example:
            >>> Icon("", {"style": "color: red"}).with_rotation(90).get_attribute("style")
            'color: red; transform: rotate(90deg)'
        """
        rotation = f"transform: rotate({format_number(degrees)}deg)"
        existing = self.attributes.get("style", "").strip().rstrip(";").strip()
        style = f"{existing}; {rotation}" if existing else rotation
        return self.with_attributes({"style": style})

    # =========================================================================
    # Output
    # =========================================================================

    def to_markup(self) -> str:
        """Render as ``<svg {attrs}>{content}</svg>``.

        Attribute names failing the safe-identifier check are dropped and
        all values are HTML-escaped. Content is written verbatim.
        """
        return f"<svg{self.attributes.to_markup()}>{self.content}</svg>"

    def __str__(self) -> str:
        return self.to_markup()


def _apply_transforms(
    body: str,
    width: int | float,
    height: int | float,
    rotate: int,
    h_flip: bool,
    v_flip: bool,
) -> tuple[str, int | float, int | float]:
    """Wrap body in rotation then flip groups; return new body and size."""
    if rotate:
        if rotate == 1:
            transform = f"translate({format_number(height)}, 0) rotate(90)"
        elif rotate == 2:
            transform = f"translate({format_number(width)}, {format_number(height)}) rotate(180)"
        else:
            transform = f"translate(0, {format_number(width)}) rotate(270)"
        body = _group(body, transform)
        if rotate in (1, 3):
            width, height = height, width

    if h_flip and v_flip:
        body = _group(
            body, f"translate({format_number(width)}, {format_number(height)}) scale(-1, -1)"
        )
    elif h_flip:
        body = _group(body, f"translate({format_number(width)}, 0) scale(-1, 1)")
    elif v_flip:
        body = _group(body, f"translate(0, {format_number(height)}) scale(1, -1)")

    return body, width, height


def _group(body: str, transform: str) -> str:
    return f'<g transform="{transform}">{body}</g>'


EMPTY_ICON = Icon()


__all__ = [
    "EMPTY_ICON",
    "Icon",
    "MergeMode",
]
