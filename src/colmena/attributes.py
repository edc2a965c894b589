"""Immutable SVG attribute map.

Attributes maps attribute names to string values in insertion order.
Every operation returns a new map; values are normalized to strings on
the way in, so the rest of colmena only ever sees ``str``.

Merge rule:
    A patch overwrites existing names, except ``class``, which is
    concatenated (space-joined, trimmed). ``None`` values in a patch are
    skipped and never clear an existing attribute.

Example:
    >>> attrs = Attributes({"class": "icon", "width": 24})
    >>> attrs.merge({"class": "w-6", "width": None})["class"]
    'icon w-6'
    >>> attrs.to_markup()
    ' class="icon" width="24"'
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from colmena.utils.text import escape_html, format_number, is_safe_attribute_name

AttributeValue = str | int | float | bool | None


def normalize_value(value: str | int | float | bool) -> str:
    """Convert an attribute value to its string form.

    Examples:
        >>> normalize_value(True)
        'true'
        >>> normalize_value(1.5)
        '1.5'
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return format_number(value)
    return str(value)


def merge_class(existing: str, new: str) -> str:
    """Concatenate two class strings, trimmed."""
    return f"{existing} {new}".strip()


class Attributes(Mapping[str, str]):
    """Ordered, immutable mapping of SVG attribute names to string values.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, AttributeValue] | None = None) -> None:
        self._data: dict[str, str] = _filter(data) if data else {}

    @classmethod
    def _wrap(cls, data: dict[str, str]) -> Attributes:
        instance = cls.__new__(cls)
        instance._data = data
        return instance

    def __getitem__(self, name: str) -> str:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(tuple(self._data.items()))

    def __repr__(self) -> str:
        return f"Attributes({self._data!r})"

    def merge(self, patch: Mapping[str, AttributeValue] | None) -> Attributes:
        """Return a new map with ``patch`` applied on top of this one.

        Args:
            patch: Attributes to apply. ``None`` values are ignored;
                ``class`` is concatenated rather than replaced.

        Returns:
            New Attributes instance
        """
        if not patch:
            return self

        result = dict(self._data)
        for name, value in patch.items():
            if value is None:
                continue
            normalized = normalize_value(value)
            if name == "class":
                result["class"] = merge_class(result.get("class", ""), normalized)
            else:
                result[name] = normalized
        return Attributes._wrap(result)

    def replace(self, patch: Mapping[str, AttributeValue] | None) -> Attributes:
        """Return the filtered, stringified ``patch`` as a fresh map."""
        return Attributes(patch)

    def to_dict(self) -> dict[str, str]:
        """Return a plain dict copy."""
        return dict(self._data)

    def to_markup(self) -> str:
        """Serialize as `` name="value"`` pairs with a leading space.

        Names failing the safe-identifier check are dropped; values are
        HTML-escaped. Returns an empty string when nothing is written.
        """
        parts = [
            f'{name}="{escape_html(value)}"'
            for name, value in self._data.items()
            if is_safe_attribute_name(name)
        ]
        if not parts:
            return ""
        return " " + " ".join(parts)


def _filter(data: Mapping[str, Any]) -> dict[str, str]:
    """Drop None values and stringify the rest."""
    return {
        str(name): normalize_value(value)
        for name, value in data.items()
        if value is not None
    }


EMPTY_ATTRIBUTES = Attributes()


__all__ = [
    "EMPTY_ATTRIBUTES",
    "AttributeValue",
    "Attributes",
    "merge_class",
    "normalize_value",
]
