"""Attribute layering and accessibility rules for resolved icons.

The renderer turns a provider's Icon into the Icon handed to templates.
Attributes are merged in a fixed order, later layers winning:

    icon's own attributes
    -> global defaults
    -> prefix defaults
    -> suffix defaults (matched on the local name)
    -> caller attributes

``class`` concatenates at every step and ``None`` values are skipped.

Accessibility:
    Applied last. A labeled icon (``aria-label`` or ``aria-labelledby``)
    gets ``role="img"`` and loses any inherited ``aria-hidden``; an
    unlabeled one gets ``aria-hidden="true"``. Only ``role`` and
    ``aria-hidden`` passed by the caller are left alone.

Example:
    >>> renderer = IconRenderer({"class": "icon"})
    >>> renderer.render(Icon("<path/>"), "tabler", {"class": "w-6"}).to_markup()
    '<svg class="icon w-6" aria-hidden="true"><path/></svg>'
"""

from __future__ import annotations

from collections.abc import Mapping

from colmena.attributes import Attributes, AttributeValue
from colmena.icon import Icon

AttributeRules = Mapping[str, AttributeValue]


class IconRenderer:
    """Applies default attribute layers and ARIA rules to icons.

    Thread Safety:
        Rendering only reads configuration. Mutating the rules while other
        threads render is not supported.
    """

    __slots__ = ("_default_attributes", "_prefix_attributes", "_suffix_attributes")

    def __init__(
        self,
        default_attributes: AttributeRules | None = None,
        prefix_attributes: Mapping[str, AttributeRules] | None = None,
    ) -> None:
        self._default_attributes: dict[str, AttributeValue] = dict(default_attributes or {})
        self._prefix_attributes: dict[str, dict[str, AttributeValue]] = {
            prefix: dict(attrs) for prefix, attrs in (prefix_attributes or {}).items()
        }
        # prefix -> suffix -> attributes, in registration order
        self._suffix_attributes: dict[str, dict[str, dict[str, AttributeValue]]] = {}

    def render(
        self,
        icon: Icon,
        prefix: str | None = None,
        attributes: AttributeRules | None = None,
        name: str | None = None,
    ) -> Icon:
        """Produce the final icon for output.

        Args:
            icon: Icon as resolved by a provider
            prefix: Icon-set prefix, selects prefix and suffix defaults
            attributes: Caller attributes, applied last
            name: Local icon name, used for suffix matching

        Returns:
            New Icon whose attributes are the complete merged set
        """
        merged = icon.attributes.merge(self._default_attributes)

        if prefix is not None:
            merged = merged.merge(self._prefix_attributes.get(prefix))
            if name is not None:
                merged = merged.merge(self._match_suffix(prefix, name))

        caller = attributes or {}
        merged = _apply_aria_rules(merged.merge(caller), caller)
        return icon.with_attributes(merged, mode="replace")

    # =========================================================================
    # Rule configuration
    # =========================================================================

    def set_default_attributes(self, attributes: AttributeRules) -> None:
        """Replace the global default attributes."""
        self._default_attributes = dict(attributes)

    @property
    def default_attributes(self) -> dict[str, AttributeValue]:
        return dict(self._default_attributes)

    def set_prefix_attributes(self, prefix: str, attributes: AttributeRules) -> None:
        """Replace the default attributes for one prefix."""
        self._prefix_attributes[prefix] = dict(attributes)

    def get_prefix_attributes(self, prefix: str) -> dict[str, AttributeValue]:
        return dict(self._prefix_attributes.get(prefix, {}))

    @property
    def prefix_attributes(self) -> dict[str, dict[str, AttributeValue]]:
        """All prefix rules (copies)."""
        return {prefix: dict(attrs) for prefix, attrs in self._prefix_attributes.items()}

    def set_suffix_attributes(self, prefix: str, suffix: str, attributes: AttributeRules) -> None:
        """Register attributes for names in ``prefix`` ending in ``-suffix``.

        An empty suffix registers the catch-all rule, used when no other
        suffix of the prefix matches.

        Example:
            >>> renderer.set_suffix_attributes("heroicons", "solid", {"fill": "currentColor"})
            >>> renderer.set_suffix_attributes("heroicons", "", {"fill": "none"})
        """
        self._suffix_attributes.setdefault(prefix, {})[suffix] = dict(attributes)

    def get_suffix_attributes(self, prefix: str) -> dict[str, dict[str, AttributeValue]]:
        """Suffix rules of one prefix, in registration order."""
        return {
            suffix: dict(attrs)
            for suffix, attrs in self._suffix_attributes.get(prefix, {}).items()
        }

    def _match_suffix(self, prefix: str, name: str) -> dict[str, AttributeValue] | None:
        rules = self._suffix_attributes.get(prefix)
        if not rules:
            return None
        for suffix, attrs in rules.items():
            if suffix and name.endswith(f"-{suffix}"):
                return attrs
        return rules.get("")


def _apply_aria_rules(attributes: Attributes, caller: AttributeRules) -> Attributes:
    """Make the icon either labeled (role=img) or decorative (aria-hidden)."""
    result = attributes.to_dict()
    labeled = "aria-label" in result or "aria-labelledby" in result

    if labeled:
        if caller.get("role") is None:
            result["role"] = "img"
        if caller.get("aria-hidden") is None:
            result.pop("aria-hidden", None)
    elif caller.get("aria-hidden") is None:
        result["aria-hidden"] = "true"

    return Attributes(result)


__all__ = [
    "AttributeRules",
    "IconRenderer",
]
