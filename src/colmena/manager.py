"""Icon resolution façade.

The IconManager maps prefixes to providers, resolves user-defined
aliases, parses icon names, applies the fallback and ignore-not-found
policies, and hands resolved icons to the IconRenderer.

Name grammar:
    ``"prefix:local"`` splits on the first colon; both parts must be
    non-empty. A name without a colon uses the default prefix, and is
    invalid when none is configured. Surrounding whitespace is ignored.

Failure policy:
    ``get()`` always raises InvalidNameError for malformed names, even
    with ``ignore_not_found`` enabled. ``has()`` never raises for them and
    answers False instead.

Example:
    >>> manager = IconManager(default_prefix="ui")
    >>> manager.register("ui", DirectoryProvider("resources/icons"))
    >>> manager.get("home", {"class": "w-6"}).to_markup()
    '<svg ... class="w-6" aria-hidden="true">...</svg>'
"""

from __future__ import annotations

from collections.abc import Mapping

from colmena.attributes import AttributeValue
from colmena.errors import ColmenaError, IconNotFoundError, InvalidNameError, ProviderNotFoundError
from colmena.icon import Icon
from colmena.providers.protocol import IconProvider
from colmena.renderer import IconRenderer
from colmena.sprite import SpriteSheet
from colmena.stack import IconStack
from colmena.utils.logger import get_logger

logger = get_logger(__name__)


def parse_icon_name(name: str, default_prefix: str | None = None) -> tuple[str, str]:
    """Split an icon name into ``(prefix, local_name)``.

    Args:
        name: Name as given by the caller (``"tabler:home"`` or ``"home"``)
        default_prefix: Prefix used when the name has none

    Returns:
        Tuple of prefix and local name

    Raises:
        InvalidNameError: For empty names, an empty prefix or local part,
            or a bare name without a default prefix

    Examples:
        >>> parse_icon_name("tabler:home")
        ('tabler', 'home')
        >>> parse_icon_name("home", "ui")
        ('ui', 'home')
        >>> parse_icon_name("mdi:a:b")
        ('mdi', 'a:b')
    """
    stripped = name.strip()
    if not stripped:
        raise InvalidNameError(name)

    if ":" in stripped:
        prefix, _, local_name = stripped.partition(":")
        if not prefix or not local_name:
            raise InvalidNameError(name)
        return prefix, local_name

    if default_prefix is None:
        raise InvalidNameError(
            name, f"Icon name {stripped!r} has no prefix and no default prefix is set"
        )
    return default_prefix, stripped


class IconManager:
    """Resolves icon names to rendered icons.

    Args:
        renderer: Renderer applying default attributes (a fresh one if omitted)
        default_prefix: Prefix for names given without one
        fallback_icon: Icon name substituted when a lookup misses
        ignore_not_found: Return an empty icon instead of raising on misses

    Thread Safety:
        Configure before sharing. Lookups only read the registries, but
        registration is not synchronized.
    """

    __slots__ = (
        "_aliases",
        "_fallback_icon",
        "_ignore_not_found",
        "_prefix_fallbacks",
        "_providers",
        "_renderer",
        "_sprite_sheet",
        "default_prefix",
    )

    def __init__(
        self,
        renderer: IconRenderer | None = None,
        *,
        default_prefix: str | None = None,
        fallback_icon: str | None = None,
        ignore_not_found: bool = False,
    ) -> None:
        self._renderer = renderer if renderer is not None else IconRenderer()
        self._providers: dict[str, IconProvider] = {}
        self._aliases: dict[str, str] = {}
        self._prefix_fallbacks: dict[str, str] = {}
        self._fallback_icon = fallback_icon
        self._ignore_not_found = ignore_not_found
        self._sprite_sheet: SpriteSheet | None = None
        self.default_prefix = default_prefix

    # =========================================================================
    # Registry
    # =========================================================================

    def register(self, prefix: str, provider: IconProvider) -> IconManager:
        """Register a provider for a prefix, replacing any previous one.

        Returns:
            Self for chaining
        """
        self._providers[prefix] = provider
        return self

    def get_provider(self, prefix: str) -> IconProvider | None:
        return self._providers.get(prefix)

    def has_provider(self, prefix: str) -> bool:
        return prefix in self._providers

    @property
    def registered_prefixes(self) -> list[str]:
        """Prefixes in registration order."""
        return list(self._providers)

    @property
    def renderer(self) -> IconRenderer:
        return self._renderer

    @renderer.setter
    def renderer(self, renderer: IconRenderer) -> None:
        self._renderer = renderer

    # =========================================================================
    # Aliases and policies
    # =========================================================================

    def set_alias(self, alias: str, target: str) -> IconManager:
        """Make ``alias`` resolve to ``target`` (another full icon name)."""
        self._aliases[alias] = target
        return self

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    @property
    def fallback_icon(self) -> str | None:
        return self._fallback_icon

    @fallback_icon.setter
    def fallback_icon(self, name: str | None) -> None:
        self._fallback_icon = name

    def set_fallback_icon_for_prefix(self, prefix: str, name: str) -> IconManager:
        """Use ``name`` as the fallback for misses under ``prefix``.

        Takes precedence over the global fallback icon.
        """
        self._prefix_fallbacks[prefix] = name
        return self

    def get_fallback_icon_for_prefix(self, prefix: str) -> str | None:
        return self._prefix_fallbacks.get(prefix)

    @property
    def ignore_not_found(self) -> bool:
        return self._ignore_not_found

    @ignore_not_found.setter
    def ignore_not_found(self, value: bool) -> None:
        self._ignore_not_found = value

    # =========================================================================
    # Resolution
    # =========================================================================

    def get(
        self,
        name: str,
        attributes: Mapping[str, AttributeValue] | None = None,
    ) -> Icon:
        """Resolve and render an icon.

        Args:
            name: Icon name or alias
            attributes: Caller attributes, applied on top of all defaults

        Returns:
            Rendered Icon, or an empty Icon under ``ignore_not_found``

        Raises:
            InvalidNameError: If the name is malformed
            ProviderNotFoundError: If no provider serves the prefix
            IconNotFoundError: If the icon and any fallback are missing
            ProviderError: If a provider fails to load its source
        """
        return self._resolve(name, attributes, resolving_fallback=False)

    def has(self, name: str) -> bool:
        """Check whether a name resolves, without ever raising for bad names."""
        try:
            prefix, local_name = parse_icon_name(self._resolve_alias(name), self.default_prefix)
        except InvalidNameError:
            return False

        provider = self._providers.get(prefix)
        if provider is None:
            return False
        return provider.has(local_name)

    def all(self, prefix: str) -> list[str]:
        """List the names a prefix's provider knows (empty if unregistered)."""
        provider = self._providers.get(prefix)
        if provider is None:
            return []
        return list(provider.all())

    def stack(self, *names: str) -> IconStack:
        """Resolve several icons into an IconStack, first name at the bottom."""
        stack = IconStack()
        for name in names:
            stack = stack.push(self.get(name))
        return stack

    def sprite_sheet(self) -> SpriteSheet:
        """The manager's sprite sheet, created on first use."""
        if self._sprite_sheet is None:
            self._sprite_sheet = SpriteSheet(self)
        return self._sprite_sheet

    def _resolve(
        self,
        name: str,
        attributes: Mapping[str, AttributeValue] | None,
        *,
        resolving_fallback: bool,
    ) -> Icon:
        name = self._resolve_alias(name)
        prefix, local_name = parse_icon_name(name, self.default_prefix)

        provider = self._providers.get(prefix)
        if provider is None:
            if self._ignore_not_found:
                return Icon()
            raise ProviderNotFoundError(name, prefix)

        icon = provider.get(local_name)
        if icon is not None:
            return self._renderer.render(icon, prefix, attributes, local_name)

        if not resolving_fallback:
            fallback = self._prefix_fallbacks.get(prefix, self._fallback_icon)
            if fallback is not None and fallback.strip() != name.strip():
                try:
                    return self._resolve(fallback, attributes, resolving_fallback=True)
                except ColmenaError as e:
                    logger.debug("Fallback %r for %r failed: %s", fallback, name, e)

        if self._ignore_not_found:
            return Icon()
        raise IconNotFoundError(name)

    def _resolve_alias(self, name: str) -> str:
        """Follow the alias table until a non-alias name, stopping on cycles."""
        seen: set[str] = set()
        current = name
        while (key := current.strip()) in self._aliases and key not in seen:
            seen.add(key)
            current = self._aliases[key]
        return current

    def __repr__(self) -> str:
        return f"IconManager(prefixes={self.registered_prefixes!r})"
