"""Composable sanitization policies for SVG inner content.

Provides string -> string transforms for stripping unsafe or noisy markup
from icon bodies before they are trusted. Policies compose via the |
operator, applied left to right.

Example:
    >>> from colmena.sanitize import strip_scripts, strip_event_handlers
    >>> policy = strip_scripts | strip_event_handlers
    >>> policy('<path onclick="x()" d="M0 0"/><script>alert(1)</script>')
    '<path d="M0 0"/>'
"""

import re
from collections.abc import Callable

_SCRIPT_PATTERN = re.compile(r"<script\b[^>]*>.*?</script\s*>|<script\b[^>]*/>", re.I | re.S)
_FOREIGN_OBJECT_PATTERN = re.compile(
    r"<foreignObject\b[^>]*>.*?</foreignObject\s*>|<foreignObject\b[^>]*/>", re.I | re.S
)
# An opening tag with no matching close swallows the rest of the content
_UNCLOSED_SCRIPT_PATTERN = re.compile(r"<script\b.*\Z", re.I | re.S)
_UNCLOSED_FOREIGN_OBJECT_PATTERN = re.compile(r"<foreignObject\b.*\Z", re.I | re.S)
# on* handlers after whitespace or "/": double-quoted, single-quoted or unquoted values
_EVENT_HANDLER_PATTERN = re.compile(
    r"""([\s/]+)on\w+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]*)""", re.I
)
_JAVASCRIPT_URI_PATTERN = re.compile(
    r"""\b(href|src|xlink:href)\s*=\s*"""
    r"""(?:"\s*javascript:[^"]*"|'\s*javascript:[^']*'|javascript:[^\s>]*)""",
    re.I,
)
# External references on <use> and <image> only; in-document "#id" refs stay
_EXTERNAL_REF_TAG_PATTERN = re.compile(r"<(use|image)\b[^>]*>", re.I)
_EXTERNAL_REF_ATTR_PATTERN = re.compile(
    r"""\s+(?:href|src|xlink:href)\s*=\s*(["'])\s*https?://[^"']*\1""", re.I
)
_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.S)
_METADATA_PATTERN = re.compile(
    r"<(title|desc|metadata)\b[^>]*>.*?</\1\s*>|<(?:title|desc|metadata)\b[^>]*/>", re.I | re.S
)
_INTER_TAG_WHITESPACE_PATTERN = re.compile(r">\s+<")


class Policy:
    """Wrapper for str -> str transform, supports composition via |."""

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[str], str]) -> None:
        self._fn = fn

    def __call__(self, content: str) -> str:
        return self._fn(content)

    def __or__(self, other: "Policy") -> "Policy":
        """Chain policies: (self | other)(content) applies self then other."""

        def chained(content: str) -> str:
            return other._fn(self._fn(content))

        return Policy(chained)


def _sub_until_stable(
    pattern: re.Pattern[str], repl: str | Callable[[re.Match[str]], str], content: str
) -> str:
    """Apply ``pattern.sub`` until the content stops changing.

    A single pass is not enough: removing ``<script>`` from
    ``<scr<script></script>ipt>`` joins the halves into a new tag.
    """
    while True:
        cleaned = pattern.sub(repl, content)
        if cleaned == content:
            return cleaned
        content = cleaned


def _strip_scripts(content: str) -> str:
    """Remove <script> elements and their content, closed or not."""
    content = _sub_until_stable(_SCRIPT_PATTERN, "", content)
    return _UNCLOSED_SCRIPT_PATTERN.sub("", content)


def _strip_foreign_objects(content: str) -> str:
    """Remove <foreignObject> elements, which can embed arbitrary HTML."""
    content = _sub_until_stable(_FOREIGN_OBJECT_PATTERN, "", content)
    return _UNCLOSED_FOREIGN_OBJECT_PATTERN.sub("", content)


def _strip_event_handlers(content: str) -> str:
    """Remove on* event-handler attributes."""

    def drop(match: re.Match[str]) -> str:
        # "<path/onclick=.. d=..>" still needs a separator after removal
        return " " if "/" in match.group(1) else ""

    return _sub_until_stable(_EVENT_HANDLER_PATTERN, drop, content)


def _neutralize_javascript_uris(content: str) -> str:
    """Replace javascript: URIs in href/src/xlink:href with "#"."""
    return _JAVASCRIPT_URI_PATTERN.sub(r'\1="#"', content)


def _strip_external_references(content: str) -> str:
    """Drop http(s):// href/src attributes from <use> and <image> tags."""

    def clean_tag(match: re.Match[str]) -> str:
        return _EXTERNAL_REF_ATTR_PATTERN.sub("", match.group(0))

    return _EXTERNAL_REF_TAG_PATTERN.sub(clean_tag, content)


def _strip_comments(content: str) -> str:
    """Remove XML comments (editor banners and the like)."""
    return _COMMENT_PATTERN.sub("", content)


def _strip_metadata(content: str) -> str:
    """Remove <title>, <desc> and <metadata> elements."""
    return _METADATA_PATTERN.sub("", content)


def _collapse_whitespace(content: str) -> str:
    """Remove whitespace between tags; text inside elements is kept."""
    return _INTER_TAG_WHITESPACE_PATTERN.sub("><", content).strip()


# Composable Policy instances (use with | operator)
strip_scripts = Policy(_strip_scripts)
strip_foreign_objects = Policy(_strip_foreign_objects)
strip_event_handlers = Policy(_strip_event_handlers)
neutralize_javascript_uris = Policy(_neutralize_javascript_uris)
strip_external_references = Policy(_strip_external_references)
strip_comments = Policy(_strip_comments)
strip_metadata = Policy(_strip_metadata)
collapse_whitespace = Policy(_collapse_whitespace)


def repeat_until_stable(policy: Policy) -> Policy:
    """Re-apply ``policy`` until its output no longer changes.

    Needed when one removal can rebuild markup an earlier step already
    looked for (an event handler removed from ``<scr onx=""ipt>``).
    """

    def repeated(content: str) -> str:
        while True:
            cleaned = policy(content)
            if cleaned == content:
                return cleaned
            content = cleaned

    return Policy(repeated)


# Pre-built policy sets
security: Policy = repeat_until_stable(
    strip_scripts
    | strip_foreign_objects
    | strip_event_handlers
    | neutralize_javascript_uris
    | strip_external_references
)
# Noise goes first so that removing it cannot reassemble unsafe markup
default_policy: Policy = strip_comments | strip_metadata | security | collapse_whitespace


def sanitize(content: str, *, policy: Policy | Callable[[str], str] = default_policy) -> str:
    """Apply a sanitization policy to SVG inner content.

    Args:
        content: Markup found inside the root <svg> element.
        policy: Policy or callable str -> str.

    Returns:
        Sanitized markup.
    """
    return policy(content)


__all__ = [
    "Policy",
    "collapse_whitespace",
    "default_policy",
    "neutralize_javascript_uris",
    "repeat_until_stable",
    "sanitize",
    "security",
    "strip_comments",
    "strip_event_handlers",
    "strip_external_references",
    "strip_foreign_objects",
    "strip_metadata",
    "strip_scripts",
]
