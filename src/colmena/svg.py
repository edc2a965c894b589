"""SVG document splitting.

Splits a complete ``<svg ...>...</svg>`` document into the root element's
attributes and its inner markup. The inner markup is sanitized with
:data:`colmena.sanitize.default_policy` before it is returned.

Only the root element is inspected; the content is kept as text and never
re-parsed, so namespaced children and unusual markup survive untouched.

Example:
    >>> parsed = parse('<svg width="24" viewBox="0 0 24 24"><path d="M0 0"/></svg>')
    >>> parsed.attributes
    {'width': '24', 'viewBox': '0 0 24 24'}
    >>> parsed.content
    '<path d="M0 0"/>'
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from colmena.errors import InvalidSvgError
from colmena.sanitize import Policy, default_policy

# Prolog, doctype, comments and processing instructions before the root
_PROLOG_PATTERN = re.compile(
    r"\A(?:\s+|<\?.*?\?>|<!DOCTYPE[^>\[]*(?:\[.*?\])?\s*>|<!--.*?-->)*", re.I | re.S
)
_ROOT_OPEN_PATTERN = re.compile(r"<svg(?=[\s>/])((?:[^>\"']|\"[^\"]*\"|'[^']*')*?)(/?)>", re.I)
_ROOT_CLOSE_PATTERN = re.compile(r"</svg\s*>\s*\Z", re.I)
_ATTRIBUTE_PATTERN = re.compile(r"""([^\s=/>"']+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>"']+))""")
_ENTITY_PATTERN = re.compile(r"&(amp|lt|gt|quot|apos|#\d+|#x[0-9a-fA-F]+);")

_NAMED_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}


@dataclass(frozen=True, slots=True)
class ParsedSvg:
    """Root attributes and inner content of an SVG document."""

    content: str
    attributes: dict[str, str] = field(default_factory=dict)


def parse(svg_text: str, *, policy: Policy = default_policy) -> ParsedSvg:
    """Split SVG markup into inner content and root attributes.

    Args:
        svg_text: Complete SVG document
        policy: Sanitization applied to the inner content

    Returns:
        ParsedSvg with sanitized content and decoded attribute values

    Raises:
        InvalidSvgError: If the text is empty or has no root <svg> element
    """
    text = svg_text.strip()
    if not text:
        raise InvalidSvgError("SVG content is empty")

    start = _PROLOG_PATTERN.match(text)
    offset = start.end() if start else 0

    opening = _ROOT_OPEN_PATTERN.match(text, offset)
    if opening is None:
        raise InvalidSvgError("Invalid SVG format: root element is not <svg>")

    attributes = _parse_attributes(opening.group(1))

    if opening.group(2):
        # Self-closing root: <svg .../>
        if text[opening.end():].strip():
            raise InvalidSvgError("Invalid SVG format: content after self-closing <svg/>")
        return ParsedSvg(content="", attributes=attributes)

    closing = _ROOT_CLOSE_PATTERN.search(text, opening.end())
    if closing is None:
        raise InvalidSvgError("Invalid SVG format: missing closing </svg> tag")

    inner = text[opening.end():closing.start()]
    return ParsedSvg(content=policy(inner.strip()), attributes=attributes)


def parse_file(path: str | Path, *, policy: Policy = default_policy) -> ParsedSvg:
    """Read and parse an SVG file.

    Raises:
        InvalidSvgError: If the file is missing, unreadable or not SVG
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise InvalidSvgError(f"SVG file not found: {file_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidSvgError(f"Failed to read SVG file {file_path}: {e}") from e
    return parse(text, policy=policy)


def is_valid_svg(svg_text: str) -> bool:
    """Check whether text parses as an SVG document."""
    try:
        parse(svg_text)
    except InvalidSvgError:
        return False
    return True


def _parse_attributes(source: str) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE_PATTERN.finditer(source):
        name = match.group(1)
        raw = next(g for g in match.groups()[1:] if g is not None)
        attributes[name] = _decode_entities(raw)
    return attributes


def _decode_entities(value: str) -> str:
    def replace(match: re.Match[str]) -> str:
        entity = match.group(1)
        if not entity.startswith("#"):
            return _NAMED_ENTITIES[entity]
        code = int(entity[2:], 16) if entity.startswith("#x") else int(entity[1:])
        try:
            return chr(code)
        except (ValueError, OverflowError):
            # Not a Unicode code point; keep the reference as written
            return match.group(0)

    return _ENTITY_PATTERN.sub(replace, value)


__all__ = [
    "ParsedSvg",
    "is_valid_svg",
    "parse",
    "parse_file",
]
