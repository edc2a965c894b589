"""Text helpers for SVG attribute output.

Example:
    >>> from colmena.utils.text import escape_html
    >>> escape_html('a "quoted" <value>')
    'a &quot;quoted&quot; &lt;value&gt;'
"""

from __future__ import annotations

import html as html_module
import re

# Attribute names allowed in serialized markup. Anything else is dropped
# so crafted keys cannot break out of the tag.
_SAFE_NAME_PATTERN = re.compile(r"[a-zA-Z_:][\w:.\-]*")


def escape_html(text: str) -> str:
    """Escape HTML special characters for safe use in attributes.

    Converts special characters to HTML entities:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#x27;

    Args:
        text: Text to escape

    Returns:
        HTML-escaped text safe for use in attribute values

    Examples:
        >>> escape_html("<script>alert('xss')</script>")
        '&lt;script&gt;alert(&#x27;xss&#x27;)&lt;/script&gt;'
    """
    if not text:
        return ""

    return html_module.escape(text, quote=True)


def is_safe_attribute_name(name: str) -> bool:
    """Check whether an attribute name may be written to markup."""
    return _SAFE_NAME_PATTERN.fullmatch(name) is not None


def format_number(value: int | float) -> str:
    """Format a number for SVG output without a trailing ``.0``.

    Examples:
        >>> format_number(24.0)
        '24'
        >>> format_number(22.5)
        '22.5'
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
