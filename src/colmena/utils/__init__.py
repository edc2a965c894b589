"""Utility modules for colmena.

Provides:
- text: escape_html, attribute-name checks and number formatting
- hashing: hash_str, cache_key for cache keys and file sharding
- logger: get_logger for logging
"""

from colmena.utils.hashing import cache_key, hash_str
from colmena.utils.logger import get_logger
from colmena.utils.text import escape_html, format_number, is_safe_attribute_name

__all__ = [
    "cache_key",
    "escape_html",
    "format_number",
    "get_logger",
    "hash_str",
    "is_safe_attribute_name",
]
