"""Hashing helpers for cache keys and file sharding.

Example:
    >>> from colmena.utils.hashing import hash_str
    >>> hash_str("hello", truncate=16)
    '2cf24dba5fb0a30e'
"""

import hashlib


def hash_str(
    content: str,
    truncate: int | None = None,
    algorithm: str = "sha256",
) -> str:
    """Hash string content using specified algorithm.

    Args:
        content: String content to hash
        truncate: Truncate result to N characters (None = full hash)
        algorithm: Hash algorithm ('sha256', 'md5')

    Returns:
        Hex digest of hash, optionally truncated

    Examples:
        >>> hash_str("hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    hasher = hashlib.new(algorithm)
    hasher.update(content.encode("utf-8"))
    digest = hasher.hexdigest()
    return digest[:truncate] if truncate is not None else digest


def cache_key(namespace: str, *parts: str) -> str:
    """Build a cache key safe for any IconCache implementation.

    The variable parts are hashed so the key never contains reserved
    characters, whatever the icon name or file path looks like.

    Examples:
        >>> cache_key("iconify", "tabler", "home").startswith("iconify_")
        True
    """
    return f"{namespace}_{hash_str('.'.join(parts))}"
