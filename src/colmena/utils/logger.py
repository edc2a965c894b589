"""Logger lookup for colmena modules.

Every module logs through ``get_logger(__name__)`` so all records live
under the ``colmena`` namespace. The library never installs handlers;
applications decide where icon-resolution logs go.

Example:
    >>> from colmena.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Cache hit for %s", "tabler:home")
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "colmena"


def get_logger(name: str) -> logging.Logger:
    """Return the standard library logger for ``name`` under ``colmena.``.

    Args:
        name: Logger name (typically __name__)

    Example:
        >>> get_logger("providers.iconify").name
        'colmena.providers.iconify'
        >>> get_logger("colmena.cache").name
        'colmena.cache'
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
