"""Process-wide manager slot for scripting and template helpers.

Passing an IconManager explicitly is the primary API. This module offers
one optional global slot for contexts where threading a manager through
is impractical (template globals, short scripts).

Usage:
    from colmena.shared import set_manager, icon

    set_manager(IconConfig().add_iconify_set("tabler").build())
    html = icon("tabler:home", {"class": "w-6"})

Thread Safety:
    set_manager() and reset_manager() are protected by a lock. Call them
    once at startup, before concurrent rendering; swapping the manager
    while other threads render means a request may see either manager.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING

from colmena.errors import ManagerNotSetError

if TYPE_CHECKING:
    from colmena.attributes import AttributeValue
    from colmena.manager import IconManager

_manager: IconManager | None = None
_manager_lock = threading.Lock()


def set_manager(manager: IconManager) -> None:
    """Install the process-wide manager."""
    global _manager
    with _manager_lock:
        _manager = manager


def get_manager() -> IconManager:
    """Return the process-wide manager.

    Raises:
        ManagerNotSetError: If set_manager() has not been called
    """
    # Simple read is atomic under GIL; no lock needed for reads
    manager = _manager
    if manager is None:
        raise ManagerNotSetError("No IconManager configured; call set_manager() first")
    return manager


def has_manager() -> bool:
    """Check if a process-wide manager is configured."""
    return _manager is not None


def reset_manager() -> None:
    """Clear the process-wide manager (mainly for tests)."""
    global _manager
    with _manager_lock:
        _manager = None


def icon(name: str, attributes: Mapping[str, AttributeValue] | None = None) -> str:
    """Render an icon to markup with the process-wide manager.

    Raises:
        ManagerNotSetError: If no manager is configured
        InvalidNameError: If the name is malformed
        IconNotFoundError: If the icon cannot be resolved
    """
    return get_manager().get(name, attributes).to_markup()


__all__ = [
    "get_manager",
    "has_manager",
    "icon",
    "reset_manager",
    "set_manager",
]
