"""vk-session: call any VK API method as if it were a local method.

This module uses lazy exports so lightweight utilities (for example config parsing)
can be imported without immediately importing transport dependencies.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "AsyncFormPoster",
    "AsyncSession",
    "CallHooks",
    "ErrorPayload",
    "InvalidArgumentError",
    "RemoteCall",
    "RemoteMethod",
    "ServerError",
    "Session",
    "SessionConfig",
    "SyncFormPoster",
    "VkSessionError",
    "camelize_lower",
]

_EXPORTS: dict[str, tuple[str, str]] = {
    "AsyncSession": (".session", "AsyncSession"),
    "RemoteMethod": (".session", "RemoteMethod"),
    "Session": (".session", "Session"),
    "SessionConfig": (".config", "SessionConfig"),
    "InvalidArgumentError": (".errors", "InvalidArgumentError"),
    "ServerError": (".errors", "ServerError"),
    "VkSessionError": (".errors", "VkSessionError"),
    "ErrorPayload": (".models", "ErrorPayload"),
    "CallHooks": (".hooks", "CallHooks"),
    "RemoteCall": (".hooks", "RemoteCall"),
    "camelize_lower": (".naming", "camelize_lower"),
    "AsyncFormPoster": (".protocols", "AsyncFormPoster"),
    "SyncFormPoster": (".protocols", "SyncFormPoster"),
}

if TYPE_CHECKING:
    from .config import SessionConfig
    from .errors import InvalidArgumentError, ServerError, VkSessionError
    from .hooks import CallHooks, RemoteCall
    from .models import ErrorPayload
    from .naming import camelize_lower
    from .protocols import AsyncFormPoster, SyncFormPoster
    from .session import AsyncSession, RemoteMethod, Session


def __getattr__(name: str) -> Any:
    module_info = _EXPORTS.get(name)
    if module_info is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute = module_info
    module = import_module(module_name, __name__)
    value = getattr(module, attribute)
    globals()[name] = value
    return value
