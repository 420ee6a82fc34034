"""Protocol contracts for vk-session extension points."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SyncFormPoster(Protocol):
    def post_form(self, url: str, data: dict[str, Any]) -> Any: ...


@runtime_checkable
class AsyncFormPoster(Protocol):
    async def post_form(self, url: str, data: dict[str, Any]) -> Any: ...
