"""Error hierarchy for the vk-session client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .models import ErrorPayload

if TYPE_CHECKING:
    from .session import BaseSession


class VkSessionError(Exception):
    """Base class for all client errors."""


class InvalidArgumentError(VkSessionError, TypeError):
    """Raised when a session is built from malformed credentials."""


class ServerError(VkSessionError):
    """Raised when the API answers with an ``error`` payload.

    Carries the originating session, the full method name that was sent,
    the exact parameters posted (including ``access_token``) and the raw
    error payload as decoded from the response.
    """

    def __init__(self, session: BaseSession, method: str, params: dict[str, Any], error: Any) -> None:
        super().__init__(f"Server side error calling VK method: {error}")
        self.session = session
        self.method = method
        self.params = params
        self.error = error
        self._payload = ErrorPayload.from_raw(error)

    @property
    def error_code(self) -> int | None:
        return self._payload.error_code

    @property
    def error_msg(self) -> str | None:
        return self._payload.error_msg

    @property
    def request_params(self) -> list[dict[str, Any]] | None:
        return self._payload.request_params
