"""HTTPS form transport for vk-session."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS

ACCESS_TOKEN_PARAM = "access_token"


def encode_form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(encode_form_value(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(dict(value), ensure_ascii=False, separators=(",", ":"))
    return str(value)


def encode_form(params: Mapping[str, Any]) -> dict[str, str]:
    """Flatten call parameters into form fields, keeping their order.

    ``None`` values are dropped, booleans become ``1``/``0``, sequences are
    comma-joined and mappings are sent as JSON.
    """
    return {str(key): encode_form_value(value) for key, value in params.items() if value is not None}


def parse_response_body(response: httpx.Response) -> Any:
    # The API reports failures inside the JSON envelope whatever the status.
    # Only a body that is not JSON is a transport failure: httpx.HTTPStatusError
    # for a non-2xx status, the json.JSONDecodeError itself otherwise.
    try:
        return response.json()
    except json.JSONDecodeError:
        response.raise_for_status()
        raise


class SyncTransport:
    """POSTs one form per call.

    Without an injected ``client`` every request opens and closes its own
    connection. An injected client is used as-is and never closed here.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    def post_form(self, url: str, data: dict[str, Any]) -> Any:
        form = encode_form(data)
        if self._client is not None:
            return parse_response_body(self._client.post(url, data=form))

        with httpx.Client(timeout=self._timeout_seconds) as client:
            return parse_response_body(client.post(url, data=form))


class AsyncTransport:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    async def post_form(self, url: str, data: dict[str, Any]) -> Any:
        form = encode_form(data)
        if self._client is not None:
            return parse_response_body(await self._client.post(url, data=form))

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            return parse_response_body(await client.post(url, data=form))
