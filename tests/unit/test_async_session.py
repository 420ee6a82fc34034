from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from vk_session import AsyncSession, ServerError


@dataclass
class _AsyncPoster:
    response: Any = field(default_factory=lambda: {"response": {"uid": "123"}})
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def post_form(self, url: str, data: dict[str, Any]) -> Any:
        self.calls.append({"url": url, "data": dict(data)})
        return self.response


@pytest.mark.asyncio
async def test_async_dynamic_method_returns_response() -> None:
    poster = _AsyncPoster()
    session = AsyncSession(1, "secret", poster=poster)

    result = await session.friends.get(uid=1)

    assert result == {"uid": "123"}
    assert poster.calls[0]["url"] == "https://api.vk.com/method/friends.get"
    assert poster.calls[0]["data"] == {"uid": 1, "access_token": "secret"}


@pytest.mark.asyncio
async def test_async_namespace_children_are_async_sessions() -> None:
    session = AsyncSession(1, "secret", poster=_AsyncPoster())

    assert isinstance(session.wall, AsyncSession)
    assert session.wall is session.wall


@pytest.mark.asyncio
async def test_async_server_error_is_raised() -> None:
    poster = _AsyncPoster(response={"error": {"error_code": 5, "error_msg": "bad token"}})
    session = AsyncSession(1, "secret", poster=poster)

    with pytest.raises(ServerError) as caught:
        await session.call("get_profiles")

    assert caught.value.method == "getProfiles"
    assert caught.value.error == {"error_code": 5, "error_msg": "bad token"}


@pytest.mark.asyncio
async def test_async_session_over_httpx_mock_transport() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"response": [{"uid": 1}]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        session = AsyncSession(1, "secret", http_client=client)
        result = await session.friends.get(uid=1)

    assert result == [{"uid": 1}]
    assert requests[0].url.path == "/method/friends.get"
    assert requests[0].content == b"uid=1&access_token=secret"


@pytest.mark.asyncio
async def test_async_hooks_are_awaited() -> None:
    session = AsyncSession(1, "secret", poster=_AsyncPoster())
    events: list[str] = []

    @session.before("users.get")
    async def before(call: Any) -> None:
        events.append(f"before:{call.method}")

    @session.after()
    async def after(call: Any, response: Any) -> None:
        events.append("after")

    await session.users.get()

    assert events == ["before:users.get", "after"]
