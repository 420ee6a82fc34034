from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from vk_session import AsyncSession, ServerError, Session
from vk_session.hooks import REDACTED, CallHooks, RemoteCall


@dataclass
class _Poster:
    failing: set[str] = field(default_factory=set)

    def post_form(self, url: str, data: dict[str, Any]) -> Any:
        if url.rsplit("/", 1)[-1] in self.failing:
            return {"error": {"error_code": 214, "error_msg": "Access to adding post denied"}}
        return {"response": {"count": 0}}


def _call(method: str, **params: Any) -> RemoteCall:
    return RemoteCall(method=method, url=f"https://api.vk.com/method/{method}", params=params)


def test_namespace_pattern_matches_every_method_of_the_namespace() -> None:
    hooks = CallHooks()
    hooks.subscribe("before", "friends.*", lambda call: None)

    assert len(hooks.matching("before", "friends.get")) == 1
    assert len(hooks.matching("before", "friends.getOnline")) == 1
    assert hooks.matching("before", "users.get") == []
    assert hooks.matching("before", "getProfiles") == []


def test_hooks_fire_in_registration_order() -> None:
    hooks = CallHooks()
    order: list[str] = []
    hooks.subscribe("after", "wall.post", lambda call, result: order.append("exact"))
    hooks.subscribe("after", "*", lambda call, result: order.append("any"))
    hooks.subscribe("after", "wall.*", lambda call, result: order.append("namespace"))

    hooks.fire("after", _call("wall.post"), {"post_id": 1})

    assert order == ["exact", "any", "namespace"]


def test_unknown_stage_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown hook stage"):
        CallHooks().subscribe("retry", "*", lambda call: None)  # type: ignore[arg-type]


def test_hooks_see_token_masked_but_request_keeps_it() -> None:
    hooks = CallHooks()
    seen: list[dict[str, Any]] = []
    hooks.subscribe("before", "*", lambda call: seen.append(dict(call.params)))
    call = _call("users.get", user_ids="1", access_token="secret")

    hooks.fire("before", call)

    assert seen == [{"user_ids": "1", "access_token": REDACTED}]
    assert call.params["access_token"] == "secret"


def test_remote_call_exposes_its_namespace() -> None:
    assert _call("friends.getOnline").namespace == "friends"
    assert _call("getProfiles").namespace is None


def test_sync_fire_rejects_coroutine_hooks() -> None:
    hooks = CallHooks()

    async def audit(call: RemoteCall) -> None:
        return None

    hooks.subscribe("before", "*", audit)
    with pytest.raises(TypeError, match="AsyncSession"):
        hooks.fire("before", _call("status.get"))


def test_session_hooks_cover_every_namespace_and_server_errors() -> None:
    session = Session(1, "secret", poster=_Poster(failing={"wall.post"}))
    seen: list[tuple[str, str, str | None]] = []

    @session.before("wall.*")
    def before(call: RemoteCall) -> None:
        seen.append(("before", call.method, call.params.get("access_token")))

    @session.on_error()
    def on_error(call: RemoteCall, error: Exception) -> None:
        assert isinstance(error, ServerError)
        assert error.params["access_token"] == "secret"
        seen.append(("error", call.method, call.params.get("access_token")))

    session.friends.get()
    with pytest.raises(ServerError):
        session.wall.post(message="hi")

    assert seen == [
        ("before", "wall.post", REDACTED),
        ("error", "wall.post", REDACTED),
    ]


def test_session_hook_decorator_with_explicit_stage() -> None:
    session = Session(1, "secret", poster=_Poster())
    results: list[Any] = []

    @session.hook("after", "getProfiles")
    def collect(call: RemoteCall, result: Any) -> None:
        results.append(result)

    session.get_profiles(uids="1")
    session.users.get()

    assert results == [{"count": 0}]


@pytest.mark.asyncio
async def test_async_session_awaits_coroutine_hooks() -> None:
    class AsyncPoster:
        async def post_form(self, url: str, data: dict[str, Any]) -> Any:
            return {"response": [1]}

    session = AsyncSession(1, "secret", poster=AsyncPoster())
    events: list[str] = []

    @session.after("likes.*")
    async def after(call: RemoteCall, result: Any) -> None:
        await asyncio.sleep(0)
        events.append(f"{call.method}:{result}")

    await session.likes.get_list(type="post")

    assert events == ["likes.getList:[1]"]
