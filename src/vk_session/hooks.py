"""Call observers for vk-session.

Hooks subscribe to a stage (``before``, ``after`` or ``error``) with a
glob pattern over the full method name: ``"friends.get"`` matches one
method, ``"friends.*"`` a whole namespace, ``"*"`` every call. They fire in
registration order and see the outgoing parameters with the access token
masked, so they can log or audit without leaking credentials.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from fnmatch import fnmatchcase
from typing import Any, Literal

from .transport import ACCESS_TOKEN_PARAM

Stage = Literal["before", "after", "error"]
STAGES: tuple[Stage, ...] = ("before", "after", "error")
REDACTED = "***"

Hook = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class RemoteCall:
    method: str
    url: str
    params: Mapping[str, Any]

    @property
    def namespace(self) -> str | None:
        head, dot, _ = self.method.rpartition(".")
        return head if dot else None

    def redacted(self) -> RemoteCall:
        if ACCESS_TOKEN_PARAM not in self.params:
            return replace(self, params=dict(self.params))
        return replace(self, params={**self.params, ACCESS_TOKEN_PARAM: REDACTED})


@dataclass(slots=True)
class CallHooks:
    _subscriptions: list[tuple[Stage, str, Hook]] = field(default_factory=list)

    def subscribe(self, stage: Stage, pattern: str, hook: Hook) -> None:
        if stage not in STAGES:
            raise ValueError(f"unknown hook stage {stage!r}; expected one of: {', '.join(STAGES)}")
        if not callable(hook):
            raise TypeError(f"{stage} hook for {pattern!r} is not callable")
        self._subscriptions.append((stage, pattern, hook))

    def matching(self, stage: Stage, method: str) -> list[Hook]:
        return [
            hook
            for hook_stage, pattern, hook in self._subscriptions
            if hook_stage == stage and fnmatchcase(method, pattern)
        ]

    def fire(self, stage: Stage, call: RemoteCall, *extra: Any) -> None:
        hooks = self.matching(stage, call.method)
        if not hooks:
            return
        observed = call.redacted()
        for hook in hooks:
            pending = hook(observed, *extra)
            if inspect.isawaitable(pending):
                if inspect.iscoroutine(pending):
                    pending.close()
                raise TypeError(f"{stage} hook for {call.method} is async; register it on an AsyncSession")

    async def fire_async(self, stage: Stage, call: RemoteCall, *extra: Any) -> None:
        hooks = self.matching(stage, call.method)
        if not hooks:
            return
        observed = call.redacted()
        for hook in hooks:
            pending = hook(observed, *extra)
            if inspect.isawaitable(pending):
                await pending
