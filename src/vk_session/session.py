"""VK API sessions (sync + async).

A session behaves like a connection to the VK method API. Any method the
API supports can be invoked as if it were a method of the session::

    session = Session(app_id, access_token)
    session.friends.get(uid=12)
    # => [{"uid": "123"}, {"uid": "321"}]

No persistent connection is held, so there is nothing to close.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, TypeVar

import httpx

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS, SessionConfig, normalize_api_url
from .errors import InvalidArgumentError, ServerError
from .hooks import CallHooks, Hook, RemoteCall, Stage
from .naming import full_method_name
from .protocols import AsyncFormPoster, SyncFormPoster
from .transport import ACCESS_TOKEN_PARAM, AsyncTransport, SyncTransport

SessionT = TypeVar("SessionT", bound="BaseSession")


@dataclass(frozen=True, slots=True)
class RemoteMethod:
    """A remote method bound to a session, produced by attribute access."""

    session: BaseSession
    name: str

    @property
    def full_name(self) -> str:
        return full_method_name(self.name, self.session.namespace_prefix)

    def __call__(self, params: MutableMapping[str, Any] | None = None, /, **kwargs: Any) -> Any:
        return self.session.call(self.name, params, **kwargs)


class BaseSession(ABC):
    """Dispatch and request construction shared by sync and async sessions.

    Attribute access resolves in this order: real attributes, then the
    recognized namespaces in ``NAMESPACES`` (memoized child sessions), then
    any other public name as a remote method of the current namespace. A
    remote method named exactly like a namespace is therefore unreachable
    through attributes; use ``call()`` for it.
    """

    NAMESPACES: ClassVar[frozenset[str]] = frozenset(
        {
            "users",
            "friends",
            "photos",
            "wall",
            "audio",
            "video",
            "places",
            "secure",
            "language",
            "notes",
            "pages",
            "offers",
            "questions",
            "messages",
            "newsfeed",
            "status",
            "polls",
            "subscriptions",
            "likes",
        }
    )

    def __init__(
        self,
        app_id: Any,
        access_token: str,
        namespace_prefix: str | None = None,
        *,
        poster: SyncFormPoster | AsyncFormPoster,
        api_url: str = DEFAULT_API_URL,
        hooks: CallHooks | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not isinstance(access_token, str):
            raise InvalidArgumentError("access_token must be a str")

        self.app_id = app_id
        self.access_token = access_token
        self._namespace_prefix = namespace_prefix
        self.api_url = normalize_api_url(api_url)
        self._poster = poster
        self._hooks = hooks if hooks is not None else CallHooks()
        self._logger = logger or logging.getLogger(__name__)
        self._children: dict[str, BaseSession] = {}
        self._children_lock = threading.Lock()

    @classmethod
    def from_config(cls: type[SessionT], config: SessionConfig, **kwargs: Any) -> SessionT:
        # A missing token fails the str check in __init__.
        kwargs.setdefault("api_url", config.api_url)
        kwargs.setdefault("timeout_seconds", config.timeout_seconds)
        return cls(config.app_id, config.access_token, **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls: type[SessionT], **kwargs: Any) -> SessionT:
        return cls.from_config(SessionConfig.from_env(), **kwargs)

    @classmethod
    def from_profile(
        cls: type[SessionT],
        profile: str | None = None,
        *,
        config_path: str | Path | None = None,
        **kwargs: Any,
    ) -> SessionT:
        return cls.from_config(SessionConfig.from_profile(profile, config_path=config_path), **kwargs)

    @property
    def namespace_prefix(self) -> str | None:
        return self._namespace_prefix

    def namespace(self: SessionT, name: str) -> SessionT:
        """Return the child session bound to ``name``, creating it once.

        Unlike attribute access this accepts namespaces outside
        ``NAMESPACES``, e.g. ``session.namespace("groups").get_by_id(...)``.
        """
        if not name:
            raise ValueError("namespace name must be non-empty")

        child = self._children.get(name)
        if child is not None:
            return child  # type: ignore[return-value]

        with self._children_lock:
            child = self._children.get(name)
            if child is None:
                child = self._spawn(name)
                self._children[name] = child
        return child  # type: ignore[return-value]

    def invoke(self, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """Resolve ``name`` the way attribute access does and apply it.

        Recognized namespaces return their child session; every other name
        is called as a remote method with the given arguments.
        """
        if name in self.NAMESPACES:
            if args or kwargs:
                raise TypeError(f"namespace {name!r} takes no arguments")
            return self.namespace(name)
        return self.call(name, *args, **kwargs)

    @abstractmethod
    def call(self, method: str, params: MutableMapping[str, Any] | None = None, /, **kwargs: Any) -> Any: ...

    def hook(self, stage: Stage, pattern: str = "*") -> Callable[[Hook], Hook]:
        """Subscribe the decorated function to ``stage`` for methods matching ``pattern``.

        Hooks are shared with every namespace of this session, so
        ``session.hook("after", "friends.*")`` also sees ``session.friends``
        calls. ``before`` hooks get the ``RemoteCall``; ``after`` hooks also
        get the result and ``error`` hooks the raised exception.
        """

        def decorator(func: Hook) -> Hook:
            self._hooks.subscribe(stage, pattern, func)
            return func

        return decorator

    def before(self, pattern: str = "*") -> Callable[[Hook], Hook]:
        return self.hook("before", pattern)

    def after(self, pattern: str = "*") -> Callable[[Hook], Hook]:
        return self.hook("after", pattern)

    def on_error(self, pattern: str = "*") -> Callable[[Hook], Hook]:
        return self.hook("error", pattern)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not real attributes.
        if name.startswith("_"):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        if name in self.NAMESPACES:
            return self.namespace(name)
        return RemoteMethod(self, name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(app_id={self.app_id!r}, namespace_prefix={self._namespace_prefix!r})"

    def _spawn(self: SessionT, name: str) -> SessionT:
        return type(self)(
            self.app_id,
            self.access_token,
            name,
            api_url=self.api_url,
            poster=self._poster,
            hooks=self._hooks,
            logger=self._logger,
        )

    def _prepare(
        self,
        method: str,
        params: MutableMapping[str, Any] | Mapping[str, Any] | None,
        extra: dict[str, Any],
    ) -> RemoteCall:
        full_name = full_method_name(method, self._namespace_prefix)

        if params is None:
            params = {}
        elif not isinstance(params, MutableMapping):
            params = dict(params)
        params.update(extra)
        params[ACCESS_TOKEN_PARAM] = self.access_token

        return RemoteCall(method=full_name, url=f"{self.api_url}/method/{full_name}", params=params)  # type: ignore[arg-type]

    def _unwrap(self, call: RemoteCall, body: Any) -> Any:
        if not isinstance(body, Mapping):
            raise TypeError(f"{call.method} returned {type(body).__name__}, expected a JSON object")

        error = body.get("error")
        if error:
            server_error = ServerError(self, call.method, call.params, error)
            self._logger.debug("%s failed with error code %s", call.method, server_error.error_code)
            raise server_error
        return body.get("response")


class Session(BaseSession):
    """Synchronous VK API session."""

    def __init__(
        self,
        app_id: Any,
        access_token: str,
        namespace_prefix: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
        poster: SyncFormPoster | None = None,
        hooks: CallHooks | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            app_id,
            access_token,
            namespace_prefix,
            poster=poster or SyncTransport(http_client, timeout_seconds=timeout_seconds),
            api_url=api_url,
            hooks=hooks,
            logger=logger,
        )

    def call(self, method: str, params: MutableMapping[str, Any] | None = None, /, **kwargs: Any) -> Any:
        """Call the VK API method ``method`` in this session's namespace.

        ``method`` is a bare name such as ``"get"`` or ``"get_profiles"``; it
        is camelized and prefixed with the namespace (``"friends.get"``).
        Keyword arguments are merged into ``params``.

        ``params`` is mutated in place: ``access_token`` is written into it,
        replacing any value the caller put there.

        Returns the ``response`` value of the answer. Raises ``ServerError``
        when the answer carries an ``error``. Transport and decoding errors
        propagate unchanged.
        """
        call = self._prepare(method, params, kwargs)
        self._logger.debug("calling %s", call.method)
        self._hooks.fire("before", call)

        try:
            body = self._poster.post_form(call.url, call.params)
            result = self._unwrap(call, body)
        except Exception as error:
            self._hooks.fire("error", call, error)
            raise

        self._hooks.fire("after", call, result)
        return result


class AsyncSession(BaseSession):
    """Asynchronous VK API session; ``call`` and remote methods are awaitable."""

    def __init__(
        self,
        app_id: Any,
        access_token: str,
        namespace_prefix: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
        poster: AsyncFormPoster | None = None,
        hooks: CallHooks | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            app_id,
            access_token,
            namespace_prefix,
            poster=poster or AsyncTransport(http_client, timeout_seconds=timeout_seconds),
            api_url=api_url,
            hooks=hooks,
            logger=logger,
        )

    async def call(self, method: str, params: MutableMapping[str, Any] | None = None, /, **kwargs: Any) -> Any:
        """Awaitable counterpart of ``Session.call``; ``params`` is mutated the same way."""
        call = self._prepare(method, params, kwargs)
        self._logger.debug("calling %s", call.method)
        await self._hooks.fire_async("before", call)

        try:
            body = await self._poster.post_form(call.url, call.params)
            result = self._unwrap(call, body)
        except Exception as error:
            await self._hooks.fire_async("error", call, error)
            raise

        await self._hooks.fire_async("after", call, result)
        return result
