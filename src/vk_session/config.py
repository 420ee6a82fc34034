"""Configuration helpers for vk-session."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

DEFAULT_API_URL = "https://api.vk.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_PROFILE = "default"


@dataclass(slots=True)
class SessionConfig:
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    app_id: str | None = None
    access_token: str | None = None

    def __post_init__(self) -> None:
        self.api_url = normalize_api_url(self.api_url)

    @classmethod
    def from_env(cls) -> "SessionConfig":
        return cls(
            api_url=_setting(os.getenv("VK_API_BASE")) or DEFAULT_API_URL,
            timeout_seconds=_timeout_from_ms(os.getenv("VK_API_TIMEOUT_MS")),
            app_id=_setting(os.getenv("VK_APP_ID")),
            access_token=_setting(os.getenv("VK_ACCESS_TOKEN")),
        )

    @classmethod
    def from_profile(
        cls,
        profile: str | None = None,
        *,
        config_path: str | Path | None = None,
    ) -> "SessionConfig":
        payload = load_config_file(config_path=config_path)
        selected_name = _setting(profile) or _setting(payload.get("currentProfile")) or DEFAULT_PROFILE

        profiles = payload.get("profiles")
        entry = profiles.get(selected_name) if isinstance(profiles, dict) else None
        if not isinstance(entry, dict):
            entry = {}

        return cls(
            api_url=_setting(entry.get("apiUrl")) or DEFAULT_API_URL,
            timeout_seconds=_timeout_from_ms(entry.get("timeoutMs")),
            # Application ids are numeric in VK's developer console.
            app_id=_setting(entry.get("appId"), allow_int=True),
            access_token=_setting(entry.get("accessToken")),
        )


def normalize_api_url(value: str | None) -> str:
    trimmed = (value or "").strip().rstrip("/")
    if not trimmed:
        return DEFAULT_API_URL
    # Tokens travel in the request body, so plaintext origins are refused.
    if urlsplit(trimmed).scheme.lower() != "https":
        raise ValueError(f"api_url must use https, got {value!r}")
    return trimmed


def default_config_path() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    root = Path(xdg) if xdg else Path.home() / ".config"
    return root / "vk-session" / "config.json"


def load_config_file(*, config_path: str | Path | None = None) -> dict[str, Any]:
    """Read the profile file; a missing, unreadable or non-object file yields no profiles."""
    path = Path(config_path) if config_path else default_config_path()
    empty: dict[str, Any] = {"currentProfile": DEFAULT_PROFILE, "profiles": {}}
    if not path.exists():
        return empty

    try:
        with path.open("r", encoding="utf-8") as handle:
            parsed = json.load(handle)
    except (OSError, json.JSONDecodeError):
        return empty

    return parsed if isinstance(parsed, dict) else empty


def _setting(value: Any, *, allow_int: bool = False) -> str | None:
    if allow_int and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def _timeout_from_ms(value: Any) -> float:
    raw = _setting(value, allow_int=True)
    try:
        milliseconds = int(raw) if raw else 0
    except ValueError:
        milliseconds = 0
    return milliseconds / 1000.0 if milliseconds > 0 else DEFAULT_TIMEOUT_SECONDS
