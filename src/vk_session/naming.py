"""Method-name normalization shared by sync and async sessions."""

from __future__ import annotations

import re

_FIRST_WORD_CHAR = re.compile(r"^\w")
_UNDERSCORE_SEGMENT = re.compile(r"_([a-z\d]*)", re.IGNORECASE)


def camelize_lower(name: str) -> str:
    """Convert ``name`` to the lower camel case the API dispatches on.

    ``"get_profiles"`` becomes ``"getProfiles"``, ``"GetById"`` becomes
    ``"getById"`` and already-camelized names pass through unchanged.
    Each underscore segment is capitalized, so ``"get_BY_id"`` becomes
    ``"getById"``.
    """
    lowered = _FIRST_WORD_CHAR.sub(lambda match: match.group(0).lower(), str(name), count=1)
    return _UNDERSCORE_SEGMENT.sub(lambda match: match.group(1).capitalize(), lowered)


def full_method_name(method: str, namespace_prefix: str | None = None) -> str:
    normalized = camelize_lower(method)
    if namespace_prefix:
        return f"{namespace_prefix}.{normalized}"
    return normalized
