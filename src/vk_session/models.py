"""Public data models for vk-session."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, ValidatorFunctionWrapHandler, field_validator


class ErrorPayload(BaseModel):
    """Lenient view over the ``error`` object the API returns.

    Only the fields every API error carries are modelled; anything else is
    kept as extra data. Each field is read on its own: a malformed field
    reads as ``None`` without discarding its well-formed neighbours. The raw
    payload stays authoritative.
    """

    model_config = ConfigDict(extra="allow")

    error_code: int | None = None
    error_msg: str | None = None
    request_params: list[dict[str, Any]] | None = None

    @field_validator("error_code", "error_msg", "request_params", mode="wrap")
    @classmethod
    def none_when_malformed(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None

    @classmethod
    def from_raw(cls, raw: Any) -> ErrorPayload:
        if not isinstance(raw, dict):
            return cls()
        return cls.model_validate(raw)
