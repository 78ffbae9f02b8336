"""Data models and schemas for the Grok relay."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_TEMPERATURE = 0.7


class ChatCompletionRequest(BaseModel):
    """
    Inbound chat completion body.

    Only ``model`` is checked. The remaining fields are carried through
    untouched so the upstream provider sees exactly what the caller sent.
    Unknown fields are dropped.
    """
    model_config = ConfigDict(extra="ignore")

    model: str
    messages: Any = []
    temperature: Any = DEFAULT_TEMPERATURE
    stream: Any = False
    max_tokens: Optional[Any] = None

    @field_validator("messages", mode="before")
    @classmethod
    def _messages_or_empty(cls, value):
        # falsy scalars only, an empty object is forwarded as sent
        if value is None or value is False or value == "" or (
            isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0
        ):
            return []
        return value

    @field_validator("temperature", mode="before")
    @classmethod
    def _temperature_default(cls, value):
        return DEFAULT_TEMPERATURE if value is None else value

    @field_validator("stream", mode="before")
    @classmethod
    def _stream_default(cls, value):
        return False if value is None else value

    @property
    def has_max_tokens(self) -> bool:
        """True when the caller sent ``max_tokens``, even as null."""
        return "max_tokens" in self.model_fields_set


class ErrorDetail(BaseModel):
    """Error payload."""
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""
    error: ErrorDetail
