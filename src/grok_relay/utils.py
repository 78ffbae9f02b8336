"""Utility functions for the Grok relay."""

import logging
from typing import Any, Dict, Optional, Tuple

from .models import ChatCompletionRequest

logger = logging.getLogger(__name__)

REASONING_SUFFIXES = ("-high", "-low")


def split_reasoning_effort(model: str) -> Tuple[str, Optional[str]]:
    """
    Strip a reasoning-effort suffix from a model name.

    Args:
        model: Model name as sent by the caller, e.g. "grok-3-high"

    Returns:
        Tuple of (model name without suffix, "high"/"low" or None)
    """
    for suffix in REASONING_SUFFIXES:
        if model.endswith(suffix):
            return model[: -len(suffix)], suffix[1:]
    return model, None


def build_upstream_body(request: ChatCompletionRequest) -> Dict[str, Any]:
    """Reshape an inbound chat request into the body sent to the provider."""
    model, reasoning_effort = split_reasoning_effort(request.model)

    body: Dict[str, Any] = {
        "model": model,
        "messages": request.messages,
        "temperature": request.temperature,
        "stream": request.stream,
    }

    if reasoning_effort is not None:
        body["reasoning_effort"] = reasoning_effort

    # key must be absent upstream unless the caller sent it
    if request.has_max_tokens:
        body["max_tokens"] = request.max_tokens

    return body
