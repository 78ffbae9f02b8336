import json
import pytest
import httpx
from fastapi.testclient import TestClient

import grok_relay.upstream

# Mock response payloads
MOCK_COMPLETION_RESPONSE = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1677652288,
    "model": "grok-3",
    "system_fingerprint": "fp_44709d6fcb",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "Hello there, how may I assist you today?",
            },
            "logprobs": None,
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 9, "completion_tokens": 12, "total_tokens": 21},
}

MOCK_MODELS_RESPONSE = {
    "object": "list",
    "data": [
        {"id": "grok-3", "object": "model", "created": 1743724800, "owned_by": "xai"},
        {"id": "grok-3-mini", "object": "model", "created": 1743724800, "owned_by": "xai"},
    ],
}

MOCK_STREAMING_CHUNKS = [
    {
        "id": "chatcmpl-123",
        "object": "chat.completion.chunk",
        "created": 1694268190,
        "model": "grok-3",
        "choices": [
            {"index": 0, "delta": {"role": "assistant", "content": ""}, "finish_reason": None}
        ],
    },
    {
        "id": "chatcmpl-123",
        "object": "chat.completion.chunk",
        "created": 1694268190,
        "model": "grok-3",
        "choices": [{"index": 0, "delta": {"content": "Hello"}, "finish_reason": None}],
    },
    {
        "id": "chatcmpl-123",
        "object": "chat.completion.chunk",
        "created": 1694268190,
        "model": "grok-3",
        "choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}],
    },
]

MOCK_STREAMING_BYTES = [
    f"data: {json.dumps(chunk)}\n\n".encode() for chunk in MOCK_STREAMING_CHUNKS
] + [b"data: [DONE]\n\n"]

CORS_EXPECTED = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "POST, GET, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization",
}

AUTH = {"Authorization": "Bearer xai-test-key"}


class MockUpstream:
    """Records upstream requests and answers them with a configurable handler."""

    def __init__(self):
        self.requests = []
        self.handler = lambda request: httpx.Response(200, json=MOCK_COMPLETION_RESPONSE)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream(monkeypatch):
    """Route every upstream call through an in-memory transport"""
    mock = MockUpstream()

    def mock_create_client():
        return httpx.AsyncClient(transport=httpx.MockTransport(mock))

    monkeypatch.setattr(grok_relay.upstream, "create_client", mock_create_client)
    return mock


@pytest.fixture
def test_client(upstream):
    """Create a test client whose upstream calls hit the mock transport"""
    from grok_relay.api import app

    return TestClient(app)
