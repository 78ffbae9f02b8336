"""FastAPI application and routes for the Grok relay."""

import json
import logging
from typing import Any
from fastapi import FastAPI, Request, Response
from fastapi.responses import StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import CORS_HEADERS, HOST, PORT
from .exceptions import ApiError, AuthorizationError, NotFoundError, RelayError
from .models import ChatCompletionRequest, ErrorDetail, ErrorResponse
from .upstream import fetch_json, open_stream
from .utils import build_upstream_body

logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    **CORS_HEADERS,
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

JSON_HEADERS = {**CORS_HEADERS, "Content-Type": "application/json"}

app = FastAPI(
    title="Grok Relay",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    redirect_slashes=False,
)


def json_response(data: Any, status_code: int = 200) -> Response:
    return Response(
        content=json.dumps(data),
        status_code=status_code,
        headers=JSON_HEADERS,
    )


def error_response(error: RelayError) -> Response:
    body = ErrorResponse(error=ErrorDetail(message=error.message, type=error.error_type))
    return json_response(body.model_dump(), status_code=error.status_code)


def require_authorization(request: Request) -> str:
    """Return the inbound Authorization value or raise AuthorizationError."""
    authorization = request.headers.get("authorization")
    if not authorization:
        logger.warning("Request received without Authorization header")
        raise AuthorizationError()
    return authorization


def as_relay_error(exc: Exception) -> RelayError:
    if isinstance(exc, RelayError):
        return exc
    return ApiError(str(exc))


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> Response:
    return error_response(exc)


@app.options("/{path:path}")
async def preflight(path: str) -> Response:
    """CORS preflight, answered for every path without credentials."""
    return Response(status_code=204, headers=CORS_HEADERS)


@app.post("/v1/chat/completions")
async def chat_completions(request: Request) -> Response:
    """
    Relay a chat completion to the Grok API:
    - Strips a -high/-low suffix from the model into reasoning_effort
    - Forwards the caller's Authorization header unchanged
    - Streams the upstream event stream back when stream is set
    """
    authorization = require_authorization(request)

    try:
        request_data = await request.json()
        chat_request = ChatCompletionRequest.model_validate(request_data)
        upstream_body = build_upstream_body(chat_request)

        if chat_request.stream:
            chunks = await open_stream("/chat/completions", authorization, upstream_body)
            return StreamingResponse(chunks, headers=STREAM_HEADERS)

        data = await fetch_json("POST", "/chat/completions", authorization, upstream_body)
        return json_response(data)
    except Exception as e:
        logger.error(f"Error processing request: {str(e)}")
        return error_response(as_relay_error(e))


@app.get("/v1/models")
async def list_models(request: Request) -> Response:
    """Relay the provider's model list verbatim."""
    authorization = require_authorization(request)

    try:
        data = await fetch_json("GET", "/models", authorization)
        return json_response(data)
    except Exception as e:
        logger.error(f"Error fetching models: {str(e)}")
        return error_response(as_relay_error(e))


@app.exception_handler(StarletteHTTPException)
async def unmatched_route_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Every method/path pair without a route lands here, whatever the method,
    as either a 404 or a 405 from the router. Credentials are checked first.
    """
    try:
        require_authorization(request)
    except AuthorizationError as e:
        return error_response(e)
    return error_response(NotFoundError())


def main() -> None:
    import uvicorn

    logger.info(f"Grok relay listening on {HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
