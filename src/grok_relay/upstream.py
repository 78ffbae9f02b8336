"""Calls against the upstream Grok API."""

import asyncio
import json
import logging
import httpx
from typing import Any, AsyncIterator, Dict, Optional

from .config import GROK_API_BASE, TIMEOUT
from .exceptions import UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)


def create_client() -> httpx.AsyncClient:
    """Build the client used for a single upstream call."""
    # deadline up to the response headers is enforced by asyncio.wait_for
    return httpx.AsyncClient(timeout=httpx.Timeout(None))


def _build_request(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    authorization: str,
    payload: Optional[Dict[str, Any]] = None,
) -> httpx.Request:
    headers = {"Authorization": authorization}
    content = None
    if payload is not None:
        headers["Content-Type"] = "application/json"
        content = json.dumps(payload).encode()

    target_url = f"{GROK_API_BASE}{path}"
    logger.info(f"Calling upstream {method} {target_url}")
    return client.build_request(method, target_url, headers=headers, content=content)


async def _read_body(response: httpx.Response) -> None:
    try:
        await response.aread()
    finally:
        await response.aclose()


async def send_upstream(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    authorization: str,
    payload: Optional[Dict[str, Any]] = None,
    stream: bool = False,
) -> httpx.Response:
    """
    Perform one upstream call whose headers must arrive within TIMEOUT.

    The deadline is disarmed once the response headers are in; reading the
    body afterwards is not bounded, for buffered and streamed calls alike.

    Args:
        client: Client that owns the connection
        method: HTTP method
        path: Path below the provider base URL, e.g. "/models"
        authorization: Inbound Authorization value, forwarded unchanged
        payload: JSON body, if any
        stream: Leave the body unread on success so it can be relayed

    Returns:
        The upstream response with a 2xx status

    Raises:
        UpstreamTimeoutError: No response headers before the deadline
        UpstreamError: The provider answered with a non-2xx status
    """
    request = _build_request(client, method, path, authorization, payload)
    try:
        response = await asyncio.wait_for(
            client.send(request, stream=True), timeout=TIMEOUT
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        logger.error(f"Upstream {method} {path} timed out after {TIMEOUT}s")
        raise UpstreamTimeoutError() from e

    if not stream or not response.is_success:
        try:
            await _read_body(response)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError() from e

    if not response.is_success:
        logger.error(f"Upstream {method} {path} failed with status {response.status_code}")
        raise UpstreamError(response.status_code, response.text)

    return response


async def fetch_json(
    method: str,
    path: str,
    authorization: str,
    payload: Optional[Dict[str, Any]] = None,
) -> Any:
    """Perform a buffered upstream call and return the decoded JSON body."""
    async with create_client() as client:
        response = await send_upstream(client, method, path, authorization, payload)
    return response.json()


async def relay_stream(
    response: httpx.Response, client: httpx.AsyncClient
) -> AsyncIterator[bytes]:
    """
    Yield the upstream body chunk by chunk as it arrives.

    A failure mid-stream is logged and re-raised so the outbound connection
    is aborted after whatever was already sent.
    """
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except Exception as e:
        logger.error(f"Stream processing error: {str(e)}")
        raise
    finally:
        await response.aclose()
        await client.aclose()


async def open_stream(
    path: str, authorization: str, payload: Dict[str, Any]
) -> AsyncIterator[bytes]:
    """Start a streaming upstream POST and return the relay iterator."""
    client = create_client()
    try:
        response = await send_upstream(
            client, "POST", path, authorization, payload, stream=True
        )
    except BaseException:
        await client.aclose()
        raise
    return relay_stream(response, client)
