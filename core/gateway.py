# =============================================================================
# core/gateway.py  —  Unity Bridge HTTP Gateway
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends exactly one JSON POST to the Unity bridge per tool call and hands
#   the outcome to the normalizer.  It is the only place in the project that
#   talks HTTP to Unity.
#
# CONTRACT:
#   - post() NEVER raises for transport problems.  Timeouts, refused
#     connections, non-2xx replies and undecodable bodies all come back as a
#     ToolResponse with is_error=True and a readable explanation.
#   - No retries.  One request in, one ToolResponse out.
#   - Each call opens and closes its own httpx.AsyncClient, so concurrent
#     tool calls share nothing.
# =============================================================================

import json
import logging
from typing import Any, Optional

import httpx

from core.config import DEFAULT_BRIDGE_URL
from core.errors import MalformedResponseError
from core.models import ToolResponse, UpstreamFailure
from core.normalizer import normalize, normalize_failure

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json; charset=utf-8",
    "Accept": "application/json; charset=utf-8",
}

_NO_BODY = object()


def _response_body(response: httpx.Response) -> Any:
    """Best-effort body of a reply: parsed JSON, else raw text, else _NO_BODY."""
    try:
        return response.json()
    except ValueError:
        text = response.text
        return text if text else _NO_BODY


def _describe(exc: httpx.HTTPError) -> str:
    # some httpx errors (e.g. ReadTimeout) stringify to ""
    return str(exc) or exc.__class__.__name__


class BridgeGateway:
    """Async client for the Unity bridge's `/api/*` endpoints.

    Args:
        base_url: Bridge root, e.g. "http://localhost:7777".
        port: Port named in the connection hint; defaults to the URL's port.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(self, base_url: str = DEFAULT_BRIDGE_URL, port: Optional[int] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.port = port if port is not None else (httpx.URL(self.base_url).port or 80)
        self._transport = transport

    async def post(self, path: str, body: Optional[dict] = None, timeout: float = 10.0) -> ToolResponse:
        """POST `body` to `path` and normalize whatever comes back."""
        payload = json.dumps(body or {}, ensure_ascii=False).encode("utf-8")
        logger.debug("POST %s%s (%d bytes, timeout=%ss)", self.base_url, path, len(payload), timeout)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=timeout,
                headers=JSON_HEADERS,
                transport=self._transport,
            ) as client:
                response = await client.post(path, content=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = _response_body(exc.response)
            logger.warning("Unity bridge %s returned HTTP %s", path, exc.response.status_code)
            return self._failure(_describe(exc), body)
        except httpx.HTTPError as exc:
            logger.warning("Unity bridge %s unreachable: %s", path, _describe(exc))
            return self._failure(_describe(exc))

        body = _response_body(response)
        if body is _NO_BODY:
            return self._failure(f"Empty response from {path}", reachable=True)
        try:
            return normalize(body)
        except MalformedResponseError as exc:
            logger.warning("Unity bridge %s sent an unusable reply: %s", path, exc)
            return self._failure(str(exc), body, reachable=True)

    def _failure(self, message: str, body: Any = _NO_BODY, reachable: bool = False) -> ToolResponse:
        failure = UpstreamFailure(message=message, body=None if body is _NO_BODY else body,
                                  has_body=body is not _NO_BODY, reachable=reachable)
        return normalize_failure(failure, port=self.port)
