# =============================================================================
# core/normalizer.py  —  Unity Bridge Response Normalization
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns whatever the Unity bridge sent back into one ToolResponse.
#
#   The bridge has spoken two response shapes over its lifetime, and a
#   failed HTTP call may carry either of them (or garbage) as its body.
#   Callers never see that variance: everything comes out as an ordered
#   list of text/image blocks.
#
# THE TWO-STEP CLASSIFIER (decode_response):
#   1. Payload has a `messages` list  →  CurrentResponse
#   2. Any other mapping              →  LegacyResponse
#   Anything that isn't a mapping raises MalformedResponseError.
#
# OUTPUT ORDER:
#   current:  messages in order; an image's caption precedes the image
#   legacy:   message → data → "Unity Screenshot" + image → "Unity Logs"
#             → (only if nothing else) "Unity Status: ..."
#   failure:  connection error + hint (or, for an unusable 2xx reply, a
#             response error) → re-normalized body, or raw details
# =============================================================================

import json
import logging
from collections.abc import Mapping
from typing import Any

from core.errors import MalformedResponseError
from core.models import (
    BridgeMessage,
    BridgeResponse,
    ContentBlock,
    CurrentResponse,
    ImageBlock,
    LegacyResponse,
    TextBlock,
    ToolResponse,
    UpstreamFailure,
)

logger = logging.getLogger(__name__)

SCREENSHOT_CAPTION = "Unity Screenshot"
LOGS_HEADING = "Unity Logs:"
DEFAULT_LOG_LEVEL = "Info"
DEFAULT_LOG_MESSAGE = "Unknown error"
UNKNOWN_STATUS = "Unknown"
DEFAULT_BRIDGE_PORT = 7777


# =============================================================================
# Decoding: raw payload → typed variant
# =============================================================================
def decode_response(payload: Any) -> BridgeResponse:
    """Classify a raw bridge payload as a current- or legacy-shape response.

    Raises:
        MalformedResponseError: If the payload is not a JSON object.
    """
    if not isinstance(payload, Mapping):
        raise MalformedResponseError(
            f"Expected a JSON object from the Unity bridge, got {type(payload).__name__}"
        )

    messages = payload.get("messages")
    if isinstance(messages, list):
        return CurrentResponse(messages=[
            BridgeMessage(
                type=entry.get("type"),
                content=entry.get("content"),
                text=entry.get("text"),
            )
            for entry in messages
            if isinstance(entry, Mapping)
        ])

    return LegacyResponse(
        message=payload.get("message"),
        data=payload.get("data"),
        image=payload.get("image"),
        errors=payload.get("errors"),
        status=payload.get("status"),
    )


# =============================================================================
# Rendering helpers
# =============================================================================
def _as_text(value: Any) -> str:
    """Strings pass through untouched; anything else becomes JSON text."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def _present(value: Any) -> bool:
    # None, "", 0, False and empty containers all count as "field not sent"
    return bool(value)


def _render_error_entry(entry: Any) -> str:
    if isinstance(entry, Mapping):
        level = entry.get("Level") or entry.get("level") or DEFAULT_LOG_LEVEL
        message = entry.get("Message") or entry.get("message") or DEFAULT_LOG_MESSAGE
        return f"{level}: {message}"
    return str(entry)


# =============================================================================
# Step 1 — current shape
# =============================================================================
def _render_current(response: CurrentResponse) -> list[ContentBlock]:
    content: list[ContentBlock] = []
    for msg in response.messages:
        if msg.type == "text":
            content.append(TextBlock(text=_as_text(msg.content) if msg.content is not None else ""))
        elif msg.type == "image":
            if msg.text:
                content.append(TextBlock(text=_as_text(msg.text)))
            content.append(ImageBlock(data=_as_text(msg.content) if msg.content is not None else ""))
        else:
            logger.debug("Skipping bridge message of unknown type %r", msg.type)
    return content


# =============================================================================
# Step 2 — legacy shape
# =============================================================================
def _render_legacy(response: LegacyResponse) -> list[ContentBlock]:
    content: list[ContentBlock] = []

    message_text = _as_text(response.message) if _present(response.message) else None
    if message_text is not None:
        content.append(TextBlock(text=message_text))

    # data that merely echoes message is dropped (exact match only)
    if _present(response.data):
        data_text = _as_text(response.data)
        if data_text != message_text:
            content.append(TextBlock(text=data_text))

    if _present(response.image):
        content.append(TextBlock(text=SCREENSHOT_CAPTION))
        content.append(ImageBlock(data=_as_text(response.image)))

    errors = response.errors
    if isinstance(errors, list) and errors:
        lines = "\n".join(_render_error_entry(entry) for entry in errors)
        content.append(TextBlock(text=f"{LOGS_HEADING}\n{lines}"))

    if not content:
        status = response.status if _present(response.status) else UNKNOWN_STATUS
        content.append(TextBlock(text=f"Unity Status: {_as_text(status)}"))

    return content


# =============================================================================
# Public entry points
# =============================================================================
def render(response: BridgeResponse) -> list[ContentBlock]:
    """Render an already-decoded response into content blocks."""
    if isinstance(response, CurrentResponse):
        return _render_current(response)
    return _render_legacy(response)


def normalize(payload: Any) -> ToolResponse:
    """Normalize a successful bridge payload.

    Raises:
        MalformedResponseError: If the payload is not a JSON object.
    """
    return ToolResponse(content=render(decode_response(payload)))


def connection_hint(port: int = DEFAULT_BRIDGE_PORT) -> str:
    return f"Check: Unity running, Bridge Window open, Port {port} active."


def normalize_failure(failure: UpstreamFailure, port: int = DEFAULT_BRIDGE_PORT) -> ToolResponse:
    """Normalize a failed bridge call.  Never raises.

    The first block names the failure.  A bridge that could not be reached
    (or answered with an HTTP error) gets "Unity Connection Error" plus what
    to check; a bridge that answered 2xx with an unusable body gets "Unity
    Response Error" and no hint.  If the upstream attached a body, its
    normalized blocks follow; a body that can't be normalized is appended
    verbatim as "Unity Error Details".
    """
    if failure.reachable:
        lead = f"Unity Response Error: {failure.message}"
    else:
        lead = f"Unity Connection Error: {failure.message}\n{connection_hint(port)}"
    content: list[ContentBlock] = [TextBlock(text=lead)]

    if failure.has_body and _present(failure.body):
        try:
            content.extend(normalize(failure.body).content)
        except MalformedResponseError as exc:
            logger.debug("Unity error body is not a bridge response: %s", exc)
            content.append(TextBlock(text=f"Unity Error Details: {_as_text(failure.body)}"))

    return ToolResponse(content=content, is_error=True)

