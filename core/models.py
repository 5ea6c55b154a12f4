# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# Two families of dataclasses live here:
#
#   1. CANONICAL OUTPUT: TextBlock / ImageBlock / ToolResponse.
#      Every tool, whatever it does, resolves to a ToolResponse: an ordered
#      list of content blocks.  Order matters to the caller (a caption block
#      always precedes the image it describes).
#
#   2. UPSTREAM INPUT: the typed variants the normalizer decodes a raw
#      Unity bridge payload into:
#        CurrentResponse   {messages: [...]}
#        LegacyResponse    {message?, data?, image?, errors?, status?}
#        UpstreamFailure   connection message + optional error body
#
# All of these are request-scoped: created when a call starts, dropped when
# the response is returned.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional, Union


PNG_MIME_TYPE = "image/png"


# -----------------------------------------------------------------------------
# Canonical content blocks
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TextBlock:
    """A text content block."""

    text: str

    def to_dict(self) -> dict:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ImageBlock:
    """An image content block.  `data` is base64 and never re-encoded."""

    data: str
    mime_type: str = PNG_MIME_TYPE

    def to_dict(self) -> dict:
        return {"type": "image", "data": self.data, "mimeType": self.mime_type}


ContentBlock = Union[TextBlock, ImageBlock]


@dataclass
class ToolResponse:
    """The normalized result of a tool call.

    `is_error` marks a call whose upstream failed; the content still carries
    a human-readable explanation, so callers can render it either way.
    """

    content: list[ContentBlock] = field(default_factory=list)
    is_error: bool = False

    def text(self) -> str:
        """All text blocks joined by newlines (images are skipped)."""
        return "\n".join(block.text for block in self.content if isinstance(block, TextBlock))

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"content": [block.to_dict() for block in self.content]}
        if self.is_error:
            result["isError"] = True
        return result


# -----------------------------------------------------------------------------
# Upstream (Unity bridge) shapes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class BridgeMessage:
    """One entry of a current-shape `messages` list."""

    type: str
    content: Any = None
    text: Optional[str] = None


@dataclass(frozen=True)
class CurrentResponse:
    """Current bridge shape: `{"messages": [...]}`."""

    messages: list[BridgeMessage] = field(default_factory=list)


@dataclass(frozen=True)
class LegacyResponse:
    """Legacy bridge shape.  Every field is optional."""

    message: Any = None
    data: Any = None
    image: Any = None
    errors: Any = None
    status: Any = None


BridgeResponse = Union[CurrentResponse, LegacyResponse]


@dataclass(frozen=True)
class UpstreamFailure:
    """A failed bridge call, as captured by the gateway.

    `has_body` distinguishes "the upstream attached no body" from "the body
    was literally null/empty".  `reachable` marks a bridge that answered
    with a 2xx reply of an unusable shape, as opposed to one that could not
    be reached or returned an HTTP error.
    """

    message: str
    body: Any = None
    has_body: bool = False
    reachable: bool = False
