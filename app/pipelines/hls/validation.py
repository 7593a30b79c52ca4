"""Source validation helpers (first stage of the conversion pipeline)."""

from __future__ import annotations

from typing import Final

from .errors import InvalidRequest, UnsupportedFormat
from .types import InputKind

_SUPPORTED_KINDS: Final[tuple[InputKind, ...]] = tuple(InputKind)

UNSUPPORTED_MESSAGE: Final[str] = "Unsupported input format. Only {} are allowed".format(
    " and ".join(kind.extension for kind in _SUPPORTED_KINDS)
)


def require_source_url(source_url: str | None) -> str:
    """Return the stripped source URL, rejecting missing or blank values."""

    cleaned = (source_url or "").strip()
    if not cleaned:
        raise InvalidRequest("Missing 'url' query parameter")
    return cleaned


def validate_source(source_url: str) -> InputKind:
    """Infer the input kind from the URL text.

    Matches anywhere in the reference so presigned URLs with query strings
    still resolve. Only the URL is inspected; the payload may still disagree.
    """

    lowered = source_url.lower()
    for kind in _SUPPORTED_KINDS:
        if kind.extension in lowered:
            return kind
    raise UnsupportedFormat(UNSUPPORTED_MESSAGE)


__all__ = ["UNSUPPORTED_MESSAGE", "require_source_url", "validate_source"]
