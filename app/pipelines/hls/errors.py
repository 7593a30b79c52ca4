"""Error taxonomy for the conversion pipeline.

Every stage raises exactly one of these; the HTTP layer turns them into
plain-text responses using ``status_code`` and ``str(exc)``.
"""

from __future__ import annotations

from enum import Enum


class ConversionStage(str, Enum):
    REQUEST = "request"
    VALIDATE = "validate"
    WORKSPACE = "workspace"
    FETCH = "fetch"
    TRANSCODE = "transcode"
    PUBLISH = "publish"


class ConversionError(RuntimeError):
    """Base class for failures surfaced to the caller of a conversion."""

    stage: ConversionStage = ConversionStage.REQUEST
    status_code: int = 500
    prefix: str = ""

    def __init__(self, message: str) -> None:
        self.detail = message
        super().__init__(f"{self.prefix}{message}")


class InvalidRequest(ConversionError):
    """Raised when the request does not carry a usable source URL."""

    stage = ConversionStage.REQUEST
    status_code = 400


class UnsupportedFormat(ConversionError):
    """Raised when the source reference does not name a supported audio kind."""

    stage = ConversionStage.VALIDATE
    status_code = 400


class InternalError(ConversionError):
    """Raised when the request workspace cannot be prepared."""

    stage = ConversionStage.WORKSPACE
    prefix = "Failed to create temp directory: "


class FetchError(ConversionError):
    """Raised when downloading the source audio fails."""

    stage = ConversionStage.FETCH
    prefix = "Failed to download file: "


class TranscodeError(ConversionError):
    """Raised when ffmpeg cannot be started or exits with a failure."""

    stage = ConversionStage.TRANSCODE
    prefix = "FFmpeg conversion failed: "


class PublishError(ConversionError):
    """Raised when the bucket cannot be prepared or an upload fails."""

    stage = ConversionStage.PUBLISH
    prefix = "Upload to object storage failed: "


__all__ = [
    "ConversionError",
    "ConversionStage",
    "FetchError",
    "InternalError",
    "InvalidRequest",
    "PublishError",
    "TranscodeError",
    "UnsupportedFormat",
]
