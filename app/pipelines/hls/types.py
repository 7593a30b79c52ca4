"""Typed containers shared across the HLS conversion pipeline.

These live in their own module so the stages (`validation`, `publishing`,
`endpoint`, `orchestrator`) and the service adapters can import them without
creating circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
import re
from typing import Optional

PLAYLIST_NAME = "output.m3u8"
SEGMENT_PATTERN = "segment_%03d.ts"
INPUT_STEM = "input"

_ORDINAL_RE = re.compile(r"(\d+)(?=\.[^.]+$)")


class InputKind(Enum):
    """Audio inputs accepted by the converter, in match order."""

    WAV = (".wav", "audio/wav")
    MP3 = (".mp3", "audio/mpeg")

    def __init__(self, extension: str, content_type: str) -> None:
        self.extension = extension
        self.content_type = content_type

    @property
    def input_filename(self) -> str:
        return f"{INPUT_STEM}{self.extension}"


class ArtifactRole(str, Enum):
    INPUT = "input"
    PLAYLIST = "playlist"
    SEGMENT = "segment"
    OTHER = "other"


@dataclass(frozen=True)
class MediaArtifact:
    """A file found in a workspace at publish time."""

    path: Path
    role: ArtifactRole
    object_name: str
    content_type: Optional[str] = None
    ordinal: Optional[int] = None


@dataclass(frozen=True)
class PublishedObject:
    """Remote counterpart of a MediaArtifact after upload."""

    object_key: str
    content_type: Optional[str] = None


@dataclass(frozen=True)
class StreamingEndpoint:
    """Public location of the published playlist."""

    protocol: str
    host: str
    bucket: str
    object_key: str

    @property
    def url(self) -> str:
        return f"{self.protocol}://{self.host}/{self.bucket}/{self.object_key}"


def segment_ordinal(name: str) -> Optional[int]:
    """Return the numeric suffix ffmpeg gave a segment file, if any."""

    match = _ORDINAL_RE.search(name)
    return int(match.group(1)) if match else None


__all__ = [
    "ArtifactRole",
    "INPUT_STEM",
    "InputKind",
    "MediaArtifact",
    "PLAYLIST_NAME",
    "PublishedObject",
    "SEGMENT_PATTERN",
    "StreamingEndpoint",
    "segment_ordinal",
]
