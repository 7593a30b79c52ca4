"""HLS conversion pipeline package.

Modules follow the order in which ``/convert`` executes:

1. `validation` - check the request and infer the input kind from the URL.
2. `orchestrator` - own the workspace and sequence fetch, transcode, publish.
3. `publishing` - map workspace files to object keys and content types.
4. `endpoint` - derive the public playlist URL.

Network and process adapters live in ``app.services``; the storage adapter
lives in ``app.infrastructure.external``.
"""

from .endpoint import derive_url, normalize_prefix
from .errors import (
    ConversionError,
    ConversionStage,
    FetchError,
    InternalError,
    InvalidRequest,
    PublishError,
    TranscodeError,
    UnsupportedFormat,
)
from .orchestrator import ConversionPipeline, request_workspace
from .publishing import ArtifactPublisher, classify_artifact, content_type_for
from .types import (
    ArtifactRole,
    InputKind,
    MediaArtifact,
    PublishedObject,
    StreamingEndpoint,
)
from .validation import require_source_url, validate_source

__all__ = [
    "ArtifactPublisher",
    "ArtifactRole",
    "ConversionError",
    "ConversionPipeline",
    "ConversionStage",
    "FetchError",
    "InputKind",
    "InternalError",
    "InvalidRequest",
    "MediaArtifact",
    "PublishError",
    "PublishedObject",
    "StreamingEndpoint",
    "TranscodeError",
    "UnsupportedFormat",
    "classify_artifact",
    "content_type_for",
    "derive_url",
    "normalize_prefix",
    "request_workspace",
    "require_source_url",
    "validate_source",
]
