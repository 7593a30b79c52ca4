"""Artifact publishing (upload stage of the conversion pipeline).

Workspace files are mapped to stable object names so a repeated conversion
under the same prefix overwrites the previous one:

* ``input.<ext>``   -> ``{prefix}input.<ext>``
* ``output.m3u8``   -> ``{prefix}output.m3u8``
* ``segment_NNN.ts`` and anything else keep their filename.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final, List, Optional

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from app.application.interfaces import ObjectStoreInterface

from .endpoint import normalize_prefix
from .errors import PublishError
from .types import (
    INPUT_STEM,
    PLAYLIST_NAME,
    ArtifactRole,
    InputKind,
    MediaArtifact,
    PublishedObject,
    segment_ordinal,
)

logger = logging.getLogger(__name__)

_CONTENT_TYPES: Final[dict[str, str]] = {
    ".m3u8": "application/vnd.apple.mpegurl",
    ".ts": "video/MP2T",
    **{kind.extension: kind.content_type for kind in InputKind},
}

_STORAGE_ERRORS = (Boto3Error, BotoCoreError, ClientError, OSError)


def content_type_for(object_name: str) -> Optional[str]:
    """Content type keyed on the destination extension; None keeps the store default."""

    return _CONTENT_TYPES.get(Path(object_name).suffix.lower())


def classify_artifact(path: Path) -> MediaArtifact:
    """Assign a role and canonical object name to a workspace file."""

    name = path.name
    if INPUT_STEM in name:
        role = ArtifactRole.INPUT
        object_name = f"{INPUT_STEM}{path.suffix}"
    elif "output" in name:
        role = ArtifactRole.PLAYLIST
        object_name = PLAYLIST_NAME
    elif "segment" in name:
        role = ArtifactRole.SEGMENT
        object_name = name
    else:
        role = ArtifactRole.OTHER
        object_name = name

    return MediaArtifact(
        path=path,
        role=role,
        object_name=object_name,
        content_type=content_type_for(object_name),
        ordinal=segment_ordinal(name) if role is ArtifactRole.SEGMENT else None,
    )


def discover_artifacts(workspace: Path) -> List[MediaArtifact]:
    """Classify the regular files directly inside ``workspace``.

    Non-segment files come first in name order, then segments in emission
    order by numeric suffix.
    """

    artifacts = [classify_artifact(entry) for entry in workspace.iterdir() if entry.is_file()]
    return sorted(
        artifacts,
        key=lambda artifact: (
            artifact.ordinal is not None,
            artifact.ordinal or 0,
            artifact.path.name,
        ),
    )


class ArtifactPublisher:
    """Upload a finished workspace to one bucket."""

    def __init__(self, store: ObjectStoreInterface, bucket: str) -> None:
        self._store = store
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    def ensure_bucket(self) -> None:
        try:
            if not self._store.bucket_exists(self._bucket):
                self._store.make_bucket(self._bucket)
        except _STORAGE_ERRORS as exc:
            raise PublishError(f"bucket {self._bucket!r} unavailable: {exc}") from exc

    def publish(self, workspace: Path, object_prefix: str) -> List[PublishedObject]:
        """Upload every workspace artifact, stopping at the first failure.

        Objects uploaded before a failure are left in place.
        """

        self.ensure_bucket()
        prefix = normalize_prefix(object_prefix)

        try:
            artifacts = discover_artifacts(workspace)
        except OSError as exc:
            raise PublishError(f"could not list {workspace}: {exc}") from exc

        published: List[PublishedObject] = []
        for artifact in artifacts:
            key = prefix + artifact.object_name
            try:
                self._store.put_file(
                    self._bucket,
                    key,
                    artifact.path,
                    content_type=artifact.content_type,
                )
            except _STORAGE_ERRORS as exc:
                logger.error("Upload failed for %s: %s", artifact.path, exc)
                raise PublishError(f"{artifact.path.name}: {exc}") from exc
            logger.info("Uploaded %s", key)
            published.append(PublishedObject(object_key=key, content_type=artifact.content_type))

        return published


__all__ = [
    "ArtifactPublisher",
    "classify_artifact",
    "content_type_for",
    "discover_artifacts",
]
