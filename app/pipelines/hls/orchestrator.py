"""Conversion pipeline orchestration.

``ConversionPipeline.convert`` runs the stages strictly in order and stops at
the first failure:

1. ``validation`` - reject missing or unsupported source references.
2. workspace - allocate a private temporary directory for this request.
3. fetch - stream the source audio into the workspace.
4. transcode - run ffmpeg to produce ``output.m3u8`` plus segments.
5. ``publishing`` - upload the workspace under the conversion folder.
6. ``endpoint`` - derive the public playlist URL.

The workspace is removed on every exit path. Collaborators are injected so
tests can swap in fakes for the network, ffmpeg and the object store.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import SourceFetcherInterface, TranscoderInterface
from app.telemetry import observe_conversion

from .endpoint import derive_url
from .errors import ConversionError, InternalError
from .publishing import ArtifactPublisher
from .types import StreamingEndpoint
from .validation import require_source_url, validate_source

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "hls-conversion-"


def _create_workspace(root: Optional[str | Path]) -> Path:
    if root is not None:
        Path(root).mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=root))


@asynccontextmanager
async def request_workspace(root: Optional[str | Path] = None) -> AsyncIterator[Path]:
    """Yield a fresh, uniquely named directory and remove it afterwards.

    Creation and removal run in the threadpool; removal happens on every
    exit path.
    """

    try:
        path = await run_in_threadpool(_create_workspace, root)
    except OSError as exc:
        raise InternalError(str(exc)) from exc

    logger.debug("Workspace %s created", path)
    try:
        yield path
    finally:
        await run_in_threadpool(shutil.rmtree, path)
        logger.debug("Workspace %s removed", path)


class ConversionPipeline:
    """Turn a remote audio URL into a published HLS stream."""

    def __init__(
        self,
        fetcher: SourceFetcherInterface,
        transcoder: TranscoderInterface,
        publisher: ArtifactPublisher,
        *,
        object_prefix: str,
        public_endpoint: str,
        secure: bool = False,
        workspace_root: Optional[str | Path] = None,
    ) -> None:
        self._fetcher = fetcher
        self._transcoder = transcoder
        self._publisher = publisher
        self._object_prefix = object_prefix
        self._public_endpoint = public_endpoint
        self._secure = secure
        self._workspace_root = workspace_root

    async def convert(self, source_url: str | None) -> StreamingEndpoint:
        """Run the full pipeline for one request.

        Raises:
            ConversionError: the tagged failure of the first stage that failed.
        """

        started = time.perf_counter()
        outcome = "error"
        try:
            endpoint = await self._run(source_url)
            outcome = "success"
            return endpoint
        except ConversionError as exc:
            outcome = exc.stage.value
            level = logging.WARNING if exc.status_code < 500 else logging.ERROR
            logger.log(level, "Conversion failed at %s stage: %s", exc.stage.value, exc)
            raise
        finally:
            observe_conversion(outcome, time.perf_counter() - started)

    async def _run(self, source_url: str | None) -> StreamingEndpoint:
        url = require_source_url(source_url)
        kind = validate_source(url)
        logger.info("Converting %s source %s", kind.name, url)

        async with request_workspace(self._workspace_root) as workspace:
            input_path = workspace / kind.input_filename
            await self._fetcher.fetch(url, input_path)
            outputs = await run_in_threadpool(
                self._transcoder.transcode, input_path, workspace
            )
            logger.info("ffmpeg produced %d files", len(outputs))
            published = await run_in_threadpool(
                self._publisher.publish, workspace, self._object_prefix
            )

        endpoint = derive_url(
            self._secure,
            self._public_endpoint,
            self._publisher.bucket,
            self._object_prefix,
        )
        logger.info(
            "Stream available at %s (%d objects published)",
            endpoint.url,
            len(published),
        )
        return endpoint


__all__ = ["ConversionPipeline", "WORKSPACE_PREFIX", "request_workspace"]
