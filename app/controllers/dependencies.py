"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config.settings import Settings, settings
from app.infrastructure.external.s3_adapter import S3ObjectStore
from app.pipelines.hls import ArtifactPublisher, ConversionPipeline
from app.services.downloader import HttpSourceFetcher
from app.services.transcoder import FfmpegTranscoder


def build_conversion_pipeline(config: Settings) -> ConversionPipeline:
    """Wire the production collaborators from an explicit settings value."""

    storage = config.storage
    return ConversionPipeline(
        fetcher=HttpSourceFetcher(timeout=config.fetch_timeout_seconds),
        transcoder=FfmpegTranscoder(
            binary=config.ffmpeg_binary,
            timeout=config.transcode_timeout_seconds,
        ),
        publisher=ArtifactPublisher(S3ObjectStore(storage), storage.bucket),
        object_prefix=config.conversion_folder,
        public_endpoint=storage.address,
        secure=storage.use_ssl,
        workspace_root=config.workspace_root,
    )


@lru_cache(maxsize=1)
def get_conversion_pipeline() -> ConversionPipeline:
    """Return the lazily-built pipeline shared by all requests."""

    return build_conversion_pipeline(settings)


PipelineDep = Annotated[ConversionPipeline, Depends(get_conversion_pipeline)]


__all__ = ["PipelineDep", "build_conversion_pipeline", "get_conversion_pipeline"]
