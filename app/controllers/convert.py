"""Audio to HLS conversion endpoint.

See `app.pipelines.hls.orchestrator` for the stage-by-stage flow. Pipeline
failures are raised as ``ConversionError`` and rendered as plain text by the
exception handler registered in ``app.main``.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from app.controllers.dependencies import PipelineDep

router = APIRouter(tags=["convert"])

logger = logging.getLogger(__name__)

SourceUrlQuery = Annotated[
    Optional[str],
    Query(description="Location of the source .wav or .mp3 file"),
]


@router.get("/convert", response_class=PlainTextResponse)
async def convert_audio(pipeline: PipelineDep, url: SourceUrlQuery = None) -> PlainTextResponse:
    """Download, package as HLS, publish, and return the playlist URL."""

    endpoint = await pipeline.convert(url)
    logger.info("Stream available at: %s", endpoint.url)
    return PlainTextResponse(f"Conversion successful!\nStream: {endpoint.url}")
