"""Service layer helpers for external integrations."""

from .aws import create_boto3_client
from .downloader import HttpSourceFetcher
from .transcoder import FfmpegTranscoder, build_ffmpeg_command

__all__ = [
    "FfmpegTranscoder",
    "HttpSourceFetcher",
    "build_ffmpeg_command",
    "create_boto3_client",
]
