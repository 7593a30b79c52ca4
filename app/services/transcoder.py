"""ffmpeg integration for HLS packaging."""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import List, Sequence

from app.application.interfaces import TranscoderInterface
from app.pipelines.hls.errors import TranscodeError
from app.pipelines.hls.types import PLAYLIST_NAME, SEGMENT_PATTERN, segment_ordinal

logger = logging.getLogger(__name__)

AUDIO_CODEC = "aac"
AUDIO_BITRATE = "192k"
SEGMENT_SECONDS = 2


def build_ffmpeg_command(
    input_path: Path,
    workspace: Path,
    *,
    binary: str = "ffmpeg",
) -> list[str]:
    """Return the argv for a VOD HLS encode of ``input_path`` into ``workspace``.

    Key frames are forced on every segment boundary so each segment decodes
    on its own.
    """

    return [
        binary,
        "-i", str(input_path),
        "-c:a", AUDIO_CODEC,
        "-b:a", AUDIO_BITRATE,
        "-f", "hls",
        "-hls_time", str(SEGMENT_SECONDS),
        "-hls_playlist_type", "vod",
        "-hls_flags", "independent_segments",
        "-hls_segment_filename", str(workspace / SEGMENT_PATTERN),
        "-force_key_frames", f"expr:gte(t,n_forced*{SEGMENT_SECONDS})",
        str(workspace / PLAYLIST_NAME),
    ]


class FfmpegTranscoder(TranscoderInterface):
    """Run ffmpeg out of process and report the produced HLS files.

    Merged stdout/stderr is relayed to this module's logger line by line
    while ffmpeg runs. A timer kills the process once ``timeout`` elapses.
    """

    def __init__(
        self,
        *,
        binary: str = "ffmpeg",
        timeout: float | None = 600.0,
    ) -> None:
        self._binary = binary
        self._timeout = timeout

    def transcode(self, input_path: Path, workspace: Path) -> List[Path]:
        command = build_ffmpeg_command(input_path, workspace, binary=self._binary)
        logger.info("Running %s", " ".join(command))
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            logger.error("ffmpeg could not be started: %s", exc)
            raise TranscodeError(f"could not be invoked: {exc}") from exc

        expired = threading.Event()

        def _expire() -> None:
            expired.set()
            process.kill()

        timer = threading.Timer(self._timeout, _expire) if self._timeout else None
        if timer is not None:
            timer.daemon = True
        with process:
            if timer is not None:
                timer.start()
            try:
                for line in process.stdout:
                    line = line.rstrip()
                    if line:
                        logger.info("ffmpeg: %s", line)
                returncode = process.wait()
            finally:
                if timer is not None:
                    timer.cancel()

        if expired.is_set():
            logger.error("ffmpeg killed after %gs", self._timeout)
            raise TranscodeError(f"timed out after {self._timeout:g}s")
        if returncode != 0:
            logger.error("ffmpeg exited with status %d", returncode)
            raise TranscodeError(f"exit status {returncode}")

        return collect_outputs(workspace)


def collect_outputs(workspace: Path) -> List[Path]:
    """Return the playlist followed by segments in emission order."""

    playlist = workspace / PLAYLIST_NAME
    if not playlist.is_file():
        raise TranscodeError(f"{PLAYLIST_NAME} was not produced")
    segments: Sequence[Path] = sorted(
        workspace.glob("segment_*.ts"),
        key=lambda path: (segment_ordinal(path.name) or 0, path.name),
    )
    if not segments:
        logger.warning("ffmpeg produced a playlist without segments in %s", workspace)
    return [playlist, *segments]


__all__ = ["FfmpegTranscoder", "build_ffmpeg_command", "collect_outputs"]
