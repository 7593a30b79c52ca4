"""Shared fakes and fixtures for the conversion pipeline tests."""

from __future__ import annotations

from pathlib import Path
import sys
import threading
from typing import Callable, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.application.interfaces import (  # noqa: E402
    ObjectStoreInterface,
    SourceFetcherInterface,
    TranscoderInterface,
)
from app.pipelines.hls import ArtifactPublisher, ConversionPipeline  # noqa: E402

FAKE_AUDIO = b"ID3\x03\x00fake-mp3-payload"


class FakeFetcher(SourceFetcherInterface):
    """Writes a fixed payload instead of touching the network."""

    def __init__(self, payload: bytes = FAKE_AUDIO, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls: list[tuple[str, Path]] = []

    async def fetch(self, source_url: str, destination: Path) -> None:
        self.calls.append((source_url, destination))
        if self.error is not None:
            raise self.error
        destination.write_bytes(self.payload)


class FakeTranscoder(TranscoderInterface):
    """Produces a deterministic playlist and segment files."""

    def __init__(self, segments: int = 3, error: Exception | None = None):
        self.segments = segments
        self.error = error
        self.workspaces: list[Path] = []

    def transcode(self, input_path: Path, workspace: Path) -> list[Path]:
        self.workspaces.append(workspace)
        if self.error is not None:
            raise self.error
        assert input_path.is_file()
        names = [f"segment_{index:03d}.ts" for index in range(self.segments)]
        playlist = workspace / "output.m3u8"
        lines = ["#EXTM3U", "#EXT-X-VERSION:6", "#EXT-X-PLAYLIST-TYPE:VOD"]
        for name in names:
            lines += ["#EXTINF:2.000000,", name]
            (workspace / name).write_bytes(b"\x47" * 188)
        lines.append("#EXT-X-ENDLIST")
        playlist.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return [playlist, *(workspace / name for name in names)]


class FakeObjectStore(ObjectStoreInterface):
    """In-memory bucket/object registry that records every upload."""

    def __init__(
        self,
        buckets: Optional[set[str]] = None,
        fail_on: Callable[[str], bool] | None = None,
        error: Exception | None = None,
    ):
        self.buckets = set(buckets or ())
        self.objects: dict[tuple[str, str], dict] = {}
        self.puts: list[str] = []
        self.created: list[str] = []
        self.fail_on = fail_on
        self.error = error or OSError("connection reset")

    def bucket_exists(self, bucket: str) -> bool:
        return bucket in self.buckets

    def make_bucket(self, bucket: str) -> None:
        self.created.append(bucket)
        self.buckets.add(bucket)

    def put_file(self, bucket, key, file_path, content_type=None) -> None:
        if self.fail_on is not None and self.fail_on(key):
            raise self.error
        self.puts.append(key)
        self.objects[(bucket, key)] = {
            "body": Path(file_path).read_bytes(),
            "content_type": content_type,
        }


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def make_pipeline(workspace_root: Path, object_store: FakeObjectStore):
    """Factory for pipelines wired to fakes; override any collaborator by keyword."""

    def factory(
        fetcher: SourceFetcherInterface | None = None,
        transcoder: TranscoderInterface | None = None,
        store: ObjectStoreInterface | None = None,
        *,
        secure: bool = False,
    ) -> ConversionPipeline:
        return ConversionPipeline(
            fetcher=fetcher or FakeFetcher(),
            transcoder=transcoder or FakeTranscoder(),
            publisher=ArtifactPublisher(store or object_store, "hls-audio"),
            object_prefix="converted-audio",
            public_endpoint="localhost:9000",
            secure=secure,
            workspace_root=workspace_root,
        )

    return factory


class FakePopen:
    """Stand-in for ``subprocess.Popen`` that emulates an ffmpeg run.

    Writes ``segments`` segment files plus the playlist into the directory of
    the last argv entry, yields ``output`` as the merged log, and exits with
    ``returncode``. With ``hang=True`` the log blocks until ``kill()``.
    """

    instances: list["FakePopen"] = []

    def __init__(self, command, *, segments=2, output="", returncode=0, hang=False, **kwargs):
        self.command = command
        self.kwargs = kwargs
        self.returncode = returncode
        self.killed = False
        self._hang = hang
        self._lines = output.splitlines(keepends=True)
        self._killed = threading.Event()
        FakePopen.instances.append(self)
        if returncode == 0 and not hang:
            workspace = Path(command[-1]).parent
            (workspace / "output.m3u8").write_text("#EXTM3U\n", encoding="utf-8")
            for index in range(segments):
                (workspace / f"segment_{index:03d}.ts").write_bytes(b"\x47")

    @property
    def stdout(self):
        yield from self._lines
        if self._hang:
            self._killed.wait(timeout=5)

    def kill(self):
        self.killed = True
        self.returncode = -9
        self._killed.set()

    def wait(self, timeout=None):
        return self.returncode

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


@pytest.fixture
def fake_popen(monkeypatch):
    """Patch the transcoder's Popen; call with FakePopen keyword overrides."""

    FakePopen.instances = []

    def install(**options):
        def factory(command, **kwargs):
            return FakePopen(command, **options, **kwargs)

        monkeypatch.setattr("app.services.transcoder.subprocess.Popen", factory)
        return FakePopen.instances

    return install
