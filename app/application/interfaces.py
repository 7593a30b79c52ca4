from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional


class SourceFetcherInterface(ABC):
    """Download contract for remote source audio"""

    @abstractmethod
    async def fetch(self, source_url: str, destination: Path) -> None:
        ...


class TranscoderInterface(ABC):
    """Contract for turning an input file into an HLS playlist plus segments"""

    @abstractmethod
    def transcode(self, input_path: Path, workspace: Path) -> List[Path]:
        ...


class ObjectStoreInterface(ABC):
    """Minimal object storage contract used by the publisher"""

    @abstractmethod
    def bucket_exists(self, bucket: str) -> bool:
        ...

    @abstractmethod
    def make_bucket(self, bucket: str) -> None:
        ...

    @abstractmethod
    def put_file(
        self,
        bucket: str,
        key: str,
        file_path: Path,
        content_type: Optional[str] = None,
    ) -> None:
        ...
