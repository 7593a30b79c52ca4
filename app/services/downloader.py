"""HTTP source download helpers built on httpx."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
from fastapi.concurrency import run_in_threadpool

from app.application.interfaces import SourceFetcherInterface
from app.pipelines.hls.errors import FetchError, InvalidRequest

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class HttpSourceFetcher(SourceFetcherInterface):
    """Stream a remote audio file to disk without buffering it in memory."""

    def __init__(
        self,
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, source_url: str, destination: Path) -> None:
        """Download ``source_url`` into ``destination``.

        File writes go through the threadpool so the event loop keeps serving
        other requests while large sources download.

        Raises:
            InvalidRequest: when httpx cannot parse ``source_url``.
            FetchError: on transport failures, non-2xx responses or write errors.
        """

        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            try:
                async with client.stream("GET", source_url) as response:
                    response.raise_for_status()
                    written = await self._write_body(response, destination)
            except httpx.InvalidURL as exc:
                raise InvalidRequest(f"Malformed 'url' query parameter: {exc}") from exc
            except httpx.HTTPStatusError as exc:
                raise FetchError(
                    f"source responded with HTTP {exc.response.status_code}"
                ) from exc
            except (httpx.HTTPError, httpx.StreamError) as exc:
                raise FetchError(str(exc) or exc.__class__.__name__) from exc
            except OSError as exc:
                raise FetchError(f"could not write {destination.name}: {exc}") from exc

        logger.info("Downloaded %d bytes to %s", written, destination)

    @staticmethod
    async def _write_body(response: httpx.Response, destination: Path) -> int:
        written = 0
        out = await run_in_threadpool(destination.open, "wb")
        try:
            async for chunk in response.aiter_bytes(_CHUNK_SIZE):
                await run_in_threadpool(out.write, chunk)
                written += len(chunk)
        finally:
            await run_in_threadpool(out.close)
        return written


__all__ = ["HttpSourceFetcher"]
