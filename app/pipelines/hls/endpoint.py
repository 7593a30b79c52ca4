"""Public playlist URL derivation."""

from __future__ import annotations

from .types import PLAYLIST_NAME, StreamingEndpoint


def normalize_prefix(object_prefix: str) -> str:
    """Ensure the prefix behaves like a folder (trailing slash)."""

    if object_prefix and not object_prefix.endswith("/"):
        return object_prefix + "/"
    return object_prefix


def derive_url(
    secure: bool,
    endpoint: str,
    bucket: str,
    object_prefix: str,
) -> StreamingEndpoint:
    """Build the playlist location for a published conversion."""

    return StreamingEndpoint(
        protocol="https" if secure else "http",
        host=endpoint,
        bucket=bucket,
        object_key=f"{normalize_prefix(object_prefix)}{PLAYLIST_NAME}",
    )


__all__ = ["derive_url", "normalize_prefix"]
