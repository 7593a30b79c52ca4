"""Shared AWS SDK helpers for S3-compatible storage clients."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from app.config.settings import StorageConfig


def create_boto3_client(
    service_name: str,
    storage: StorageConfig,
    *,
    region_name: str | None = None,
) -> boto3.client:
    """Instantiate a boto3 client pointed at the configured storage endpoint.

    Path-style addressing keeps bucket names out of the hostname, which MinIO
    and other self-hosted endpoints require.
    """

    client_kwargs: dict[str, Any] = {
        "region_name": region_name or storage.region,
        "endpoint_url": storage.url,
        "use_ssl": storage.use_ssl,
        "config": Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    }
    access_key = storage.access_key.get_secret_value()
    secret_key = storage.secret_key.get_secret_value()
    if access_key and secret_key:
        client_kwargs["aws_access_key_id"] = access_key
        client_kwargs["aws_secret_access_key"] = secret_key
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client"]
