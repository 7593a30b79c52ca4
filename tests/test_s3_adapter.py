"""S3 adapter behaviour against a stubbed boto3 client."""

from __future__ import annotations

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from app.config.settings import StorageConfig
from app.infrastructure.external.s3_adapter import S3ObjectStore
from app.services.aws import create_boto3_client


@pytest.fixture
def storage() -> StorageConfig:
    return StorageConfig(_env_file=None, endpoint="minio", port=9000, bucket="hls-audio")


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        endpoint_url="http://minio:9000",
        aws_access_key_id="minioadmin",
        aws_secret_access_key="minioadmin",
    )


def test_client_targets_configured_endpoint(storage):
    client = create_boto3_client("s3", storage)

    assert client.meta.endpoint_url == "http://minio:9000"
    assert client.meta.region_name == "us-east-1"


def test_bucket_exists_true_on_head_success(storage, s3_client):
    store = S3ObjectStore(storage, client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_response("head_bucket", {}, {"Bucket": "hls-audio"})
        assert store.bucket_exists("hls-audio") is True
        stubber.assert_no_pending_responses()


def test_bucket_exists_false_on_404(storage, s3_client):
    store = S3ObjectStore(storage, client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
        assert store.bucket_exists("hls-audio") is False


def test_bucket_exists_propagates_other_errors(storage, s3_client):
    store = S3ObjectStore(storage, client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="403", http_status_code=403)
        with pytest.raises(ClientError):
            store.bucket_exists("hls-audio")


def test_make_bucket_in_default_region(storage, s3_client):
    store = S3ObjectStore(storage, client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_response("create_bucket", {}, {"Bucket": "hls-audio"})
        store.make_bucket("hls-audio")
        stubber.assert_no_pending_responses()


def test_make_bucket_outside_us_east_1_sets_location(s3_client):
    storage = StorageConfig(_env_file=None, region="eu-west-1")
    store = S3ObjectStore(storage, client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "create_bucket",
            {},
            {
                "Bucket": "hls-audio",
                "CreateBucketConfiguration": {"LocationConstraint": "eu-west-1"},
            },
        )
        store.make_bucket("hls-audio")
        stubber.assert_no_pending_responses()


def test_put_file_passes_content_type(storage, tmp_path):
    client = MagicMock()
    local = tmp_path / "output.m3u8"
    local.write_text("#EXTM3U\n", encoding="utf-8")

    S3ObjectStore(storage, client=client).put_file(
        "hls-audio",
        "converted-audio/output.m3u8",
        local,
        content_type="application/vnd.apple.mpegurl",
    )

    client.upload_file.assert_called_once_with(
        str(local),
        "hls-audio",
        "converted-audio/output.m3u8",
        ExtraArgs={"ContentType": "application/vnd.apple.mpegurl"},
    )


def test_put_file_without_content_type_sends_no_extra_args(storage, tmp_path):
    client = MagicMock()
    local = tmp_path / "notes.txt"
    local.write_text("x", encoding="utf-8")

    S3ObjectStore(storage, client=client).put_file("hls-audio", "converted-audio/notes.txt", local)

    assert client.upload_file.call_args.kwargs["ExtraArgs"] is None
