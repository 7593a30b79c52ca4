import logging
from pathlib import Path
from typing import Any, Optional

from botocore.exceptions import ClientError

from app.application.interfaces import ObjectStoreInterface
from app.config.settings import StorageConfig
from app.services.aws import create_boto3_client

logger = logging.getLogger(__name__)

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class S3ObjectStore(ObjectStoreInterface):
    """S3 / MinIO adapter implementation

    Errors from botocore propagate untouched; the publisher decides how to
    report them.
    """

    def __init__(self, storage: StorageConfig, client: Any = None):
        self.storage = storage
        self.s3_client = client or create_boto3_client("s3", storage)

    def bucket_exists(self, bucket: str) -> bool:
        """Check whether a bucket is present (404 means absent)"""
        try:
            self.s3_client.head_bucket(Bucket=bucket)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_BUCKET_CODES:
                return False
            raise
        return True

    def make_bucket(self, bucket: str) -> None:
        """Create a bucket in the configured region"""
        params: dict[str, Any] = {"Bucket": bucket}
        if self.storage.region and self.storage.region != "us-east-1":
            params["CreateBucketConfiguration"] = {
                "LocationConstraint": self.storage.region
            }
        self.s3_client.create_bucket(**params)
        logger.info("Created bucket %s", bucket)

    def put_file(
        self,
        bucket: str,
        key: str,
        file_path: Path,
        content_type: Optional[str] = None,
    ) -> None:
        """Upload a local file, overwriting any object under the same key"""
        extra_args = {"ContentType": content_type} if content_type else None
        self.s3_client.upload_file(
            str(file_path),
            bucket,
            key,
            ExtraArgs=extra_args,
        )
