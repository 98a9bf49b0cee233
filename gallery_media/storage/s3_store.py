"""S3 (and S3-compatible) object store backend."""

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..enums import LogEmoji, LoggerName
from ..exceptions import StorageError
from ..services.logger import get_service_logger
from .base import ObjectStore, StoredObject

logger = get_service_logger(LoggerName.OBJECT_STORE)

PUBLIC_READ_ACL = "public-read"


class S3ObjectStore(ObjectStore):
    """
    Stores objects in a single bucket.

    Public URLs use public_base_url when given (CDN or custom domain),
    otherwise the bucket's virtual-hosted style endpoint.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        client: Optional[Any] = None,
        public_read: bool = True,
        public_base_url: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
    ):
        self.bucket = bucket
        self.region = region
        self.public_read = public_read
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
        )

    @classmethod
    def from_settings(cls, settings, client: Optional[Any] = None) -> "S3ObjectStore":
        return cls(
            bucket=settings.s3_bucket,
            region=settings.aws_region,
            client=client,
            public_read=settings.s3_public_read,
            public_base_url=settings.storage_public_base_url,
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, key: str, data: bytes, content_type: str) -> StoredObject:
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type,
        }
        if self.public_read:
            params["ACL"] = PUBLIC_READ_ACL

        try:
            self.client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(
                f"Failed to upload {key} to bucket {self.bucket}: {e}",
                key=key,
                operation="upload",
            ) from e

        logger.debug(
            f"Uploaded {key}",
            extra_context={"bucket": self.bucket, "bytes": len(data)},
            emoji=LogEmoji.UPLOAD,
        )
        return StoredObject(key=key, url=self.public_url(key))

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(
                f"Failed to delete {key} from bucket {self.bucket}: {e}",
                key=key,
                operation="delete",
            ) from e

        logger.debug(f"Deleted {key}", extra_context={"bucket": self.bucket})
