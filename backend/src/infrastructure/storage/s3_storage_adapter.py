"""S3 Storage Adapter - Implementation of ObjectStoragePort using boto3.

Provides S3-compatible storage operations for AWS S3, MinIO, and other
S3-compatible services: uploads under hash-derived keys, deletes and
presigned URLs.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import asyncio
import functools
import logging
from datetime import timedelta
from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from domain.documents.ports.object_storage_port import ObjectStoragePort
from observability.metrics import storage_operation_duration_seconds

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class S3StorageAdapter(ObjectStoragePort):
    """S3-compatible storage adapter using boto3.

    boto3 clients are thread-safe, so blocking calls are pushed to the
    default executor and the adapter can be shared by concurrent requests.

    Example:
        storage = S3StorageAdapter(
            endpoint_url=settings.S3_ENDPOINT_URL,
            access_key=settings.S3_ACCESS_KEY_ID,
            secret_key=settings.S3_SECRET_ACCESS_KEY,
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.S3_REGION,
        )

        with open('invoice.pdf', 'rb') as f:
            await storage.put(f, 'ab/ab12....pdf', 'application/pdf')
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
        public_base_url: str = "",
    ):
        """Initialize S3 storage adapter.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: AWS region (default: 'us-east-1')
            public_base_url: Base URL under which the bucket is publicly
                readable, or "" when objects are only reachable by presigned URL

        Raises:
            StorageError: If S3 client initialization fails
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
            self._bucket_name = bucket_name
            self.region = region
            self.public_base_url = public_base_url.rstrip("/")

            logger.info(
                f"Initialized S3 storage adapter: bucket={bucket_name}, "
                f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except Exception as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

    @classmethod
    def from_settings(cls, settings) -> "S3StorageAdapter":
        """Build the adapter from config.Settings."""
        return cls(
            endpoint_url=settings.S3_ENDPOINT_URL,
            access_key=settings.S3_ACCESS_KEY_ID,
            secret_key=settings.S3_SECRET_ACCESS_KEY,
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.S3_REGION,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
        )

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def _call(self, operation: str, fn, **kwargs):
        loop = asyncio.get_running_loop()
        with storage_operation_duration_seconds.labels(operation=operation).time():
            return await loop.run_in_executor(None, functools.partial(fn, **kwargs))

    async def put(self, body: BinaryIO, object_key: str, content_type: str) -> None:
        """Upload a stream to S3 under object_key.

        Raises:
            StorageError: If upload fails
        """
        try:
            await self._call(
                "put",
                self.s3_client.put_object,
                Bucket=self._bucket_name,
                Key=object_key,
                Body=body,
                ContentType=content_type,
            )

            logger.info(f"Uploaded object: object_key={object_key}, content_type={content_type}")

        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"S3 upload failed: object_key={object_key}, "
                f"error={error_code}, message={e}"
            )
            raise StorageError(f"Failed to upload file: {error_code}") from e
        except (BotoCoreError, OSError, ValueError) as e:
            logger.error(f"Unexpected error during upload: object_key={object_key}, error={e}")
            raise StorageError(f"Failed to upload file: {e}") from e

    async def delete(self, object_key: str) -> None:
        """Delete an object from S3. Missing keys are not an error.

        Raises:
            StorageError: If deletion fails
        """
        try:
            await self._call(
                "delete",
                self.s3_client.delete_object,
                Bucket=self._bucket_name,
                Key=object_key,
            )
            logger.info(f"Deleted object: object_key={object_key}")

        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"S3 deletion failed: object_key={object_key}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to delete file: {error_code}") from e
        except BotoCoreError as e:
            logger.error(f"Unexpected error during deletion: object_key={object_key}, error={e}")
            raise StorageError(f"Failed to delete file: {e}") from e

    def public_url(self, object_key: str) -> str:
        if not self.public_base_url:
            return ""
        return f"{self.public_base_url}/{self._bucket_name}/{object_key}"

    async def generate_presigned_url(self, object_key: str, expires_in: timedelta) -> str:
        """Generate a presigned GET URL.

        Args:
            object_key: Storage key of file
            expires_in: URL validity

        Returns:
            str: Presigned URL

        Raises:
            StorageError: If URL generation fails
        """
        expires_in_seconds = int(expires_in.total_seconds())
        try:
            url = await self._call(
                "presign",
                self.s3_client.generate_presigned_url,
                ClientMethod="get_object",
                Params={
                    "Bucket": self._bucket_name,
                    "Key": object_key,
                },
                ExpiresIn=expires_in_seconds,
            )

            logger.debug(
                f"Generated presigned URL: object_key={object_key}, "
                f"expires_in={expires_in_seconds}s"
            )
            return url

        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"Presigned URL generation failed: object_key={object_key}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to generate presigned URL: {error_code}") from e
        except BotoCoreError as e:
            logger.error(f"Unexpected error generating presigned URL: {e}")
            raise StorageError(f"Failed to generate presigned URL: {e}") from e

    async def verify_bucket_exists(self) -> bool:
        """Verify that the configured bucket exists.

        This should be called on application startup to fail fast if
        bucket doesn't exist.

        Returns:
            bool: True if bucket exists

        Raises:
            StorageError: If bucket check fails or bucket doesn't exist
        """
        try:
            await self._call("head_bucket", self.s3_client.head_bucket, Bucket=self._bucket_name)
            logger.info(f"Bucket verified: {self._bucket_name}")
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "404":
                raise StorageError(
                    f"Bucket '{self._bucket_name}' does not exist. "
                    f"Create it first or update S3_BUCKET_NAME."
                ) from e
            raise StorageError(f"Failed to verify bucket: {error_code}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to verify bucket: {e}") from e
