"""S3-compatible object storage adapter"""

from .s3_storage_adapter import S3StorageAdapter, StorageError

__all__ = ["S3StorageAdapter", "StorageError"]
