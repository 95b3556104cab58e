"""Content-addressed document uploads with per-owner deduplication"""

from .service import UploadService

__all__ = ["UploadService"]
