"""MIME type detection from filename extensions

Detection uses a static extension table only; content bytes are never sniffed.
"""

from typing import Dict, Optional

from .content_addressing import file_extension


DEFAULT_MIME_TYPE = "application/octet-stream"

EXTENSION_MIME_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".json": "application/json",
    ".xml": "application/xml",
    ".zip": "application/zip",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class ExtensionMimeTypeDetector:
    """Maps file extensions to MIME types, falling back to a generic binary type."""

    def __init__(
        self,
        extension_map: Optional[Dict[str, str]] = None,
        default_type: str = DEFAULT_MIME_TYPE,
    ):
        self._extension_map = dict(EXTENSION_MIME_TYPES if extension_map is None else extension_map)
        self._default_type = default_type

    def detect(self, filename: str) -> str:
        """Detect the MIME type of a filename

        Example:
            >>> ExtensionMimeTypeDetector().detect("scan.JPG")
            'image/jpeg'
            >>> ExtensionMimeTypeDetector().detect("archive.7z")
            'application/octet-stream'
        """
        return self._extension_map.get(file_extension(filename), self._default_type)

    def add_extension(self, extension: str, mime_type: str) -> None:
        ext = extension.lower()
        if not ext.startswith("."):
            ext = f".{ext}"
        self._extension_map[ext] = mime_type


def detect_mime_type(filename: str) -> str:
    """Detect MIME type with the default extension table."""
    return EXTENSION_MIME_TYPES.get(file_extension(filename), DEFAULT_MIME_TYPE)
