"""Content addressing: SHA256 fingerprints and hash-derived storage keys

Storage key format: {sha256[:2]}/{sha256}{ext}
The two-character prefix only spreads objects across storage partitions;
deduplication always uses the full digest.
"""

import hashlib
from typing import BinaryIO, Union

from .errors import HashCalculationError


HASH_CHUNK_SIZE = 8192  # 8KB chunks
DEFAULT_KEY_PREFIX = "00"


def calculate_sha256(content: Union[bytes, bytearray, memoryview, BinaryIO]) -> str:
    """Compute the lowercase hex SHA256 of bytes or of a stream read to EOF.

    The stream is consumed from its current position; callers that write the
    same stream afterwards must seek it back to the start.

    Args:
        content: Raw bytes or a readable binary stream

    Returns:
        str: 64-character lowercase hex digest

    Raises:
        HashCalculationError: If the stream cannot be read to the end
    """
    sha256_hash = hashlib.sha256()

    if isinstance(content, (bytes, bytearray, memoryview)):
        sha256_hash.update(content)
        return sha256_hash.hexdigest()

    try:
        while True:
            chunk = content.read(HASH_CHUNK_SIZE)
            if not chunk:
                break
            sha256_hash.update(chunk)
    except (OSError, ValueError) as e:
        raise HashCalculationError(cause=e) from e

    return sha256_hash.hexdigest()


def file_extension(filename: str) -> str:
    """Lowercased extension including the dot, or "" when there is none.

    Example:
        >>> file_extension("report.PDF")
        '.pdf'
        >>> file_extension("README")
        ''
    """
    dot = filename.rfind(".")
    if dot < 0:
        return ""
    return filename[dot:].lower()


def object_key_from_hash(hash_hex: str, filename: str) -> str:
    """Derive the object storage key for a digest and original filename.

    Example:
        >>> object_key_from_hash("ab12...", "invoice.PDF")
        'ab/ab12....pdf'
    """
    prefix = hash_hex[:2] if len(hash_hex) >= 2 else DEFAULT_KEY_PREFIX
    return f"{prefix}/{hash_hex}{file_extension(filename)}"
