"""Content fingerprints used for drift detection."""

import hashlib
from pathlib import Path

# Read local files in 64 KB chunks
DIGEST_CHUNK_SIZE = 65536

# Length of the display prefix used in routine "no change" logging
SHORT_FINGERPRINT_LENGTH = 8

# Sentinel recorded for items whose remote content could not be retrieved
ZERO_FINGERPRINT = "0" * 64


def fingerprint(blob: bytes) -> str:
    """
    Compute the SHA-256 fingerprint of an in-memory byte sequence.

    Args:
        blob: Content to hash

    Returns:
        64-character lowercase hexadecimal digest
    """
    return hashlib.sha256(blob).hexdigest()


def fingerprint_of_file(file_path: Path) -> str:
    """
    Compute the SHA-256 fingerprint of a file on disk.

    Produces exactly the same value as ``fingerprint`` for the same bytes.

    Args:
        file_path: Path to the file

    Returns:
        64-character lowercase hexadecimal digest

    Raises:
        OSError: If file cannot be read
    """
    hasher = hashlib.sha256()

    with open(file_path, 'rb') as f:
        while chunk := f.read(DIGEST_CHUNK_SIZE):
            hasher.update(chunk)

    return hasher.hexdigest()


def short_fingerprint(value: str) -> str:
    """Return the display prefix of a fingerprint."""
    return value[:SHORT_FINGERPRINT_LENGTH]
