"""Streaming SHA-256 checksums for artifact files."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from .errors import ArtifactIOError
from .models import CHECKSUM_TYPE

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1 << 20


def sha256_file(path: str | Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute the lowercase hex SHA-256 digest of ``path``.

    The file is read in ``chunk_size`` byte blocks so arbitrarily large
    artifacts never sit in memory at once. The digest does not depend on
    ``chunk_size``.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1 byte, got {chunk_size}")
    hasher = hashlib.sha256()
    try:
        with Path(path).open("rb") as stream:
            for chunk in iter(lambda: stream.read(chunk_size), b""):
                hasher.update(chunk)
    except OSError as exc:
        raise ArtifactIOError(f"Cannot read artifact {path}: {exc}") from exc
    digest = hasher.hexdigest()
    logger.debug("%s checksum of %s: %s", CHECKSUM_TYPE, path, digest)
    return digest


__all__ = ["CHECKSUM_TYPE", "DEFAULT_CHUNK_SIZE", "sha256_file"]
