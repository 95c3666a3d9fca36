from __future__ import annotations

import hashlib
from pathlib import Path

from .models import FileAndHash

DEFAULT_CHUNK_SIZE = 1024 * 1024


def content_hash(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """SHA-256 of the file's bytes as lowercase hex, read in chunks."""
    hasher = hashlib.sha256()
    with path.open("rb") as fh:
        while True:
            chunk = fh.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def hash_file(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> FileAndHash:
    return FileAndHash(filepath=path, hash=content_hash(path, chunk_size))
