from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Optional

from .models import RESERVED_DIRECTORIES, Identity

SEPARATORS = frozenset(sep for sep in ("/", os.sep, os.altsep) if sep)
UNSAFE_SEGMENTS = {"", ".", ".."}
ELLIPSIS = "…"
MAX_BASENAME_BYTES = 255


def sanitize_segment(value: str) -> str:
    """Drop path separators from a tag value; everything else is kept as-is."""
    return "".join(ch for ch in value if ch not in SEPARATORS)


def fit_name(stem: str, extra: str = "", suffix: str = "") -> str:
    """Join the parts, cutting ``stem`` short (with an ellipsis) to stay within
    ``MAX_BASENAME_BYTES``. ``extra`` and ``suffix`` are never shortened."""
    name = f"{stem}{extra}{suffix}"
    if len(name.encode("utf-8")) <= MAX_BASENAME_BYTES:
        return name
    allowed = (
        MAX_BASENAME_BYTES
        - len(extra.encode("utf-8"))
        - len(suffix.encode("utf-8"))
        - len(ELLIPSIS.encode("utf-8"))
    )
    allowed = max(0, allowed)
    truncated = stem.encode("utf-8")[:allowed].decode("utf-8", errors="ignore")
    return f"{truncated}{ELLIPSIS}{extra}{suffix}"


def track_filename(identity: Identity, extension: str = ".mp3") -> str:
    title = sanitize_segment(identity.track_name)
    if identity.track_number is not None:
        return fit_name(f"{identity.track_number:02d} - {title}", suffix=extension)
    return fit_name(title, suffix=extension)


def target_for(root: Path, identity: Identity, extension: str = ".mp3") -> Optional[Path]:
    """Return ``root/artist/album/filename`` or None when a segment would be unsafe."""
    artist = sanitize_segment(identity.artist_name)
    album = sanitize_segment(identity.album_name)
    if artist in UNSAFE_SEGMENTS or album in UNSAFE_SEGMENTS:
        return None
    # The title only ends up inside a file name, so "." and ".." are fine there.
    if not sanitize_segment(identity.track_name):
        return None
    return root / fit_name(artist) / fit_name(album) / track_filename(identity, extension)


def strip_reserved_prefix(relative: PurePath) -> PurePath:
    parts = relative.parts
    while parts and parts[0] in RESERVED_DIRECTORIES:
        parts = parts[1:]
    return PurePath(*parts)


def quarantine_base(root: Path, directory: str, path: Path) -> Path:
    """Mirror ``path`` (relative to ``root``) under ``root/directory``."""
    relative = strip_reserved_prefix(path.relative_to(root))
    return root / directory / relative


def with_suffixes(path: Path, *tokens: object) -> Path:
    """``a/b/name.mp3`` + ("x", 1) -> ``a/b/name_x_1.mp3``, shortening ``name`` if needed."""
    extra = "".join(f"_{token}" for token in tokens)
    return path.with_name(fit_name(path.stem, extra, path.suffix))
