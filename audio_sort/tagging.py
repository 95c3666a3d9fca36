from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Protocol

from mutagen import MutagenError
from mutagen.id3 import ID3

from .models import Identity

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


class IdentityExtractor(Protocol):
    def inspect(self, path: Path) -> Optional[Identity]: ...


class Id3IdentityReader:
    """Reads artist/album/title/track from ID3 frames.

    Files without an ID3 header, unreadable files and tags missing one of the
    required frames are all reported as unrecognized (None).
    """

    def inspect(self, path: Path) -> Optional[Identity]:
        try:
            tags = ID3(path)
        except (MutagenError, OSError) as exc:
            logger.debug("No usable ID3 tags in %s: %s", path, exc)
            return None
        artist = self._id3_text(tags, "TPE1")
        album = self._id3_text(tags, "TALB")
        title = self._id3_text(tags, "TIT2")
        if not artist or not album or not title:
            return None
        return Identity(
            artist_name=artist,
            album_name=album,
            track_name=title,
            track_number=parse_track_number(self._id3_text(tags, "TRCK")),
        )

    @staticmethod
    def _id3_text(tags: ID3, frame_id: str) -> Optional[str]:
        frame = tags.get(frame_id)
        if frame is None or not getattr(frame, "text", None):
            return None
        return str(frame.text[0])


def parse_track_number(value: object) -> Optional[int]:
    """``"3"`` -> 3, ``"03/12"`` -> 3; anything without leading digits -> None."""
    if value is None:
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    match = _LEADING_DIGITS.match(str(value))
    if not match:
        return None
    return int(match.group(1))
