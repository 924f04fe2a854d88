"""Read album metadata from embedded audio tags."""

import logging
from pathlib import Path
from typing import Any, Optional

import mutagen
from mutagen.easyid3 import EasyID3
from mutagen.id3 import ID3

from ..exceptions import AlbumSkipped
from ..models import AlbumMetadata

# Alias for mutagen.File - mutagen doesn't have type stubs
MutagenFile = mutagen.File

logger = logging.getLogger(__name__)


def _first(tags: Any, key: str) -> Optional[str]:
    """Return the first non-empty value of an easy tag, if any."""
    values = tags.get(key)
    if not values:
        return None
    value = str(values[0]).strip()
    return value or None


class TagReader:
    """Extract title/album/artist/description from one audio file."""

    def read(self, path: Path) -> AlbumMetadata:
        """Read tags from ``path``.

        Args:
            path: Audio file to read

        Returns:
            AlbumMetadata for the album the file belongs to

        Raises:
            AlbumSkipped: If the file has no readable tags or no artist
        """
        try:
            audio = MutagenFile(path, easy=True)
        except (mutagen.MutagenError, OSError) as e:
            raise AlbumSkipped(path.parent, f"cannot read tags from {path.name}: {e}")

        if audio is None or audio.tags is None:
            raise AlbumSkipped(path.parent, f"no tags found in {path.name}")

        tags = audio.tags
        artist = _first(tags, "artist") or _first(tags, "albumartist")
        if not artist:
            raise AlbumSkipped(path.parent, f"missing artist tag in {path.name}")

        comment = _first(tags, "comment")
        if comment is None and isinstance(tags, EasyID3):
            comment = self._read_id3_comment(path)

        return AlbumMetadata(
            title=_first(tags, "title") or "",
            album=_first(tags, "album") or "(none)",
            artist=artist,
            description=_first(tags, "description"),
            comment=comment,
        )

    @staticmethod
    def _read_id3_comment(path: Path) -> Optional[str]:
        # EasyID3 has no comment key; read COMM frames directly
        try:
            frames = ID3(path).getall("COMM")
        except mutagen.MutagenError as e:
            logger.debug("Cannot read ID3 comments from %s: %s", path, e)
            return None
        for frame in frames:
            if frame.text and str(frame.text[0]).strip():
                return str(frame.text[0]).strip()
        return None
