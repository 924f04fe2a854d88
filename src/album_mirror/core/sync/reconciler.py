"""Decide whether an album must be mirrored and which files to copy.

Staleness is a file-count comparison, and per-file freshness is by file name
only. A target file with the same name as a source file counts as synced even
when its contents differ.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from ...exceptions import FilesystemError
from ...models import AlbumDirectory, SyncKind, SyncResult

logger = logging.getLogger(__name__)


def count_files(directory: Path) -> int:
    """Number of regular files in ``directory``; 0 if it does not exist."""
    if not directory.is_dir():
        return 0
    return sum(1 for entry in directory.iterdir() if entry.is_file())


class SyncReconciler:
    """Mirrors one source album directory into the target library."""

    def needs_sync(
        self, album: AlbumDirectory, existing_file_count: int, did_write_artwork: bool
    ) -> bool:
        """Whether the target copy of ``album`` is stale.

        Args:
            album: Source album directory
            existing_file_count: Regular files already in the target album
            did_write_artwork: Whether new artwork was written this run

        Returns:
            True if new artwork was written or the source has more files
        """
        return did_write_artwork or album.file_count > existing_file_count

    def reconcile(
        self,
        album: AlbumDirectory,
        target_album_path: Path,
        existing_file_count: int,
        did_write_artwork: bool,
    ) -> Optional[SyncResult]:
        """Copy whatever the target is missing.

        Args:
            album: Source album directory
            target_album_path: ``<target>/<artist>/<album dir name>``
            existing_file_count: Regular files already in the target album
            did_write_artwork: Whether new artwork was written this run

        Returns:
            SyncResult describing the copy, or None if nothing had to be done
        """
        if not self.needs_sync(album, existing_file_count, did_write_artwork):
            logger.debug("Up to date: %s", target_album_path)
            return None

        logger.info(
            "Copying album dir %s -> %s", album.path, target_album_path.parent
        )
        if not target_album_path.is_dir():
            return self._copy_album(album, target_album_path)
        return self._copy_missing_files(album, target_album_path)

    def _copy_album(
        self, album: AlbumDirectory, target_album_path: Path
    ) -> SyncResult:
        artist_dir = target_album_path.parent
        if not artist_dir.is_dir():
            logger.info("Creating artist dir %s", artist_dir)

        try:
            self._copy_tree(album.path, target_album_path)
        except FilesystemError as e:
            logger.error("%s", e)
            copied = [n for n in album.file_names if (target_album_path / n).is_file()]
            failed = [n for n in album.file_names if n not in copied]
            return SyncResult(
                target_path=target_album_path,
                kind=SyncKind.CREATED,
                copied_files=copied,
                failed_files=failed,
            )

        return SyncResult(
            target_path=target_album_path,
            kind=SyncKind.CREATED,
            copied_files=album.file_names,
        )

    def _copy_missing_files(
        self, album: AlbumDirectory, target_album_path: Path
    ) -> SyncResult:
        copied: List[str] = []
        failed: List[str] = []

        for source in album.files:
            target = target_album_path / source.name
            if target.is_file():
                continue
            try:
                self._copy_file(source, target)
            except FilesystemError as e:
                logger.error("%s", e)
                failed.append(source.name)
                continue
            logger.debug("Copied %s", source.name)
            copied.append(source.name)

        return SyncResult(
            target_path=target_album_path,
            kind=SyncKind.UPDATED,
            copied_files=copied,
            failed_files=failed,
        )

    @staticmethod
    def _copy_tree(source: Path, target: Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, target)
        except OSError as e:
            raise FilesystemError(f"Cannot copy {source}: {e}") from e

    @staticmethod
    def _copy_file(source: Path, target: Path) -> None:
        try:
            shutil.copy2(source, target)
        except OSError as e:
            raise FilesystemError(f"Cannot copy {source}: {e}") from e
