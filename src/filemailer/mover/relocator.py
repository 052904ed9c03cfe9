"""Relocator component that moves sent files out of the watched folder."""

import os
from dataclasses import dataclass
from pathlib import Path

from ..utils.logging import get_logger

logger = get_logger(__name__)

# Owner and group get full access, others none
DEFAULT_DIR_MODE = 0o750


class RelocateError(Exception):
    """Raised when a sent file cannot be moved into the save folder."""


@dataclass
class RelocateResult:
    """Result of a relocate operation."""

    source_path: Path
    destination_path: Path
    success: bool
    error_message: str | None = None
    error: RelocateError | None = None

    @property
    def filename(self) -> str:
        """Base name shared by source and destination."""
        return self.source_path.name

    @property
    def destination_folder(self) -> Path:
        """Get the destination folder."""
        return self.destination_path.parent


class Relocator:
    """
    Moves files into a destination folder under their original name.

    An existing file of the same name at the destination is replaced. The
    move is a rename, so it fails rather than copies across filesystems.
    """

    def __init__(self, dir_mode: int = DEFAULT_DIR_MODE):
        """
        Initialize the relocator.

        Args:
            dir_mode: Permission bits for folders created at the destination
        """
        self.dir_mode = dir_mode

    def _fail(self, source: Path, destination: Path, message: str, cause: Exception) -> RelocateResult:
        error = RelocateError(message)
        error.__cause__ = cause
        return RelocateResult(
            source_path=source,
            destination_path=destination,
            success=False,
            error_message=message,
            error=error,
        )

    def _make_folders(self, folder: Path):
        """Create folder and its missing parents, each with dir_mode."""
        missing = []
        while not folder.is_dir():
            missing.append(folder)
            if folder.parent == folder:
                break
            folder = folder.parent

        for path in reversed(missing):
            os.mkdir(path, self.dir_mode)

    def relocate(self, source: Path, destination_root: Path) -> RelocateResult:
        """
        Move a file to ``destination_root / source.name``.

        Args:
            source: File to move
            destination_root: Folder to move it into (created if missing)

        Returns:
            RelocateResult with operation status
        """
        source = Path(source)
        destination_root = Path(destination_root)
        destination = destination_root / source.name

        try:
            self._make_folders(destination_root)
        except OSError as e:
            return self._fail(source, destination, f"Failed to create folder {destination_root}: {e}", e)

        try:
            os.replace(source, destination)
        except OSError as e:
            return self._fail(source, destination, f"Move failed for {source.name}: {e}", e)

        logger.debug(f"Moved: {source.name} -> {destination}")
        return RelocateResult(source_path=source, destination_path=destination, success=True)
