"""Filesystem-backed image store."""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from uuid import uuid4

from wandduk.domain.errors import StorageUnavailableError
from wandduk.services.images import ImageStore, encode_jpeg

_logger = logging.getLogger(__name__)


@dataclass
class FileSystemImageStore(ImageStore):
    """Stores JPEG photos under ``<root>/<directory>`` with generated names.

    Paths handed out are relative to ``root`` so records survive the root
    moving.
    """

    root: Path | None
    directory: str = "WanddukImages"
    quality: float = 0.8

    def save(self, image: bytes) -> str:
        """Compress ``image`` to JPEG, write it and return its relative path."""
        directory = self._ensure_directory()
        payload = encode_jpeg(image, self.quality)
        file_name = f"{uuid4()}.jpg"
        try:
            (directory / file_name).write_bytes(payload)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Could not write image to {directory}."
            ) from exc
        relative_path = str(PurePosixPath(self.directory) / file_name)
        _logger.info("Image saved: path=%s bytes=%s", relative_path, len(payload))
        return relative_path

    def load(self, relative_path: str) -> bytes | None:
        """Return the stored bytes, or None for empty paths and missing files."""
        path = self.full_path(relative_path)
        if path is None:
            return None
        try:
            return path.read_bytes()
        except OSError:
            return None

    def delete(self, relative_path: str) -> None:
        """Remove a stored image; never raises."""
        path = self.full_path(relative_path)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError:
            _logger.warning("Could not delete image: path=%s", relative_path)

    def full_path(self, relative_path: str) -> Path | None:
        """Resolve a relative path against the current storage root.

        Paths that escape the image directory resolve to None.
        """
        if not relative_path or self.root is None:
            return None
        candidate = self.root / relative_path
        image_directory = (self.root / self.directory).resolve()
        if not candidate.resolve().is_relative_to(image_directory):
            _logger.warning("Rejected image path: path=%s", relative_path)
            return None
        return candidate

    def _ensure_directory(self) -> Path:
        if self.root is None:
            raise StorageUnavailableError("Storage root could not be resolved.")
        directory = self.root / self.directory
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Could not create image directory {directory}."
            ) from exc
        return directory
