"""
Clientes API — Image File Service
===================================

What:  Writes and deletes client photos in the upload directory.
Why:   Keeps all filesystem work for uploads in one place.
How:   Files are stored flat under `settings.upload_dir`, resolved to an
       absolute path on every call. Each stored name is
       "<uuid4>_<original filename without spaces>", so two uploads of the
       same file never collide.
Who:   Called by ClienteService during upload and delete.

Failure policy:
    - store_image(): an OSError becomes FileStorageError (HTTP 500)
    - delete_image(): best-effort; problems are logged and reported as False
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from app.config import settings
from app.exceptions import FileStorageError, describe_error

logger = logging.getLogger(__name__)


class FileService:
    """
    Manages the client photo files.

    Directory layout:
        uploads/
        ├── 3f0c...-..._foto.jpg
        └── 9a41...-..._MiFoto.png
    """

    def __init__(self, upload_dir: Optional[str] = None):
        """
        Args:
            upload_dir: Override the configured directory (used in tests).
                        If None, settings.upload_dir is read on every call.
        """
        self._upload_dir = upload_dir

    @property
    def upload_root(self) -> Path:
        """Absolute upload directory, resolved at call time."""
        return Path(self._upload_dir or settings.upload_dir).resolve()

    def path_for(self, filename: str) -> Path:
        return self.upload_root / filename

    @staticmethod
    def generate_filename(original_filename: Optional[str]) -> str:
        """
        Build the stored name: random UUID + "_" + original name with spaces removed.

        Only the basename of the original is kept so a crafted name cannot
        point outside the upload directory.
        """
        original = Path(original_filename or "imagen").name.replace(" ", "")
        return f"{uuid.uuid4()}_{original}"

    async def store_image(self, content: bytes, original_filename: Optional[str]) -> str:
        """
        Write an uploaded photo to disk.

        Returns:
            The generated filename (relative to the upload directory).

        Raises:
            FileStorageError: directory creation or write failed.
        """
        filename = self.generate_filename(original_filename)
        path = self.path_for(filename)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # "xb": never overwrite an existing file
            async with aiofiles.open(path, "xb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", path, str(e))
            raise FileStorageError(
                error=describe_error(e),
                context={"path": str(path)},
            ) from e

        logger.info("Image stored: %s (%d bytes)", filename, len(content))
        return filename

    async def delete_image(self, filename: Optional[str]) -> bool:
        """
        Remove a stored photo if it exists and is readable.

        Returns:
            True if a file was removed, False otherwise (missing name,
            missing file, or an OS error which is logged at WARNING).
        """
        if not filename:
            return False

        path = self.path_for(filename)
        try:
            if path.is_file() and os.access(path, os.R_OK):
                os.remove(path)
                logger.info("Deleted image: %s", filename)
                return True
            logger.debug("Image already gone: %s", filename)
        except OSError as e:
            logger.warning("Failed to delete image %s: %s", filename, str(e))
        return False


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
