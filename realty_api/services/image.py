"""
Image service for handling record image uploads, storage and cleanup.
Each resource type has its own upload policy: folder, filename prefix, count and size limits.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from fastapi import UploadFile

from realty_api.config import get_settings
from realty_api.utils.exceptions import TooManyFilesError
from realty_api.utils.file_utils import FileStorage, FileValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadPolicy:
    """Limits and naming for one kind of image upload."""
    folder: str
    prefix: str
    max_files: int
    max_file_size: int


def property_upload_policy() -> UploadPolicy:
    settings = get_settings()
    return UploadPolicy(
        folder="properties",
        prefix="property",
        max_files=settings.property_max_images,
        max_file_size=settings.property_max_image_size,
    )


def user_upload_policy() -> UploadPolicy:
    settings = get_settings()
    return UploadPolicy(
        folder="users",
        prefix="user",
        max_files=settings.user_max_images,
        max_file_size=settings.user_max_image_size,
    )


class ImageService:
    """Service for saving and removing the image files attached to records."""

    def __init__(self, policy: UploadPolicy, storage: Optional[FileStorage] = None):
        self.policy = policy
        self.storage = storage or FileStorage()

    async def validate_uploads(self, files: List[UploadFile]) -> List[Tuple[UploadFile, bytes]]:
        """
        Validate a whole upload batch before anything is written.

        Raises:
            TooManyFilesError: If the batch exceeds the per-request limit
            UnsupportedFileTypeError: If a file is not an image
            FileSizeExceededError: If a file is larger than allowed
        """
        if len(files) > self.policy.max_files:
            raise TooManyFilesError(len(files), self.policy.max_files)

        validated = []
        for file in files:
            content = await FileValidator.validate_upload_file(file, self.policy.max_file_size)
            validated.append((file, content))
        return validated

    async def save_uploads(self, files: Optional[List[UploadFile]]) -> List[str]:
        """
        Validate and store uploaded images, returning their public paths in upload order.
        Files already written are removed again if a later one fails.
        """
        files = [file for file in (files or []) if file is not None and file.filename]
        if not files:
            return []

        validated = await self.validate_uploads(files)

        saved: List[str] = []
        try:
            for file, content in validated:
                filename = FileStorage.generate_unique_filename(
                    self.policy.prefix, file.filename, file.content_type
                )
                saved.append(await self.storage.save_bytes(content, self.policy.folder, filename))
        except Exception:
            self.delete_images(saved)
            raise

        logger.info(f"Stored {len(saved)} {self.policy.folder} image(s)")
        return saved

    def delete_image(self, public_path: str) -> bool:
        """Delete one stored image; failures are logged and ignored."""
        try:
            return self.storage.delete_public_path(public_path)
        except OSError as e:
            logger.warning(f"Could not delete image {public_path}: {e}")
            return False

    def delete_images(self, public_paths: Iterable[str]) -> int:
        """Delete every listed image best effort and return how many were removed."""
        removed = 0
        for public_path in public_paths:
            if self.delete_image(public_path):
                removed += 1
        return removed
