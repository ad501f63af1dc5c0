"""
File upload utilities for handling image validation and storage.
Provides image checks, disk storage under the upload directory and public URL building.
"""

import io
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from realty_api.config import get_settings
from realty_api.utils.exceptions import FileSizeExceededError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)


def build_image_url(file_path: Optional[str]) -> str:
    """
    Build the absolute URL for a stored image path.
    Absolute http(s) paths pass through; a missing path points at the default image.
    """
    app_url = get_settings().app_url
    if not file_path:
        return f"{app_url}/default.jpg"

    normalized = file_path.replace("\\", "/")
    if normalized.startswith("http"):
        return normalized

    return f"{app_url}/{normalized.lstrip('/')}"


class FileValidator:
    """Utility class for file validation operations."""

    @classmethod
    def validate_mime_type(cls, mime_type: Optional[str]) -> str:
        """
        Accept any image MIME type.

        Raises:
            UnsupportedFileTypeError: If the upload is not declared as an image
        """
        if not mime_type or not mime_type.startswith("image/"):
            raise UnsupportedFileTypeError()
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: int) -> int:
        """
        Validate file size against the per-resource limit.

        Raises:
            FileSizeExceededError: If the file is larger than allowed
        """
        if file_size > max_size:
            raise FileSizeExceededError(file_size, max_size)
        return file_size

    @classmethod
    def validate_image_content(cls, content: bytes) -> str:
        """
        Check that the bytes decode as an image and return the detected format.

        Raises:
            UnsupportedFileTypeError: If Pillow cannot read the content
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                return (img.format or "").lower()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            logger.debug(f"Rejected upload that is not a readable image: {e}")
            raise UnsupportedFileTypeError()

    @classmethod
    async def validate_upload_file(cls, file: UploadFile, max_size: int) -> bytes:
        """
        Validate one uploaded file and return its content.
        Checks run in order: MIME type, size, decodable image content.
        """
        cls.validate_mime_type(file.content_type)

        await file.seek(0)
        content = await file.read()
        await file.seek(0)

        cls.validate_file_size(len(content), max_size)
        cls.validate_image_content(content)
        return content


class FileStorage:
    """Utility class for file storage operations."""

    def __init__(self, base_dir: Optional[Path] = None, public_prefix: Optional[str] = None):
        settings = get_settings()
        self.base_dir = Path(base_dir or settings.upload_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_prefix = (public_prefix or settings.uploads_url_path).strip("/")

    @staticmethod
    def generate_unique_filename(prefix: str, original_filename: str, mime_type: Optional[str] = None) -> str:
        """Generate a unique filename, keeping the original extension where there is one."""
        extension = Path(original_filename or "").suffix.lower()
        if not extension and mime_type:
            extension = mimetypes.guess_extension(mime_type) or ""
        return f"{prefix}-{uuid.uuid4().hex}{extension or '.jpg'}"

    def get_folder(self, folder: str) -> Path:
        """Get or create the folder for one resource type."""
        directory = self.base_dir / folder
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def public_path(self, folder: str, filename: str) -> str:
        """Path stored on records and served under the static mount."""
        return f"{self.public_prefix}/{folder}/{filename}"

    def resolve_public_path(self, public_path: str) -> Optional[Path]:
        """
        Map a stored public path back to the file on disk.
        Returns None for paths that would escape the upload directory.
        """
        relative = public_path.replace("\\", "/").lstrip("/")
        prefix = f"{self.public_prefix}/"
        if relative.startswith(prefix):
            relative = relative[len(prefix):]

        candidate = (self.base_dir / relative).resolve()
        if candidate == self.base_dir or not candidate.is_relative_to(self.base_dir):
            logger.warning(f"Refusing to resolve path outside upload directory: {public_path}")
            return None
        return candidate

    async def save_bytes(self, content: bytes, folder: str, filename: str) -> str:
        """Write content to disk and return its public path."""
        file_path = self.get_folder(folder) / filename

        try:
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except OSError:
            # Clean up partial file if it exists
            if file_path.exists():
                file_path.unlink(missing_ok=True)
            raise

        logger.debug(f"Saved upload {file_path} ({len(content)} bytes)")
        return self.public_path(folder, filename)

    def delete_public_path(self, public_path: str) -> bool:
        """
        Delete the file behind a public path.
        A missing file is not an error; returns whether a file was removed.
        """
        file_path = self.resolve_public_path(public_path)
        if file_path is None or not file_path.exists():
            return False

        file_path.unlink()
        return True
