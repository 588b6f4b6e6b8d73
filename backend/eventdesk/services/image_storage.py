"""Image storage backends for event pictures."""
import logging
import os
import uuid
from typing import Protocol

from eventdesk.config import settings
from eventdesk.errors import UploadError, ValidationError

logger = logging.getLogger(__name__)

_EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png"}


class ImageStorage(Protocol):
    def save(self, filename: str, content_type: str, data: bytes) -> str:
        """Persist the image and return its public URL."""
        ...

    def delete(self, url: str) -> None:
        """Remove a previously saved image; missing files are ignored."""
        ...


class LocalImageStorage:
    """Stores images under a directory served at ``/uploads``."""

    def __init__(self, directory: str, base_url: str):
        self.directory = directory
        self.base_url = base_url.rstrip("/")

    def save(self, filename: str, content_type: str, data: bytes) -> str:
        ext = _EXTENSIONS.get(content_type) or os.path.splitext(filename)[1].lower()
        stored_name = f"{uuid.uuid4().hex}{ext}"
        path = os.path.join(self.directory, stored_name)
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "wb") as fh:
                fh.write(data)
        except OSError as exc:
            logger.exception("Failed to store image %s", filename)
            raise UploadError(f"Image upload failed: {exc.strerror or exc}") from exc
        logger.info("Stored image %s as %s (%d bytes)", filename, stored_name, len(data))
        return f"{self.base_url}/uploads/{stored_name}"

    def delete(self, url: str) -> None:
        path = os.path.join(self.directory, os.path.basename(url))
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError:
            logger.warning("Could not remove orphaned image %s", path, exc_info=True)
            return
        logger.info("Removed orphaned image %s", path)


def validate_image(content_type: str | None, data: bytes) -> None:
    """Reject empty, oversized, or non-jpeg/png uploads."""
    allowed = [t.strip() for t in settings.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]
    if content_type not in allowed:
        raise ValidationError(f"Unsupported image type: {content_type}. Allowed: {', '.join(allowed)}")
    if not data:
        raise ValidationError("Image file is empty")
    if len(data) > settings.MAX_IMAGE_BYTES:
        raise ValidationError(f"Image exceeds {settings.MAX_IMAGE_BYTES} bytes")


def get_image_storage() -> ImageStorage:
    """Dependency returning the configured image storage."""
    return LocalImageStorage(settings.UPLOAD_DIR, settings.PUBLIC_BASE_URL)
