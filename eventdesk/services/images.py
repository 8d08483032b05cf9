import os
import shutil
import time

from fastapi import Depends, UploadFile
from loguru import logger

from eventdesk.core.config import Settings, get_settings
from eventdesk.core.errors import BadRequestError

UPLOADS_PATH = "/uploads"


class ImageStore:
    """Stores event cover images on local disk and builds their public URLs."""

    def __init__(self, upload_dir: str, public_base_url: str | None = None, allowed_extensions=None):
        self.upload_dir = upload_dir
        self.public_base_url = public_base_url
        self.allowed_extensions = {ext.lower() for ext in (allowed_extensions or [])}

    def validate(self, upload: UploadFile) -> str:
        """Return the lowercased extension of ``upload`` or reject it."""
        ext = os.path.splitext(upload.filename or "")[1].lower()
        if self.allowed_extensions and ext.lstrip(".") not in self.allowed_extensions:
            raise BadRequestError("Invalid file type")
        return ext

    def save(self, upload: UploadFile) -> str:
        ext = self.validate(upload)
        os.makedirs(self.upload_dir, exist_ok=True)
        filename = f"event-{time.time_ns() // 1_000_000}{ext}"
        path = os.path.join(self.upload_dir, filename)
        with open(path, "wb") as fh:
            shutil.copyfileobj(upload.file, fh)
        logger.info("Stored uploaded image {} as {}", upload.filename, filename)
        return filename

    def discard(self, filename: str) -> None:
        """Remove a stored image whose event was never created."""
        path = os.path.join(self.upload_dir, filename)
        if os.path.exists(path):
            os.remove(path)
            logger.info("Discarded uploaded image {}", filename)

    def public_url(self, filename: str, request_base_url: str) -> str:
        base = self.public_base_url or request_base_url
        return f"{base.rstrip('/')}{UPLOADS_PATH}/{filename}"


def get_image_store(config: Settings = Depends(get_settings)) -> ImageStore:
    return ImageStore(
        config.UPLOAD_DIR,
        public_base_url=config.PUBLIC_BASE_URL,
        allowed_extensions=config.ALLOWED_IMAGE_EXTENSIONS,
    )
