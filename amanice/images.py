"""
Product image ingestion.

Uploads are validated (extension, MIME type, size, image signature) before
anything touches disk. Accepted files go to the upload directory under a
unique name; when that directory cannot be written the blob is cached in the
Local Override Store and served back as a data: URL.
"""

from __future__ import annotations

import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from amanice.catalog.overrides import LocalOverrideStore
from amanice.errors import NotFoundError, ValidationError
from amanice.utils.config_loader import UploadsConfig

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 50


@dataclass
class StoredImage:
    path: str            # Assets/uploads/<name> or a data: URL
    file_name: str
    file_size: int
    storage: str         # "file" or "local"


def _extension(file_name: str) -> str:
    return Path(file_name).suffix.lstrip(".").lower()


def _looks_like_image(data: bytes) -> bool:
    return (
        data.startswith(b"\xff\xd8\xff")
        or data.startswith(b"\x89PNG\r\n\x1a\n")
        or (data[:4] == b"RIFF" and data[8:12] == b"WEBP")
    )


def validate_image(file_name: str, content_type: str, size: int, config: Optional[UploadsConfig] = None) -> str:
    """Check an upload and return its lower-cased extension."""
    config = config or UploadsConfig()
    if not file_name:
        raise ValidationError("No file was uploaded.", field_errors={"image": "file name is required"})
    if (content_type or "").lower() not in [t.lower() for t in config.allowed_mime_types]:
        raise ValidationError(
            "Invalid file type. Only JPG, JPEG, PNG, and WEBP images are allowed.",
            field_errors={"fileType": f"'{content_type}' is not allowed"},
        )
    extension = _extension(file_name)
    if extension not in config.allowed_extensions:
        raise ValidationError(
            "Invalid file extension. Only .jpg, .jpeg, .png, and .webp files are allowed.",
            field_errors={"fileName": f"'.{extension}' is not allowed"},
        )
    if size > config.max_bytes:
        raise ValidationError(
            f"File is too large. Maximum file size is {config.max_bytes // (1024 * 1024)}MB.",
            field_errors={"image": f"{size} bytes exceeds the limit"},
        )
    return extension


def unique_file_name(file_name: str, extension: str, clock: Callable[[], float] = time.time) -> str:
    stem = re.sub(r"[^a-zA-Z0-9_-]", "_", Path(file_name).stem)[:MAX_NAME_LENGTH]
    return f"{stem}_{int(clock())}_{secrets.token_hex(4)}.{extension}"


class ImageIngestor:
    def __init__(
        self,
        local_store: LocalOverrideStore,
        config: Optional[UploadsConfig] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.local = local_store
        self.config = config or UploadsConfig()
        self.root = Path(self.config.root_dir)
        self._clock = clock

    @property
    def public_prefix(self) -> str:
        return self.config.upload_dir.strip("/") + "/"

    def ingest(self, file_name: str, content_type: str, data: bytes) -> StoredImage:
        extension = validate_image(file_name, content_type, len(data), self.config)
        if not _looks_like_image(data):
            raise ValidationError("Invalid image file. The uploaded file is not a valid image.")

        new_name = unique_file_name(file_name, extension, self._clock)
        upload_dir = self.root / self.config.upload_dir
        try:
            upload_dir.mkdir(parents=True, exist_ok=True)
            (upload_dir / new_name).write_bytes(data)
        except OSError as e:
            logger.warning("Upload directory not writable (%s); caching image locally", e)
            data_url = self.local.store_image(new_name, content_type.lower(), data, original_name=file_name)
            return StoredImage(path=data_url, file_name=new_name, file_size=len(data), storage="local")

        logger.info("Image uploaded: %s%s (%d bytes)", self.public_prefix, new_name, len(data))
        return StoredImage(path=f"{self.public_prefix}{new_name}", file_name=new_name, file_size=len(data), storage="file")

    def delete(self, image_path: str) -> str:
        """Delete an image under one of the deletable directories."""
        if not image_path:
            raise ValidationError("Image path is required.", field_errors={"imagePath": "required"})
        if not any(image_path.startswith(prefix) for prefix in self.config.deletable_dirs):
            raise ValidationError(
                "Invalid path. Only images in "
                + " or ".join(self.config.deletable_dirs)
                + " can be deleted."
            )

        root = self.root.resolve()
        full_path = (root / image_path).resolve()
        allowed = [(root / d).resolve() for d in self.config.deletable_dirs]
        if not any(full_path == d or d in full_path.parents for d in allowed):
            raise ValidationError("Invalid file path. Security check failed.")

        if not full_path.exists():
            if self.local.remove_image(image_path):
                logger.info("Cached image removed: %s", image_path)
                return image_path
            raise NotFoundError("File not found.")
        if not full_path.is_file():
            raise ValidationError("Path is not a file.")
        if _extension(full_path.name) not in self.config.deletable_extensions:
            raise ValidationError("File is not an image.")

        os.remove(full_path)
        logger.info("Image deleted: %s", image_path)
        return image_path

    def resolve_image_url(self, path: str) -> str:
        """data: and absolute URLs as-is, cached blobs as data: URLs, else the path"""
        if not path or path.startswith("data:") or path.startswith(("http://", "https://")):
            return path
        if path.startswith(self.public_prefix) or "/" not in path:
            cached = self.local.image_data_url(path)
            if cached:
                return cached
        return path
