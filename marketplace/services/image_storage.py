import hashlib
import logging
import mimetypes
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, UploadFile
from sqlalchemy.orm import Session

from ..core.config import StorageMode, get_settings
from ..core.database import get_db
from ..core.exceptions import (
    EmptyInputError,
    ImageNotFoundError,
    InconsistentStateError,
    StorageWriteError,
)
from ..models.image_asset import ImageAsset

logger = logging.getLogger(__name__)

_DEFAULT_PREFIX = "img"


@dataclass(frozen=True)
class ImageContent:
    data: bytes
    content_type: str | None


class StorageBackend(ABC):
    """Where image payloads live. One instance serves the whole process."""

    mode: StorageMode

    @abstractmethod
    def store(self, record: ImageAsset, data: bytes) -> None:
        """Persist ``data`` for a record that has not been inserted yet."""

    @abstractmethod
    def read(self, record: ImageAsset) -> ImageContent:
        ...

    @abstractmethod
    def discard(self, record: ImageAsset) -> None:
        """Drop the payload ahead of the record being deleted. Must not raise."""


class FilesystemBackend(StorageBackend):
    mode = StorageMode.FILESYSTEM

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)

    def path_for(self, image_id: str) -> Path | None:
        root = self.base_path.resolve()
        candidate = (self.base_path / image_id).resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            return None
        return candidate

    def store(self, record: ImageAsset, data: bytes) -> None:
        dest_path = self.path_for(record.id)
        if dest_path is None:
            raise StorageWriteError(record.id, "path escapes the storage directory")
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            dest_path.write_bytes(data)
        except OSError as exc:
            raise StorageWriteError(record.id, str(exc)) from exc
        record.data = None

    def read(self, record: ImageAsset) -> ImageContent:
        path = self.path_for(record.id)
        if path is None or not path.is_file():
            raise ImageNotFoundError(record.id, "Image file not found")
        content_type = record.content_type
        if content_type is None:
            content_type, _ = mimetypes.guess_type(path.name)
        return ImageContent(data=path.read_bytes(), content_type=content_type)

    def discard(self, record: ImageAsset) -> None:
        path = self.path_for(record.id)
        if path is None or not path.exists():
            return
        try:
            path.unlink()
        except OSError as exc:
            logger.warning("Could not remove image file %s: %s", record.id, exc)


class DatabaseBackend(StorageBackend):
    mode = StorageMode.DATABASE

    def store(self, record: ImageAsset, data: bytes) -> None:
        record.data = data

    def read(self, record: ImageAsset) -> ImageContent:
        if record.data is None:
            raise InconsistentStateError(record.id)
        return ImageContent(data=bytes(record.data), content_type=record.content_type)

    def discard(self, record: ImageAsset) -> None:
        # The payload is a column of the row being deleted.
        return None


def extension_of(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    suffix = filename[filename.rindex("."):]
    if "/" in suffix or "\\" in suffix:
        return ""
    return suffix


def compute_checksum(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class ImageStorage:
    """Image store over a SQLAlchemy session and one payload backend.

    Owners must link a saved image before deleting the one it replaces,
    and unlink an image before deleting it; see ``services.image_links``.
    """

    def __init__(self, db: Session, backend: StorageBackend):
        self.db = db
        self.backend = backend

    def save(
        self,
        data: bytes | None,
        prefix: str | None,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> ImageAsset:
        if not data:
            raise EmptyInputError()

        image_id = f"{prefix or _DEFAULT_PREFIX}_{uuid.uuid4()}{extension_of(filename)}"
        record = ImageAsset(
            id=image_id,
            content_type=content_type,
            size=len(data),
            created_at=int(time.time() * 1000),
            checksum=compute_checksum(data),
        )
        self.backend.store(record, data)

        self.db.add(record)
        self.db.commit()
        logger.info("Saved image %s (%d bytes, %s)", image_id, record.size, self.backend.mode.value)
        return record

    def save_upload(self, upload: UploadFile, prefix: str | None) -> ImageAsset:
        data = upload.file.read()
        upload.file.seek(0)
        return self.save(data, prefix, filename=upload.filename, content_type=upload.content_type)

    def load(self, image_id: str) -> ImageContent:
        record = self.db.get(ImageAsset, image_id) if image_id else None
        if record is None:
            raise ImageNotFoundError(image_id)
        return self.backend.read(record)

    def delete(self, image_id: str | None) -> None:
        """Remove an image and its payload. Blank or unknown ids are ignored; never raises."""
        if image_id is None or not image_id.strip():
            return
        try:
            record = self.db.get(ImageAsset, image_id)
            if record is None:
                return
            self.backend.discard(record)
            self.db.delete(record)
            self.db.commit()
            logger.info("Deleted image %s", image_id)
        except Exception as exc:
            logger.warning("Failed to delete image %s: %s", image_id, exc)
            try:
                self.db.rollback()
            except Exception as rollback_exc:
                logger.warning("Rollback after failed delete of %s also failed: %s", image_id, rollback_exc)


def build_backend(mode: StorageMode, images_dir: Path) -> StorageBackend:
    if mode is StorageMode.DATABASE:
        return DatabaseBackend()
    return FilesystemBackend(images_dir)


@lru_cache
def _process_backend() -> StorageBackend:
    settings = get_settings()
    return build_backend(settings.image_storage, settings.resolved_images_dir)


def get_storage_backend() -> StorageBackend:
    return _process_backend()


def get_image_storage(
    db: Session = Depends(get_db),
    backend: StorageBackend = Depends(get_storage_backend),
) -> ImageStorage:
    return ImageStorage(db, backend)
