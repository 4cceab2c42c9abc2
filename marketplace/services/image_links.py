"""Ordering rules for rows that reference images.

Replacing an image is create-then-link: the new image is saved, the owner row
is pointed at it and committed, and only then is the old image deleted.
Removing an owner is unlink-then-delete: the owner row goes first and its
images after. A crash between the two steps leaves an orphaned image behind;
nothing compensates for that.
"""

from collections.abc import Iterable

from fastapi import UploadFile
from sqlalchemy.orm import Session

from ..models import Ad, ImageAsset, User
from .image_storage import ImageStorage

ImageOwner = Ad | User


def replace_owner_image(
    db: Session,
    storage: ImageStorage,
    owner: ImageOwner,
    upload: UploadFile,
    prefix: str,
) -> ImageAsset:
    previous_id = owner.image_id
    image = storage.save_upload(upload, prefix)

    owner.image_id = image.id
    db.commit()

    if previous_id:
        storage.delete(previous_id)
    return image


def release_owner_images(
    db: Session,
    storage: ImageStorage,
    owners: Iterable[ImageOwner],
) -> list[str]:
    owners = list(owners)
    image_ids = [owner.image_id for owner in owners if owner.image_id]

    for owner in owners:
        db.delete(owner)
    db.commit()

    for image_id in image_ids:
        storage.delete(image_id)
    return image_ids
