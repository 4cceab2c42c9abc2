from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.security import require_api_key
from ..models.image_asset import ImageAsset
from ..schemas.image import ImageAssetRead
from ..services.image_delivery import fetch_image
from ..services.image_storage import ImageStorage, get_image_storage

router = APIRouter(prefix="/images", tags=["images"])

admin_router = APIRouter(prefix="/images", tags=["images"], dependencies=[Depends(require_api_key)])


@router.get("/{image_id:path}", response_class=Response)
def get_image(image_id: str, storage: ImageStorage = Depends(get_image_storage)):
    return fetch_image(storage, image_id)


@admin_router.get("/", response_model=list[ImageAssetRead])
def list_images(prefix: str | None = None, db: Session = Depends(get_db)):
    query = db.query(ImageAsset)
    if prefix:
        query = query.filter(ImageAsset.id.startswith(f"{prefix}_"))
    return query.order_by(ImageAsset.created_at.desc()).all()
