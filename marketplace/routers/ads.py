from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.security import require_api_key
from ..models.ad import Ad
from ..models.user import User
from ..schemas.ad import AdCreate, AdRead
from ..schemas.image import ImageAssetRead
from ..services.image_links import release_owner_images, replace_owner_image
from ..services.image_storage import ImageStorage, get_image_storage
from .uploads import upload_errors

router = APIRouter(prefix="/ads", tags=["ads"], dependencies=[Depends(require_api_key)])


def _get_ad_or_404(db: Session, ad_id: int) -> Ad:
    ad = db.get(Ad, ad_id)
    if not ad:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad not found")
    return ad


@router.get("/", response_model=list[AdRead])
def list_ads(author_id: int | None = None, db: Session = Depends(get_db)):
    query = db.query(Ad)
    if author_id is not None:
        query = query.filter(Ad.author_id == author_id)
    return query.order_by(Ad.id.desc()).all()


@router.post("/", response_model=AdRead, status_code=status.HTTP_201_CREATED)
def create_ad(
    properties: str = Form(...),
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    try:
        payload = AdCreate.model_validate_json(properties)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    if not db.get(User, payload.author_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Author not found")
    ad = Ad(**payload.model_dump())
    db.add(ad)
    db.commit()
    db.refresh(ad)

    # The ad id is part of the image prefix, so the row is committed first.
    if image is not None and image.size:
        with upload_errors():
            replace_owner_image(db, storage, ad, image, f"ad_{ad.id}")
    return ad


@router.get("/{ad_id}", response_model=AdRead)
def get_ad(ad_id: int, db: Session = Depends(get_db)):
    return _get_ad_or_404(db, ad_id)


@router.patch("/{ad_id}/image", response_model=ImageAssetRead)
def update_ad_image(
    ad_id: int,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    ad = _get_ad_or_404(db, ad_id)
    with upload_errors():
        return replace_owner_image(db, storage, ad, image, f"ad_{ad.id}")


@router.delete("/{ad_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_ad(
    ad_id: int,
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    ad = _get_ad_or_404(db, ad_id)
    release_owner_images(db, storage, [ad])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
