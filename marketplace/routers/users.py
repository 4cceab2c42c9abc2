from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.security import require_api_key
from ..models.user import User
from ..schemas.image import ImageAssetRead
from ..schemas.user import UserCreate, UserRead
from ..services.image_links import release_owner_images, replace_owner_image
from ..services.image_storage import ImageStorage, get_image_storage
from .uploads import upload_errors

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_api_key)])


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    user = User(**payload.model_dump())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return _get_user_or_404(db, user_id)


@router.patch("/{user_id}/image", response_model=ImageAssetRead)
def update_user_image(
    user_id: int,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    user = _get_user_or_404(db, user_id)
    with upload_errors():
        return replace_owner_image(db, storage, user, image, f"user_{user.id}")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    user = _get_user_or_404(db, user_id)
    release_owner_images(db, storage, [*user.ads, user])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
