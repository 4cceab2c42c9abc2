from pydantic import BaseModel


class ImageAssetRead(BaseModel):
    id: str
    content_type: str | None
    size: int
    created_at: int
    checksum: str | None

    class Config:
        from_attributes = True
