from pydantic import BaseModel, Field


class AdBase(BaseModel):
    title: str
    price: int = Field(ge=0)
    description: str | None = None


class AdCreate(AdBase):
    author_id: int


class AdRead(AdBase):
    id: int
    author_id: int
    image_url: str | None = None

    class Config:
        from_attributes = True
