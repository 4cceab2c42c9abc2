from pydantic import BaseModel


class UserBase(BaseModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class UserCreate(UserBase):
    pass


class UserRead(UserBase):
    id: int
    image_url: str | None = None

    class Config:
        from_attributes = True
