from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(64), nullable=True)
    last_name = Column(String(64), nullable=True)
    phone = Column(String(32), nullable=True)
    image_id = Column(String(255), ForeignKey("images.id", ondelete="SET NULL"), nullable=True)

    ads = relationship("Ad", back_populates="author", cascade="all, delete-orphan")

    @property
    def image_url(self) -> str | None:
        return f"/images/{self.image_id}" if self.image_id else None
