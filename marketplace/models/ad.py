from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.database import Base


class Ad(Base):
    __tablename__ = "ads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    image_id = Column(String(255), ForeignKey("images.id", ondelete="SET NULL"), nullable=True)

    author = relationship("User", back_populates="ads")

    @property
    def image_url(self) -> str | None:
        return f"/images/{self.image_id}" if self.image_id else None
