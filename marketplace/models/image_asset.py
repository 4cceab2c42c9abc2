from sqlalchemy import BigInteger, Column, LargeBinary, String

from ..core.database import Base


class ImageAsset(Base):
    __tablename__ = "images"

    id = Column(String(255), primary_key=True)
    content_type = Column(String(120), nullable=True)
    size = Column(BigInteger, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    checksum = Column(String(64), nullable=True)
    # Only populated by the database backend.
    data = Column(LargeBinary, nullable=True)
