"""Album model."""
from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.sql import func
from app.database import Base


class Album(Base):
    """Catalog album, created lazily the first time anyone references it."""

    __tablename__ = "albums"

    id = Column(Integer, primary_key=True, index=True)
    catalog_id = Column(String(64), unique=True, nullable=False, index=True)  # Spotify album id
    name = Column(String(255), nullable=False, index=True)
    artist = Column(String(255), nullable=False)
    release_date = Column(Date)
    image_url = Column(String(1000))
    external_url = Column(String(1000))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Album {self.artist} - {self.name}>"
