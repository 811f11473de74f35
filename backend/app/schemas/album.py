"""Album schemas."""
from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import Optional


class CatalogAlbum(BaseModel):
    """Album metadata as returned by the catalog provider."""
    catalog_id: str
    name: str
    artist: str
    release_date: Optional[date] = None
    image_url: Optional[str] = None
    external_url: Optional[str] = None


class AlbumBrief(BaseModel):
    """Album summary embedded in feed items."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    catalog_id: str
    name: str
    artist: str
    image_url: Optional[str] = None


class AlbumResponse(AlbumBrief):
    """Album response."""
    release_date: Optional[date] = None
    external_url: Optional[str] = None
    created_at: Optional[datetime] = None


class AlbumStats(BaseModel):
    """Aggregate rating stats for an album."""
    average_rating: float
    rating_count: int
    review_count: int = 0


class AlbumDetailResponse(AlbumResponse):
    """Album with aggregate stats."""
    stats: AlbumStats
