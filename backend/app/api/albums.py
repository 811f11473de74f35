"""Album catalog endpoints.

Albums are stored the first time anyone looks them up by catalog id.
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_catalog
from app.integrations.spotify import SpotifyCatalog
from app.services.albums import AlbumService
from app.services.ratings import RatingService
from app.services.reviews import ReviewService
from app.schemas.album import CatalogAlbum, AlbumResponse, AlbumDetailResponse
from app.schemas.content import RatingResponse, ReviewResponse

router = APIRouter()


@router.get("/search", response_model=List[CatalogAlbum])
async def search_albums(
    q: str = Query(..., min_length=1, max_length=200),
    limit: int = Query(20, ge=1, le=50),
    db: Session = Depends(get_db),
    catalog: SpotifyCatalog = Depends(get_catalog),
):
    """Search the external catalog."""
    return await AlbumService(db, catalog).search(q, limit)


@router.get("/{catalog_id}", response_model=AlbumDetailResponse)
async def get_album(
    catalog_id: str,
    db: Session = Depends(get_db),
    catalog: SpotifyCatalog = Depends(get_catalog),
):
    """Album details with rating stats."""
    album = await AlbumService(db, catalog).resolve(catalog_id)
    stats = RatingService(db).album_stats(album.id)
    stats.review_count = ReviewService(db).count_for_album(album.id)
    return AlbumDetailResponse(
        **AlbumResponse.model_validate(album).model_dump(),
        stats=stats,
    )


@router.get("/{catalog_id}/ratings", response_model=List[RatingResponse])
async def album_ratings(
    catalog_id: str,
    db: Session = Depends(get_db),
    catalog: SpotifyCatalog = Depends(get_catalog),
):
    """All ratings for an album, newest first."""
    album = await AlbumService(db, catalog).resolve(catalog_id)
    return [RatingResponse.model_validate(r) for r in RatingService(db).for_album(album.id)]


@router.get("/{catalog_id}/reviews", response_model=List[ReviewResponse])
async def album_reviews(
    catalog_id: str,
    db: Session = Depends(get_db),
    catalog: SpotifyCatalog = Depends(get_catalog),
):
    """All reviews for an album, newest first."""
    album = await AlbumService(db, catalog).resolve(catalog_id)
    return [ReviewResponse.model_validate(r) for r in ReviewService(db).for_album(album.id)]
