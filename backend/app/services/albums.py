"""Album service: lazy find-or-create of catalog albums."""
import logging
from typing import List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.album import Album
from app.schemas.album import CatalogAlbum

logger = logging.getLogger(__name__)


class CatalogProvider(Protocol):
    """What the album service needs from an external catalog."""

    async def get_album(self, catalog_id: str) -> CatalogAlbum: ...

    async def search_albums(self, query: str, limit: int = 20) -> List[CatalogAlbum]: ...


class AlbumService:
    """Albums are created the first time anyone references them."""

    def __init__(self, db: Session, catalog: Optional[CatalogProvider] = None):
        self.db = db
        self.catalog = catalog

    def get(self, album_id: int) -> Album:
        """Get an album by internal id."""
        album = self.db.get(Album, album_id)
        if not album:
            raise NotFoundError("Album not found")
        return album

    def get_by_catalog_id(self, catalog_id: str) -> Optional[Album]:
        """Get an album by catalog id, if it has been stored."""
        return self.db.scalar(select(Album).where(Album.catalog_id == catalog_id))

    async def resolve(self, catalog_id: str) -> Album:
        """Find the album by catalog id, fetching and storing it on first use."""
        album = self.get_by_catalog_id(catalog_id)
        if album:
            return album

        if self.catalog is None:
            raise NotFoundError("Album not found")

        metadata = await self.catalog.get_album(catalog_id)
        return self.store(metadata)

    def store(self, metadata: CatalogAlbum) -> Album:
        """Insert catalog metadata, or return the row a concurrent request inserted."""
        album = Album(**metadata.model_dump())
        self.db.add(album)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.get_by_catalog_id(metadata.catalog_id)
            if existing is None:
                raise
            return existing

        self.db.refresh(album)
        logger.info(f"Stored album {album.catalog_id}: {album.artist} - {album.name}")
        return album

    async def search(self, query: str, limit: int = 20) -> List[CatalogAlbum]:
        """Search the external catalog (results are not stored)."""
        if self.catalog is None or not query.strip():
            return []
        return await self.catalog.search_albums(query.strip(), limit)
