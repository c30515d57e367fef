"""Album service for managing albums of existing artists."""
from typing import Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import select

from ..core.exceptions import NotFoundError
from ..core.logging import get_logger
from ..models import Album, Artist, User
from .attributes import AlbumCreate, AlbumUpdate
from .base import BaseService
from .policy import Action

logger = get_logger(__name__)


class AlbumService(BaseService):
    """Service for managing albums."""

    resource = "album"

    async def get_album(self, album_id: UUID) -> Album:
        """Get an album by ID."""
        album = await self.db.get(Album, album_id)

        if album is None:
            logger.warning("album_not_found", album_id=str(album_id))
            raise NotFoundError(
                message=f"Album {album_id} not found",
                details={"album_id": str(album_id)},
            )
        return album

    async def list_albums_for_artist(self, artist_id: UUID) -> List[Album]:
        """Get all albums by an artist, undated first, then newest first."""
        query = (
            select(Album)
            .where(Album.artist_id == artist_id)
            .order_by(Album.year_released.desc().nulls_first(), Album.id)
        )
        result = await self.db.execute(query)
        albums = list(result.scalars().all())

        logger.info("retrieved_albums_by_artist", artist_id=str(artist_id), count=len(albums))
        return albums

    async def create_album(self, attributes: Dict[str, object], actor: Optional[User]) -> Album:
        """Create an album for an existing artist."""
        self._ensure(actor, Action.CREATE)
        values = self._validate(AlbumCreate, attributes, Action.CREATE)

        actor_id = actor.id if actor is not None else None
        async with self._mutation("create"):
            artist = await self.db.get(Artist, values["artist_id"])
            if artist is None:
                raise NotFoundError(
                    message=f"Artist {values['artist_id']} not found",
                    details={"artist_id": str(values["artist_id"])},
                )
            album = Album(**values, created_by_id=actor_id, updated_by_id=actor_id)
            self.db.add(album)

        logger.info(
            "album_created",
            album_id=str(album.id),
            artist_id=str(album.artist_id),
            year_released=album.year_released,
        )
        return album

    async def update_album(
        self,
        album: Union[Album, UUID],
        attributes: Dict[str, object],
        actor: Optional[User],
    ) -> Album:
        """Update an album's name, release year or cover."""
        self._ensure(actor, Action.UPDATE, album)
        changes = self._validate(AlbumUpdate, attributes, Action.UPDATE)

        album_id = album.id if isinstance(album, Album) else album
        async with self._mutation("update"):
            current = await self.get_album(album_id)
            for key, value in changes.items():
                setattr(current, key, value)
            current.updated_by_id = actor.id if actor is not None else None

        logger.info("album_updated", album_id=str(album_id), fields=sorted(changes))
        return current

    async def destroy_album(self, album: Union[Album, UUID], actor: Optional[User]) -> None:
        """Delete a single album."""
        self._ensure(actor, Action.DESTROY, album)

        album_id = album.id if isinstance(album, Album) else album
        async with self._mutation("destroy"):
            current = await self.get_album(album_id)
            await self.db.delete(current)

        logger.info("album_destroyed", album_id=str(album_id))
