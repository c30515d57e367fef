"""Artist service: search and policy-gated mutations for artists."""
import time
from typing import Dict, Iterable, List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import NotFoundError
from ..core.logging import get_logger
from ..core.settings import Settings, app_settings
from ..metrics import search_duration_seconds, search_queries_total, search_results_total
from ..models import Artist, User
from . import policy
from .aggregates import AGGREGATE_FIELDS, AggregateResolver, ArtistAggregates, validate_fields
from .attributes import ArtistCreate, ArtistUpdate
from .base import BaseService
from .history import next_previous_names
from .policy import Action
from .query_planner import Page, PageRequest, SearchPlan

logger = get_logger(__name__)


def _actor_id(actor: Optional[User]) -> Optional[UUID]:
    return actor.id if actor is not None else None


class ArtistService(BaseService):
    """Service for reading and changing artists."""

    resource = "artist"

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        """Initialize service with database session."""
        super().__init__(db)
        self.settings = settings or app_settings

    async def read_artists(self) -> List[Artist]:
        """Get all artists ordered by name."""
        query = select(Artist).order_by(Artist.name, Artist.id)
        result = await self.db.execute(query)
        artists = list(result.scalars().all())

        logger.info("retrieved_artists", count=len(artists))
        return artists

    async def get_artist(self, artist_id: UUID, with_albums: bool = False) -> Artist:
        """Get an artist by ID, raising NotFoundError when it does not exist."""
        query = select(Artist).where(Artist.id == artist_id)
        if with_albums:
            query = query.options(selectinload(Artist.albums))

        result = await self.db.execute(query)
        artist = result.scalar_one_or_none()

        if artist is None:
            logger.warning("artist_not_found", artist_id=str(artist_id))
            raise NotFoundError(
                message=f"Artist {artist_id} not found",
                details={"artist_id": str(artist_id)},
            )
        return artist

    async def search_artists(
        self,
        query_text: Optional[str] = "",
        sort: Union[None, str, Sequence[str]] = None,
        page: Optional[PageRequest] = None,
        load: Iterable[str] = (),
    ) -> Page:
        """
        Search artists by a case-insensitive substring of their current name.

        Args:
            query_text: Text the name must contain; empty matches every artist
            sort: Sort directives such as ``["-album_count", "+name"]``
            page: Limit and offset of the requested page; defaults to the
                first page of ``settings.default_page_limit`` results
            load: Aggregate fields to resolve for the returned artists

        Returns:
            The requested page. ``page.aggregates`` is only filled for ``load``.
        """
        start_time = time.time()
        fields = validate_fields(load)
        if page is None:
            page = PageRequest(limit=self.settings.default_page_limit)
        plan = SearchPlan.build(query_text, sort, page, max_limit=self.settings.max_page_limit)

        result = await plan.execute(self.db)
        if fields:
            result.aggregates = await self.load_aggregates(result.results, fields)

        duration = time.time() - start_time
        search_queries_total.labels(sorted="yes" if sort else "no").inc()
        search_results_total.inc(len(result.results))
        search_duration_seconds.observe(duration)

        logger.info(
            "artist_search_completed",
            count=len(result.results),
            more=result.more,
            duration_seconds=duration,
            **plan.describe(),
        )
        return result

    async def load_aggregates(
        self,
        artists: Sequence[Artist],
        fields: Iterable[str] = AGGREGATE_FIELDS,
    ) -> Dict[UUID, ArtistAggregates]:
        """Resolve aggregate fields for the given artists."""
        return await AggregateResolver(self.db).load(artists, fields)

    async def create_artist(
        self,
        attributes: Dict[str, object],
        actor: Optional[User],
        authorize: bool = True,
    ) -> Artist:
        """Create an artist, stamping the actor as creator and last updater."""
        if authorize:
            self._ensure(actor, Action.CREATE)
        values = self._validate(ArtistCreate, attributes, Action.CREATE)

        artist = Artist(
            **values,
            previous_names=[],
            created_by_id=_actor_id(actor),
            updated_by_id=_actor_id(actor),
        )
        async with self._mutation("create"):
            self.db.add(artist)

        logger.info(
            "artist_created",
            artist_id=str(artist.id),
            name=artist.name,
            actor_id=str(artist.created_by_id) if artist.created_by_id else None,
        )
        return artist

    async def update_artist(
        self,
        artist: Union[Artist, UUID],
        attributes: Dict[str, object],
        actor: Optional[User],
        authorize: bool = True,
    ) -> Artist:
        """
        Update an artist's name and biography.

        A changed name pushes the old name onto ``previous_names``; the rename,
        the history change and the ``updated_by`` stamp are committed together.
        """
        if authorize:
            self._ensure(actor, Action.UPDATE, artist)
        changes = self._validate(ArtistUpdate, attributes, Action.UPDATE)

        artist_id = artist.id if isinstance(artist, Artist) else artist
        async with self._mutation("update"):
            query = (
                select(Artist)
                .where(Artist.id == artist_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            current = (await self.db.execute(query)).scalar_one_or_none()
            if current is None:
                raise NotFoundError(
                    message=f"Artist {artist_id} not found",
                    details={"artist_id": str(artist_id)},
                )

            old_name = current.name
            new_name = changes.get("name", old_name)
            if new_name != old_name:
                current.previous_names = next_previous_names(
                    old_name,
                    new_name,
                    current.previous_names,
                    limit=self.settings.previous_names_limit,
                )

            for key, value in changes.items():
                setattr(current, key, value)
            current.updated_by_id = _actor_id(actor)

        logger.info(
            "artist_updated",
            artist_id=str(current.id),
            fields=sorted(changes),
            renamed=new_name != old_name,
        )
        return current

    async def destroy_artist(
        self,
        artist: Union[Artist, UUID],
        actor: Optional[User],
        authorize: bool = True,
    ) -> None:
        """Delete an artist together with all of its albums."""
        if authorize:
            self._ensure(actor, Action.DESTROY, artist)

        artist_id = artist.id if isinstance(artist, Artist) else artist
        async with self._mutation("destroy"):
            query = (
                select(Artist)
                .where(Artist.id == artist_id)
                .options(selectinload(Artist.albums))
                .execution_options(populate_existing=True)
            )
            current = (await self.db.execute(query)).scalar_one_or_none()
            if current is None:
                raise NotFoundError(
                    message=f"Artist {artist_id} not found",
                    details={"artist_id": str(artist_id)},
                )
            album_count = len(current.albums)
            # Loaded albums are deleted through the relationship cascade
            await self.db.delete(current)

        logger.info("artist_destroyed", artist_id=str(artist_id), albums_deleted=album_count)

    def can_create_artist(self, actor: Optional[User]) -> bool:
        return policy.can_create_artist(actor)

    def can_update_artist(self, actor: Optional[User], artist: Optional[Artist] = None) -> bool:
        return policy.can_update_artist(actor, artist)

    def can_destroy_artist(self, actor: Optional[User], artist: Optional[Artist] = None) -> bool:
        return policy.can_destroy_artist(actor, artist)

