"""Derived artist fields computed from the artist's albums.

Aggregates are never stored. They are either computed in Python from an
explicitly loaded album collection, or expressed as correlated subqueries so
the query planner can sort on them.
"""
from dataclasses import dataclass, fields as dataclass_fields
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..models import Album, Artist

logger = get_logger(__name__)

AGGREGATE_FIELDS = ("album_count", "latest_album_year_released", "cover_image_url")


@dataclass
class ArtistAggregates:
    """Aggregate values for one artist. Fields not requested stay ``None``."""
    album_count: Optional[int] = None
    latest_album_year_released: Optional[int] = None
    cover_image_url: Optional[str] = None

    def as_dict(self, only: Optional[Iterable[str]] = None) -> Dict[str, object]:
        names = list(only) if only is not None else [f.name for f in dataclass_fields(self)]
        return {name: getattr(self, name) for name in names}


def _by_year_desc(albums: Iterable[Album]) -> List[Album]:
    # Absent years sort first, as with a descending sort in Postgres; ties break on id
    return sorted(
        albums,
        key=lambda album: (
            album.year_released is not None,
            -(album.year_released or 0),
            str(album.id),
        ),
    )


def album_count(albums: Sequence[Album]) -> int:
    return len(albums)


def latest_album_year_released(albums: Iterable[Album]) -> Optional[int]:
    years = [album.year_released for album in albums if album.year_released is not None]
    return max(years) if years else None


def cover_image_url(albums: Iterable[Album]) -> Optional[str]:
    """Cover of the first album, undated then newest, that has one."""
    for album in _by_year_desc(albums):
        if album.cover_image_url is not None:
            return album.cover_image_url
    return None


_RESOLVERS = {
    "album_count": album_count,
    "latest_album_year_released": latest_album_year_released,
    "cover_image_url": cover_image_url,
}


def validate_fields(requested: Iterable[str]) -> List[str]:
    """Return the requested aggregate names, rejecting unknown ones."""
    names = list(dict.fromkeys(requested))
    unknown = [name for name in names if name not in _RESOLVERS]
    if unknown:
        raise ValidationError(
            message=f"Unknown aggregate field(s): {', '.join(unknown)}",
            details={"fields": unknown, "allowed": list(AGGREGATE_FIELDS)},
        )
    return names


def resolve_aggregates(albums: Sequence[Album], requested: Iterable[str] = AGGREGATE_FIELDS) -> ArtistAggregates:
    """Compute the requested aggregates over an album collection."""
    values = {name: _RESOLVERS[name](albums) for name in validate_fields(requested)}
    return ArtistAggregates(**values)


def aggregate_expression(name: str):
    """Correlated scalar subquery for an aggregate, usable in ORDER BY."""
    if name == "album_count":
        return (
            select(func.count(Album.id))
            .where(Album.artist_id == Artist.id)
            .correlate(Artist)
            .scalar_subquery()
        )
    if name == "latest_album_year_released":
        return (
            select(func.max(Album.year_released))
            .where(Album.artist_id == Artist.id)
            .correlate(Artist)
            .scalar_subquery()
        )
    if name == "cover_image_url":
        return (
            select(Album.cover_image_url)
            .where(Album.artist_id == Artist.id, Album.cover_image_url.is_not(None))
            .order_by(Album.year_released.desc().nulls_first(), Album.id)
            .limit(1)
            .correlate(Artist)
            .scalar_subquery()
        )
    raise ValidationError(
        message=f"Unknown aggregate field: {name}",
        details={"field": name, "allowed": list(AGGREGATE_FIELDS)},
    )


class AggregateResolver:
    """Loads albums for a batch of artists and resolves their aggregates."""

    def __init__(self, db: AsyncSession):
        """Initialize resolver with database session."""
        self.db = db

    async def load(
        self,
        artists: Sequence[Artist],
        requested: Iterable[str] = AGGREGATE_FIELDS,
    ) -> Dict[UUID, ArtistAggregates]:
        """Resolve aggregates for each artist with a single album query."""
        names = validate_fields(requested)
        if not artists or not names:
            return {artist.id: ArtistAggregates() for artist in artists}

        artist_ids = [artist.id for artist in artists]
        query = select(Album).where(Album.artist_id.in_(artist_ids))
        result = await self.db.execute(query)

        albums_by_artist: Dict[UUID, List[Album]] = {artist_id: [] for artist_id in artist_ids}
        for album in result.scalars().all():
            albums_by_artist[album.artist_id].append(album)

        logger.debug("aggregates_loaded", artist_count=len(artist_ids), fields=names)
        return {
            artist_id: resolve_aggregates(albums, names)
            for artist_id, albums in albums_by_artist.items()
        }
