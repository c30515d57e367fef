"""Artist API endpoints."""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..core.logging import get_logger
from ..models import Artist, User
from ..services import AlbumService, ArtistService
from ..services.aggregates import ArtistAggregates
from ..services.query_planner import PageRequest
from .albums import AlbumResponse
from .dependencies import get_actor

logger = get_logger(__name__)

router = APIRouter(prefix="/artists", tags=["artists"])


class ArtistResponse(BaseModel):
    """Artist response model."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    biography: Optional[str] = None
    previous_names: List[str] = Field(default_factory=list)
    created_by_id: Optional[UUID] = None
    updated_by_id: Optional[UUID] = None
    inserted_at: datetime
    updated_at: datetime
    album_count: Optional[int] = None
    latest_album_year_released: Optional[int] = None
    cover_image_url: Optional[str] = None

    @classmethod
    def from_artist(
        cls,
        artist: Artist,
        aggregates: Optional[ArtistAggregates] = None,
        fields: Optional[Sequence[str]] = None,
    ) -> "ArtistResponse":
        response = cls.model_validate(artist)
        if aggregates is not None:
            # Fields that were not loaded stay absent from the response
            response = response.model_copy(update=aggregates.as_dict(only=fields))
        return response


class ArtistSearchResponse(BaseModel):
    """Page of artist search results."""
    results: List[ArtistResponse]
    limit: int
    offset: int
    more: bool
    next_offset: int
    count: Optional[int] = None


class ArtistCreateRequest(BaseModel):
    """Artist creation request."""
    name: str
    biography: Optional[str] = None


class ArtistUpdateRequest(BaseModel):
    """Artist update request. Omitted fields are left unchanged."""
    name: Optional[str] = None
    biography: Optional[str] = None


class ArtistPermissions(BaseModel):
    """What the current actor may do with an artist."""
    can_update: bool
    can_destroy: bool


def _split(value: Optional[str]) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


@router.get("/search", response_model=ArtistSearchResponse)
async def search_artists(
    q: str = Query("", description="Text the artist name must contain", max_length=255),
    sort: Optional[str] = Query(None, description="Sort directives, e.g. '-album_count,+name'"),
    limit: Optional[int] = Query(None, description="Page size, defaults to the configured page size", ge=1),
    offset: int = Query(0, description="Number of results to skip", ge=0),
    count: bool = Query(False, description="Include the total number of matches"),
    load: Optional[str] = Query(None, description="Aggregate fields to include, comma separated"),
    db: AsyncSession = Depends(get_db),
) -> ArtistSearchResponse:
    """Search artists by name with sorting and offset pagination."""
    logger.info("search_request", query=q, sort=sort, limit=limit, offset=offset)

    service = ArtistService(db)
    fields = _split(load)
    page = await service.search_artists(
        q,
        sort=_split(sort),
        page=PageRequest(
            limit=limit if limit is not None else service.settings.default_page_limit,
            offset=offset,
            count=count,
        ),
        load=fields,
    )

    return ArtistSearchResponse(
        results=[ArtistResponse.from_artist(a, page.aggregates.get(a.id), fields) for a in page.results],
        limit=page.limit,
        offset=page.offset,
        more=page.more,
        next_offset=page.next_offset,
        count=page.count,
    )


@router.get("/{artist_id}", response_model=ArtistResponse)
async def get_artist(
    artist_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ArtistResponse:
    """Get an artist with all aggregate fields."""
    service = ArtistService(db)
    artist = await service.get_artist(artist_id)
    aggregates = await service.load_aggregates([artist])
    return ArtistResponse.from_artist(artist, aggregates[artist.id])


@router.get("/{artist_id}/albums", response_model=List[AlbumResponse])
async def list_artist_albums(
    artist_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> List[AlbumResponse]:
    """Get an artist's albums, undated first, then newest first."""
    await ArtistService(db).get_artist(artist_id)
    albums = await AlbumService(db).list_albums_for_artist(artist_id)
    return [AlbumResponse.model_validate(album) for album in albums]


@router.get("/{artist_id}/permissions", response_model=ArtistPermissions)
async def get_artist_permissions(
    artist_id: UUID,
    actor: Optional[User] = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ArtistPermissions:
    """Report which mutations the current actor may perform on the artist."""
    service = ArtistService(db)
    artist = await service.get_artist(artist_id)
    return ArtistPermissions(
        can_update=service.can_update_artist(actor, artist),
        can_destroy=service.can_destroy_artist(actor, artist),
    )


@router.post("", response_model=ArtistResponse, status_code=status.HTTP_201_CREATED)
async def create_artist(
    request: ArtistCreateRequest,
    actor: Optional[User] = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ArtistResponse:
    """Create an artist. Admins only."""
    artist = await ArtistService(db).create_artist(request.model_dump(exclude_unset=True), actor)
    return ArtistResponse.from_artist(artist)


@router.patch("/{artist_id}", response_model=ArtistResponse)
async def update_artist(
    artist_id: UUID,
    request: ArtistUpdateRequest,
    actor: Optional[User] = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> ArtistResponse:
    """Update an artist. Admins and editors only."""
    changes: Dict[str, Any] = request.model_dump(exclude_unset=True)
    artist = await ArtistService(db).update_artist(artist_id, changes, actor)
    return ArtistResponse.from_artist(artist)


@router.delete("/{artist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def destroy_artist(
    artist_id: UUID,
    actor: Optional[User] = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete an artist and all of its albums. Admins only."""
    await ArtistService(db).destroy_artist(artist_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
