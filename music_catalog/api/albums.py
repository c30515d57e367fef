"""Album API endpoints."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..models import User
from ..services import AlbumService
from .dependencies import get_actor

router = APIRouter(prefix="/albums", tags=["albums"])


class AlbumResponse(BaseModel):
    """Album response model."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    artist_id: UUID
    name: str
    year_released: Optional[int] = None
    cover_image_url: Optional[str] = None
    inserted_at: datetime
    updated_at: datetime


class AlbumCreateRequest(BaseModel):
    """Album creation request."""
    artist_id: UUID
    name: str
    year_released: Optional[int] = None
    cover_image_url: Optional[str] = None


class AlbumUpdateRequest(BaseModel):
    """Album update request. Omitted fields are left unchanged."""
    name: Optional[str] = None
    year_released: Optional[int] = None
    cover_image_url: Optional[str] = None


@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album(album_id: UUID, db: AsyncSession = Depends(get_db)) -> AlbumResponse:
    """Get an album by ID."""
    album = await AlbumService(db).get_album(album_id)
    return AlbumResponse.model_validate(album)


@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    request: AlbumCreateRequest,
    actor: Optional[User] = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> AlbumResponse:
    """Create an album for an existing artist."""
    album = await AlbumService(db).create_album(request.model_dump(exclude_unset=True), actor)
    return AlbumResponse.model_validate(album)


@router.patch("/{album_id}", response_model=AlbumResponse)
async def update_album(
    album_id: UUID,
    request: AlbumUpdateRequest,
    actor: Optional[User] = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> AlbumResponse:
    """Update an album."""
    album = await AlbumService(db).update_album(album_id, request.model_dump(exclude_unset=True), actor)
    return AlbumResponse.model_validate(album)


@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
async def destroy_album(
    album_id: UUID,
    actor: Optional[User] = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete an album."""
    await AlbumService(db).destroy_album(album_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
