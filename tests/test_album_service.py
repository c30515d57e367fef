"""Tests for album management."""
from uuid import uuid4

import pytest

from music_catalog.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from music_catalog.services import AlbumService, ArtistService


class TestCreateAlbum:
    """AlbumService.create_album."""

    @pytest.mark.asyncio
    async def test_editor_creates_album_for_artist(self, db, factory, users):
        artist = await factory.artist()

        album = await AlbumService(db).create_album(
            {"artist_id": artist.id, "name": "Debut", "year_released": 2010, "cover_image_url": "/images/debut.png"},
            actor=users["editor"],
        )

        assert album.artist_id == artist.id
        assert album.created_by_id == users["editor"].id
        aggregates = await ArtistService(db).load_aggregates([artist])
        assert aggregates[artist.id].album_count == 1
        assert aggregates[artist.id].cover_image_url == "/images/debut.png"

    @pytest.mark.asyncio
    async def test_album_requires_live_artist(self, db, users):
        with pytest.raises(NotFoundError):
            await AlbumService(db).create_album({"artist_id": uuid4(), "name": "Orphan"}, actor=users["admin"])

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "attributes",
        [
            {"name": ""},
            {"name": "Old", "year_released": 1900},
            {"name": "Cover", "cover_image_url": "ftp://example.com/cover.gif"},
        ],
    )
    async def test_invalid_attributes(self, db, factory, users, attributes):
        artist = await factory.artist()

        with pytest.raises(ValidationError):
            await AlbumService(db).create_album({"artist_id": artist.id, **attributes}, actor=users["admin"])

    @pytest.mark.asyncio
    async def test_users_cannot_create_albums(self, db, factory, users):
        artist = await factory.artist()

        with pytest.raises(AuthorizationError):
            await AlbumService(db).create_album({"artist_id": artist.id, "name": "Nope"}, actor=users["user"])


class TestUpdateAndDestroyAlbum:
    """AlbumService.update_album and destroy_album."""

    @pytest.mark.asyncio
    async def test_update_changes_latest_year(self, db, factory, users):
        artist = await factory.artist()
        album = await factory.album(artist, year_released=2001)

        await AlbumService(db).update_album(album, {"year_released": 2015}, actor=users["editor"])

        aggregates = await ArtistService(db).load_aggregates([artist], ["latest_album_year_released"])
        assert aggregates[artist.id].latest_album_year_released == 2015

    @pytest.mark.asyncio
    async def test_destroy_leaves_artist_in_place(self, db, factory, users):
        artist = await factory.artist()
        album = await factory.album(artist)
        service = AlbumService(db)

        await service.destroy_album(album, actor=users["admin"])

        assert await service.list_albums_for_artist(artist.id) == []
        assert (await ArtistService(db).get_artist(artist.id)).id == artist.id

    @pytest.mark.asyncio
    async def test_list_is_undated_then_newest_first(self, db, factory):
        artist = await factory.artist()
        await factory.album(artist, name="Middle", year_released=2005)
        await factory.album(artist, name="Undated")
        await factory.album(artist, name="Newest", year_released=2020)

        albums = await AlbumService(db).list_albums_for_artist(artist.id)

        assert [album.name for album in albums] == ["Undated", "Newest", "Middle"]
