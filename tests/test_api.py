"""Tests for the HTTP endpoints."""
import pytest
from httpx import ASGITransport, AsyncClient

from music_catalog.core.db import get_db
from music_catalog.main import app


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def as_user(user):
    return {"X-User-Id": str(user.id)}


class TestArtistEndpoints:
    """Artist routes."""

    @pytest.mark.asyncio
    async def test_create_update_and_destroy(self, client, users):
        response = await client.post("/api/v1/artists", json={"name": "Band"}, headers=as_user(users["admin"]))
        assert response.status_code == 201
        artist = response.json()
        assert artist["created_by_id"] == str(users["admin"].id)

        response = await client.patch(
            f"/api/v1/artists/{artist['id']}", json={"name": "Renamed"}, headers=as_user(users["editor"])
        )
        assert response.status_code == 200
        assert response.json()["previous_names"] == ["Band"]

        response = await client.delete(f"/api/v1/artists/{artist['id']}", headers=as_user(users["admin"]))
        assert response.status_code == 204

        response = await client.get(f"/api/v1/artists/{artist['id']}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_anonymous_create_is_forbidden(self, client):
        response = await client.post("/api/v1/artists", json={"name": "Band"})
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_blank_name_is_unprocessable(self, client, users):
        response = await client.post("/api/v1/artists", json={"name": " "}, headers=as_user(users["admin"]))
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_search_with_sort_and_aggregates(self, client, factory):
        big = await factory.artist(name="Big", album_count=2)
        await factory.artist(name="Small")

        response = await client.get(
            "/api/v1/artists/search",
            params={"sort": "-album_count", "limit": 1, "load": "album_count"},
        )

        assert response.status_code == 200
        body = response.json()
        assert [a["name"] for a in body["results"]] == ["Big"]
        assert body["results"][0]["album_count"] == 2
        assert body["results"][0]["id"] == str(big.id)
        assert body["more"] is True
        assert body["next_offset"] == 1

    @pytest.mark.asyncio
    async def test_search_only_fills_loaded_aggregates(self, client, factory):
        artist = await factory.artist(name="Covered")
        await factory.album(artist, year_released=2001, cover_image_url="/images/cover.png")

        response = await client.get("/api/v1/artists/search", params={"q": "Covered", "load": "album_count"})

        result = response.json()["results"][0]
        assert result["album_count"] == 1
        assert result["cover_image_url"] is None
        assert result["latest_album_year_released"] is None

    @pytest.mark.asyncio
    async def test_search_uses_configured_default_page_size(self, client, factory):
        for _ in range(13):
            await factory.artist()

        body = (await client.get("/api/v1/artists/search")).json()

        assert body["limit"] == 12
        assert len(body["results"]) == 12
        assert body["more"] is True

    @pytest.mark.asyncio
    async def test_invalid_sort_is_unprocessable(self, client):
        response = await client.get("/api/v1/artists/search", params={"sort": "+biography"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_permissions(self, client, factory, users):
        artist = await factory.artist()

        response = await client.get(f"/api/v1/artists/{artist.id}/permissions", headers=as_user(users["editor"]))
        assert response.json() == {"can_update": True, "can_destroy": False}

        response = await client.get(f"/api/v1/artists/{artist.id}/permissions")
        assert response.json() == {"can_update": False, "can_destroy": False}


class TestAlbumEndpoints:
    """Album routes."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, client, factory, users):
        artist = await factory.artist()

        response = await client.post(
            "/api/v1/albums",
            json={"artist_id": str(artist.id), "name": "First", "year_released": 2001},
            headers=as_user(users["editor"]),
        )
        assert response.status_code == 201

        response = await client.get(f"/api/v1/artists/{artist.id}/albums")
        assert [album["name"] for album in response.json()] == ["First"]

        response = await client.get(f"/api/v1/artists/{artist.id}")
        assert response.json()["latest_album_year_released"] == 2001
