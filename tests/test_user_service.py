"""Tests for user lookups."""
from uuid import uuid4

import pytest

from music_catalog.core.exceptions import NotFoundError, StorageError, ValidationError
from music_catalog.models import Role
from music_catalog.services import UserService


class TestUserService:
    """UserService lookups and registration."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, db):
        service = UserService(db)
        user = await service.create_user(" Editor@Example.com ", "editor")

        assert user.email == "editor@example.com"
        assert user.role == Role.EDITOR
        assert (await service.get_user(user.id)).id == user.id

    @pytest.mark.asyncio
    async def test_unknown_role(self, db):
        with pytest.raises(ValidationError):
            await UserService(db).create_user("a@example.com", "superuser")

    @pytest.mark.asyncio
    async def test_duplicate_email_is_a_storage_error(self, db):
        service = UserService(db)
        await service.create_user("dup@example.com")

        with pytest.raises(StorageError):
            await service.create_user("dup@example.com")

    @pytest.mark.asyncio
    async def test_missing_user(self, db):
        service = UserService(db)
        with pytest.raises(NotFoundError):
            await service.get_user(uuid4())
        assert await service.find_user(None) is None
        assert await service.find_user(uuid4()) is None
