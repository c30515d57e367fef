"""Tests for role-based policies."""
from types import SimpleNamespace
from uuid import uuid4

import pytest

from music_catalog.core.exceptions import AuthorizationError
from music_catalog.models import Role
from music_catalog.services import policy
from music_catalog.services.policy import Action, authorize, ensure_authorized


def actor(role):
    return SimpleNamespace(id=uuid4(), role=role)


ADMIN = actor(Role.ADMIN)
EDITOR = actor(Role.EDITOR)
USER = actor(Role.USER)


class TestArtistPolicies:
    """The artist policy table."""

    def test_only_admins_can_create_artists(self):
        assert policy.can_create_artist(ADMIN)
        assert not policy.can_create_artist(EDITOR)
        assert not policy.can_create_artist(USER)
        assert not policy.can_create_artist(None)

    def test_admins_and_editors_can_update_artists(self):
        artist = SimpleNamespace(id=uuid4(), name="Artist")
        assert policy.can_update_artist(ADMIN, artist)
        assert policy.can_update_artist(EDITOR, artist)
        assert not policy.can_update_artist(USER, artist)
        assert not policy.can_update_artist(None, artist)

    def test_only_admins_can_destroy_artists(self):
        artist = SimpleNamespace(id=uuid4(), name="Artist")
        assert policy.can_destroy_artist(ADMIN, artist)
        assert not policy.can_destroy_artist(EDITOR, artist)
        assert not policy.can_destroy_artist(USER, artist)
        assert not policy.can_destroy_artist(None, artist)

    @pytest.mark.parametrize("who", [ADMIN, EDITOR, USER, None])
    def test_everyone_can_read(self, who):
        assert authorize(who, Action.READ)

    def test_role_may_be_given_as_string(self):
        assert authorize(actor("admin"), Action.CREATE)
        assert not authorize(actor("user"), "update")


class TestAlbumPolicies:
    """The album policy table."""

    def test_editors_manage_albums(self):
        assert policy.can_create_album(EDITOR)
        assert policy.can_update_album(EDITOR)
        assert policy.can_destroy_album(EDITOR)

    def test_users_and_anonymous_cannot_manage_albums(self):
        for who in (USER, None):
            assert not policy.can_create_album(who)
            assert not policy.can_update_album(who)
            assert not policy.can_destroy_album(who)


class TestEnsureAuthorized:
    """Raising variant of the evaluator."""

    def test_allowed_action_returns_none(self):
        assert ensure_authorized(ADMIN, Action.DESTROY) is None

    def test_denied_action_raises(self):
        with pytest.raises(AuthorizationError) as exc_info:
            ensure_authorized(EDITOR, Action.DESTROY)
        assert exc_info.value.details == {"resource": "artist", "action": "destroy"}

    def test_unknown_resource_is_denied(self):
        assert not authorize(ADMIN, Action.CREATE, resource="playlist")
