"""Services for the music catalog."""
from .album_service import AlbumService
from .artist_service import ArtistService
from .user_service import UserService

__all__ = ["AlbumService", "ArtistService", "UserService"]
