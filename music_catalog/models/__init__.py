"""Models for the music catalog service."""
from .base import Base
from .user import User, Role
from .artist import Artist
from .album import Album

__all__ = ["Base", "User", "Role", "Artist", "Album"]
