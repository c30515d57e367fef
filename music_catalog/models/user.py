"""User model representing the acting principal."""
import enum

from sqlalchemy import Column, String, Enum as SQLEnum

from .base import Base, UUIDMixin, TimestampMixin


class Role(str, enum.Enum):
    """Role of a user, used by the policy table."""
    ADMIN = "admin"
    EDITOR = "editor"
    USER = "user"


class User(Base, UUIDMixin, TimestampMixin):
    """A registered user of the music library."""
    
    __tablename__ = "users"
    
    email = Column(String(320), nullable=False, unique=True, index=True)
    role = Column(SQLEnum(Role, native_enum=False, length=16), nullable=False, default=Role.USER)
    
    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
