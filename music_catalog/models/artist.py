"""Artist model for the music catalog."""
from sqlalchemy import Column, String, Text, JSON, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from .base import Base, UUIDMixin, TimestampMixin


class Artist(Base, UUIDMixin, TimestampMixin):
    """A person or group of people that makes and releases music."""
    
    __tablename__ = "artists"
    
    name = Column(String(255), nullable=False, index=True)
    biography = Column(Text, nullable=True)
    # Most recent first
    previous_names = Column(JSON, nullable=False, default=list)
    
    created_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    
    # Relationships
    albums = relationship(
        "Album",
        back_populates="artist",
        cascade="all, delete-orphan",
        order_by="Album.year_released.desc().nulls_first()",
    )
    created_by = relationship("User", foreign_keys=[created_by_id])
    updated_by = relationship("User", foreign_keys=[updated_by_id])
    
    def __repr__(self) -> str:
        return f"<Artist(id={self.id}, name='{self.name}')>"
