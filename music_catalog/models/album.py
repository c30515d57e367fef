"""Album model for the music catalog."""
from sqlalchemy import Column, String, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from .base import Base, UUIDMixin, TimestampMixin


class Album(Base, UUIDMixin, TimestampMixin):
    """An album released by an artist."""
    
    __tablename__ = "albums"
    
    name = Column(String(255), nullable=False, index=True)
    artist_id = Column(Uuid(as_uuid=True), ForeignKey("artists.id", ondelete="CASCADE"), nullable=False, index=True)
    year_released = Column(Integer, nullable=True, index=True)
    cover_image_url = Column(String(1024), nullable=True)
    
    created_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    
    # Relationships
    artist = relationship("Artist", back_populates="albums")
    
    def __repr__(self) -> str:
        return f"<Album(id={self.id}, name='{self.name}', artist_id={self.artist_id}, year_released={self.year_released})>"
