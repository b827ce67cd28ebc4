from sqlalchemy import Column, String, Text, TIMESTAMP
from sqlalchemy.orm import relationship

from core.db import Base, generate_id, utcnow


class User(Base):
    """Platform account; doubles as a channel"""
    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=generate_id)
    username = Column(String(64), nullable=False, unique=True, index=True,
                      comment="Lowercase handle, unique")
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(255), nullable=False)
    avatar = Column(Text, comment="Media locator for the avatar image")
    cover_image = Column(Text, comment="Media locator for the cover image")
    password_hash = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=True, comment="Single active refresh token")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    videos = relationship("Video", back_populates="owner")
