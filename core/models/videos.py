from sqlalchemy import Column, String, Text, Float, BIGINT, Boolean, TIMESTAMP, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from core.db import Base, generate_id, utcnow


class Video(Base):
    """Published media item"""
    __tablename__ = "videos"

    id = Column(String(24), primary_key=True, default=generate_id)
    owner_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True,
                      comment="Uploading user")
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    video_file = Column(Text, nullable=False, comment="Media locator for the video asset")
    thumbnail = Column(Text, nullable=False, comment="Media locator for the thumbnail")
    duration = Column(Float, nullable=False, default=0.0, comment="Length in seconds")
    views = Column(BIGINT, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="videos")

    __table_args__ = (
        CheckConstraint("views >= 0", name="ck_videos_views_non_negative"),
        Index("idx_videos_published_created", "is_published", "created_at"),
    )
