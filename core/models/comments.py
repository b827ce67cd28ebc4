from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Index

from core.db import Base, generate_id, utcnow


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(24), primary_key=True, default=generate_id)
    owner_id = Column(String(24), ForeignKey("users.id"), nullable=False)
    video_id = Column(String(24), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_comments_video_created", "video_id", "created_at"),
    )
