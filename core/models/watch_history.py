from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, UniqueConstraint, Index

from core.db import Base, generate_id, utcnow


class WatchHistoryEntry(Base):
    """One row per (user, video); watched_at refreshed on rewatch"""
    __tablename__ = "watch_history"

    id = Column(String(24), primary_key=True, default=generate_id)
    user_id = Column(String(24), ForeignKey("users.id"), nullable=False)
    video_id = Column(String(24), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    watched_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_watch_history_pair"),
        Index("idx_watch_history_user_watched", "user_id", "watched_at"),
    )
