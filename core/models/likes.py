from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, CheckConstraint, UniqueConstraint

from core.db import Base, generate_id, utcnow


class Like(Base):
    """Like on exactly one target: a video or a comment"""
    __tablename__ = "likes"

    id = Column(String(24), primary_key=True, default=generate_id)
    video_id = Column(String(24), ForeignKey("videos.id", ondelete="CASCADE"), nullable=True)
    comment_id = Column(String(24), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    liked_by_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    # Toggle logic relies on these for race safety
    __table_args__ = (
        UniqueConstraint("video_id", "liked_by_id", name="uq_likes_video_liked_by"),
        UniqueConstraint("comment_id", "liked_by_id", name="uq_likes_comment_liked_by"),
        CheckConstraint(
            "(video_id IS NULL) <> (comment_id IS NULL)",
            name="ck_likes_single_target"
        ),
    )
