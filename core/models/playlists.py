from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, UniqueConstraint

from core.db import Base, generate_id, utcnow


class Playlist(Base):
    __tablename__ = "playlists"

    id = Column(String(24), primary_key=True, default=generate_id)
    owner_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class PlaylistVideo(Base):
    """Ordered membership of a video in a playlist"""
    __tablename__ = "playlist_videos"

    id = Column(String(24), primary_key=True, default=generate_id)
    playlist_id = Column(String(24), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False)
    video_id = Column(String(24), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, comment="0-based insertion position")
    added_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("playlist_id", "video_id", name="uq_playlist_videos_pair"),
    )
