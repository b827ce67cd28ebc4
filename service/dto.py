"""Data Transfer Objects for the service layer; these are the enforced public shapes"""
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """Page envelope"""
    items: List[T] = Field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    current_page: int = 1
    limit: int = 10
    has_next_page: bool = False
    has_prev_page: bool = False


def page_of(model, window) -> Page:
    """Validate a paginator window's shaped items into `model`"""
    return Page[model](
        items=[model.model_validate(item) for item in window.items],
        total_items=window.total_items,
        total_pages=window.total_pages,
        current_page=window.current_page,
        limit=window.limit,
        has_next_page=window.has_next_page,
        has_prev_page=window.has_prev_page,
    )


# Users / channels

class OwnerSummary(BaseModel):
    """Public user fields embedded in other views"""
    id: str
    username: str
    full_name: str
    avatar: Optional[str] = None


class ChannelProfile(BaseModel):
    id: str
    username: str
    full_name: str
    email: str
    avatar: Optional[str] = None
    cover_image: Optional[str] = None
    created_at: datetime
    subscribers_count: int = 0
    channels_subscribed_to_count: int = 0
    is_subscribed: bool = False


class SubscriberSummary(OwnerSummary):
    subscribers_count: int = 0
    subscribed_to_subscriber: bool = False


class SubscriberRow(BaseModel):
    subscriber: SubscriberSummary
    subscribed_at: datetime


class LatestVideo(BaseModel):
    id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    created_at: datetime


class SubscribedChannel(OwnerSummary):
    subscribers_count: int = 0
    latest_video: Optional[LatestVideo] = None


class SubscribedChannelRow(BaseModel):
    channel: SubscribedChannel
    subscribed_at: datetime


# Videos

class VideoBase(BaseModel):
    id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime


class VideoSummary(VideoBase):
    owner_details: Optional[OwnerSummary] = None


class VideoOwner(OwnerSummary):
    subscribers_count: int = 0
    is_subscribed: bool = False


class VideoDetail(VideoBase):
    likes_count: int = 0
    is_liked: bool = False
    owner: Optional[VideoOwner] = None


class VideoListQuery(BaseModel):
    """Listing parameters for the public video feed"""
    page: int = 1
    limit: int = 10
    search: Optional[str] = None
    sort_field: str = "created_at"
    sort_direction: str = "desc"
    owner_id: Optional[str] = None


class PublishVideoRequest(BaseModel):
    """Media locators come from the storage collaborator"""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    video_file: str = Field(..., min_length=1)
    thumbnail: str = Field(..., min_length=1)
    duration: float = Field(default=0.0, ge=0)


class UpdateVideoRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    thumbnail: Optional[str] = Field(default=None, min_length=1)


class LikedVideo(BaseModel):
    liked_at: datetime
    video: VideoSummary


class HistoryEntry(BaseModel):
    watched_at: datetime
    video: VideoSummary


# Comments

class CommentSummary(BaseModel):
    id: str
    content: str
    created_at: datetime
    updated_at: datetime
    likes_count: int = 0
    is_liked: bool = False
    owner: Optional[OwnerSummary] = None


class CommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentDTO(BaseModel):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


# Playlists

class PlaylistSummary(BaseModel):
    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    total_videos: int = 0
    total_views: int = 0


class PlaylistVideoItem(BaseModel):
    position: int
    added_at: datetime
    video: VideoSummary


class PlaylistDetail(PlaylistSummary):
    owner: Optional[OwnerSummary] = None
    videos: List[PlaylistVideoItem] = Field(default_factory=list)


class PlaylistRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)


# Dashboard

class ChannelStats(BaseModel):
    total_subscribers: int = 0
    total_videos: int = 0
    total_views: int = 0
    total_likes: int = 0


class ChannelVideo(VideoBase):
    likes_count: int = 0
    comments_count: int = 0


# Toggles / health

class ToggleResponseDTO(BaseModel):
    """New state after a like or subscription toggle"""
    active: bool
    message: str


class HealthResponseDTO(BaseModel):
    """Service layer DTO for health check responses"""
    ok: bool = True
    database: bool = True
    timestamp: Optional[str] = None
    version: Optional[str] = None
