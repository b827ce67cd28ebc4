"""initial schema

Revision ID: 3f2c9a71d0b4
Revises:
Create Date: 2026-10-19 10:12:31.204518

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2c9a71d0b4'
down_revision = None
branch_labels = None
depends_on = None


def _id(**kwargs):
    return sa.Column('id', sa.String(length=24), primary_key=True, **kwargs)


def _ts(name):
    return sa.Column(name, sa.TIMESTAMP(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        'users',
        _id(),
        sa.Column('username', sa.String(length=64), nullable=False, comment='Lowercase handle, unique'),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('avatar', sa.Text(), nullable=True, comment='Media locator for the avatar image'),
        sa.Column('cover_image', sa.Text(), nullable=True, comment='Media locator for the cover image'),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True, comment='Single active refresh token'),
        _ts('created_at'),
        _ts('updated_at'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'videos',
        _id(),
        sa.Column('owner_id', sa.String(length=24), sa.ForeignKey('users.id'), nullable=False,
                  comment='Uploading user'),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('video_file', sa.Text(), nullable=False, comment='Media locator for the video asset'),
        sa.Column('thumbnail', sa.Text(), nullable=False, comment='Media locator for the thumbnail'),
        sa.Column('duration', sa.Float(), nullable=False, comment='Length in seconds'),
        sa.Column('views', sa.BIGINT(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        _ts('created_at'),
        _ts('updated_at'),
        sa.CheckConstraint('views >= 0', name='ck_videos_views_non_negative'),
    )
    op.create_index('ix_videos_owner_id', 'videos', ['owner_id'])
    op.create_index('idx_videos_published_created', 'videos', ['is_published', 'created_at'])

    op.create_table(
        'comments',
        _id(),
        sa.Column('owner_id', sa.String(length=24), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('video_id', sa.String(length=24), sa.ForeignKey('videos.id', ondelete='CASCADE'),
                  nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('idx_comments_video_created', 'comments', ['video_id', 'created_at'])

    op.create_table(
        'likes',
        _id(),
        sa.Column('video_id', sa.String(length=24), sa.ForeignKey('videos.id', ondelete='CASCADE'),
                  nullable=True),
        sa.Column('comment_id', sa.String(length=24), sa.ForeignKey('comments.id', ondelete='CASCADE'),
                  nullable=True),
        sa.Column('liked_by_id', sa.String(length=24), sa.ForeignKey('users.id'), nullable=False),
        _ts('created_at'),
        sa.UniqueConstraint('video_id', 'liked_by_id', name='uq_likes_video_liked_by'),
        sa.UniqueConstraint('comment_id', 'liked_by_id', name='uq_likes_comment_liked_by'),
        sa.CheckConstraint('(video_id IS NULL) <> (comment_id IS NULL)', name='ck_likes_single_target'),
    )
    op.create_index('ix_likes_liked_by_id', 'likes', ['liked_by_id'])

    op.create_table(
        'subscriptions',
        _id(),
        sa.Column('subscriber_id', sa.String(length=24), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('channel_id', sa.String(length=24), sa.ForeignKey('users.id'), nullable=False),
        _ts('created_at'),
        sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscriptions_pair'),
        sa.CheckConstraint('subscriber_id <> channel_id', name='ck_subscriptions_not_self'),
    )
    op.create_index('ix_subscriptions_subscriber_id', 'subscriptions', ['subscriber_id'])
    op.create_index('ix_subscriptions_channel_id', 'subscriptions', ['channel_id'])

    op.create_table(
        'playlists',
        _id(),
        sa.Column('owner_id', sa.String(length=24), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        _ts('created_at'),
        _ts('updated_at'),
    )
    op.create_index('ix_playlists_owner_id', 'playlists', ['owner_id'])

    op.create_table(
        'playlist_videos',
        _id(),
        sa.Column('playlist_id', sa.String(length=24), sa.ForeignKey('playlists.id', ondelete='CASCADE'),
                  nullable=False),
        sa.Column('video_id', sa.String(length=24), sa.ForeignKey('videos.id', ondelete='CASCADE'),
                  nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, comment='0-based insertion position'),
        _ts('added_at'),
        sa.UniqueConstraint('playlist_id', 'video_id', name='uq_playlist_videos_pair'),
    )

    op.create_table(
        'watch_history',
        _id(),
        sa.Column('user_id', sa.String(length=24), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('video_id', sa.String(length=24), sa.ForeignKey('videos.id', ondelete='CASCADE'),
                  nullable=False),
        _ts('watched_at'),
        sa.UniqueConstraint('user_id', 'video_id', name='uq_watch_history_pair'),
    )
    op.create_index('idx_watch_history_user_watched', 'watch_history', ['user_id', 'watched_at'])


def downgrade() -> None:
    op.drop_index('idx_watch_history_user_watched', table_name='watch_history')
    op.drop_table('watch_history')
    op.drop_table('playlist_videos')
    op.drop_index('ix_playlists_owner_id', table_name='playlists')
    op.drop_table('playlists')
    op.drop_index('ix_subscriptions_channel_id', table_name='subscriptions')
    op.drop_index('ix_subscriptions_subscriber_id', table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index('ix_likes_liked_by_id', table_name='likes')
    op.drop_table('likes')
    op.drop_index('idx_comments_video_created', table_name='comments')
    op.drop_table('comments')
    op.drop_index('idx_videos_published_created', table_name='videos')
    op.drop_index('ix_videos_owner_id', table_name='videos')
    op.drop_table('videos')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
