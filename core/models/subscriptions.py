from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, CheckConstraint, UniqueConstraint

from core.db import Base, generate_id, utcnow


class Subscription(Base):
    """subscriber follows channel; both are users"""
    __tablename__ = "subscriptions"

    id = Column(String(24), primary_key=True, default=generate_id)
    subscriber_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    channel_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="ck_subscriptions_not_self"),
    )
