"""Directed follow relationship between two users"""
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, String

from showswap_compatibility_service.models.base import Base


class UserFollow(Base):
    """follower_id follows following_id. The reverse edge is a separate row."""

    __tablename__ = "user_follows"

    follower_id = Column(String(64), primary_key=True)
    following_id = Column(String(64), primary_key=True)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("idx_follows_following_id", "following_id"),
    )

    def __repr__(self):
        return f"<UserFollow(follower_id='{self.follower_id}', following_id='{self.following_id}')>"
