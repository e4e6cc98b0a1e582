"""A user's star rating for a show"""
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, Integer, String

from showswap_compatibility_service.models.base import Base


class UserRating(Base):
    """A user's 1-5 star rating for a show they watched.

    Rows are removed when the user un-rates the show.
    """

    __tablename__ = "user_ratings"

    user_id = Column(String(64), primary_key=True)
    show_id = Column(String(64), primary_key=True)
    stars = Column(Integer, nullable=False)

    rated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("idx_ratings_user_id", "user_id"),
    )

    def __repr__(self):
        return f"<UserRating(user_id='{self.user_id}', show_id='{self.show_id}', stars={self.stars})>"
