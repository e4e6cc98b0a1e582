"""Stores pre-computed compatibility scores between users."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from showswap_compatibility_service.models.base import Base


class CompatibilityScore(Base):
    """Stores pre-computed compatibility scores between users.

    Each row represents one unordered pair, stored with user_a_id < user_b_id.
    """

    __tablename__ = "compatibility_scores"

    # Composite primary key
    user_a_id = Column(String(64), primary_key=True)
    user_b_id = Column(String(64), primary_key=True)

    score = Column(Float, nullable=False)
    overlap_count = Column(Integer, nullable=False)
    method = Column(String(20), nullable=False, default="hybrid")

    # Metadata
    computed_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Indexes for "most compatible" lookups from either side
    __table_args__ = (
        Index("idx_compat_user_a", "user_a_id", "score"),
        Index("idx_compat_user_b", "user_b_id", "score"),
    )

    def __repr__(self):
        return (
            f"<CompatibilityScore(user_a_id='{self.user_a_id}', user_b_id='{self.user_b_id}', "
            f"score={self.score})>"
        )
