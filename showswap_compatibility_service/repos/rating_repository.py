"""Repository for user show ratings."""

import logging
from datetime import UTC, datetime
from typing import Dict, List

from sqlalchemy.orm import Session

from showswap_compatibility_service.models import UserRating

logger = logging.getLogger(__name__)


class RatingRepository:
    """
    Repository for user show ratings. Serves rating maps to the scorer.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_ratings(self, user_id: str) -> Dict[str, int]:
        """
        Get a user's ratings as a show -> stars map.

        Args:
            user_id: User ID

        Returns:
            Dict mapping show ID to star rating (empty if the user rated nothing)
        """
        rows = (
            self.db.query(UserRating.show_id, UserRating.stars)
            .filter(UserRating.user_id == user_id)
            .all()
        )
        return {show_id: stars for show_id, stars in rows}

    def bulk_store_ratings(self, ratings: List[Dict], batch_size: int = 1000) -> int:
        """
        Replace all ratings with the given ones.

        Args:
            ratings: List of dicts with user_id, show_id and stars
            batch_size: Batch size for inserts

        Returns:
            Number of ratings stored
        """
        logger.info("Clearing existing ratings...")
        self.db.query(UserRating).delete()
        self.db.commit()

        records = [
            UserRating(
                user_id=str(item["user_id"]),
                show_id=str(item["show_id"]),
                stars=int(item["stars"]),
                rated_at=datetime.now(UTC),
            )
            for item in ratings
        ]

        count = 0
        for i in range(0, len(records), batch_size):
            batch = records[i : i + batch_size]
            self.db.bulk_save_objects(batch)
            self.db.commit()
            count += len(batch)

        logger.info(f"✓ Stored {count} ratings")
        return count

    def count_ratings(self) -> int:
        """Count all stored ratings."""
        return self.db.query(UserRating).count()
