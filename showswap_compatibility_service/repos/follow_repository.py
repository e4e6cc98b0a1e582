"""Repository for the follow graph."""

import logging
from typing import List, Tuple

from sqlalchemy import and_
from sqlalchemy.orm import Session, aliased

from showswap_compatibility_service.models import UserFollow

logger = logging.getLogger(__name__)


class FollowRepository:
    """
    Read access to the directed follow graph.
    """

    def __init__(self, db: Session):
        self.db = db

    def is_following(self, follower_id: str, followee_id: str) -> bool:
        """Check whether follower_id follows followee_id."""
        follow = (
            self.db.query(UserFollow)
            .filter(
                and_(
                    UserFollow.follower_id == follower_id,
                    UserFollow.following_id == followee_id
                )
            )
            .first()
        )
        return follow is not None

    def bulk_store_follows(self, follows: List[Tuple[str, str]], batch_size: int = 1000) -> int:
        """
        Replace the follow graph with the given edges.

        Args:
            follows: List of (follower_id, following_id) tuples; duplicates are ignored
            batch_size: Batch size for inserts

        Returns:
            Number of edges stored
        """
        logger.info("Clearing existing follows...")
        self.db.query(UserFollow).delete()
        self.db.commit()

        unique_edges = list(dict.fromkeys((str(a), str(b)) for a, b in follows))
        records = [
            UserFollow(follower_id=follower_id, following_id=following_id)
            for follower_id, following_id in unique_edges
        ]

        count = 0
        for i in range(0, len(records), batch_size):
            batch = records[i:i + batch_size]
            self.db.bulk_save_objects(batch)
            self.db.commit()
            count += len(batch)

        logger.info(f"✓ Stored {count} follows")
        return count

    # noinspection PyTypeChecker
    def get_mutual_pairs(self) -> List[Tuple[str, str]]:
        """
        Get every pair of users who follow each other.

        Returns:
            List of (user_a_id, user_b_id) tuples with user_a_id < user_b_id
        """
        reverse = aliased(UserFollow)
        rows = (
            self.db.query(UserFollow.follower_id, UserFollow.following_id)
            .join(
                reverse,
                and_(
                    reverse.follower_id == UserFollow.following_id,
                    reverse.following_id == UserFollow.follower_id
                )
            )
            .filter(UserFollow.follower_id < UserFollow.following_id)
            .order_by(UserFollow.follower_id, UserFollow.following_id)
            .all()
        )
        return [(row[0], row[1]) for row in rows]

    def count_follows(self) -> int:
        """Count follow edges."""
        return self.db.query(UserFollow).count()
