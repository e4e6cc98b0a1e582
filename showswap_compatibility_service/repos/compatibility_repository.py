"""Repository for managing stored compatibility scores in the database."""

from typing import List, Dict, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import desc, func, or_
from datetime import datetime, UTC
import logging

from showswap_compatibility_service.models import CompatibilityScore

logger = logging.getLogger(__name__)


def sort_pair(user_a_id: str, user_b_id: str) -> Tuple[str, str]:
    """Order a user pair the way it is keyed in the table."""
    if user_a_id <= user_b_id:
        return user_a_id, user_b_id
    return user_b_id, user_a_id


class CompatibilityRepository:
    """
    Repository for managing stored compatibility scores in the database.
    """

    def __init__(self, db: Session):
        self.db = db

    def bulk_store_scores(
            self,
            scores: List[Dict],
            batch_size: int = 1000,
            clear_existing: bool = True
    ) -> int:
        """
        Store scores for many pairs in bulk.

        Args:
            scores: List of dicts with keys:
                - user_a_id: str
                - user_b_id: str
                - score: float
                - overlap_count: int
                - method: str (optional)
            batch_size: Number of records to insert per batch
            clear_existing: Whether to clear existing scores before inserting

        Returns:
            Total number of scores stored
        """
        if clear_existing:
            logger.info("Clearing existing compatibility scores...")
            self.db.query(CompatibilityScore).delete()
            self.db.commit()

        records = []
        for item in scores:
            first_id, second_id = sort_pair(item['user_a_id'], item['user_b_id'])
            records.append(CompatibilityScore(
                user_a_id=first_id,
                user_b_id=second_id,
                score=item['score'],
                overlap_count=item['overlap_count'],
                method=item.get('method', 'hybrid'),
                computed_at=datetime.now(UTC)
            ))

        total_count = 0
        logger.info(f"Inserting {len(records)} compatibility records...")

        for i in range(0, len(records), batch_size):
            batch = records[i:i + batch_size]
            self.db.bulk_save_objects(batch)
            self.db.commit()
            total_count += len(batch)

        logger.info(f"✓ Stored {total_count} compatibility scores")
        return total_count

    def get_top_compatible(
            self,
            user_id: str,
            n: int = 3,
            exclude_user_id: Optional[str] = None
    ) -> List[Dict]:
        """
        Get the users most compatible with a user.

        Args:
            user_id: User to look up
            n: Number of results
            exclude_user_id: Partner to leave out (e.g. the user viewing the profile)

        Returns:
            List of dicts with friend_id, score and overlap_count, best first
        """
        query = (
            self.db.query(CompatibilityScore)
            .filter(
                or_(
                    CompatibilityScore.user_a_id == user_id,
                    CompatibilityScore.user_b_id == user_id
                )
            )
            .order_by(desc(CompatibilityScore.score))
        )

        results = []
        for record in query.all():
            friend_id = record.user_b_id if record.user_a_id == user_id else record.user_a_id
            if exclude_user_id is not None and friend_id == exclude_user_id:
                continue

            results.append({
                'friend_id': friend_id,
                'score': record.score,
                'overlap_count': record.overlap_count,
            })

            if len(results) >= n:
                break

        return results

    def get_score_stats(self) -> Dict:
        """Get statistics about stored scores."""
        total_records = self.db.query(CompatibilityScore).count()
        avg_score = self.db.query(func.avg(CompatibilityScore.score)).scalar()

        latest = (
            self.db.query(CompatibilityScore.computed_at)
            .order_by(desc(CompatibilityScore.computed_at))
            .first()
        )

        return {
            'total_pairs': total_records,
            'avg_score': float(avg_score) if avg_score is not None else None,
            'last_computed': latest[0] if latest else None
        }
