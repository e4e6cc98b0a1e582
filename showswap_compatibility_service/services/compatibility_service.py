"""Service for user-to-user compatibility scores."""
from dataclasses import asdict
from typing import Dict, List, Optional
import logging

from showswap_compatibility_service.config import get_compatibility_settings
from showswap_compatibility_service.ml.bucketing import bucket_compatibility
from showswap_compatibility_service.ml.compatibility_scorer import (
    Scored,
    common_ratings,
    compare_methods,
    score_compatibility,
)
from showswap_compatibility_service.models.database import SessionLocal
from showswap_compatibility_service.repos import (
    CompatibilityRepository,
    FollowRepository,
    RatingRepository,
)
from showswap_compatibility_service.services.directional_compatibility import (
    NOT_FOLLOWING,
    DirectionalOptions,
    FollowSource,
    RatingsSource,
    as_follow_checker,
    compute_directional_compatibility,
    fetch_rating_pair,
)

logger = logging.getLogger(__name__)


class DatabaseRatingsProvider:
    """Ratings provider that opens its own session per call.

    The directional gate fetches two rating maps concurrently, and a
    SQLAlchemy session must not be shared between threads.
    """

    def get_ratings(self, user_id: str) -> Dict[str, int]:
        db = SessionLocal()
        try:
            return RatingRepository(db).get_ratings(user_id)
        finally:
            db.close()


class DatabaseFollowProvider:
    """Follow provider reading the user_follows table."""

    def is_following(self, follower_id: str, followee_id: str) -> bool:
        db = SessionLocal()
        try:
            return FollowRepository(db).is_following(follower_id, followee_id)
        finally:
            db.close()


# noinspection PyMethodMayBeStatic
class CompatibilityService:
    """
    Service for user-to-user compatibility.
    Serves directional lookups and maintains stored scores for mutual follows.
    """

    def __init__(
            self,
            options: Optional[DirectionalOptions] = None,
            ratings_provider: Optional[RatingsSource] = None,
            follow_provider: Optional[FollowSource] = None
    ):
        """
        Initialize the compatibility service.

        Args:
            options: Scoring options (None = read from config)
            ratings_provider: Where rating maps come from (None = database)
            follow_provider: Where follow edges come from (None = database)
        """
        if options is None:
            options = DirectionalOptions(**get_compatibility_settings())

        self.options = options
        self.ratings_provider = ratings_provider or DatabaseRatingsProvider()
        self.follow_provider = follow_provider or DatabaseFollowProvider()

        logger.info(
            f"Initialized CompatibilityService (method: {options.method}, "
            f"min_overlap: {options.min_overlap}, hybrid_min_overlap: {options.hybrid_min_overlap}, "
            f"hybrid_weight: {options.hybrid_weight})"
        )

    def get_directional_compatibility(self, viewer_id: str, subject_id: str) -> Dict:
        """
        Get the compatibility the viewer may see toward the subject.

        Args:
            viewer_id: User asking
            subject_id: User being viewed

        Returns:
            Dict with viewer_id, subject_id, overlap_count and either
            score (+ bucket) or reason
        """
        result = compute_directional_compatibility(
            viewer_id=viewer_id,
            subject_id=subject_id,
            ratings_of=self.ratings_provider,
            is_following=self.follow_provider,
            options=self.options
        )
        return result.to_dict()

    def compare_methods(self, viewer_id: str, subject_id: str) -> Dict:
        """
        Score a pair under every scoring method.

        Follows the same visibility rule as get_directional_compatibility.

        Returns:
            Dict with overlap_count and methods, or reason when not following
        """
        if not as_follow_checker(self.follow_provider)(viewer_id, subject_id):
            return {
                'viewer_id': viewer_id,
                'subject_id': subject_id,
                'overlap_count': 0,
                'reason': NOT_FOLLOWING
            }

        viewer_ratings, subject_ratings = fetch_rating_pair(self.ratings_provider, viewer_id, subject_id)

        return {
            'viewer_id': viewer_id,
            'subject_id': subject_id,
            'overlap_count': len(common_ratings(viewer_ratings, subject_ratings)),
            'methods': compare_methods(viewer_ratings, subject_ratings, self.options)
        }

    def compute_mutual_scores(self) -> List[Dict]:
        """
        Score every pair of users who follow each other.

        Pairs below the minimum overlap are skipped.

        Returns:
            List of dicts ready for CompatibilityRepository.bulk_store_scores
        """
        db = SessionLocal()
        try:
            follow_repo = FollowRepository(db)
            rating_repo = RatingRepository(db)

            pairs = follow_repo.get_mutual_pairs()
            logger.info(f"Scoring {len(pairs)} mutual follow pairs...")

            ratings_cache: Dict[str, Dict] = {}
            scores = []
            for user_a_id, user_b_id in pairs:
                for user_id in (user_a_id, user_b_id):
                    if user_id not in ratings_cache:
                        ratings_cache[user_id] = rating_repo.get_ratings(user_id)

                result = score_compatibility(
                    ratings_cache[user_a_id],
                    ratings_cache[user_b_id],
                    self.options
                )

                if isinstance(result, Scored):
                    scores.append({
                        'user_a_id': user_a_id,
                        'user_b_id': user_b_id,
                        'score': result.value,
                        'overlap_count': result.overlap_count,
                        'method': result.method
                    })
                    logger.info(f"  {user_a_id} · {user_b_id} → {result.value}")
                else:
                    logger.info(
                        f"  {user_a_id} · {user_b_id} → n/a ({result.reason}, "
                        f"{result.overlap_count} shared shows)"
                    )

            logger.info(f"✓ Scored {len(scores)}/{len(pairs)} pairs")
            return scores

        finally:
            db.close()

    def store_scores(self, scores: List[Dict]) -> Dict:
        """
        Replace stored scores with the given ones.

        Returns:
            Dict with statistics
        """
        db = SessionLocal()
        try:
            repo = CompatibilityRepository(db)
            total_records = repo.bulk_store_scores(scores)

            stats = repo.get_score_stats()
            stats['records_stored'] = total_records
            return stats

        finally:
            db.close()

    def recalculate_all(self) -> Dict:
        """Recompute and store scores for all mutual follow pairs."""
        logger.info("=" * 60)
        logger.info("RECALCULATING COMPATIBILITY SCORES")
        logger.info("=" * 60)

        scores = self.compute_mutual_scores()
        stats = self.store_scores(scores)

        logger.info(f"Total records stored: {stats['records_stored']}")
        return stats

    def get_top_compatible(
            self,
            user_id: str,
            n: int = 3,
            exclude_user_id: Optional[str] = None
    ) -> List[Dict]:
        """
        Get a user's most compatible friends from stored scores.

        Args:
            user_id: User to look up
            n: Number of friends
            exclude_user_id: Partner to leave out (e.g. the viewer of a profile)

        Returns:
            List of dicts with friend_id, score, overlap_count and bucket
        """
        db = SessionLocal()
        try:
            repo = CompatibilityRepository(db)
            friends = repo.get_top_compatible(user_id, n=n, exclude_user_id=exclude_user_id)
        finally:
            db.close()

        for friend in friends:
            friend['bucket'] = bucket_compatibility(friend['score']).to_dict()

        return friends

    def get_stats(self) -> Dict:
        """Get statistics about stored compatibility data."""
        db = SessionLocal()
        try:
            return {
                'score_stats': CompatibilityRepository(db).get_score_stats(),
                'ratings': RatingRepository(db).count_ratings(),
                'follows': FollowRepository(db).count_follows(),
                'options': asdict(self.options)
            }
        finally:
            db.close()

