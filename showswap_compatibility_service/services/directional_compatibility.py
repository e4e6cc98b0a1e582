"""Directional (follow-gated) compatibility lookups."""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple, Union

from showswap_compatibility_service.ml.bucketing import CompatibilityBucket, bucket_compatibility
from showswap_compatibility_service.ml.compatibility_scorer import (
    INSUFFICIENT_OVERLAP,
    CompatibilityOptions,
    RatingMap,
    Unscored,
    common_ratings,
    score_compatibility,
)

logger = logging.getLogger(__name__)

NOT_FOLLOWING = "not_following"


class RatingsProvider(Protocol):
    def get_ratings(self, user_id: str) -> RatingMap: ...


class FollowProvider(Protocol):
    def is_following(self, follower_id: str, followee_id: str) -> bool: ...


RatingsSource = Union[RatingsProvider, Callable[[str], RatingMap]]
FollowSource = Union[FollowProvider, Callable[[str, str], bool]]


@dataclass(frozen=True)
class DirectionalOptions(CompatibilityOptions):
    """Scoring options plus whether to attach a display bucket."""
    use_bucketing: bool = True


@dataclass
class DirectionalCompatibilityResult:
    """
    Outcome of one viewer -> subject compatibility lookup.

    Exactly one of `score` or `reason` is set; `bucket` only accompanies a
    positive score.
    """
    viewer_id: str
    subject_id: str
    overlap_count: int
    score: Optional[float] = None
    bucket: Optional[CompatibilityBucket] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict:
        """Serialize, leaving out fields that were not computed."""
        data = {
            'viewer_id': self.viewer_id,
            'subject_id': self.subject_id,
            'overlap_count': self.overlap_count,
        }
        if self.score is not None:
            data['score'] = self.score
        if self.bucket is not None:
            data['bucket'] = self.bucket.to_dict()
        if self.reason is not None:
            data['reason'] = self.reason
        return data


def as_ratings_fetcher(ratings_of: RatingsSource) -> Callable[[str], RatingMap]:
    # A provider method wins over the object being callable itself
    if hasattr(ratings_of, "get_ratings"):
        return ratings_of.get_ratings
    return ratings_of


def as_follow_checker(is_following: FollowSource) -> Callable[[str, str], bool]:
    if hasattr(is_following, "is_following"):
        return is_following.is_following
    return is_following


def fetch_rating_pair(
        ratings_of: RatingsSource,
        viewer_id: str,
        subject_id: str
) -> Tuple[RatingMap, RatingMap]:
    """Fetch the viewer's and the subject's rating maps concurrently."""
    get_ratings = as_ratings_fetcher(ratings_of)
    with ThreadPoolExecutor(max_workers=2) as executor:
        viewer_future = executor.submit(get_ratings, viewer_id)
        subject_future = executor.submit(get_ratings, subject_id)
        return viewer_future.result(), subject_future.result()


def compute_directional_compatibility(
        viewer_id: str,
        subject_id: str,
        ratings_of: RatingsSource,
        is_following: FollowSource,
        options: Optional[DirectionalOptions] = None
) -> DirectionalCompatibilityResult:
    """
    Compute the compatibility the viewer is allowed to see toward the subject.

    A viewer only sees a score for users they follow; whether the subject
    follows back does not matter. Ratings are not read at all for a
    non-follower.

    Args:
        viewer_id: User asking for the score
        subject_id: User being compared against
        ratings_of: Ratings provider, or a callable user_id -> rating map
        is_following: Follow provider, or a callable (follower, followee) -> bool
        options: Scoring and bucketing options (defaults if None)

    Returns:
        DirectionalCompatibilityResult with either a score or a reason
    """
    opts = options or DirectionalOptions()

    if not as_follow_checker(is_following)(viewer_id, subject_id):
        logger.debug(f"{viewer_id} does not follow {subject_id}; skipping compatibility")
        return DirectionalCompatibilityResult(
            viewer_id=viewer_id,
            subject_id=subject_id,
            overlap_count=0,
            reason=NOT_FOLLOWING
        )

    viewer_ratings, subject_ratings = fetch_rating_pair(ratings_of, viewer_id, subject_id)

    overlap_count = len(common_ratings(viewer_ratings, subject_ratings))

    if overlap_count < opts.min_overlap:
        return DirectionalCompatibilityResult(
            viewer_id=viewer_id,
            subject_id=subject_id,
            overlap_count=overlap_count,
            reason=INSUFFICIENT_OVERLAP
        )

    result = score_compatibility(viewer_ratings, subject_ratings, opts)
    if isinstance(result, Unscored):
        # Only a degenerate rating scale gets here; it scores 0
        return DirectionalCompatibilityResult(
            viewer_id=viewer_id,
            subject_id=subject_id,
            overlap_count=overlap_count,
            score=0
        )

    bucket = None
    if opts.use_bucketing and result.value > 0:
        bucket = bucket_compatibility(result.value)

    return DirectionalCompatibilityResult(
        viewer_id=viewer_id,
        subject_id=subject_id,
        overlap_count=overlap_count,
        score=result.value,
        bucket=bucket
    )
