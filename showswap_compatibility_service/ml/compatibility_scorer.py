"""Compute rating-overlap compatibility between two users."""
import math
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from numbers import Real
from typing import Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

METHODS = ("weighted", "correlation", "hybrid")

DEGENERATE_SCALE = "degenerate_scale"
INSUFFICIENT_OVERLAP = "insufficient_overlap"

RatingMap = Mapping[str, float]


@dataclass(frozen=True)
class CompatibilityOptions:
    """
    Tuning values for compatibility scoring.

    Attributes:
        method: One of 'weighted', 'correlation' or 'hybrid'
        rating_min: Lowest rating on the scale
        rating_max: Highest rating on the scale
        min_overlap: Common shows required before any score is produced
        hybrid_min_overlap: Common shows required before correlation is blended in
        hybrid_weight: Share of correlation in the hybrid blend
        decimal_places: Rounding precision of the percentage
    """
    method: str = "hybrid"
    rating_min: float = 1
    rating_max: float = 5
    min_overlap: int = 3
    hybrid_min_overlap: int = 10
    hybrid_weight: float = 0.25
    decimal_places: int = 0

    def __post_init__(self):
        if self.method not in METHODS:
            raise ValueError(f"method must be one of {', '.join(METHODS)}, got {self.method!r}")
        if not 0 <= self.hybrid_weight <= 1:
            raise ValueError("hybrid_weight must be between 0 and 1")
        if self.min_overlap < 0 or self.hybrid_min_overlap < 0:
            raise ValueError("overlap thresholds must not be negative")
        if self.decimal_places < 0:
            raise ValueError("decimal_places must not be negative")

    @property
    def rating_range(self) -> float:
        return self.rating_max - self.rating_min


@dataclass(frozen=True)
class Scored:
    """A compatibility percentage computed from enough shared ratings."""
    value: float
    overlap_count: int
    method: str


@dataclass(frozen=True)
class Unscored:
    """No score could be produced; `reason` says why."""
    reason: str
    overlap_count: int


CompatibilityResult = Union[Scored, Unscored]


def _resolve_options(options: Optional[CompatibilityOptions], overrides: dict) -> CompatibilityOptions:
    if options is None:
        return CompatibilityOptions(**overrides)
    if overrides:
        return replace(options, **overrides)
    return options


def _is_finite_rating(value) -> bool:
    # bool is a Real subclass but never a rating
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return isinstance(value, Real) and math.isfinite(value)


def common_ratings(ratings_a: RatingMap, ratings_b: RatingMap) -> List[Tuple[float, float]]:
    """
    Pair up the ratings of shows both users rated.

    Shows are visited in a canonical (sorted) order so that the result for
    (a, b) is the mirror image of the result for (b, a). Entries whose rating
    is not a finite number on either side are dropped.

    Args:
        ratings_a: First user's show -> rating map
        ratings_b: Second user's show -> rating map

    Returns:
        List of (rating_a, rating_b) tuples
    """
    shared = set(ratings_a.keys()) & set(ratings_b.keys())

    pairs = []
    for show_id in sorted(shared, key=str):
        rating_a = ratings_a[show_id]
        rating_b = ratings_b[show_id]
        if _is_finite_rating(rating_a) and _is_finite_rating(rating_b):
            pairs.append((float(rating_a), float(rating_b)))
        else:
            logger.debug(f"Skipping show {show_id}: non-numeric rating ({rating_a!r}, {rating_b!r})")

    return pairs


def weighted_similarity(pairs: List[Tuple[float, float]], rating_range: float) -> float:
    """
    Distance-based similarity: 1 minus the normalized total absolute difference.

    Args:
        pairs: Paired ratings from common_ratings()
        rating_range: rating_max - rating_min

    Returns:
        Similarity in [0, 1]
    """
    max_diff = rating_range * len(pairs)
    if max_diff == 0:
        return 0.0

    ratings = np.array(pairs, dtype=float)
    total_diff = float(np.abs(ratings[:, 0] - ratings[:, 1]).sum())

    return _clamp(1.0 - total_diff / max_diff, 0.0, 1.0)


def pearson_correlation(pairs: List[Tuple[float, float]]) -> float:
    """
    Pearson correlation coefficient of paired ratings.

    A flat rater (zero variance) carries no correlation signal, so any
    degenerate denominator yields 0 rather than NaN.

    Args:
        pairs: Paired ratings from common_ratings()

    Returns:
        Correlation in [-1, 1]
    """
    n = len(pairs)
    if n == 0:
        return 0.0

    ratings = np.array(pairs, dtype=float)
    x = ratings[:, 0]
    y = ratings[:, 1]

    sum_x = float(x.sum())
    sum_y = float(y.sum())
    sum_xy = float((x * y).sum())
    sum_x2 = float((x * x).sum())
    sum_y2 = float((y * y).sum())

    numerator = n * sum_xy - sum_x * sum_y
    variance_product = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)

    if not math.isfinite(variance_product) or variance_product <= 0:
        return 0.0

    return _clamp(numerator / math.sqrt(variance_product), -1.0, 1.0)


def score_compatibility(
        ratings_a: RatingMap,
        ratings_b: RatingMap,
        options: Optional[CompatibilityOptions] = None,
        **overrides
) -> CompatibilityResult:
    """
    Score two users' rating maps.

    Args:
        ratings_a: First user's show -> rating map
        ratings_b: Second user's show -> rating map
        options: Scoring options (defaults if None)
        **overrides: Individual option fields to override

    Returns:
        Scored with a percentage in [0, 100], or Unscored with a reason
    """
    opts = _resolve_options(options, overrides)

    pairs = common_ratings(ratings_a, ratings_b)
    overlap_count = len(pairs)

    if opts.rating_range <= 0:
        return Unscored(reason=DEGENERATE_SCALE, overlap_count=overlap_count)

    if overlap_count < opts.min_overlap:
        return Unscored(reason=INSUFFICIENT_OVERLAP, overlap_count=overlap_count)

    weighted = weighted_similarity(pairs, opts.rating_range)

    if opts.method == "weighted":
        score = weighted
    elif opts.method == "correlation":
        score = _correlation_01(pairs)
    elif overlap_count >= opts.hybrid_min_overlap:
        score = _clamp(
            (1 - opts.hybrid_weight) * weighted + opts.hybrid_weight * _correlation_01(pairs),
            0.0,
            1.0
        )
    else:
        # Correlation is too noisy on a small overlap
        score = weighted

    value = _round_half_up(_clamp(score, 0.0, 1.0) * 100, opts.decimal_places)
    return Scored(value=value, overlap_count=overlap_count, method=opts.method)


def compute_compatibility(
        ratings_a: RatingMap,
        ratings_b: RatingMap,
        options: Optional[CompatibilityOptions] = None,
        **overrides
) -> float:
    """Compatibility percentage between two users, 0 when no score is possible."""
    result = score_compatibility(ratings_a, ratings_b, options, **overrides)
    if isinstance(result, Unscored):
        return 0
    return result.value


def compare_methods(
        ratings_a: RatingMap,
        ratings_b: RatingMap,
        options: Optional[CompatibilityOptions] = None
) -> Dict[str, float]:
    """
    Score the same pair under every method, for tuning and debugging.

    'hybrid_strict' trusts correlation earlier and weighs it more heavily
    than the default hybrid.

    Returns:
        Dict mapping method name to percentage
    """
    opts = options or CompatibilityOptions()

    return {
        'weighted': compute_compatibility(ratings_a, ratings_b, replace(opts, method='weighted')),
        'correlation': compute_compatibility(ratings_a, ratings_b, replace(opts, method='correlation')),
        'hybrid': compute_compatibility(ratings_a, ratings_b, replace(opts, method='hybrid')),
        'hybrid_strict': compute_compatibility(
            ratings_a,
            ratings_b,
            replace(opts, method='hybrid', hybrid_min_overlap=5, hybrid_weight=0.4)
        ),
    }


def _correlation_01(pairs: List[Tuple[float, float]]) -> float:
    return (pearson_correlation(pairs) + 1) / 2


def _round_half_up(value: float, decimal_places: int) -> float:
    factor = 10 ** decimal_places
    rounded = math.floor(value * factor + 0.5) / factor
    if decimal_places == 0:
        return int(rounded)
    return rounded


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
