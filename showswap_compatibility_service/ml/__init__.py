"""Compatibility scoring and bucketing"""

from .bucketing import CompatibilityBucket, bucket_compatibility
from .compatibility_scorer import (
    CompatibilityOptions,
    Scored,
    Unscored,
    compute_compatibility,
    score_compatibility,
)

__all__ = [
    "CompatibilityBucket",
    "CompatibilityOptions",
    "Scored",
    "Unscored",
    "bucket_compatibility",
    "compute_compatibility",
    "score_compatibility",
]
