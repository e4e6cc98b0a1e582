"""Map compatibility scores to display buckets."""
from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True)
class CompatibilityBucket:
    """Label and colors shown next to a compatibility score."""
    label: str
    color: str
    bg_color: str
    border_color: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


# (lower bound, bucket), checked from the top down
BUCKETS = [
    (90, CompatibilityBucket("Perfect Match", "#10B981", "#ECFDF5", "#A7F3D0")),
    (80, CompatibilityBucket("Great Match", "#059669", "#ECFDF5", "#A7F3D0")),
    (70, CompatibilityBucket("Good Match", "#3B82F6", "#EFF6FF", "#BFDBFE")),
    (60, CompatibilityBucket("Fair Match", "#6366F1", "#EEF2FF", "#C7D2FE")),
    (50, CompatibilityBucket("Mixed Tastes", "#F59E0B", "#FFFBEB", "#FDE68A")),
]

DIFFERENT_TASTES = CompatibilityBucket("Different Tastes", "#EF4444", "#FEF2F2", "#FECACA")


def bucket_compatibility(score: float) -> CompatibilityBucket:
    """
    Convert a compatibility score into a user-friendly bucket.

    Args:
        score: Compatibility percentage (values outside 0-100 fall into the nearest bucket)

    Returns:
        CompatibilityBucket for the score
    """
    for lower_bound, bucket in BUCKETS:
        if score >= lower_bound:
            return bucket
    return DIFFERENT_TASTES


def get_compatibility_label(score: float) -> str:
    """Get just the label for a compatibility score."""
    return bucket_compatibility(score).label


def get_compatibility_color(score: float) -> str:
    """Get just the color for a compatibility score."""
    return bucket_compatibility(score).color
