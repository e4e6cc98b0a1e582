"""Repository classes"""

from showswap_compatibility_service.repos.compatibility_repository import CompatibilityRepository
from showswap_compatibility_service.repos.follow_repository import FollowRepository
from showswap_compatibility_service.repos.rating_repository import RatingRepository

__all__ = [
    "CompatibilityRepository",
    "FollowRepository",
    "RatingRepository",
]
