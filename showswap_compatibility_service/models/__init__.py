"""SQLAlchemy models"""

from showswap_compatibility_service.models.base import Base
from showswap_compatibility_service.models.compatibility_score import CompatibilityScore
from showswap_compatibility_service.models.user_follow import UserFollow
from showswap_compatibility_service.models.user_rating import UserRating

__all__ = [
    "Base",
    "CompatibilityScore",
    "UserFollow",
    "UserRating",
]
