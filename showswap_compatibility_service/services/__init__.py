"""Service classes"""

from .compatibility_service import CompatibilityService
from .directional_compatibility import (
    DirectionalCompatibilityResult,
    DirectionalOptions,
    compute_directional_compatibility,
)
from .user_data_loader import RatingsServiceClient, SocialServiceClient

__all__ = [
    "CompatibilityService",
    "DirectionalCompatibilityResult",
    "DirectionalOptions",
    "RatingsServiceClient",
    "SocialServiceClient",
    "compute_directional_compatibility",
]
