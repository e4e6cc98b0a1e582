"""Clients that read ratings and follows from the rating/social microservices"""
from typing import Dict, Optional
import logging
import requests

from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from showswap_compatibility_service.config import get_service_url

logger = logging.getLogger(__name__)


def _build_session() -> requests.Session:
    """Session with retries on throttling and server errors."""
    session = requests.Session()
    retry_strategy = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504]
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    # noinspection HttpUrlsUsage
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class RatingsServiceClient:
    """Ratings provider backed by the rating microservice."""

    def __init__(self, rating_service_url: Optional[str] = None):
        # Default to localhost for development
        self.rating_service_url = rating_service_url or get_service_url('rating', 7074)
        self.session = _build_session()

    def get_ratings(self, user_id: str) -> Dict[str, float]:
        """
        Fetch a user's ratings as a show -> stars map.

        The service may answer with a list of {"show_id", "stars"} objects or
        with the map itself.
        """
        url = f"{self.rating_service_url}/users/{user_id}/ratings"
        response = self.session.get(url, timeout=10)
        response.raise_for_status()
        payload = response.json()

        if isinstance(payload, dict):
            return dict(payload)

        ratings = {}
        for item in payload:
            ratings[str(item['show_id'])] = item['stars']

        logger.debug(f"Loaded {len(ratings)} ratings for user {user_id}")
        return ratings


class SocialServiceClient:
    """Follow provider backed by the social microservice."""

    def __init__(self, social_service_url: Optional[str] = None):
        self.social_service_url = social_service_url or get_service_url('social', 7075)
        self.session = _build_session()

    def is_following(self, follower_id: str, followee_id: str) -> bool:
        """Check a follow edge; a 404 means the edge does not exist."""
        url = f"{self.social_service_url}/users/{follower_id}/following/{followee_id}"
        response = self.session.get(url, timeout=10)

        if response.status_code == 404:
            return False

        response.raise_for_status()
        return bool(response.json().get('following', False))
