"""Shared test fixtures and configuration for pytest."""
import pytest
from pathlib import Path
from unittest.mock import Mock
from typing import Dict, List
import tempfile
import json
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from showswap_compatibility_service.models.base import Base
from showswap_compatibility_service.models.compatibility_score import CompatibilityScore
from showswap_compatibility_service.models.user_follow import UserFollow
from showswap_compatibility_service.models.user_rating import UserRating


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=test_db_engine)
    session = SessionLocal()
    yield session
    session.close()


# ===== Sample Data Fixtures =====

@pytest.fixture
def sample_ratings() -> Dict[str, Dict[str, int]]:
    """Rating maps for a handful of users, keyed by user ID."""
    return {
        'alice': {'severance': 5, 'the-bear': 4, 'succession': 3, 'fleabag': 5},
        'bob': {'severance': 5, 'the-bear': 4, 'succession': 3, 'ted-lasso': 2},
        'carol': {'severance': 1, 'the-bear': 2, 'succession': 5, 'fleabag': 1},
        'dave': {'severance': 4, 'ted-lasso': 5},
    }


@pytest.fixture
def sample_follows() -> List[tuple]:
    """Follow edges (follower, followee)."""
    return [
        ('alice', 'bob'),
        ('bob', 'alice'),
        ('alice', 'carol'),
        ('carol', 'alice'),
        ('alice', 'dave'),
        ('dave', 'bob'),
    ]


@pytest.fixture
def large_overlap_ratings() -> tuple:
    """Two users sharing twelve rated shows with a similar taste pattern."""
    ratings_a = {f'show-{i}': rating for i, rating in enumerate([5, 4, 3, 5, 2, 1, 4, 3, 5, 2, 4, 1])}
    ratings_b = {f'show-{i}': rating for i, rating in enumerate([4, 4, 2, 5, 3, 1, 5, 3, 4, 2, 3, 2])}
    return ratings_a, ratings_b


# ===== Provider Fixtures =====

@pytest.fixture
def ratings_lookup(sample_ratings):
    """Callable ratings provider backed by sample_ratings."""
    return Mock(spec=[], side_effect=lambda user_id: sample_ratings.get(user_id, {}))


@pytest.fixture
def follow_lookup(sample_follows):
    """Callable follow provider backed by sample_follows."""
    edges = set(sample_follows)
    return Mock(spec=[], side_effect=lambda follower, followee: (follower, followee) in edges)


# ===== Mock Fixtures =====

@pytest.fixture
def mock_database_session():
    """Mock database session."""
    mock_session = Mock(spec=Session)
    mock_session.query.return_value = mock_session
    mock_session.filter.return_value = mock_session
    mock_session.first.return_value = None
    mock_session.all.return_value = []
    mock_session.count.return_value = 0
    mock_session.delete.return_value = None
    mock_session.commit.return_value = None
    mock_session.close.return_value = None
    mock_session.refresh.return_value = None
    return mock_session


# ===== Temporary Directory Fixtures =====

@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_data_dir_with_files(temp_data_dir, sample_ratings, sample_follows):
    """Create a temporary directory with ratings.csv and follows.csv."""
    import pandas as pd

    ratings_rows = [
        {'user_id': user_id, 'show_id': show_id, 'stars': stars}
        for user_id, ratings in sample_ratings.items()
        for show_id, stars in ratings.items()
    ]
    pd.DataFrame(ratings_rows).to_csv(temp_data_dir / 'ratings.csv', index=False)

    pd.DataFrame(sample_follows, columns=['follower_id', 'following_id']).to_csv(
        temp_data_dir / 'follows.csv', index=False
    )

    yield temp_data_dir


# ===== Configuration Fixtures =====

@pytest.fixture
def mock_config(monkeypatch):
    """Mock configuration values."""
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///:memory:')
    monkeypatch.setenv('RATING_SERVICE_URL', 'http://localhost:7074/api')
    monkeypatch.setenv('SOCIAL_SERVICE_URL', 'http://localhost:7075/api')
    monkeypatch.setenv('COMPATIBILITY_METHOD', 'hybrid')
    monkeypatch.setenv('COMPATIBILITY_MIN_OVERLAP', '3')


@pytest.fixture
def mock_local_settings(tmp_path):
    """Write a local.settings.json into a temporary project root."""
    settings = {
        "Values": {
            "DATABASE_URL": "sqlite:///:memory:",
            "COMPATIBILITY_MIN_OVERLAP": "5",
            "COMPATIBILITY_METHOD": "weighted"
        }
    }

    settings_file = tmp_path / "local.settings.json"
    with open(settings_file, 'w') as f:
        json.dump(settings, f)

    yield settings_file


# ===== Azure Functions Fixtures =====

@pytest.fixture
def mock_http_request():
    """Mock Azure Functions HttpRequest."""
    mock_req = Mock()
    mock_req.route_params = {}
    mock_req.params = {}
    mock_req.get_json.return_value = {}
    return mock_req


# ===== Database Record Fixtures =====

@pytest.fixture
def sample_rating_records(test_db_session, sample_ratings) -> List[UserRating]:
    """Create UserRating records in the test database."""
    records = [
        UserRating(user_id=user_id, show_id=show_id, stars=stars)
        for user_id, ratings in sample_ratings.items()
        for show_id, stars in ratings.items()
    ]

    test_db_session.add_all(records)
    test_db_session.commit()

    return records


@pytest.fixture
def sample_follow_records(test_db_session, sample_follows) -> List[UserFollow]:
    """Create UserFollow records in the test database."""
    records = [
        UserFollow(follower_id=follower, following_id=followee)
        for follower, followee in sample_follows
    ]

    test_db_session.add_all(records)
    test_db_session.commit()

    return records


@pytest.fixture
def sample_score_records(test_db_session) -> List[CompatibilityScore]:
    """Create CompatibilityScore records in the test database."""
    records = [
        CompatibilityScore(user_a_id='alice', user_b_id='bob', score=100, overlap_count=3),
        CompatibilityScore(user_a_id='alice', user_b_id='carol', score=42, overlap_count=4),
        CompatibilityScore(user_a_id='bob', user_b_id='carol', score=75, overlap_count=3),
    ]

    test_db_session.add_all(records)
    test_db_session.commit()

    return records


# ===== Repository Fixtures =====

@pytest.fixture
def rating_repository(test_db_session):
    """Create RatingRepository with test database session."""
    from showswap_compatibility_service.repos import RatingRepository
    return RatingRepository(test_db_session)


@pytest.fixture
def follow_repository(test_db_session):
    """Create FollowRepository with test database session."""
    from showswap_compatibility_service.repos import FollowRepository
    return FollowRepository(test_db_session)


@pytest.fixture
def compatibility_repository(test_db_session):
    """Create CompatibilityRepository with test database session."""
    from showswap_compatibility_service.repos import CompatibilityRepository
    return CompatibilityRepository(test_db_session)


# ===== Script Fixtures =====

@pytest.fixture
def mock_sys_argv(monkeypatch):
    """Mock sys.argv for script testing."""
    def _mock_argv(args):
        monkeypatch.setattr('sys.argv', args)
    return _mock_argv
