"""Unit tests for showswap_compatibility_service.repos.rating_repository."""

from showswap_compatibility_service.repos.rating_repository import RatingRepository


class TestRatingRepositoryInit:
    """Tests for RatingRepository initialization."""

    def test_init_with_session(self, test_db_session):
        """Test initialization with database session."""
        # Act
        repo = RatingRepository(test_db_session)

        # Assert
        assert repo.db == test_db_session


class TestGetRatings:
    """Tests for get_ratings method."""

    def test_get_ratings_returns_map(self, rating_repository, sample_rating_records):
        """Test a user's ratings come back as a show -> stars map."""
        # Act
        ratings = rating_repository.get_ratings('alice')

        # Assert
        assert ratings == {'severance': 5, 'the-bear': 4, 'succession': 3, 'fleabag': 5}

    def test_get_ratings_unknown_user(self, rating_repository, sample_rating_records):
        """Test a user with no ratings."""
        assert rating_repository.get_ratings('nobody') == {}


class TestBulkStoreRatings:
    """Tests for bulk_store_ratings method."""

    def test_bulk_store_replaces_existing(self, rating_repository, sample_rating_records):
        """Test that a bulk load clears previous ratings."""
        # Act
        count = rating_repository.bulk_store_ratings([
            {'user_id': 'erin', 'show_id': 'severance', 'stars': 3},
            {'user_id': 'erin', 'show_id': 'the-bear', 'stars': 5},
        ])

        # Assert
        assert count == 2
        assert rating_repository.count_ratings() == 2
        assert rating_repository.get_ratings('alice') == {}

    def test_bulk_store_casts_values(self, rating_repository):
        """Test that IDs are stored as strings and stars as ints."""
        # Act
        rating_repository.bulk_store_ratings([{'user_id': 7, 'show_id': 101, 'stars': 4.0}])

        # Assert
        assert rating_repository.get_ratings('7') == {'101': 4}

    def test_bulk_store_in_batches(self, rating_repository):
        """Test inserting more rows than one batch."""
        # Arrange
        ratings = [{'user_id': 'u', 'show_id': f's{i}', 'stars': 1 + i % 5} for i in range(25)]

        # Act
        count = rating_repository.bulk_store_ratings(ratings, batch_size=10)

        # Assert
        assert count == 25
        assert rating_repository.count_ratings() == 25


class TestCountRatings:
    """Tests for count_ratings method."""

    def test_count_ratings(self, rating_repository, sample_rating_records):
        """Test counting all ratings."""
        assert rating_repository.count_ratings() == 14
