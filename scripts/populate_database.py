"""
Populate the database with user ratings and follows.
This script loads exported CSV files and stores them for the compatibility API.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import logging
import pandas as pd
import numpy as np
import argparse

from showswap_compatibility_service.models.database import SessionLocal
from showswap_compatibility_service.repos import FollowRepository, RatingRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def clean_dataframe_for_db(df: pd.DataFrame) -> pd.DataFrame:
    """
    Clean DataFrame by replacing NaN/NA values with None for database compatibility.

    Args:
        df: Input DataFrame

    Returns:
        Cleaned DataFrame
    """
    # Replace various types of missing values with None
    df = df.replace({np.nan: None, pd.NA: None})
    df = df.where(pd.notnull(df), None)

    return df


def load_ratings(input_dir: Path, rating_min: int = 1, rating_max: int = 5) -> pd.DataFrame:
    """
    Load ratings.csv (user_id, show_id, stars), dropping unusable rows.

    Args:
        input_dir: Directory containing the CSV exports
        rating_min: Lowest valid star rating
        rating_max: Highest valid star rating

    Returns:
        DataFrame of valid ratings
    """
    ratings_path = input_dir / 'ratings.csv'

    if not ratings_path.exists():
        raise FileNotFoundError(f"Ratings file not found: {ratings_path}")

    ratings_df = pd.read_csv(ratings_path, dtype={'user_id': str, 'show_id': str})
    logger.info(f"Loaded {len(ratings_df)} ratings from {ratings_path}")

    stars = pd.to_numeric(ratings_df['stars'], errors='coerce')
    valid = stars.notna() & stars.between(rating_min, rating_max)
    valid &= ratings_df['user_id'].notna() & ratings_df['show_id'].notna()

    dropped = int((~valid).sum())
    if dropped:
        logger.warning(f"Dropping {dropped} ratings outside {rating_min}-{rating_max} or incomplete")

    ratings_df = ratings_df[valid].copy()
    ratings_df['stars'] = stars[valid].astype(int)

    # Last rating wins when a user rated a show twice
    ratings_df = ratings_df.drop_duplicates(subset=['user_id', 'show_id'], keep='last')

    return ratings_df


def load_follows(input_dir: Path) -> pd.DataFrame:
    """
    Load follows.csv (follower_id, following_id), dropping self-follows.

    Args:
        input_dir: Directory containing the CSV exports

    Returns:
        DataFrame of follow edges
    """
    follows_path = input_dir / 'follows.csv'

    if not follows_path.exists():
        raise FileNotFoundError(f"Follows file not found: {follows_path}")

    follows_df = pd.read_csv(follows_path, dtype=str)
    logger.info(f"Loaded {len(follows_df)} follows from {follows_path}")

    follows_df = clean_dataframe_for_db(follows_df)
    follows_df = follows_df.dropna(subset=['follower_id', 'following_id'])
    follows_df = follows_df[follows_df['follower_id'] != follows_df['following_id']]

    return follows_df


def populate(input_dir: Path) -> dict:
    """
    Replace stored ratings and follows with the CSV contents.

    Returns:
        Dict with counts
    """
    logger.info("=" * 70)
    logger.info("POPULATING RATINGS AND FOLLOWS")
    logger.info("=" * 70)

    ratings_df = load_ratings(input_dir)
    follows_df = load_follows(input_dir)

    db = SessionLocal()
    try:
        rating_count = RatingRepository(db).bulk_store_ratings(ratings_df.to_dict('records'))
        follow_count = FollowRepository(db).bulk_store_follows(
            list(zip(follows_df['follower_id'], follows_df['following_id']))
        )
        mutual_pairs = len(FollowRepository(db).get_mutual_pairs())
    finally:
        db.close()

    logger.info(f"✓ Stored {rating_count} ratings and {follow_count} follows")
    logger.info(f"  Mutual follow pairs: {mutual_pairs}")

    return {
        'ratings': rating_count,
        'follows': follow_count,
        'mutual_pairs': mutual_pairs
    }


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Load ratings and follows into the compatibility database'
    )
    parser.add_argument(
        '--input-dir',
        type=str,
        default='data/raw',
        help='Directory containing ratings.csv and follows.csv (default: data/raw)'
    )

    args = parser.parse_args()
    input_dir = project_root / args.input_dir

    try:
        return populate(input_dir)
    except Exception as e:
        logger.error(f"Error populating database: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
