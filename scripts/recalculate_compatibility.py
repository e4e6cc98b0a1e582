"""
Recompute stored compatibility scores for every mutual follow pair.
Run this after bulk rating imports or when scoring options change.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging
from typing import List, Optional

import pandas as pd

from showswap_compatibility_service.config import get_compatibility_settings
from showswap_compatibility_service.ml.bucketing import get_compatibility_label
from showswap_compatibility_service.services import CompatibilityService, DirectionalOptions

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def build_options(args: argparse.Namespace) -> DirectionalOptions:
    """
    Merge command line overrides into the configured options.

    Args:
        args: Parsed arguments (None values keep the configured setting)

    Returns:
        DirectionalOptions
    """
    settings = get_compatibility_settings()

    for field in ["method", "min_overlap", "hybrid_min_overlap", "hybrid_weight", "decimal_places"]:
        value = getattr(args, field)
        if value is not None:
            settings[field] = value

    return DirectionalOptions(**settings)


def summarize_scores(scores: List[dict]) -> pd.DataFrame:
    """
    Build a score table with bucket labels and log its distribution.

    Args:
        scores: Records from CompatibilityService.compute_mutual_scores()

    Returns:
        DataFrame with one row per scored pair
    """
    logger.info("=" * 70)
    logger.info("SCORE DISTRIBUTION")
    logger.info("=" * 70)

    df = pd.DataFrame(scores, columns=["user_a_id", "user_b_id", "score", "overlap_count", "method"])

    if df.empty:
        logger.info("No pairs had enough shared ratings to score")
        return df

    df["bucket"] = df["score"].apply(get_compatibility_label)

    stats = df["score"].describe()
    logger.info(f"  Pairs:  {int(stats['count'])}")
    logger.info(f"  Mean:   {stats['mean']:.2f}")
    logger.info(f"  Min:    {stats['min']:.2f}")
    logger.info(f"  Max:    {stats['max']:.2f}")
    logger.info(f"  Median: {df['score'].median():.2f}")

    for label, count in df["bucket"].value_counts().items():
        logger.info(f"  {label}: {count}")

    return df


def main(argv: Optional[List[str]] = None):
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description="Recompute compatibility scores for all mutual follow pairs"
    )
    parser.add_argument(
        "--method",
        type=str,
        choices=["weighted", "correlation", "hybrid"],
        default=None,
        help="Scoring method (default: from config)",
    )
    parser.add_argument(
        "--min-overlap", type=int, default=None, help="Minimum shared shows (default: from config)"
    )
    parser.add_argument(
        "--hybrid-min-overlap",
        type=int,
        default=None,
        help="Shared shows before correlation is blended in (default: from config)",
    )
    parser.add_argument(
        "--hybrid-weight",
        type=float,
        default=None,
        help="Correlation share in the hybrid score (default: from config)",
    )
    parser.add_argument(
        "--decimal-places", type=int, default=None, help="Score precision (default: from config)"
    )
    parser.add_argument(
        "--output-csv",
        type=str,
        default=None,
        help="Also write the computed scores to this CSV file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and summarize scores without writing them to the database",
    )

    args = parser.parse_args(argv)

    try:
        options = build_options(args)
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        sys.exit(1)

    logger.info("=" * 70)
    logger.info("COMPATIBILITY RECALCULATION")
    logger.info("=" * 70)
    logger.info(f"Method: {options.method}")
    logger.info(f"Min overlap: {options.min_overlap}")
    logger.info(f"Hybrid min overlap: {options.hybrid_min_overlap}")
    logger.info(f"Hybrid weight: {options.hybrid_weight}")
    logger.info(f"Dry run: {args.dry_run}")
    logger.info("=" * 70)

    try:
        service = CompatibilityService(options=options)

        # Step 1: Score mutual follow pairs
        scores = service.compute_mutual_scores()

        # Step 2: Summarize
        df = summarize_scores(scores)

        if args.output_csv:
            output_path = project_root / args.output_csv
            output_path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(output_path, index=False)
            logger.info(f"✓ Saved scores to {output_path}")

        # Step 3: Store
        if args.dry_run:
            logger.info("⊘ Dry run: skipping database write")
            return {"records_stored": 0, "pairs_scored": len(scores)}

        stats = service.store_scores(scores)
        stats["pairs_scored"] = len(scores)

        logger.info("\n" + "=" * 70)
        logger.info("✓ COMPATIBILITY RECALCULATION COMPLETE")
        logger.info("=" * 70)
        logger.info(f"Total records stored: {stats['records_stored']}")

        return stats

    except Exception as e:
        logger.error(f"Error during compatibility recalculation: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
