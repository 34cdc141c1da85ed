#!/usr/bin/env python3
"""Report how synthetic subjects spread over experiment variants.

Loads experiment definitions from a JSON file, assigns a range of synthetic
subject ids and compares the observed share of each variant with its
configured weight.
"""

import argparse
import math
import sys
from collections import Counter
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger

from src.config import settings
from src.experimentation.ab_testing import ABTestingSystem, Experiment
from src.experimentation.loader import load_experiments, register_experiments


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Report variant distribution for experiment definitions",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--experiments-file",
        type=str,
        default=str(settings.experiments_file or settings.config_dir / "experiments.json"),
        help="JSON file with experiment definitions",
    )
    parser.add_argument(
        "--n-subjects",
        type=int,
        default=10000,
        help="Number of synthetic subjects to assign",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default="user-",
        help="Prefix for synthetic subject ids",
    )

    return parser.parse_args()


def has_incomplete_weights(experiment: Experiment) -> bool:
    """Check whether variant weights fall short of (or exceed) the 100 buckets."""
    return bool(experiment.variants) and not math.isclose(experiment.total_weight, 100)


def report(ab_testing: ABTestingSystem, n_subjects: int, prefix: str) -> dict[str, Counter]:
    """Assign synthetic subjects and log the observed distribution.

    Returns:
        Mapping of experiment id to variant id counts.
    """
    results = {}

    for experiment in ab_testing.get_all_tests():
        logger.info("=" * 60)
        logger.info(f"{experiment.id} ({experiment.name})")
        logger.info("=" * 60)

        if not experiment.is_active:
            logger.info("Inactive, no subjects assigned")
            continue

        if has_incomplete_weights(experiment):
            logger.warning(
                f"Weights sum to {experiment.total_weight:g}, not 100: "
                f"'{experiment.variants[0].id}' absorbs the remaining buckets"
            )

        counts = Counter()
        for i in range(n_subjects):
            variant = ab_testing.get_variant(experiment.id, f"{prefix}{i}")
            counts[variant.id if variant else None] += 1

        for variant in experiment.variants:
            share = 100 * counts[variant.id] / n_subjects
            logger.info(f"  {variant.id:<20} weight={variant.weight:>6g}  observed={share:6.2f}%")
        if counts[None]:
            logger.info(f"  {'(no assignment)':<20} observed={100 * counts[None] / n_subjects:6.2f}%")

        results[experiment.id] = counts

    return results


def main():
    """Load experiments and report their distributions."""
    args = parse_args()

    experiments_path = Path(args.experiments_file)
    if not experiments_path.exists():
        logger.error(f"Experiments file not found: {experiments_path}")
        return

    ab_testing = ABTestingSystem()
    register_experiments(ab_testing, load_experiments(experiments_path))

    report(ab_testing, n_subjects=args.n_subjects, prefix=args.prefix)


if __name__ == "__main__":
    main()
