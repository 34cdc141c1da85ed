"""Experimentation module for A/B testing of dashboard features.

Components:
- ABTestingSystem: Experiment registry and deterministic variant assignment
- Experiment / Variant: Immutable experiment definitions
- hash_code / bucket_for: Bucketing of (subject, experiment) pairs
- load_experiments: Experiment definitions from JSON files
"""

from src.experimentation.ab_testing import (
    ABTestingSystem,
    Experiment,
    Variant,
    select_variant,
)
from src.experimentation.hashing import BUCKET_COUNT, bucket_for, hash_code
from src.experimentation.loader import load_experiments, register_experiments

__all__ = [
    "ABTestingSystem",
    "Experiment",
    "Variant",
    "select_variant",
    "BUCKET_COUNT",
    "bucket_for",
    "hash_code",
    "load_experiments",
    "register_experiments",
]
