"""Loading experiment definitions from JSON files."""

import json
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from src.experimentation.ab_testing import ABTestingSystem, Experiment


def load_experiments(path: Path | str) -> list[Experiment]:
    """Load experiment definitions from a JSON file.

    The file holds either a list of definitions or an object with an
    ``"experiments"`` list.

    Args:
        path: Path to JSON file.

    Returns:
        List of experiments in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or a definition is unusable.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Experiments file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in experiments file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("experiments", [])
    if not isinstance(data, list):
        raise ValueError(f"Experiments file {path} must contain a list of experiments")

    experiments = []
    for i, definition in enumerate(data):
        try:
            experiments.append(Experiment.from_dict(definition))
        except ValueError as e:
            raise ValueError(f"Invalid experiment #{i} in {path}: {e}") from e

    logger.info(f"Loaded {len(experiments)} experiments from {path}")
    return experiments


def register_experiments(
    system: ABTestingSystem,
    experiments: Iterable[Experiment],
) -> int:
    """Register experiments with a testing system.

    Args:
        system: Target registry.
        experiments: Experiments to register.

    Returns:
        Number of experiments registered.
    """
    count = 0
    for experiment in experiments:
        system.add_test(experiment)
        count += 1
    return count
