"""Pytest fixtures for tests."""

import json

import pytest

from src.experimentation.ab_testing import ABTestingSystem, Experiment, Variant


@pytest.fixture
def even_experiment() -> Experiment:
    """Active 50/50 experiment."""
    return Experiment(
        id="exp-1",
        name="Even split",
        variants=[
            Variant("A", "Control", 50),
            Variant("B", "Treatment", 50, {"color": "blue"}),
        ],
    )


@pytest.fixture
def weighted_experiment() -> Experiment:
    """Active 20/30/50 experiment."""
    return Experiment(
        id="exp-weighted",
        name="Weighted split",
        variants=[
            Variant("small", "Small", 20),
            Variant("medium", "Medium", 30),
            Variant("large", "Large", 50),
        ],
    )


@pytest.fixture
def ab_testing(even_experiment, weighted_experiment) -> ABTestingSystem:
    """Registry with an active and an inactive experiment registered."""
    system = ABTestingSystem()
    system.add_test(even_experiment)
    system.add_test(weighted_experiment)
    system.add_test(
        Experiment(
            id="exp-off",
            name="Switched off",
            variants=[Variant("A", "Control", 50), Variant("B", "Treatment", 50)],
            is_active=False,
        )
    )
    return system


@pytest.fixture
def experiment_definitions() -> list[dict]:
    """Experiment definitions as they appear in configuration files."""
    return [
        {
            "id": "route-optimizer-v2",
            "name": "Route optimizer v2",
            "isActive": True,
            "trafficSplit": 100,
            "variants": [
                {"id": "control", "name": "Current", "weight": 50, "config": {"model": "heuristic"}},
                {"id": "treatment", "name": "ML", "weight": 50, "config": {"model": "ml-v2"}},
            ],
        },
        {
            "id": "delivery-eta-banner",
            "name": "Delivery ETA banner",
            "isActive": False,
            "trafficSplit": 50,
            "variants": [
                {"id": "off", "name": "No banner", "weight": 50},
                {"id": "on", "name": "Banner", "weight": 50},
            ],
        },
    ]


@pytest.fixture
def experiments_file(tmp_path, experiment_definitions):
    """JSON file holding the experiment definitions."""
    path = tmp_path / "experiments.json"
    path.write_text(json.dumps({"experiments": experiment_definitions}))
    return path
