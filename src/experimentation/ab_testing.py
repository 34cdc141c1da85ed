"""A/B Testing system for fleet dashboard experiments.

Provides a registry of experiment definitions and stable, storage-free
subject-to-variant assignment.
"""

import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from loguru import logger

from src.experimentation.hashing import bucket_for


@dataclass(frozen=True)
class Variant:
    """One arm of an experiment."""

    id: str
    name: str
    weight: float  # Relative share in [0, 100) bucket space
    config: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Read-only copy; the caller keeps no handle on the stored config
        object.__setattr__(self, "config", MappingProxyType(dict(self.config)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "weight": self.weight,
            "config": dict(self.config),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Variant":
        """Build a variant from plain data.

        Raises:
            ValueError: If data is not a mapping, has no id, a non-numeric
                weight or a config that is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Variant definition must be a mapping, got {type(data).__name__}")
        if "id" not in data:
            raise ValueError("Variant definition is missing 'id'")

        try:
            weight = float(data.get("weight", 0))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Variant '{data['id']}' has a non-numeric weight") from e

        config = data.get("config") or {}
        if not isinstance(config, Mapping):
            raise ValueError(f"Variant '{data['id']}' config must be a mapping")

        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            weight=weight,
            config=config,
        )


@dataclass(frozen=True)
class Experiment:
    """Experiment definition.

    Instances are immutable: replacing a definition means registering a new
    ``Experiment`` under the same id. Weights are not validated and need
    not sum to 100 (see ``select_variant`` for what happens when they don't).
    ``traffic_split`` is carried for display only and does not gate assignment.
    """

    id: str
    name: str
    variants: tuple[Variant, ...] = ()
    is_active: bool = True
    traffic_split: float = 100.0

    def __post_init__(self):
        # Callers may hand in a list; freeze it so readers see a stable snapshot
        object.__setattr__(self, "variants", tuple(self.variants))

    def get_variant(self, variant_id: str) -> Variant | None:
        """Get variant by id."""
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    @property
    def total_weight(self) -> float:
        """Sum of all variant weights."""
        return sum(v.weight for v in self.variants)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "variants": [v.to_dict() for v in self.variants],
            "isActive": self.is_active,
            "trafficSplit": self.traffic_split,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Experiment":
        """Build an experiment from plain data.

        Accepts ``isActive``/``trafficSplit`` as well as ``is_active``/``traffic_split``.

        Args:
            data: Experiment definition.

        Returns:
            Experiment.

        Raises:
            ValueError: If the definition is not a mapping, has no id, a
                non-boolean activation flag or a non-numeric traffic split.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Experiment definition must be a mapping, got {type(data).__name__}")
        if "id" not in data:
            raise ValueError("Experiment definition is missing 'id'")

        is_active = data.get("isActive", data.get("is_active", True))
        if not isinstance(is_active, bool):
            # "false" would otherwise turn an experiment on
            raise ValueError(
                f"Experiment '{data['id']}' isActive must be true or false, got {is_active!r}"
            )

        try:
            traffic_split = float(data.get("trafficSplit", data.get("traffic_split", 100.0)))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Experiment '{data['id']}' has a non-numeric trafficSplit") from e

        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            variants=tuple(
                v if isinstance(v, Variant) else Variant.from_dict(v)
                for v in data.get("variants") or ()
            ),
            is_active=is_active,
            traffic_split=traffic_split,
        )


def select_variant(variants: Sequence[Variant], bucket: int) -> Variant | None:
    """Walk cumulative weights and pick the variant owning a bucket.

    If the bucket lies at or beyond the total weight, the first variant is
    returned. An experiment whose weights don't add up to 100 therefore
    routes all of the missing share to its first variant.

    Args:
        variants: Variants in their configured order.
        bucket: Bucket value in range [0, 100).

    Returns:
        Selected variant, or None if there are no variants.
    """
    if not variants:
        return None

    cumulative = 0.0
    for variant in variants:
        cumulative += variant.weight
        if bucket < cumulative:
            return variant

    return variants[0]


class ABTestingSystem:
    """Registry of experiments with deterministic variant assignment.

    Assignment is a pure function of the stored definition and the
    (subject, experiment) pair; nothing is cached per subject. Definitions
    are swapped atomically on registration, so a reader always sees either
    the old or the new experiment in full.

    Usage:
        ab_testing = ABTestingSystem()
        ab_testing.add_test(
            Experiment(
                id="route-optimizer-v2",
                name="Route optimizer v2",
                variants=[
                    Variant("control", "Current optimizer", 50),
                    Variant("treatment", "ML optimizer", 50, {"model": "v2"}),
                ],
            )
        )

        variant = ab_testing.get_variant("route-optimizer-v2", user_id)
        if variant is not None:
            model = variant.config.get("model")
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._tests: dict[str, Experiment] = {}
        self._lock = threading.RLock()

    def add_test(self, experiment: Experiment) -> None:
        """Register an experiment, replacing any definition with the same id.

        Args:
            experiment: Experiment definition.
        """
        with self._lock:
            replaced = experiment.id in self._tests
            self._tests[experiment.id] = experiment

        action = "Replaced" if replaced else "Added"
        logger.info(
            f"{action} experiment: {experiment.id} "
            f"({len(experiment.variants)} variants, active={experiment.is_active})"
        )

    def get_test(self, test_id: str) -> Experiment | None:
        """Get experiment definition by id."""
        with self._lock:
            return self._tests.get(test_id)

    def get_variant(self, test_id: str, subject_id: str) -> Variant | None:
        """Get the variant a subject is assigned to.

        Args:
            test_id: Experiment id.
            subject_id: Subject id (usually a user id).

        Returns:
            Assigned variant, or None if the experiment is unknown,
            inactive or has no variants.
        """
        experiment = self.get_test(test_id)
        if experiment is None:
            logger.debug(f"No assignment: experiment '{test_id}' not found")
            return None

        if not experiment.is_active:
            logger.debug(f"No assignment: experiment '{test_id}' is not active")
            return None

        if not experiment.variants:
            logger.debug(f"No assignment: experiment '{test_id}' has no variants")
            return None

        bucket = bucket_for(test_id, subject_id)
        return select_variant(experiment.variants, bucket)

    def get_bucket(self, test_id: str, subject_id: str) -> int:
        """Get the bucket a subject falls in for an experiment id."""
        return bucket_for(test_id, subject_id)

    def get_all_assignments(self, subject_id: str) -> dict[str, Variant]:
        """Get assignments for a subject across all active experiments.

        Args:
            subject_id: Subject id.

        Returns:
            Mapping of experiment id to assigned variant.
        """
        assignments = {}
        for experiment in self.get_all_tests():
            variant = self.get_variant(experiment.id, subject_id)
            if variant is not None:
                assignments[experiment.id] = variant
        return assignments

    def is_test_active(self, test_id: str) -> bool:
        """Check whether an experiment exists and is active."""
        experiment = self.get_test(test_id)
        return experiment.is_active if experiment else False

    def get_all_tests(self) -> list[Experiment]:
        """List all experiments in registration order."""
        with self._lock:
            return list(self._tests.values())

    def export_config(self) -> dict[str, dict[str, Any]]:
        """Export all experiment definitions.

        Returns:
            Dictionary of experiment id to definition.
        """
        return {exp.id: exp.to_dict() for exp in self.get_all_tests()}

    def import_config(self, config: Mapping[str, Mapping[str, Any]]) -> int:
        """Import experiment definitions, replacing existing ids.

        Args:
            config: Dictionary of experiment id to definition. A definition
                without an ``id`` takes its key.

        Returns:
            Number of experiments imported.
        """
        experiments = [
            Experiment.from_dict({"id": test_id, **definition})
            for test_id, definition in config.items()
        ]
        for experiment in experiments:
            self.add_test(experiment)

        logger.info(f"Imported {len(experiments)} experiments")
        return len(experiments)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tests)

    def __contains__(self, test_id: object) -> bool:
        with self._lock:
            return test_id in self._tests
