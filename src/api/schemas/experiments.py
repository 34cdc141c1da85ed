"""Experiment schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.experimentation.ab_testing import Experiment, Variant


class VariantSchema(BaseModel):
    """Variant definition."""

    id: str = Field(..., description="Variant ID, unique within its experiment")
    name: str = Field(..., description="Display name")
    weight: float = Field(..., description="Relative share of the 100 buckets")
    config: dict[str, Any] = Field(default_factory=dict, description="Opaque feature config")

    @classmethod
    def from_variant(cls, variant: Variant) -> "VariantSchema":
        return cls(**variant.to_dict())

    def to_variant(self) -> Variant:
        return Variant(id=self.id, name=self.name, weight=self.weight, config=dict(self.config))


class ExperimentSchema(BaseModel):
    """Experiment definition."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "route-optimizer-v2",
                "name": "Route optimizer v2",
                "variants": [
                    {"id": "control", "name": "Current optimizer", "weight": 50, "config": {}},
                    {"id": "treatment", "name": "ML optimizer", "weight": 50, "config": {"model": "v2"}},
                ],
                "isActive": True,
                "trafficSplit": 100,
            }
        },
    )

    id: str = Field(..., description="Experiment ID")
    name: str = Field(..., description="Display name")
    variants: list[VariantSchema] = Field(default_factory=list, description="Variants in walk order")
    is_active: bool = Field(True, alias="isActive", description="Whether subjects are assigned")
    traffic_split: float = Field(100.0, alias="trafficSplit", description="Informational only")

    @classmethod
    def from_experiment(cls, experiment: Experiment) -> "ExperimentSchema":
        return cls(
            id=experiment.id,
            name=experiment.name,
            variants=[VariantSchema.from_variant(v) for v in experiment.variants],
            is_active=experiment.is_active,
            traffic_split=experiment.traffic_split,
        )

    def to_experiment(self) -> Experiment:
        return Experiment(
            id=self.id,
            name=self.name,
            variants=tuple(v.to_variant() for v in self.variants),
            is_active=self.is_active,
            traffic_split=self.traffic_split,
        )


class ExperimentStatusResponse(BaseModel):
    """Experiment activation status."""

    experiment_id: str = Field(..., description="Experiment ID")
    is_active: bool = Field(..., description="False when inactive or not registered")


class AssignmentResponse(BaseModel):
    """Variant assignment for one subject."""

    experiment_id: str = Field(..., description="Experiment ID")
    subject_id: str = Field(..., description="Subject ID")
    assigned: bool = Field(..., description="Whether a variant was assigned")
    bucket: int = Field(..., description="Bucket in [0, 100)")
    variant: VariantSchema | None = Field(None, description="Assigned variant")


class SubjectAssignmentsResponse(BaseModel):
    """Assignments for one subject across active experiments."""

    subject_id: str = Field(..., description="Subject ID")
    assignments: dict[str, VariantSchema] = Field(
        default_factory=dict, description="Experiment ID to assigned variant"
    )
