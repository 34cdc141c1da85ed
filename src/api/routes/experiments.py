"""API routes for A/B experiments.

Provides endpoints for registering experiments, checking their status and
resolving the variant a subject is assigned to.
"""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from src.api.dependencies import get_ab_testing_system
from src.api.schemas.experiments import (
    AssignmentResponse,
    ExperimentSchema,
    ExperimentStatusResponse,
    SubjectAssignmentsResponse,
    VariantSchema,
)
from src.experimentation.ab_testing import ABTestingSystem

router = APIRouter(tags=["experiments"])


@router.get("/experiments", response_model=list[ExperimentSchema])
async def list_experiments(
    active: bool | None = None,
    ab_testing: ABTestingSystem = Depends(get_ab_testing_system),
):
    """List all experiments.

    Args:
        active: Optional filter by activation flag.
    """
    experiments = ab_testing.get_all_tests()
    if active is not None:
        experiments = [e for e in experiments if e.is_active == active]

    return [ExperimentSchema.from_experiment(e) for e in experiments]


@router.get("/experiments/{experiment_id}", response_model=ExperimentSchema)
async def get_experiment(
    experiment_id: str,
    ab_testing: ABTestingSystem = Depends(get_ab_testing_system),
):
    """Get experiment definition.

    Args:
        experiment_id: ID of the experiment.
    """
    experiment = ab_testing.get_test(experiment_id)
    if experiment is None:
        logger.warning(f"Experiment '{experiment_id}' not found")
        raise HTTPException(
            status_code=404,
            detail=f"Experiment '{experiment_id}' not found"
        )

    return ExperimentSchema.from_experiment(experiment)


@router.put("/experiments/{experiment_id}", response_model=ExperimentSchema)
async def put_experiment(
    experiment_id: str,
    experiment: ExperimentSchema,
    ab_testing: ABTestingSystem = Depends(get_ab_testing_system),
):
    """Register an experiment, replacing any existing definition.

    Args:
        experiment_id: ID of the experiment.
        experiment: Full experiment definition.
    """
    if experiment.id != experiment_id:
        raise HTTPException(
            status_code=400,
            detail=f"Experiment id '{experiment.id}' does not match path '{experiment_id}'"
        )

    ab_testing.add_test(experiment.to_experiment())
    return experiment


@router.get("/experiments/{experiment_id}/active", response_model=ExperimentStatusResponse)
async def get_experiment_status(
    experiment_id: str,
    ab_testing: ABTestingSystem = Depends(get_ab_testing_system),
):
    """Check whether an experiment is active.

    Unknown experiments are reported as inactive.
    """
    return ExperimentStatusResponse(
        experiment_id=experiment_id,
        is_active=ab_testing.is_test_active(experiment_id),
    )


@router.get(
    "/experiments/{experiment_id}/assignments/{subject_id}",
    response_model=AssignmentResponse,
)
async def get_assignment(
    experiment_id: str,
    subject_id: str,
    ab_testing: ABTestingSystem = Depends(get_ab_testing_system),
):
    """Get the variant a subject is assigned to.

    A missing assignment (unknown or inactive experiment, no variants) is
    returned with ``assigned`` set to false rather than as an error.
    """
    variant = ab_testing.get_variant(experiment_id, subject_id)

    return AssignmentResponse(
        experiment_id=experiment_id,
        subject_id=subject_id,
        assigned=variant is not None,
        bucket=ab_testing.get_bucket(experiment_id, subject_id),
        variant=VariantSchema.from_variant(variant) if variant else None,
    )


@router.get("/subjects/{subject_id}/assignments", response_model=SubjectAssignmentsResponse)
async def get_subject_assignments(
    subject_id: str,
    ab_testing: ABTestingSystem = Depends(get_ab_testing_system),
):
    """Get a subject's variants across all active experiments."""
    assignments = ab_testing.get_all_assignments(subject_id)

    return SubjectAssignmentsResponse(
        subject_id=subject_id,
        assignments={
            test_id: VariantSchema.from_variant(variant)
            for test_id, variant in assignments.items()
        },
    )
