"""
Plant status state machine.

Transitions are driven by diagnoses, treatments and manual updates. Every
function returns an updated copy; the input plant is never mutated.
"""
from datetime import datetime, timezone
from typing import Optional

from cropguard.domain.errors import InvalidStatusTransition
from cropguard.domain.models import (
    DeadStatus,
    DiseasedStatus,
    DiseaseRef,
    HealthyStatus,
    Plant,
    RecoveringStatus,
    StatusKind,
    UnderObservationStatus,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ensure_alive(plant: Plant, target: StatusKind) -> None:
    if plant.status_kind is StatusKind.DEAD:
        raise InvalidStatusTransition(
            f"Plant '{plant.id}' is dead and cannot become {target.value}"
        )


def diagnose(plant: Plant, disease: DiseaseRef, at: Optional[datetime] = None) -> Plant:
    """Attach a diagnosed disease, moving the plant to Diseased."""
    _ensure_alive(plant, StatusKind.DISEASED)
    at = at or _now()
    return plant.model_copy(update={
        "status": DiseasedStatus(disease=disease, diagnosed_at=at),
        "last_diagnosis_date": at,
        "last_updated": at,
    })


def start_recovery(plant: Plant, at: Optional[datetime] = None) -> Plant:
    """
    Move a Diseased plant to Recovering after a treatment.
    
    Plants in any other state are returned unchanged.
    """
    if plant.status_kind is not StatusKind.DISEASED:
        return plant
    return plant.model_copy(update={
        "status": RecoveringStatus(disease=plant.disease),
        "last_updated": at or _now(),
    })


def mark_healthy(plant: Plant, at: Optional[datetime] = None) -> Plant:
    _ensure_alive(plant, StatusKind.HEALTHY)
    return plant.model_copy(update={
        "status": HealthyStatus(),
        "last_updated": at or _now(),
    })


def mark_under_observation(plant: Plant, at: Optional[datetime] = None) -> Plant:
    _ensure_alive(plant, StatusKind.UNDER_OBSERVATION)
    return plant.model_copy(update={
        "status": UnderObservationStatus(),
        "last_updated": at or _now(),
    })


def mark_dead(plant: Plant, at: Optional[datetime] = None) -> Plant:
    if plant.status_kind is StatusKind.DEAD:
        return plant
    return plant.model_copy(update={
        "status": DeadStatus(),
        "last_updated": at or _now(),
    })


def apply_status_update(
    plant: Plant,
    kind: StatusKind,
    disease: Optional[DiseaseRef] = None,
    at: Optional[datetime] = None,
) -> Plant:
    """
    Apply a manual status update.
    
    Args:
        plant: Plant to update
        kind: Target status
        disease: Disease to attach (required for Diseased, optional for Recovering)
        at: Timestamp of the change (defaults to now)
        
    Returns:
        Updated plant copy
        
    Raises:
        InvalidStatusTransition: If the plant is dead or a Diseased update
            carries no disease
    """
    if kind is StatusKind.DISEASED:
        if disease is None:
            raise InvalidStatusTransition("A Diseased status requires a disease reference")
        return diagnose(plant, disease, at)
    if kind is StatusKind.RECOVERING:
        _ensure_alive(plant, kind)
        return plant.model_copy(update={
            "status": RecoveringStatus(disease=disease or plant.disease),
            "last_updated": at or _now(),
        })
    if kind is StatusKind.HEALTHY:
        return mark_healthy(plant, at)
    if kind is StatusKind.UNDER_OBSERVATION:
        return mark_under_observation(plant, at)
    return mark_dead(plant, at)
