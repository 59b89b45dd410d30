"""
API router for plant status endpoints.
"""
from fastapi import APIRouter, Path, Request, Response, status
from typing import Annotated

from cropguard.api.dependencies import PlantServiceDep
from cropguard.api.limiter import DEFAULT_RATE_LIMIT, limiter
from cropguard.api.v1.errors import COMMON_RESPONSES, SERVICE_ERRORS, to_http_exception
from cropguard.api.v1.models.requests import (
    DiagnosisRequest,
    StatusUpdateRequest,
    TreatmentRequest,
)
from cropguard.domain.models import Plant, PlantRecord


router = APIRouter(
    prefix="/plants",
    tags=["plants"],
)

PlantId = Annotated[str, Path(description="Unique identifier for the plant")]

PLANT_RESPONSES = {
    404: {"description": "Plant not found"},
    409: {"description": "Status change not allowed"},
    **COMMON_RESPONSES,
}


@router.post(
    "/{plant_id}/diagnosis",
    response_model=Plant,
    summary="Attach a diagnosed disease to a plant",
    responses=PLANT_RESPONSES,
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def diagnose_plant(
    request: Request,
    plant_id: PlantId,
    body: DiagnosisRequest,
    plant_service: PlantServiceDep,
) -> Plant:
    try:
        return await plant_service.diagnose_plant(plant_id, body.to_disease())
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)


@router.post(
    "/{plant_id}/treatments",
    response_model=PlantRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Record a treatment",
    description="Records a treatment. A Diseased plant moves to Recovering.",
    responses=PLANT_RESPONSES,
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def add_treatment(
    request: Request,
    plant_id: PlantId,
    body: TreatmentRequest,
    plant_service: PlantServiceDep,
) -> PlantRecord:
    try:
        return await plant_service.add_treatment(
            plant_id, body.user_id, body.treatment, body.image
        )
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)


@router.put(
    "/{plant_id}/status",
    response_model=Plant,
    summary="Change a plant's status",
    responses=PLANT_RESPONSES,
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def update_plant_status(
    request: Request,
    plant_id: PlantId,
    body: StatusUpdateRequest,
    plant_service: PlantServiceDep,
) -> Plant:
    try:
        return await plant_service.update_status(plant_id, body.status, body.disease)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)


@router.delete(
    "/{plant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a plant and its records",
    responses=COMMON_RESPONSES,
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def delete_plant(
    request: Request,
    plant_id: PlantId,
    plant_service: PlantServiceDep,
) -> Response:
    try:
        await plant_service.delete_plant(plant_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
