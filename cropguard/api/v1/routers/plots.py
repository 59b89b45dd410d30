"""
API router for plot endpoints.
"""
from fastapi import APIRouter, Path, Request, status
from typing import Annotated

from cropguard.api.dependencies import PlantServiceDep, PlotServiceDep
from cropguard.api.limiter import DEFAULT_RATE_LIMIT, limiter
from cropguard.api.v1.errors import COMMON_RESPONSES, SERVICE_ERRORS, to_http_exception
from cropguard.api.v1.models.requests import CreatePlantRequest
from cropguard.api.v1.models.responses import (
    DiseaseCountItem,
    GridCell,
    PlotGridResponse,
    PlotStatsResponse,
    PropagationAlertsResponse,
)
from cropguard.domain.models import GridPosition, Plant, PlantCreate


router = APIRouter(
    prefix="/plots",
    tags=["plots"],
)

PlotId = Annotated[str, Path(description="Unique identifier for the plot")]


@router.get(
    "/{plot_id}/propagation-alerts",
    response_model=PropagationAlertsResponse,
    summary="Analyze disease propagation risk",
    description="""
    Analyze the spread risk of every disease present in a plot.
    
    This endpoint:
    1. Fetches the plot and its plants from the store
    2. Places plants on the plot grid (out-of-bounds plants are ignored)
    3. Groups diseased plants by disease
    4. Classifies each group by its share of the plot's plants
    5. Counts healthy plants adjacent (8 directions) to infected cells
    6. Returns alerts sorted critical, high, medium, low
    """,
    responses={
        404: {"description": "Plot not found"},
        **COMMON_RESPONSES,
    }
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def get_propagation_alerts(
    request: Request,
    plot_id: PlotId,
    plot_service: PlotServiceDep,
) -> PropagationAlertsResponse:
    """
    Get propagation alerts for a plot.
    
    Args:
        request: Incoming request (used by the rate limiter)
        plot_id: Unique identifier for the plot
        plot_service: Plot service (injected dependency)
        
    Returns:
        PropagationAlertsResponse with ranked alerts
        
    Raises:
        HTTPException: If plot is not found or the store fails
    """
    try:
        # Delegate to service layer (no business logic here)
        alerts = await plot_service.analyze_propagation(plot_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)
    
    return PropagationAlertsResponse(
        plot_id=plot_id,
        alert_count=len(alerts),
        alerts=alerts,
    )


@router.get(
    "/{plot_id}/grid",
    response_model=PlotGridResponse,
    summary="Get the plot grid",
    responses={
        404: {"description": "Plot not found"},
        **COMMON_RESPONSES,
    }
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def get_plot_grid(
    request: Request,
    plot_id: PlotId,
    plot_service: PlotServiceDep,
) -> PlotGridResponse:
    try:
        grid = await plot_service.get_plot_grid(plot_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)
    
    cells = [
        [
            GridCell(plant_id=plant.id, name=plant.name, status=plant.status_kind)
            if plant is not None else None
            for plant in row
        ]
        for row in grid.to_matrix()
    ]
    return PlotGridResponse(
        plot_id=plot_id,
        rows=grid.rows,
        columns=grid.columns,
        plant_count=len(grid.plants),
        cells=cells,
        excluded_plant_ids=grid.excluded_plant_ids,
    )


@router.get(
    "/{plot_id}/stats",
    response_model=PlotStatsResponse,
    summary="Get plant counts for a plot",
    responses={
        404: {"description": "Plot not found"},
        **COMMON_RESPONSES,
    }
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def get_plot_stats(
    request: Request,
    plot_id: PlotId,
    plot_service: PlotServiceDep,
) -> PlotStatsResponse:
    try:
        stats = await plot_service.get_plot_stats(plot_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)
    
    return PlotStatsResponse(
        plot_id=plot_id,
        total=stats.total,
        by_status=stats.by_status,
        diseased=[DiseaseCountItem(name=d.name, count=d.count) for d in stats.diseased],
    )


@router.post(
    "/{plot_id}/plants",
    response_model=Plant,
    status_code=status.HTTP_201_CREATED,
    summary="Place a new plant in a plot",
    responses={
        400: {"description": "Position outside the plot"},
        404: {"description": "Plot not found"},
        409: {"description": "Position already occupied"},
        **COMMON_RESPONSES,
    }
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def create_plant(
    request: Request,
    plot_id: PlotId,
    body: CreatePlantRequest,
    plant_service: PlantServiceDep,
) -> Plant:
    data = PlantCreate(
        plot_id=plot_id,
        name=body.name,
        crop_type=body.crop_type,
        position=(
            GridPosition(row=body.position.row, column=body.position.column)
            if body.position else None
        ),
        planted_date=body.planted_date,
    )
    try:
        return await plant_service.create_plant(data)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)
