"""
API router for farm-wide endpoints.
"""
from fastapi import APIRouter, Path, Request
from typing import Annotated

from cropguard.api.dependencies import PlotServiceDep
from cropguard.api.limiter import DEFAULT_RATE_LIMIT, limiter
from cropguard.api.v1.errors import COMMON_RESPONSES, SERVICE_ERRORS, to_http_exception
from cropguard.api.v1.models.responses import FarmPropagationResponse, PlotAlerts


router = APIRouter(
    prefix="/farms",
    tags=["farms"],
)


@router.get(
    "/{farm_id}/propagation-alerts",
    response_model=FarmPropagationResponse,
    summary="Analyze disease propagation for every plot of a farm",
    description="""
    Runs the plot propagation analysis for each plot of the farm concurrently
    and returns the alerts grouped by plot.
    """,
    responses=COMMON_RESPONSES,
)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def get_farm_propagation_alerts(
    request: Request,
    farm_id: Annotated[str, Path(description="Unique identifier for the farm")],
    plot_service: PlotServiceDep,
) -> FarmPropagationResponse:
    try:
        by_plot = await plot_service.analyze_farm(farm_id)
    except SERVICE_ERRORS as e:
        raise to_http_exception(e)
    
    return FarmPropagationResponse(
        farm_id=farm_id,
        plots=[
            PlotAlerts(plot_id=plot_id, alerts=alerts)
            for plot_id, alerts in by_plot.items()
        ],
    )
