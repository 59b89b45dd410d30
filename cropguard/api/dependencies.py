"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from cropguard.infrastructure.store_client import (
    StoreClient,
    get_store_client,
)
from cropguard.services.domain.propagation_analyzer import PropagationAnalyzer
from cropguard.services.application.plot_service import PlotService
from cropguard.services.application.plant_service import PlantService


def get_propagation_analyzer() -> PropagationAnalyzer:
    """
    Dependency factory for PropagationAnalyzer.
    
    Returns:
        PropagationAnalyzer instance
    """
    return PropagationAnalyzer()


def get_plot_service(
    store: Annotated[StoreClient, Depends(get_store_client)],
    analyzer: Annotated[PropagationAnalyzer, Depends(get_propagation_analyzer)],
) -> PlotService:
    """
    Dependency factory for PlotService.
    
    Args:
        store: Plot store client (injected)
        analyzer: Propagation analyzer (injected)
        
    Returns:
        PlotService instance
    """
    return PlotService(store=store, analyzer=analyzer)


def get_plant_service(
    store: Annotated[StoreClient, Depends(get_store_client)],
) -> PlantService:
    """Dependency factory for PlantService."""
    return PlantService(store=store)


# Type aliases for cleaner route signatures
PlotServiceDep = Annotated[PlotService, Depends(get_plot_service)]
PlantServiceDep = Annotated[PlantService, Depends(get_plant_service)]
