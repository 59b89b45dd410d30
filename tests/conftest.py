"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Plant and plot factories
- Sample plots
- Mock store client
- FastAPI test client
"""
import pytest
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from cropguard.main import app
from cropguard.domain.errors import PlotNotFoundError
from cropguard.domain.models import (
    DeadStatus,
    DiseasedStatus,
    DiseaseRef,
    GridPosition,
    HealthyStatus,
    Plant,
    Plot,
    RecoveringStatus,
    UnderObservationStatus,
)
from cropguard.infrastructure.store_client import StoreClient


BLIGHT = DiseaseRef(disease_id="d_blight", disease_name="Late blight")
MILDEW = DiseaseRef(disease_id="d_mildew", disease_name="Powdery mildew")

FIXED_TIME = datetime(2024, 6, 10, 8, 30, tzinfo=timezone.utc)


def make_plant(
    plant_id: str,
    row: Optional[int] = None,
    column: Optional[int] = None,
    status: str = "Healthy",
    disease: Optional[DiseaseRef] = None,
    plot_id: str = "plot_1",
) -> Plant:
    """Build a plant; position is set only when both row and column are given."""
    statuses = {
        "Healthy": lambda: HealthyStatus(),
        "UnderObservation": lambda: UnderObservationStatus(),
        "Diseased": lambda: DiseasedStatus(disease=disease),
        "Recovering": lambda: RecoveringStatus(disease=disease),
        "Dead": lambda: DeadStatus(),
    }
    position = GridPosition(row=row, column=column) if row is not None and column is not None else None
    return Plant(
        id=plant_id,
        plot_id=plot_id,
        name=f"Plant {plant_id}",
        position=position,
        status=statuses[status](),
    )


def make_plot(rows: int = 3, columns: int = 3, plot_id: str = "plot_1", farm_id: str = "farm_1") -> Plot:
    return Plot(id=plot_id, farm_id=farm_id, name=f"Plot {plot_id}", rows=rows, columns=columns)


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def plot_3x3() -> Plot:
    return make_plot(3, 3)


@pytest.fixture
def corner_outbreak_plants() -> list[Plant]:
    """
    3x3 plot with eight plants, one diseased in the corner.
    
        D H H
        H . H
        H H H
    """
    plants = [make_plant("p00", 0, 0, "Diseased", BLIGHT)]
    for row in range(3):
        for column in range(3):
            if (row, column) in [(0, 0), (1, 1)]:
                continue
            plants.append(make_plant(f"p{row}{column}", row, column))
    return plants


# ============================================================
# Mock Store Fixtures
# ============================================================

@pytest.fixture
def mock_store():
    """
    Create a mock store client serving an in-memory set of plots.
    
    Populate ``mock_store.plots`` (id -> Plot) and ``mock_store.plants``
    (plot id -> list of Plant) in the test.
    """
    store = AsyncMock(spec=StoreClient)
    store.plots = {}
    store.plants = {}
    
    async def get_plot_by_id(plot_id):
        if plot_id not in store.plots:
            raise PlotNotFoundError(plot_id)
        return store.plots[plot_id]
    
    async def find_plants_by_plot_id(plot_id):
        return list(store.plants.get(plot_id, []))
    
    async def find_plots_by_farm_id(farm_id):
        return [plot for plot in store.plots.values() if plot.farm_id == farm_id]
    
    async def find_plant_by_plot_id_and_position(plot_id, row, column):
        for plant in store.plants.get(plot_id, []):
            if plant.position and (plant.position.row, plant.position.column) == (row, column):
                return plant
        return None
    
    store.get_plot_by_id.side_effect = get_plot_by_id
    store.find_plants_by_plot_id.side_effect = find_plants_by_plot_id
    store.find_plots_by_farm_id.side_effect = find_plots_by_farm_id
    store.find_plant_by_plot_id_and_position.side_effect = find_plant_by_plot_id_and_position
    return store


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
