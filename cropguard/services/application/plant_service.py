"""
Application service: plant placement and status changes.
"""
import logging
from typing import Optional

from cropguard.domain import plant_lifecycle
from cropguard.domain.errors import PositionOccupiedError, PositionOutOfBoundsError
from cropguard.domain.models import (
    DiseaseRef,
    Plant,
    PlantCreate,
    PlantRecord,
    RecordType,
    StatusKind,
)
from cropguard.infrastructure.store_client import StoreClient

logger = logging.getLogger(__name__)


class PlantService:
    """
    Application service for plant writes.
    
    Enforces the one-plant-per-cell placement rule before anything reaches
    the store, and drives status changes through the plant lifecycle.
    """
    
    def __init__(self, store: StoreClient):
        self.store = store
    
    async def create_plant(self, data: PlantCreate) -> Plant:
        """
        Create a plant, validating its position against the plot.
        
        Raises:
            PlotNotFoundError: If the plot does not exist
            PositionOutOfBoundsError: If the position is outside the plot
            PositionOccupiedError: If another plant already holds the cell
        """
        plot = await self.store.get_plot_by_id(data.plot_id)
        
        if data.position is not None:
            row, column = data.position.row, data.position.column
            if not plot.contains(row, column):
                raise PositionOutOfBoundsError(plot.id, row, column, plot.rows, plot.columns)
            
            existing = await self.store.find_plant_by_plot_id_and_position(plot.id, row, column)
            if existing is not None:
                raise PositionOccupiedError(plot.id, row, column)
        
        plant = await self.store.create_plant(data)
        logger.info(f"Created plant {plant.id} in plot {plot.id} at {data.position}")
        return plant
    
    async def diagnose_plant(self, plant_id: str, disease: DiseaseRef) -> Plant:
        """Attach a diagnosed disease to a plant."""
        plant = await self.store.get_plant_by_id(plant_id)
        return await self.store.update_plant(plant_lifecycle.diagnose(plant, disease))
    
    async def add_treatment(
        self,
        plant_id: str,
        user_id: str,
        treatment: str,
        image: Optional[str] = None,
    ) -> PlantRecord:
        """
        Record a treatment; a Diseased plant moves to Recovering.
        """
        plant = await self.store.get_plant_by_id(plant_id)
        if plant.status_kind is StatusKind.DISEASED:
            await self.store.update_plant(plant_lifecycle.start_recovery(plant))
        
        return await self.store.create_plant_record(PlantRecord(
            plant_id=plant_id,
            user_id=user_id,
            type=RecordType.TREATMENT,
            note=treatment,
            image=image,
        ))
    
    async def update_status(
        self,
        plant_id: str,
        kind: StatusKind,
        disease: Optional[DiseaseRef] = None,
    ) -> Plant:
        """
        Apply a manual status update.
        
        Raises:
            PlantNotFoundError: If the plant does not exist
            InvalidStatusTransition: If the lifecycle forbids the change
        """
        plant = await self.store.get_plant_by_id(plant_id)
        updated = plant_lifecycle.apply_status_update(plant, kind, disease)
        return await self.store.update_plant(updated)
    
    async def delete_plant(self, plant_id: str) -> None:
        await self.store.delete_plant(plant_id)
