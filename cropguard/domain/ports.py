"""
Collaborator contracts the plot services depend on.
"""
from typing import Optional, Protocol

from cropguard.domain.models import Plant, Plot


class PlotStore(Protocol):
    """Read access to plots and their plants."""
    
    async def get_plot_by_id(self, plot_id: str) -> Plot:
        """Raises PlotNotFoundError if the plot does not exist."""
        ...
    
    async def find_plants_by_plot_id(self, plot_id: str) -> list[Plant]:
        ...
    
    async def find_plant_by_plot_id_and_position(
        self, plot_id: str, row: int, column: int
    ) -> Optional[Plant]:
        ...
    
    async def find_plots_by_farm_id(self, farm_id: str) -> list[Plot]:
        ...
