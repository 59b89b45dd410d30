"""
Application service: Orchestration layer for plot operations.
"""
import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from cropguard.config import settings
from cropguard.domain.models import Plant, Plot, PropagationAlert, StatusKind
from cropguard.domain.ports import PlotStore
from cropguard.services.domain.propagation_analyzer import PropagationAnalyzer
from cropguard.utils.grid_helpers import PlotGrid, build_grid

logger = logging.getLogger(__name__)


@dataclass
class DiseaseCount:
    name: str
    count: int


@dataclass
class PlotStats:
    """Plant counts of a plot by status and by carried disease."""
    total: int
    by_status: dict[StatusKind, int]
    diseased: list[DiseaseCount]


class PlotService:
    """
    Application service for plot-related operations.
    
    Orchestrates data fetching and business logic execution.
    Follows the application layer pattern - no business logic here,
    only coordination between the store and domain layers.
    """
    
    def __init__(
        self,
        store: PlotStore,
        analyzer: PropagationAnalyzer,
        max_concurrency: Optional[int] = None,
    ):
        """
        Initialize the service with dependencies.
        
        Args:
            store: Plot store for data fetching
            analyzer: Propagation analyzer for risk computation
            max_concurrency: Cap on plots analyzed at once by analyze_farm
        """
        self.store = store
        self.analyzer = analyzer
        self.max_concurrency = max_concurrency or settings.max_concurrent_plot_analyses
    
    async def _load_plot(self, plot_id: str) -> tuple[Plot, list[Plant]]:
        plot = await self.store.get_plot_by_id(plot_id)
        plants = await self.store.find_plants_by_plot_id(plot_id)
        return plot, plants
    
    async def analyze_propagation(self, plot_id: str) -> list[PropagationAlert]:
        """
        Compute ranked disease-propagation alerts for a plot.
        
        Args:
            plot_id: Unique identifier for the plot
            
        Returns:
            Alerts sorted by risk, most severe first
            
        Raises:
            PlotNotFoundError: If the plot does not exist
            ExternalAPIError: If data fetching fails
        """
        plot, plants = await self._load_plot(plot_id)
        return self.analyzer.analyze(plot, plants)
    
    async def analyze_farm(self, farm_id: str) -> dict[str, list[PropagationAlert]]:
        """
        Analyze every plot of a farm concurrently.
        
        Args:
            farm_id: Unique identifier for the farm
            
        Returns:
            Mapping of plot id to its alerts, in the store's plot order
        """
        plots = await self.store.find_plots_by_farm_id(farm_id)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        
        async def analyze_one(plot: Plot) -> list[PropagationAlert]:
            async with semaphore:
                plants = await self.store.find_plants_by_plot_id(plot.id)
            return self.analyzer.analyze(plot, plants)
        
        results = await asyncio.gather(*(analyze_one(plot) for plot in plots))
        logger.info(f"Farm {farm_id}: analyzed {len(plots)} plots, "
                    f"{sum(len(alerts) for alerts in results)} alerts")
        return {plot.id: alerts for plot, alerts in zip(plots, results)}
    
    async def get_plot_grid(self, plot_id: str) -> PlotGrid:
        """
        Build the grid view of a plot.
        
        Raises:
            PlotNotFoundError: If the plot does not exist
        """
        plot, plants = await self._load_plot(plot_id)
        return build_grid(plot.rows, plot.columns, plants)
    
    async def get_plot_stats(self, plot_id: str) -> PlotStats:
        """
        Count a plot's plants by status and by carried disease.
        
        Raises:
            PlotNotFoundError: If the plot does not exist
        """
        _, plants = await self._load_plot(plot_id)
        
        by_status = {kind: 0 for kind in StatusKind}
        disease_counts: Counter[str] = Counter()
        for plant in plants:
            by_status[plant.status_kind] += 1
            if plant.disease is not None:
                disease_counts[plant.disease.disease_name] += 1
        
        # most_common keeps first-seen order on ties
        diseased = [
            DiseaseCount(name=name, count=count)
            for name, count in disease_counts.most_common()
        ]
        return PlotStats(total=len(plants), by_status=by_status, diseased=diseased)
