"""
Domain service: disease-propagation risk analysis for a plot.

This module composes the grid, cluster, risk and recommendation steps:
- Dense grid materialization from plant positions
- Per-disease clustering of diseased plants
- Infection ratio risk classification
- Healthy-neighbor exposure counting (Moore neighborhood)
- Stable ranking of alerts by risk
"""
from datetime import datetime, timezone
from typing import Optional
import logging

from cropguard.domain.models import (
    AffectedZone,
    Plant,
    Plot,
    PropagationAlert,
)
from cropguard.services.domain.disease_clusters import DiseaseCluster, detect_clusters
from cropguard.services.domain.recommendations import generate_recommendations
from cropguard.services.domain.risk_classifier import RiskThresholds, classify_risk
from cropguard.utils.grid_helpers import PlotGrid, build_grid, get_neighbors

logger = logging.getLogger(__name__)


class PropagationAnalyzer:
    """
    Domain service computing propagation alerts for one plot.
    
    Stateless: every call works only on the plot and plants it is given
    and never mutates them.
    """
    
    def __init__(self, thresholds: Optional[RiskThresholds] = None):
        """
        Initialize the analyzer.
        
        Args:
            thresholds: Risk ratio thresholds (defaults from settings)
        """
        self.thresholds = thresholds or RiskThresholds.from_settings()
        
        logger.info(f"Initialized PropagationAnalyzer with thresholds: "
                    f"critical>{self.thresholds.critical}, "
                    f"high>{self.thresholds.high}, "
                    f"medium>{self.thresholds.medium}")
    
    def analyze(
        self,
        plot: Plot,
        plants: list[Plant],
        detected_at: Optional[datetime] = None,
    ) -> list[PropagationAlert]:
        """
        Compute ranked propagation alerts for a plot.
        
        Args:
            plot: The plot being analyzed
            plants: All plants of the plot, in store order
            detected_at: Detection timestamp (defaults to now, UTC)
            
        Returns:
            Alerts sorted critical, high, medium, low; ties keep cluster
            discovery order
        """
        if not plants:
            logger.info(f"Plot {plot.id} has no plants, nothing to analyze")
            return []
        
        clusters = detect_clusters(plants)
        if not clusters:
            logger.info(f"Plot {plot.id}: no diseased plants among {len(plants)}")
            return []
        
        grid = build_grid(plot.rows, plot.columns, plants)
        detected_at = detected_at or datetime.now(timezone.utc)
        total = len(plants)
        
        alerts = [
            self._build_alert(plot, grid, cluster, total, detected_at)
            for cluster in clusters
        ]
        
        # list.sort is stable, ties keep discovery order
        alerts.sort(key=lambda alert: alert.risk_level.severity)
        
        logger.info(f"Plot {plot.id}: {len(alerts)} alerts from {total} plants "
                    f"({', '.join(f'{a.disease_id}={a.risk_level.value}' for a in alerts)})")
        return alerts
    
    def _build_alert(
        self,
        plot: Plot,
        grid: PlotGrid,
        cluster: DiseaseCluster,
        total_plants: int,
        detected_at: datetime,
    ) -> PropagationAlert:
        risk_level = classify_risk(cluster.size, total_plants, self.thresholds)
        affected_zones = self._affected_zones(grid, cluster)
        at_risk = self._plants_at_risk(grid, affected_zones)
        
        logger.debug(f"Cluster {cluster.disease_id}: size={cluster.size}, "
                     f"placed={len(affected_zones)}, at_risk={len(at_risk)}, "
                     f"risk={risk_level.value}")
        
        return PropagationAlert(
            id=f"alert_{int(detected_at.timestamp() * 1000)}_{cluster.disease_id}",
            plot_id=plot.id,
            disease_id=cluster.disease_id,
            disease_name=cluster.disease.disease_name,
            affected_zones=affected_zones,
            risk_level=risk_level,
            plants_at_risk=len(at_risk),
            recommendations=generate_recommendations(
                risk_level, cluster.disease.disease_name
            ),
            detected_at=detected_at,
        )
    
    def _affected_zones(self, grid: PlotGrid, cluster: DiseaseCluster) -> list[AffectedZone]:
        """Cells held by cluster members actually placed on the grid."""
        return [
            AffectedZone(
                row=plant.position.row,
                column=plant.position.column,
                plant_id=plant.id,
                status=plant.status_kind,
            )
            for plant in cluster.members
            if grid.is_placed(plant)
        ]
    
    def _plants_at_risk(self, grid: PlotGrid, zones: list[AffectedZone]) -> list[str]:
        """Distinct healthy plants neighboring any affected cell, first-seen order."""
        at_risk: dict[str, None] = {}
        for zone in zones:
            for _, _, neighbor in get_neighbors(grid, zone.row, zone.column):
                if neighbor is not None and neighbor.is_healthy:
                    at_risk.setdefault(neighbor.id, None)
        return list(at_risk)
