"""
Domain service: infection ratio to risk level classification.
"""
from dataclasses import dataclass
from typing import Optional

from cropguard.config import settings
from cropguard.domain.models import RiskLevel


@dataclass(frozen=True)
class RiskThresholds:
    """Infection ratios above which each risk level applies."""
    
    critical: float = 0.30
    high: float = 0.15
    medium: float = 0.05
    
    @classmethod
    def from_settings(cls) -> "RiskThresholds":
        return cls(
            critical=settings.risk_critical_ratio,
            high=settings.risk_high_ratio,
            medium=settings.risk_medium_ratio,
        )


def classify_risk(
    cluster_size: int,
    total_plants: int,
    thresholds: Optional[RiskThresholds] = None,
) -> RiskLevel:
    """
    Classify a cluster by its share of the plot's plants.
    
    Thresholds are strict and evaluated from most to least severe.
    
    Args:
        cluster_size: Number of plants in the cluster
        total_plants: Number of plants in the plot
        thresholds: Ratio thresholds (defaults to RiskThresholds())
        
    Returns:
        RiskLevel
        
    Raises:
        ValueError: If total_plants is not positive
    """
    if total_plants <= 0:
        raise ValueError("Cannot classify risk for a plot without plants")
    
    thresholds = thresholds or RiskThresholds()
    ratio = cluster_size / total_plants
    
    if ratio > thresholds.critical:
        return RiskLevel.CRITICAL
    if ratio > thresholds.high:
        return RiskLevel.HIGH
    if ratio > thresholds.medium:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
