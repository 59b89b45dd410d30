"""
API response models using Pydantic.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from cropguard.domain.models import PropagationAlert, StatusKind


class PropagationAlertsResponse(BaseModel):
    """Response model for the plot propagation endpoint."""
    plot_id: str = Field(
        description="Unique identifier for the plot"
    )
    alert_count: int = Field(
        description="Number of disease clusters reported"
    )
    alerts: List[PropagationAlert] = Field(
        description="Alerts sorted critical, high, medium, low"
    )
    
    class Config:
        json_schema_extra = {
            "example": {
                "plot_id": "plot_1",
                "alert_count": 1,
                "alerts": [
                    {
                        "id": "alert_1718000000000_d_blight",
                        "plot_id": "plot_1",
                        "disease_id": "d_blight",
                        "disease_name": "Late blight",
                        "affected_zones": [
                            {"row": 0, "column": 0, "plant_id": "p1", "status": "Diseased"}
                        ],
                        "risk_level": "medium",
                        "plants_at_risk": 3,
                        "recommendations": [
                            "Isolate plants affected by Late blight",
                            "Disinfect tools after each use",
                            "Increase surveillance of neighboring plants",
                            "Apply preventive fungicide around the affected area",
                            "Reduce irrigation to avoid humid conditions",
                        ],
                        "detected_at": "2024-06-10T06:13:20Z",
                    }
                ],
            }
        }


class PlotAlerts(BaseModel):
    plot_id: str
    alerts: List[PropagationAlert]


class FarmPropagationResponse(BaseModel):
    """Response model for the farm-wide propagation endpoint."""
    farm_id: str
    plots: List[PlotAlerts]


class GridCell(BaseModel):
    """An occupied grid cell."""
    plant_id: str
    name: str
    status: StatusKind


class PlotGridResponse(BaseModel):
    """Response model for the plot grid endpoint."""
    plot_id: str
    rows: int
    columns: int
    plant_count: int = Field(description="All plants of the plot, placed or not")
    cells: List[List[Optional[GridCell]]] = Field(
        description="Row-major matrix, null for empty cells"
    )
    excluded_plant_ids: List[str] = Field(
        description="Plants whose position is outside the current bounds"
    )


class DiseaseCountItem(BaseModel):
    name: str
    count: int


class PlotStatsResponse(BaseModel):
    """Response model for the plot statistics endpoint."""
    plot_id: str
    total: int
    by_status: Dict[StatusKind, int]
    diseased: List[DiseaseCountItem]
