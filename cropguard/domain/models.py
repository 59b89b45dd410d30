"""
Domain models for plots, plants and propagation alerts.

These models represent the core domain entities and should be independent
of any infrastructure concerns (store clients, HTTP wire formats, etc.).
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field


class StatusKind(str, Enum):
    """Health status of a plant."""
    HEALTHY = "Healthy"
    UNDER_OBSERVATION = "UnderObservation"
    DISEASED = "Diseased"
    RECOVERING = "Recovering"
    DEAD = "Dead"


class RiskLevel(str, Enum):
    """Propagation risk of a disease cluster."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
    
    @property
    def severity(self) -> int:
        """Sort rank, 0 being the most severe."""
        return _RISK_SEVERITY[self]


_RISK_SEVERITY = {
    RiskLevel.CRITICAL: 0,
    RiskLevel.HIGH: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.LOW: 3,
}


class DiseaseRef(BaseModel):
    """Reference to a disease diagnosed on a plant."""
    disease_id: str
    disease_name: str


class GridPosition(BaseModel):
    """Cell coordinate inside a plot grid (zero-based)."""
    row: int
    column: int


# Plant status as a tagged union: only Diseased/Recovering carry a disease.

class HealthyStatus(BaseModel):
    kind: Literal["Healthy"] = "Healthy"


class UnderObservationStatus(BaseModel):
    kind: Literal["UnderObservation"] = "UnderObservation"


class DiseasedStatus(BaseModel):
    kind: Literal["Diseased"] = "Diseased"
    disease: DiseaseRef
    diagnosed_at: Optional[datetime] = None


class RecoveringStatus(BaseModel):
    kind: Literal["Recovering"] = "Recovering"
    disease: Optional[DiseaseRef] = None


class DeadStatus(BaseModel):
    kind: Literal["Dead"] = "Dead"


PlantStatus = Annotated[
    Union[
        HealthyStatus,
        UnderObservationStatus,
        DiseasedStatus,
        RecoveringStatus,
        DeadStatus,
    ],
    Field(discriminator="kind"),
]


class Plot(BaseModel):
    """A rectangular grid of cells belonging to a farm."""
    id: str
    farm_id: str
    name: str = ""
    crop_type: Optional[str] = None
    area: Optional[str] = None
    rows: int = Field(gt=0, description="Number of grid rows")
    columns: int = Field(gt=0, description="Number of grid columns")
    created_at: Optional[datetime] = None
    
    def contains(self, row: int, column: int) -> bool:
        """Whether (row, column) lies inside the current plot bounds."""
        return 0 <= row < self.rows and 0 <= column < self.columns


class Plant(BaseModel):
    """A plant, optionally placed on a cell of its plot."""
    id: str
    plot_id: str
    name: str = ""
    crop_type: Optional[str] = None
    position: Optional[GridPosition] = None
    status: PlantStatus = Field(default_factory=HealthyStatus)
    planted_date: Optional[str] = None
    last_diagnosis_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    
    @property
    def status_kind(self) -> StatusKind:
        return StatusKind(self.status.kind)
    
    @property
    def disease(self) -> Optional[DiseaseRef]:
        return getattr(self.status, "disease", None)
    
    @property
    def is_diseased(self) -> bool:
        return self.status_kind is StatusKind.DISEASED
    
    @property
    def is_healthy(self) -> bool:
        return self.status_kind is StatusKind.HEALTHY


class AffectedZone(BaseModel):
    """A grid cell occupied by a member of a disease cluster."""
    row: int
    column: int
    plant_id: str
    status: StatusKind


class PropagationAlert(BaseModel):
    """Computed risk and recommended actions for one disease cluster."""
    id: str
    plot_id: str
    disease_id: str
    disease_name: str
    affected_zones: List[AffectedZone]
    risk_level: RiskLevel
    plants_at_risk: int = Field(
        description="Distinct healthy plants adjacent to any affected cell"
    )
    recommendations: List[str]
    detected_at: datetime


class PlantCreate(BaseModel):
    """Data for creating a plant in a plot."""
    plot_id: str
    name: str
    crop_type: Optional[str] = None
    position: Optional[GridPosition] = None
    planted_date: Optional[str] = None


class RecordType(str, Enum):
    """Kind of historical record attached to a plant."""
    DIAGNOSIS = "diagnosis"
    NOTE = "note"
    TREATMENT = "treatment"
    GROWTH = "growth"
    HARVEST = "harvest"


class PlantRecord(BaseModel):
    """A historical record (note, treatment, ...) attached to a plant."""
    id: Optional[str] = None
    plant_id: str
    user_id: str
    type: RecordType
    note: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None
