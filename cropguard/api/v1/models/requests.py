"""
API request models using Pydantic.
"""
from typing import Optional
from pydantic import BaseModel, Field

from cropguard.domain.models import DiseaseRef, StatusKind


class CellPosition(BaseModel):
    row: int = Field(ge=0, description="Zero-based grid row")
    column: int = Field(ge=0, description="Zero-based grid column")


class CreatePlantRequest(BaseModel):
    """Body for creating a plant in a plot."""
    name: str = Field(min_length=1)
    crop_type: Optional[str] = None
    position: Optional[CellPosition] = None
    planted_date: Optional[str] = None


class DiagnosisRequest(BaseModel):
    """Body for attaching a diagnosed disease to a plant."""
    disease_id: str = Field(min_length=1)
    disease_name: str = Field(min_length=1)
    
    def to_disease(self) -> DiseaseRef:
        return DiseaseRef(disease_id=self.disease_id, disease_name=self.disease_name)


class TreatmentRequest(BaseModel):
    """Body for recording a treatment."""
    user_id: str
    treatment: str = Field(min_length=1)
    image: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    """Body for a manual status change."""
    status: StatusKind
    disease: Optional[DiseaseRef] = None
