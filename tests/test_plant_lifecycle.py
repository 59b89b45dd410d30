"""
Unit tests for the plant status state machine.
"""
import pytest
from pydantic import ValidationError

from cropguard.domain import plant_lifecycle
from cropguard.domain.errors import InvalidStatusTransition
from cropguard.domain.models import DiseasedStatus, Plant, StatusKind

from conftest import BLIGHT, FIXED_TIME, MILDEW, make_plant


class TestStatusModel:
    """Tests for the tagged status union."""
    
    def test_diseased_requires_disease(self):
        with pytest.raises(ValidationError):
            DiseasedStatus()
    
    def test_status_parsed_by_kind(self):
        plant = Plant.model_validate({
            "id": "p1",
            "plot_id": "plot_1",
            "status": {
                "kind": "Diseased",
                "disease": {"disease_id": "d_blight", "disease_name": "Late blight"},
            },
        })
        
        assert plant.status_kind is StatusKind.DISEASED
        assert plant.disease == BLIGHT
    
    def test_healthy_carries_no_disease(self):
        plant = make_plant("p1", 0, 0)
        
        assert plant.disease is None
        assert plant.is_healthy


class TestTransitions:
    """Tests for lifecycle transitions."""
    
    def test_diagnose_from_any_living_state(self):
        for status in ["Healthy", "UnderObservation", "Recovering"]:
            plant = make_plant("p1", 0, 0, status, BLIGHT if status == "Recovering" else None)
            
            diagnosed = plant_lifecycle.diagnose(plant, MILDEW, at=FIXED_TIME)
            
            assert diagnosed.status_kind is StatusKind.DISEASED
            assert diagnosed.disease == MILDEW
            assert diagnosed.last_diagnosis_date == FIXED_TIME
            assert diagnosed.status.diagnosed_at == FIXED_TIME
    
    def test_diagnose_does_not_mutate_input(self):
        plant = make_plant("p1", 0, 0)
        
        plant_lifecycle.diagnose(plant, BLIGHT)
        
        assert plant.is_healthy
    
    def test_treatment_moves_diseased_to_recovering(self):
        plant = make_plant("p1", 0, 0, "Diseased", BLIGHT)
        
        recovering = plant_lifecycle.start_recovery(plant, at=FIXED_TIME)
        
        assert recovering.status_kind is StatusKind.RECOVERING
        assert recovering.disease == BLIGHT
        assert recovering.last_updated == FIXED_TIME
    
    @pytest.mark.parametrize("status", ["Healthy", "UnderObservation", "Dead"])
    def test_treatment_leaves_other_states(self, status):
        plant = make_plant("p1", 0, 0, status)
        
        assert plant_lifecycle.start_recovery(plant) is plant
    
    def test_mark_healthy_clears_disease(self):
        plant = make_plant("p1", 0, 0, "Diseased", BLIGHT)
        
        healthy = plant_lifecycle.mark_healthy(plant)
        
        assert healthy.is_healthy
        assert healthy.disease is None
        assert healthy.last_updated is not None
    
    def test_dead_is_absorbing(self):
        dead = plant_lifecycle.mark_dead(make_plant("p1", 0, 0, "Diseased", BLIGHT))
        
        assert dead.status_kind is StatusKind.DEAD
        with pytest.raises(InvalidStatusTransition):
            plant_lifecycle.mark_healthy(dead)
        with pytest.raises(InvalidStatusTransition):
            plant_lifecycle.diagnose(dead, BLIGHT)
        with pytest.raises(InvalidStatusTransition):
            plant_lifecycle.mark_under_observation(dead)
        assert plant_lifecycle.mark_dead(dead) is dead


class TestManualStatusUpdate:
    """Tests for apply_status_update dispatch."""
    
    def test_diseased_without_disease_rejected(self):
        with pytest.raises(InvalidStatusTransition):
            plant_lifecycle.apply_status_update(make_plant("p1"), StatusKind.DISEASED)
    
    def test_diseased_with_disease(self):
        updated = plant_lifecycle.apply_status_update(
            make_plant("p1"), StatusKind.DISEASED, BLIGHT
        )
        
        assert updated.disease == BLIGHT
    
    def test_recovering_keeps_current_disease(self):
        plant = make_plant("p1", status="Diseased", disease=BLIGHT)
        
        updated = plant_lifecycle.apply_status_update(plant, StatusKind.RECOVERING)
        
        assert updated.status_kind is StatusKind.RECOVERING
        assert updated.disease == BLIGHT
    
    @pytest.mark.parametrize("kind", [
        StatusKind.HEALTHY,
        StatusKind.UNDER_OBSERVATION,
        StatusKind.DEAD,
    ])
    def test_payloadless_kinds(self, kind):
        plant = make_plant("p1", status="Diseased", disease=BLIGHT)
        
        updated = plant_lifecycle.apply_status_update(plant, kind)
        
        assert updated.status_kind is kind
        assert updated.disease is None
