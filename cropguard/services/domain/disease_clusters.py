"""
Domain service: grouping diseased plants into per-disease clusters.
"""
from dataclasses import dataclass, field
import logging

from cropguard.domain.models import DiseaseRef, Plant

logger = logging.getLogger(__name__)


@dataclass
class DiseaseCluster:
    """All currently Diseased plants of a plot sharing one disease id."""
    disease: DiseaseRef
    members: list[Plant] = field(default_factory=list)
    
    @property
    def disease_id(self) -> str:
        return self.disease.disease_id
    
    @property
    def size(self) -> int:
        return len(self.members)


def detect_clusters(plants: list[Plant]) -> list[DiseaseCluster]:
    """
    Group Diseased plants by disease id.
    
    Clusters come out in the order their first diseased plant appears in
    ``plants``; members keep input order. Recovering plants are not members.
    
    Args:
        plants: All plants of a plot
        
    Returns:
        List of DiseaseCluster, one per distinct disease id
    """
    clusters: dict[str, DiseaseCluster] = {}
    
    for plant in plants:
        if not plant.is_diseased:
            continue
        
        disease = plant.disease
        cluster = clusters.get(disease.disease_id)
        if cluster is None:
            # Name comes from the first plant seen with this disease
            cluster = DiseaseCluster(disease=disease)
            clusters[disease.disease_id] = cluster
        cluster.members.append(plant)
    
    logger.debug(f"Detected {len(clusters)} disease clusters among {len(plants)} plants")
    return list(clusters.values())
