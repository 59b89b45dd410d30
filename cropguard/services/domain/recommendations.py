"""
Domain service: mitigation actions for a disease cluster.
"""
from cropguard.domain.models import RiskLevel

SEVERE_RISK_ACTIONS = (
    "Consider removing severely affected plants",
    "Apply preventive treatment to neighboring plants",
    "Improve ventilation and spacing between plants",
    "Consult a specialized agronomist",
)

MEDIUM_RISK_ACTIONS = (
    "Apply preventive fungicide around the affected area",
    "Reduce irrigation to avoid humid conditions",
)


def generate_recommendations(risk_level: RiskLevel, disease_name: str) -> list[str]:
    """Ordered mitigation actions; baseline first, then risk-specific."""
    recommendations = [
        f"Isolate plants affected by {disease_name}",
        "Disinfect tools after each use",
        "Increase surveillance of neighboring plants",
    ]
    
    if risk_level in (RiskLevel.CRITICAL, RiskLevel.HIGH):
        recommendations.extend(SEVERE_RISK_ACTIONS)
    elif risk_level is RiskLevel.MEDIUM:
        recommendations.extend(MEDIUM_RISK_ACTIONS)
    
    return recommendations
