"""Business logic services."""

from pairing_planner.services.assignment_service import effective_method, solve, solve_raw
from pairing_planner.services.role_classifier import classify
from pairing_planner.services.recommendation_engine import PairingRecommendationEngine, recommend
from pairing_planner.services.reconciliation_service import reconcile

__all__ = [
    "effective_method",
    "solve",
    "solve_raw",
    "classify",
    "PairingRecommendationEngine",
    "recommend",
    "reconcile",
]
