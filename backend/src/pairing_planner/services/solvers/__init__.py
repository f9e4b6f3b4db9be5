"""Assignment algorithms over a ratings matrix."""
from pairing_planner.services.solvers.greedy_solver import solve_greedy
from pairing_planner.services.solvers.exhaustive_solver import EXHAUSTIVE_MAX_PLAYERS, solve_exhaustive
from pairing_planner.services.solvers.optimal_solver import COST_CEILING, solve_optimal

__all__ = [
    "solve_greedy",
    "solve_exhaustive",
    "solve_optimal",
    "EXHAUSTIVE_MAX_PLAYERS",
    "COST_CEILING",
]
