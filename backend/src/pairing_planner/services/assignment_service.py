"""Solver dispatch: pick an assignment algorithm and classify its result."""

import logging
from typing import Union

from pairing_planner.models.pairing import Pair, SolverMethod, parse_method, total_rating
from pairing_planner.models.roster import RatingStore
from pairing_planner.services.role_classifier import classify
from pairing_planner.services.solvers import (
    EXHAUSTIVE_MAX_PLAYERS,
    solve_exhaustive,
    solve_greedy,
    solve_optimal,
)

logger = logging.getLogger(__name__)

MethodLike = Union[SolverMethod, str, None]


def effective_method(
    method: MethodLike,
    players: list[str],
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> SolverMethod:
    """The algorithm that actually runs for ``method`` on this many players.

    Exhaustive search silently becomes optimal matching above ``max_players``;
    callers that need to report which algorithm ran use this.
    """
    resolved = parse_method(method)
    if resolved == SolverMethod.FULL and len(players) > max_players:
        return SolverMethod.OPTIMAL
    return resolved


def solve_raw(
    players: list[str],
    opponents: list[str],
    ratings: RatingStore,
    method: MethodLike = None,
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> list[Pair]:
    """Run the selected solver without role classification."""
    players = list(players)
    opponents = list(opponents)
    if not players or not opponents:
        return []

    resolved = parse_method(method)
    if resolved == SolverMethod.GREEDY:
        pairs = solve_greedy(players, opponents, ratings)
    elif resolved == SolverMethod.FULL:
        pairs = solve_exhaustive(players, opponents, ratings, max_players=max_players)
    else:
        pairs = solve_optimal(players, opponents, ratings)

    logger.debug(f"{resolved.value} solver matched {len(pairs)} pairs, total {total_rating(pairs)}")
    return pairs


def solve(
    players: list[str],
    opponents: list[str],
    ratings: RatingStore,
    method: MethodLike = None,
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> list[Pair]:
    """Match players to opponents and attach tournament roles.

    Args:
        players: Candidate players, in display order
        opponents: Candidate opponents, in display order
        ratings: Rating store covering every (player, opponent) pair
        method: "full", "greedy" or "optimal"; anything else means optimal
        max_players: Exhaustive search limit before falling back to optimal

    Returns:
        Role-annotated pairs, defenders first. Empty when either side is empty.
    """
    return classify(solve_raw(players, opponents, ratings, method, max_players))
