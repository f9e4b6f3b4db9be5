"""Exhaustive assignment: score every permutation and keep the best."""

import logging
from itertools import permutations

from pairing_planner.models.pairing import Pair
from pairing_planner.models.roster import RatingStore
from pairing_planner.services.solvers.optimal_solver import solve_optimal

logger = logging.getLogger(__name__)

# Permutation count grows factorially past this
EXHAUSTIVE_MAX_PLAYERS = 5


def solve_exhaustive(
    players: list[str],
    opponents: list[str],
    ratings: RatingStore,
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> list[Pair]:
    """Try every assignment and return the highest-scoring one.

    Each permutation of opponents (truncated to len(players)) is scored as the
    sum of ratings; the first permutation reaching the best score wins.
    When there are more players than opponents the roles are swapped so every
    opponent is placed.

    Falls back to optimal matching when len(players) > max_players. Both give
    the same total, only the tie-breaking between equal-score pairings differs.
    """
    if not players or not opponents:
        return []

    if len(players) > max_players:
        logger.info(
            f"Exhaustive search over {len(players)} players exceeds limit {max_players}, "
            f"using optimal matching"
        )
        return solve_optimal(players, opponents, ratings)

    if len(players) <= len(opponents):
        candidates = (
            list(zip(players, arrangement))
            for arrangement in permutations(opponents, len(players))
        )
    else:
        candidates = (
            list(zip(arrangement, opponents))
            for arrangement in permutations(players, len(opponents))
        )

    best_score = -1
    best: list[tuple[str, str]] = []
    for assignment in candidates:
        score = sum(ratings.get(player, opponent) for player, opponent in assignment)
        if score > best_score:
            best_score = score
            best = assignment

    order = {player: index for index, player in enumerate(players)}
    best.sort(key=lambda item: order[item[0]])
    return [
        Pair(player=player, opponent=opponent, rating=ratings.get(player, opponent))
        for player, opponent in best
    ]
