"""Optimal assignment via scipy's linear_sum_assignment."""

import numpy as np
from scipy.optimize import linear_sum_assignment

from pairing_planner.models.pairing import Pair
from pairing_planner.models.roster import MAX_RATING, RatingStore

# One above the top rating so every cost stays positive
COST_CEILING = MAX_RATING + 1


def build_cost_matrix(players: list[str], opponents: list[str], ratings: RatingStore) -> np.ndarray:
    """cost[i][j] = COST_CEILING - rating(player_i, opponent_j)."""
    cost = np.zeros((len(players), len(opponents)), dtype=int)
    for i, player in enumerate(players):
        for j, opponent in enumerate(opponents):
            cost[i][j] = COST_CEILING - ratings.get(player, opponent)
    return cost


def solve_optimal(players: list[str], opponents: list[str], ratings: RatingStore) -> list[Pair]:
    """Find a maximum-rating matching in polynomial time.

    Minimising the inverted cost matrix maximises the rating sum. The matrix may
    be rectangular; min(len(players), len(opponents)) pairs are returned in
    player order.
    """
    if not players or not opponents:
        return []

    cost = build_cost_matrix(players, opponents, ratings)
    row_indices, col_indices = linear_sum_assignment(cost)

    pairs = []
    for row, col in zip(row_indices, col_indices):
        player = players[int(row)]
        opponent = opponents[int(col)]
        pairs.append(Pair(player=player, opponent=opponent, rating=ratings.get(player, opponent)))
    return pairs
