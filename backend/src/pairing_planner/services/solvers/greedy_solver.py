"""Greedy assignment: take the highest-rated free pair until nothing is left."""

from pairing_planner.models.pairing import Pair
from pairing_planner.models.roster import RatingStore


def solve_greedy(players: list[str], opponents: list[str], ratings: RatingStore) -> list[Pair]:
    """Match players to opponents by repeatedly committing the best free pair.

    Candidates are enumerated player-major, opponent-minor and sorted by rating
    descending. The sort is stable, so equal ratings keep enumeration order.

    Not optimal in general: with A-X=5, A-Y=4, B-X=3, B-Y=1 greedy commits
    A-X first and is left with B-Y (total 6) while A-Y + B-X scores 7.
    """
    candidates = [
        Pair(player=player, opponent=opponent, rating=ratings.get(player, opponent))
        for player in players
        for opponent in opponents
    ]
    candidates.sort(key=lambda pair: -pair.rating)

    pairs = []
    used_players: set[str] = set()
    used_opponents: set[str] = set()
    for pair in candidates:
        if pair.player in used_players or pair.opponent in used_opponents:
            continue
        pairs.append(pair)
        used_players.add(pair.player)
        used_opponents.add(pair.opponent)

    return pairs
