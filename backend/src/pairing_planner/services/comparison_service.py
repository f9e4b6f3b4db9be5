"""Compare the human's pairing against solver-built alternatives."""

import logging

from pairing_planner.models.pairing import Pair, total_rating
from pairing_planner.models.protocol import ProtocolState
from pairing_planner.models.roster import RatingStore, Roster
from pairing_planner.services.assignment_service import MethodLike, solve
from pairing_planner.services.reconciliation_service import committed_pairs, reconcile
from pairing_planner.services.solvers import EXHAUSTIVE_MAX_PLAYERS

logger = logging.getLogger(__name__)


def hybrid_pairs(
    protocol: ProtocolState,
    roster: Roster,
    ratings: RatingStore,
    method: MethodLike = None,
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> list[Pair]:
    """The human's committed pairs, with the solver placing everyone else."""
    manual = committed_pairs(protocol, ratings)
    used_players = {p.player for p in manual}
    used_opponents = {p.opponent for p in manual}
    players = [p for p in roster.players if p not in used_players]
    opponents = [o for o in roster.opponents if o not in used_opponents]
    if not players or not opponents:
        return manual
    return manual + solve(players, opponents, ratings, method, max_players)


def optimal_pairs(
    roster: Roster,
    ratings: RatingStore,
    method: MethodLike = None,
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> list[Pair]:
    """Solver pairing of the whole roster, ignoring the protocol."""
    return solve(roster.players, roster.opponents, ratings, method, max_players)


def _percent_change(value: int, baseline: int) -> int:
    if baseline == 0:
        return 0
    return round((value - baseline) / baseline * 100)


def compare(
    protocol: ProtocolState,
    roster: Roster,
    ratings: RatingStore,
    method: MethodLike = None,
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> dict:
    """Rating totals for the manual, hybrid and fully optimal pairings.

    Percentages are relative to the manual total and rounded to whole numbers.
    """
    manual = total_rating(reconcile(protocol, roster, ratings))
    hybrid = total_rating(hybrid_pairs(protocol, roster, ratings, method, max_players))
    optimal = total_rating(optimal_pairs(roster, ratings, method, max_players))

    return {
        "manual": manual,
        "hybrid": hybrid,
        "optimal": optimal,
        "hybrid_percent": _percent_change(hybrid, manual),
        "optimal_percent": _percent_change(optimal, manual),
        "improvement": max(optimal - hybrid, 0),
    }


def apply_optimal(
    roster: Roster,
    ratings: RatingStore,
    method: MethodLike = None,
    max_players: int = EXHAUSTIVE_MAX_PLAYERS,
) -> list[Pair]:
    """Pairing to replace the final result when the user accepts the solver's."""
    pairs = optimal_pairs(roster, ratings, method, max_players)
    logger.info(f"Applying solver pairing with total {total_rating(pairs)}")
    return pairs
