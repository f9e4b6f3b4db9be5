"""Step-by-step recommendations for the pairing protocol."""
import logging
from typing import Optional

from pairing_planner.models.pairing import PairRole, SolverMethod
from pairing_planner.models.protocol import PROTOCOL_STEPS, ProtocolSlot, ProtocolState
from pairing_planner.models.recommendations import Recommendation
from pairing_planner.models.roster import RatingStore, Roster
from pairing_planner.services.assignment_service import MethodLike, solve
from pairing_planner.services.protocol_service import available_members
from pairing_planner.services.solvers import EXHAUSTIVE_MAX_PLAYERS

logger = logging.getLogger(__name__)

RECOMMENDED_ATTACKERS = 2

# Slots each round reads from: (our defender, their defender, their attackers)
ROUND_SLOTS = {
    1: (ProtocolSlot.FIRST_DEFENDER, ProtocolSlot.OPPONENT_FIRST_DEFENDER, ProtocolSlot.OPPONENT_FIRST_ATTACKERS),
    2: (ProtocolSlot.SECOND_DEFENDER, ProtocolSlot.OPPONENT_SECOND_DEFENDER, ProtocolSlot.OPPONENT_SECOND_ATTACKERS),
}


class PairingRecommendationEngine:
    """Suggests the next pick at each of the six protocol steps.

    Every suggestion is a pure function of the roster, the ratings, the
    protocol state and the solver method. Members placed in any slot of an
    earlier step are removed from both pools before solving, then:

    - defender steps (1, 4) take the solver's defender-role player, falling
      back to the best mean rating against the remaining opponents;
    - attacker steps (2, 5) take the solver's attacker-role players, falling
      back to the two best-rated players against the opponent's defender;
    - choice steps (3, 6) take the opponent the solver pairs with our
      defender when it is one of the two on offer, falling back to the
      defender's better rating of the two.
    """

    def __init__(self, max_players: int = EXHAUSTIVE_MAX_PLAYERS):
        self.max_players = max_players

    def recommend(
        self,
        step: int,
        protocol: ProtocolState,
        roster: Roster,
        ratings: RatingStore,
        method: MethodLike = SolverMethod.FULL,
    ) -> Recommendation:
        """Build the recommendation for ``step`` (1-6); other steps get an empty one."""
        if not 1 <= step <= PROTOCOL_STEPS:
            return Recommendation(step=step, kind="none")

        round_number = 1 if step <= 3 else 2
        phase = (step - 1) % 3
        players, opponents = available_members(roster, protocol, step)

        if phase == 0:
            rec = self._recommend_defender(step, players, opponents, ratings, method)
        elif phase == 1:
            _, their_defender, _ = ROUND_SLOTS[round_number]
            rec = self._recommend_attackers(
                step, protocol.get(their_defender), players, opponents, ratings, method
            )
        else:
            our_defender, _, their_attackers = ROUND_SLOTS[round_number]
            rec = self._recommend_choice(
                step,
                protocol.get(our_defender),
                protocol.values_of(their_attackers),
                roster,
                players,
                opponents,
                ratings,
                method,
            )

        logger.debug(f"Step {step} recommendation from {rec.source}: {rec.to_dict()}")
        return rec

    def _recommend_defender(self, step, players, opponents, ratings, method) -> Recommendation:
        pairs = solve(players, opponents, ratings, method, self.max_players)
        for pair in pairs:
            if pair.role == PairRole.DEFENDER:
                return Recommendation(step=step, kind="defender", defender=pair.player, source="solver")

        defender = self.best_defender_by_mean(players, opponents, ratings)
        return Recommendation(
            step=step,
            kind="defender",
            defender=defender,
            source="fallback" if defender else "none",
        )

    def _recommend_attackers(self, step, their_defender, players, opponents, ratings, method) -> Recommendation:
        pairs = solve(players, opponents, ratings, method, self.max_players)
        attackers = [p.player for p in pairs if p.role == PairRole.ATTACKER][:RECOMMENDED_ATTACKERS]
        if attackers:
            return Recommendation(step=step, kind="attackers", attackers=attackers, source="solver")

        attackers = self.best_attackers_against(their_defender, players, ratings)
        return Recommendation(
            step=step,
            kind="attackers",
            attackers=attackers,
            source="fallback" if attackers else "none",
        )

    def _recommend_choice(
        self, step, our_defender, offered, roster, players, opponents, ratings, method
    ) -> Recommendation:
        if our_defender is None or not offered:
            return Recommendation(step=step, kind="attacker_choice")

        # The defender and the offered attackers sit in earlier slots, put them back
        pool_players = [p for p in roster.players if p in players or p == our_defender]
        pool_opponents = [o for o in roster.opponents if o in opponents or o in offered]
        pairs = solve(pool_players, pool_opponents, ratings, method, self.max_players)
        for pair in pairs:
            if pair.player == our_defender and pair.opponent in offered:
                return Recommendation(
                    step=step, kind="attacker_choice", attacker_choice=pair.opponent, source="solver"
                )

        choice = self.best_attacker_choice(our_defender, offered, ratings)
        return Recommendation(
            step=step,
            kind="attacker_choice",
            attacker_choice=choice,
            source="fallback" if choice else "none",
        )

    @staticmethod
    def best_defender_by_mean(
        players: list[str], opponents: list[str], ratings: RatingStore
    ) -> Optional[str]:
        """Player with the highest mean rating against ``opponents``.

        Ties go to the earlier player. With no opponents the first player is
        returned; with no players, None.
        """
        if not players:
            return None
        if not opponents:
            return players[0]

        best_player = players[0]
        best_mean = None
        for player in players:
            mean = sum(ratings.get(player, o) for o in opponents) / len(opponents)
            if best_mean is None or mean > best_mean:
                best_player, best_mean = player, mean
        return best_player

    @staticmethod
    def best_attackers_against(
        their_defender: Optional[str],
        players: list[str],
        ratings: RatingStore,
        count: int = RECOMMENDED_ATTACKERS,
    ) -> list[str]:
        """The ``count`` players rated highest against one opponent."""
        if not their_defender or not players:
            return []
        ranked = sorted(players, key=lambda p: -ratings.get(p, their_defender))
        return ranked[:count]

    @staticmethod
    def best_attacker_choice(
        our_defender: Optional[str],
        offered: tuple[str, ...],
        ratings: RatingStore,
    ) -> Optional[str]:
        """The offered opponent our defender is rated highest against."""
        if not our_defender or not offered:
            return None
        best = None
        for opponent in offered:
            if best is None or ratings.get(our_defender, opponent) > ratings.get(our_defender, best):
                best = opponent
        return best


def recommend(
    step: int,
    protocol: ProtocolState,
    roster: Roster,
    ratings: RatingStore,
    method: MethodLike = SolverMethod.FULL,
) -> Recommendation:
    """Module-level shortcut using the default exhaustive search limit."""
    return PairingRecommendationEngine().recommend(step, protocol, roster, ratings, method)
