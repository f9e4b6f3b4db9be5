"""Builds the final pairing from the human's recorded selections."""

import logging

from pairing_planner.models.pairing import Pair, PairRole
from pairing_planner.models.protocol import ProtocolSlot, ProtocolState
from pairing_planner.models.roster import RatingStore, Roster

logger = logging.getLogger(__name__)

# (player slot, opponent slot, role) for every pair the protocol fixes
COMMITTED_PAIRS = [
    (ProtocolSlot.FIRST_DEFENDER, ProtocolSlot.FIRST_ATTACKER_CHOICE, PairRole.DEFENDER),
    (ProtocolSlot.SECOND_DEFENDER, ProtocolSlot.SECOND_ATTACKER_CHOICE, PairRole.DEFENDER),
    (ProtocolSlot.OPPONENT_FIRST_ATTACKER_CHOICE, ProtocolSlot.OPPONENT_FIRST_DEFENDER, PairRole.ATTACKER),
    (ProtocolSlot.OPPONENT_SECOND_ATTACKER_CHOICE, ProtocolSlot.OPPONENT_SECOND_DEFENDER, PairRole.ATTACKER),
]


def committed_pairs(protocol: ProtocolState, ratings: RatingStore) -> list[Pair]:
    """Defender and attacker pairs fixed by the selections made so far.

    A pair whose slots are not both filled is skipped, as is any pair that
    would reuse a player or opponent already placed.
    """
    pairs: list[Pair] = []
    used_players: set[str] = set()
    used_opponents: set[str] = set()
    for player_slot, opponent_slot, role in COMMITTED_PAIRS:
        player = protocol.get(player_slot)
        opponent = protocol.get(opponent_slot)
        if not player or not opponent:
            continue
        if player in used_players or opponent in used_opponents:
            continue
        pairs.append(Pair(player=player, opponent=opponent, rating=ratings.get(player, opponent), role=role))
        used_players.add(player)
        used_opponents.add(opponent)
    return pairs


def reconcile(protocol: ProtocolState, roster: Roster, ratings: RatingStore) -> list[Pair]:
    """Final pairs from recorded selections, plus one leftover pair.

    Our defenders face the attacker we chose for them, their defenders face the
    attacker they chose from ours, and the first player and first opponent
    (in display order) not yet placed form the single remaining pair.

    Missing selections shrink the result instead of failing: with an empty
    protocol the result is just the leftover pair.
    """
    pairs = committed_pairs(protocol, ratings)

    used_players = {p.player for p in pairs}
    used_opponents = {p.opponent for p in pairs}
    leftover_players = [p for p in roster.players if p not in used_players]
    leftover_opponents = [o for o in roster.opponents if o not in used_opponents]

    if leftover_players and leftover_opponents:
        player, opponent = leftover_players[0], leftover_opponents[0]
        pairs.append(Pair(
            player=player,
            opponent=opponent,
            rating=ratings.get(player, opponent),
            role=PairRole.REMAINING,
        ))

    logger.debug(f"Reconciled {len(pairs)} pairs from protocol selections")
    return pairs
