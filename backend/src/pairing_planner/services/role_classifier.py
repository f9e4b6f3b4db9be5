"""Tournament role classification for matched pairs."""

from pairing_planner.models.pairing import Pair, PairRole

DEFENDER_COUNT = 2
ATTACKER_COUNT = 4


def find_best_defenders(pairs: list[Pair], count: int = DEFENDER_COUNT) -> list[Pair]:
    """Pick each top player's best pair, ranking players by mean rating.

    Players are ranked by the mean of their ratings across ``pairs``
    (stable on first appearance). For each of the top ``count`` players the
    highest-rated pair whose opponent is still free is returned.
    """
    by_player: dict[str, list[Pair]] = {}
    for pair in pairs:
        by_player.setdefault(pair.player, []).append(pair)

    ranked = sorted(
        by_player.items(),
        key=lambda item: -sum(p.rating for p in item[1]) / len(item[1]),
    )

    defenders: list[Pair] = []
    used_opponents: set[str] = set()
    for _, candidates in ranked:
        if len(defenders) >= count:
            break
        best = None
        for pair in candidates:
            if pair.opponent in used_opponents:
                continue
            if best is None or pair.rating > best.rating:
                best = pair
        if best is not None:
            defenders.append(best)
            used_opponents.add(best.opponent)
    return defenders


def find_best_attackers(pairs: list[Pair], count: int = ATTACKER_COUNT) -> list[Pair]:
    """Highest-rated non-overlapping pairs, stable on input order."""
    attackers: list[Pair] = []
    used_players: set[str] = set()
    used_opponents: set[str] = set()
    for pair in sorted(pairs, key=lambda p: -p.rating):
        if len(attackers) >= count:
            break
        if pair.player in used_players or pair.opponent in used_opponents:
            continue
        attackers.append(pair)
        used_players.add(pair.player)
        used_opponents.add(pair.opponent)
    return attackers


def classify(pairs: list[Pair]) -> list[Pair]:
    """Annotate pairs with defender / attacker / remaining roles.

    1. The two players with the best mean rating each defend with their best pair.
    2. The four highest-rated pairs among free players and opponents attack.
    3. Every other pair whose player and opponent are still free remains.

    Only a defender's chosen opponent is consumed, not every opponent that
    player was paired with, so other players can still claim them.

    Output is ordered defenders, attackers, remaining.
    """
    result: list[Pair] = []
    used_players: set[str] = set()
    used_opponents: set[str] = set()

    for pair in find_best_defenders(pairs):
        result.append(pair.with_role(PairRole.DEFENDER))
        used_players.add(pair.player)
        used_opponents.add(pair.opponent)

    remaining = [
        p for p in pairs
        if p.player not in used_players and p.opponent not in used_opponents
    ]
    for pair in find_best_attackers(remaining):
        result.append(pair.with_role(PairRole.ATTACKER))
        used_players.add(pair.player)
        used_opponents.add(pair.opponent)

    for pair in pairs:
        if pair.player in used_players or pair.opponent in used_opponents:
            continue
        result.append(pair.with_role(PairRole.REMAINING))
        used_players.add(pair.player)
        used_opponents.add(pair.opponent)

    return result
