"""Pair and solver method models."""

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Optional


class PairRole(str, Enum):
    """Tournament role attached to a matched pair."""

    DEFENDER = "defender"
    ATTACKER = "attacker"
    REMAINING = "remaining"


class SolverMethod(str, Enum):
    """Assignment algorithms available to the engine."""

    FULL = "full"  # Exhaustive permutation search
    GREEDY = "greedy"
    OPTIMAL = "optimal"  # Polynomial-time assignment (Hungarian / Jonker-Volgenant)


def parse_method(method: Optional[str]) -> SolverMethod:
    """Map a method name to a SolverMethod.

    Unset or unrecognised names select optimal matching.
    """
    if isinstance(method, SolverMethod):
        return method
    try:
        return SolverMethod(str(method).lower())
    except ValueError:
        return SolverMethod.OPTIMAL


@dataclass(frozen=True)
class Pair:
    """One player matched against one opponent."""

    player: str
    opponent: str
    rating: int
    role: Optional[PairRole] = None

    def with_role(self, role: PairRole) -> "Pair":
        return replace(self, role=role)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value if self.role else None
        return data


def total_rating(pairs: list[Pair]) -> int:
    """Sum of ratings across a pairing."""
    return sum(pair.rating for pair in pairs)


def is_valid_pairing(pairs: list[Pair]) -> bool:
    """True when no player and no opponent appears twice."""
    players = [p.player for p in pairs]
    opponents = [p.opponent for p in pairs]
    return len(players) == len(set(players)) and len(opponents) == len(set(opponents))
