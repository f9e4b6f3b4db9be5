"""Data models for the pairing planner."""

from pairing_planner.models.pairing import Pair, PairRole, SolverMethod, parse_method
from pairing_planner.models.protocol import ProtocolSlot, ProtocolState
from pairing_planner.models.recommendations import Recommendation
from pairing_planner.models.roster import RatingStore, Roster
from pairing_planner.models.session import PairingSession

__all__ = [
    "Pair",
    "PairRole",
    "SolverMethod",
    "parse_method",
    "ProtocolSlot",
    "ProtocolState",
    "Recommendation",
    "RatingStore",
    "Roster",
    "PairingSession",
]
