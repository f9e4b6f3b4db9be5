"""Models for pairing sessions."""

import time
from dataclasses import dataclass, field

from pairing_planner.models.pairing import Pair, SolverMethod
from pairing_planner.models.protocol import COMPLETE_STEP, SETUP_STEP, ProtocolState
from pairing_planner.models.roster import RatingStore, Roster


@dataclass
class PairingSession:
    """State for one team-versus-team pairing session."""

    session_id: str
    roster: Roster
    ratings: RatingStore
    method: SolverMethod = SolverMethod.FULL
    protocol: ProtocolState = field(default_factory=ProtocolState)
    current_step: int = SETUP_STEP
    final_pairs: list[Pair] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)

    @property
    def is_complete(self) -> bool:
        return self.current_step == COMPLETE_STEP
