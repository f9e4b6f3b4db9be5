"""Pairing session business logic: wizard steps, edits and results."""

import logging
import uuid
from dataclasses import replace
from typing import Iterable, Optional, Union

from pairing_planner.exceptions import IncompleteStepError, InvalidSelectionError
from pairing_planner.models.pairing import Pair, SolverMethod, parse_method, total_rating
from pairing_planner.models.protocol import (
    COMPLETE_STEP,
    PROTOCOL_STEPS,
    SETUP_STEP,
    ProtocolSlot,
    ProtocolState,
)
from pairing_planner.models.recommendations import Recommendation
from pairing_planner.models.roster import DEFAULT_RATING, RatingStore, Roster
from pairing_planner.models.session import PairingSession
from pairing_planner.services import comparison_service, roster_service
from pairing_planner.services.protocol_service import blocking_slots, parse_slot, record_selection
from pairing_planner.services.reconciliation_service import reconcile
from pairing_planner.services.recommendation_engine import PairingRecommendationEngine
from pairing_planner.services.solvers import EXHAUSTIVE_MAX_PLAYERS
from pairing_planner.utils.identifiers import normalize_name, normalize_names

logger = logging.getLogger(__name__)


class PairingSessionService:
    """Drives one session through setup, the six protocol steps and the result.

    Sessions are owned by the caller; every method reads or updates the
    session passed in and nothing else.
    """

    def __init__(
        self,
        max_players: int = EXHAUSTIVE_MAX_PLAYERS,
        default_rating: int = DEFAULT_RATING,
        default_method: Union[SolverMethod, str] = SolverMethod.FULL,
    ):
        """Initialize the session service.

        Args:
            max_players: Exhaustive search limit before optimal matching takes over
            default_rating: Rating given to every new (player, opponent) pair
            default_method: Solver used when a session does not name one
        """
        self.max_players = max_players
        self.default_rating = default_rating
        self.default_method = parse_method(default_method)
        self.engine = PairingRecommendationEngine(max_players=max_players)

    def create_session(
        self,
        players: Iterable[str],
        opponents: Iterable[str],
        team_name: str = "Our team",
        opponent_team_name: str = "Opponents",
        method: Optional[str] = None,
        ratings: Optional[dict[str, dict[str, int]]] = None,
    ) -> PairingSession:
        """Start a session with a fully populated rating store."""
        roster = Roster(
            players=normalize_names(players),
            opponents=normalize_names(opponents),
            team_name=team_name,
            opponent_team_name=opponent_team_name,
        )
        store = RatingStore.for_roster(
            roster.players, roster.opponents, default=self.default_rating, initial=ratings
        )
        session = PairingSession(
            session_id=f"pair_{uuid.uuid4().hex[:12]}",
            roster=roster,
            ratings=store,
            method=parse_method(method) if method else self.default_method,
        )
        logger.info(
            f"Created session {session.session_id}: "
            f"{len(roster.players)} players vs {len(roster.opponents)} opponents"
        )
        return session

    # Roster and ratings

    def rename(self, session: PairingSession, side: str, old: str, new: str) -> None:
        """Rename a member across roster, ratings, selections and final pairs."""
        new = normalize_name(new)
        session.roster, session.ratings, session.protocol = roster_service.apply_rename(
            side, old, new, session.roster, session.ratings, session.protocol
        )
        session.final_pairs = [
            replace(
                pair,
                player=new if pair.player == old else pair.player,
                opponent=new if pair.opponent == old else pair.opponent,
            )
            for pair in session.final_pairs
        ]

    def add_member(self, session: PairingSession, side: str, name: str) -> None:
        session.roster, session.ratings = roster_service.add_member(
            side, name, session.roster, session.ratings, self.default_rating
        )

    def update_rating(self, session: PairingSession, player: str, opponent: str, value: int) -> None:
        roster_service.update_rating(session.ratings, player, opponent, value)

    def set_method(self, session: PairingSession, method: Optional[str]) -> None:
        session.method = parse_method(method)

    def set_team_names(
        self,
        session: PairingSession,
        team_name: Optional[str] = None,
        opponent_team_name: Optional[str] = None,
    ) -> None:
        if team_name is not None:
            session.roster.team_name = team_name
        if opponent_team_name is not None:
            session.roster.opponent_team_name = opponent_team_name

    # Protocol

    def select(
        self,
        session: PairingSession,
        slot: Union[ProtocolSlot, str],
        value: Union[str, list[str], None],
    ) -> None:
        """Record a human selection for the current step or an earlier one."""
        slot = parse_slot(slot)
        if session.current_step == SETUP_STEP:
            raise InvalidSelectionError("Start the pairing before making selections")
        if session.is_complete:
            raise InvalidSelectionError("Pairing is complete, reset to change selections")
        if slot.step > session.current_step:
            raise InvalidSelectionError(
                f"'{slot.value}' belongs to step {slot.step}, current step is {session.current_step}"
            )
        try:
            session.protocol = record_selection(session.protocol, slot, value, session.roster)
        except InvalidSelectionError as e:
            logger.warning(f"Rejected selection for {slot.value} in {session.session_id}: {e}")
            raise

    def advance(self, session: PairingSession) -> None:
        """Move to the next step; leaving step 6 computes the final pairing."""
        if session.is_complete:
            return
        if session.current_step != SETUP_STEP:
            missing = blocking_slots(session.roster, session.protocol, session.current_step)
            if missing:
                names = ", ".join(slot.value for slot in missing)
                raise IncompleteStepError(f"Step {session.current_step} is missing: {names}")

        if session.current_step == PROTOCOL_STEPS:
            session.final_pairs = reconcile(session.protocol, session.roster, session.ratings)
            logger.info(
                f"Session {session.session_id} complete: {len(session.final_pairs)} pairs, "
                f"total {total_rating(session.final_pairs)}"
            )
        session.current_step += 1

    def go_back(self, session: PairingSession) -> None:
        """Step back one step, keeping selections."""
        if session.current_step > SETUP_STEP:
            if session.is_complete:
                session.final_pairs = []
            session.current_step -= 1

    def reset(self, session: PairingSession) -> None:
        session.protocol = ProtocolState()
        session.final_pairs = []
        session.current_step = SETUP_STEP

    # Results

    def recommend(self, session: PairingSession, step: Optional[int] = None) -> Recommendation:
        step = session.current_step if step is None else step
        return self.engine.recommend(
            step, session.protocol, session.roster, session.ratings, session.method
        )

    def final_pairs(self, session: PairingSession) -> list[Pair]:
        """Final pairing when complete, otherwise a preview from current selections."""
        if session.is_complete:
            return session.final_pairs
        return reconcile(session.protocol, session.roster, session.ratings)

    def compare(self, session: PairingSession) -> dict:
        return comparison_service.compare(
            session.protocol, session.roster, session.ratings, session.method, self.max_players
        )

    def apply_optimal(self, session: PairingSession) -> list[Pair]:
        session.final_pairs = comparison_service.apply_optimal(
            session.roster, session.ratings, session.method, self.max_players
        )
        session.current_step = COMPLETE_STEP
        return session.final_pairs
