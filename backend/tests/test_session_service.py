"""Tests for the pairing session service."""
import logging

import pytest

from pairing_planner.exceptions import (
    DuplicateIdentifierError,
    IncompleteStepError,
    InvalidIdentifierError,
    InvalidSelectionError,
)
from pairing_planner.models.pairing import SolverMethod, total_rating
from pairing_planner.models.protocol import COMPLETE_STEP, PROTOCOL_STEPS, slots_for_step
from pairing_planner.models.session import PairingSession
from pairing_planner.services.session_service import PairingSessionService


@pytest.fixture
def service():
    return PairingSessionService()


@pytest.fixture
def session(roster, ratings):
    return PairingSession(session_id="pair_test", roster=roster, ratings=ratings)


def walk_protocol(service, session, state, last_step=PROTOCOL_STEPS):
    """Select every slot of ``state`` step by step and advance past each."""
    if session.current_step == 0:
        service.advance(session)
    for step in range(session.current_step, last_step + 1):
        for slot in slots_for_step(step):
            service.select(session, slot, state.get(slot))
        service.advance(session)


class TestCreateSession:
    def test_defaults(self, service):
        session = service.create_session(["A", "B"], ["X", "Y"])

        assert session.session_id.startswith("pair_")
        assert session.current_step == 0
        assert session.method == SolverMethod.FULL
        assert session.ratings.get("B", "Y") == 3
        assert session.protocol.is_empty

    def test_initial_ratings_and_stripped_names(self, service):
        session = service.create_session([" A "], ["X"], ratings={"A": {"X": 5}})

        assert session.roster.players == ["A"]
        assert session.ratings.get("A", "X") == 5

    def test_unknown_method_means_optimal(self, service):
        session = service.create_session(["A"], ["X"], method="simulated-annealing")
        assert session.method == SolverMethod.OPTIMAL

    def test_duplicate_names_rejected(self, service):
        with pytest.raises(DuplicateIdentifierError):
            service.create_session(["A", "X"], ["X"])

    def test_blank_name_rejected(self, service):
        with pytest.raises(InvalidIdentifierError):
            service.create_session(["A", "  "], ["X"])

    def test_creation_is_logged(self, service, caplog):
        with caplog.at_level(logging.INFO):
            session = service.create_session(["A"], ["X"])
        assert session.session_id in caplog.text


class TestWizard:
    def test_selection_rejected_during_setup(self, service, session):
        with pytest.raises(InvalidSelectionError, match="Start the pairing"):
            service.select(session, "first_defender", "P1")

    def test_selection_rejected_for_later_step(self, service, session):
        service.advance(session)
        with pytest.raises(InvalidSelectionError, match="belongs to step 4"):
            service.select(session, "second_defender", "P1")

    def test_unknown_slot(self, service, session):
        service.advance(session)
        with pytest.raises(InvalidSelectionError, match="Unknown protocol slot"):
            service.select(session, "third_defender", "P1")

    def test_advance_requires_all_slots(self, service, session):
        service.advance(session)
        service.select(session, "first_defender", "P1")

        with pytest.raises(IncompleteStepError, match="opponent_first_defender"):
            service.advance(session)
        assert session.current_step == 1

    def test_earlier_step_can_be_edited(self, service, session, round_one):
        walk_protocol(service, session, round_one, last_step=3)
        assert session.current_step == 4

        service.select(session, "opponent_first_defender", "O5")
        assert session.protocol.opponent_first_defender == "O5"

    def test_full_walk_completes(self, service, session, full_protocol):
        walk_protocol(service, session, full_protocol)

        assert session.is_complete
        assert session.current_step == COMPLETE_STEP
        assert len(session.final_pairs) == 5
        assert total_rating(session.final_pairs) == 15

    def test_no_selection_after_completion(self, service, session, full_protocol):
        walk_protocol(service, session, full_protocol)
        with pytest.raises(InvalidSelectionError, match="complete"):
            service.select(session, "first_defender", "P2")

    def test_advance_when_complete_is_a_no_op(self, service, session, full_protocol):
        walk_protocol(service, session, full_protocol)
        service.advance(session)
        assert session.current_step == COMPLETE_STEP

    def test_back_from_complete_clears_result(self, service, session, full_protocol):
        walk_protocol(service, session, full_protocol)
        service.go_back(session)

        assert session.current_step == PROTOCOL_STEPS
        assert session.final_pairs == []
        assert session.protocol == full_protocol

    def test_back_stops_at_setup(self, service, session):
        service.go_back(session)
        assert session.current_step == 0

    def test_reset(self, service, session, full_protocol):
        walk_protocol(service, session, full_protocol)
        service.reset(session)

        assert session.current_step == 0
        assert session.protocol.is_empty
        assert session.final_pairs == []


class TestRecommendations:
    def test_recommends_for_current_step(self, service, session):
        service.advance(session)
        rec = service.recommend(session)
        assert rec.step == 1
        assert rec.defender == "P1"

    def test_explicit_step(self, service, session, round_one):
        walk_protocol(service, session, round_one, last_step=3)
        rec = service.recommend(session, step=3)
        assert rec.attacker_choice == "O1"

    def test_setup_step_has_no_recommendation(self, service, session):
        assert service.recommend(session).is_empty


class TestEdits:
    def test_rename_updates_selections_and_result(self, service, session, full_protocol):
        walk_protocol(service, session, full_protocol)
        service.rename(session, "player", "P1", "Ace")

        assert session.protocol.first_defender == "Ace"
        assert session.final_pairs[0].player == "Ace"
        assert session.ratings.get("Ace", "O1") == 5

    def test_failed_rename_keeps_state(self, service, session, round_one):
        walk_protocol(service, session, round_one, last_step=3)
        with pytest.raises(DuplicateIdentifierError):
            service.rename(session, "player", "P1", "P2")

        assert session.roster.players[0] == "P1"
        assert session.protocol.first_defender == "P1"

    def test_add_member_uses_default_rating(self, roster, ratings):
        service = PairingSessionService(default_rating=2)
        session = PairingSession(session_id="pair_test", roster=roster, ratings=ratings)
        service.add_member(session, "opponent", "O6")

        assert session.roster.opponents[-1] == "O6"
        assert session.ratings.get("P1", "O6") == 2

    def test_set_method_and_team_names(self, service, session):
        service.set_method(session, "greedy")
        service.set_team_names(session, opponent_team_name="Rivals")

        assert session.method == SolverMethod.GREEDY
        assert session.roster.team_name == "Our team"
        assert session.roster.opponent_team_name == "Rivals"


class TestResults:
    def test_final_pairs_preview_before_completion(self, service, session, round_one):
        walk_protocol(service, session, round_one, last_step=3)
        preview = service.final_pairs(session)

        assert [(p.player, p.opponent) for p in preview] == [("P1", "O1"), ("P3", "O3"), ("P2", "O2")]
        assert session.final_pairs == []

    def test_compare(self, service, session, full_protocol):
        walk_protocol(service, session, full_protocol)
        result = service.compare(session)
        assert result["manual"] == 15
        assert result["optimal"] == 24

    def test_apply_optimal_completes_session(self, service, session):
        pairs = service.apply_optimal(session)

        assert session.is_complete
        assert total_rating(pairs) == 24
        assert service.final_pairs(session) == pairs


class TestSmallRosters:
    SELECTIONS = {
        "first_defender": "P1",
        "opponent_first_defender": "O1",
        "first_attackers": ["P2", "P3"],
        "opponent_first_attackers": ["O2", "O3"],
        "first_attacker_choice": "O2",
        "opponent_first_attacker_choice": "P2",
        "second_defender": "P4",
        "opponent_second_defender": "O4",
    }

    def test_four_a_side_reaches_completion(self, service):
        session = service.create_session(["P1", "P2", "P3", "P4"], ["O1", "O2", "O3", "O4"])
        service.advance(session)
        for step in range(1, PROTOCOL_STEPS + 1):
            for slot in slots_for_step(step):
                if slot.value in self.SELECTIONS:
                    service.select(session, slot, self.SELECTIONS[slot.value])
            service.advance(session)

        assert session.is_complete
        pairs = session.final_pairs
        assert [(p.player, p.opponent) for p in pairs] == [("P1", "O2"), ("P2", "O1"), ("P3", "O3")]
        assert len(pairs) < 5

    def test_step_with_candidates_still_blocks(self, service):
        session = service.create_session(["P1", "P2", "P3", "P4"], ["O1", "O2", "O3", "O4"])
        service.advance(session)
        for step in range(1, 4):
            for slot in slots_for_step(step):
                service.select(session, slot, self.SELECTIONS[slot.value])
            service.advance(session)

        service.select(session, "second_defender", "P4")
        with pytest.raises(IncompleteStepError, match="opponent_second_defender"):
            service.advance(session)
