"""Tests for roster edits: renames, additions and rating writes."""
import logging

import pytest

from pairing_planner.exceptions import (
    DuplicateIdentifierError,
    InvalidIdentifierError,
    InvalidRatingError,
    UnknownIdentifierError,
)
from pairing_planner.models.protocol import ProtocolState
from pairing_planner.services.roster_service import add_member, apply_rename, update_rating


class TestRename:
    def test_rename_player_everywhere(self, roster, ratings, round_one):
        new_roster, new_ratings, new_state = apply_rename("player", "P1", "Ace", roster, ratings, round_one)

        assert new_roster.players == ["Ace", "P2", "P3", "P4", "P5"]
        assert new_ratings.get("Ace", "O1") == 5
        assert ("P1", "O1") not in new_ratings.values
        assert new_state.first_defender == "Ace"

    def test_rename_opponent_inside_attacker_slots(self, roster, ratings, round_one):
        _, new_ratings, new_state = apply_rename("opponents", "O4", "Zed", roster, ratings, round_one)

        assert new_state.opponent_first_attackers == ("O1", "Zed")
        assert new_ratings.get("P4", "Zed") == 5

    def test_inputs_are_untouched(self, roster, ratings, round_one):
        apply_rename("player", "P1", "Ace", roster, ratings, round_one)

        assert roster.players[0] == "P1"
        assert ratings.get("P1", "O1") == 5
        assert round_one.first_defender == "P1"

    def test_round_trip_restores_ratings(self, roster, ratings):
        state = ProtocolState()
        r1, s1, p1 = apply_rename("player", "P2", "Temp", roster, ratings, state)
        r2, s2, _ = apply_rename("player", "Temp", "P2", r1, s1, p1)

        assert r2.players == roster.players
        assert s2.values == ratings.values

    def test_new_name_is_stripped(self, roster, ratings):
        new_roster, _, _ = apply_rename("player", "P1", "  Ace  ", roster, ratings, ProtocolState())
        assert new_roster.players[0] == "Ace"

    def test_same_name_is_a_no_op(self, roster, ratings, round_one):
        result = apply_rename("player", "P1", "P1", roster, ratings, round_one)
        assert result == (roster, ratings, round_one)

    @pytest.mark.parametrize("taken", ["P2", "O3"])
    def test_duplicate_rejected(self, roster, ratings, round_one, taken, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(DuplicateIdentifierError, match="already exists"):
                apply_rename("player", "P1", taken, roster, ratings, round_one)

        assert roster.players[0] == "P1"
        assert "Rejected rename" in caplog.text

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_rejected(self, roster, ratings, blank):
        with pytest.raises(InvalidIdentifierError):
            apply_rename("player", "P1", blank, roster, ratings, ProtocolState())

    def test_unknown_member(self, roster, ratings):
        with pytest.raises(UnknownIdentifierError):
            apply_rename("player", "O1", "X", roster, ratings, ProtocolState())

    def test_unknown_side(self, roster, ratings):
        with pytest.raises(InvalidIdentifierError):
            apply_rename("coach", "P1", "X", roster, ratings, ProtocolState())


class TestAddMember:
    def test_add_player_fills_default_row(self, roster, ratings):
        new_roster, new_ratings = add_member("player", "P6", roster, ratings)

        assert new_roster.players[-1] == "P6"
        assert new_ratings.row("P6", roster.opponents) == {o: 3 for o in roster.opponents}
        assert len(new_ratings.values) == 30
        assert len(ratings.values) == 25

    def test_add_opponent_with_custom_default(self, roster, ratings):
        new_roster, new_ratings = add_member("opponent", "O6", roster, ratings, default=1)

        assert new_roster.opponents[-1] == "O6"
        assert all(new_ratings.get(p, "O6") == 1 for p in roster.players)

    def test_duplicate_rejected(self, roster, ratings):
        with pytest.raises(DuplicateIdentifierError):
            add_member("opponent", "P1", roster, ratings)


class TestUpdateRating:
    def test_valid_write(self, ratings):
        update_rating(ratings, "P3", "O1", 4)
        assert ratings.get("P3", "O1") == 4

    @pytest.mark.parametrize("value", [0, 6, True, "5", 2.5])
    def test_invalid_write_leaves_store(self, ratings, value, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(InvalidRatingError):
                update_rating(ratings, "P3", "O1", value)

        assert ratings.get("P3", "O1") == 2
        assert "Rejected rating" in caplog.text

    def test_unknown_pair(self, ratings):
        with pytest.raises(UnknownIdentifierError):
            update_rating(ratings, "P3", "Nobody", 3)
