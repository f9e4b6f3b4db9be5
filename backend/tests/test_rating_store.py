"""Tests for the roster and rating store models."""
import pytest

from pairing_planner.exceptions import (
    DuplicateIdentifierError,
    InvalidRatingError,
    UnknownIdentifierError,
)
from pairing_planner.models.roster import DEFAULT_RATING, RatingStore, Roster


def test_for_roster_fills_every_pair_with_default():
    store = RatingStore.for_roster(["A", "B"], ["X", "Y", "Z"])
    assert len(store.values) == 6
    assert all(v == DEFAULT_RATING for v in store.values.values())


def test_for_roster_uses_initial_values():
    store = RatingStore.for_roster(["A", "B"], ["X"], initial={"A": {"X": 5}})
    assert store.get("A", "X") == 5
    assert store.get("B", "X") == DEFAULT_RATING


def test_for_roster_rejects_out_of_range_initial():
    with pytest.raises(InvalidRatingError):
        RatingStore.for_roster(["A"], ["X"], initial={"A": {"X": 9}})


@pytest.mark.parametrize("value", [0, 6, -1, 2.5, "4", True])
def test_set_rating_rejects_invalid_values(value):
    """Rejected writes leave the stored value untouched."""
    store = RatingStore.for_roster(["A"], ["X"])
    with pytest.raises(InvalidRatingError):
        store.set_rating("A", "X", value)
    assert store.get("A", "X") == DEFAULT_RATING


@pytest.mark.parametrize("value", [1, 5])
def test_set_rating_accepts_bounds(value):
    store = RatingStore.for_roster(["A"], ["X"])
    store.set_rating("A", "X", value)
    assert store.get("A", "X") == value


def test_set_rating_unknown_pair():
    store = RatingStore.for_roster(["A"], ["X"])
    with pytest.raises(UnknownIdentifierError):
        store.set_rating("A", "Nobody", 4)
    assert len(store.values) == 1


def test_matrix_and_nested_views(ratings):
    matrix = ratings.matrix(["P1", "P2"], ["O1", "O2"])
    assert matrix == [[5, 4], [3, 5]]
    assert ratings.to_nested()["P4"]["O4"] == 5


def test_renamed_copies_do_not_touch_original(ratings):
    renamed = ratings.with_player_renamed("P1", "Captain")
    assert renamed.get("Captain", "O1") == 5
    assert ratings.get("P1", "O1") == 5
    with pytest.raises(UnknownIdentifierError):
        renamed.get("P1", "O1")


def test_roster_rejects_duplicates_within_and_across_sides():
    with pytest.raises(DuplicateIdentifierError):
        Roster(players=["A", "A"], opponents=["X"])
    with pytest.raises(DuplicateIdentifierError):
        Roster(players=["A"], opponents=["A"])


def test_roster_side_lookup(roster):
    assert roster.side_of("P2") == "player"
    assert roster.side_of("O2") == "opponent"
    assert roster.side_of("Z") is None
