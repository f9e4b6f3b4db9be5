"""Shared fixtures: a 5-a-side roster with a known optimal pairing."""
from dataclasses import replace

import pytest

from pairing_planner.models.protocol import ProtocolState
from pairing_planner.models.roster import RatingStore, Roster

PLAYERS = ["P1", "P2", "P3", "P4", "P5"]
OPPONENTS = ["O1", "O2", "O3", "O4", "O5"]

# The diagonal is the unique best pairing (total 24)
RATINGS = {
    "P1": {"O1": 5, "O2": 4, "O3": 4, "O4": 3, "O5": 4},
    "P2": {"O1": 3, "O2": 5, "O3": 3, "O4": 3, "O5": 3},
    "P3": {"O1": 2, "O2": 2, "O3": 5, "O4": 2, "O5": 2},
    "P4": {"O1": 1, "O2": 1, "O3": 1, "O4": 5, "O5": 1},
    "P5": {"O1": 1, "O2": 1, "O3": 1, "O4": 1, "O5": 4},
}


@pytest.fixture
def roster():
    return Roster(players=list(PLAYERS), opponents=list(OPPONENTS))


@pytest.fixture
def ratings():
    return RatingStore.for_roster(PLAYERS, OPPONENTS, initial=RATINGS)


@pytest.fixture
def round_one():
    """Protocol state after steps 1-3."""
    return ProtocolState(
        first_defender="P1",
        opponent_first_defender="O3",
        first_attackers=("P3", "P2"),
        opponent_first_attackers=("O1", "O4"),
        first_attacker_choice="O1",
        opponent_first_attacker_choice="P3",
    )


@pytest.fixture
def full_protocol(round_one):
    """Protocol state with all six steps filled."""
    return replace(
        round_one,
        second_defender="P4",
        opponent_second_defender="O2",
        second_attackers=("P5",),
        opponent_second_attackers=("O5",),
        second_attacker_choice="O5",
        opponent_second_attacker_choice="P5",
    )
