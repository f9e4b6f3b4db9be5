"""Roster and rating store models."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from pairing_planner.exceptions import (
    DuplicateIdentifierError,
    InvalidRatingError,
    UnknownIdentifierError,
)

MIN_RATING = 1
MAX_RATING = 5
DEFAULT_RATING = 3


@dataclass
class Roster:
    """Both teams' member names in display order.

    Names are unique within a side and the two sides never share a name, so
    any identifier can be resolved to exactly one member.
    """

    players: list[str]
    opponents: list[str]
    team_name: str = "Our team"
    opponent_team_name: str = "Opponents"

    def __post_init__(self):
        self.players = list(self.players)
        self.opponents = list(self.opponents)
        seen: set[str] = set()
        for name in self.players + self.opponents:
            if name in seen:
                raise DuplicateIdentifierError(name)
            seen.add(name)

    @property
    def player_set(self) -> frozenset[str]:
        return frozenset(self.players)

    @property
    def opponent_set(self) -> frozenset[str]:
        return frozenset(self.opponents)

    def contains(self, name: str) -> bool:
        return name in self.player_set or name in self.opponent_set

    def side_of(self, name: str) -> Optional[str]:
        """Return "player", "opponent" or None."""
        if name in self.player_set:
            return "player"
        if name in self.opponent_set:
            return "opponent"
        return None

    def copy(self) -> "Roster":
        return Roster(
            players=list(self.players),
            opponents=list(self.opponents),
            team_name=self.team_name,
            opponent_team_name=self.opponent_team_name,
        )


@dataclass
class RatingStore:
    """Compatibility rating for every (player, opponent) pair.

    Ratings are integers in [MIN_RATING, MAX_RATING]. Higher means the player
    is more comfortable against that opponent.
    """

    values: dict[tuple[str, str], int] = field(default_factory=dict)

    @classmethod
    def for_roster(
        cls,
        players: Iterable[str],
        opponents: Iterable[str],
        default: int = DEFAULT_RATING,
        initial: Optional[dict[str, dict[str, int]]] = None,
    ) -> "RatingStore":
        """Build a fully populated store.

        Args:
            players: Our team's members
            opponents: Opposing team's members
            default: Rating for pairs not present in ``initial``
            initial: Optional nested mapping player -> opponent -> rating

        Returns:
            A store holding exactly len(players) * len(opponents) entries
        """
        validate_rating(default)
        opponents = list(opponents)
        initial = initial or {}
        store = cls()
        for player in players:
            row = initial.get(player, {})
            for opponent in opponents:
                value = row.get(opponent, default)
                validate_rating(value)
                store.values[(player, opponent)] = value
        return store

    def get(self, player: str, opponent: str) -> int:
        try:
            return self.values[(player, opponent)]
        except KeyError:
            raise UnknownIdentifierError(f"{player} / {opponent}", side="pair") from None

    def set_rating(self, player: str, opponent: str, value: int) -> None:
        """Write one rating; out-of-range values are rejected untouched."""
        validate_rating(value)
        if (player, opponent) not in self.values:
            raise UnknownIdentifierError(f"{player} / {opponent}", side="pair")
        self.values[(player, opponent)] = value

    def row(self, player: str, opponents: Iterable[str]) -> dict[str, int]:
        return {opponent: self.get(player, opponent) for opponent in opponents}

    def matrix(self, players: list[str], opponents: list[str]) -> list[list[int]]:
        """Ratings as rows of players by columns of opponents."""
        return [[self.get(p, o) for o in opponents] for p in players]

    def to_nested(self) -> dict[str, dict[str, int]]:
        nested: dict[str, dict[str, int]] = {}
        for (player, opponent), value in self.values.items():
            nested.setdefault(player, {})[opponent] = value
        return nested

    def copy(self) -> "RatingStore":
        return RatingStore(values=dict(self.values))

    def with_player_renamed(self, old: str, new: str) -> "RatingStore":
        return RatingStore(values={
            (new if p == old else p, o): v for (p, o), v in self.values.items()
        })

    def with_opponent_renamed(self, old: str, new: str) -> "RatingStore":
        return RatingStore(values={
            (p, new if o == old else o): v for (p, o), v in self.values.items()
        })

    def with_player_added(self, player: str, opponents: Iterable[str], default: int = DEFAULT_RATING) -> "RatingStore":
        values = dict(self.values)
        for opponent in opponents:
            values[(player, opponent)] = default
        return RatingStore(values=values)

    def with_opponent_added(self, opponent: str, players: Iterable[str], default: int = DEFAULT_RATING) -> "RatingStore":
        values = dict(self.values)
        for player in players:
            values[(player, opponent)] = default
        return RatingStore(values=values)


def validate_rating(value) -> int:
    """Reject anything that is not an int in [MIN_RATING, MAX_RATING]."""
    # bool is an int subclass but never a rating
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRatingError(value, MIN_RATING, MAX_RATING)
    if not MIN_RATING <= value <= MAX_RATING:
        raise InvalidRatingError(value, MIN_RATING, MAX_RATING)
    return value
