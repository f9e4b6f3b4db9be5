"""Roster edits: renames, new members and rating writes."""

import logging

from pairing_planner.exceptions import (
    DuplicateIdentifierError,
    InvalidRatingError,
    UnknownIdentifierError,
)
from pairing_planner.models.protocol import ProtocolState
from pairing_planner.models.roster import DEFAULT_RATING, RatingStore, Roster, validate_rating
from pairing_planner.utils.identifiers import normalize_name, normalize_side

logger = logging.getLogger(__name__)


def apply_rename(
    side: str,
    old: str,
    new: str,
    roster: Roster,
    ratings: RatingStore,
    protocol: ProtocolState,
) -> tuple[Roster, RatingStore, ProtocolState]:
    """Rename one member everywhere at once.

    Returns updated copies of the roster, the rating store and the protocol
    state; the inputs are never modified, so a rejected rename leaves the
    caller's state exactly as it was.

    Raises:
        InvalidIdentifierError: blank new name or unknown side
        UnknownIdentifierError: ``old`` is not on that side
        DuplicateIdentifierError: ``new`` is already a player or opponent
    """
    side = normalize_side(side)
    new = normalize_name(new)
    members = roster.players if side == "player" else roster.opponents
    if old not in members:
        raise UnknownIdentifierError(old, side=side)
    if new == old:
        return roster, ratings, protocol
    if roster.contains(new):
        logger.warning(f"Rejected rename of {side} '{old}' to existing name '{new}'")
        raise DuplicateIdentifierError(new)

    new_roster = roster.copy()
    if side == "player":
        new_roster.players = [new if p == old else p for p in roster.players]
        new_ratings = ratings.with_player_renamed(old, new)
    else:
        new_roster.opponents = [new if o == old else o for o in roster.opponents]
        new_ratings = ratings.with_opponent_renamed(old, new)

    return new_roster, new_ratings, protocol.renamed(old, new)


def add_member(
    side: str,
    name: str,
    roster: Roster,
    ratings: RatingStore,
    default: int = DEFAULT_RATING,
) -> tuple[Roster, RatingStore]:
    """Append a player or opponent, rating every new pair at ``default``."""
    side = normalize_side(side)
    name = normalize_name(name)
    validate_rating(default)
    if roster.contains(name):
        raise DuplicateIdentifierError(name)

    new_roster = roster.copy()
    if side == "player":
        new_roster.players.append(name)
        new_ratings = ratings.with_player_added(name, roster.opponents, default)
    else:
        new_roster.opponents.append(name)
        new_ratings = ratings.with_opponent_added(name, roster.players, default)
    return new_roster, new_ratings


def update_rating(ratings: RatingStore, player: str, opponent: str, value: int) -> None:
    """Bounded write into the store; invalid values leave it untouched."""
    try:
        ratings.set_rating(player, opponent, value)
    except InvalidRatingError:
        logger.warning(f"Rejected rating {value!r} for {player} vs {opponent}")
        raise
