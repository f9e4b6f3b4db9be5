"""Member name normalization.

All user-supplied player and opponent names pass through here so the roster,
the rating store and the protocol state agree on spelling.
"""

from typing import Iterable

from pairing_planner.exceptions import InvalidIdentifierError

SIDE_ALIASES: dict[str, str] = {
    "player": "player",
    "players": "player",
    "team": "player",
    "our": "player",
    "opponent": "opponent",
    "opponents": "opponent",
    "their": "opponent",
}


def normalize_name(name: str) -> str:
    """Strip surrounding whitespace; blank names are rejected."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidIdentifierError("Name must not be empty")
    return cleaned


def normalize_names(names: Iterable[str]) -> list[str]:
    return [normalize_name(name) for name in names]


def normalize_side(side: str) -> str:
    """Map a side alias to "player" or "opponent"."""
    normalized = SIDE_ALIASES.get((side or "").strip().lower())
    if normalized is None:
        raise InvalidIdentifierError(f"Unknown side '{side}', expected 'player' or 'opponent'")
    return normalized
