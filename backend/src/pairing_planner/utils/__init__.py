"""Utility modules for pairing_planner."""

from pairing_planner.utils.identifiers import (
    SIDE_ALIASES,
    normalize_name,
    normalize_names,
    normalize_side,
)

__all__ = [
    "SIDE_ALIASES",
    "normalize_name",
    "normalize_names",
    "normalize_side",
]
