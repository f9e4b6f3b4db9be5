"""Pairing protocol state: the human's selections across the six steps."""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional, Union

PROTOCOL_STEPS = 6
SETUP_STEP = 0
COMPLETE_STEP = PROTOCOL_STEPS + 1


class ProtocolSlot(str, Enum):
    """Named selection slots, in protocol order."""

    FIRST_DEFENDER = "first_defender"
    OPPONENT_FIRST_DEFENDER = "opponent_first_defender"
    FIRST_ATTACKERS = "first_attackers"
    OPPONENT_FIRST_ATTACKERS = "opponent_first_attackers"
    FIRST_ATTACKER_CHOICE = "first_attacker_choice"
    OPPONENT_FIRST_ATTACKER_CHOICE = "opponent_first_attacker_choice"
    SECOND_DEFENDER = "second_defender"
    OPPONENT_SECOND_DEFENDER = "opponent_second_defender"
    SECOND_ATTACKERS = "second_attackers"
    OPPONENT_SECOND_ATTACKERS = "opponent_second_attackers"
    SECOND_ATTACKER_CHOICE = "second_attacker_choice"
    OPPONENT_SECOND_ATTACKER_CHOICE = "opponent_second_attacker_choice"

    @property
    def step(self) -> int:
        return SLOT_STEPS[self]

    @property
    def side(self) -> str:
        """Which roster side ("player" or "opponent") the slot's values come from."""
        return SLOT_SIDES[self]

    @property
    def is_attackers(self) -> bool:
        return self in ATTACKER_SLOTS

    @property
    def is_choice(self) -> bool:
        return self in CHOICE_SOURCES


SLOT_STEPS: dict[ProtocolSlot, int] = {
    ProtocolSlot.FIRST_DEFENDER: 1,
    ProtocolSlot.OPPONENT_FIRST_DEFENDER: 1,
    ProtocolSlot.FIRST_ATTACKERS: 2,
    ProtocolSlot.OPPONENT_FIRST_ATTACKERS: 2,
    ProtocolSlot.FIRST_ATTACKER_CHOICE: 3,
    ProtocolSlot.OPPONENT_FIRST_ATTACKER_CHOICE: 3,
    ProtocolSlot.SECOND_DEFENDER: 4,
    ProtocolSlot.OPPONENT_SECOND_DEFENDER: 4,
    ProtocolSlot.SECOND_ATTACKERS: 5,
    ProtocolSlot.OPPONENT_SECOND_ATTACKERS: 5,
    ProtocolSlot.SECOND_ATTACKER_CHOICE: 6,
    ProtocolSlot.OPPONENT_SECOND_ATTACKER_CHOICE: 6,
}

# Our choice picks one of their attackers, their choice picks one of ours
SLOT_SIDES: dict[ProtocolSlot, str] = {
    ProtocolSlot.FIRST_DEFENDER: "player",
    ProtocolSlot.OPPONENT_FIRST_DEFENDER: "opponent",
    ProtocolSlot.FIRST_ATTACKERS: "player",
    ProtocolSlot.OPPONENT_FIRST_ATTACKERS: "opponent",
    ProtocolSlot.FIRST_ATTACKER_CHOICE: "opponent",
    ProtocolSlot.OPPONENT_FIRST_ATTACKER_CHOICE: "player",
    ProtocolSlot.SECOND_DEFENDER: "player",
    ProtocolSlot.OPPONENT_SECOND_DEFENDER: "opponent",
    ProtocolSlot.SECOND_ATTACKERS: "player",
    ProtocolSlot.OPPONENT_SECOND_ATTACKERS: "opponent",
    ProtocolSlot.SECOND_ATTACKER_CHOICE: "opponent",
    ProtocolSlot.OPPONENT_SECOND_ATTACKER_CHOICE: "player",
}

ATTACKER_SLOTS = frozenset({
    ProtocolSlot.FIRST_ATTACKERS,
    ProtocolSlot.OPPONENT_FIRST_ATTACKERS,
    ProtocolSlot.SECOND_ATTACKERS,
    ProtocolSlot.OPPONENT_SECOND_ATTACKERS,
})

# choice slot -> the attacker slot it must choose from
CHOICE_SOURCES: dict[ProtocolSlot, ProtocolSlot] = {
    ProtocolSlot.FIRST_ATTACKER_CHOICE: ProtocolSlot.OPPONENT_FIRST_ATTACKERS,
    ProtocolSlot.OPPONENT_FIRST_ATTACKER_CHOICE: ProtocolSlot.FIRST_ATTACKERS,
    ProtocolSlot.SECOND_ATTACKER_CHOICE: ProtocolSlot.OPPONENT_SECOND_ATTACKERS,
    ProtocolSlot.OPPONENT_SECOND_ATTACKER_CHOICE: ProtocolSlot.SECOND_ATTACKERS,
}

MAX_ATTACKERS = 2

SlotValue = Union[str, tuple[str, ...], None]


def slots_for_step(step: int) -> list[ProtocolSlot]:
    """Slots filled during a protocol step, ours first."""
    return [slot for slot in ProtocolSlot if slot.step == step]


@dataclass(frozen=True)
class ProtocolState:
    """Immutable record of the human's selections.

    Single-identifier slots hold a name or None; attacker slots hold a tuple of
    up to two names. Every change produces a new state.
    """

    first_defender: Optional[str] = None
    opponent_first_defender: Optional[str] = None
    first_attackers: tuple[str, ...] = ()
    opponent_first_attackers: tuple[str, ...] = ()
    first_attacker_choice: Optional[str] = None
    opponent_first_attacker_choice: Optional[str] = None
    second_defender: Optional[str] = None
    opponent_second_defender: Optional[str] = None
    second_attackers: tuple[str, ...] = ()
    opponent_second_attackers: tuple[str, ...] = ()
    second_attacker_choice: Optional[str] = None
    opponent_second_attacker_choice: Optional[str] = None

    def get(self, slot: ProtocolSlot) -> SlotValue:
        return getattr(self, slot.value)

    def values_of(self, slot: ProtocolSlot) -> tuple[str, ...]:
        """Slot contents as a tuple, empty when unset."""
        value = self.get(slot)
        if value is None:
            return ()
        if isinstance(value, tuple):
            return value
        return (value,)

    def is_filled(self, slot: ProtocolSlot) -> bool:
        return bool(self.values_of(slot))

    def with_value(self, slot: ProtocolSlot, value: SlotValue) -> "ProtocolState":
        if slot.is_attackers:
            value = tuple(value or ())
        return replace(self, **{slot.value: value})

    def committed(self, side: str, before_step: int = COMPLETE_STEP) -> set[str]:
        """Identifiers of one side placed in any slot of a step before ``before_step``."""
        committed: set[str] = set()
        for slot in ProtocolSlot:
            if slot.side == side and slot.step < before_step:
                committed.update(self.values_of(slot))
        return committed

    def renamed(self, old: str, new: str) -> "ProtocolState":
        """Copy with every occurrence of ``old`` replaced by ``new``."""
        changes = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                changes[f.name] = tuple(new if v == old else v for v in value)
            elif value == old:
                changes[f.name] = new
        return replace(self, **changes)

    @property
    def is_empty(self) -> bool:
        return not any(self.is_filled(slot) for slot in ProtocolSlot)

    @property
    def is_complete(self) -> bool:
        return all(self.is_filled(slot) for slot in ProtocolSlot)

    def to_dict(self) -> dict:
        return {
            slot.value: list(value) if isinstance(value, tuple) else value
            for slot in ProtocolSlot
            for value in [self.get(slot)]
        }
