"""Rules for recording selections into the pairing protocol."""

from typing import Iterable, Union

from pairing_planner.exceptions import InvalidSelectionError, UnknownIdentifierError
from pairing_planner.models.protocol import (
    CHOICE_SOURCES,
    MAX_ATTACKERS,
    ProtocolSlot,
    ProtocolState,
    slots_for_step,
)
from pairing_planner.models.roster import Roster


def parse_slot(slot: Union[ProtocolSlot, str]) -> ProtocolSlot:
    try:
        return ProtocolSlot(slot)
    except ValueError:
        raise InvalidSelectionError(f"Unknown protocol slot '{slot}'") from None


def record_selection(
    state: ProtocolState,
    slot: Union[ProtocolSlot, str],
    value: Union[str, Iterable[str], None],
    roster: Roster,
) -> ProtocolState:
    """Return a new state with ``value`` stored in ``slot``.

    A None or empty value clears the slot. Changing an attacker slot also clears
    the matching choice slot when its pick is no longer on offer.

    Raises:
        InvalidSelectionError: wrong shape, exclusivity or choice violation
        UnknownIdentifierError: name not on the slot's side of the roster
    """
    slot = parse_slot(slot)

    if slot.is_attackers:
        names = _as_names(value)
        if len(names) > MAX_ATTACKERS:
            raise InvalidSelectionError(f"At most {MAX_ATTACKERS} attackers can be selected")
        if len(set(names)) != len(names):
            raise InvalidSelectionError("The same attacker was selected twice")
    else:
        if value is not None and not isinstance(value, str):
            raise InvalidSelectionError(f"'{slot.value}' takes a single name")
        names = (value,) if value else ()

    members = roster.player_set if slot.side == "player" else roster.opponent_set
    for name in names:
        if name not in members:
            raise UnknownIdentifierError(name, side=slot.side)

    if slot.is_choice:
        _check_choice(state, slot, names)
    else:
        _check_exclusive(state, slot, names)

    new_state = state.with_value(slot, names if slot.is_attackers else (names[0] if names else None))

    if slot.is_attackers:
        for choice_slot, source in CHOICE_SOURCES.items():
            if source == slot and new_state.get(choice_slot) not in (None, *names):
                new_state = new_state.with_value(choice_slot, None)

    return new_state


def missing_slots(state: ProtocolState, step: int) -> list[ProtocolSlot]:
    """Slots of ``step`` that are still empty."""
    return [slot for slot in slots_for_step(step) if not state.is_filled(slot)]


def slot_candidates(roster: Roster, state: ProtocolState, slot: ProtocolSlot) -> list[str]:
    """Names that could still legally fill ``slot``.

    Choice slots draw from the attackers offered in the same round; every
    other slot draws from its side's members not placed before its step.
    """
    if slot.is_choice:
        return list(state.values_of(CHOICE_SOURCES[slot]))
    players, opponents = available_members(roster, state, slot.step)
    return players if slot.side == "player" else opponents


def blocking_slots(roster: Roster, state: ProtocolState, step: int) -> list[ProtocolSlot]:
    """Empty slots of ``step`` that still have a candidate.

    Small rosters run out of members before round two ends; a slot nobody
    can fill does not hold the protocol back.
    """
    return [slot for slot in missing_slots(state, step) if slot_candidates(roster, state, slot)]


def available_members(roster: Roster, state: ProtocolState, step: int) -> tuple[list[str], list[str]]:
    """Players and opponents not placed in any slot before ``step``.

    Derived fresh from the state every call, in roster display order.
    """
    used_players = state.committed("player", before_step=step)
    used_opponents = state.committed("opponent", before_step=step)
    players = [p for p in roster.players if p not in used_players]
    opponents = [o for o in roster.opponents if o not in used_opponents]
    return players, opponents


def _as_names(value: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def _check_exclusive(state: ProtocolState, slot: ProtocolSlot, names: tuple[str, ...]) -> None:
    # Choice values always repeat an attacker of the same round, so only
    # defender and attacker slots take part in exclusivity
    for other in ProtocolSlot:
        if other == slot or other.is_choice or other.side != slot.side:
            continue
        clash = set(names) & set(state.values_of(other))
        if clash:
            name = sorted(clash)[0]
            raise InvalidSelectionError(f"'{name}' is already selected as {other.value.replace('_', ' ')}")


def _check_choice(state: ProtocolState, slot: ProtocolSlot, names: tuple[str, ...]) -> None:
    if not names:
        return
    offered = state.values_of(CHOICE_SOURCES[slot])
    if not offered:
        raise InvalidSelectionError(
            f"'{slot.value}' needs '{CHOICE_SOURCES[slot].value}' to be selected first"
        )
    if names[0] not in offered:
        raise InvalidSelectionError(f"'{names[0]}' was not offered as an attacker")
