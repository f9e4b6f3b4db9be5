"""REST endpoints for pairing sessions."""

import logging
import threading
import time
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from pairing_planner.config import settings
from pairing_planner.exceptions import (
    DuplicateIdentifierError,
    PairingPlannerError,
    UnknownIdentifierError,
)
from pairing_planner.models.pairing import Pair, total_rating
from pairing_planner.models.protocol import COMPLETE_STEP
from pairing_planner.models.roster import RatingStore, Roster
from pairing_planner.models.session import PairingSession
from pairing_planner.services.assignment_service import effective_method, solve
from pairing_planner.services.protocol_service import available_members
from pairing_planner.services.session_service import PairingSessionService
from pairing_planner.utils.identifiers import normalize_names

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pairing", tags=["pairing"])

# In-memory session storage with thread-safe access
_sessions: dict[str, PairingSession] = {}
_sessions_lock = threading.Lock()
_session_locks: dict[str, threading.Lock] = {}
_cleanup_lock = threading.Lock()
_last_cleanup = 0.0


def _is_session_expired(session: PairingSession, now: float) -> bool:
    return (now - session.last_access) >= settings.session_ttl_seconds


def _touch_session(session: PairingSession, now: float) -> None:
    session.last_access = now


def _prune_expired_sessions(now: float | None = None) -> None:
    """Remove expired sessions opportunistically."""
    global _last_cleanup
    now = now or time.time()
    if now - _last_cleanup < settings.session_cleanup_interval_seconds:
        return

    with _cleanup_lock:
        if now - _last_cleanup < settings.session_cleanup_interval_seconds:
            return

        expired: list[str] = []
        with _sessions_lock:
            for session_id, session in _sessions.items():
                lock = _session_locks.get(session_id)
                if lock and lock.locked():
                    continue
                if _is_session_expired(session, now):
                    expired.append(session_id)

            for session_id in expired:
                _sessions.pop(session_id, None)
                _session_locks.pop(session_id, None)

        if expired:
            logger.info(f"Pruned {len(expired)} expired sessions")
        _last_cleanup = now


def _get_session_with_lock(session_id: str) -> tuple[PairingSession, threading.Lock]:
    """Fetch session and its lock, creating the lock if needed."""
    _prune_expired_sessions()
    with _sessions_lock:
        session = _sessions.get(session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        lock = _session_locks.get(session_id)
        if lock is None:
            lock = threading.Lock()
            _session_locks[session_id] = lock

    return session, lock


def _open_session(session: PairingSession) -> None:
    now = time.time()
    if _is_session_expired(session, now):
        raise HTTPException(status_code=404, detail="Session expired")
    _touch_session(session, now)


def _get_service(request: Request) -> PairingSessionService:
    """Get or create the session service from app state."""
    if not hasattr(request.app.state, "session_service"):
        request.app.state.session_service = PairingSessionService(
            max_players=settings.exhaustive_max_players,
            default_rating=settings.default_rating,
            default_method=settings.default_solver_method,
        )
    return request.app.state.session_service


def _http_error(e: PairingPlannerError) -> HTTPException:
    """Translate a core error into a client error with a readable message."""
    if isinstance(e, DuplicateIdentifierError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, UnknownIdentifierError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


class SolveRequest(BaseModel):
    players: list[str]
    opponents: list[str]
    ratings: dict[str, dict[str, int]] = Field(default_factory=dict)
    method: Optional[str] = None


class StartSessionRequest(BaseModel):
    players: list[str]
    opponents: list[str]
    team_name: str = "Our team"
    opponent_team_name: str = "Opponents"
    method: Optional[str] = None
    ratings: Optional[dict[str, dict[str, int]]] = None


class RatingRequest(BaseModel):
    player: str
    opponent: str
    value: int


class MemberRequest(BaseModel):
    side: str
    name: str


class RenameRequest(BaseModel):
    side: str
    old_name: str
    new_name: str


class MethodRequest(BaseModel):
    method: Optional[str] = None


class TeamNamesRequest(BaseModel):
    team_name: Optional[str] = None
    opponent_team_name: Optional[str] = None


class SelectionRequest(BaseModel):
    slot: str
    value: Union[str, list[str], None] = None


@router.post("/solve")
async def solve_pairing(body: SolveRequest):
    """Stateless solve: match the given players and opponents and classify roles."""
    try:
        roster = Roster(
            players=normalize_names(body.players),
            opponents=normalize_names(body.opponents),
        )
        players, opponents = roster.players, roster.opponents
        ratings = RatingStore.for_roster(
            players, opponents, default=settings.default_rating, initial=body.ratings
        )
    except PairingPlannerError as e:
        raise _http_error(e)

    pairs = solve(players, opponents, ratings, body.method, settings.exhaustive_max_players)
    return {
        "method_used": effective_method(body.method, players, settings.exhaustive_max_players).value,
        "pairs": [pair.to_dict() for pair in pairs],
        "total": total_rating(pairs),
    }


@router.post("/sessions", status_code=201)
async def start_session(request: Request, body: StartSessionRequest):
    """Create a new pairing session."""
    _prune_expired_sessions()
    service = _get_service(request)
    try:
        session = service.create_session(
            players=body.players,
            opponents=body.opponents,
            team_name=body.team_name,
            opponent_team_name=body.opponent_team_name,
            method=body.method,
            ratings=body.ratings,
        )
    except PairingPlannerError as e:
        raise _http_error(e)

    now = time.time()
    _touch_session(session, now)
    with _sessions_lock:
        _sessions[session.session_id] = session
        _session_locks[session.session_id] = threading.Lock()

    return _serialize_session(session)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    """Get current session state."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        return _serialize_session(session)


@router.put("/sessions/{session_id}/ratings")
async def update_rating(request: Request, session_id: str, body: RatingRequest):
    """Set one (player, opponent) rating."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        try:
            _get_service(request).update_rating(session, body.player, body.opponent, body.value)
        except PairingPlannerError as e:
            raise _http_error(e)
        return {"ratings": session.ratings.to_nested()}


@router.post("/sessions/{session_id}/members", status_code=201)
async def add_member(request: Request, session_id: str, body: MemberRequest):
    """Add a player or opponent with default ratings."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        try:
            _get_service(request).add_member(session, body.side, body.name)
        except PairingPlannerError as e:
            raise _http_error(e)
        return _serialize_session(session)


@router.post("/sessions/{session_id}/rename")
async def rename_member(request: Request, session_id: str, body: RenameRequest):
    """Rename a player or opponent everywhere in the session."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        try:
            _get_service(request).rename(session, body.side, body.old_name, body.new_name)
        except PairingPlannerError as e:
            raise _http_error(e)
        return _serialize_session(session)


@router.put("/sessions/{session_id}/method")
async def set_method(request: Request, session_id: str, body: MethodRequest):
    """Choose the solver used for recommendations."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        _get_service(request).set_method(session, body.method)
        return {"method": session.method.value}


@router.put("/sessions/{session_id}/team-names")
async def set_team_names(request: Request, session_id: str, body: TeamNamesRequest):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        _get_service(request).set_team_names(session, body.team_name, body.opponent_team_name)
        return {
            "team_name": session.roster.team_name,
            "opponent_team_name": session.roster.opponent_team_name,
        }


@router.post("/sessions/{session_id}/selections")
async def record_selection(request: Request, session_id: str, body: SelectionRequest):
    """Record the human's choice for one protocol slot."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        try:
            _get_service(request).select(session, body.slot, body.value)
        except PairingPlannerError as e:
            raise _http_error(e)
        return {
            "current_step": session.current_step,
            "protocol": session.protocol.to_dict(),
        }


@router.post("/sessions/{session_id}/steps/next")
async def next_step(request: Request, session_id: str, include_recommendations: bool = False):
    """Advance the wizard; leaving step 6 computes the final pairing."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        service = _get_service(request)
        try:
            service.advance(session)
        except PairingPlannerError as e:
            raise _http_error(e)

        response = _serialize_session(session)
        if include_recommendations and not session.is_complete:
            response["recommendation"] = service.recommend(session).to_dict()
        return response


@router.post("/sessions/{session_id}/steps/previous")
async def previous_step(request: Request, session_id: str):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        _get_service(request).go_back(session)
        return _serialize_session(session)


@router.post("/sessions/{session_id}/reset")
async def reset_session(request: Request, session_id: str):
    """Clear every selection and return to setup."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        _get_service(request).reset(session)
        return _serialize_session(session)


@router.get("/sessions/{session_id}/recommendations")
async def get_recommendations(request: Request, session_id: str, step: Optional[int] = None):
    """Suggestion for a protocol step, the current one by default."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        service = _get_service(request)
        step = session.current_step if step is None else step
        players, opponents = available_members(session.roster, session.protocol, step)
        return {
            "for_step": step,
            "method_used": effective_method(session.method, players, service.max_players).value,
            "available_players": players,
            "available_opponents": opponents,
            "recommendation": service.recommend(session, step).to_dict(),
        }


@router.get("/sessions/{session_id}/final")
async def get_final_pairs(request: Request, session_id: str):
    """Final pairing, or a preview from the selections made so far."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        pairs = _get_service(request).final_pairs(session)
        return {
            "complete": session.is_complete,
            **_serialize_pairs(pairs),
        }


@router.get("/sessions/{session_id}/comparison")
async def get_comparison(request: Request, session_id: str):
    """Manual vs hybrid vs fully solved rating totals."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        return _get_service(request).compare(session)


@router.post("/sessions/{session_id}/final/apply-optimal")
async def apply_optimal(request: Request, session_id: str):
    """Replace the final pairing with the solver's pairing of the whole roster."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _open_session(session)
        pairs = _get_service(request).apply_optimal(session)
        return {
            "complete": session.is_complete,
            **_serialize_pairs(pairs),
        }


@router.delete("/sessions/{session_id}")
async def end_session(session_id: str):
    """End session early."""
    with _sessions_lock:
        if session_id in _sessions:
            del _sessions[session_id]
            _session_locks.pop(session_id, None)
            logger.info(f"Ended session {session_id}")
    return {"status": "ended"}


# Helper functions

def _serialize_pairs(pairs: list[Pair]) -> dict:
    return {
        "pairs": [pair.to_dict() for pair in pairs],
        "total": total_rating(pairs),
    }


def _serialize_session(session: PairingSession) -> dict:
    """Serialize PairingSession to dict."""
    return {
        "session_id": session.session_id,
        "team_name": session.roster.team_name,
        "opponent_team_name": session.roster.opponent_team_name,
        "players": list(session.roster.players),
        "opponents": list(session.roster.opponents),
        "ratings": session.ratings.to_nested(),
        "method": session.method.value,
        "current_step": session.current_step,
        "complete": session.current_step == COMPLETE_STEP,
        "protocol": session.protocol.to_dict(),
        "final_pairs": [pair.to_dict() for pair in session.final_pairs],
    }
