"""FastAPI REST endpoints for calculator sessions.

Routes
------
GET    /keypad                 Keypad layout (button labels, row by row)
POST   /sessions               Open a new calculator session
GET    /sessions               List sessions
GET    /sessions/{id}          Current display of a session
POST   /sessions/{id}/keys     Press one key
POST   /sessions/{id}/copy     Copy the answer (only right after equals)
DELETE /sessions/{id}          Close a session
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from models import KEYPAD_LAYOUT, CopyResponse, KeyPress, SessionView
from store import SessionNotFoundError, SessionStateError, SessionStore

router = APIRouter(tags=["calculator"])

# The store instance is injected by the app factory (see app.py).
_store: SessionStore | None = None


def set_store(store: SessionStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> SessionStore:
    assert _store is not None, "Store not initialized"
    return _store


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class KeypadResponse(BaseModel):
    rows: list[list[str]]


class SessionListResponse(BaseModel):
    items: list[SessionView]
    total: int


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session not found: {session_id}")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/keypad", response_model=KeypadResponse)
def get_keypad() -> KeypadResponse:
    """Button labels in keypad order."""
    return KeypadResponse(rows=[[k.value for k in row] for row in KEYPAD_LAYOUT])


@router.post("/sessions", response_model=SessionView, status_code=201)
def create_session() -> SessionView:
    """Open a new session showing 0."""
    return get_store().create().view()


@router.get("/sessions", response_model=SessionListResponse)
def list_sessions(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> SessionListResponse:
    store = get_store()
    items = [s.view() for s in store.list(offset=offset, limit=limit)]
    return SessionListResponse(items=items, total=store.count())


@router.get("/sessions/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
    try:
        return get_store().get(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/sessions/{session_id}/keys", response_model=SessionView)
def press_key(session_id: str, payload: KeyPress) -> SessionView:
    """Press one keypad button and return the updated display."""
    store = get_store()
    try:
        store.press(session_id, payload.key)
        return store.get(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)
    except SessionStateError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/sessions/{session_id}/copy", response_model=CopyResponse)
def copy_answer(session_id: str) -> CopyResponse:
    """Return the answer text for the clipboard."""
    try:
        text = get_store().copy(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)
    if text is None:
        raise HTTPException(status_code=409, detail="No completed answer to copy")
    return CopyResponse(text=text)


@router.delete("/sessions/{session_id}", response_model=SessionView)
def delete_session(session_id: str) -> SessionView:
    """Close a session and return its final view."""
    try:
        return get_store().delete(session_id).view()
    except SessionNotFoundError:
        raise _not_found(session_id)
