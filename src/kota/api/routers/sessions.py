"""Session resource router."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from kota.api.deps import existing_session_id, get_history_store
from kota.core.history import HistorySession, HistoryStore, HistoryTurn

router = APIRouter()


class SessionResponse(BaseModel):
    """Response model for session with messages."""

    id: str
    title: str | None
    message_count: int
    created_at: str
    updated_at: str
    messages: list[HistoryTurn]


@router.get("", response_model=list[HistorySession])
def list_sessions(
    store: HistoryStore = Depends(get_history_store),
) -> list[HistorySession]:
    """List all sessions."""
    return store.list_sessions()


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str = Depends(existing_session_id),
    store: HistoryStore = Depends(get_history_store),
) -> dict:
    """Get session by ID with messages."""
    session = store.create_or_open(session_id)
    messages = store.load(session_id)

    return {
        "id": session.id,
        "title": session.title,
        "message_count": len(messages),
        "created_at": session.created_at,
        "updated_at": session.updated_at,
        "messages": messages,
    }


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str = Depends(existing_session_id),
    store: HistoryStore = Depends(get_history_store),
) -> None:
    """Delete a session."""
    store.delete(session_id)
