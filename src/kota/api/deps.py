"""Request-scoped lookups shared by the routers."""

from fastapi import Depends, HTTPException, Request

from kota.core.context import SharedContext
from kota.core.history import HistoryStore
from kota.core.skill_loader import SkillProfile


def get_context(request: Request) -> SharedContext:
    return request.app.state.context


def get_history_store(ctx: SharedContext = Depends(get_context)) -> HistoryStore:
    return ctx.history_store


def existing_session_id(
    session_id: str, store: HistoryStore = Depends(get_history_store)
) -> str:
    """Resolve a path session id, 404 when malformed or never written."""
    if not HistoryStore.is_valid_id(session_id) or not store.exists(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session_id


def skill_profile(
    skill: str | None = None, ctx: SharedContext = Depends(get_context)
) -> SkillProfile | None:
    """Load the ``?skill=`` query parameter; absent means no narrowing."""
    return ctx.skill_loader.load_skill(skill) if skill else None


def require_tool_dispatch(ctx: SharedContext = Depends(get_context)) -> None:
    """403 unless ``api.allow_tool_dispatch`` is set."""
    if not ctx.config.api.allow_tool_dispatch:
        raise HTTPException(
            status_code=403,
            detail="Tool dispatch over HTTP is disabled (set api.allow_tool_dispatch)",
        )
