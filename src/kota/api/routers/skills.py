"""Skill resource router."""

from fastapi import APIRouter, Depends

from kota.api.deps import get_context
from kota.core.context import SharedContext
from kota.core.skill_loader import SkillProfile

router = APIRouter()


@router.get("", response_model=list[SkillProfile])
def list_skills(ctx: SharedContext = Depends(get_context)) -> list[SkillProfile]:
    """List all skills."""
    return ctx.skill_loader.list_skills()


@router.get("/{name}", response_model=SkillProfile)
def get_skill(name: str, ctx: SharedContext = Depends(get_context)) -> SkillProfile:
    """Get skill by name. Unknown names map to 404."""
    return ctx.skill_loader.load_skill(name)
