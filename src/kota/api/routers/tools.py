"""Tool resource router."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from kota.api.deps import get_context, require_tool_dispatch, skill_profile
from kota.core.context import SharedContext
from kota.core.skill_loader import SkillProfile

router = APIRouter()


class ToolInfo(BaseModel):
    """A registered tool and whether the model can see it."""

    name: str
    description: str
    parameters: dict[str, Any]
    visible: bool


class ToolCall(BaseModel):
    """Request body for running a tool."""

    args: dict[str, Any] = Field(default_factory=dict)
    skill: str | None = None


@router.get("", response_model=list[ToolInfo])
def list_tools(
    profile: SkillProfile | None = Depends(skill_profile),
    ctx: SharedContext = Depends(get_context),
) -> list[ToolInfo]:
    """List registered tools, with visibility under an optional skill."""
    registry = ctx.tool_registry
    return [
        ToolInfo(
            name=t.name,
            description=t.description,
            parameters=t.parameters.to_json_schema(),
            visible=registry.effective_visibility(t.name, profile),
        )
        for t in registry.list_all()
    ]


@router.post("/{name}", dependencies=[Depends(require_tool_dispatch)])
async def run_tool(
    name: str, call: ToolCall, ctx: SharedContext = Depends(get_context)
) -> dict[str, Any]:
    """
    Run a tool through hooks, visibility, validation and its handler.

    Handler failures are returned in the body as ``{"error": ...}``;
    unknown tools and bad arguments map to 404 and 422. Refused with 403
    unless ``api.allow_tool_dispatch`` is enabled.
    """
    profile = ctx.skill_loader.load_skill(call.skill) if call.skill else None
    return await ctx.dispatcher.dispatch(name, call.args, profile)
