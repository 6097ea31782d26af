"""Skill catalog: built-in profiles plus SKILL.md files from the workspace."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from kota.core.exceptions import SkillNotFoundError
from kota.utils.def_loader import InvalidDefError, discover_definitions

if TYPE_CHECKING:
    from kota.utils.config import Config

logger = logging.getLogger(__name__)


class SkillProfile(BaseModel):
    """A named capability scope. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    description: str
    allowed_tools: frozenset[str] = Field(default_factory=frozenset)
    instructions: str = ""
    dependencies: str | None = None


BUILTIN_SKILLS: tuple[SkillProfile, ...] = (
    SkillProfile(
        name="code_review",
        description="Focus on code review and quality analysis",
        allowed_tools=frozenset({"read_file", "execute_bash"}),
        instructions=(
            "You are an experienced code reviewer. Examine the code for quality, "
            "security, performance and adherence to best practices."
        ),
    ),
    SkillProfile(
        name="refactor",
        description="Focus on refactoring and code improvement",
        allowed_tools=frozenset({"read_file", "edit_file", "write_file"}),
        instructions=(
            "You are a refactoring specialist. Improve structure, readability "
            "and maintainability while keeping behavior unchanged."
        ),
    ),
    SkillProfile(
        name="debug",
        description="Focus on diagnosing and fixing problems",
        allowed_tools=frozenset({"read_file", "execute_bash"}),
        instructions=(
            "You are a debugging expert. Locate and fix defects, explaining the "
            "root cause and the fix in detail."
        ),
    ),
    SkillProfile(
        name="documentation",
        description="Focus on writing and improving documentation",
        allowed_tools=frozenset({"read_file", "write_file"}),
        instructions=(
            "You are a technical writer. Produce clear, accurate and easy to "
            "follow documentation and comments."
        ),
    ),
)


class SkillLoader:
    """Load skill profiles from the built-in set and the skills directory.

    Directory skills live in ``skills/<id>/SKILL.md`` with YAML frontmatter
    (``name``, ``description``, optional ``dependencies`` and
    ``allowed_tools``). The body is kept verbatim as the instruction text.
    Directory skills replace built-ins of the same name.
    """

    @staticmethod
    def from_config(config: "Config") -> "SkillLoader":
        """Create SkillLoader from config."""
        return SkillLoader(config.skills_path)

    def __init__(self, skills_path: Path, include_builtins: bool = True):
        self.skills_path = skills_path
        self._skills: dict[str, SkillProfile] = {}

        if include_builtins:
            for profile in BUILTIN_SKILLS:
                self._skills[profile.name] = profile

        for profile in discover_definitions(
            self.skills_path, "SKILL.md", self._parse_skill
        ):
            if profile.name in self._skills:
                logger.info(f"Skill '{profile.name}' overrides an earlier definition")
            self._skills[profile.name] = profile

    def _parse_skill(
        self, def_id: str, frontmatter: dict[str, Any], body: str
    ) -> Optional[SkillProfile]:
        """Parse one SKILL.md (callback for discover_definitions)."""
        if not frontmatter:
            raise InvalidDefError("skill", def_id, "no valid frontmatter")
        if "name" not in frontmatter or "description" not in frontmatter:
            raise InvalidDefError("skill", def_id, "missing required fields")

        allowed = frontmatter.get("allowed_tools") or []
        if isinstance(allowed, str):
            allowed = [t.strip() for t in allowed.split(",") if t.strip()]
        if not isinstance(allowed, list):
            raise InvalidDefError("skill", def_id, "allowed_tools must be a list")

        dependencies = frontmatter.get("dependencies")
        return SkillProfile(
            name=str(frontmatter["name"]),
            description=str(frontmatter["description"]),
            allowed_tools=frozenset(str(t) for t in allowed),
            instructions=body,
            dependencies=str(dependencies) if dependencies is not None else None,
        )

    def list_skills(self) -> list[SkillProfile]:
        """All known skills, sorted by name."""
        return [self._skills[name] for name in sorted(self._skills)]

    def get(self, name: str) -> SkillProfile | None:
        return self._skills.get(name)

    def load_skill(self, name: str) -> SkillProfile:
        """
        Look up a skill by name.

        Raises:
            SkillNotFoundError: If no skill has this name
        """
        profile = self._skills.get(name)
        if profile is None:
            raise SkillNotFoundError(name)
        return profile
