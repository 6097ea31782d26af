"""Per-session active skill state."""

import logging

from kota.core.skill_loader import SkillLoader, SkillProfile

logger = logging.getLogger(__name__)


class SkillManager:
    """
    Single-active-profile state machine: Inactive or Active(profile).

    Each session owns one manager. Activating a second skill replaces the
    first; profiles never stack. The manager never touches the tool
    registry, it only exposes the active profile to the visibility check.
    """

    def __init__(self, loader: SkillLoader):
        self.loader = loader
        self._active: SkillProfile | None = None

    @property
    def active(self) -> SkillProfile | None:
        """The active profile, or None when inactive."""
        return self._active

    def activate(self, name: str) -> SkillProfile:
        """
        Make the named skill the active one.

        Raises:
            SkillNotFoundError: If the skill is unknown; state is unchanged
        """
        profile = self.loader.load_skill(name)
        previous = self._active
        self._active = profile
        if previous is not None and previous.name != profile.name:
            logger.info(f"Skill switched: {previous.name} -> {profile.name}")
        else:
            logger.info(f"Skill activated: {profile.name}")
        return profile

    def deactivate(self) -> None:
        """Return to Inactive. No-op if nothing is active."""
        if self._active is not None:
            logger.info(f"Skill deactivated: {self._active.name}")
        self._active = None

    def list_skills(self) -> list[SkillProfile]:
        return self.loader.list_skills()

    def enhance_prompt(self, base_prompt: str) -> str:
        """Append the active skill's instructions and tool list to a prompt."""
        if self._active is None:
            return base_prompt

        tools = ", ".join(sorted(self._active.allowed_tools)) or "none"
        return (
            f"{base_prompt}\n\n[ACTIVE SKILL: {self._active.name}]\n"
            f"{self._active.instructions}\n\nAvailable tools: {tools}"
        )
