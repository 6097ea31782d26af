"""Tests for SkillLoader."""

from pathlib import Path

import pytest

from kota.core.exceptions import SkillNotFoundError
from kota.core.skill_loader import BUILTIN_SKILLS, SkillLoader, SkillProfile


def write_skill(skills_dir: Path, def_id: str, content: str) -> None:
    skill_dir = skills_dir / def_id
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(content)


class TestBuiltins:
    def test_builtin_profiles_present(self, tmp_path):
        """Loader includes the built-in skills without a skills directory."""
        loader = SkillLoader(tmp_path / "skills")

        names = [s.name for s in loader.list_skills()]

        assert names == ["code_review", "debug", "documentation", "refactor"]

    def test_builtins_can_be_excluded(self, tmp_path):
        loader = SkillLoader(tmp_path / "skills", include_builtins=False)

        assert loader.list_skills() == []

    def test_profiles_are_immutable(self):
        with pytest.raises(Exception):
            BUILTIN_SKILLS[0].name = "other"  # type: ignore[misc]


class TestDiscovery:
    def test_directory_skill(self, tmp_path):
        """SKILL.md frontmatter and body become a profile."""
        write_skill(
            tmp_path,
            "lint",
            "---\n"
            "name: lint\n"
            "description: Run linters\n"
            "allowed_tools: [read_file, execute_bash]\n"
            "dependencies: ruff\n"
            "---\n"
            "# Lint\n\nRun the linters.\n",
        )

        profile = SkillLoader(tmp_path, include_builtins=False).load_skill("lint")

        assert profile == SkillProfile(
            name="lint",
            description="Run linters",
            allowed_tools=frozenset({"read_file", "execute_bash"}),
            instructions="# Lint\n\nRun the linters.\n",
            dependencies="ruff",
        )

    def test_comma_separated_tools(self, tmp_path):
        write_skill(
            tmp_path,
            "s",
            "---\nname: s\ndescription: d\nallowed_tools: read_file, write_file\n---\nbody",
        )

        profile = SkillLoader(tmp_path).load_skill("s")

        assert profile.allowed_tools == frozenset({"read_file", "write_file"})

    def test_no_allowed_tools_means_empty_scope(self, tmp_path):
        write_skill(tmp_path, "s", "---\nname: s\ndescription: d\n---\nbody")

        assert SkillLoader(tmp_path).load_skill("s").allowed_tools == frozenset()

    def test_directory_skill_overrides_builtin(self, tmp_path):
        write_skill(
            tmp_path,
            "debug",
            "---\nname: debug\ndescription: Custom debug\nallowed_tools: [read_file]\n---\n",
        )

        profile = SkillLoader(tmp_path).load_skill("debug")

        assert profile.description == "Custom debug"
        assert profile.allowed_tools == frozenset({"read_file"})

    @pytest.mark.parametrize(
        "content",
        [
            "no frontmatter at all",
            "---\nname: only-name\n---\nbody",
            "---\nname: s\ndescription: d\nallowed_tools: 3\n---\nbody",
            "---\nname: [unclosed\n---\nbody",
        ],
    )
    def test_invalid_skills_skipped(self, tmp_path, content):
        """Malformed definitions are logged and skipped, not fatal."""
        write_skill(tmp_path, "bad", content)
        write_skill(tmp_path, "good", "---\nname: good\ndescription: ok\n---\n")

        loader = SkillLoader(tmp_path, include_builtins=False)

        assert [s.name for s in loader.list_skills()] == ["good"]

    def test_from_config_uses_skills_path(self, test_config):
        write_skill(
            test_config.skills_path, "custom", "---\nname: custom\ndescription: c\n---\n"
        )

        loader = SkillLoader.from_config(test_config)

        assert loader.get("custom") is not None


class TestLoadSkill:
    def test_unknown_skill_raises(self, tmp_path):
        with pytest.raises(SkillNotFoundError) as exc_info:
            SkillLoader(tmp_path).load_skill("nope")

        assert exc_info.value.to_result() == {
            "error": "Skill not found: nope",
            "kind": "not_found",
        }

    def test_get_returns_none(self, tmp_path):
        assert SkillLoader(tmp_path).get("nope") is None
