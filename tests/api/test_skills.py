"""Tests for skills API router."""

import pytest
from fastapi.testclient import TestClient

from kota.api import create_app


@pytest.fixture
def client(test_context):
    with TestClient(create_app(test_context)) as client:
        yield client


class TestSkills:
    def test_list_builtin_skills(self, client):
        response = client.get("/skills")

        assert response.status_code == 200
        assert [s["name"] for s in response.json()] == [
            "code_review",
            "debug",
            "documentation",
            "refactor",
        ]

    def test_get_skill(self, client):
        response = client.get("/skills/refactor")

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "Focus on refactoring and code improvement"
        assert sorted(data["allowed_tools"]) == ["edit_file", "read_file", "write_file"]

    def test_directory_skill(self, test_context):
        skill_dir = test_context.config.skills_path / "lint"
        skill_dir.mkdir(parents=True)
        (skill_dir / "SKILL.md").write_text(
            "---\nname: lint\ndescription: Run linters\n---\nLint everything.\n"
        )
        test_context.skill_loader = type(test_context.skill_loader).from_config(
            test_context.config
        )

        with TestClient(create_app(test_context)) as client:
            response = client.get("/skills/lint")

        assert response.status_code == 200
        assert response.json()["instructions"] == "Lint everything.\n"

    def test_unknown_skill(self, client):
        response = client.get("/skills/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Skill not found: nope", "kind": "not_found"}
