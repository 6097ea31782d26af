"""Tests for tools API router."""

import pytest
from fastapi.testclient import TestClient

from kota.api import create_app


@pytest.fixture
def client(test_context):
    with TestClient(create_app(test_context)) as client:
        yield client


@pytest.fixture
def dispatch_client(test_context):
    test_context.config.api.allow_tool_dispatch = True
    with TestClient(create_app(test_context)) as client:
        yield client


class TestListTools:
    def test_visibility(self, client):
        response = client.get("/tools")

        assert response.status_code == 200
        visible = {t["name"]: t["visible"] for t in response.json()}
        assert visible["read_file"] is True
        assert visible["calculator"] is False

    def test_parameters_are_json_schema(self, client):
        tools = {t["name"]: t for t in client.get("/tools").json()}

        params = tools["read_file"]["parameters"]
        assert params["type"] == "object"
        assert params["required"] == ["path"]

    def test_skill_narrows_visibility(self, client):
        response = client.get("/tools", params={"skill": "documentation"})

        visible = {t["name"] for t in response.json() if t["visible"]}
        assert visible == {"read_file", "write_file"}

    def test_unknown_skill(self, client):
        assert client.get("/tools", params={"skill": "nope"}).status_code == 404


class TestRunToolDisabled:
    def test_refused_by_default(self, client, tmp_path):
        marker = tmp_path / "ran"

        response = client.post(
            "/tools/execute_bash", json={"args": {"command": f"touch {marker}"}}
        )

        assert response.status_code == 403
        assert "allow_tool_dispatch" in response.json()["detail"]
        assert not marker.exists()

    def test_write_file_refused(self, client, tmp_path):
        target = tmp_path / "a.txt"

        response = client.post(
            "/tools/write_file", json={"args": {"path": str(target), "content": "x"}}
        )

        assert response.status_code == 403
        assert not target.exists()


class TestRunTool:
    def test_run(self, dispatch_client, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("content")

        response = dispatch_client.post(
            "/tools/read_file", json={"args": {"path": str(target)}}
        )

        assert response.status_code == 200
        assert response.json() == {"result": "content", "size_bytes": 7}

    def test_handler_error_in_body(self, dispatch_client, tmp_path):
        response = dispatch_client.post(
            "/tools/read_file", json={"args": {"path": str(tmp_path / "missing")}}
        )

        assert response.status_code == 200
        assert "File not found" in response.json()["error"]

    def test_unknown_tool(self, dispatch_client):
        response = dispatch_client.post("/tools/nope", json={})

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_hidden_by_skill(self, dispatch_client):
        response = dispatch_client.post(
            "/tools/execute_bash",
            json={"args": {"command": "echo hi"}, "skill": "documentation"},
        )

        assert response.status_code == 404

    def test_invalid_args(self, dispatch_client):
        response = dispatch_client.post("/tools/read_file", json={"args": {"path": 3}})

        assert response.status_code == 422
        assert response.json()["fields"] == {"path": "expected string, got int"}
