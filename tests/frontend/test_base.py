"""Tests for the shared Frontend helpers."""

from contextlib import asynccontextmanager

import pytest

from kota.core.exceptions import SkillNotFoundError
from kota.frontend import Frontend
from kota.frontend.base import describe_error, describe_tool_call


class StatusFrontend(Frontend):
    def __init__(self):
        self.statuses: list[str] = []
        self.system: list[str] = []

    async def show_welcome(self, session_id: str) -> None:
        pass

    async def show_message(self, content: str) -> None:
        pass

    async def show_system_message(self, content: str) -> None:
        self.system.append(content)

    @asynccontextmanager
    async def show_transient(self, content: str):
        self.statuses.append(content)
        yield


class TestDescribe:
    def test_short_tool_call(self):
        assert describe_tool_call("echo", "{}") == "Making Tool Call: echo {}"

    def test_long_tool_call_is_clipped(self):
        label = describe_tool_call("write_file", '{"path": "a/very/long/path.txt"}')

        assert len(label) == 43
        assert label.endswith("...")

    def test_kota_error_names_kind(self):
        assert describe_error(SkillNotFoundError("nope")) == (
            "Error (not_found): Skill not found: nope"
        )

    def test_other_error(self):
        assert describe_error(RuntimeError("boom")) == "Error: boom"


@pytest.mark.anyio
async def test_tool_call_uses_transient():
    frontend = StatusFrontend()

    async with frontend.show_tool_call("echo", '{"message": "hi"}'):
        pass

    assert frontend.statuses == ['Making Tool Call: echo {"message": "hi"}']


@pytest.mark.anyio
async def test_error_goes_to_system_messages():
    frontend = StatusFrontend()

    await frontend.show_error(ValueError("bad"))

    assert frontend.system == ["Error: bad"]
