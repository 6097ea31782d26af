"""Shared test fixtures for kota test suite."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from kota.core.agent import Agent, AgentSession
from kota.core.context import SharedContext
from kota.core.history import HistoryStore
from kota.tools.base import ToolDefinition, tool
from kota.tools.registry import ToolRegistry
from kota.utils.config import Config, LLMConfig


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def llm_config() -> LLMConfig:
    """Minimal LLM config for testing."""
    return LLMConfig(provider="openai", model="gpt-4", api_key="test-key")


@pytest.fixture
def test_config(tmp_path: Path, llm_config: LLMConfig) -> Config:
    """Config with workspace pointing to tmp_path."""
    return Config(workspace=tmp_path, llm=llm_config)


@pytest.fixture
def test_context(test_config: Config) -> SharedContext:
    """SharedContext with test config."""
    return SharedContext(config=test_config)


@pytest.fixture
def mock_llm() -> MagicMock:
    """LLM provider whose chat() is an AsyncMock returning (content, tool_calls)."""
    llm = MagicMock()
    llm.chat = AsyncMock(return_value=("Hello!", []))
    return llm


@pytest.fixture
def test_agent(test_context: SharedContext, mock_llm: MagicMock) -> Agent:
    """Agent instance backed by the mock LLM."""
    return Agent(context=test_context, llm=mock_llm)


@pytest.fixture
def test_session(test_agent: Agent) -> AgentSession:
    """Fresh session with a fixed id."""
    return test_agent.new_session("test-session")


@pytest.fixture
def history_store(tmp_path: Path) -> HistoryStore:
    """HistoryStore instance for testing."""
    return HistoryStore(tmp_path / "history")


@tool(
    name="echo",
    description="Echo the message back",
    parameters={
        "type": "object",
        "properties": {
            "message": {"type": "string", "description": "Text to echo"},
            "times": {"type": "number", "description": "Repeat count"},
        },
        "required": ["message"],
    },
)
def echo_tool(message: str, times: float = 1) -> dict:
    return {"result": message * int(times)}


@pytest.fixture
def echo() -> ToolDefinition:
    return echo_tool


@pytest.fixture
def registry(echo: ToolDefinition) -> ToolRegistry:
    """Registry with the echo tool as a default."""
    registry = ToolRegistry()
    registry.register(echo, default=True)
    return registry
