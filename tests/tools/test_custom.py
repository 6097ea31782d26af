"""Tests for configured custom tools."""

import pytest
from pydantic import ValidationError

from kota.core.exceptions import ConfigError
from kota.tools.custom import register_custom_tools
from kota.tools.registry import ToolRegistry
from kota.utils.config import CustomToolConfig

SHOUT_PARAMS = {
    "type": "object",
    "properties": {"text": {"type": "string", "description": "Text to shout"}},
    "required": ["text"],
}


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "tools").mkdir()
    (tmp_path / "tools" / "shout.py").write_text(
        "def shout(text):\n    return {'result': text.upper() + '!'}\n"
    )
    return tmp_path


def shout_config(**overrides) -> CustomToolConfig:
    fields = {
        "handler": "tools/shout.py:shout",
        "description": "Shout the text",
        "parameters": SHOUT_PARAMS,
    }
    return CustomToolConfig(**{**fields, **overrides})


class TestRegisterCustomTools:
    @pytest.mark.anyio
    async def test_file_handler(self, workspace):
        registry = ToolRegistry()

        register_custom_tools(registry, {"shout": shout_config(default=True)}, workspace)

        assert registry.resolve("shout").parameters.required == ["text"]
        assert await registry.dispatch("shout", {"text": "hi"}) == {"result": "HI!"}

    @pytest.mark.anyio
    async def test_module_handler(self, workspace):
        registry = ToolRegistry()
        config = CustomToolConfig(
            handler="string:capwords",
            description="Capitalize words",
            parameters={"type": "object", "properties": {"s": {"type": "string"}}},
            default=True,
        )

        register_custom_tools(registry, {"capwords": config}, workspace)

        assert await registry.dispatch("capwords", {"s": "a b"}) == {"result": "A B"}

    def test_not_default_unless_asked(self, workspace):
        registry = ToolRegistry()

        register_custom_tools(registry, {"shout": shout_config()}, workspace)

        assert registry.get("shout") is not None
        assert registry.effective_visibility("shout") is False

    def test_missing_module(self, workspace):
        config = shout_config(handler="kota_no_such_module:run")

        with pytest.raises(ConfigError, match="cannot import kota_no_such_module"):
            register_custom_tools(ToolRegistry(), {"shout": config}, workspace)

    def test_missing_file(self, workspace):
        config = shout_config(handler="tools/nope.py:shout")

        with pytest.raises(ConfigError, match="cannot import"):
            register_custom_tools(ToolRegistry(), {"shout": config}, workspace)

    def test_missing_attribute(self, workspace):
        config = shout_config(handler="tools/shout.py:whisper")

        with pytest.raises(ConfigError, match="not a callable"):
            register_custom_tools(ToolRegistry(), {"shout": config}, workspace)

    def test_invalid_parameters(self, workspace):
        config = shout_config(parameters={"type": "object", "required": ["text"]})

        with pytest.raises(ConfigError, match="invalid parameters"):
            register_custom_tools(ToolRegistry(), {"shout": config}, workspace)

    def test_name_clash_with_builtin(self, workspace):
        registry = ToolRegistry.with_builtins()

        with pytest.raises(ConfigError, match="already registered"):
            register_custom_tools(registry, {"read_file": shout_config()}, workspace)


def test_handler_needs_function_name():
    with pytest.raises(ValidationError):
        CustomToolConfig(handler="tools/shout.py", description="d")
