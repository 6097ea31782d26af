"""Tests for custom exceptions."""

import pytest

from kota.core.exceptions import (
    ConfigError,
    HookError,
    KotaError,
    PersistenceError,
    ReentrantDispatchError,
    SchemaValidationError,
    SkillNotFoundError,
    ToolNotFoundError,
    ToolTimeoutError,
)


@pytest.mark.parametrize(
    "error,message,kind",
    [
        (ToolNotFoundError("x"), "Tool not found: x", "not_found"),
        (ToolNotFoundError("s1", what="session"), "Session not found: s1", "not_found"),
        (SkillNotFoundError("debug"), "Skill not found: debug", "not_found"),
        (ToolTimeoutError("x", 2.5), "Tool 'x' timed out after 2.5s", "timeout"),
        (
            ReentrantDispatchError("x"),
            "Re-entrant dispatch of 'x' from a hook is not allowed",
            "reentrant",
        ),
        (PersistenceError("s1", "disk full"), "Session 's1': disk full", "persistence"),
        (ConfigError("bad"), "bad", "config"),
    ],
)
def test_error_results(error, message, kind):
    """Every error renders as {error, kind}."""
    assert isinstance(error, KotaError)
    assert error.to_result() == {"error": message, "kind": kind}


def test_schema_validation_error_lists_fields():
    error = SchemaValidationError("t", {"a": "missing required argument", "b": "expected number"})

    assert str(error) == "Invalid arguments for 't': a: missing required argument; b: expected number"
    assert error.to_result()["fields"] == {
        "a": "missing required argument",
        "b": "expected number",
    }


def test_hook_error_names_hook():
    error = HookError("redact", "after", "boom")

    assert error.hook_name == "redact"
    assert str(error) == "after hook 'redact' failed: boom"
