"""Default tools: workspace file access and a shell."""

import asyncio
import os
import signal
from pathlib import Path
from typing import Any

from kota.tools.base import tool

_OS_ERRORS: tuple[tuple[type[OSError], str], ...] = (
    (FileNotFoundError, "File not found"),
    (IsADirectoryError, "Path is a directory, not a file"),
    (PermissionError, "Permission denied"),
)


def _os_error(path: str, exc: OSError | UnicodeDecodeError) -> dict[str, Any]:
    """Map a filesystem failure to a tool error result."""
    for exc_type, message in _OS_ERRORS:
        if isinstance(exc, exc_type):
            return {"error": f"{message}: {path}"}
    return {"error": f"Cannot access {path}: {exc}"}


def _path_schema(action: str) -> dict[str, str]:
    return {"type": "string", "description": f"Path of the file to {action}"}


@tool(
    name="read_file",
    description="Read a UTF-8 text file and return its contents",
    parameters={
        "type": "object",
        "properties": {"path": _path_schema("read")},
        "required": ["path"],
    },
)
def read_file(path: str) -> dict[str, Any]:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return _os_error(path, e)
    return {"result": content, "size_bytes": len(content.encode("utf-8"))}


@tool(
    name="write_file",
    description="Create or overwrite a text file; missing parent directories are created",
    parameters={
        "type": "object",
        "properties": {
            "path": _path_schema("write"),
            "content": {"type": "string", "description": "Full new file contents"},
        },
        "required": ["path", "content"],
    },
)
def write_file(path: str, content: str) -> dict[str, Any]:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        written = target.write_text(content, encoding="utf-8")
    except OSError as e:
        return _os_error(path, e)
    return {"result": f"Wrote {written} characters to {path}", "chars_written": written}


@tool(
    name="edit_file",
    description="Replace every occurrence of a text fragment in an existing file",
    parameters={
        "type": "object",
        "properties": {
            "path": _path_schema("edit"),
            "old_text": {"type": "string", "description": "Exact text to find"},
            "new_text": {"type": "string", "description": "Replacement text"},
        },
        "required": ["path", "old_text", "new_text"],
    },
)
def edit_file(path: str, old_text: str, new_text: str) -> dict[str, Any]:
    """Leaves the file untouched when ``old_text`` is empty or absent."""
    if not old_text:
        return {"error": "old_text must not be empty"}

    target = Path(path)
    try:
        content = target.read_text(encoding="utf-8")
        count = content.count(old_text)
        if count == 0:
            return {"error": f"'{old_text}' not found in {path}"}
        target.write_text(content.replace(old_text, new_text), encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return _os_error(path, e)
    return {"result": f"Edited {path}: {count} replacement(s)", "replacements": count}


@tool(
    name="delete_file",
    description="Delete a single file; directories are refused",
    parameters={
        "type": "object",
        "properties": {"path": _path_schema("delete")},
        "required": ["path"],
    },
)
def delete_file(path: str) -> dict[str, Any]:
    target = Path(path)
    if target.is_dir():
        return {"error": f"Path is a directory, not a file: {path}"}
    try:
        target.unlink()
    except OSError as e:
        return _os_error(path, e)
    return {"result": f"Deleted {path}"}


@tool(
    name="create_directory",
    description="Create a directory and any missing parents; succeeds if it already exists",
    parameters={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Directory to create"},
        },
        "required": ["path"],
    },
)
def create_directory(path: str) -> dict[str, Any]:
    target = Path(path)
    if target.is_dir():
        return {"result": f"Directory already exists: {path}", "created": False}
    if target.exists():
        return {"error": f"Path exists but is not a directory: {path}"}
    try:
        target.mkdir(parents=True)
    except OSError as e:
        return _os_error(path, e)
    return {"result": f"Created directory {path}", "created": True}


@tool(
    name="execute_bash",
    description="Run a bash command and return its combined stdout and stderr",
    parameters={
        "type": "object",
        "properties": {
            "command": {"type": "string", "description": "Command line to run"},
        },
        "required": ["command"],
    },
)
async def execute_bash(command: str) -> dict[str, Any]:
    """
    bash leads its own process group. If the dispatch is cancelled, e.g. on
    timeout, the whole group is killed and bash is reaped before the
    cancellation propagates.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            "bash",
            "-c",
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        return {"error": f"Cannot start bash: {e}"}

    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        await process.wait()
        raise

    streams = [s.decode(errors="replace") for s in (stdout, stderr) if s]
    return {
        "result": "\n".join(streams) or "Command completed with no output",
        "exit_code": process.returncode,
    }
