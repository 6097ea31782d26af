"""JSONL file-based conversation history backend."""

import logging
import os
import re
import threading
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field, ValidationError

from kota.core.exceptions import PersistenceError

if TYPE_CHECKING:
    from kota.utils.config import Config

logger = logging.getLogger(__name__)

_SESSION_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def _now_iso() -> str:
    """Return current datetime as ISO format string."""
    return datetime.now().isoformat()


class HistorySession(BaseModel):
    """Session metadata - stored in index.jsonl."""

    id: str
    title: str | None = None
    message_count: int = 0
    created_at: str
    updated_at: str


class HistoryTurn(BaseModel):
    """Single turn - one line in session-{id}.jsonl."""

    timestamp: str = Field(default_factory=_now_iso)
    role: Literal["user", "assistant", "system", "tool"]
    content: str
    tool_calls: list[dict[str, Any]] | None = None
    tool_call_id: str | None = None

    @classmethod
    def from_message(cls, message: dict[str, Any]) -> "HistoryTurn":
        """
        Create HistoryTurn from litellm Message format.

        Args:
            message: Message dict from litellm

        Returns:
            New HistoryTurn instance
        """
        tool_calls = None
        if message.get("tool_calls"):
            tool_calls = [
                {
                    "id": tc.get("id"),
                    "type": tc.get("type", "function"),
                    "function": tc.get("function", {}),
                }
                for tc in message["tool_calls"]
            ]

        return cls(
            role=message["role"],
            content=str(message.get("content") or ""),
            tool_calls=tool_calls,
            tool_call_id=message.get("tool_call_id"),
        )

    def to_message(self) -> dict[str, Any]:
        """
        Convert HistoryTurn to litellm Message format.

        Returns:
            Message dict compatible with litellm
        """
        base: dict[str, Any] = {"role": self.role, "content": self.content}

        if self.role == "assistant" and self.tool_calls:
            base["tool_calls"] = self.tool_calls
        if self.role == "tool" and self.tool_call_id:
            base["tool_call_id"] = self.tool_call_id

        return base


class HistoryStore:
    """
    JSONL file-based history storage.

    Directory structure:
    <history_path>/
    ├── index.jsonl              # Session metadata (replaced atomically)
    └── sessions/
        └── session-{id}.jsonl   # Turns (append-only)

    Each append writes one complete line and fsyncs it; the trailing newline
    is the commit point. A line without its newline is an interrupted append:
    it is ignored on load and cut off before the next append. The session log
    is the source of truth; the index only carries metadata.
    """

    @staticmethod
    def from_config(config: "Config") -> "HistoryStore":
        return HistoryStore(config.history_path)

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.sessions_path = self.base_path / "sessions"
        self.index_path = self.base_path / "index.jsonl"

        self.base_path.mkdir(parents=True, exist_ok=True)
        self.sessions_path.mkdir(parents=True, exist_ok=True)

        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._index_lock = threading.RLock()

    def _lock(self, session_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.RLock()
            return lock

    @staticmethod
    def is_valid_id(session_id: str) -> bool:
        return bool(_SESSION_ID.match(session_id))

    def _session_path(self, session_id: str) -> Path:
        """Get the log path for a session, rejecting unsafe ids."""
        if not self.is_valid_id(session_id):
            raise PersistenceError(session_id, "invalid session id")
        return self.sessions_path / f"session-{session_id}.jsonl"

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def _read_index(self) -> list[HistorySession]:
        """Read all session entries from index.jsonl."""
        if not self.index_path.exists():
            return []

        sessions = []
        with open(self.index_path) as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    sessions.append(HistorySession.model_validate_json(line))
                except ValidationError:
                    logger.warning(f"Skipping malformed index entry: {line[:80]}")
        return sessions

    def _write_index(self, sessions: list[HistorySession]) -> None:
        """Replace index.jsonl via a temp file and rename."""
        tmp_path = self.index_path.with_suffix(".jsonl.tmp")
        with open(tmp_path, "w") as f:
            for session in sessions:
                f.write(session.model_dump_json() + "\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.index_path)

    def _update_index(self, session_id: str, **changes: Any) -> HistorySession:
        with self._index_lock:
            sessions = self._read_index()
            for i, s in enumerate(sessions):
                if s.id == session_id:
                    sessions[i] = s.model_copy(update=changes)
                    self._write_index(sessions)
                    return sessions[i]

            now = _now_iso()
            session = HistorySession(
                id=session_id, created_at=now, updated_at=now
            ).model_copy(update=changes)
            sessions.append(session)
            self._write_index(sessions)
            return session

    # ------------------------------------------------------------------
    # Log
    # ------------------------------------------------------------------

    @staticmethod
    def _read_committed(path: Path) -> tuple[list[bytes], int]:
        """Return committed lines and the byte length they cover."""
        data = path.read_bytes()
        end = data.rfind(b"\n") + 1
        lines = [line for line in data[:end].split(b"\n") if line.strip()]
        return lines, end

    def _repair_tail(self, session_id: str, path: Path) -> None:
        """Cut off an interrupted append, if any."""
        size = path.stat().st_size
        if size == 0:
            return
        with open(path, "rb+") as f:
            f.seek(size - 1)
            if f.read(1) == b"\n":
                return
            _, end = self._read_committed(path)
            logger.warning(
                f"Discarding {size - end} bytes of incomplete turn in session {session_id}"
            )
            f.truncate(end)
            f.flush()
            os.fsync(f.fileno())

    def exists(self, session_id: str) -> bool:
        return self._session_path(session_id).exists()

    def create_or_open(self, session_id: str) -> HistorySession:
        """Create the session if needed and return its metadata."""
        path = self._session_path(session_id)
        with self._lock(session_id):
            try:
                if not path.exists():
                    path.touch()
                    logger.info(f"Created session {session_id}")
                for s in self._read_index():
                    if s.id == session_id:
                        return s
                return self._update_index(session_id)
            except OSError as e:
                raise PersistenceError(session_id, f"cannot open session: {e}") from e

    def append(self, session_id: str, turn: HistoryTurn) -> None:
        """
        Durably append one turn.

        Raises:
            PersistenceError: If the turn could not be committed
        """
        path = self._session_path(session_id)
        line = (turn.model_dump_json() + "\n").encode()

        with self._lock(session_id):
            session = self.create_or_open(session_id)
            try:
                self._repair_tail(session_id, path)
                with open(path, "ab") as f:
                    f.write(line)
                    f.flush()
                    os.fsync(f.fileno())
            except OSError as e:
                raise PersistenceError(session_id, f"cannot append turn: {e}") from e

            changes: dict[str, Any] = {
                "message_count": session.message_count + 1,
                "updated_at": _now_iso(),
            }
            # Auto-generate title from first user message
            if session.title is None and turn.role == "user":
                title = turn.content[:50]
                if len(turn.content) > 50:
                    title += "..."
                changes["title"] = title
            try:
                self._update_index(session_id, **changes)
            except OSError as e:
                logger.warning(f"Index update failed for session {session_id}: {e}")

    def load(self, session_id: str) -> list[HistoryTurn]:
        """
        Load the committed turns of a session, oldest first.

        Returns an empty list for an unknown session.

        Raises:
            PersistenceError: If the log cannot be read
        """
        path = self._session_path(session_id)
        with self._lock(session_id):
            if not path.exists():
                return []
            try:
                lines, _ = self._read_committed(path)
            except OSError as e:
                raise PersistenceError(session_id, f"cannot read session: {e}") from e

        turns = []
        for line in lines:
            try:
                turns.append(HistoryTurn.model_validate_json(line))
            except ValidationError:
                logger.warning(f"Skipping unreadable turn in session {session_id}")
        return turns

    def get_messages(self, session_id: str, max_history: int | None = None) -> list[HistoryTurn]:
        """Get the most recent turns of a session."""
        turns = self.load(session_id)
        if max_history is None:
            return turns
        return turns[-max_history:]

    def list_sessions(self) -> list[HistorySession]:
        """List all sessions, most recently updated first."""
        with self._index_lock:
            sessions = self._read_index()
        sessions.sort(key=lambda s: s.updated_at, reverse=True)
        return sessions

    def get_session(self, session_id: str) -> HistorySession | None:
        return next((s for s in self.list_sessions() if s.id == session_id), None)

    def delete(self, session_id: str) -> bool:
        """
        Remove a session's log and metadata.

        Returns:
            False if the session did not exist
        """
        path = self._session_path(session_id)
        with self._lock(session_id):
            with self._index_lock:
                sessions = self._read_index()
                remaining = [s for s in sessions if s.id != session_id]
                existed = path.exists() or len(remaining) != len(sessions)
                try:
                    if path.exists():
                        path.unlink()
                    if len(remaining) != len(sessions):
                        self._write_index(remaining)
                except OSError as e:
                    raise PersistenceError(session_id, f"cannot delete session: {e}") from e

        if existed:
            logger.info(f"Deleted session {session_id}")
        return existed

    def list(self) -> list[str]:
        """List known session ids, most recently updated first."""
        return [s.id for s in self.list_sessions()]
