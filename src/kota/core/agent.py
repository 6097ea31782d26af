import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from litellm.types.completion import (
    ChatCompletionMessageParam as Message,
    ChatCompletionMessageToolCallParam,
)

from kota.core.context import SharedContext
from kota.core.exceptions import KotaError, ToolNotFoundError
from kota.core.history import HistoryTurn
from kota.core.skill_manager import SkillManager
from kota.provider import LLMProvider

if TYPE_CHECKING:
    from kota.frontend import Frontend
    from kota.provider import LLMToolCall

logger = logging.getLogger(__name__)


class Agent:
    """
    Factory for conversation sessions.

    Holds the LLM client and shared context that every session uses.
    """

    def __init__(self, context: SharedContext, llm: LLMProvider | None = None) -> None:
        self.context = context
        self.llm = llm or LLMProvider.from_config(context.config.llm)

    def new_session(self, session_id: str | None = None) -> "AgentSession":
        """
        Create a new conversation session.

        Args:
            session_id: Optional id to use instead of a generated one

        Returns:
            A new AgentSession with no active skill
        """
        session_id = session_id or uuid.uuid4().hex
        self.context.history_store.create_or_open(session_id)
        logger.info(f"New session {session_id}")
        return self._make_session(session_id, [])

    def resume_session(self, session_id: str) -> "AgentSession":
        """
        Load an existing conversation session.

        Raises:
            ToolNotFoundError: If no session has this id
        """
        store = self.context.history_store
        if not store.exists(session_id):
            raise ToolNotFoundError(session_id, what="session")

        turns = store.get_messages(
            session_id, max_history=self.context.config.chat_max_history
        )
        messages: list[Message] = [turn.to_message() for turn in turns]  # type: ignore[misc]

        # A window cut can start on tool results whose call fell outside it
        while messages and messages[0]["role"] == "tool":
            messages.pop(0)

        logger.info(f"Resumed session {session_id} ({len(messages)} messages)")
        return self._make_session(session_id, messages)

    def _make_session(self, session_id: str, messages: list[Message]) -> "AgentSession":
        return AgentSession(
            session_id=session_id,
            context=self.context,
            agent=self,
            skills=SkillManager(self.context.skill_loader),
            max_history=self.context.config.chat_max_history,
            messages=messages,
        )


@dataclass
class AgentSession:
    """
    One conversation: its message window, active skill and persistence.

    ``messages`` mirrors what has been appended to the history store; only
    the last ``max_history`` of them are sent to the model.
    """

    session_id: str
    context: SharedContext
    agent: Agent
    skills: SkillManager
    max_history: int

    messages: list[Message] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    def add_message(self, message: Message) -> None:
        """Append to the history store, then to the in-memory window."""
        self.context.history_store.append(
            self.session_id, HistoryTurn.from_message(dict(message))
        )
        self.messages.append(message)

    def get_history(self, limit: int | None = None) -> list[Message]:
        return self.messages[-(limit or self.max_history) :]

    async def chat(self, message: str, frontend: "Frontend") -> str:
        """
        Send a message to the LLM and run tool calls until it answers.

        Exchanges on one session are serialized; tool calls of one model
        turn run one after another.

        Args:
            message: User message
            frontend: Frontend for displaying output

        Returns:
            Assistant's response text
        """
        async with self._lock:
            user_msg: Message = {"role": "user", "content": message}
            self.add_message(user_msg)

            tool_count = 0
            display_content = "Thinking"

            while True:
                async with frontend.show_transient(display_content):
                    tool_schemas = self.context.tool_registry.get_tool_schemas(
                        self.skills.active
                    )
                    content, tool_calls = await self.agent.llm.chat(
                        self._build_messages(), tool_schemas
                    )

                assistant_msg: dict[str, Any] = {"role": "assistant", "content": content}
                if tool_calls:
                    tool_call_dicts: list[ChatCompletionMessageToolCallParam] = [
                        {
                            "id": tc.id,
                            "type": "function",
                            "function": {"name": tc.name, "arguments": tc.arguments},
                        }
                        for tc in tool_calls
                    ]
                    assistant_msg["tool_calls"] = tool_call_dicts
                self.add_message(assistant_msg)  # type: ignore[arg-type]

                if not tool_calls:
                    break

                for tool_call in tool_calls:
                    result = await self._execute_tool_call(tool_call, frontend)
                    tool_msg: Message = {
                        "role": "tool",
                        "content": result,
                        "tool_call_id": tool_call.id,
                    }
                    self.add_message(tool_msg)

                tool_count += len(tool_calls)
                display_content = f"{content}\n({tool_count} tool calls so far)"

        await frontend.show_message(content)
        return content

    def _build_messages(self) -> list[Message]:
        """System prompt, narrowed by the active skill, then the history window."""
        system_prompt = self.skills.enhance_prompt(self.context.config.system_prompt)
        messages: list[Message] = [{"role": "system", "content": system_prompt}]
        messages.extend(self.get_history())

        return messages

    async def run_tool(self, name: str, args: dict[str, Any]) -> dict[str, Any]:
        """
        Dispatch one tool call under this session's active skill.

        Dispatch failures come back as ``{error, kind}`` results.
        """
        try:
            return await self.context.dispatcher.dispatch(name, args, self.skills.active)
        except KotaError as e:
            logger.info(f"Tool call {name} rejected: {e}")
            return e.to_result()

    async def _execute_tool_call(
        self, tool_call: "LLMToolCall", frontend: "Frontend"
    ) -> str:
        """Run one model-requested call; the JSON result becomes the tool turn."""
        try:
            args = json.loads(tool_call.arguments or "{}")
        except json.JSONDecodeError as e:
            return json.dumps({"error": f"Invalid JSON arguments: {e}", "kind": "validation"})

        async with frontend.show_tool_call(tool_call.name, tool_call.arguments):
            result = await self.run_tool(tool_call.name, args)

        return json.dumps(result, default=str)
