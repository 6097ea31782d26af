"""Chat CLI command for interactive sessions."""

import asyncio
import logging

import typer

from kota.core.agent import Agent, AgentSession
from kota.core.context import SharedContext
from kota.core.exceptions import KotaError
from kota.frontend import ConsoleFrontend
from kota.utils.config import Config
from kota.utils.logging import setup_logging

logger = logging.getLogger(__name__)


class ChatLoop:
    """Interactive chat session with the agent."""

    def __init__(self, config: Config, session_id: str | None = None):
        self.config = config
        self.session_id = session_id

        self.context = SharedContext(config=config)
        self.frontend = ConsoleFrontend(f"{config.llm.provider}/{config.llm.model}")
        self.agent = Agent(context=self.context)

    async def open_session(self) -> AgentSession:
        """Resume the requested session if it has history, else start it.

        A session that cannot be opened is reported and replaced by a new one.
        """
        try:
            if self.session_id and self.context.history_store.exists(self.session_id):
                return self.agent.resume_session(self.session_id)
            return self.agent.new_session(self.session_id)
        except KotaError as e:
            await self.frontend.show_error(e)
            return self.agent.new_session()

    async def handle_input(self, session: AgentSession, user_input: str) -> AgentSession:
        """
        Handle one line of input: a slash command or a chat message.

        Returns:
            The session to continue with (``/load`` switches sessions)
        """
        result = self.context.command_registry.dispatch(user_input, session)
        if result is None:
            await session.chat(user_input, self.frontend)
            return session

        if result.message:
            await self.frontend.show_system_message(result.message)
        if result.session_id:
            session = self.agent.resume_session(result.session_id)
        if result.prompt:
            await session.chat(result.prompt, self.frontend)
        return session

    async def run(self) -> None:
        """Run the interactive chat loop."""
        session = await self.open_session()
        await self.frontend.show_welcome(session.session_id)

        while True:
            try:
                user_input = self.frontend.prompt()

                if user_input.lower() in ["quit", "exit", "q"]:
                    await self.frontend.show_system_message("Goodbye!")
                    break

                if not user_input.strip():
                    continue

                session = await self.handle_input(session, user_input.strip())

            except (KeyboardInterrupt, EOFError):
                await self.frontend.show_system_message("Session interrupted.")
                break
            except KotaError as e:
                await self.frontend.show_error(e)
            except Exception as e:
                logger.exception("Unexpected error in chat loop")
                await self.frontend.show_error(e)


def chat_command(ctx: typer.Context, session_id: str | None = None) -> None:
    """Start interactive chat session."""
    config = ctx.obj.get("config")

    setup_logging(config, console_output=False)

    chat_loop = ChatLoop(config, session_id=session_id)
    asyncio.run(chat_loop.run())
