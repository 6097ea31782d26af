"""Run blocking callables off the event loop, one daemon thread per call."""

import asyncio
import contextvars
import logging
import threading
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_in_thread(func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
    """
    Await ``func(*args, **kwargs)`` running on its own daemon thread.

    Unlike ``asyncio.to_thread`` there is no shared pool: a call that never
    returns keeps only its own thread, so later calls still get one. Context
    variables are copied into the thread. Cancelling the awaiting task
    abandons the thread; its eventual result is discarded.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()
    context = contextvars.copy_context()

    def settle(result: Any, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def target() -> None:
        try:
            result = context.run(func, *args, **kwargs)
        except BaseException as e:
            outcome: tuple[Any, BaseException | None] = (None, e)
        else:
            outcome = (result, None)
        try:
            loop.call_soon_threadsafe(settle, *outcome)
        except RuntimeError:
            # Event loop already closed; nobody is waiting.
            logger.debug(f"Dropped late result from {thread.name}")

    name = getattr(func, "__name__", "call")
    thread = threading.Thread(target=target, name=f"kota-{name}", daemon=True)
    thread.start()
    return await future
