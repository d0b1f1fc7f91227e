"""
Race helper - First-to-settle over independently timed awaitables
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def _consume_result(task: asyncio.Task):
    """Retrieve a loser's outcome so asyncio doesn't warn about it"""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Ignored outcome of {task.get_name()}: {exc}")


async def first_settled(waits: Dict[str, Awaitable[Any]]) -> Optional[Tuple[str, Any]]:
    """
    Wait until the first of several awaitables succeeds

    Each awaitable carries its own timeout. Failures count as "did not
    happen" and the race goes on with the rest. Losers are not cancelled,
    they keep running in the background and their result is discarded.

    Args:
        waits: Mapping of name -> awaitable

    Returns:
        (name, result) of the winner, or None if every awaitable failed
    """
    pending = {
        asyncio.ensure_future(aw): name
        for name, aw in waits.items()
    }
    for task, name in pending.items():
        task.set_name(name)
        task.add_done_callback(_consume_result)

    while pending:
        done, _ = await asyncio.wait(list(pending), return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            name = pending.pop(task)
            if task.cancelled() or task.exception() is not None:
                continue
            return name, task.result()

    return None
