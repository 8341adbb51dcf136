import asyncio
import contextvars
from collections.abc import Callable
from concurrent.futures import Executor
from typing import Any


async def run_in_executor(executor: Executor | None, func: Callable[..., Any], *args: Any) -> Any:
    """
    run a blocking call on the executor

    func sees the caller's contextvars, so the active span and bound log
    fields carry over into the worker thread
    """
    loop = asyncio.get_running_loop()
    context = contextvars.copy_context()
    return await loop.run_in_executor(executor, context.run, func, *args)
