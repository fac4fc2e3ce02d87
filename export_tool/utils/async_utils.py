# export_tool/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, run on a fresh loop in a new thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                result = asyncio.run(coro)
            except Exception as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        return asyncio.run(coro)


async def retry_async(coro_func: Callable[..., Coroutine[Any, Any, T]],
                      *args,
                      max_attempts: int = 3,
                      delay: float = 1.0,
                      backoff: float = 2.0,
                      exceptions: tuple = (Exception,),
                      **kwargs) -> T:
    """
    Retry async operation with exponential backoff

    Args:
        coro_func: Coroutine function
        *args: Function arguments
        max_attempts: Maximum attempts
        delay: Initial delay between retries
        backoff: Backoff multiplier
        exceptions: Exceptions to catch
        **kwargs: Function keyword arguments

    Returns:
        Function result

    Raises:
        Last exception if all attempts fail
    """
    current_delay = delay

    for attempt in range(max_attempts):
        try:
            return await coro_func(*args, **kwargs)
        except exceptions as e:
            if attempt < max_attempts - 1:
                logger.debug(f"Attempt {attempt + 1}/{max_attempts} failed: {e}, retrying")
                await asyncio.sleep(current_delay)
                current_delay *= backoff
            else:
                raise

