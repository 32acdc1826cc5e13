"""
Fan-out helpers.

Independent calls are issued concurrently and joined; a failure in one
branch is logged and dropped so the others still land.
"""

import asyncio
import logging
from typing import Any, Awaitable, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, dict, str, tuple, set)):
        return len(value) == 0
    return False


async def gather_successes(
    awaitables: Iterable[Awaitable[T]],
    label: str = "fan-out",
    timeout: Optional[float] = None,
    drop_empty: bool = True,
) -> List[T]:
    """
    Await all branches and keep the ones that succeeded.

    Args:
        awaitables: Independent coroutines/futures
        label: Name used in log lines
        timeout: Optional per-branch timeout in seconds
        drop_empty: Also drop None/empty results

    Returns:
        Successful results in input order
    """

    async def _bounded(aw: Awaitable[T]) -> T:
        if timeout is None:
            return await aw
        return await asyncio.wait_for(aw, timeout=timeout)

    tasks = [_bounded(aw) for aw in awaitables]
    if not tasks:
        return []

    results = await asyncio.gather(*tasks, return_exceptions=True)

    successes: List[T] = []
    failures = 0
    for result in results:
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            failures += 1
            logger.warning(f"{label}: branch failed: {result!r}")
            continue
        if drop_empty and _is_empty(result):
            continue
        successes.append(result)

    if failures:
        logger.info(f"{label}: {len(successes)} succeeded, {failures} failed")

    return successes
