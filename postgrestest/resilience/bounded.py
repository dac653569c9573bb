"""Run a unit of work against a deadline without cancelling it.

The work runs as its own asyncio task while the caller waits for the first of
two events: the task finishing or the deadline passing. A task that misses its
deadline is abandoned, not cancelled; it keeps running until it finishes on its
own (or the process exits). There is no retry.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from ..core.exceptions import OperationError, OperationTimeoutError
from ..logger import get_logger
from .config import DEFAULT_TIMEOUT, BoundedConfig

if TYPE_CHECKING:
    from .types import Work

logger = get_logger(__name__)

# Strong references to tasks that missed their deadline, so they are not
# garbage collected while still running.
_abandoned: set[asyncio.Task[Any]] = set()


def abandoned_count() -> int:
    """Number of timed-out tasks that are still running in the background."""
    return len(_abandoned)


def _on_abandoned_done(task: asyncio.Task[Any]) -> None:
    _abandoned.discard(task)
    if task.cancelled():
        logger.debug("Abandoned bounded operation cancelled", task=task.get_name())
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned bounded operation failed", task=task.get_name(), error=str(exc))
    else:
        logger.debug("Abandoned bounded operation finished", task=task.get_name())


def _abandon(task: asyncio.Task[Any]) -> None:
    _abandoned.add(task)
    task.add_done_callback(_on_abandoned_done)


async def _run[T](work: Work[T]) -> T:
    return await work()


async def arun_bounded[T](
    work: Work[T],
    *,
    description: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> T:
    """Await ``work()`` for at most ``timeout`` seconds.

    Parameters
    ----------
    work
        Zero-argument callable returning an awaitable.
    description
        Human-readable action, used as ``"cannot <description>"`` and
        ``"timed out trying to <description>"`` in error messages.
    timeout
        Deadline in seconds.

    Returns
    -------
    T
        Whatever ``work()`` resolved to.

    Raises
    ------
    OperationError
        If the work raised. The original exception is chained as ``__cause__``.
    OperationTimeoutError
        If the deadline passed first. The work is left running.
    """
    timeout = BoundedConfig(timeout=timeout).timeout
    task: asyncio.Task[T] = asyncio.create_task(_run(work), name=description)

    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except BaseException:
        # The caller was cancelled; the work carries on like a timed-out one.
        _abandon(task)
        raise

    # A finished task wins even when the deadline has also passed.
    if task in done:
        try:
            return task.result()
        except Exception as e:
            raise OperationError(description, e) from e

    _abandon(task)
    logger.warning("Bounded operation timed out", description=description, timeout=timeout)
    raise OperationTimeoutError(description, timeout)
