"""
Planotto Core - Bounded polling.

Fixed-interval, fixed-attempt loop used to await asynchronous provider jobs
(OCR queue, image generation). The bounds are supplied by the caller from
configuration; nothing here is provider-specific.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable


@dataclass(frozen=True)
class Pending:
    """Job is still running."""


@dataclass(frozen=True)
class Done:
    """Job finished; payload is whatever the provider returned."""

    payload: Any = None


@dataclass(frozen=True)
class Failed:
    """Job failed, or polling gave up."""

    reason: str


PollStatus = Pending | Done | Failed

PENDING = Pending()

TIMEOUT_REASON = "timeout"
DEADLINE_REASON = "deadline"


class Deadline:
    """
    Absolute point in (monotonic) time after which work should stop.

    Passed down through orchestrators and provider calls so an abandoned
    request does not keep polling for its full attempt budget.
    """

    def __init__(self, expires_at: float, clock: Callable[[], float] = time.monotonic):
        self._expires_at = expires_at
        self._clock = clock

    @classmethod
    def after(cls, seconds: float, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(clock() + seconds, clock)

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


def is_expired(deadline: Deadline | None) -> bool:
    return deadline is not None and deadline.expired


def bounded_timeout(default: float, deadline: Deadline | None) -> float:
    """Network timeout for one call: the default, capped by the deadline."""
    if deadline is None:
        return default
    return min(default, deadline.remaining())


async def poll(
    check: Callable[[], Awaitable[PollStatus]],
    *,
    max_attempts: int,
    delay: float,
    deadline: Deadline | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> PollStatus:
    """
    Call `check` until it reports a non-pending status.

    Args:
        check: Async callable returning Pending, Done or Failed
        max_attempts: Maximum number of `check` calls
        delay: Seconds to sleep between attempts
        deadline: Optional deadline; polling stops once it expires
        sleep: Sleep function (injected in tests)

    Returns:
        The first Done/Failed status, Failed("timeout") when attempts run
        out, or Failed("deadline") when the deadline expires first.
    """
    for attempt in range(max_attempts):
        if is_expired(deadline):
            return Failed(DEADLINE_REASON)

        status = await check()
        if not isinstance(status, Pending):
            return status

        if attempt < max_attempts - 1:
            await sleep(delay)

    return Failed(TIMEOUT_REASON)
