"""Completion poller with clamped exponential backoff."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any, Optional

from pdf_craft.core.exceptions import ConversionFailedException, ConversionTimeoutException
from pdf_craft.core.logging import get_logger
from pdf_craft.polling.outcome import Completed, Failed, JobOutcome, StillPending
from pdf_craft.schemas.conversion_schemas import PollingOptions

logger = get_logger(__name__)

StatusCheck = Callable[[], Awaitable[JobOutcome]]


def next_interval(current_ms: float, options: PollingOptions) -> float:
    """Interval after ``current_ms``, clamped to the configured ceiling."""
    return min(current_ms * options.backoff_factor, options.max_check_interval_ms)


def interval_schedule(options: PollingOptions) -> Iterator[float]:
    """Yield the successive polling intervals in milliseconds.

    With the defaults: 1000, 1500, 2250, 3375, 5000, 5000, ...
    """
    interval = float(min(options.check_interval_ms, options.max_check_interval_ms))
    while True:
        yield interval
        interval = next_interval(interval, options)


@dataclass
class PollState:
    """State of one in-flight wait loop."""

    job_id: str
    started_at: float
    current_interval_ms: float
    checks: int = 0

    def elapsed_ms(self, now: float) -> float:
        return (now - self.started_at) * 1000

    def advance(self, options: PollingOptions) -> None:
        self.current_interval_ms = next_interval(self.current_interval_ms, options)


class CompletionPoller:
    """Waits for a job to reach a terminal state.

    Each iteration checks the deadline, issues one status query, and either
    returns, raises, or sleeps for the current interval before growing it.
    Status query errors propagate unchanged.
    """

    def __init__(
        self,
        options: Optional[PollingOptions] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize poller.

        Args:
            options: Timing configuration (defaults if omitted)
            clock: Monotonic clock in seconds
            sleep: Coroutine sleeping for the given seconds
        """
        self.options = options or PollingOptions()
        self._clock = clock
        self._sleep = sleep

    async def wait(self, job_id: str, check: StatusCheck) -> Any:
        """Poll ``check`` until the job completes, fails or the deadline passes.

        Args:
            job_id: Identifier used for logging and errors
            check: Coroutine function returning a JobOutcome per call

        Returns:
            The ``result`` of the Completed outcome

        Raises:
            ConversionFailedException: If the job reports failure
            ConversionTimeoutException: If ``max_wait_ms`` elapses first
        """
        options = self.options
        state = PollState(
            job_id=job_id,
            started_at=self._clock(),
            current_interval_ms=float(min(options.check_interval_ms, options.max_check_interval_ms)),
        )

        logger.info(
            "polling_started",
            job_id=job_id,
            max_wait_ms=options.max_wait_ms,
            backoff_factor=options.backoff_factor,
        )

        while True:
            elapsed_ms = state.elapsed_ms(self._clock())
            if elapsed_ms >= options.max_wait_ms:
                logger.warning("polling_timeout", job_id=job_id, elapsed_ms=elapsed_ms, checks=state.checks)
                raise ConversionTimeoutException(job_id, elapsed_ms, options.max_wait_ms)

            outcome = await check()
            state.checks += 1

            if isinstance(outcome, Completed):
                logger.info("polling_completed", job_id=job_id, checks=state.checks, elapsed_ms=elapsed_ms)
                return outcome.result
            elif isinstance(outcome, Failed):
                logger.warning("polling_failed", job_id=job_id, reason=outcome.reason)
                raise ConversionFailedException(job_id, outcome.reason)
            elif isinstance(outcome, StillPending):
                logger.debug(
                    "polling_pending",
                    job_id=job_id,
                    state=outcome.state,
                    next_check_ms=state.current_interval_ms,
                )
            else:
                raise TypeError(f"Unexpected poll outcome: {outcome!r}")

            await self._sleep(state.current_interval_ms / 1000)
            state.advance(options)
