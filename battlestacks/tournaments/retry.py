from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from battlestacks.tournaments.errors import TournamentTransactionConflictError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def run_with_conflict_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    base_delay_seconds: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run a whole transaction factory, re-running it on tournament write conflicts.

    The n-th retry waits ``base_delay_seconds * 2 ** (n - 1)``. Any other
    exception propagates on the first attempt.
    """
    resolved_attempts = max(1, int(attempts))

    def _log_retry(retry_state: RetryCallState) -> None:
        delay_seconds = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "tournament_transaction_conflict_retry",
            attempt=retry_state.attempt_number,
            attempts=resolved_attempts,
            delay_seconds=delay_seconds,
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(resolved_attempts),
        wait=wait_exponential(multiplier=max(0.0, float(base_delay_seconds))),
        retry=retry_if_exception_type(TournamentTransactionConflictError),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    try:
        return await retrying(operation)
    except TournamentTransactionConflictError:
        logger.warning("tournament_transaction_conflict_exhausted", attempts=resolved_attempts)
        raise
