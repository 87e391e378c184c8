import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel

from app.core.config import settings
from app.schemas.statements import (
    PENDING_STATUSES,
    StatementDescription,
    StatementHandle,
    StatementStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_REASON = "Query execution failed"


class PollOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


class PollResult(BaseModel):
    outcome: PollOutcome
    reason: Optional[str] = None
    status: Optional[str] = None
    attempts: int = 0


class StatementPoller:
    """Wait for a submitted statement to leave its pending states.

    Each attempt sleeps for ``interval`` seconds and then asks for the
    statement status once. Attempts are strictly sequential. After
    ``max_attempts`` pending answers the poll gives up with a timeout.
    """

    def __init__(
        self,
        describe: Callable[[StatementHandle], Awaitable[StatementDescription]],
        interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._describe = describe
        self.interval = settings.REDSHIFT_POLL_INTERVAL_SECONDS if interval is None else interval
        self.max_attempts = settings.REDSHIFT_MAX_POLL_ATTEMPTS if max_attempts is None else max_attempts
        self._sleep = sleep

    async def poll(self, handle: StatementHandle) -> PollResult:
        status = StatementStatus.SUBMITTED.value
        for attempt in range(1, self.max_attempts + 1):
            await self._sleep(self.interval)
            description = await self._describe(handle)
            status = description.status

            if status == StatementStatus.FAILED.value:
                logger.info(f"Statement {handle.statement_id} failed after {attempt} checks")
                return PollResult(
                    outcome=PollOutcome.FAILURE,
                    reason=description.error or DEFAULT_FAILURE_REASON,
                    status=status,
                    attempts=attempt,
                )

            if status not in PENDING_STATUSES:
                logger.info(f"Statement {handle.statement_id} reached {status or 'unknown'} after {attempt} checks")
                return PollResult(outcome=PollOutcome.SUCCESS, status=status, attempts=attempt)

        logger.warning(f"Statement {handle.statement_id} still {status} after {self.max_attempts} checks")
        return PollResult(outcome=PollOutcome.TIMEOUT, status=status, attempts=self.max_attempts)
