import logging
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from app.core.config import settings
from app.db.redshift import RedshiftDataClient, parse_host
from app.schemas.queries import DatabaseCredentials, QueryResult
from app.services.decoder import decode_records
from app.services.poller import PollOutcome, StatementPoller

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = "Missing required credentials (host, database, or user)"
TIMEOUT_MESSAGE = "Query timed out after multiple attempts"
FALLBACK_ERROR_MESSAGE = "Failed to execute SQL query."

ClientFactory = Callable[[str, str, str], RedshiftDataClient]


class RedshiftQueryService:
    """Run SQL through the Redshift Data API and shape the result.

    ``execute`` never raises for query problems: validation errors, failed
    statements, timeouts and transport errors all come back as a
    ``QueryResult`` with ``error`` set.
    """

    def __init__(
        self,
        client_factory: ClientFactory = RedshiftDataClient.connect,
        poll_interval: Optional[float] = None,
        max_poll_attempts: Optional[int] = None,
    ):
        self.client_factory = client_factory
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts

    async def execute(
        self,
        credentials: DatabaseCredentials,
        query: str,
        access_key_id: Optional[str],
        secret_access_key: Optional[str],
    ) -> QueryResult:
        """Execute a query and return the result envelope"""
        try:
            return await self._execute(credentials, query, access_key_id, secret_access_key)
        except Exception as e:
            logger.error(f"SQL Query Error: {e}")
            return QueryResult.failure(str(e) or FALLBACK_ERROR_MESSAGE, query)

    async def _execute(
        self,
        credentials: DatabaseCredentials,
        query: str,
        access_key_id: Optional[str],
        secret_access_key: Optional[str],
    ) -> QueryResult:
        if not credentials.host or not credentials.database or not credentials.user:
            return QueryResult.failure(MISSING_CREDENTIALS_MESSAGE, query)

        try:
            workgroup, region = parse_host(credentials.host)
        except ValueError as e:
            return QueryResult.failure(str(e), query)

        # Building a client loads the service model, so keep it off the event loop
        client = await run_in_threadpool(self.client_factory, region, access_key_id, secret_access_key)
        handle = await client.submit(
            workgroup=workgroup,
            database=credentials.database,
            sql=query,
            schema=credentials.schema_name,
        )
        logger.info(f"Submitted statement {handle.statement_id} to workgroup {workgroup} ({region})")

        poller = StatementPoller(
            client.describe,
            interval=self.poll_interval,
            max_attempts=self.max_poll_attempts,
        )
        poll_result = await poller.poll(handle)

        if poll_result.outcome == PollOutcome.FAILURE:
            return QueryResult.failure(poll_result.reason, query)
        if poll_result.outcome == PollOutcome.TIMEOUT:
            return QueryResult.failure(TIMEOUT_MESSAGE, query)

        result = await client.fetch_result(handle)
        columns = [column.name or "" for column in result.column_metadata]
        rows = decode_records(columns, result.records)
        logger.info(f"Statement {handle.statement_id} returned {len(rows)} rows")

        return QueryResult(columns=columns, rows=rows, query=query)
