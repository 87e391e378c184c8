import logging
from typing import Callable

from fastapi.concurrency import run_in_threadpool
from psycopg2.extensions import connection as PgConnection

from app.db.postgres import get_postgres_connection
from app.schemas.queries import DatabaseCredentials, QueryResult

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = "Missing required credentials (connectionString or host/database/user)"
FALLBACK_ERROR_MESSAGE = "Failed to execute PostgreSQL query."


class PostgresQueryService:
    """Run SQL over a direct PostgreSQL connection: connect, query, format, disconnect"""

    def __init__(self, connect: Callable[[DatabaseCredentials], PgConnection] = get_postgres_connection):
        self.connect = connect

    async def execute(self, credentials: DatabaseCredentials, query: str) -> QueryResult:
        if not credentials.connection_string and (
            not credentials.host or not credentials.database or not credentials.user
        ):
            return QueryResult.failure(MISSING_CREDENTIALS_MESSAGE, query)

        try:
            return await run_in_threadpool(self._execute, credentials, query)
        except Exception as e:
            logger.error(f"PostgreSQL Query Error: {e}")
            return QueryResult.failure(str(e).strip() or FALLBACK_ERROR_MESSAGE, query)

    def _execute(self, credentials: DatabaseCredentials, query: str) -> QueryResult:
        conn = None
        try:
            conn = self.connect(credentials)
            cursor = conn.cursor()
            try:
                cursor.execute(query)
                columns, rows = [], []
                # No description means no result set (DDL, INSERT without RETURNING)
                if cursor.description is not None:
                    columns = [column[0] for column in cursor.description]
                    rows = [dict(zip(columns, record)) for record in cursor.fetchall()]
            finally:
                cursor.close()
            conn.commit()
            return QueryResult(columns=columns, rows=rows, query=query)
        finally:
            if conn is not None:
                conn.close()
