import logging
import re
from typing import Any, Optional, Tuple

import boto3
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.errors import StatementSubmissionError
from app.schemas.statements import (
    ColumnMetadata,
    StatementDescription,
    StatementHandle,
    StatementResult,
)

logger = logging.getLogger(__name__)

SERVICE_DOMAIN_MARKER = "redshift"
INVALID_HOST_MESSAGE = (
    "Invalid host format. Expected format: "
    "workgroup-name.account-id.region.redshift-serverless.amazonaws.com"
)


def parse_host(
    host: str,
    marker: str = SERVICE_DOMAIN_MARKER,
    default_region: Optional[str] = None,
) -> Tuple[str, str]:
    """Split a warehouse host name into (workgroup, region).

    The workgroup is the first dot-delimited segment. The region is the
    segment right before ``.<marker>``; hosts without it fall back to the
    default region. Raises ValueError for hosts with fewer than two segments.
    """
    parts = host.split(".")
    if len(parts) < 2:
        raise ValueError(INVALID_HOST_MESSAGE)

    match = re.search(r"\.([a-z0-9-]+)\." + re.escape(marker), host)
    region = match.group(1) if match else (default_region or settings.REDSHIFT_DEFAULT_REGION)
    return parts[0], region


def get_redshift_data_client(region: str, access_key_id: str, secret_access_key: str) -> Any:
    """Get a fresh boto3 Redshift Data API client.

    A new session per call, since the default boto3 session is not safe to
    share between threadpool workers.
    """
    session = boto3.session.Session()
    return session.client(
        "redshift-data",
        region_name=region,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
    )


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class RedshiftDataClient:
    """Async facade over the blocking boto3 ``redshift-data`` client.

    Every call runs in the threadpool so a request waiting on the warehouse
    never blocks the event loop.
    """

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def connect(cls, region: str, access_key_id: str, secret_access_key: str) -> "RedshiftDataClient":
        return cls(get_redshift_data_client(region, access_key_id, secret_access_key))

    async def submit(
        self,
        workgroup: str,
        database: str,
        sql: str,
        schema: Optional[str] = None,
    ) -> StatementHandle:
        """Submit a statement and return its handle"""
        if schema:
            # The Data API has no schema parameter; scope the session first
            response = await run_in_threadpool(
                self.client.batch_execute_statement,
                WorkgroupName=workgroup,
                Database=database,
                Sqls=[f"SET search_path TO {_quote_identifier(schema)}", sql],
            )
            statement_id = response.get("Id")
            if not statement_id:
                raise StatementSubmissionError("Failed to get statement ID from Redshift")
            return StatementHandle(statement_id=statement_id, result_id=f"{statement_id}:2")

        response = await run_in_threadpool(
            self.client.execute_statement,
            WorkgroupName=workgroup,
            Database=database,
            Sql=sql,
        )
        statement_id = response.get("Id")
        if not statement_id:
            raise StatementSubmissionError("Failed to get statement ID from Redshift")
        return StatementHandle(statement_id=statement_id, result_id=statement_id)

    async def describe(self, handle: StatementHandle) -> StatementDescription:
        """Get the current execution status of a statement"""
        response = await run_in_threadpool(self.client.describe_statement, Id=handle.statement_id)
        return StatementDescription(
            status=response.get("Status") or "",
            error=response.get("Error"),
        )

    async def fetch_result(self, handle: StatementHandle) -> StatementResult:
        """Fetch the first page of a finished statement's result set"""
        response = await run_in_threadpool(self.client.get_statement_result, Id=handle.result_id)
        return StatementResult(
            column_metadata=[
                ColumnMetadata.model_validate(column)
                for column in response.get("ColumnMetadata") or []
            ],
            records=response.get("Records") or [],
        )
