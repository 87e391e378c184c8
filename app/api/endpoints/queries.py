from fastapi import APIRouter, Depends, Request

from app.api.deps import get_credential_resolver, get_postgres_service, get_redshift_service
from app.api.disconnect import run_until_disconnected
from app.core.config import settings
from app.schemas.queries import DatabaseType, QueryRequest, QueryResult
from app.services.credentials import CredentialResolver
from app.services.postgres import PostgresQueryService
from app.services.redshift import RedshiftQueryService

router = APIRouter()


@router.post("/query", response_model=QueryResult)
async def execute_query_endpoint(
    request: Request,
    body: QueryRequest,
    resolver: CredentialResolver = Depends(get_credential_resolver),
    redshift_service: RedshiftQueryService = Depends(get_redshift_service),
    postgres_service: PostgresQueryService = Depends(get_postgres_service),
) -> QueryResult:
    """Execute a SQL query against Redshift or PostgreSQL"""
    credentials = resolver.resolve(body.redshift_credentials)

    if credentials.database_type == DatabaseType.POSTGRES:
        execution = postgres_service.execute(credentials, body.code)
    else:
        execution = redshift_service.execute(
            credentials,
            body.code,
            settings.AWS_ACCESS_KEY_ID,
            settings.AWS_SECRET_ACCESS_KEY,
        )

    return await run_until_disconnected(request, execution)
