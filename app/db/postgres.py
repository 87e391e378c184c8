import psycopg2
from psycopg2.extensions import connection as PgConnection

from app.schemas.queries import DatabaseCredentials


def get_postgres_connection(credentials: DatabaseCredentials) -> PgConnection:
    """Get a fresh PostgreSQL connection"""
    if credentials.connection_string:
        return psycopg2.connect(credentials.connection_string)

    return psycopg2.connect(
        host=credentials.host,
        port=credentials.port,
        dbname=credentials.database,
        user=credentials.user,
        password=credentials.password,
    )
