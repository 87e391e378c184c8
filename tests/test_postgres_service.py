"""Tests for the direct-connection PostgreSQL executor."""

import psycopg2
import pytest

from app.schemas.queries import DatabaseCredentials
from app.services.postgres import PostgresQueryService


class FakeCursor:
    def __init__(self, description, records, error=None):
        self.description = None
        self._description = description
        self._records = records
        self._error = error
        self.executed = []
        self.closed = False

    def execute(self, query):
        self.executed.append(query)
        if self._error is not None:
            raise self._error
        self.description = self._description

    def fetchall(self):
        return self._records

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.closed = False

    def cursor(self):
        return self._cursor

    def commit(self):
        self.committed = True

    def close(self):
        self.closed = True


def make_service(cursor):
    connection = FakeConnection(cursor)
    seen = []

    def connect(credentials):
        seen.append(credentials)
        return connection

    return PostgresQueryService(connect=connect), connection, seen


CREDENTIALS = DatabaseCredentials(databaseType="postgres", host="db.local", database="shop", user="app", password="pw")


@pytest.mark.asyncio
async def test_rows_are_keyed_by_column_name():
    cursor = FakeCursor(description=[("id",), ("email",)], records=[(1, "a@x.io"), (2, None)])
    service, connection, _ = make_service(cursor)

    result = await service.execute(CREDENTIALS, "SELECT id, email FROM customers")

    assert result.error is None
    assert result.columns == ["id", "email"]
    assert result.rows == [{"id": 1, "email": "a@x.io"}, {"id": 2, "email": None}]
    assert result.query == "SELECT id, email FROM customers"
    assert cursor.closed
    assert connection.closed


@pytest.mark.asyncio
async def test_statement_without_result_set():
    cursor = FakeCursor(description=None, records=[])
    service, connection, _ = make_service(cursor)

    result = await service.execute(CREDENTIALS, "CREATE TABLE t (id int)")

    assert result.columns == []
    assert result.rows == []
    assert result.error is None
    assert connection.committed


@pytest.mark.asyncio
async def test_driver_error_becomes_envelope_error_and_connection_closes():
    cursor = FakeCursor(description=None, records=[], error=psycopg2.ProgrammingError('relation "nope" does not exist'))
    service, connection, _ = make_service(cursor)

    result = await service.execute(CREDENTIALS, "SELECT * FROM nope")

    assert result.model_dump() == {
        "columns": [],
        "rows": [],
        "error": 'relation "nope" does not exist',
        "query": "SELECT * FROM nope",
    }
    assert connection.closed


@pytest.mark.asyncio
async def test_connection_string_alone_is_enough():
    cursor = FakeCursor(description=[("one",)], records=[(1,)])
    service, _, seen = make_service(cursor)
    credentials = DatabaseCredentials(databaseType="postgres", connectionString="postgresql://app@db/shop")

    result = await service.execute(credentials, "SELECT 1 AS one")

    assert result.rows == [{"one": 1}]
    assert seen[0].connection_string == "postgresql://app@db/shop"


@pytest.mark.asyncio
async def test_missing_credentials_skip_connecting():
    cursor = FakeCursor(description=None, records=[])
    service, _, seen = make_service(cursor)

    result = await service.execute(DatabaseCredentials(databaseType="postgres", host="db.local"), "SELECT 1")

    assert result.error == "Missing required credentials (connectionString or host/database/user)"
    assert seen == []


@pytest.mark.asyncio
async def test_error_without_message_uses_fallback():
    def connect(credentials):
        raise psycopg2.OperationalError()

    result = await PostgresQueryService(connect=connect).execute(CREDENTIALS, "SELECT 1")

    assert result.error == "Failed to execute PostgreSQL query."
