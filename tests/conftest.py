"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_credential_presets, get_redshift_service
from app.db.redshift import RedshiftDataClient
from app.main import app
from app.services.credentials import CredentialPresets
from app.services.redshift import RedshiftQueryService

from tests.fakes import TEST_HOST, FakeRedshiftData



@pytest.fixture
def fake_redshift():
    return FakeRedshiftData(
        statuses=["SUBMITTED", "PICKED", "FINISHED"],
        result={
            "ColumnMetadata": [{"name": "id", "typeName": "int8"}, {"name": "name", "typeName": "varchar"}],
            "Records": [
                [{"longValue": 1}, {"stringValue": "alpha"}],
                [{"longValue": 2}, {"isNull": True}],
            ],
        },
    )


@pytest.fixture
def client_factory(fake_redshift):
    """Client factory that records the region and key pair it was asked for"""

    def factory(region, access_key_id, secret_access_key):
        factory.connections.append((region, access_key_id, secret_access_key))
        return RedshiftDataClient(fake_redshift)

    factory.connections = []
    return factory


@pytest.fixture
def redshift_service(client_factory):
    return RedshiftQueryService(client_factory=client_factory, poll_interval=0)


@pytest.fixture
def presets():
    return CredentialPresets({
        "SAMPLE-1_REDSHIFT_CREDENTIALS": (
            '{"host": "%s", "port": 5439, "database": "dev", "user": "reader"}' % TEST_HOST
        ),
        "SAMPLE-2_REDSHIFT_CREDENTIALS": (
            '{"databaseType": "postgres", "host": "db.local", "database": "shop", "user": "app"}'
        ),
        "SAMPLE-BROKEN_REDSHIFT_CREDENTIALS": "{not json",
    })


@pytest.fixture
def client(presets, redshift_service):
    """Create a test client with upstream services replaced by fakes."""
    app.dependency_overrides[get_credential_presets] = lambda: presets
    app.dependency_overrides[get_redshift_service] = lambda: redshift_service
    yield TestClient(app)
    app.dependency_overrides.clear()
