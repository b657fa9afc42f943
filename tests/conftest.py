"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest

from cosmos_tools.client.config import CosmosConfig
from cosmos_tools.client.transport import TransportResponse

# Well-known key of the local Cosmos DB emulator
EMULATOR_KEY = "C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw=="


@pytest.fixture
def master_key():
    """Base64 master key."""
    return EMULATOR_KEY


@pytest.fixture
def config():
    """Create a test config signing with the emulator key."""
    return CosmosConfig(
        endpoint="https://localhost:8081",
        key=EMULATOR_KEY,
        timeout=30.0,
    )


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx client."""
    client = MagicMock()
    response = MagicMock()
    response.status_code = 200
    response.content = b"{}"
    response.json.return_value = {}
    response.headers = {"x-ms-activity-id": "activity-123"}
    client.request.return_value = response
    return client


@pytest.fixture
def mock_transport():
    """Create a generic mock transport for testing CosmosAPI."""
    transport = MagicMock()
    transport.send.return_value = TransportResponse(
        status_code=200,
        body={"_rid": "", "Databases": [], "_count": 0},
        headers={"x-ms-activity-id": "activity-123", "x-ms-request-charge": "1.5"},
    )
    return transport
