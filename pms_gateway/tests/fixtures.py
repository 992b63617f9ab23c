"""
Shared test fixtures for gateway tests
Uses pytest-httpx for mocking HTTP calls
"""

from datetime import date
from typing import Any, Dict

import pytest
import pytest_asyncio
from pytest_httpx import HTTPXMock

from pms_gateway.adapters.apaleo import ApaleoAdapter
from pms_gateway.config import GatewaySettings
from pms_gateway.contracts import AvailabilityParams, Connection
from pms_gateway.factory import AdapterFactory
from pms_gateway.router import PMSRouter

APALEO_TOKEN_URL = "https://identity.apaleo.com/connect/token"

# Minimal live credential sets, one per provider tag
PROVIDER_CREDENTIALS: Dict[str, Dict[str, str]] = {
    "mews": {"client_token": "mews-client-token", "access_token": "mews-access-token"},
    "cloudbeds": {"access_token": "cb-token", "property_id": "CB1"},
    "apaleo": {"client_id": "test_client", "client_secret": "test_secret", "property_id": "DEMO01"},
    "opera": {"client_id": "op-client", "client_secret": "op-secret", "enterprise_id": "ENT", "hotel_id": "HOTEL1"},
    "protel": {"api_key": "protel-key", "hotel_code": "PR01"},
    "guestline": {"api_key": "gl-key", "site_id": "SITE1"},
    "roomraccoon": {"api_key": "rr-key", "property_id": "RR1"},
    "clockpms": {"api_key": "clock-key", "property_id": "CL1"},
    "hotelogix": {"api_key": "hx-key", "hotel_code": "HX1"},
    "ezee": {"api_key": "ezee-key", "hotel_code": "EZ1"},
    "littlehotelier": {"api_key": "lh-key", "property_id": "LH1"},
    "stayntouch": {"client_id": "snt-client", "client_secret": "snt-secret", "hotel_id": "SNT1"},
    "webrezpro": {"api_key": "wrp-key", "property_code": "WRP1"},
    "inforhms": {"client_id": "inf-client", "client_secret": "inf-secret", "tenant_id": "TEN", "hotel_id": "INF1"},
    "hostaway": {"client_id": "ha-client", "client_secret": "ha-secret"},
    "beds24": {"api_key": "b24-key", "prop_id": "1001"},
    "guesty": {"client_id": "gy-client", "client_secret": "gy-secret"},
}


@pytest.fixture
def settings() -> GatewaySettings:
    """Settings with plain-text logs and the default timeouts"""
    return GatewaySettings(log_json=False)


@pytest.fixture
def factory(settings) -> AdapterFactory:
    return AdapterFactory(settings=settings)


@pytest.fixture
def router(factory) -> PMSRouter:
    return PMSRouter(factory=factory)


@pytest.fixture
def stay_params() -> AvailabilityParams:
    """Two-night stay used across availability tests"""
    return AvailabilityParams(start_date=date(2024, 3, 1), end_date=date(2024, 3, 3))


@pytest.fixture
def oauth_token_response() -> Dict[str, Any]:
    """Standard OAuth token response"""
    return {
        "access_token": "test-token-123",
        "token_type": "Bearer",
        "expires_in": 3600,
        "scope": "read write",
    }


@pytest.fixture
def stub_connection() -> Connection:
    """Connection with no live credentials (resolves to the stub adapter)"""
    return Connection(id="conn_1", hotel_id="hotel_1", provider_type="mews", credentials={"hotelId": "hotel_1"})


@pytest.fixture
def apaleo_properties_response() -> Dict[str, Any]:
    """Mock Apaleo property list"""
    return {
        "properties": [
            {
                "id": "DEMO01",
                "code": "DEMO01",
                "name": "Demo Hotel",
                "timezone": "Europe/Berlin",
                "currencyCode": "EUR",
                "currency": "EUR",
                "address": {"street": "Main St 1", "city": "Berlin", "postalCode": "10115", "countryCode": "DE"},
            }
        ],
        "count": 1,
    }


@pytest.fixture
def apaleo_unit_groups_response() -> Dict[str, Any]:
    """Mock Apaleo unit groups (room types)"""
    return {
        "unitGroups": [
            {
                "id": "DEMO01-STD",
                "code": "STD",
                "name": "Standard Room",
                "description": "Comfortable standard room",
                "maxPersons": 2,
            },
            {
                "id": "DEMO01-DLX",
                "code": "DLX",
                "name": "Deluxe Room",
                "description": "Spacious deluxe room",
                "maxPersons": 4,
            },
        ],
        "count": 2,
    }


@pytest.fixture
def apaleo_reservations_response() -> Dict[str, Any]:
    """Mock Apaleo reservation list"""
    return {
        "reservations": [
            {
                "id": "RES123-1",
                "status": "Confirmed",
                "arrival": "2024-03-01T15:00:00+01:00",
                "departure": "2024-03-03T11:00:00+01:00",
                "unitGroup": {"id": "DEMO01-STD", "code": "STD"},
                "primaryGuest": {"firstName": "John", "lastName": "Doe", "email": "john@example.com"},
                "totalGrossAmount": {"amount": 240.0, "currency": "EUR"},
            },
            {
                "id": "RES124-1",
                "status": "InHouse",
                "arrival": "2024-03-02",
                "departure": "2024-03-05",
                "unitGroup": {"id": "DEMO01-DLX"},
                "primaryGuest": {"lastName": "Smith"},
                "totalGrossAmount": {"amount": "540.50", "currency": "EUR"},
            },
        ],
        "count": 2,
    }


@pytest.fixture
def mock_apaleo_auth(httpx_mock: HTTPXMock, oauth_token_response: Dict[str, Any]):
    """Mock Apaleo OAuth token endpoint (one exchange)"""
    httpx_mock.add_response(method="POST", url=APALEO_TOKEN_URL, json=oauth_token_response)
    return httpx_mock


@pytest.fixture
def apaleo_adapter(settings) -> ApaleoAdapter:
    return ApaleoAdapter(credentials=PROVIDER_CREDENTIALS["apaleo"], settings=settings)


@pytest_asyncio.fixture
async def connected_apaleo(apaleo_adapter):
    """Apaleo adapter holding a pooled client for the duration of the test"""
    async with apaleo_adapter as adapter:
        yield adapter
