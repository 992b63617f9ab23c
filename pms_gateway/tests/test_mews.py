"""
Unit tests for the Mews Connector API adapter
"""

import json
from datetime import date
from decimal import Decimal

import pytest
from pytest_httpx import HTTPXMock

from pms_gateway.adapters.mews import MewsAdapter
from pms_gateway.contracts import (
    AuthenticationError,
    Environment,
    ReservationParams,
    ReservationStatus,
    UpstreamApiError,
)

from .fixtures import PROVIDER_CREDENTIALS

API = "https://api.mews.com/api/connector/v1"


@pytest.fixture
def mews(settings):
    return MewsAdapter(credentials=PROVIDER_CREDENTIALS["mews"], settings=settings)


def _body(request):
    return json.loads(request.content)


class TestMewsAdapter:
    @pytest.mark.asyncio
    async def test_credentials_travel_in_body(self, httpx_mock: HTTPXMock, mews):
        httpx_mock.add_response(
            url=f"{API}/configuration/get",
            method="POST",
            json={
                "Enterprise": {
                    "Id": "ent-1",
                    "Name": "Mews Grand",
                    "TimeZoneIdentifier": "Europe/Prague",
                    "DefaultCurrency": "CZK",
                    "Address": {"Line1": "Wenceslas Sq 1", "City": "Prague", "PostalCode": "11000", "CountryCode": "CZ"},
                }
            },
        )

        config = await mews.get_configuration()

        assert config.id == "ent-1"
        assert config.name == "Mews Grand"
        assert config.timezone == "Europe/Prague"
        assert config.currency == "CZK"
        assert config.address == "Wenceslas Sq 1, Prague, 11000, CZ"

        request = httpx_mock.get_requests()[-1]
        assert _body(request) == {
            "ClientToken": "mews-client-token",
            "AccessToken": "mews-access-token",
            "Client": "PMS-Gateway/1.0",
        }
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_sandbox_environment(self, httpx_mock: HTTPXMock, settings):
        adapter = MewsAdapter(
            credentials={**PROVIDER_CREDENTIALS["mews"], "client": "Front Desk 2.1"},
            environment=Environment.SANDBOX,
            settings=settings,
        )
        httpx_mock.add_response(
            url="https://api.mews-demo.com/api/connector/v1/configuration/get",
            json={"Enterprise": {"Id": "demo", "Name": {"en-US": "Demo Enterprise"}}},
        )

        config = await adapter.get_configuration()

        assert config.name == "Demo Enterprise"
        assert config.currency == "EUR"
        assert _body(httpx_mock.get_requests()[-1])["Client"] == "Front Desk 2.1"

    @pytest.mark.asyncio
    async def test_availability_time_units(self, httpx_mock: HTTPXMock, mews, stay_params):
        httpx_mock.add_response(
            url=f"{API}/services/getAvailability",
            json={
                "TimeUnitStartsUtc": ["2024-03-01T00:00:00Z", "2024-03-02T00:00:00Z"],
                "CategoryAvailabilities": [
                    {"CategoryId": "cat-dbl", "Availabilities": [5, 3]},
                    {"CategoryId": "cat-sgl", "Availabilities": [1, 0]},
                ],
            },
        )

        availability = await mews.get_availability(stay_params)

        assert [(a.date, a.room_type_id, a.available) for a in availability] == [
            (date(2024, 3, 1), "cat-dbl", 5),
            (date(2024, 3, 2), "cat-dbl", 3),
            (date(2024, 3, 1), "cat-sgl", 1),
            (date(2024, 3, 2), "cat-sgl", 0),
        ]
        assert {a.rate for a in availability} == {Decimal("0.00")}

        body = _body(httpx_mock.get_requests()[-1])
        assert body["StartUtc"] == "2024-03-01T00:00:00Z"
        assert body["EndUtc"] == "2024-03-03T00:00:00Z"

    @pytest.mark.asyncio
    async def test_availability_per_category_dates(self, httpx_mock: HTTPXMock, mews, stay_params):
        httpx_mock.add_response(
            url=f"{API}/services/getAvailability",
            json={"CategoryAvailabilities": [{"CategoryId": "cat-dbl", "Date": "2024-03-02", "Availabilities": [{"Value": 7}]}]},
        )

        availability = await mews.get_availability(stay_params)

        assert len(availability) == 1
        assert availability[0].date == date(2024, 3, 2)
        assert availability[0].available == 7

    @pytest.mark.asyncio
    async def test_get_reservations(self, httpx_mock: HTTPXMock, mews):
        httpx_mock.add_response(
            url=f"{API}/reservations/getAll",
            json={
                "Reservations": [
                    {
                        "Id": "res-1",
                        "GuestName": "Karel Novak",
                        "RequestedCategoryId": "cat-dbl",
                        "StartUtc": "2024-03-01T14:00:00Z",
                        "EndUtc": "2024-03-03T10:00:00Z",
                        "State": "Started",
                        "TotalAmount": {"Value": 300, "Currency": "EUR"},
                    },
                    {"Id": "res-2", "State": "Canceled"},
                ]
            },
        )

        reservations = await mews.get_reservations(
            ReservationParams(start_date=date(2024, 3, 1), status=ReservationStatus.CHECKED_IN)
        )

        assert reservations[0].guest_name == "Karel Novak"
        assert reservations[0].status == "checked_in"
        assert reservations[0].check_out == date(2024, 3, 3)
        assert reservations[0].total_amount == Decimal("300.00")
        assert reservations[1].guest_name == "Guest"
        assert reservations[1].status == "cancelled"

        body = _body(httpx_mock.get_requests()[-1])
        assert body["States"] == ["Started"]
        assert body["StartUtc"] == "2024-03-01T00:00:00Z"
        assert "EndUtc" not in body

    @pytest.mark.asyncio
    async def test_room_types_and_rates(self, httpx_mock: HTTPXMock, mews):
        httpx_mock.add_response(
            url=f"{API}/resources/getAll",
            json={"ResourceCategories": [{"Id": "cat-dbl", "Name": {"en-US": "Double"}, "Capacity": 2}]},
        )
        httpx_mock.add_response(
            url=f"{API}/rates/getAll",
            json={"Rates": [{"Id": "rate-1", "Name": "Flexible", "ServiceId": "svc", "Price": {"Value": 89.5, "Currency": "EUR"}}]},
        )

        room_types = await mews.get_room_types()
        rates = await mews.get_rates()

        assert [(rt.id, rt.name, rt.capacity) for rt in room_types] == [("cat-dbl", "Double", 2)]
        assert rates[0].price == Decimal("89.50")
        assert rates[0].room_type_id == "svc"
        assert _body(httpx_mock.get_requests()[0])["Extent"] == {"Categories": True}

    @pytest.mark.asyncio
    async def test_rejected_token_is_final(self, httpx_mock: HTTPXMock, mews):
        httpx_mock.add_response(url=f"{API}/rates/getAll", status_code=401, json={"Message": "Invalid AccessToken"})

        with pytest.raises(AuthenticationError):
            await mews.get_rates()

        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.asyncio
    async def test_error_message_uses_mews_casing(self, httpx_mock: HTTPXMock, mews):
        httpx_mock.add_response(url=f"{API}/rates/getAll", status_code=400, json={"Message": "Invalid ServiceId"})

        with pytest.raises(UpstreamApiError, match="Invalid ServiceId"):
            await mews.get_rates()
