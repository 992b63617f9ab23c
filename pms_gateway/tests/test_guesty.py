"""
Unit tests for the Guesty adapter
"""

import re
from datetime import date
from decimal import Decimal

import pytest
from pytest_httpx import HTTPXMock

from pms_gateway.adapters.guesty import GuestyAdapter
from pms_gateway.contracts import AvailabilityParams, UpstreamApiError

from .fixtures import PROVIDER_CREDENTIALS

API = "https://open-api.guesty.com/v1"
TOKEN_URL = "https://open-api.guesty.com/oauth2/token"


def _url(path: str):
    return re.compile(re.escape(f"{API}{path}") + r"(\?.*)?$")


@pytest.fixture
def guesty(settings, httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=TOKEN_URL, json={"access_token": "gy-token", "expires_in": 86400})
    return GuestyAdapter(credentials=PROVIDER_CREDENTIALS["guesty"], settings=settings)


class TestGuestyAdapter:
    @pytest.mark.asyncio
    async def test_configuration_from_first_listing(self, httpx_mock: HTTPXMock, guesty):
        httpx_mock.add_response(
            url=_url("/listings"),
            json={
                "results": [
                    {
                        "_id": "lst_1",
                        "title": "Beach Villa",
                        "timezone": "Europe/Lisbon",
                        "prices": {"currency": "EUR"},
                        "address": {"full": "Rua do Mar 3, Cascais, Portugal"},
                    }
                ]
            },
        )

        config = await guesty.get_configuration()

        assert config.id == "lst_1"
        assert config.name == "Beach Villa"
        assert config.currency == "EUR"
        assert config.address == "Rua do Mar 3, Cascais, Portugal"
        assert httpx_mock.get_requests()[-1].url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_configuration_for_pinned_listing(self, httpx_mock: HTTPXMock, settings):
        adapter = GuestyAdapter(credentials={**PROVIDER_CREDENTIALS["guesty"], "listing_id": "lst_9"}, settings=settings)
        httpx_mock.add_response(url=TOKEN_URL, json={"access_token": "gy-token"})
        httpx_mock.add_response(
            url=_url("/listings/lst_9"),
            json={"_id": "lst_9", "nickname": "City Flat", "address": {"street": "Main 1", "city": "Porto", "country": "PT"}},
        )

        config = await adapter.get_configuration()

        assert config.name == "City Flat"
        assert config.address == "Main 1, Porto, PT"

    @pytest.mark.asyncio
    async def test_account_without_listings(self, httpx_mock: HTTPXMock, guesty):
        httpx_mock.add_response(url=_url("/listings"), json={"results": [], "count": 0})

        with pytest.raises(UpstreamApiError, match="no listings"):
            await guesty.get_configuration()

    @pytest.mark.asyncio
    async def test_calendar_days_marked_unavailable_when_booked_or_blocked(self, httpx_mock: HTTPXMock, guesty):
        httpx_mock.add_response(
            url=_url("/availability-pricing/api/calendar/listings/lst_1"),
            json={
                "data": {
                    "days": [
                        {"date": "2024-03-01", "status": "available", "price": 210, "currency": "EUR"},
                        {"date": "2024-03-02", "status": "booked", "reservationId": "r1", "price": 210},
                        {"date": "2024-03-03", "status": "available", "blocks": {"m": True}, "price": 230},
                    ]
                }
            },
        )

        availability = await guesty.get_availability(
            AvailabilityParams(start_date=date(2024, 3, 1), end_date=date(2024, 3, 4), room_type_id="lst_1")
        )

        assert [(a.date, a.available) for a in availability] == [
            (date(2024, 3, 1), 1),
            (date(2024, 3, 2), 0),
            (date(2024, 3, 3), 0),
        ]
        assert availability[0].rate == Decimal("210.00")
        assert availability[0].currency == "EUR"
        assert availability[1].currency == "USD"

    @pytest.mark.asyncio
    async def test_get_reservations(self, httpx_mock: HTTPXMock, guesty):
        httpx_mock.add_response(
            url=_url("/reservations"),
            json={
                "results": [
                    {
                        "_id": "res_1",
                        "listingId": "lst_1",
                        "guest": {"fullName": "Tomas Silva"},
                        "checkInDateLocalized": "2024-03-01",
                        "checkOutDateLocalized": "2024-03-05",
                        "status": "confirmed",
                        "money": {"hostPayout": 840, "currency": "EUR"},
                    }
                ]
            },
        )

        reservations = await guesty.get_reservations()

        assert reservations[0].id == "res_1"
        assert reservations[0].guest_name == "Tomas Silva"
        assert reservations[0].check_out == date(2024, 3, 5)
        assert reservations[0].total_amount == Decimal("840.00")
        assert reservations[0].currency == "EUR"

    @pytest.mark.asyncio
    async def test_listings_as_room_types(self, httpx_mock: HTTPXMock, guesty):
        httpx_mock.add_response(
            url=_url("/listings"),
            json={"results": [{"_id": "lst_1", "title": "Beach Villa", "accommodates": 6, "propertyType": "Villa"}]},
        )

        room_types = await guesty.get_room_types()

        assert [(rt.id, rt.capacity, rt.description) for rt in room_types] == [("lst_1", 6, "Villa")]
        assert httpx_mock.get_requests()[-1].url.params["limit"] == "100"

    @pytest.mark.asyncio
    async def test_nested_error_message(self, httpx_mock: HTTPXMock, guesty):
        httpx_mock.add_response(
            url=_url("/reservations"),
            status_code=403,
            json={"error": {"code": "FORBIDDEN", "message": "Token lacks reservations scope"}},
        )

        with pytest.raises(UpstreamApiError, match="lacks reservations scope"):
            await guesty.get_reservations()


@pytest.mark.asyncio
async def test_guesty_has_no_rate_catalogue(settings):
    adapter = GuestyAdapter(credentials=PROVIDER_CREDENTIALS["guesty"], settings=settings)

    assert await adapter.get_rates() == []
    assert adapter.capabilities["rates"] is False
