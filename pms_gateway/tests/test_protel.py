"""
Unit tests for the Protel adapter
"""

import re
from datetime import date
from decimal import Decimal

import pytest
from pytest_httpx import HTTPXMock

from pms_gateway.adapters.protel import ProtelAdapter
from pms_gateway.contracts import ReservationParams, ReservationStatus, UpstreamApiError

from .fixtures import PROVIDER_CREDENTIALS

API = "https://api.protel.net/v1/hotels/PR01"


def _url(resource: str = ""):
    path = f"{API}/{resource}" if resource else API
    return re.compile(re.escape(path) + r"(\?.*)?$")


@pytest.fixture
def protel(settings):
    return ProtelAdapter(credentials=PROVIDER_CREDENTIALS["protel"], settings=settings)


class TestProtelAdapter:
    @pytest.mark.asyncio
    async def test_get_configuration(self, httpx_mock: HTTPXMock, protel):
        httpx_mock.add_response(
            url=_url(),
            json={
                "hotel": {
                    "hotelCode": "PR01",
                    "name": "Hotel Alster",
                    "address": {"street": "Jungfernstieg 7", "city": "Hamburg", "postalCode": "20354", "country": "DE"},
                }
            },
        )

        config = await protel.get_configuration()

        assert config.name == "Hotel Alster"
        assert config.timezone == "Europe/Berlin"
        assert config.currency == "EUR"
        assert config.address == "Jungfernstieg 7, Hamburg, 20354, DE"

        headers = httpx_mock.get_requests()[-1].headers
        assert headers["X-API-Key"] == "protel-key"
        assert headers["X-Hotel-Code"] == "PR01"

    @pytest.mark.asyncio
    async def test_configuration_without_hotel(self, httpx_mock: HTTPXMock, protel):
        httpx_mock.add_response(url=_url(), json={"status": "ok"})

        with pytest.raises(UpstreamApiError, match="no hotel data"):
            await protel.get_configuration()

    @pytest.mark.asyncio
    async def test_get_availability(self, httpx_mock: HTTPXMock, protel, stay_params):
        httpx_mock.add_response(
            url=_url("availability"),
            json={"availability": [{"date": "2024-03-01", "roomCategory": "DZ", "freeRooms": 6, "rateAmount": 135}]},
        )

        availability = await protel.get_availability(stay_params)

        assert [(a.room_type_id, a.available, a.rate) for a in availability] == [("DZ", 6, Decimal("135.00"))]

    @pytest.mark.asyncio
    async def test_get_reservations(self, httpx_mock: HTTPXMock, protel):
        httpx_mock.add_response(
            url=_url("reservations"),
            json={
                "bookings": [
                    {
                        "reservationNumber": 4711,
                        "mainGuest": {"title": "Herr", "firstName": "Jan", "lastName": "Meyer"},
                        "categoryCode": "DZ",
                        "arrivalDate": "2024-03-01",
                        "departureDate": "2024-03-02",
                        "reservationStatus": "CANCELLED",
                        "totalPrice": "135.00",
                    }
                ]
            },
        )

        reservations = await protel.get_reservations(ReservationParams(status=ReservationStatus.CANCELLED))

        reservation = reservations[0]
        assert reservation.id == "4711"
        assert reservation.guest_name == "Herr Jan Meyer"
        assert reservation.status == "cancelled"
        assert reservation.check_out == date(2024, 3, 2)
        assert httpx_mock.get_requests()[-1].url.params["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_room_categories_and_rate_codes(self, httpx_mock: HTTPXMock, protel):
        httpx_mock.add_response(
            url=_url("roomCategories"),
            json={"categories": [{"categoryCode": "DZ", "shortName": "Doppelzimmer", "maxPersons": 2}]},
        )
        httpx_mock.add_response(
            url=_url("rateCodes"),
            json={"rateCodes": [{"rateCode": "FLEX", "categoryCode": "DZ", "basePrice": 129}]},
        )

        room_types = await protel.get_room_types()
        rates = await protel.get_rates()

        assert [(rt.id, rt.name, rt.capacity) for rt in room_types] == [("DZ", "Doppelzimmer", 2)]
        assert [(r.id, r.name, r.room_type_id, r.price) for r in rates] == [("FLEX", "FLEX", "DZ", Decimal("129.00"))]

    @pytest.mark.asyncio
    async def test_non_object_records_are_skipped(self, httpx_mock: HTTPXMock, protel):
        httpx_mock.add_response(
            url=_url("roomCategories"),
            json={"items": [None, "x", {"categoryCode": "EZ", "shortName": "Einzelzimmer", "maxPersons": 1}]},
        )

        room_types = await protel.get_room_types()

        assert [(rt.id, rt.capacity) for rt in room_types] == [("EZ", 1)]
