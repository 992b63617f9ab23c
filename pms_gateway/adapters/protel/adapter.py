"""
Protel PMS Adapter
API key plus hotel code headers; rooms are modelled as categories
"""

from typing import Any, Dict, List, Optional

from ...auth import ApiKeyAdapter
from ...contracts import (
    Availability,
    AvailabilityParams,
    HotelConfiguration,
    Rate,
    Reservation,
    ReservationParams,
    RoomType,
    UpstreamApiError,
)
from ...utils.normalize import (
    compose_address,
    compose_name,
    extract_collection,
    first_present,
    normalize_status,
    status_filter,
    to_date,
    to_decimal,
    to_int,
)


class ProtelAdapter(ApiKeyAdapter):
    provider = "protel"
    display_name = "Protel"
    default_currency = "EUR"
    default_timezone = "Europe/Berlin"
    production_url = "https://api.protel.net/v1"
    sandbox_url = "https://sandbox-api.protel.net/v1"
    required_credentials = ("api_key", "hotel_code")
    secret_credentials = ("api_key",)
    api_key_header = "X-API-Key"
    error_message_keys = ("message", "error", "details")

    @property
    def hotel_code(self) -> str:
        return str(self.credentials["hotel_code"])

    def _base_headers(self) -> Dict[str, str]:
        return {"X-Hotel-Code": self.hotel_code}

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("GET", f"/hotels/{self.hotel_code}", operation="get_configuration")
        hotel = first_present(payload, "hotel", "data")
        if not isinstance(hotel, dict):
            raise UpstreamApiError("Protel returned no hotel data.", provider=self.provider, body=payload)

        address = hotel.get("address") or {}
        return HotelConfiguration(
            id=str(first_present(hotel, "hotelCode", "hotelId", default=self.hotel_code)),
            name=hotel.get("name") or "Protel Hotel",
            timezone=hotel.get("timezone") or self.default_timezone,
            currency=hotel.get("currency") or self.default_currency,
            address=compose_address(
                address.get("street"), address.get("city"), address.get("postalCode"), address.get("country")
            ),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "GET",
            f"/hotels/{self.hotel_code}/availability",
            params={
                "fromDate": params.start_date.isoformat(),
                "toDate": params.end_date.isoformat(),
                "categoryCode": params.room_type_id,
            },
            operation="get_availability",
        )
        return [
            Availability(
                date=to_date(item.get("date")) or params.start_date,
                room_type_id=str(first_present(item, "categoryCode", "roomCategory", default=params.room_type_id or "")),
                available=to_int(first_present(item, "available", "freeRooms")),
                rate=to_decimal(first_present(item, "price", "rateAmount")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["availability"])
        ]

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            f"/hotels/{self.hotel_code}/reservations",
            params={
                "fromDate": params.start_date.isoformat() if params.start_date else None,
                "toDate": params.end_date.isoformat() if params.end_date else None,
                "status": status_filter(params.status),
            },
            operation="get_reservations",
        )
        return [self._to_reservation(item) for item in extract_collection(payload, ["reservations", "bookings"])]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        guest = item.get("guest") or item.get("mainGuest") or {}
        return Reservation(
            id=str(first_present(item, "reservationId", "reservationNumber", "bookingNumber", default="")),
            guest_name=compose_name(guest.get("title"), guest.get("firstName"), guest.get("lastName")),
            room_type_id=str(first_present(item, "roomCategory", "categoryCode", default="")),
            check_in=to_date(first_present(item, "arrival", "arrivalDate")),
            check_out=to_date(first_present(item, "departure", "departureDate")),
            status=normalize_status(first_present(item, "status", "reservationStatus")),
            total_amount=to_decimal(first_present(item, "totalAmount", "totalPrice")),
            currency=item.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request("GET", f"/hotels/{self.hotel_code}/roomCategories", operation="get_room_types")
        return [
            RoomType(
                id=str(first_present(item, "categoryCode", "categoryId", default="")),
                name=str(first_present(item, "name", "shortName", default="")),
                capacity=to_int(first_present(item, "maxPersons", "maxAdults"), 2) or 2,
                description=item.get("description"),
            )
            for item in extract_collection(payload, ["roomCategories", "categories"])
        ]

    async def get_rates(self) -> List[Rate]:
        payload = await self._request("GET", f"/hotels/{self.hotel_code}/rateCodes", operation="get_rates")
        return [
            Rate(
                id=str(first_present(item, "rateCode", "rateId", default="")),
                name=str(first_present(item, "name", "rateCode", default="Rate")),
                room_type_id=str(item.get("categoryCode") or ""),
                price=to_decimal(item.get("basePrice")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["rateCodes", "rates"])
        ]
