"""
RoomRaccoon Adapter
Bearer API key; availability comes either as a flat list or as a calendar
of days each carrying its rooms
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
    dig,
    extract_collection,
    first_present,
    normalize_status,
    records,
    status_filter,
    to_date,
    to_decimal,
    to_int,
)


class RoomRaccoonAdapter(ApiKeyAdapter):
    provider = "roomraccoon"
    display_name = "RoomRaccoon"
    default_currency = "EUR"
    default_timezone = "Europe/Amsterdam"
    production_url = "https://api.roomraccoon.com/v2"
    required_credentials = ("api_key", "property_id")
    secret_credentials = ("api_key",)
    api_key_header = "Authorization"
    api_key_scheme = "Bearer"
    error_message_keys = ("message", "error", ("errors", 0, "message"))

    @property
    def property_id(self) -> str:
        return str(self.credentials["property_id"])

    def _base_headers(self) -> Dict[str, str]:
        return {"X-Property-Id": self.property_id}

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("GET", f"/properties/{self.property_id}", operation="get_configuration")
        prop = first_present(payload, "property", "data")
        if not isinstance(prop, dict):
            raise UpstreamApiError("RoomRaccoon returned no property data.", provider=self.provider, body=payload)

        address = prop.get("address") or {}
        return HotelConfiguration(
            id=str(first_present(prop, "id", "propertyId", default=self.property_id)),
            name=prop.get("name") or "RoomRaccoon Property",
            timezone=prop.get("timezone") or self.default_timezone,
            currency=prop.get("currency") or self.default_currency,
            address=compose_address(
                address.get("street"), address.get("city"), address.get("postalCode"), address.get("country")
            ),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "GET",
            f"/properties/{self.property_id}/availability",
            params={
                "startDate": params.start_date.isoformat(),
                "endDate": params.end_date.isoformat(),
                "roomTypeId": params.room_type_id,
            },
            operation="get_availability",
        )

        results = []
        for item in extract_collection(payload, ["availability"]):
            available = item.get("available")
            if available is None:
                # Derive free units from inventory counters
                available = to_int(item.get("inventory")) - to_int(item.get("booked")) - to_int(item.get("blocked"))
            results.append(
                Availability(
                    date=to_date(item.get("date")) or params.start_date,
                    room_type_id=str(first_present(item, "roomTypeId", "roomId", default=params.room_type_id or "")),
                    available=to_int(available),
                    rate=to_decimal(first_present(item, "rate", "price")),
                    currency=item.get("currency") or self.default_currency,
                )
            )

        for day in records(dig(payload, "calendar")):
            for room in records(day.get("rooms")):
                results.append(
                    Availability(
                        date=to_date(day.get("date")) or params.start_date,
                        room_type_id=str(first_present(room, "roomTypeId", "roomId", default="")),
                        available=to_int(room.get("available")),
                        rate=to_decimal(first_present(room, "rate", "price")),
                        currency=room.get("currency") or self.default_currency,
                    )
                )
        return results

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            f"/properties/{self.property_id}/bookings",
            params={
                "startDate": params.start_date.isoformat() if params.start_date else None,
                "endDate": params.end_date.isoformat() if params.end_date else None,
                "status": status_filter(params.status),
            },
            operation="get_reservations",
        )
        return [self._to_reservation(item) for item in extract_collection(payload, ["bookings", "reservations"])]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        guest = item.get("guest") or item.get("guestDetails") or {}
        return Reservation(
            id=str(first_present(item, "id", "bookingId", "reservationId", "confirmationCode", default="")),
            guest_name=compose_name(guest.get("firstName"), guest.get("lastName")),
            room_type_id=str(first_present(item, "roomTypeId", "roomId", default="")),
            check_in=to_date(first_present(item, "checkIn", "arrivalDate")),
            check_out=to_date(first_present(item, "checkOut", "departureDate")),
            status=normalize_status(item.get("status")),
            total_amount=to_decimal(first_present(item, "totalAmount", "total")),
            currency=item.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request("GET", f"/properties/{self.property_id}/rooms", operation="get_room_types")
        return [
            RoomType(
                id=str(first_present(item, "id", "roomId", "roomTypeId", default="")),
                name=str(first_present(item, "name", "shortName", default="")),
                capacity=to_int(first_present(item, "maxOccupancy", "maxAdults"), 2) or 2,
                description=item.get("description"),
            )
            for item in extract_collection(payload, ["rooms", "roomTypes"])
        ]

    async def get_rates(self) -> List[Rate]:
        payload = await self._request("GET", f"/properties/{self.property_id}/rates", operation="get_rates")
        return [
            Rate(
                id=str(first_present(item, "id", "rateId", "code", default="")),
                name=str(first_present(item, "name", "code", default="Rate Plan")),
                room_type_id=str(item.get("roomTypeId") or ""),
                price=to_decimal(item.get("baseRate")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["rates", "ratePlans"])
        ]
