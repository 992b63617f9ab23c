"""
Cloudbeds PMS Adapter
Access token (or API key) in the query string; a username/password login
is exchanged for a token on first use. Responses are wrapped as
{"success": bool, "data": ...}.
"""

from typing import Any, Dict, List, Optional

from ...auth import QueryKeyAdapter
from ...contracts import (
    Availability,
    AvailabilityParams,
    HotelConfiguration,
    Rate,
    Reservation,
    ReservationParams,
    ReservationStatus,
    RoomType,
    UpstreamApiError,
)
from ...utils.normalize import (
    compose_address,
    date_param,
    dig,
    drop_none,
    extract_collection,
    first_present,
    normalize_status,
    status_filter,
    to_date,
    to_decimal,
    to_int,
)


class CloudbedsAdapter(QueryKeyAdapter):
    provider = "cloudbeds"
    display_name = "Cloudbeds"
    default_currency = "USD"
    default_timezone = "UTC"
    production_url = "https://api.cloudbeds.com/api/v1.2"
    required_credentials = ()
    secret_credentials = ("access_token", "api_key", "username", "password")
    error_message_keys = ("message", "error")

    STATUS_FILTERS = {
        ReservationStatus.CONFIRMED: "confirmed",
        ReservationStatus.CANCELLED: "canceled",
        ReservationStatus.CHECKED_IN: "checked_in",
        ReservationStatus.CHECKED_OUT: "checked_out",
    }

    @property
    def property_id(self) -> Optional[str]:
        return self.credentials.get("property_id")

    def _auth_params(self, credential: str) -> Dict[str, Any]:
        return drop_none({"access_token": credential, "propertyID": self.property_id})

    def _check_payload(self, payload: Any) -> None:
        if isinstance(payload, dict) and payload.get("success") is False:
            message = first_present(payload, "message", "error", default="Cloudbeds reported an unsuccessful request.")
            raise UpstreamApiError(str(message), provider=self.provider, status_code=200, body=payload)

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("GET", "/getHotelDetails", operation="get_configuration")
        hotel = dig(payload, "data", default={})
        if not isinstance(hotel, dict):
            hotel = {}

        address = hotel.get("propertyAddress") or {}
        return HotelConfiguration(
            id=str(first_present(hotel, "propertyID", "property_id", default=self.property_id or "")),
            name=str(first_present(hotel, "propertyName", "property_name", default="")),
            timezone=first_present(hotel, "propertyTimezone", "timezone", default=self.default_timezone),
            currency=first_present(
                dig(hotel, "propertyCurrency", default={}), "currencyCode",
                default=hotel.get("currency") or self.default_currency,
            ),
            address=compose_address(
                address.get("propertyAddress1"),
                address.get("propertyCity"),
                address.get("propertyZip"),
                address.get("propertyCountry"),
            )
            or (hotel.get("address") if isinstance(hotel.get("address"), str) else None),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "GET",
            "/getAvailability",
            params={
                "startDate": params.start_date.isoformat(),
                "endDate": params.end_date.isoformat(),
                "roomTypeID": params.room_type_id,
            },
            operation="get_availability",
        )
        return [
            Availability(
                date=to_date(item.get("date")) or params.start_date,
                room_type_id=str(first_present(item, "roomTypeID", "room_type_id", default=params.room_type_id or "")),
                available=to_int(first_present(item, "roomsAvailable", "available")),
                rate=to_decimal(first_present(item, "roomRate", "rate")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload)
        ]

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            "/getReservations",
            params={
                "checkInFrom": date_param(params.start_date),
                "checkInTo": date_param(params.end_date),
                "status": status_filter(params.status, self.STATUS_FILTERS),
            },
            operation="get_reservations",
        )
        return [self._to_reservation(item) for item in extract_collection(payload)]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        return Reservation(
            id=str(first_present(item, "reservationID", "reservation_id", default="")),
            guest_name=first_present(item, "guestName", "guest_name", default="Guest"),
            room_type_id=str(first_present(item, "roomTypeID", "room_type_id", default="")),
            check_in=to_date(first_present(item, "startDate", "checkin_date")),
            check_out=to_date(first_present(item, "endDate", "checkout_date")),
            status=normalize_status(item.get("status")),
            total_amount=to_decimal(first_present(item, "total", "balance")),
            currency=item.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request("GET", "/getRoomTypes", operation="get_room_types")
        return [
            RoomType(
                id=str(first_present(item, "roomTypeID", "room_type_id", default="")),
                name=str(first_present(item, "roomTypeName", "room_type_name", default="")),
                capacity=to_int(first_present(item, "maxGuests", "max_occupancy"), 2) or 2,
                description=first_present(item, "roomTypeDescription", "description"),
            )
            for item in extract_collection(payload)
        ]

    async def get_rates(self) -> List[Rate]:
        payload = await self._request("GET", "/getRatePlans", operation="get_rates")
        return [
            Rate(
                id=str(first_present(item, "rateID", "rate_id", default="")),
                name=str(first_present(item, "ratePlanNamePublic", "rate_name", default="Rate")),
                room_type_id=str(first_present(item, "roomTypeID", "room_type_id", default="")),
                price=to_decimal(first_present(item, "roomRate", "amount")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload)
        ]
