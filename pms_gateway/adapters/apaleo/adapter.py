"""
Apaleo PMS Adapter
Cloud-native PMS with a REST API behind OAuth2 client credentials
"""

from typing import Any, Dict, List, Optional

from ...auth import ClientCredentialsAdapter
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
    compose_name,
    dig,
    extract_collection,
    first_present,
    normalize_status,
    status_filter,
    to_date,
    to_decimal,
    to_int,
)


class ApaleoAdapter(ClientCredentialsAdapter):
    """Apaleo adapter (inventory, availability, booking and rate-plan APIs)"""

    provider = "apaleo"
    display_name = "Apaleo"
    default_currency = "EUR"
    default_timezone = "UTC"
    production_url = "https://api.apaleo.com"
    token_url = "https://identity.apaleo.com/connect/token"
    token_auth_style = "form"
    error_message_keys = ("detail", "title", "error")

    STATUS_FILTERS = {
        ReservationStatus.CONFIRMED: "Confirmed",
        ReservationStatus.CANCELLED: "Canceled",
        ReservationStatus.CHECKED_IN: "InHouse",
        ReservationStatus.CHECKED_OUT: "CheckedOut",
    }

    @property
    def property_id(self) -> Optional[str]:
        return self.credentials.get("property_id")

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("GET", "/inventory/v1/properties", operation="get_configuration")
        properties = extract_collection(payload, ["properties"])

        prop = None
        if self.property_id:
            prop = next(
                (p for p in properties if self.property_id in (p.get("id"), p.get("code"))),
                None,
            )
        prop = prop or (properties[0] if properties else None)
        if prop is None:
            raise UpstreamApiError("Apaleo returned no properties.", provider=self.provider, body=payload)

        address = prop.get("address") or {}
        return HotelConfiguration(
            id=str(first_present(prop, "id", "code", default="")),
            name=str(first_present(prop, "name", "code", default="")),
            timezone=prop.get("timezone") or self.default_timezone,
            currency=prop.get("currency") or self.default_currency,
            address=compose_address(
                address.get("street"),
                address.get("city"),
                address.get("postalCode"),
                first_present(address, "countryName", "countryCode"),
            ),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "GET",
            "/availability/v1/availability",
            params={
                "propertyId": self.property_id,
                "from": params.start_date.isoformat(),
                "to": params.end_date.isoformat(),
                "unitGroupId": params.room_type_id,
            },
            operation="get_availability",
        )

        return [
            Availability(
                date=to_date(item.get("date")) or params.start_date,
                room_type_id=str(item.get("unitGroupId") or params.room_type_id or ""),
                available=to_int(first_present(item, "availableUnits", "available")),
                rate=to_decimal(first_present(dig(item, "grossAmount", default={}), "amount", default=item.get("rate"))),
                currency=dig(item, "grossAmount", "currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["availabilities"])
        ]

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            "/booking/v1/reservations",
            params={
                "propertyId": self.property_id,
                "from": params.start_date.isoformat() if params.start_date else None,
                "to": params.end_date.isoformat() if params.end_date else None,
                "status": status_filter(params.status, self.STATUS_FILTERS),
            },
            operation="get_reservations",
        )
        return [self._to_reservation(item) for item in extract_collection(payload, ["reservations"])]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        primary = item.get("primaryGuest") or {}
        guest = item.get("guest") or {}
        total = item.get("totalGrossAmount") or item.get("totalAmount") or {}

        guest_name = first_present(primary, "fullName") or first_present(guest, "fullName")
        if not guest_name:
            guest_name = compose_name(primary.get("firstName"), primary.get("lastName"), default="") or compose_name(
                guest.get("firstName"), guest.get("lastName")
            )

        return Reservation(
            id=str(first_present(item, "id", "reservationNumber", default="")),
            guest_name=guest_name,
            room_type_id=str(item.get("unitGroupId") or dig(item, "unitGroup", "id", default="")),
            check_in=to_date(first_present(item, "arrival", "checkIn")),
            check_out=to_date(first_present(item, "departure", "checkOut")),
            status=normalize_status(item.get("status")),
            total_amount=to_decimal(total.get("amount")),
            currency=total.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request(
            "GET", "/inventory/v1/unit-groups", params={"propertyId": self.property_id}, operation="get_room_types"
        )
        return [
            RoomType(
                id=str(item.get("id") or ""),
                name=str(first_present(item, "name", "shortName", default="")),
                capacity=to_int(item.get("maxPersons"), 2) or 2,
                description=item.get("description"),
            )
            for item in extract_collection(payload, ["unitGroups"])
        ]

    async def get_rates(self) -> List[Rate]:
        payload = await self._request(
            "GET", "/rateplan/v1/rate-plans", params={"propertyId": self.property_id}, operation="get_rates"
        )
        # Rate-plan listings carry no price; prices live on offers
        return [
            Rate(
                id=str(first_present(item, "id", "code", default="")),
                name=str(first_present(item, "name", "code", default="Rate Plan")),
                room_type_id=str(item.get("unitGroupId") or dig(item, "unitGroup", "id", default="")),
                price=to_decimal(0),
                currency=self.default_currency,
            )
            for item in extract_collection(payload, ["ratePlans"])
        ]
