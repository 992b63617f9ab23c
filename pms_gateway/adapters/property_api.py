"""
Shared behaviour for property-scoped REST providers

Several providers expose the same resource layout under a per-property
prefix (``/properties/{id}/availability``, ``/hotels/{code}/roomTypes``...)
and wrap each collection as ``{"<resource>": [...]}`` or ``{"data": [...]}``.
They differ only in field names, which subclasses declare as class
attributes.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..contracts import (
    Availability,
    AvailabilityParams,
    HotelConfiguration,
    Rate,
    Reservation,
    ReservationParams,
    RoomType,
    UpstreamApiError,
)
from ..utils.normalize import (
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


class PropertyApiMixin:
    """Canonical operations for providers with property-scoped resources"""

    # Credential holding the upstream property identifier
    property_credential: str = "property_id"
    # Path segment preceding the identifier
    property_resource: str = "properties"
    config_envelope: str = "property"
    config_id_keys: Tuple[str, ...] = ("id", "propertyId")
    config_fallback_name: str = "Property"
    address_keys: Tuple[str, ...] = ("street", "city", "postalCode", "country")

    date_params: Tuple[str, str] = ("fromDate", "toDate")

    reservation_id_keys: Tuple[str, ...] = ("id", "confirmationNumber")
    check_in_keys: Tuple[str, ...] = ("arrival",)
    check_out_keys: Tuple[str, ...] = ("departure",)

    room_type_id_keys: Tuple[str, ...] = ("id", "code")
    capacity_keys: Tuple[str, ...] = ("maxOccupancy",)

    rates_resource: str = "ratePlans"
    rate_id_keys: Tuple[str, ...] = ("id", "code")
    rate_price_keys: Tuple[str, ...] = ("price",)

    STATUS_FILTERS: Dict[Any, str] = {}

    @property
    def property_key(self) -> str:
        return str(self.credentials[self.property_credential])

    def _scoped(self, resource: str = "") -> str:
        path = f"/{self.property_resource}/{self.property_key}"
        return f"{path}/{resource}" if resource else path

    def _range_params(self, start, end) -> Dict[str, Optional[str]]:
        start_key, end_key = self.date_params
        return {
            start_key: start.isoformat() if start else None,
            end_key: end.isoformat() if end else None,
        }

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("GET", self._scoped(), operation="get_configuration")
        record = first_present(payload, self.config_envelope, "data")
        if not isinstance(record, dict):
            raise UpstreamApiError(
                f"{self.display_name} returned no {self.config_envelope} data.",
                provider=self.provider,
                body=payload,
            )

        address = record.get("address") or {}
        return HotelConfiguration(
            id=str(first_present(record, *self.config_id_keys, default=self.property_key)),
            name=str(record.get("name") or f"{self.display_name} {self.config_fallback_name}"),
            timezone=record.get("timezone") or self.default_timezone,
            currency=record.get("currency") or self.default_currency,
            address=compose_address(*(address.get(key) for key in self.address_keys)),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "GET",
            self._scoped("availability"),
            params={**self._range_params(params.start_date, params.end_date), "roomTypeId": params.room_type_id},
            operation="get_availability",
        )
        return [
            Availability(
                date=to_date(item.get("date")) or params.start_date,
                room_type_id=str(item.get("roomTypeId") or params.room_type_id or ""),
                available=to_int(item.get("available")),
                rate=to_decimal(item.get("rate")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["availability"])
        ]

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            self._scoped("reservations"),
            params={
                **self._range_params(params.start_date, params.end_date),
                "status": status_filter(params.status, self.STATUS_FILTERS),
            },
            operation="get_reservations",
        )
        return [self._to_reservation(item) for item in extract_collection(payload, ["reservations"])]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        guest = item.get("guest") or {}
        return Reservation(
            id=str(first_present(item, *self.reservation_id_keys, default="")),
            guest_name=compose_name(guest.get("firstName"), guest.get("lastName")),
            room_type_id=str(item.get("roomTypeId") or ""),
            check_in=to_date(first_present(item, *self.check_in_keys)),
            check_out=to_date(first_present(item, *self.check_out_keys)),
            status=normalize_status(item.get("status")),
            total_amount=to_decimal(item.get("totalAmount")),
            currency=item.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request("GET", self._scoped("roomTypes"), operation="get_room_types")
        return [
            RoomType(
                id=str(first_present(item, *self.room_type_id_keys, default="")),
                name=str(item.get("name") or ""),
                capacity=to_int(first_present(item, *self.capacity_keys), 2) or 2,
                description=item.get("description"),
            )
            for item in extract_collection(payload, ["roomTypes"])
        ]

    async def get_rates(self) -> List[Rate]:
        payload = await self._request("GET", self._scoped(self.rates_resource), operation="get_rates")
        return [
            Rate(
                id=str(first_present(item, *self.rate_id_keys, default="")),
                name=str(item.get("name") or "Rate"),
                room_type_id=str(item.get("roomTypeId") or ""),
                price=to_decimal(first_present(item, *self.rate_price_keys)),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, [self.rates_resource])
        ]
