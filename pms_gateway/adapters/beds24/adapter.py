"""
Beds24 Adapter
JSON API v1: every endpoint is a POST with apiKey (and optional propKey)
in the body; failures may arrive as HTTP 200 with an "error" string.
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional

from ...auth import ApiKeyAdapter
from ...contracts import (
    Availability,
    AvailabilityParams,
    Capabilities,
    HotelConfiguration,
    Rate,
    Reservation,
    ReservationParams,
    ReservationStatus,
    RoomType,
    UpstreamApiError,
)
from ...utils.normalize import (
    compose_name,
    dig,
    extract_collection,
    filter_by_status,
    first_present,
    normalize_status,
    records,
    to_date,
    to_decimal,
    to_int,
)

# Booking status codes
BEDS24_STATUS = {
    "0": ReservationStatus.CANCELLED.value,
    "1": ReservationStatus.CONFIRMED.value,
    "2": ReservationStatus.CONFIRMED.value,
    "3": ReservationStatus.CONFIRMED.value,
    "4": ReservationStatus.CONFIRMED.value,
}


class Beds24Adapter(ApiKeyAdapter):
    provider = "beds24"
    display_name = "Beds24"
    default_currency = "EUR"
    default_timezone = "UTC"
    production_url = "https://api.beds24.com/json"
    required_credentials = ("api_key",)
    api_key_header = None
    error_message_keys = ("error", "message")
    capabilities = {cap.value: cap is not Capabilities.RATES for cap in Capabilities}

    STATUS_FILTERS = {
        ReservationStatus.CANCELLED: "0",
        ReservationStatus.CONFIRMED: "1",
    }

    @property
    def prop_id(self) -> Optional[str]:
        value = first_present(self.credentials, "prop_id", "property_id")
        return str(value) if value is not None else None

    def _auth_json(self, credential: str, body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        payload = {"apiKey": credential}
        if self.credentials.get("prop_key"):
            payload["propKey"] = self.credentials["prop_key"]
        payload.update(body or {})
        return payload

    def _check_payload(self, payload: Any) -> None:
        if isinstance(payload, dict) and isinstance(payload.get("error"), str) and payload["error"]:
            raise UpstreamApiError(payload["error"], provider=self.provider, status_code=200, body=payload)

    async def _properties(self) -> List[Dict[str, Any]]:
        payload = await self._request("POST", "/getProperties", json_body={}, operation="get_properties")
        return extract_collection(payload, ["getProperties", "properties"])

    async def get_configuration(self) -> HotelConfiguration:
        properties = await self._properties()
        prop = None
        if self.prop_id:
            prop = next((p for p in properties if str(p.get("propId")) == self.prop_id), None)
        prop = prop or (properties[0] if properties else None)
        if prop is None:
            raise UpstreamApiError("Beds24 returned no properties.", provider=self.provider)

        return HotelConfiguration(
            id=str(prop.get("propId") or ""),
            name=str(prop.get("name") or ""),
            timezone=prop.get("timezone") or self.default_timezone,
            currency=prop.get("currency") or self.default_currency,
            address=None,
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "POST",
            "/getAvailabilities",
            json_body={
                k: v
                for k, v in {
                    "propId": self.prop_id,
                    "roomId": params.room_type_id,
                    "from": params.start_date.isoformat(),
                    "to": params.end_date.isoformat(),
                }.items()
                if v is not None
            },
            operation="get_availability",
        )
        return [
            Availability(
                date=to_date(item.get("date")) or params.start_date,
                room_type_id=str(item.get("roomId") or params.room_type_id or ""),
                available=0 if item.get("closed") else to_int(item.get("qty")),
                rate=to_decimal(item.get("price")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["availabilities"])
        ]

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        body = {
            "propId": self.prop_id,
            "from": params.start_date.isoformat() if params.start_date else None,
            "to": params.end_date.isoformat() if params.end_date else None,
            "status": self.STATUS_FILTERS.get(params.status),
        }
        payload = await self._request(
            "POST",
            "/getBookings",
            json_body={k: v for k, v in body.items() if v is not None},
            operation="get_reservations",
        )
        reservations = [self._to_reservation(item) for item in extract_collection(payload, ["bookings"])]
        if params.status not in self.STATUS_FILTERS:
            # No status code upstream for this filter
            reservations = filter_by_status(reservations, params.status)
        return reservations

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        last_night = to_date(item.get("lastNight"))
        status = item.get("status")
        return Reservation(
            id=str(item.get("bookingId") or ""),
            guest_name=compose_name(item.get("guestFirstName"), item.get("guestName")),
            room_type_id=str(item.get("roomId") or ""),
            check_in=to_date(item.get("firstNight")),
            # lastNight is the final night stayed; departure is the morning after
            check_out=last_night + timedelta(days=1) if last_night else None,
            status=BEDS24_STATUS.get(str(status), normalize_status(status)),
            total_amount=to_decimal(item.get("price")),
            currency=item.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        body = {"propId": self.prop_id} if self.prop_id else {}
        payload = await self._request("POST", "/getProperty", json_body=body, operation="get_room_types")
        return [
            RoomType(
                id=str(first_present(item, "roomId", "roomTypeId", default="")),
                name=str(item.get("roomName") or item.get("name") or ""),
                capacity=to_int(first_present(item, "maxOccupancy", "maxPeople"), 2) or 2,
                description=None,
            )
            for item in records(dig(payload, "property", "rooms"))
        ]

    async def get_rates(self) -> List[Rate]:
        # Beds24 prices are per-day values on the availability calendar
        return []
