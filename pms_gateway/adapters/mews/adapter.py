"""
Mews PMS Adapter
Connector API: POST-only, credentials travel in the JSON body
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from ...auth import ApiKeyAdapter
from ...contracts import (
    Availability,
    AvailabilityParams,
    HotelConfiguration,
    Rate,
    Reservation,
    ReservationParams,
    ReservationStatus,
    RoomType,
)
from ...utils.normalize import (
    compose_address,
    dig,
    extract_collection,
    first_present,
    normalize_status,
    status_filter,
    to_date,
    to_decimal,
    to_int,
)


def _utc_midnight(value: date) -> str:
    return datetime.combine(value, time.min, tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def _localized(value: Any) -> Optional[str]:
    """Mews returns names either as plain strings or as {"en-US": "..."} maps"""
    if isinstance(value, dict):
        return value.get("en-US") or next((v for v in value.values() if v), None)
    return value


class MewsAdapter(ApiKeyAdapter):
    provider = "mews"
    display_name = "Mews"
    default_currency = "EUR"
    default_timezone = "UTC"
    production_url = "https://api.mews.com/api/connector/v1"
    sandbox_url = "https://api.mews-demo.com/api/connector/v1"
    required_credentials = ("client_token", "access_token")
    api_key_field = "access_token"
    api_key_header = None
    error_message_keys = ("Message", "message")

    STATUS_FILTERS = {
        ReservationStatus.CONFIRMED: "Confirmed",
        ReservationStatus.CANCELLED: "Canceled",
        ReservationStatus.CHECKED_IN: "Started",
        ReservationStatus.CHECKED_OUT: "Processed",
    }

    def _auth_json(self, credential: str, body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "ClientToken": self.credentials["client_token"],
            "AccessToken": credential,
            "Client": self.credentials.get("client") or self.settings.user_agent,
            **(body or {}),
        }

    @property
    def service_id(self) -> Optional[str]:
        return self.credentials.get("service_id")

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("POST", "/configuration/get", json_body={}, operation="get_configuration")
        enterprise = dig(payload, "Enterprise")
        if not isinstance(enterprise, dict):
            enterprise = {}
        address = enterprise.get("Address") or {}
        return HotelConfiguration(
            id=str(enterprise.get("Id") or ""),
            name=str(_localized(enterprise.get("Name")) or ""),
            timezone=enterprise.get("TimeZoneIdentifier") or self.default_timezone,
            currency=enterprise.get("DefaultCurrency") or self.default_currency,
            address=compose_address(
                address.get("Line1"), address.get("City"), address.get("PostalCode"), address.get("CountryCode")
            ),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        body = {
            "ServiceId": self.service_id or params.room_type_id,
            "StartUtc": _utc_midnight(params.start_date),
            "EndUtc": _utc_midnight(params.end_date),
        }
        payload = await self._request("POST", "/services/getAvailability", json_body=body, operation="get_availability")

        units = dig(payload, "TimeUnitStartsUtc", default=[])
        time_units = [to_date(unit) for unit in units] if isinstance(units, list) else []
        results = []
        for category in extract_collection(payload, ["CategoryAvailabilities"]):
            category_id = str(category.get("CategoryId") or "")
            if self.service_id and params.room_type_id and category_id != params.room_type_id:
                continue
            counts = category.get("Availabilities")
            if not isinstance(counts, list):
                counts = []

            if time_units:
                # One count per time unit, positionally aligned
                for unit_date, count in zip(time_units, counts):
                    results.append(self._availability(unit_date or params.start_date, category_id, count))
            else:
                first = counts[0] if counts else 0
                count = first.get("Value") if isinstance(first, dict) else first
                results.append(
                    self._availability(to_date(category.get("Date")) or params.start_date, category_id, count)
                )
        return results

    def _availability(self, day: date, category_id: str, count: Any) -> Availability:
        # getAvailability carries no prices
        return Availability(
            date=day,
            room_type_id=category_id,
            available=to_int(count),
            rate=to_decimal(0),
            currency=self.default_currency,
        )

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        body = {
            "StartUtc": _utc_midnight(params.start_date) if params.start_date else None,
            "EndUtc": _utc_midnight(params.end_date) if params.end_date else None,
            "States": [status_filter(params.status, self.STATUS_FILTERS)] if params.status else None,
        }
        payload = await self._request(
            "POST",
            "/reservations/getAll",
            json_body={k: v for k, v in body.items() if v is not None},
            operation="get_reservations",
        )
        return [self._to_reservation(item) for item in extract_collection(payload, ["Reservations"])]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        total = item.get("TotalAmount") or {}
        return Reservation(
            id=str(item.get("Id") or ""),
            guest_name=item.get("GuestName") or "Guest",
            room_type_id=str(item.get("RequestedCategoryId") or ""),
            check_in=to_date(item.get("StartUtc")),
            check_out=to_date(item.get("EndUtc")),
            status=normalize_status(item.get("State")),
            total_amount=to_decimal(first_present(total, "Value", "GrossValue")),
            currency=total.get("Currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request(
            "POST", "/resources/getAll", json_body={"Extent": {"Categories": True}}, operation="get_room_types"
        )
        return [
            RoomType(
                id=str(item.get("Id") or ""),
                name=str(_localized(item.get("Name")) or ""),
                capacity=to_int(item.get("Capacity"), 2) or 2,
                description=_localized(item.get("Description")),
            )
            for item in extract_collection(payload, ["Categories", "ResourceCategories"])
        ]

    async def get_rates(self) -> List[Rate]:
        body = {"ServiceIds": [self.service_id]} if self.service_id else {}
        payload = await self._request("POST", "/rates/getAll", json_body=body, operation="get_rates")
        rates = []
        for item in extract_collection(payload, ["Rates"]):
            price = item.get("Price") or {}
            rates.append(
                Rate(
                    id=str(item.get("Id") or ""),
                    name=str(_localized(item.get("Name")) or "Rate"),
                    room_type_id=str(item.get("ServiceId") or ""),
                    price=to_decimal(price.get("Value")),
                    currency=price.get("Currency") or self.default_currency,
                )
            )
        return rates
