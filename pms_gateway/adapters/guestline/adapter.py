"""
Guestline PMS Adapter
Sites (properties) are addressed by site id; API key and site headers
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


class GuestlineAdapter(ApiKeyAdapter):
    provider = "guestline"
    display_name = "Guestline"
    default_currency = "GBP"
    default_timezone = "Europe/London"
    production_url = "https://api.guestline.com/v1"
    sandbox_url = "https://sandbox-api.guestline.com/v1"
    required_credentials = ("api_key", "site_id")
    secret_credentials = ("api_key",)
    api_key_header = "X-Api-Key"
    error_message_keys = ("message", "error", ("details", 0))

    @property
    def site_id(self) -> str:
        return str(self.credentials["site_id"])

    def _base_headers(self) -> Dict[str, str]:
        return {"X-Site-Id": self.site_id}

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("GET", f"/sites/{self.site_id}", operation="get_configuration")
        site = first_present(payload, "site", "data")
        if not isinstance(site, dict):
            raise UpstreamApiError("Guestline returned no site data.", provider=self.provider, body=payload)

        address = site.get("address") or {}
        return HotelConfiguration(
            id=str(first_present(site, "siteId", "siteCode", default=self.site_id)),
            name=str(first_present(site, "name", "siteName", default="Guestline Site")),
            timezone=site.get("timezone") or self.default_timezone,
            currency=first_present(site, "currency", "currencyCode", default=self.default_currency),
            address=compose_address(
                address.get("line1"),
                address.get("line2"),
                address.get("city"),
                address.get("county"),
                address.get("postcode"),
                address.get("country"),
            ),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "GET",
            f"/sites/{self.site_id}/availability",
            params={
                "fromDate": params.start_date.isoformat(),
                "toDate": params.end_date.isoformat(),
                "roomTypeId": params.room_type_id,
            },
            operation="get_availability",
        )
        return [
            Availability(
                date=to_date(item.get("date")) or params.start_date,
                room_type_id=str(first_present(item, "roomTypeId", "roomTypeCode", default=params.room_type_id or "")),
                available=to_int(first_present(item, "available", "remaining")),
                rate=to_decimal(first_present(item, "rate", "rateAmount")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["availability"])
        ]

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            f"/sites/{self.site_id}/reservations",
            params={
                "fromDate": params.start_date.isoformat() if params.start_date else None,
                "toDate": params.end_date.isoformat() if params.end_date else None,
                "status": status_filter(params.status),
            },
            operation="get_reservations",
        )
        return [self._to_reservation(item) for item in extract_collection(payload, ["reservations", "bookings"])]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        guest = item.get("guest") or item.get("leadGuest") or {}
        return Reservation(
            id=str(first_present(item, "reservationId", "bookingRef", "confirmationNumber", default="")),
            guest_name=compose_name(guest.get("title"), guest.get("forename"), guest.get("surname")),
            room_type_id=str(first_present(item, "roomTypeId", "roomTypeCode", default="")),
            check_in=to_date(first_present(item, "arrival", "arrivalDate")),
            check_out=to_date(first_present(item, "departure", "departureDate")),
            status=normalize_status(first_present(item, "status", "reservationStatus")),
            total_amount=to_decimal(first_present(item, "totalAmount", "totalValue")),
            currency=item.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request("GET", f"/sites/{self.site_id}/roomTypes", operation="get_room_types")
        return [
            RoomType(
                id=str(first_present(item, "roomTypeId", "roomTypeCode", default="")),
                name=str(item.get("name") or ""),
                capacity=to_int(first_present(item, "maxOccupancy", "maxAdults"), 2) or 2,
                description=first_present(item, "description", "shortDescription"),
            )
            for item in extract_collection(payload, ["roomTypes"])
        ]

    async def get_rates(self) -> List[Rate]:
        payload = await self._request("GET", f"/sites/{self.site_id}/rateCodes", operation="get_rates")
        return [
            Rate(
                id=str(first_present(item, "rateCodeId", "rateCode", default="")),
                name=str(first_present(item, "name", "rateCode", default="Rate")),
                room_type_id=str(item.get("roomTypeId") or ""),
                price=to_decimal(item.get("amount")),
                currency=item.get("currency") or self.default_currency,
            )
            for item in extract_collection(payload, ["rateCodes"])
        ]
