"""
Hostaway Adapter
Vacation-rental PMS; client-credentials token from /accessTokens and
responses shaped {"status": "success", "result": ...}
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
    date_param,
    extract_collection,
    filter_by_status,
    first_present,
    normalize_status,
    to_date,
    to_decimal,
    to_int,
)


class HostawayAdapter(ClientCredentialsAdapter):
    provider = "hostaway"
    display_name = "Hostaway"
    default_currency = "USD"
    default_timezone = "UTC"
    production_url = "https://api.hostaway.com/v1"
    token_auth_style = "form"
    token_scope = "general"
    error_message_keys = ("message", "result")

    STATUS_FILTERS = {
        ReservationStatus.CONFIRMED: "new",
        ReservationStatus.CANCELLED: "cancelled",
    }

    def _token_endpoint(self) -> str:
        return self.credentials.get("token_url") or f"{self.base_url}/accessTokens"

    @property
    def listing_id(self) -> Optional[str]:
        value = first_present(self.credentials, "listing_id", "property_id")
        return str(value) if value is not None else None

    def _base_headers(self) -> Dict[str, str]:
        account_id = self.credentials.get("account_id")
        return {"X-Hostaway-Account-Id": str(account_id)} if account_id else {}

    def _check_payload(self, payload: Any) -> None:
        if isinstance(payload, dict) and payload.get("status") not in (None, "success"):
            message = first_present(payload, "message", default="Hostaway reported an unsuccessful request.")
            raise UpstreamApiError(str(message), provider=self.provider, status_code=200, body=payload)

    async def _listings(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        payload = await self._request("GET", "/listings", params={"limit": limit}, operation="get_listings")
        return extract_collection(payload, ["result"])

    async def get_configuration(self) -> HotelConfiguration:
        listings = await self._listings()
        listing = None
        if self.listing_id:
            listing = next((item for item in listings if str(item.get("id")) == self.listing_id), None)
        listing = listing or (listings[0] if listings else None)
        if listing is None:
            raise UpstreamApiError("Hostaway returned no listings.", provider=self.provider)

        return HotelConfiguration(
            id=str(listing.get("id") or ""),
            name=str(first_present(listing, "name", "externalListingName", default="")),
            timezone=first_present(listing, "timeZoneName", "timezone", default=self.default_timezone),
            currency=first_present(listing, "currencyCode", "currency", default=self.default_currency),
            address=first_present(listing, "address")
            or compose_address(
                listing.get("street"),
                listing.get("city"),
                listing.get("state"),
                listing.get("zipcode") or listing.get("postalCode"),
                listing.get("country"),
            ),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        listing_id = params.room_type_id or self.listing_id
        if not listing_id:
            listings = await self._listings(limit=1)
            listing_id = str(listings[0].get("id")) if listings else None
        if not listing_id:
            return []

        payload = await self._request(
            "GET",
            f"/listings/{listing_id}/calendar",
            params={"startDate": params.start_date.isoformat(), "endDate": params.end_date.isoformat()},
            operation="get_availability",
        )
        results = []
        for day in extract_collection(payload, ["result"]):
            available = first_present(day, "availableUnits")
            if available is None:
                available = 1 if day.get("isAvailable", day.get("available")) else 0
            results.append(
                Availability(
                    date=to_date(day.get("date")) or params.start_date,
                    room_type_id=str(listing_id),
                    available=to_int(available),
                    rate=to_decimal(first_present(day, "price", "basePrice")),
                    currency=day.get("currency") or self.default_currency,
                )
            )
        return results

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            "/reservations",
            params={
                "listingId": self.listing_id,
                "arrivalStartDate": date_param(params.start_date),
                "arrivalEndDate": date_param(params.end_date),
                "status": self.STATUS_FILTERS.get(params.status),
            },
            operation="get_reservations",
        )
        reservations = [self._to_reservation(item) for item in extract_collection(payload, ["result"])]
        if params.status not in self.STATUS_FILTERS:
            # Stay-phase filters have no upstream status value
            reservations = filter_by_status(reservations, params.status)
        return reservations

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        guest_name = item.get("guestName") or compose_name(item.get("guestFirstName"), item.get("guestLastName"))
        return Reservation(
            id=str(item.get("id") or ""),
            guest_name=guest_name,
            room_type_id=str(item.get("listingMapId") or item.get("listingId") or ""),
            check_in=to_date(first_present(item, "arrivalDate", "checkInDate")),
            check_out=to_date(first_present(item, "departureDate", "checkOutDate")),
            status=normalize_status(item.get("status")),
            total_amount=to_decimal(item.get("totalPrice")),
            currency=item.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        # Each listing is a bookable unit
        return [
            RoomType(
                id=str(item.get("id") or ""),
                name=str(first_present(item, "name", "externalListingName", default="")),
                capacity=to_int(first_present(item, "personCapacity", "guestsIncluded"), 2) or 2,
                description=item.get("description"),
            )
            for item in await self._listings()
        ]

    async def get_rates(self) -> List[Rate]:
        return [
            Rate(
                id=f"{item.get('id')}_base",
                name=f"{first_present(item, 'name', default='Listing')} base price",
                room_type_id=str(item.get("id") or ""),
                price=to_decimal(item.get("price")),
                currency=first_present(item, "currencyCode", "currency", default=self.default_currency),
            )
            for item in await self._listings()
        ]
