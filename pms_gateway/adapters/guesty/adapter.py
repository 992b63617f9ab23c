"""
Guesty Adapter
Vacation-rental PMS behind OAuth2 client credentials. A Guesty account
holds many listings; the connection may pin one with listing_id.
"""

from typing import Any, Dict, List, Optional

from ...auth import ClientCredentialsAdapter
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
    compose_address,
    compose_name,
    date_param,
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


class GuestyAdapter(ClientCredentialsAdapter):
    provider = "guesty"
    display_name = "Guesty"
    default_currency = "USD"
    default_timezone = "UTC"
    production_url = "https://open-api.guesty.com/v1"
    token_url = "https://open-api.guesty.com/oauth2/token"
    token_auth_style = "form"
    token_scope = "open-api"
    error_message_keys = (("error", "message"), "message", "error")
    capabilities = {cap.value: cap is not Capabilities.RATES for cap in Capabilities}

    STATUS_FILTERS = {
        ReservationStatus.CONFIRMED: "confirmed",
        ReservationStatus.CANCELLED: "canceled",
        ReservationStatus.CHECKED_IN: "checked_in",
        ReservationStatus.CHECKED_OUT: "checked_out",
    }

    @property
    def listing_id(self) -> Optional[str]:
        return self.credentials.get("listing_id")

    async def _listings(self, limit: int) -> List[Dict[str, Any]]:
        payload = await self._request("GET", "/listings", params={"limit": limit}, operation="get_listings")
        return extract_collection(payload)

    async def get_configuration(self) -> HotelConfiguration:
        if self.listing_id:
            listing = await self._request("GET", f"/listings/{self.listing_id}", operation="get_configuration")
        else:
            listings = await self._listings(limit=1)
            listing = listings[0] if listings else None
        if not isinstance(listing, dict) or not listing:
            raise UpstreamApiError("Guesty returned no listings.", provider=self.provider)

        address = listing.get("address") or {}
        return HotelConfiguration(
            id=str(first_present(listing, "_id", "id", default="")),
            name=str(first_present(listing, "title", "nickname", default="")),
            timezone=listing.get("timezone") or self.default_timezone,
            currency=dig(listing, "prices", "currency") or listing.get("currency") or self.default_currency,
            address=address.get("full") or compose_address(address.get("street"), address.get("city"), address.get("country")),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        listing_id = params.room_type_id or self.listing_id
        if not listing_id:
            listings = await self._listings(limit=1)
            listing_id = first_present(listings[0], "_id", "id") if listings else None
        if not listing_id:
            return []

        payload = await self._request(
            "GET",
            f"/availability-pricing/api/calendar/listings/{listing_id}",
            params={"startDate": params.start_date.isoformat(), "endDate": params.end_date.isoformat()},
            operation="get_availability",
        )
        days = records(dig(payload, "data", "days"))
        if not days:
            days = extract_collection(payload, ["days"])

        results = []
        for day in days:
            blocks = day.get("blocks")
            blocked = any(bool(v) for v in blocks.values()) if isinstance(blocks, dict) else bool(blocks)
            is_open = day.get("status", "available") == "available" and not day.get("reservationId") and not blocked
            results.append(
                Availability(
                    date=to_date(day.get("date")) or params.start_date,
                    room_type_id=str(day.get("listingId") or listing_id),
                    available=1 if is_open else 0,
                    rate=to_decimal(day.get("price")),
                    currency=day.get("currency") or self.default_currency,
                )
            )
        return results

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        query = {
            "listingId": self.listing_id,
            "checkIn": date_param(params.start_date),
            "checkOut": date_param(params.end_date),
            "status": status_filter(params.status, self.STATUS_FILTERS),
        }
        payload = await self._request("GET", "/reservations", params=query, operation="get_reservations")
        return [self._to_reservation(item) for item in extract_collection(payload)]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        guest = item.get("guest") or {}
        money = item.get("money") or {}
        return Reservation(
            id=str(first_present(item, "_id", "id", "confirmationCode", default="")),
            guest_name=guest.get("fullName") or compose_name(guest.get("firstName"), guest.get("lastName")),
            room_type_id=str(item.get("listingId") or ""),
            check_in=to_date(first_present(item, "checkInDateLocalized", "checkIn")),
            check_out=to_date(first_present(item, "checkOutDateLocalized", "checkOut")),
            status=normalize_status(item.get("status")),
            total_amount=to_decimal(first_present(money, "hostPayout", "totalPaid")),
            currency=money.get("currency") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        return [
            RoomType(
                id=str(first_present(item, "_id", "id", default="")),
                name=str(first_present(item, "title", "nickname", default="")),
                capacity=to_int(item.get("accommodates"), 2) or 2,
                description=item.get("propertyType"),
            )
            for item in await self._listings(limit=100)
        ]

    async def get_rates(self) -> List[Rate]:
        # Guesty prices per night on the calendar; there is no rate catalogue
        return []
