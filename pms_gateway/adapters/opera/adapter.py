"""
Opera Cloud PMS Adapter
Oracle Hospitality Integration Platform; OAuth2 with HTTP Basic client auth
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
    RoomType,
)
from ...utils.normalize import (
    compose_address,
    compose_name,
    dig,
    first_present,
    normalize_status,
    records,
    to_date,
    to_decimal,
    to_int,
)


class OperaAdapter(ClientCredentialsAdapter):
    provider = "opera"
    display_name = "Opera Cloud"
    default_currency = "USD"
    default_timezone = "UTC"
    production_url = "https://api.oraclehospitality.com"
    sandbox_url = "https://sandbox-api.oraclehospitality.com"
    token_url = "https://oauth.oraclehospitality.com/oauth/token"
    token_auth_style = "basic"
    token_scope = "openid"
    required_credentials = ("client_id", "client_secret", "enterprise_id", "hotel_id")
    secret_credentials = ("client_id", "client_secret")
    error_message_keys = ("detail", "title", ("o:errorDetails", 0, "message"))

    @property
    def hotel_id(self) -> str:
        return str(self.credentials["hotel_id"])

    def _token_endpoint(self) -> str:
        return self.credentials.get("auth_url") or super()._token_endpoint()

    def _base_headers(self) -> Dict[str, str]:
        return {"x-hotelid": self.hotel_id, "x-app-key": str(self.credentials["client_id"])}

    async def get_configuration(self) -> HotelConfiguration:
        payload = await self._request("GET", f"/par/v1/hotels/{self.hotel_id}", operation="get_configuration")
        hotel = dig(payload, "hotels", "hotel", 0) or (payload if isinstance(payload, dict) else {})
        address = hotel.get("address") or {}

        return HotelConfiguration(
            id=str(first_present(hotel, "hotelId", "hotelCode", default=self.hotel_id)),
            name=str(first_present(hotel, "hotelName", "hotelCode", default="Opera Hotel")),
            timezone=hotel.get("timeZone") or self.default_timezone,
            currency=hotel.get("currencyCode") or self.default_currency,
            address=compose_address(
                *(address.get("addressLine") or []),
                address.get("city"),
                address.get("state"),
                address.get("postalCode"),
                address.get("country"),
            ),
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        payload = await self._request(
            "GET",
            "/par/v1/availability",
            params={
                "hotelId": self.hotel_id,
                "arrivalDate": params.start_date.isoformat(),
                "departureDate": params.end_date.isoformat(),
                "roomType": params.room_type_id,
                "adults": 2,
                "children": 0,
            },
            operation="get_availability",
        )

        results = []
        for item in records(dig(payload, "roomAvailability")):
            results.append(
                Availability(
                    date=to_date(item.get("date")) or params.start_date,
                    room_type_id=str(item.get("roomType") or params.room_type_id or ""),
                    available=to_int(first_present(item, "availableRooms", "sellLimit")),
                    rate=to_decimal(dig(item, "rate", "amount")),
                    currency=dig(item, "rate", "currencyCode") or self.default_currency,
                )
            )

        # OHIP roomStay shape: the first rate plan's base price applies when a room type has none
        for stay in records(dig(payload, "hotelAvailability", "roomStay")):
            first_rate = dig(stay, "ratePlans", "ratePlan", 0, "rates", 0, "base", "amountBeforeTax")
            for room_type in records(dig(stay, "roomTypes", "roomType")):
                results.append(
                    Availability(
                        date=to_date(room_type.get("date")) or params.start_date,
                        room_type_id=str(room_type.get("roomType") or ""),
                        available=to_int(room_type.get("availableRooms")),
                        rate=to_decimal(first_present(room_type.get("rate") or {}, "amount", default=first_rate)),
                        currency=self.default_currency,
                    )
                )
        return results

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        params = params or ReservationParams()
        payload = await self._request(
            "GET",
            f"/rsv/v1/hotels/{self.hotel_id}/reservations",
            params={
                "hotelId": self.hotel_id,
                "arrivalStartDate": params.start_date.isoformat() if params.start_date else None,
                "arrivalEndDate": params.end_date.isoformat() if params.end_date else None,
                "reservationStatus": params.status.value.upper() if params.status else None,
            },
            operation="get_reservations",
        )
        reservations = records(dig(payload, "reservations", "reservation")) or records(dig(payload, "hotelReservations"))
        return [self._to_reservation(item) for item in reservations]

    def _to_reservation(self, item: Dict[str, Any]) -> Reservation:
        confirmation = next(
            (ref.get("id") for ref in records(item.get("reservationIdList")) if ref.get("type") == "Confirmation"),
            None,
        )
        person = dig(item, "reservationGuests", "profileInfo", "profile", "customer", "personName", 0)
        if not isinstance(person, dict):
            person = {}
        stay = item.get("roomStay") or {}
        total = stay.get("total") or {}

        return Reservation(
            id=str(item.get("reservationId") or confirmation or item.get("confirmationNumber") or ""),
            guest_name=compose_name(person.get("nameTitle"), person.get("givenName"), person.get("surname")),
            room_type_id=str(first_present(stay, "roomType", "roomTypeCode", default="")),
            check_in=to_date(
                stay.get("arrivalDate") or dig(stay, "expectedTimes", "reservationExpectedArrivalTime")
            ),
            check_out=to_date(
                stay.get("departureDate") or dig(stay, "expectedTimes", "reservationExpectedDepartureTime")
            ),
            status=normalize_status(first_present(item, "status", "reservationStatus")),
            total_amount=to_decimal(first_present(total, "amountAfterTax", "amountBeforeTax")),
            currency=total.get("currencyCode") or self.default_currency,
        )

    async def get_room_types(self) -> List[RoomType]:
        payload = await self._request("GET", f"/par/v1/hotels/{self.hotel_id}/roomTypes", operation="get_room_types")
        return [
            RoomType(
                id=str(first_present(item, "roomType", "roomTypeCode", default="")),
                name=str(first_present(item, "roomTypeName", "roomType", default="")),
                capacity=to_int(first_present(item, "maxOccupancy", "maxAdults"), 2),
                description=first_present(item, "longDescription", "shortDescription"),
            )
            for item in records(dig(payload, "roomTypes", "roomType"))
        ]

    async def get_rates(self) -> List[Rate]:
        payload = await self._request("GET", f"/par/v1/hotels/{self.hotel_id}/ratePlans", operation="get_rates")
        return [
            Rate(
                id=str(item.get("ratePlanCode") or ""),
                name=str(first_present(item, "ratePlanName", "ratePlanCode", default="Rate Plan")),
                room_type_id="",
                price=to_decimal(0),
                currency=item.get("currencyCode") or self.default_currency,
            )
            for item in records(dig(payload, "ratePlans", "ratePlan"))
        ]
