"""
Stub PMS Adapter
Deterministic sample data with no network access. Returned for the
"stub" provider tag and for connections that carry no live credentials.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from ...contracts import (
    Availability,
    AvailabilityParams,
    BaseAdapter,
    HotelConfiguration,
    Rate,
    Reservation,
    ReservationParams,
    ReservationStatus,
    RoomType,
)

STUB_ROOM_TYPE_ID = "room_1"
STUB_CURRENCY = "USD"
STUB_NIGHTLY_RATE = Decimal("150.00")
STUB_AVAILABLE_UNITS = 5


class StubAdapter(BaseAdapter):
    provider = "stub"
    display_name = "Stub"
    default_currency = STUB_CURRENCY
    default_timezone = "UTC"

    def __init__(self, credentials=None, environment="production", settings=None, display_name: Optional[str] = None):
        if display_name:
            self.display_name = display_name
        super().__init__(credentials=credentials, environment=environment, settings=settings)

    async def authenticate(self, force_refresh: bool = False) -> str:
        return "stub"

    async def get_configuration(self) -> HotelConfiguration:
        return HotelConfiguration(
            id=str(self.credentials.get("hotel_id") or self.credentials.get("property_id") or "stub_hotel"),
            name=f"{self.display_name} Hotel (Stub)",
            timezone=self.default_timezone,
            currency=self.default_currency,
            address=None,
        )

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        # One record per night in [start, end), and at least one
        nights = max((params.end_date - params.start_date).days, 1)
        return [
            Availability(
                date=params.start_date + timedelta(days=offset),
                room_type_id=params.room_type_id or STUB_ROOM_TYPE_ID,
                available=STUB_AVAILABLE_UNITS,
                rate=STUB_NIGHTLY_RATE,
                currency=STUB_CURRENCY,
            )
            for offset in range(nights)
        ]

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        reservation = Reservation(
            id="res_stub_1",
            guest_name="Test Guest",
            room_type_id=STUB_ROOM_TYPE_ID,
            check_in=date(2024, 3, 1),
            check_out=date(2024, 3, 3),
            status=ReservationStatus.CONFIRMED.value,
            total_amount=Decimal("300.00"),
            currency=STUB_CURRENCY,
        )
        if params and params.status and params.status != ReservationStatus.CONFIRMED:
            return []
        return [reservation]

    async def get_room_types(self) -> List[RoomType]:
        return [RoomType(id=STUB_ROOM_TYPE_ID, name="Standard Room", capacity=2, description="Stub room type")]

    async def get_rates(self) -> List[Rate]:
        return [
            Rate(
                id="rate_1",
                name="Best Available Rate",
                room_type_id=STUB_ROOM_TYPE_ID,
                price=STUB_NIGHTLY_RATE,
                currency=STUB_CURRENCY,
            )
        ]
