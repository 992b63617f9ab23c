"""
Little Hotelier Adapter
"""

from ...auth import ApiKeyAdapter
from ..property_api import PropertyApiMixin


class LittleHotelierAdapter(PropertyApiMixin, ApiKeyAdapter):
    provider = "littlehotelier"
    display_name = "Little Hotelier"
    default_currency = "AUD"
    default_timezone = "Australia/Sydney"
    production_url = "https://api.littlehotelier.com/v1"
    required_credentials = ("api_key", "property_id")
    secret_credentials = ("api_key",)
    api_key_header = "X-API-Key"

    address_keys = ("street", "city", "postcode", "country")
    date_params = ("startDate", "endDate")
    reservation_id_keys = ("id", "bookingReference")
    check_in_keys = ("checkIn",)
    check_out_keys = ("checkOut",)
    capacity_keys = ("maxGuests",)
    rates_resource = "rates"
