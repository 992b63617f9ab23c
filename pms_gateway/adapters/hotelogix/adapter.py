"""
Hotelogix Adapter
"""

from ...auth import ApiKeyAdapter
from ..property_api import PropertyApiMixin


class HotelogixAdapter(PropertyApiMixin, ApiKeyAdapter):
    provider = "hotelogix"
    display_name = "Hotelogix"
    default_currency = "INR"
    default_timezone = "Asia/Kolkata"
    production_url = "https://api.hotelogix.com/v1"
    required_credentials = ("api_key", "hotel_code")
    secret_credentials = ("api_key",)
    api_key_header = "X-Api-Key"

    property_credential = "hotel_code"
    property_resource = "hotels"
    config_envelope = "hotel"
    config_id_keys = ("hotelCode", "hotelId")
    config_fallback_name = "Hotel"
    address_keys = ("street", "city", "state", "postalCode", "country")

    reservation_id_keys = ("reservationId", "bookingNumber")
    check_in_keys = ("checkIn",)
    check_out_keys = ("checkOut",)
    room_type_id_keys = ("roomTypeId", "roomTypeCode")
    capacity_keys = ("maxOccupancy", "maxAdults")
    rate_id_keys = ("ratePlanId", "ratePlanCode")
    rate_price_keys = ("amount",)

    def _base_headers(self):
        return {"X-Hotel-Code": self.property_key}
