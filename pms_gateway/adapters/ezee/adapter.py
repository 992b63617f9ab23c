"""
eZee Absolute Adapter
Same header scheme as Hotelogix; Indian-market address fields (pincode)
"""

from ...auth import ApiKeyAdapter
from ..property_api import PropertyApiMixin


class EzeeAdapter(PropertyApiMixin, ApiKeyAdapter):
    provider = "ezee"
    display_name = "eZee"
    default_currency = "INR"
    default_timezone = "Asia/Kolkata"
    production_url = "https://api.ezeetechnosys.com/v1"
    required_credentials = ("api_key", "hotel_code")
    secret_credentials = ("api_key",)
    api_key_header = "X-Api-Key"

    property_credential = "hotel_code"
    property_resource = "hotels"
    config_envelope = "hotel"
    config_id_keys = ("hotelCode", "hotelId")
    config_fallback_name = "Hotel"
    address_keys = ("street", "city", "state", "pincode", "country")

    reservation_id_keys = ("reservationId", "bookingNo")
    check_in_keys = ("checkIn",)
    check_out_keys = ("checkOut",)
    room_type_id_keys = ("roomTypeId", "roomTypeCode")
    rate_id_keys = ("ratePlanId", "ratePlanCode")
    rate_price_keys = ("amount",)

    def _base_headers(self):
        return {"X-Hotel-Code": self.property_key}
