"""
WebRezPro Adapter
"""

from ...auth import ApiKeyAdapter
from ..property_api import PropertyApiMixin


class WebRezProAdapter(PropertyApiMixin, ApiKeyAdapter):
    provider = "webrezpro"
    display_name = "WebRezPro"
    default_currency = "USD"
    default_timezone = "America/New_York"
    production_url = "https://api.webrezpro.com/v1"
    required_credentials = ("api_key", "property_code")
    secret_credentials = ("api_key",)
    api_key_header = "Authorization"
    api_key_scheme = "Bearer"

    property_credential = "property_code"
    config_id_keys = ("propertyCode", "propertyId")
    address_keys = ("street", "city", "state", "zip", "country")
    date_params = ("startDate", "endDate")
    reservation_id_keys = ("reservationId", "confirmationNumber")
    room_type_id_keys = ("roomTypeId", "code")
    rates_resource = "rates"
    rate_id_keys = ("rateId", "code")
    rate_price_keys = ("amount",)
