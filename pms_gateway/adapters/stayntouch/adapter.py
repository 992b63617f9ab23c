"""
StayNTouch Adapter
OAuth2 client credentials against auth.stayntouch.com
"""

from ...auth import ClientCredentialsAdapter
from ..property_api import PropertyApiMixin


class StayNTouchAdapter(PropertyApiMixin, ClientCredentialsAdapter):
    provider = "stayntouch"
    display_name = "StayNTouch"
    default_currency = "USD"
    default_timezone = "America/New_York"
    production_url = "https://api.stayntouch.com/v2"
    token_url = "https://auth.stayntouch.com/oauth/token"
    required_credentials = ("client_id", "client_secret", "hotel_id")
    secret_credentials = ("client_id", "client_secret")

    property_credential = "hotel_id"
    property_resource = "hotels"
    config_envelope = "hotel"
    config_id_keys = ("id", "hotelId")
    config_fallback_name = "Hotel"
    address_keys = ("street", "city", "state", "zip", "country")
    date_params = ("startDate", "endDate")
    check_in_keys = ("arrivalDate",)
    check_out_keys = ("departureDate",)
    rate_price_keys = ("baseRate",)
