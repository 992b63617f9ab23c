"""
Clock PMS+ Adapter
Static API key sent as a bearer token, resources under /properties/{id}
"""

from ...auth import ApiKeyAdapter
from ..property_api import PropertyApiMixin


class ClockPMSAdapter(PropertyApiMixin, ApiKeyAdapter):
    provider = "clockpms"
    display_name = "Clock PMS"
    default_currency = "EUR"
    default_timezone = "Europe/Sofia"
    production_url = "https://api.clock-software.com/v1"
    required_credentials = ("api_key", "property_id")
    secret_credentials = ("api_key",)
    api_key_header = "Authorization"
    api_key_scheme = "Bearer"

    capacity_keys = ("maxPersons",)

    def _base_headers(self):
        return {"X-Property-Id": self.property_key}
