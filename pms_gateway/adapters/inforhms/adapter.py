"""
Infor HMS Adapter
Multi-tenant: every resource lives under /tenants/{tenant}/hotels/{hotel}
"""

from ...auth import ClientCredentialsAdapter
from ..property_api import PropertyApiMixin


class InforHMSAdapter(PropertyApiMixin, ClientCredentialsAdapter):
    provider = "inforhms"
    display_name = "Infor HMS"
    default_currency = "USD"
    default_timezone = "UTC"
    production_url = "https://api.infor.com/hms/v1"
    token_url = "https://auth.infor.com/oauth/token"
    token_scope = "hms"
    required_credentials = ("client_id", "client_secret", "tenant_id", "hotel_id")
    secret_credentials = ("client_id", "client_secret")

    property_credential = "hotel_id"
    property_resource = "hotels"
    config_envelope = "hotel"
    config_id_keys = ("hotelId", "hotelCode")
    config_fallback_name = "Hotel"
    address_keys = ("street", "city", "state", "postalCode", "country")
    date_params = ("startDate", "endDate")
    reservation_id_keys = ("reservationId", "confirmationNumber")
    check_in_keys = ("arrivalDate",)
    check_out_keys = ("departureDate",)
    room_type_id_keys = ("roomTypeId", "code")
    rate_id_keys = ("ratePlanId", "code")
    rate_price_keys = ("baseAmount",)

    @property
    def tenant_id(self) -> str:
        return str(self.credentials["tenant_id"])

    def _scoped(self, resource: str = "") -> str:
        return f"/tenants/{self.tenant_id}{super()._scoped(resource)}"

    def _base_headers(self):
        return {"X-Tenant-Id": self.tenant_id}
