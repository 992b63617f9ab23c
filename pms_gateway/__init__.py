"""
PMS Gateway

A unified, read-only interface over many hotel Property Management Systems:
- canonical models and the adapter contract in contracts
- one adapter per provider under adapters/
- the factory maps provider tags to adapters; the router maps hotels to
  their connection
"""

from .factory import (
    ADAPTER_CLASSES,
    AdapterFactory,
    ProviderMetadata,
    ProviderRegistry,
    ProviderStatus,
    create_adapter,
    find_providers_with_capability,
    get_capability_matrix,
    get_provider_metadata,
    get_providers_by_region,
    get_providers_by_segment,
    get_total_market_coverage,
    list_providers,
    register_adapter,
)

from .router import PMSRouter, get_router

from .contracts import (
    PMSAdapter,
    BaseAdapter,
    Capabilities,
    # Errors
    PMSError,
    ConfigurationError,
    UnknownProviderError,
    AuthenticationError,
    TokenRejectedError,
    UpstreamApiError,
    NonJsonResponseError,
    RateLimitError,
    UpstreamUnavailableError,
    ValidationError,
    NoConnectionError,
    InactiveConnectionError,
    # Domain models
    Environment,
    ReservationStatus,
    HotelConfiguration,
    AvailabilityParams,
    Availability,
    ReservationParams,
    Reservation,
    RoomType,
    Rate,
    Connection,
    ConnectionTestResult,
)

from .config import GatewaySettings, get_settings

__version__ = "1.0.0"

__all__ = [
    # Factory
    "ADAPTER_CLASSES",
    "AdapterFactory",
    "ProviderMetadata",
    "ProviderRegistry",
    "ProviderStatus",
    "create_adapter",
    "find_providers_with_capability",
    "get_capability_matrix",
    "get_provider_metadata",
    "get_providers_by_region",
    "get_providers_by_segment",
    "get_total_market_coverage",
    "list_providers",
    "register_adapter",
    # Router
    "PMSRouter",
    "get_router",
    # Contracts
    "PMSAdapter",
    "BaseAdapter",
    "Capabilities",
    # Errors
    "PMSError",
    "ConfigurationError",
    "UnknownProviderError",
    "AuthenticationError",
    "TokenRejectedError",
    "UpstreamApiError",
    "NonJsonResponseError",
    "RateLimitError",
    "UpstreamUnavailableError",
    "ValidationError",
    "NoConnectionError",
    "InactiveConnectionError",
    # Domain models
    "Environment",
    "ReservationStatus",
    "HotelConfiguration",
    "AvailabilityParams",
    "Availability",
    "ReservationParams",
    "Reservation",
    "RoomType",
    "Rate",
    "Connection",
    "ConnectionTestResult",
    # Settings
    "GatewaySettings",
    "get_settings",
]
