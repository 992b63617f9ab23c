"""
PMS Gateway - Adapter Factory
Provider-tag dispatch, provider metadata and stub selection
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type

import yaml

from .adapters.apaleo import ApaleoAdapter
from .adapters.beds24 import Beds24Adapter
from .adapters.clockpms import ClockPMSAdapter
from .adapters.cloudbeds import CloudbedsAdapter
from .adapters.ezee import EzeeAdapter
from .adapters.guestline import GuestlineAdapter
from .adapters.guesty import GuestyAdapter
from .adapters.hostaway import HostawayAdapter
from .adapters.hotelogix import HotelogixAdapter
from .adapters.inforhms import InforHMSAdapter
from .adapters.littlehotelier import LittleHotelierAdapter
from .adapters.mews import MewsAdapter
from .adapters.opera import OperaAdapter
from .adapters.protel import ProtelAdapter
from .adapters.roomraccoon import RoomRaccoonAdapter
from .adapters.stayntouch import StayNTouchAdapter
from .adapters.stub import StubAdapter
from .adapters.webrezpro import WebRezProAdapter
from .config import GatewaySettings
from .contracts import (
    BaseAdapter,
    Environment,
    PMSError,
    UnknownProviderError,
    normalize_credential_keys,
)

logger = logging.getLogger(__name__)

STUB_PROVIDER = "stub"

# Closed provider-tag -> adapter mapping
ADAPTER_CLASSES: Dict[str, Type[BaseAdapter]] = {
    "mews": MewsAdapter,
    "cloudbeds": CloudbedsAdapter,
    "apaleo": ApaleoAdapter,
    "opera": OperaAdapter,
    "protel": ProtelAdapter,
    "guestline": GuestlineAdapter,
    "roomraccoon": RoomRaccoonAdapter,
    "clockpms": ClockPMSAdapter,
    "hotelogix": HotelogixAdapter,
    "ezee": EzeeAdapter,
    "littlehotelier": LittleHotelierAdapter,
    "stayntouch": StayNTouchAdapter,
    "webrezpro": WebRezProAdapter,
    "inforhms": InforHMSAdapter,
    "hostaway": HostawayAdapter,
    "beds24": Beds24Adapter,
    "guesty": GuestyAdapter,
    STUB_PROVIDER: StubAdapter,
}


class ProviderStatus(Enum):
    """Provider availability status"""

    AVAILABLE = "available"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"
    MAINTENANCE = "maintenance"


@dataclass
class ProviderMetadata:
    """Metadata about a PMS provider"""

    provider: str
    name: str
    status: ProviderStatus
    capabilities: Dict[str, bool]
    authentication: str
    region: str = "Global"
    segment: str = ""
    market_share: float = 0.0
    required_credentials: List[str] = field(default_factory=list)
    documentation_url: Optional[str] = None


class ProviderRegistry:
    """Registry of known PMS providers"""

    def __init__(self, catalog_path: Optional[Path] = None):
        self._adapters: Dict[str, Type[BaseAdapter]] = {}
        self._metadata: Dict[str, ProviderMetadata] = {}
        self._catalog: Dict[str, Any] = {}
        self._load_catalog(catalog_path or Path(__file__).parent / "provider_catalog.yaml")
        for provider, adapter_class in ADAPTER_CLASSES.items():
            self.register(provider, adapter_class)

    def _load_catalog(self, path: Path):
        """Load provider catalog from YAML"""
        if path.exists():
            with open(path, "r") as f:
                self._catalog = yaml.safe_load(f) or {}
            logger.info(f"Loaded provider catalog with {len(self._catalog.get('providers', {}))} providers")
        else:
            logger.warning("Provider catalog not found, using adapter defaults")
            self._catalog = {"providers": {}}

    def _build_metadata(self, provider: str, adapter_class: Type[BaseAdapter]) -> ProviderMetadata:
        entry = self._catalog.get("providers", {}).get(provider, {})
        capabilities = dict(adapter_class.capabilities)
        capabilities.update(entry.get("capabilities") or {})

        return ProviderMetadata(
            provider=provider,
            name=adapter_class.display_name or provider.title(),
            status=ProviderStatus(entry.get("status", "available")),
            capabilities=capabilities,
            authentication=entry.get("authentication", "api_key"),
            region=entry.get("region", "Global"),
            segment=entry.get("segment", ""),
            market_share=float(entry.get("market_share", 0)),
            required_credentials=list(adapter_class.required_credentials),
            documentation_url=entry.get("documentation_url"),
        )

    def register(
        self,
        provider: str,
        adapter_class: Type[BaseAdapter],
        metadata: Optional[ProviderMetadata] = None,
    ):
        """Register (or replace) an adapter class for a provider tag"""
        self._adapters[provider] = adapter_class
        self._metadata[provider] = metadata or self._build_metadata(provider, adapter_class)

    def get_adapter_class(self, provider: str) -> Type[BaseAdapter]:
        if provider not in self._adapters:
            raise UnknownProviderError(provider)
        return self._adapters[provider]

    def get_metadata(self, provider: str) -> ProviderMetadata:
        if provider not in self._metadata:
            raise UnknownProviderError(provider)
        return self._metadata[provider]

    def list_providers(self, status: Optional[ProviderStatus] = None, include_stub: bool = False) -> List[str]:
        """List registered providers, optionally filtered by status"""
        providers = [
            provider
            for provider, meta in self._metadata.items()
            if (status is None or meta.status == status) and (include_stub or provider != STUB_PROVIDER)
        ]
        return providers

    def get_capability_matrix(self) -> Dict[str, Dict[str, bool]]:
        return {provider: dict(meta.capabilities) for provider, meta in self._metadata.items() if provider != STUB_PROVIDER}

    def find_providers_with_capability(self, capability: str) -> List[str]:
        return [
            provider
            for provider, meta in self._metadata.items()
            if provider != STUB_PROVIDER and meta.capabilities.get(capability, False)
        ]

    def get_providers_by_region(self, region: str) -> List[str]:
        """Case-insensitive substring match on region"""
        needle = region.lower()
        return [p for p in self.list_providers() if needle in self._metadata[p].region.lower()]

    def get_providers_by_segment(self, segment: str) -> List[str]:
        needle = segment.lower()
        return [p for p in self.list_providers() if needle in self._metadata[p].segment.lower()]

    def get_total_market_coverage(self) -> float:
        """Summed market share (percent) of all real providers"""
        return round(sum(self._metadata[p].market_share for p in self.list_providers()), 2)


# Global registry instance
_registry = ProviderRegistry()


class AdapterFactory:
    """Factory for creating PMS adapter instances"""

    def __init__(self, registry: Optional[ProviderRegistry] = None, settings: Optional[GatewaySettings] = None):
        self.registry = registry or _registry
        self.settings = settings

    def create(
        self,
        provider_type: str,
        credentials: Optional[Mapping[str, Any]] = None,
        environment: Environment = Environment.PRODUCTION,
    ) -> BaseAdapter:
        """
        Create a new adapter instance for a provider tag

        Returns the stub adapter when the connection carries none of the
        provider's live credential keys. A partial credential set is
        rejected by the adapter with ConfigurationError.

        Raises:
            UnknownProviderError: provider tag is not registered
            ConfigurationError: required credentials are missing
            PMSError: provider is marked unavailable
        """
        adapter_class = self.registry.get_adapter_class(provider_type)
        metadata = self.registry.get_metadata(provider_type)

        if metadata.status == ProviderStatus.UNAVAILABLE:
            raise PMSError(f"Provider {provider_type} is currently unavailable", provider=provider_type)
        if metadata.status == ProviderStatus.MAINTENANCE:
            logger.warning(f"Provider {provider_type} is in maintenance mode")

        if provider_type != STUB_PROVIDER and not self._has_live_credentials(adapter_class, credentials):
            logger.info(f"No live credentials for {provider_type}; using stub adapter")
            return StubAdapter(
                credentials=credentials,
                environment=environment,
                settings=self.settings,
                display_name=adapter_class.display_name,
            )

        adapter = adapter_class(credentials=credentials, environment=environment, settings=self.settings)
        logger.debug(f"Created adapter: {adapter!r}")
        return adapter

    @staticmethod
    def _has_live_credentials(adapter_class: Type[BaseAdapter], credentials: Optional[Mapping[str, Any]]) -> bool:
        normalized = normalize_credential_keys(credentials)
        return any(normalized.get(key) for key in adapter_class.live_credential_keys())


# Convenience functions
def create_adapter(
    provider_type: str,
    credentials: Optional[Mapping[str, Any]] = None,
    environment: Environment = Environment.PRODUCTION,
) -> BaseAdapter:
    """Create an adapter through the global registry"""
    return AdapterFactory().create(provider_type, credentials, environment)


def list_providers(status: Optional[ProviderStatus] = None) -> List[str]:
    return _registry.list_providers(status)


def get_provider_metadata(provider: str) -> ProviderMetadata:
    return _registry.get_metadata(provider)


def get_capability_matrix() -> Dict[str, Dict[str, bool]]:
    """Get the capability matrix for all providers"""
    return _registry.get_capability_matrix()


def find_providers_with_capability(capability: str) -> List[str]:
    return _registry.find_providers_with_capability(capability)


def get_providers_by_region(region: str) -> List[str]:
    return _registry.get_providers_by_region(region)


def get_providers_by_segment(segment: str) -> List[str]:
    return _registry.get_providers_by_segment(segment)


def get_total_market_coverage() -> float:
    return _registry.get_total_market_coverage()


# Allow manual registration for testing
def register_adapter(
    provider: str,
    adapter_class: Type[BaseAdapter],
    metadata: Optional[ProviderMetadata] = None,
):
    """Register a custom adapter"""
    _registry.register(provider, adapter_class, metadata)
