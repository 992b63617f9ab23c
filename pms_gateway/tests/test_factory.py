"""
Tests for provider dispatch, stub selection and provider metadata
"""

from pathlib import Path

import pytest

from pms_gateway.adapters.apaleo import ApaleoAdapter
from pms_gateway.adapters.stub import StubAdapter
from pms_gateway.contracts import (
    BaseAdapter,
    Capabilities,
    ConfigurationError,
    Environment,
    HotelConfiguration,
    PMSError,
    UnknownProviderError,
)
from pms_gateway.factory import (
    ADAPTER_CLASSES,
    AdapterFactory,
    ProviderMetadata,
    ProviderRegistry,
    ProviderStatus,
    find_providers_with_capability,
    get_capability_matrix,
    get_provider_metadata,
    get_providers_by_region,
    get_providers_by_segment,
    get_total_market_coverage,
    list_providers,
)

from .fixtures import PROVIDER_CREDENTIALS


class TestAdapterFactory:
    @pytest.mark.parametrize("provider_type", sorted(PROVIDER_CREDENTIALS))
    def test_creates_provider_adapter_with_live_credentials(self, factory, provider_type):
        adapter = factory.create(provider_type, PROVIDER_CREDENTIALS[provider_type])

        assert type(adapter) is ADAPTER_CLASSES[provider_type]
        assert adapter.provider == provider_type

    def test_every_provider_has_credentials_fixture(self):
        assert set(PROVIDER_CREDENTIALS) == set(ADAPTER_CLASSES) - {"stub"}

    def test_each_call_returns_new_instance(self, factory):
        first = factory.create("apaleo", PROVIDER_CREDENTIALS["apaleo"])
        second = factory.create("apaleo", PROVIDER_CREDENTIALS["apaleo"])
        assert first is not second

    @pytest.mark.parametrize("provider_type", ["unknown", "", "MEWS", "opera-cloud"])
    def test_unknown_provider_raises(self, factory, provider_type):
        with pytest.raises(UnknownProviderError) as exc_info:
            factory.create(provider_type, {"api_key": "x"})
        assert exc_info.value.provider_type == provider_type

    def test_unknown_provider_never_falls_back_to_stub(self, factory):
        with pytest.raises(UnknownProviderError):
            factory.create("unknown", {})

    @pytest.mark.parametrize("provider_type", sorted(PROVIDER_CREDENTIALS))
    def test_no_live_credentials_selects_stub(self, factory, provider_type):
        adapter = factory.create(provider_type, {"hotel_id": "H1"})

        assert isinstance(adapter, StubAdapter)
        assert adapter.display_name == ADAPTER_CLASSES[provider_type].display_name

    def test_explicit_stub_tag(self, factory):
        adapter = factory.create("stub", {})
        assert isinstance(adapter, StubAdapter)
        assert adapter.display_name == "Stub"

    @pytest.mark.asyncio
    async def test_stub_configuration_names_the_provider(self, factory):
        adapter = factory.create("opera", {"hotelId": "H42"})

        config = await adapter.get_configuration()

        assert config == HotelConfiguration(
            id="H42", name="Opera Cloud Hotel (Stub)", timezone="UTC", currency="USD", address=None
        )

    @pytest.mark.parametrize(
        "provider_type,credentials",
        [
            ("apaleo", {"client_id": "only-id"}),
            ("opera", {"client_id": "id", "client_secret": "secret"}),
            ("protel", {"api_key": "key"}),
            ("mews", {"access_token": "token"}),
            ("inforhms", {"client_id": "id", "client_secret": "secret", "hotel_id": "H"}),
        ],
    )
    def test_partial_credentials_raise(self, factory, provider_type, credentials):
        with pytest.raises(ConfigurationError) as exc_info:
            factory.create(provider_type, credentials)
        assert exc_info.value.provider == provider_type

    def test_camel_case_credentials_are_accepted(self, factory):
        adapter = factory.create(
            "apaleo", {"clientId": "test_client", "clientSecret": "test_secret", "propertyId": "DEMO01"}
        )

        assert isinstance(adapter, ApaleoAdapter)
        assert adapter.credentials["client_id"] == "test_client"
        assert adapter.property_id == "DEMO01"

    def test_environment_is_passed_through(self, factory):
        adapter = factory.create("protel", PROVIDER_CREDENTIALS["protel"], Environment.SANDBOX)
        assert adapter.environment == Environment.SANDBOX
        assert adapter.base_url == "https://sandbox-api.protel.net/v1"

    def test_unavailable_provider_is_refused(self, settings, tmp_path: Path):
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text("providers:\n  apaleo:\n    status: unavailable\n")
        factory = AdapterFactory(registry=ProviderRegistry(catalog_path=catalog), settings=settings)

        with pytest.raises(PMSError, match="currently unavailable"):
            factory.create("apaleo", PROVIDER_CREDENTIALS["apaleo"])

    def test_custom_registration(self, settings, tmp_path: Path):
        class InHouseAdapter(StubAdapter):
            provider = "inhouse"

        registry = ProviderRegistry(catalog_path=tmp_path / "missing.yaml")
        registry.register("inhouse", InHouseAdapter)
        factory = AdapterFactory(registry=registry, settings=settings)

        # live_credential_keys() is empty for stub-derived adapters
        assert isinstance(factory.create("inhouse", {}), StubAdapter)
        assert registry.get_metadata("inhouse").status == ProviderStatus.AVAILABLE


class TestProviderRegistry:
    def test_lists_seventeen_providers_without_stub(self):
        providers = list_providers()
        assert len(providers) == 17
        assert "stub" not in providers

    def test_filter_by_status(self):
        assert list_providers(ProviderStatus.AVAILABLE) == list_providers()
        assert list_providers(ProviderStatus.MAINTENANCE) == []

    def test_metadata_merges_adapter_and_catalog(self):
        meta = get_provider_metadata("opera")

        assert isinstance(meta, ProviderMetadata)
        assert meta.name == "Opera Cloud"
        assert meta.region == "Global"
        assert meta.segment == "Chains/Luxury"
        assert meta.market_share == 28
        assert meta.authentication == "oauth2"
        assert meta.required_credentials == ["client_id", "client_secret", "enterprise_id", "hotel_id"]

    def test_metadata_for_unknown_provider(self):
        with pytest.raises(UnknownProviderError):
            get_provider_metadata("unknown")

    def test_capability_matrix(self):
        matrix = get_capability_matrix()

        assert set(matrix) == set(list_providers())
        assert matrix["apaleo"] == {cap.value: True for cap in Capabilities}
        assert matrix["guesty"]["rates"] is False
        assert matrix["beds24"]["rates"] is False

    def test_find_providers_with_capability(self):
        with_rates = find_providers_with_capability("rates")

        assert "mews" in with_rates
        assert "guesty" not in with_rates
        assert "beds24" not in with_rates
        assert len(find_providers_with_capability("availability")) == 17
        assert find_providers_with_capability("guest_profiles") == []

    def test_providers_by_region_is_case_insensitive_substring(self):
        europe = get_providers_by_region("europe")

        assert set(europe) == {"apaleo", "protel", "roomraccoon", "clockpms"}
        assert get_providers_by_region("UK") == ["guestline"]
        assert "hotelogix" in get_providers_by_region("asia")

    def test_providers_by_segment(self):
        assert set(get_providers_by_segment("vacation")) == {"hostaway", "guesty"}
        assert "mews" in get_providers_by_segment("independent")

    def test_total_market_coverage(self):
        assert get_total_market_coverage() == 88.0

    def test_missing_catalog_falls_back_to_adapter_defaults(self, tmp_path: Path):
        registry = ProviderRegistry(catalog_path=tmp_path / "missing.yaml")
        meta = registry.get_metadata("apaleo")

        assert meta.status == ProviderStatus.AVAILABLE
        assert meta.region == "Global"
        assert meta.market_share == 0.0
        assert meta.capabilities == ApaleoAdapter.capabilities

    def test_every_adapter_implements_the_contract(self):
        for provider, adapter_class in ADAPTER_CLASSES.items():
            assert issubclass(adapter_class, BaseAdapter)
            assert adapter_class.provider == provider
            assert adapter_class.display_name
            assert adapter_class.default_currency
            assert adapter_class.default_timezone
