"""
PMS Gateway - Connection Router
Routes canonical requests to the adapter bound to each hotel
"""

import dataclasses
import logging
from typing import Any, Dict, List, Mapping, Optional

from .contracts import (
    Availability,
    AvailabilityParams,
    BaseAdapter,
    Connection,
    ConnectionTestResult,
    Environment,
    HotelConfiguration,
    InactiveConnectionError,
    NoConnectionError,
    Rate,
    Reservation,
    ReservationParams,
    RoomType,
)
from .factory import STUB_PROVIDER, AdapterFactory
from .utils.logging import configure_logging, log_performance


class PMSRouter:
    """
    Holds hotel connections and a lazily built adapter per hotel

    Adapters are cached by hotel id and evicted whenever the hotel's
    connection changes, so a cached adapter always reflects the current
    credentials.
    """

    def __init__(self, factory: Optional[AdapterFactory] = None):
        self.factory = factory or AdapterFactory()
        self.logger = logging.getLogger(__name__)
        self._connections: Dict[str, Connection] = {}
        self._adapters: Dict[str, BaseAdapter] = {}

    # Connection registry
    def register_connection(self, connection: Connection) -> None:
        """Upsert a hotel's connection and drop any adapter built from the old one"""
        self._connections[connection.hotel_id] = connection
        self._adapters.pop(connection.hotel_id, None)
        self.logger.info(
            f"Registered {connection.provider_type} connection for hotel {connection.hotel_id}",
            extra={"hotel_id": connection.hotel_id, "provider": connection.provider_type},
        )

    def get_connection(self, hotel_id: str) -> Optional[Connection]:
        return self._connections.get(hotel_id)

    def list_connections(self) -> List[Connection]:
        return list(self._connections.values())

    def remove_connection(self, hotel_id: str) -> bool:
        self._adapters.pop(hotel_id, None)
        removed = self._connections.pop(hotel_id, None) is not None
        if removed:
            self.logger.info(f"Removed connection for hotel {hotel_id}", extra={"hotel_id": hotel_id})
        return removed

    def deactivate_connection(self, hotel_id: str) -> bool:
        """Mark a connection inactive without forgetting it"""
        connection = self._connections.get(hotel_id)
        if connection is None:
            return False
        self._connections[hotel_id] = dataclasses.replace(connection, is_active=False)
        self._adapters.pop(hotel_id, None)
        return True

    def get_adapter(self, hotel_id: str) -> BaseAdapter:
        cached = self._adapters.get(hotel_id)
        if cached is not None:
            return cached

        connection = self._connections.get(hotel_id)
        if connection is None:
            raise NoConnectionError(hotel_id)
        if not connection.is_active:
            raise InactiveConnectionError(hotel_id, provider=connection.provider_type)

        adapter = self.factory.create(connection.provider_type, connection.credentials, connection.environment)
        self._adapters[hotel_id] = adapter
        return adapter

    # Unified API
    @log_performance("get_configuration")
    async def get_configuration(self, hotel_id: str) -> HotelConfiguration:
        return await self.get_adapter(hotel_id).get_configuration()

    @log_performance("get_availability")
    async def get_availability(self, hotel_id: str, params: AvailabilityParams) -> List[Availability]:
        return await self.get_adapter(hotel_id).get_availability(params)

    @log_performance("get_reservations")
    async def get_reservations(self, hotel_id: str, params: Optional[ReservationParams] = None) -> List[Reservation]:
        return await self.get_adapter(hotel_id).get_reservations(params)

    @log_performance("get_room_types")
    async def get_room_types(self, hotel_id: str) -> List[RoomType]:
        return await self.get_adapter(hotel_id).get_room_types()

    @log_performance("get_rates")
    async def get_rates(self, hotel_id: str) -> List[Rate]:
        return await self.get_adapter(hotel_id).get_rates()

    async def test_connection(
        self,
        provider_type: str,
        credentials: Optional[Mapping[str, Any]] = None,
        environment: Environment = Environment.PRODUCTION,
    ) -> ConnectionTestResult:
        """Authenticate and fetch configuration with a throwaway adapter; never raises"""
        try:
            adapter = self.factory.create(provider_type, credentials, environment)
            async with adapter:
                await adapter.authenticate()
                config = await adapter.get_configuration()
        except Exception as e:
            self.logger.warning(
                f"Connection test failed for {provider_type}: {e}",
                extra={"provider": provider_type, "error_type": type(e).__name__},
            )
            return ConnectionTestResult(success=False, message=str(e) or "Connection failed")

        return ConnectionTestResult(
            success=True,
            message=f"Connected to {config.name}",
            data=config,
            stub=adapter.provider == STUB_PROVIDER,
        )

    async def close(self) -> None:
        """Close pooled HTTP clients held by cached adapters"""
        for adapter in list(self._adapters.values()):
            await adapter.disconnect()
        self._adapters.clear()


# Global router instance
_router: Optional[PMSRouter] = None


def get_router() -> PMSRouter:
    """Get or create the global router"""
    global _router

    if _router is None:
        configure_logging()
        _router = PMSRouter()

    return _router
