"""
PMS Gateway Contracts
Canonical data model and the interface every PMS adapter must implement
"""

import json
import re
import time
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

import httpx

from .config import GatewaySettings, get_settings
from .utils.logging import AdapterLogger


# Canonical models (provider-agnostic)
class Environment(str, Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


@dataclass(frozen=True)
class HotelConfiguration:
    id: str
    name: str
    timezone: str
    currency: str
    address: Optional[str] = None


@dataclass(frozen=True)
class AvailabilityParams:
    start_date: date
    end_date: date
    room_type_id: Optional[str] = None

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise ValidationError(
                f"end_date {self.end_date} is before start_date {self.start_date}",
                field="end_date",
            )


@dataclass(frozen=True)
class Availability:
    date: date
    room_type_id: str
    available: int
    rate: Decimal
    currency: str


@dataclass(frozen=True)
class ReservationParams:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ReservationStatus] = None

    def __post_init__(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError(
                f"end_date {self.end_date} is before start_date {self.start_date}",
                field="end_date",
            )
        if self.status is not None and not isinstance(self.status, ReservationStatus):
            try:
                object.__setattr__(self, "status", ReservationStatus(self.status))
            except ValueError:
                raise ValidationError(f"Unknown reservation status: {self.status}", field="status") from None


@dataclass(frozen=True)
class Reservation:
    id: str
    guest_name: str
    room_type_id: str
    check_in: Optional[date]
    check_out: Optional[date]
    status: str
    total_amount: Decimal
    currency: str


@dataclass(frozen=True)
class RoomType:
    id: str
    name: str
    capacity: int
    description: Optional[str] = None


@dataclass(frozen=True)
class Rate:
    id: str
    name: str
    room_type_id: str
    price: Decimal
    currency: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Connection:
    """A hotel's binding to one PMS provider"""

    id: str
    hotel_id: str
    provider_type: str
    credentials: Mapping[str, Any] = field(default_factory=dict, repr=False)
    environment: Environment = Environment.PRODUCTION
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    last_sync_at: Optional[datetime] = None


@dataclass(frozen=True)
class ConnectionTestResult:
    success: bool
    message: str
    data: Optional[HotelConfiguration] = None
    # Answered by the stub adapter; no upstream was contacted
    stub: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": self.success, "message": self.message}
        if self.stub:
            result["stub"] = True
        if self.data is not None:
            result["data"] = asdict(self.data)
        return result


# Error types
class PMSError(Exception):
    """Base exception for gateway operations"""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class ConfigurationError(PMSError):
    """Connection credentials are missing or malformed"""


class UnknownProviderError(PMSError):
    """Provider tag is not one the gateway knows"""

    def __init__(self, provider_type: str):
        super().__init__(f"Unknown PMS provider type: {provider_type}", provider=provider_type)
        self.provider_type = provider_type


class AuthenticationError(PMSError):
    """Failed to authenticate with the PMS"""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.body = body


class TokenRejectedError(AuthenticationError):
    """Data call was unauthorized even after a fresh token"""


class UpstreamApiError(PMSError):
    """Upstream returned a failure response"""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.body = body


class NonJsonResponseError(UpstreamApiError):
    """Upstream body could not be parsed as JSON"""


class RateLimitError(UpstreamApiError):
    """Rate limit exceeded"""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = 429, body: Any = None, retry_after: Optional[int] = None):
        super().__init__(message, provider=provider, status_code=status_code, body=body)
        self.retry_after = retry_after


class UpstreamUnavailableError(UpstreamApiError):
    """Transport failure or timeout talking to the PMS"""


class ValidationError(PMSError):
    """Invalid canonical parameters"""

    def __init__(self, message: str, field: Optional[str] = None, provider: Optional[str] = None):
        super().__init__(message, provider=provider)
        self.field = field


class NoConnectionError(PMSError):
    """No connection is registered for the hotel"""

    def __init__(self, hotel_id: str):
        super().__init__(f"No PMS connection configured for hotel {hotel_id}")
        self.hotel_id = hotel_id


class InactiveConnectionError(PMSError):
    """The hotel's connection exists but is deactivated"""

    def __init__(self, hotel_id: str, provider: Optional[str] = None):
        super().__init__(f"PMS connection for hotel {hotel_id} is inactive", provider=provider)
        self.hotel_id = hotel_id


# Main Protocol
class PMSAdapter(Protocol):
    """
    Canonical PMS adapter interface.
    All data methods are async and return fresh canonical records.
    """

    provider: str
    display_name: str

    async def authenticate(self, force_refresh: bool = False) -> str:
        """Return a credential usable for the next upstream call"""
        ...

    async def get_configuration(self) -> HotelConfiguration:
        ...

    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        ...

    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        ...

    async def get_room_types(self) -> List[RoomType]:
        ...

    async def get_rates(self) -> List[Rate]:
        ...


# Capability definitions
class Capabilities(Enum):
    """Standard capability flags"""

    CONFIGURATION = "configuration"
    AVAILABILITY = "availability"
    RESERVATIONS = "reservations"
    ROOM_TYPES = "room_types"
    RATES = "rates"


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_credential_keys(credentials: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Accept clientId and client_id alike"""
    return {_CAMEL_BOUNDARY.sub("_", str(k)).lower(): v for k, v in (credentials or {}).items()}


# Base implementation with common functionality
class BaseAdapter(ABC):
    """
    Base class with the request pipeline shared by every adapter

    Subclasses declare their provider defaults as class attributes and
    implement the five canonical read operations. Authentication is layered
    on through the hooks ``authenticate``, ``_auth_headers``,
    ``_auth_params`` and ``_auth_json`` (see ``pms_gateway.auth``).
    """

    provider: str = ""
    display_name: str = ""
    default_currency: str = "USD"
    default_timezone: str = "UTC"
    production_url: str = ""
    sandbox_url: Optional[str] = None
    required_credentials: Tuple[str, ...] = ()
    # Keys whose presence marks a live (non-stub) connection
    secret_credentials: Optional[Tuple[str, ...]] = None
    error_message_keys: Tuple[Any, ...] = ("message", "error")
    capabilities: Dict[str, bool] = {cap.value: True for cap in Capabilities}

    def __init__(
        self,
        credentials: Optional[Mapping[str, Any]] = None,
        environment: Environment = Environment.PRODUCTION,
        settings: Optional[GatewaySettings] = None,
    ):
        self.credentials = normalize_credential_keys(credentials)
        self.environment = Environment(environment)
        self.settings = settings or get_settings()
        self._validate_credentials()
        self.base_url = str(self.credentials.get("base_url") or self._default_base_url()).rstrip("/")
        self._client: Optional[httpx.AsyncClient] = None

        self.logger = AdapterLogger(
            name=f"{self.__class__.__module__}.{self.__class__.__name__}",
            provider=self.provider,
            hotel_id=self.property_ref,
        )

    @classmethod
    def live_credential_keys(cls) -> Tuple[str, ...]:
        return cls.secret_credentials if cls.secret_credentials is not None else cls.required_credentials

    def _validate_credentials(self):
        missing = [key for key in self.required_credentials if not self.credentials.get(key)]
        if missing:
            raise ConfigurationError(
                f"{self.display_name} connection is missing credentials: {', '.join(missing)}",
                provider=self.provider,
            )

    def _default_base_url(self) -> str:
        if self.environment == Environment.SANDBOX and self.sandbox_url:
            return self.sandbox_url
        return self.production_url

    @property
    def property_ref(self) -> Optional[str]:
        """Upstream identifier of the property this adapter is bound to"""
        for key in ("property_id", "hotel_id", "hotel_code", "property_code", "site_id", "listing_id"):
            if self.credentials.get(key):
                return str(self.credentials[key])
        return None

    # Lifecycle
    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.request_timeout, connect=self.settings.connect_timeout),
            limits=httpx.Limits(
                max_keepalive_connections=self.settings.max_keepalive_connections,
                max_connections=self.settings.max_connections,
            ),
            headers={"User-Agent": self.settings.user_agent, "Accept": "application/json"},
        )

    async def connect(self):
        """Open a pooled client for a batch of calls"""
        if self._client is None:
            self._client = self._build_client()
            self.logger.debug("http_client_opened")

    async def disconnect(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self.logger.debug("http_client_closed")

    @asynccontextmanager
    async def _client_scope(self):
        if self._client is not None:
            yield self._client
            return
        client = self._build_client()
        try:
            yield client
        finally:
            await client.aclose()

    # Authentication hooks
    @abstractmethod
    async def authenticate(self, force_refresh: bool = False) -> str:
        """Return a credential usable for the next upstream call"""

    def _auth_headers(self, credential: str) -> Dict[str, str]:
        return {}

    def _auth_params(self, credential: str) -> Dict[str, Any]:
        return {}

    def _auth_json(self, credential: str, body: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        return body

    def _base_headers(self) -> Dict[str, str]:
        """Provider headers sent on every data call"""
        return {}

    # Request pipeline
    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        operation: Optional[str] = None,
    ) -> Any:
        """Authenticated data call; returns the parsed JSON payload"""
        credential = await self.authenticate()
        response = await self._send_authorized(credential, method, path, params=params, json_body=json_body, operation=operation)
        if response.status_code == 401:
            raise AuthenticationError(
                f"{self.display_name} rejected the configured credentials.",
                provider=self.provider,
                status_code=401,
                body=self._parse_error_body(response),
            )
        return self._handle_response(response)

    async def _send_authorized(self, credential, method, path, *, params=None, json_body=None, operation=None) -> httpx.Response:
        query = {**(params or {}), **self._auth_params(credential)}
        headers = {**self._base_headers(), **self._auth_headers(credential)}
        return await self._send(
            method,
            path,
            params=query or None,
            json_body=self._auth_json(credential, json_body),
            headers=headers,
            operation=operation,
        )

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[httpx.Auth] = None,
        operation: Optional[str] = None,
    ) -> httpx.Response:
        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}{path}"
        operation = operation or path
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        start_time = time.perf_counter()
        try:
            async with self._client_scope() as client:
                response = await client.request(
                    method, url, params=params or None, json=json_body, data=data, headers=headers, auth=auth or httpx.USE_CLIENT_DEFAULT
                )
        except httpx.TimeoutException as e:
            error = UpstreamUnavailableError(f"{self.display_name} request timed out.", provider=self.provider)
            self.logger.log_api_call(operation, method=method, url=url, duration_ms=(time.perf_counter() - start_time) * 1000, error=error)
            raise error from e
        except httpx.RequestError as e:
            error = UpstreamUnavailableError(f"{self.display_name} is unreachable: {e.__class__.__name__}", provider=self.provider)
            self.logger.log_api_call(operation, method=method, url=url, duration_ms=(time.perf_counter() - start_time) * 1000, error=error)
            raise error from e

        self.logger.log_api_call(
            operation,
            method=method,
            url=str(response.request.url),
            duration_ms=(time.perf_counter() - start_time) * 1000,
            status_code=response.status_code,
        )
        return response

    def _handle_response(self, response: httpx.Response) -> Any:
        if response.status_code == 429:
            raise RateLimitError(
                f"{self.display_name} rate limit exceeded.",
                provider=self.provider,
                body=self._parse_error_body(response),
                retry_after=self._retry_after(response),
            )

        if not response.is_success:
            raise self._api_error(response)

        payload = self._parse_json(response)
        self._check_payload(payload)
        return payload

    def _api_error(self, response: httpx.Response) -> UpstreamApiError:
        from .utils.normalize import error_message

        body = self._parse_error_body(response)
        message = error_message(body, self.error_message_keys) or (
            f"{self.display_name} API request failed ({response.status_code})."
        )
        return UpstreamApiError(message, provider=self.provider, status_code=response.status_code, body=body)

    def _check_payload(self, payload: Any) -> None:
        """Raise for failures reported inside a 2xx body"""

    def _parse_json(self, response: httpx.Response) -> Any:
        if not response.content or not response.content.strip():
            return {}
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise NonJsonResponseError(
                f"{self.display_name} returned a non-JSON response.",
                provider=self.provider,
                status_code=response.status_code,
                body=response.text[:500],
            )

    @staticmethod
    def _parse_error_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return response.text

    @staticmethod
    def _retry_after(response: httpx.Response) -> Optional[int]:
        value = response.headers.get("Retry-After")
        if value is None:
            return None
        try:
            return int(float(value))
        except ValueError:
            return None

    # Canonical operations
    @abstractmethod
    async def get_configuration(self) -> HotelConfiguration:
        ...

    @abstractmethod
    async def get_availability(self, params: AvailabilityParams) -> List[Availability]:
        ...

    @abstractmethod
    async def get_reservations(self, params: Optional[ReservationParams] = None) -> List[Reservation]:
        ...

    @abstractmethod
    async def get_room_types(self) -> List[RoomType]:
        ...

    @abstractmethod
    async def get_rates(self) -> List[Rate]:
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} provider={self.provider} ref={self.property_ref} env={self.environment.value}>"
