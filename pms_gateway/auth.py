"""
Authentication families shared by provider adapters

- ClientCredentialsAdapter: OAuth2 client-credentials exchange with a cached
  bearer token and one forced refresh when a data call comes back 401
- ApiKeyAdapter: static key sent as a header (optionally with a scheme)
- QueryKeyAdapter: static or login-derived key sent in the query string
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from .contracts import AuthenticationError, BaseAdapter, ConfigurationError, TokenRejectedError
from .utils.normalize import dig, error_message, first_present, to_int


@dataclass(frozen=True)
class TokenCache:
    access_token: str
    expires_at: datetime

    def is_fresh(self, buffer_seconds: int, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now + timedelta(seconds=buffer_seconds) < self.expires_at


class ClientCredentialsAdapter(BaseAdapter):
    """Bearer-token adapter backed by an OAuth2 client-credentials grant"""

    required_credentials = ("client_id", "client_secret")
    token_url: str = ""
    # "form": credentials in the form body; "basic": HTTP Basic header
    token_auth_style: str = "form"
    token_scope: Optional[str] = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._token: Optional[TokenCache] = None
        self._token_lock = asyncio.Lock()

    def _token_endpoint(self) -> str:
        return self.credentials.get("token_url") or self.token_url

    def _token_is_fresh(self) -> bool:
        return self._token is not None and self._token.is_fresh(self.settings.token_refresh_buffer_seconds)

    async def authenticate(self, force_refresh: bool = False) -> str:
        if not force_refresh and self._token_is_fresh():
            return self._token.access_token

        async with self._token_lock:
            # Another caller may have refreshed while we waited
            if not force_refresh and self._token_is_fresh():
                return self._token.access_token
            self._token = await self._fetch_token()
            self.logger.info("token_refreshed", forced=force_refresh, expires_at=self._token.expires_at.isoformat())
            return self._token.access_token

    def _token_request_data(self) -> Dict[str, Any]:
        data = {"grant_type": "client_credentials"}
        scope = self.credentials.get("scope") or self.token_scope
        if scope:
            data["scope"] = scope
        if self.token_auth_style == "form":
            data["client_id"] = self.credentials["client_id"]
            data["client_secret"] = self.credentials["client_secret"]
        return data

    async def _fetch_token(self) -> TokenCache:
        auth = None
        if self.token_auth_style == "basic":
            auth = httpx.BasicAuth(self.credentials["client_id"], self.credentials["client_secret"])

        response = await self._send(
            "POST",
            self._token_endpoint(),
            data=self._token_request_data(),
            headers={"Accept": "application/json"},
            auth=auth,
            operation="token",
        )

        if not response.is_success:
            body = self._parse_error_body(response)
            detail = error_message(body, ("error_description", "error", "message")) or f"HTTP {response.status_code}"
            raise AuthenticationError(
                f"{self.display_name} authentication failed: {detail}",
                provider=self.provider,
                status_code=response.status_code,
                body=body,
            )

        payload = self._parse_json(response)
        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise AuthenticationError(
                f"{self.display_name} token response did not include an access token.",
                provider=self.provider,
                status_code=response.status_code,
                body=payload,
            )

        expires_in = to_int(payload.get("expires_in"), self.settings.default_token_ttl_seconds)
        return TokenCache(
            access_token=access_token,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        )

    def _auth_headers(self, credential: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {credential}"}

    async def _request(self, method, path, *, params=None, json_body=None, operation=None):
        """Data call with exactly one forced token refresh on 401"""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(2),
            retry=retry_if_exception_type(TokenRejectedError),
            reraise=True,
        ):
            with attempt:
                forced = attempt.retry_state.attempt_number > 1
                if forced:
                    self.logger.warning("token_rejected_refreshing", operation=operation or path)
                credential = await self.authenticate(force_refresh=forced)
                response = await self._send_authorized(
                    credential, method, path, params=params, json_body=json_body, operation=operation
                )
                if response.status_code == 401:
                    raise TokenRejectedError(
                        f"{self.display_name} rejected the access token.",
                        provider=self.provider,
                        status_code=401,
                        body=self._parse_error_body(response),
                    )
                return self._handle_response(response)


class ApiKeyAdapter(BaseAdapter):
    """Static API key adapter; 401 is final"""

    required_credentials = ("api_key",)
    api_key_field: str = "api_key"
    api_key_header: Optional[str] = "X-API-Key"
    api_key_scheme: Optional[str] = None

    async def authenticate(self, force_refresh: bool = False) -> str:
        return str(self.credentials[self.api_key_field])

    def _auth_headers(self, credential: str) -> Dict[str, str]:
        if not self.api_key_header:
            return {}
        value = f"{self.api_key_scheme} {credential}" if self.api_key_scheme else credential
        return {self.api_key_header: value}


class QueryKeyAdapter(BaseAdapter):
    """
    Key carried in the query string of every call

    The key is either configured directly or obtained once through a
    username/password login and then reused.
    """

    query_key_param: str = "access_token"
    direct_key_fields = ("access_token", "api_key")
    login_path: str = "/login"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._login_token: Optional[str] = None
        self._token_lock = asyncio.Lock()

    def _validate_credentials(self):
        super()._validate_credentials()
        has_key = any(self.credentials.get(k) for k in self.direct_key_fields)
        has_login = self.credentials.get("username") and self.credentials.get("password")
        if not (has_key or has_login):
            raise ConfigurationError(
                f"{self.display_name} connection needs an access token, an API key, or username and password",
                provider=self.provider,
            )

    def _direct_key(self) -> Optional[str]:
        for key in self.direct_key_fields:
            if self.credentials.get(key):
                return str(self.credentials[key])
        return None

    async def authenticate(self, force_refresh: bool = False) -> str:
        direct = self._direct_key()
        if direct:
            return direct
        if self._login_token and not force_refresh:
            return self._login_token
        async with self._token_lock:
            if self._login_token and not force_refresh:
                return self._login_token
            self._login_token = await self._login()
            return self._login_token

    async def _login(self) -> str:
        response = await self._send(
            "POST",
            self.login_path,
            json_body={"username": self.credentials["username"], "password": self.credentials["password"]},
            operation="login",
        )
        body = self._parse_error_body(response)
        token = None
        if response.is_success and isinstance(body, dict):
            token_keys = ("access_token", "accessToken", "token")
            token = first_present(dig(body, "data", default={}), *token_keys) or first_present(body, *token_keys)
        if not token:
            detail = error_message(body, self.error_message_keys) or f"HTTP {response.status_code}"
            raise AuthenticationError(
                f"{self.display_name} login failed: {detail}",
                provider=self.provider,
                status_code=response.status_code,
                body=body,
            )
        return str(token)

    def _auth_params(self, credential: str) -> Dict[str, Any]:
        return {self.query_key_param: credential}
