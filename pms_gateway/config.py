"""
PMS Gateway configuration
Runtime settings loaded from the environment (prefix PMS_GATEWAY_)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewaySettings(BaseSettings):
    """Gateway-wide settings shared by every adapter"""

    model_config = SettingsConfigDict(
        env_prefix="PMS_GATEWAY_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    service_name: str = Field(default="pms-gateway", description="Service name in log records")
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")

    # Upstream HTTP
    request_timeout: float = Field(default=30.0, gt=0, le=30.0, description="Ceiling for any upstream call (seconds)")
    connect_timeout: float = Field(default=10.0, gt=0, description="TCP connect timeout (seconds)")
    user_agent: str = Field(default="PMS-Gateway/1.0", description="User-Agent sent upstream")
    max_connections: int = Field(default=25, ge=1, le=200)
    max_keepalive_connections: int = Field(default=10, ge=0, le=200)

    # Token lifecycle
    token_refresh_buffer_seconds: int = Field(default=60, ge=0, le=600)
    default_token_ttl_seconds: int = Field(default=3600, ge=60)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("connect_timeout")
    @classmethod
    def validate_connect_timeout(cls, v, info):
        ceiling = info.data.get("request_timeout", 30.0)
        return min(v, ceiling)


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    """Return the process-wide settings instance"""
    return GatewaySettings()
