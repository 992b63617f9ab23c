"""
Structured Logging Utilities for the PMS Gateway
Provides JSON log lines with secret redaction and correlation IDs
"""

import json
import logging
import socket
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from .redaction import SecretRedactorFilter, get_default_redactor

# Context variable for correlation ID
correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

_RESERVED_ATTRS = frozenset(
    [
        "name", "msg", "args", "created", "msecs", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "exc_info", "exc_text",
        "stack_info", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "taskName", "message", "asctime",
    ]
)


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for log records

    Every record becomes one JSON object; fields passed through ``extra``
    are copied to the top level.
    """

    def __init__(self, service_name: str = "pms-gateway"):
        super().__init__()
        self.service_name = service_name
        self.hostname = self._get_hostname()

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "@timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "hostname": self.hostname,
            "correlation_id": correlation_id.get(),
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_obj[key] = value

        return json.dumps(log_obj, default=str)

    @staticmethod
    def _get_hostname():
        try:
            return socket.gethostname()
        except OSError:
            return "unknown"


def configure_logging(settings=None) -> None:
    """Install the gateway's handler on the package logger, once"""
    from ..config import get_settings

    settings = settings or get_settings()
    package_logger = logging.getLogger("pms_gateway")
    package_logger.setLevel(settings.log_level)

    if any(getattr(h, "_pms_gateway", False) for h in package_logger.handlers):
        return

    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(StructuredFormatter(settings.service_name))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    handler.addFilter(SecretRedactorFilter())
    handler._pms_gateway = True
    package_logger.addHandler(handler)


class AdapterLogger:
    """
    Logger wrapper bound to one provider adapter

    Features:
    - Secret redaction on every record
    - Correlation ID tracking
    - Per-call timing fields
    """

    def __init__(self, name: str, provider: str, hotel_id: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.provider = provider
        self.hotel_id = hotel_id

        if not any(isinstance(f, SecretRedactorFilter) for f in self.logger.filters):
            self.logger.addFilter(SecretRedactorFilter())

    def with_correlation_id(self, correlation_id_val: Optional[str] = None) -> str:
        """Set or generate correlation ID for request tracking"""
        correlation_id.set(correlation_id_val or str(uuid.uuid4()))
        return correlation_id.get()

    def _context(self, **kwargs) -> Dict[str, Any]:
        return {"provider": self.provider, "hotel_id": self.hotel_id, **kwargs}

    def log_api_call(
        self,
        operation: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        request_data: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        status_code: Optional[int] = None,
        error: Optional[Exception] = None,
    ):
        """Log an upstream call with standardized fields"""
        log_data = self._context(
            operation=operation,
            method=method,
            url=sanitize_url(url) if url else None,
            duration_ms=duration_ms,
            status_code=status_code,
        )

        if request_data:
            log_data["request"] = get_default_redactor().redact_dict(request_data)

        if error:
            log_data["error"] = str(error)
            log_data["error_type"] = type(error).__name__
            self.logger.warning(f"Upstream call failed: {operation}", extra=log_data)
        else:
            self.logger.info(f"Upstream call completed: {operation}", extra=log_data)

    def debug(self, msg: str, **kwargs):
        self.logger.debug(msg, extra=self._context(**kwargs))

    def info(self, msg: str, **kwargs):
        self.logger.info(msg, extra=self._context(**kwargs))

    def warning(self, msg: str, **kwargs):
        self.logger.warning(msg, extra=self._context(**kwargs))

    def error(self, msg: str, exc_info=None, **kwargs):
        self.logger.error(msg, exc_info=exc_info, extra=self._context(**kwargs))


def log_performance(operation: str):
    """
    Decorator to log timing of async methods

    Usage:
        @log_performance("get_availability")
        async def get_availability(self, hotel_id, params):
            ...
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            start_time = time.perf_counter()
            error = None

            try:
                return await func(self, *args, **kwargs)
            except Exception as e:
                error = e
                raise
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger = getattr(self, "logger", None)
                hotel_id = args[0] if args and isinstance(args[0], str) else kwargs.get("hotel_id")

                if isinstance(logger, AdapterLogger):
                    logger.log_api_call(operation=operation, duration_ms=duration_ms, error=error)
                elif logger is not None:
                    extra = {"operation": operation, "duration_ms": duration_ms, "hotel_id": hotel_id}
                    if error:
                        extra["error_type"] = type(error).__name__
                        logger.warning(f"{operation} failed in {duration_ms:.2f}ms: {error}", extra=extra)
                    else:
                        logger.info(f"{operation} completed in {duration_ms:.2f}ms", extra=extra)

        return wrapper

    return decorator


SENSITIVE_PARAMS = {
    "api_key", "apikey", "key", "token", "secret", "password", "pwd",
    "auth", "authorization", "client_secret", "client_id", "access_token",
    "refresh_token", "session", "sid", "propkey",
}


def sanitize_url(url: str) -> str:
    """
    Sanitize URL for logging by removing sensitive query parameters

    Args:
        url: URL to sanitize

    Returns:
        Sanitized URL safe for logging
    """
    parsed = urlparse(str(url))
    query_params = parse_qs(parsed.query, keep_blank_values=True)

    sanitized_params = {
        param: ["<REDACTED>"] if param.lower() in SENSITIVE_PARAMS else values
        for param, values in query_params.items()
    }

    return urlunparse(
        (
            parsed.scheme,
            parsed.netloc,
            parsed.path,
            parsed.params,
            urlencode(sanitized_params, doseq=True, safe="<>"),
            parsed.fragment,
        )
    )
