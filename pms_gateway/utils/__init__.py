"""
Utility modules for the PMS Gateway
"""

from .redaction import (
    SecretRedactor,
    SecretRedactorFilter,
    get_default_redactor,
    redact_secrets,
    setup_logging_redaction,
)

from .logging import (
    AdapterLogger,
    StructuredFormatter,
    configure_logging,
    log_performance,
    sanitize_url,
    correlation_id,
)

# normalize imports contracts, so it is not re-exported here

__all__ = [
    # Redaction
    "SecretRedactor",
    "SecretRedactorFilter",
    "get_default_redactor",
    "redact_secrets",
    "setup_logging_redaction",
    # Logging
    "AdapterLogger",
    "StructuredFormatter",
    "configure_logging",
    "log_performance",
    "sanitize_url",
    "correlation_id",
]
