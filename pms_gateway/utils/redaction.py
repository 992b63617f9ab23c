"""
Secret and PII redaction for gateway logs
Keeps provider credentials, tokens and guest contact details out of log output
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional


class SecretRedactor:
    """Regex-based redactor for credentials and guest contact details"""

    SENSITIVE_KEYS = [
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "prop_key",
        "propkey",
        "authorization",
        "client_token",
        "email",
        "phone",
        "card_number",
    ]

    PATTERNS = [
        # Authorization headers
        (re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE), r"\1 <REDACTED>"),
        # key=value / "key": "value" pairs for credential-looking keys
        (
            re.compile(
                r"""(["']?(?:access_token|client_secret|api_?key|apikey|password|client_token|prop_?key)["']?\s*[:=]\s*["']?)([^"'&\s,}]+)""",
                re.IGNORECASE,
            ),
            r"\1<REDACTED>",
        ),
        # Email addresses
        (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "<EMAIL>"),
    ]

    def __init__(self, redact_char: str = "*", extra_keys: Optional[Iterable[str]] = None):
        self.redact_char = redact_char
        self.sensitive_keys = list(self.SENSITIVE_KEYS) + list(extra_keys or [])

    def redact_text(self, text: str) -> str:
        """Mask credentials and contact details inside free text"""
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def is_sensitive_key(self, key: str) -> bool:
        lowered = key.lower()
        return any(s in lowered for s in self.sensitive_keys)

    def redact_dict(self, data: Dict[str, Any], sensitive_keys: List[str] = None) -> Dict[str, Any]:
        """
        Redact sensitive values from a (possibly nested) dictionary

        Args:
            data: Dictionary to redact
            sensitive_keys: Additional keys to fully redact

        Returns:
            New dictionary with redacted values
        """
        extra = [k.lower() for k in (sensitive_keys or [])]

        def _redact_value(key: str, value: Any) -> Any:
            if self.is_sensitive_key(key) or any(s in key.lower() for s in extra):
                if isinstance(value, str):
                    return self.redact_char * len(value)
                return f"<REDACTED_{key.upper()}>"
            if isinstance(value, dict):
                return self.redact_dict(value, sensitive_keys)
            if isinstance(value, list):
                return [_redact_value(key, item) for item in value]
            if isinstance(value, str):
                return self.redact_text(value)
            return value

        return {k: _redact_value(str(k), v) for k, v in data.items()}

    def redact_log_record(self, record: logging.LogRecord) -> logging.LogRecord:
        """Redact message, args and dict-valued extras of a log record in place"""
        if isinstance(record.msg, str):
            record.msg = self.redact_text(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = self.redact_dict(record.args)
            else:
                record.args = tuple(
                    self.redact_text(arg) if isinstance(arg, str) else arg for arg in record.args
                )

        for key in ("request", "response", "params"):
            value = getattr(record, key, None)
            if isinstance(value, dict):
                setattr(record, key, self.redact_dict(value))

        return record


class SecretRedactorFilter(logging.Filter):
    """
    Logging filter that redacts secrets from every record it sees

    Usage:
        logger = logging.getLogger(__name__)
        logger.addFilter(SecretRedactorFilter())
    """

    def __init__(self, redactor: Optional[SecretRedactor] = None):
        super().__init__()
        self.redactor = redactor or get_default_redactor()

    def filter(self, record: logging.LogRecord) -> bool:
        self.redactor.redact_log_record(record)
        return True


_default_redactor = None


def get_default_redactor() -> SecretRedactor:
    """Get or create the default redactor instance"""
    global _default_redactor
    if _default_redactor is None:
        _default_redactor = SecretRedactor()
    return _default_redactor


def redact_secrets(text: str) -> str:
    """Convenience function to redact secrets from text"""
    return get_default_redactor().redact_text(text)


def setup_logging_redaction(logger: Optional[logging.Logger] = None):
    """
    Attach secret redaction to a logger

    Args:
        logger: Logger to configure (None for root logger)
    """
    target_logger = logger or logging.getLogger()

    for existing in target_logger.filters:
        if isinstance(existing, SecretRedactorFilter):
            return

    target_logger.addFilter(SecretRedactorFilter())
