"""
Response normalization helpers shared by all provider adapters

Upstream payloads disagree on envelope shape, field names and value
formats. These helpers absorb that variance so adapters stay declarative:
they never raise on an unexpected shape, they fall back to empty values.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from dateutil import parser as date_parser

from ..contracts import ReservationStatus

COMMON_COLLECTION_KEYS = ("items", "value", "data", "results")

STATUS_SYNONYMS = {
    "confirmed": ReservationStatus.CONFIRMED,
    "booked": ReservationStatus.CONFIRMED,
    "new": ReservationStatus.CONFIRMED,
    "reserved": ReservationStatus.CONFIRMED,
    "optional": ReservationStatus.CONFIRMED,
    "cancelled": ReservationStatus.CANCELLED,
    "canceled": ReservationStatus.CANCELLED,
    "checkedin": ReservationStatus.CHECKED_IN,
    "inhouse": ReservationStatus.CHECKED_IN,
    "started": ReservationStatus.CHECKED_IN,
    "arrived": ReservationStatus.CHECKED_IN,
    "checkedout": ReservationStatus.CHECKED_OUT,
    "processed": ReservationStatus.CHECKED_OUT,
    "departed": ReservationStatus.CHECKED_OUT,
}


def dig(payload: Any, *path: Any, default: Any = None) -> Any:
    """Walk nested dicts/lists; return default at the first missing step"""
    current = payload
    for step in path:
        if isinstance(current, Mapping):
            current = current.get(step)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)) and isinstance(step, int):
            current = current[step] if -len(current) <= step < len(current) else None
        else:
            return default
        if current is None:
            return default
    return current


def first_present(payload: Any, *keys: str, default: Any = None) -> Any:
    """Return the first value among keys that is neither None nor ''"""
    if not isinstance(payload, Mapping):
        return default
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return value
    return default


def extract_collection(payload: Any, keys: Iterable[str] = ()) -> List[Any]:
    """
    Locate the record list inside a provider response

    Probes, in order: the payload itself if it is a list, the explicit keys,
    the common envelope keys, then the first list inside an ``_embedded``
    envelope. Returns [] when nothing matches. Elements that are not
    objects are dropped.
    """
    if isinstance(payload, list):
        return records(payload)
    if not isinstance(payload, Mapping):
        return []

    for key in tuple(keys) + COMMON_COLLECTION_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            return records(value)

    embedded = payload.get("_embedded")
    if isinstance(embedded, Mapping):
        for value in embedded.values():
            if isinstance(value, list):
                return records(value)

    return []


def records(value: Any) -> List[Mapping]:
    """Keep only the object elements of a list; [] for anything else"""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def compose_name(*parts: Optional[str], default: str = "Guest") -> str:
    """Join present name parts with single spaces"""
    name = " ".join(str(p).strip() for p in parts if p and str(p).strip())
    return name or default


def compose_address(*parts: Optional[str]) -> Optional[str]:
    """Comma-join present address parts; None when there are none"""
    present = [str(p).strip() for p in parts if p is not None and str(p).strip()]
    return ", ".join(present) if present else None


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Normalize a monetary value to Decimal with two places"""
    if value is None or value == "" or isinstance(value, bool):
        return default.quantize(Decimal("0.01"))
    if isinstance(value, Mapping):
        value = first_present(value, "amount", "value", "amountAfterTax", "amountBeforeTax")
        if value is None:
            return default.quantize(Decimal("0.01"))
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        return Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        return default.quantize(Decimal("0.01"))


def to_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def to_date(value: Any) -> Optional[date]:
    """Normalize ISO strings, datetimes and dates to a date; None if unparseable"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, OverflowError):
        try:
            return date_parser.parse(str(value)).date()
        except (ValueError, OverflowError):
            return None


def normalize_status(value: Any) -> str:
    """Map an upstream reservation status to its canonical value"""
    if value is None or value == "":
        return ReservationStatus.CONFIRMED.value
    key = str(value).strip().lower().replace("_", "").replace("-", "").replace(" ", "")
    if key in STATUS_SYNONYMS:
        return STATUS_SYNONYMS[key].value
    return str(value).strip().lower()


def status_filter(status: Optional[ReservationStatus], vocabulary: Optional[Mapping] = None) -> Optional[str]:
    """Translate a canonical status filter into a provider's vocabulary"""
    if status is None:
        return None
    status = ReservationStatus(status)
    return (vocabulary or {}).get(status, status.value)


def filter_by_status(reservations: List[Any], status: Optional[ReservationStatus]) -> List[Any]:
    """Keep reservations whose canonical status matches; all of them when status is None"""
    if status is None:
        return reservations
    wanted = ReservationStatus(status).value
    return [r for r in reservations if r.status == wanted]


def error_message(body: Any, keys: Sequence[Any]) -> Optional[str]:
    """
    Probe a parsed error body for a human-readable message

    Each entry of keys is either a key name or a tuple path for dig().
    Bodies that did not parse as JSON objects yield None.
    """
    if not isinstance(body, Mapping):
        return None
    for key in keys:
        value = dig(body, *key) if isinstance(key, tuple) else first_present(body, key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, Mapping):
            nested = first_present(value, "message", "description")
            if isinstance(nested, str) and nested.strip():
                return nested.strip()
    return None


def date_param(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def drop_none(params: Mapping[str, Any]) -> dict:
    """Drop None-valued entries from a query/body mapping"""
    return {k: v for k, v in params.items() if v is not None}
