"""
Tests for response normalization helpers
"""

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from pms_gateway.contracts import ReservationStatus
from pms_gateway.utils.normalize import (
    compose_address,
    compose_name,
    dig,
    drop_none,
    error_message,
    extract_collection,
    filter_by_status,
    first_present,
    normalize_status,
    records,
    status_filter,
    to_date,
    to_decimal,
    to_int,
)


class TestExtractCollection:
    @pytest.mark.parametrize(
        "payload",
        [
            [{"id": 1}],
            {"reservations": [{"id": 1}]},
            {"items": [{"id": 1}]},
            {"value": [{"id": 1}]},
            {"data": [{"id": 1}]},
            {"results": [{"id": 1}]},
            {"_embedded": {"reservations": [{"id": 1}]}},
        ],
    )
    def test_finds_records_in_known_envelopes(self, payload):
        assert extract_collection(payload, ["reservations"]) == [{"id": 1}]

    def test_explicit_keys_win_over_common_keys(self):
        payload = {"data": [{"id": "generic"}], "bookings": [{"id": "specific"}]}
        assert extract_collection(payload, ["bookings"]) == [{"id": "specific"}]

    @pytest.mark.parametrize(
        "payload",
        [None, "", "text", 42, {}, {"data": {"nested": True}}, {"reservations": None}, {"_embedded": []}],
    )
    def test_unexpected_shapes_yield_empty_list(self, payload):
        assert extract_collection(payload, ["reservations"]) == []

    @pytest.mark.parametrize(
        "payload",
        [
            [None, "x", {"id": 1}, 7],
            {"items": [None, {"id": 1}, ["nested"]]},
            {"_embedded": {"rooms": ["x", {"id": 1}]}},
        ],
    )
    def test_non_object_elements_are_dropped(self, payload):
        assert extract_collection(payload) == [{"id": 1}]

    def test_records(self):
        assert records([{"id": 1}, None, "x"]) == [{"id": 1}]
        assert records({"id": 1}) == []
        assert records(None) == []


class TestComposition:
    def test_compose_name(self):
        assert compose_name("Mr", "John", "Doe") == "Mr John Doe"
        assert compose_name(None, " Jane ", "") == "Jane"
        assert compose_name(None, None) == "Guest"
        assert compose_name(default="") == ""

    def test_compose_address(self):
        assert compose_address("Main St 1", None, "Berlin", "", "DE") == "Main St 1, Berlin, DE"
        assert compose_address(None, "", "  ") is None


class TestScalars:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (100, Decimal("100.00")),
            (99.999, Decimal("100.00")),
            ("1,234.5", Decimal("1234.50")),
            ({"amount": 12.3, "currency": "EUR"}, Decimal("12.30")),
            ({"value": "7"}, Decimal("7.00")),
            (None, Decimal("0.00")),
            ("n/a", Decimal("0.00")),
            (True, Decimal("0.00")),
        ],
    )
    def test_to_decimal(self, value, expected):
        assert to_decimal(value) == expected

    def test_to_int(self):
        assert to_int("5") == 5
        assert to_int(3.9) == 3
        assert to_int(None, 2) == 2
        assert to_int("many", 1) == 1

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-03-01", date(2024, 3, 1)),
            ("2024-03-01T15:00:00+01:00", date(2024, 3, 1)),
            ("2024-03-01T00:00:00Z", date(2024, 3, 1)),
            ("March 1, 2024", date(2024, 3, 1)),
            (datetime(2024, 3, 1, 12, 30), date(2024, 3, 1)),
            (date(2024, 3, 1), date(2024, 3, 1)),
            ("", None),
            (None, None),
            ("not a date", None),
        ],
    )
    def test_to_date(self, value, expected):
        assert to_date(value) == expected


class TestLookups:
    def test_dig(self):
        payload = {"hotels": {"hotel": [{"name": "A"}]}}
        assert dig(payload, "hotels", "hotel", 0, "name") == "A"
        assert dig(payload, "hotels", "hotel", 5, "name") is None
        assert dig(payload, "hotels", "missing", default="x") == "x"
        assert dig("text", "a", default=[]) == []

    def test_first_present_skips_empty_values(self):
        assert first_present({"a": None, "b": "", "c": 0}, "a", "b", "c") == 0
        assert first_present({"a": None}, "a", default="d") == "d"
        assert first_present(["not", "a", "dict"], "a") is None

    def test_drop_none(self):
        assert drop_none({"a": 1, "b": None, "c": ""}) == {"a": 1, "c": ""}


class TestStatus:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Confirmed", "confirmed"),
            ("CANCELED", "cancelled"),
            ("Cancelled", "cancelled"),
            ("InHouse", "checked_in"),
            ("checked-in", "checked_in"),
            ("Started", "checked_in"),
            ("CheckedOut", "checked_out"),
            ("Processed", "checked_out"),
            (None, "confirmed"),
            ("Waitlisted", "waitlisted"),
            ("NoShow", "noshow"),
            ("no_show", "no_show"),
        ],
    )
    def test_normalize_status(self, value, expected):
        assert normalize_status(value) == expected

    def test_status_filter_translates_vocabulary(self):
        vocabulary = {ReservationStatus.CHECKED_IN: "InHouse"}
        assert status_filter(ReservationStatus.CHECKED_IN, vocabulary) == "InHouse"
        assert status_filter(ReservationStatus.CANCELLED, vocabulary) == "cancelled"
        assert status_filter("confirmed") == "confirmed"
        assert status_filter(None, vocabulary) is None

    def test_filter_by_status(self):
        bookings = [SimpleNamespace(id=1, status="cancelled"), SimpleNamespace(id=2, status="checked_in")]
        assert [b.id for b in filter_by_status(bookings, ReservationStatus.CHECKED_IN)] == [2]
        assert filter_by_status(bookings, None) == bookings


class TestErrorMessage:
    def test_probes_keys_in_order(self):
        body = {"error": "generic", "detail": "specific"}
        assert error_message(body, ("detail", "error")) == "specific"

    def test_tuple_paths(self):
        body = {"errors": [{"message": "first problem"}]}
        assert error_message(body, (("errors", 0, "message"),)) == "first problem"

    def test_nested_error_object(self):
        assert error_message({"error": {"message": "nested"}}, ("error",)) == "nested"

    def test_unparsed_body_has_no_message(self):
        assert error_message("<html><body><h1>502 Bad Gateway</h1></body></html>", ("message",)) is None
        assert error_message([{"message": "list"}], ("message",)) is None

    def test_nothing_found(self):
        assert error_message({"code": 17}, ("message",)) is None
        assert error_message(None, ("message",)) is None
