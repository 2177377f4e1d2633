"""Tests for brokerscan.normalization.address_formatter."""
from __future__ import annotations

import pytest

from brokerscan.normalization.address_formatter import (
    format_address,
    format_addresses,
    parse_address,
)


class TestFormatAddress:
    def test_string_passes_through_unchanged(self) -> None:
        assert format_address("12 Main St, Springfield, IL") == "12 Main St, Springfield, IL"

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent_address_is_empty(self, value) -> None:
        assert format_address(value) == ""

    def test_structured_address_joined_in_fixed_order(self) -> None:
        address = {
            "postalCode": "62701",
            "addressRegion": "IL",
            "streetAddress": "12 Main St",
            "addressLocality": "Springfield",
        }
        assert format_address(address) == "12 Main St, Springfield, IL, 62701"

    def test_missing_parts_are_skipped(self) -> None:
        assert format_address({"addressLocality": "Springfield", "postalCode": "62701"}) == "Springfield, 62701"

    def test_object_missing_every_part_is_empty(self) -> None:
        assert format_address({}) == ""
        assert format_address({"unrelated": "x"}) == ""

    def test_snake_case_aliases(self) -> None:
        assert format_address({"street": "1 Elm Ct", "city": "Albany", "state": "NY", "zip": "12207"}) == (
            "1 Elm Ct, Albany, NY, 12207"
        )

    def test_other_shapes_are_coerced_to_string(self) -> None:
        assert format_address(12345) == "12345"
        assert format_address(["a", "b"]) == "['a', 'b']"


class TestFormatAddresses:
    def test_list_is_formatted_element_wise(self) -> None:
        values = ["1 Oak Ave", {"streetAddress": "2 Pine St", "addressRegion": "OR"}]
        assert format_addresses(values) == ["1 Oak Ave", "2 Pine St, OR"]

    def test_single_value_is_wrapped(self) -> None:
        assert format_addresses({"addressLocality": "Austin"}) == ["Austin"]

    def test_none_is_empty_list(self) -> None:
        assert format_addresses(None) == []


class TestParseAddress:
    def test_full_us_address(self) -> None:
        assert parse_address("12 Main St, Springfield, IL 62701") == {
            "street": "12 Main St",
            "city": "Springfield",
            "state": "IL",
            "zip": "62701",
        }

    def test_zip_plus_four(self) -> None:
        assert parse_address("1 A St, Town, TX 73301-1234")["zip"] == "73301-1234"

    def test_unparseable_falls_back_to_full_address(self) -> None:
        assert parse_address("Springfield") == {"full_address": "Springfield"}

    def test_empty_input(self) -> None:
        assert parse_address("") == {}
        assert parse_address(None) == {}
