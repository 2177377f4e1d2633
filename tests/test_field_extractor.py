"""Tests for brokerscan.normalization.field_extractor."""
from __future__ import annotations

import pytest

from brokerscan.normalization.field_extractor import (
    PEOPLE_SEARCH_FIELDS,
    SKIP_TRACE_FIELDS,
    CompositeFieldMapping,
    FieldMapping,
    IndexedFieldMapping,
    ListFieldMapping,
    extract_fields,
    is_usable,
    mapped_keys,
)


class TestIsUsable:
    @pytest.mark.parametrize("value", [None, "", "   ", "Person Not Found", [], {}])
    def test_unusable_values(self, value) -> None:
        assert is_usable(value) is False

    @pytest.mark.parametrize("value", ["Jane", 0, 34, ["x"], {"a": 1}, False])
    def test_usable_values(self, value) -> None:
        assert is_usable(value) is True


class TestFieldMapping:
    def test_first_matching_candidate_wins(self) -> None:
        mapping = FieldMapping("phone", ("phone", "phone_number"), "Phone")
        assert mapping.extract({"phone": "1", "phone_number": "2"}) == "1"

    def test_later_candidate_used_when_earlier_is_empty(self) -> None:
        mapping = FieldMapping("phone", ("phone", "phone_number"), "Phone")
        assert mapping.extract({"phone": "", "phone_number": "2"}) == "2"

    def test_sentinel_is_skipped(self) -> None:
        mapping = FieldMapping("name", ("name",), "Name")
        assert mapping.extract({"name": "Person Not Found"}) is None


class TestListFieldMapping:
    def test_scalar_is_wrapped(self) -> None:
        mapping = ListFieldMapping("emails", ("emails", "email"), "Email")
        assert mapping.extract({"email": "a@example.com"}) == ["a@example.com"]

    def test_empty_entries_are_dropped(self) -> None:
        mapping = ListFieldMapping("emails", ("emails",), "Email")
        assert mapping.extract({"emails": ["", "a@example.com", None]}) == ["a@example.com"]

    def test_list_of_only_empty_entries_is_absent(self) -> None:
        mapping = ListFieldMapping("emails", ("emails",), "Email")
        assert mapping.extract({"emails": [""]}) is None


class TestCompositeFieldMapping:
    def test_joins_present_parts(self) -> None:
        mapping = CompositeFieldMapping("name", ("First Name", "Last Name"), "Name")
        assert mapping.extract({"First Name": "Jane", "Last Name": "Doe"}) == "Jane Doe"
        assert mapping.extract({"First Name": "Jane"}) == "Jane"
        assert mapping.extract({}) is None


class TestIndexedFieldMapping:
    def test_collects_in_index_order_skipping_gaps(self) -> None:
        mapping = IndexedFieldMapping("emails", "Email-{index}", "Email")
        item = {"Email-3": "c@example.com", "Email-1": "a@example.com", "Email-2": ""}
        assert mapping.extract(item) == ["a@example.com", "c@example.com"]

    def test_subkeys_are_attached_to_each_entry(self) -> None:
        mapping = IndexedFieldMapping(
            "phones", "Phone-{index}", "Phone", subkeys=(("type", " Type"), ("provider", " Provider"))
        )
        item = {"Phone-1": "(212) 555-0101", "Phone-1 Type": "Wireless", "Phone-1 Provider": ""}
        assert mapping.extract(item) == [
            {"number": "(212) 555-0101", "type": "Wireless", "provider": None}
        ]

    def test_raw_keys_cover_every_index_and_subkey(self) -> None:
        mapping = IndexedFieldMapping("phones", "Phone-{index}", "Phone", count=2, subkeys=(("type", " Type"),))
        assert mapping.raw_keys() == ("Phone-1", "Phone-1 Type", "Phone-2", "Phone-2 Type")


class TestExtractFields:
    def test_skip_trace_item(self) -> None:
        item = {
            "First Name": "Jane",
            "Last Name": "Doe",
            "Age": 34,
            "Street Address": "12 Main St",
            "Address Locality": "Springfield",
            "Address Region": "IL",
            "Postal Code": "62701",
            "Email-1": "jane@example.com",
            "Phone-1": "(217) 555-0100",
            "Phone-1 Type": "Landline",
        }
        extracted = extract_fields(item, SKIP_TRACE_FIELDS)

        assert extracted.fields["name"] == "Jane Doe"
        assert extracted.fields["age"] == 34
        assert extracted.fields["address"] == {
            "streetAddress": "12 Main St",
            "addressLocality": "Springfield",
            "addressRegion": "IL",
            "postalCode": "62701",
        }
        assert extracted.fields["emails"] == ["jane@example.com"]
        assert extracted.fields["phones"][0]["number"] == "(217) 555-0100"
        assert extracted.fields["phones"][0]["type"] == "Landline"
        assert extracted.categories == ("Name", "Age", "Address", "Email", "Phone")

    def test_categories_have_no_duplicates(self) -> None:
        item = {"Street Address": "1 A St", "Lives in": "Austin, TX"}
        extracted = extract_fields(item, SKIP_TRACE_FIELDS)
        assert extracted.categories == ("Address",)

    def test_first_mapping_for_a_field_wins(self) -> None:
        item = {"name": "J. Doe", "first_name": "Jane", "last_name": "Doe"}
        extracted = extract_fields(item, PEOPLE_SEARCH_FIELDS)
        assert extracted.fields["name"] == "J. Doe"

    def test_composite_used_when_earlier_mapping_absent(self) -> None:
        extracted = extract_fields({"first_name": "Jane", "last_name": "Doe"}, PEOPLE_SEARCH_FIELDS)
        assert extracted.fields["name"] == "Jane Doe"

    def test_item_without_canonical_fields(self) -> None:
        extracted = extract_fields({"Search Option": "name", "junk": 1}, SKIP_TRACE_FIELDS)
        assert extracted.fields == {}
        assert extracted.categories == ()

    def test_pure_function(self) -> None:
        item = {"First Name": "Jane", "Age": 34}
        assert extract_fields(item, SKIP_TRACE_FIELDS) == extract_fields(item, SKIP_TRACE_FIELDS)
        assert item == {"First Name": "Jane", "Age": 34}


def test_mapped_keys_include_indexed_columns() -> None:
    keys = mapped_keys(SKIP_TRACE_FIELDS)
    assert {"First Name", "Email-5", "Phone-2 Provider", "Person Link"} <= keys
    assert "Search Option" not in keys


class TestSkipTraceAddressAnchors:
    def test_region_and_postal_code_alone_are_not_an_address(self) -> None:
        extracted = extract_fields({"Postal Code": "62701", "Address Region": "IL"}, SKIP_TRACE_FIELDS)
        assert extracted.fields == {}
        assert extracted.categories == ()

    def test_region_and_postal_code_kept_with_a_locality(self) -> None:
        item = {"Address Locality": "Springfield", "Address Region": "IL", "Postal Code": "62701"}
        extracted = extract_fields(item, SKIP_TRACE_FIELDS)
        assert extracted.fields["state"] == "IL"
        assert extracted.fields["zip_code"] == "62701"
        assert extracted.fields["address"] == {
            "addressLocality": "Springfield",
            "addressRegion": "IL",
            "postalCode": "62701",
        }
        assert extracted.categories == ("Address",)

    def test_lives_in_anchors_the_address(self) -> None:
        extracted = extract_fields({"Lives in": "Austin, TX", "Postal Code": "73301"}, SKIP_TRACE_FIELDS)
        assert extracted.fields["zip_code"] == "73301"
        assert extracted.fields["lives_in"] == "Austin, TX"
        assert extracted.categories == ("Address",)

    def test_anchored_mapping(self) -> None:
        mapping = FieldMapping("state", ("region",), "Address", anchors=("street",))
        assert mapping.extract({"region": "IL"}) is None
        assert mapping.extract({"region": "IL", "street": "1 Main St"}) == "IL"
