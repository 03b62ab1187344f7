"""
Tests for the categories field normalizer.
"""

import pytest

from library_api.services.normalizer import normalize_categories


class TestNormalizeCategories:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('["a","b"]', ["a", "b"]),
            ("a,b, c", ["a", "b", "c"]),
            ("", []),
            ("a", ["a"]),
            ("  a  ", ["a"]),
            ("a,,b,", ["a", "b"]),
            ('[" a ", "", "b"]', ["a", "b"]),
            ('[a, b', ["[a", "b"]),
            ("{x}", ["{x}"]),
            ("[not json", ["[not json"]),
        ],
    )
    def test_string_shapes(self, raw, expected):
        assert normalize_categories(raw) == expected

    def test_none_is_empty(self):
        assert normalize_categories(None) == []

    def test_list_input(self):
        assert normalize_categories([" a", "b ", ""]) == ["a", "b"]

    def test_tuple_input(self):
        assert normalize_categories(("a", "b")) == ["a", "b"]

    def test_non_string_items_dropped(self):
        assert normalize_categories('["a", 1, null, "b"]') == ["a", "b"]

    def test_json_object_is_empty(self):
        assert normalize_categories('{"a": 1}') == []

    def test_unsupported_type_is_empty(self):
        assert normalize_categories(42) == []

    def test_order_preserved(self):
        assert normalize_categories("c,a,b") == ["c", "a", "b"]
