"""Tests for naming convention interpretation."""

import pytest

from hallucination_guard.policy import naming


class TestConforms:
    @pytest.mark.parametrize(
        "name,convention,ok",
        [
            ("ProductCard", "PascalCase", True),
            ("productCard", "PascalCase", False),
            ("formatPrice", "camelCase", True),
            ("FormatPrice", "camelCase", False),
            ("useCart", "camelCase with use prefix", True),
            ("cartHook", "camelCase with use prefix", False),
            ("user", "camelCase with use prefix", False),
            ("product-card", "kebab-case", True),
            ("product_card", "kebab-case", False),
            ("product_card", "snake_case", True),
            ("MAX_ITEMS", "SCREAMING_SNAKE_CASE", True),
            ("maxItems", "SCREAMING_SNAKE_CASE", False),
        ],
    )
    def test_conventions(self, name, convention, ok):
        assert naming.conforms(name, convention) is ok

    def test_unknown_convention_not_enforced(self):
        assert naming.conforms("whatever_Name", "team style guide")


class TestConvert:
    @pytest.mark.parametrize(
        "name,convention,expected",
        [
            ("product-card", "PascalCase", "ProductCard"),
            ("ProductCard", "camelCase", "productCard"),
            ("cart", "camelCase with use prefix", "useCart"),
            ("useCart", "camelCase with use prefix", "useCart"),
            ("ProductCard", "kebab-case", "product-card"),
            ("maxItems", "SCREAMING_SNAKE_CASE", "MAX_ITEMS"),
            ("XMLParser", "snake_case", "xml_parser"),
        ],
    )
    def test_convert(self, name, convention, expected):
        assert naming.convert(name, convention) == expected

    def test_unknown_convention_returns_name(self):
        assert naming.convert("Thing", "team style guide") == "Thing"

    def test_split_words(self):
        assert naming.split_words("fetchHTTPResponse2") == ["fetch", "http", "response2"]
