"""
Tests for country-specific address validation and formatting
"""

import pytest

from wedding_rsvp.services.address_service import (
    display_field_name,
    format_address,
    rule_for,
    validate_address,
    FREEFORM_RULE,
)

def test_format_united_states():
    """US labels put city, region and ZIP on one line"""
    formatted = format_address("United States", {
        "address_line1": "123 Main St",
        "city": "NYC",
        "region": "NY",
        "postal_code": "10001",
    })
    assert formatted == "123 Main St\nNYC, NY 10001\nUnited States"

def test_format_united_states_with_second_line():
    formatted = format_address("United States", {
        "address_line1": "123 Main St",
        "address_line2": "Apt 4B",
        "city": "NYC",
        "region": "NY",
        "postal_code": "10001",
    })
    assert formatted == "123 Main St\nApt 4B\nNYC, NY 10001\nUnited States"

def test_format_united_states_without_region():
    formatted = format_address("United States", {
        "address_line1": "1 Elm St",
        "city": "Springfield",
        "postal_code": "12345",
    })
    assert formatted == "1 Elm St\nSpringfield, 12345\nUnited States"

def test_format_netherlands():
    formatted = format_address("Netherlands", {
        "address_line1": "Keizersgracht 123",
        "postal_code": "1015 CJ",
        "city": "Amsterdam",
    })
    assert formatted == "Keizersgracht 123\n1015 CJ Amsterdam\nNetherlands"

def test_format_netherlands_ignores_second_line():
    formatted = format_address("Netherlands", {
        "address_line1": "Keizersgracht 123",
        "address_line2": "unused",
        "postal_code": "1015 CJ",
        "city": "Amsterdam",
    })
    assert "unused" not in formatted

def test_format_france():
    formatted = format_address("France", {
        "address_line1": "12 Rue de Rivoli",
        "address_line2": "Bâtiment B",
        "postal_code": "75004",
        "city": "Paris",
    })
    assert formatted == "12 Rue de Rivoli\nBâtiment B\n75004 Paris\nFrance"

def test_format_other_country_appends_country_name():
    formatted = format_address("Japan", {"address_freeform": "1-2-3 Shibuya\nTokyo 150-0002"})
    assert formatted == "1-2-3 Shibuya\nTokyo 150-0002\nJapan"

def test_format_other_omits_placeholder_country():
    formatted = format_address("Other", {"address_freeform": "Somewhere 1"})
    assert formatted == "Somewhere 1"

def test_format_drops_blank_lines():
    formatted = format_address("France", {
        "address_line1": "12 Rue de Rivoli",
        "address_line2": "   ",
        "postal_code": "75004",
        "city": "Paris",
    })
    assert formatted == "12 Rue de Rivoli\n75004 Paris\nFrance"

def test_format_is_deterministic():
    fields = {"address_line1": "A", "postal_code": "1", "city": "B"}
    assert format_address("Netherlands", fields) == format_address("Netherlands", dict(fields))

def test_unknown_country_uses_freeform_rule():
    assert rule_for("Belgium") is FREEFORM_RULE
    assert rule_for("Other") is FREEFORM_RULE

def test_validate_us_names_missing_fields():
    """Entering only a city flags the street, region and postal code"""
    message = validate_address("United States", {"city": "NYC"})
    assert message is not None
    assert "street address" in message
    assert "region" in message
    assert "postal code" in message
    assert "city" not in message

def test_validate_no_fields_entered():
    assert validate_address("France", {}) is None

def test_validate_blank_fields_count_as_not_entered():
    assert validate_address("France", {"city": "   ", "address_line1": ""}) is None

def test_validate_without_country():
    assert validate_address(None, {"city": "Paris"}) is None
    assert validate_address("", {"city": "Paris"}) is None

def test_validate_complete_netherlands_address():
    assert validate_address("Netherlands", {
        "address_line1": "Keizersgracht 123",
        "postal_code": "1015 CJ",
        "city": "Amsterdam",
    }) is None

def test_validate_other_country_requires_freeform():
    message = validate_address("Germany", {"city": "Berlin"})
    assert message == "Please fill in: address"

def test_validate_whitespace_required_field_is_missing():
    message = validate_address("France", {
        "address_line1": "12 Rue de Rivoli",
        "postal_code": " ",
        "city": "Paris",
    })
    assert message == "Please fill in: postal code"

@pytest.mark.parametrize("field,expected", [
    ("address_line1", "street address"),
    ("address_freeform", "address"),
    ("postal_code", "postal code"),
    ("city", "city"),
    ("region", "region"),
])
def test_display_field_name(field, expected):
    assert display_field_name(field) == expected
