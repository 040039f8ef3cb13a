from __future__ import annotations

import pytest

from family_camp.services.validation import parse_age, validate_registrant_fields


def test_valid_fields_are_normalized():
    check = validate_registrant_fields("  Ana Cruz ", 15, "female", "Calamba")
    assert check.ok
    assert check.values == {
        "full_name": "Ana Cruz",
        "age": 15,
        "gender": "Female",
        "church_location": "Calamba",
    }


@pytest.mark.parametrize(
    "raw, expected",
    [(12, 12), (12.0, 12), ("13", 13), (" 14 ", 14), ("15.0", 15), (12.5, None), ("abc", None), (True, None)],
)
def test_parse_age(raw, expected):
    assert parse_age(raw) == expected


def test_underage_reports_minimum():
    check = validate_registrant_fields("Ben", "11", "Male", "Calamba")
    assert not check.ok
    assert check.errors == ["Age must be 12 or older, found: 11"]
    assert check.values is None


def test_all_checks_run_and_accumulate():
    check = validate_registrant_fields("", None, "other", "calamba")
    assert check.errors == [
        "Full Name is missing",
        "Age is missing",
        'Invalid gender: "other". Must be Male or Female.',
        'Invalid location: "calamba". Must match allowed values.',
    ]


def test_invalid_age_format_keeps_raw_text():
    check = validate_registrant_fields("Ben", "twelve", "Male", "Bay")
    assert check.errors == ['Invalid age format: "twelve"']


def test_missing_gender_and_location():
    check = validate_registrant_fields("Ben", 20, "   ", None)
    assert check.errors == ["Gender is missing", "Location is missing"]


def test_min_name_length_for_form():
    check = validate_registrant_fields("A", 20, "Male", "Bay", min_name_length=2)
    assert check.errors == ["Full name must be at least 2 characters."]
