from datetime import date

import pytest

from src.rsvp_form.state import FormFields
from src.rsvp_form.validation import qualifies_for_lookup, sanitize_phone, validate_form


def today() -> date:
    return date(2025, 9, 1)


def valid_fields(**overrides) -> FormFields:
    values = {
        "email": "ada@purdue.edu",
        "full_name": "Ada L.",
        "phone": "7655551234",
        "major": "Computer Science",
        "grad_year": "2026",
    }
    values.update(overrides)
    return FormFields(**values)


def test_valid_form_has_no_errors():
    assert validate_form(valid_fields(), today=today) == {}


@pytest.mark.parametrize(
    "overrides,field,message",
    [
        ({"full_name": "  "}, "full_name", "Please enter your name."),
        (
            {"email": "ada@gmail.com"},
            "email",
            "Oops, this is only for Purdue students. Become a Boilermaker to join.",
        ),
        ({"grad_year": "26"}, "grad_year", "Enter a four-digit graduation year (e.g., 2026)."),
        ({"grad_year": "2031"}, "grad_year", "Please choose a year no later than 2030."),
        ({"phone": "765555"}, "phone", "Enter a 10-digit U.S. phone number."),
    ],
)
def test_field_errors(overrides, field, message):
    errors = validate_form(valid_fields(**overrides), today=today)

    assert errors == {field: message}


def test_grad_year_limit_is_inclusive():
    assert validate_form(valid_fields(grad_year="2030"), today=today) == {}


def test_optional_fields_may_be_empty():
    assert validate_form(valid_fields(phone="", grad_year=""), today=today) == {}


def test_major_other_required_only_when_shown():
    fields = valid_fields(major="other", major_other=" ")

    assert validate_form(fields, major_other_visible=True, today=today) == {
        "major_other": "Please tell us your major."
    }
    assert validate_form(fields, major_other_visible=False, today=today) == {}


def test_hidden_groups_are_skipped():
    fields = valid_fields(phone="12", grad_year="abcd")

    assert validate_form(fields, hidden_groups=frozenset({"phone", "grad_year"}), today=today) == {}


def test_other_institution_domain():
    errors = validate_form(valid_fields(), institution_domain="example.edu", today=today)

    assert errors == {"email": "Oops, this is only for @example.edu addresses."}


def test_sanitize_phone():
    assert sanitize_phone("+1 (765) 555-1234") == "1765555123"
    assert sanitize_phone("") == ""
    assert sanitize_phone(None) == ""


def test_qualifies_for_lookup():
    assert qualifies_for_lookup(" Ada@Purdue.EDU ", "purdue.edu")
    assert not qualifies_for_lookup("ada@notpurdue.edu", "purdue.edu")
    assert not qualifies_for_lookup("", "purdue.edu")
