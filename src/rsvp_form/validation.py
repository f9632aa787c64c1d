"""Checks run in the browser-side form before anything is sent.

The server validates again on its own; these only save a round trip.
"""

import re
from datetime import date
from typing import Callable

MAJOR_OTHER = "other"
PHONE_DIGITS = 10
GRAD_YEAR_HORIZON = 5

NAME_REQUIRED = "Please enter your name."
PHONE_INVALID = "Enter a 10-digit U.S. phone number."
GRAD_YEAR_FORMAT = "Enter a four-digit graduation year (e.g., 2026)."
MAJOR_OTHER_REQUIRED = "Please tell us your major."

_NON_DIGITS_RE = re.compile(r"\D")
_GRAD_YEAR_RE = re.compile(r"[0-9]{4}")


def domain_message(institution_domain: str) -> str:
    if institution_domain == "purdue.edu":
        return "Oops, this is only for Purdue students. Become a Boilermaker to join."
    return f"Oops, this is only for @{institution_domain} addresses."


def sanitize_phone(value: str) -> str:
    return _NON_DIGITS_RE.sub("", value or "")[:PHONE_DIGITS]


def qualifies_for_lookup(email: str, institution_domain: str) -> bool:
    email = (email or "").strip().lower()
    return bool(email) and email.endswith("@" + institution_domain.lower())


def validate_form(
    fields,
    hidden_groups: frozenset[str] = frozenset(),
    major_other_visible: bool = False,
    institution_domain: str = "purdue.edu",
    today: Callable[[], date] = date.today,
) -> dict[str, str]:
    """
    Return ``{field: message}`` for every field that fails.
    Hidden groups are not checked.
    """
    errors: dict[str, str] = {}

    if "full_name" not in hidden_groups and not fields.full_name.strip():
        errors["full_name"] = NAME_REQUIRED

    if not qualifies_for_lookup(fields.email, institution_domain):
        errors["email"] = domain_message(institution_domain)

    grad_year = fields.grad_year.strip()
    if "grad_year" not in hidden_groups and grad_year:
        max_year = today().year + GRAD_YEAR_HORIZON
        if not _GRAD_YEAR_RE.fullmatch(grad_year):
            errors["grad_year"] = GRAD_YEAR_FORMAT
        elif int(grad_year) > max_year:
            errors["grad_year"] = f"Please choose a year no later than {max_year}."

    phone = sanitize_phone(fields.phone)
    if "phone" not in hidden_groups and phone and len(phone) != PHONE_DIGITS:
        errors["phone"] = PHONE_INVALID

    if major_other_visible and not fields.major_other.strip():
        errors["major_other"] = MAJOR_OTHER_REQUIRED

    return errors
