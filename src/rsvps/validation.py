"""Server-side validation of RSVP submissions.

The rules run in a fixed order and stop at the first failure so the visitor
always sees one message, for the first offending field.
"""

import ipaddress
import re
from collections.abc import Mapping, Sequence

from email_validator import EmailNotValidError, validate_email

from src.rsvps.dtos import RsvpSubmissionDTO, RsvpValidationError, SpamDetected

MAX_LENGTHS = {
    "full_name": 100,
    "email": 254,
    "phone": 40,
    "major": 120,
    "grad_year": 4,
    "notes": 4000,
}
USER_AGENT_MAX_LENGTH = 255
MAJOR_OTHER = "other"

NAME_AND_EMAIL_REQUIRED = "Name and valid email are required."

_GRAD_YEAR_RE = re.compile(r"[0-9]{4}")


def is_valid_email(email: str) -> bool:
    if not email:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def normalize_consent(raw: str | Sequence[str] | None) -> bool:
    """
    Consent is given unless the value is empty, "0" or absent.
    A multi-valued field counts as given when any value does.
    """
    if raw is None:
        return False
    if isinstance(raw, str):
        value = raw.strip()
        return value != "" and value != "0"
    return any(normalize_consent(value) for value in raw if isinstance(value, str))


def pack_ip(remote_addr: str | None) -> bytes | None:
    """Packed network form of the caller address, None when it can't be parsed."""
    if not remote_addr:
        return None
    try:
        return ipaddress.ip_address(remote_addr.strip()).packed
    except ValueError:
        return None


def truncate_user_agent(user_agent: str | None) -> str | None:
    if not user_agent:
        return None
    return user_agent[:USER_AGENT_MAX_LENGTH]


def _clean(fields: Mapping[str, str | None], name: str) -> str:
    value = fields.get(name)
    return value.strip() if isinstance(value, str) else ""


def _too_long(value: str, field: str) -> bool:
    return len(value) > MAX_LENGTHS[field]


def check_honeypot(fields: Mapping[str, str | None]) -> None:
    if _clean(fields, "honey"):
        raise SpamDetected()


def parse_submission(
    fields: Mapping[str, str | None],
    consent: str | Sequence[str] | None,
    remote_addr: str | None = None,
    user_agent: str | None = None,
) -> RsvpSubmissionDTO:
    """
    Validate the submitted form and build the submission to persist.

    Raises SpamDetected when the honeypot is filled and RsvpValidationError
    for the first field that fails.
    """
    check_honeypot(fields)

    full_name = _clean(fields, "full_name")
    email = _clean(fields, "email")
    phone = _clean(fields, "phone")
    major = _clean(fields, "major")
    major_other = _clean(fields, "major_other")
    grad_year = _clean(fields, "grad_year")
    notes = _clean(fields, "notes")

    if not full_name:
        raise RsvpValidationError("full_name", NAME_AND_EMAIL_REQUIRED)
    if _too_long(full_name, "full_name"):
        raise RsvpValidationError("full_name", "Name must be 100 characters or fewer.")

    if not email:
        raise RsvpValidationError("email", NAME_AND_EMAIL_REQUIRED)
    if _too_long(email, "email"):
        raise RsvpValidationError("email", "Email must be 254 characters or fewer.")
    if not is_valid_email(email):
        raise RsvpValidationError("email", NAME_AND_EMAIL_REQUIRED)

    if phone and _too_long(phone, "phone"):
        raise RsvpValidationError("phone", "Phone number is too long.")

    if major.lower() == MAJOR_OTHER and major_other:
        major = major_other
    if major and _too_long(major, "major"):
        raise RsvpValidationError("major", "Major is too long.")

    if grad_year and (_too_long(grad_year, "grad_year") or not _GRAD_YEAR_RE.fullmatch(grad_year)):
        raise RsvpValidationError("grad_year", "Graduation year must be four digits.")

    if notes and _too_long(notes, "notes"):
        raise RsvpValidationError("notes", "Notes are too long.")

    return RsvpSubmissionDTO(
        full_name=full_name,
        email=email,
        phone=phone or None,
        major=major or None,
        grad_year=grad_year or None,
        notes=notes or None,
        consent=normalize_consent(consent),
        ip=pack_ip(remote_addr),
        user_agent=truncate_user_agent(user_agent),
    )
