import logging

import httpx

from src.rsvp_form.errors import LookupFailed, SubmitFailed
from src.rsvp_form.interpret import NOT_FOUND, LookupResult, normalize_lookup_response
from src.rsvp_form.state import FormFields
from src.rsvp_form.validation import MAJOR_OTHER, sanitize_phone

logger = logging.getLogger(__name__)

RSVP_ENDPOINT = "/api/rsvp"


def build_form_payload(fields: FormFields, major_other_visible: bool) -> dict[str, str]:
    payload = {
        "full_name": fields.full_name.strip(),
        "email": fields.email.strip(),
        "phone": sanitize_phone(fields.phone),
        "major": fields.major,
        "major_other": fields.major_other.strip() if major_other_visible or fields.major == MAJOR_OTHER else "",
        "grad_year": fields.grad_year.strip(),
        "notes": fields.notes.strip(),
        "honey": fields.honey,
    }
    if fields.consent:
        payload["consent"] = "1"
    return payload


class RsvpApiClient:
    """Talks to the RSVP endpoint over an ``httpx.AsyncClient`` owned by the caller."""

    def __init__(self, client: httpx.AsyncClient, endpoint: str = RSVP_ENDPOINT):
        self.client = client
        self.endpoint = endpoint

    async def lookup(self, email: str) -> LookupResult:
        try:
            response = await self.client.get(
                self.endpoint,
                params={"lookup": "1", "email": email},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise LookupFailed(f"Lookup request failed: {e}") from e

        if response.status_code == 404:
            return NOT_FOUND
        if not response.is_success:
            raise LookupFailed(f"Lookup failed with status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise LookupFailed("Unable to parse lookup response") from e
        return normalize_lookup_response(payload)

    async def submit(self, fields: FormFields, major_other_visible: bool = False) -> dict:
        """
        Post the form and return the decoded answer. Any answer carrying an
        ``ok`` field is returned, including 4xx/5xx ones, so the caller can
        show the server's message.
        """
        try:
            response = await self.client.post(
                self.endpoint,
                data=build_form_payload(fields, major_other_visible),
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise SubmitFailed(f"Submit request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SubmitFailed(f"Unable to parse submit response (status {response.status_code})") from e
        if not isinstance(payload, dict) or "ok" not in payload:
            raise SubmitFailed(f"Unexpected submit response (status {response.status_code})")
        return payload
