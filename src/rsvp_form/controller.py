import asyncio
import logging
from datetime import date
from typing import Any, Callable

from src.rsvp_form.api import RsvpApiClient
from src.rsvp_form.errors import LookupFailed, SubmitFailed
from src.rsvp_form.interpret import LookupResult
from src.rsvp_form.state import (
    SPAM_MESSAGE,
    FormFields,
    FormState,
    StatusKind,
    apply_lookup_result,
    edit_field,
    email_edited,
    initial_state,
    start_submit,
    submit_errored,
    submit_rejected,
    submit_succeeded,
    to_lookup_error,
    with_field_errors,
    with_status,
)
from src.rsvp_form.validation import MAJOR_OTHER, qualifies_for_lookup, validate_form

logger = logging.getLogger(__name__)


def cache_key(email: str) -> str:
    return (email or "").strip().lower()


class LookupHandle:
    """One in-flight lookup. Cancelling it also cancels the request."""

    def __init__(self, email: str):
        self.email = email
        self.key = cache_key(email)
        self.cancelled = False
        self.task: asyncio.Task | None = None

    def cancel(self) -> None:
        self.cancelled = True
        if self.task is not None and not self.task.done():
            self.task.cancel()

    @property
    def done(self) -> bool:
        return self.task is not None and self.task.done()

    async def wait(self) -> None:
        if self.task is not None:
            await asyncio.wait({self.task})


class FormController:
    """
    Keeps the RSVP form in step with what the server knows about the email
    being typed.

    At most one lookup is active. Editing the email or starting another
    lookup cancels it, and a lookup result is only applied while its handle
    is still the active one and the email field still holds its address.
    Outcomes are cached per lowercased email; failed lookups are not.
    """

    def __init__(
        self,
        api: RsvpApiClient,
        institution_domain: str = "purdue.edu",
        major_options: tuple[str, ...] = (),
        today: Callable[[], date] = date.today,
    ):
        self.api = api
        self.institution_domain = institution_domain
        self.today = today
        self.state: FormState = initial_state(major_options)
        self.cache: dict[str, LookupResult] = {}
        self._active: LookupHandle | None = None

    @property
    def active_lookup(self) -> LookupHandle | None:
        return self._active

    def edit(self, name: str, value: Any) -> None:
        if name == "email":
            self.on_email_input(value)
            return
        self.state = edit_field(self.state, name, value)

    def on_email_input(self, value: str) -> None:
        self.cancel_pending_lookup()
        self.state = email_edited(self.state, value)

    def cancel_pending_lookup(self) -> None:
        if self._active is not None:
            self._active.cancel()
            self._active = None

    def commit_email(self) -> LookupHandle | None:
        """
        Classify the current email. Uses the cache when it can, otherwise
        schedules a lookup on the running loop and returns its handle.
        """
        email = self.state.fields.email.strip()
        key = cache_key(email)

        if not qualifies_for_lookup(email, self.institution_domain):
            self.cancel_pending_lookup()
            self.state = apply_lookup_result(self.state, None)
            return None

        if key in self.cache:
            self.cancel_pending_lookup()
            self.state = apply_lookup_result(self.state, self.cache[key])
            return None

        active = self._active
        if active is not None and active.key == key and not active.cancelled and not active.done:
            return active

        self.cancel_pending_lookup()
        handle = LookupHandle(email)
        handle.task = asyncio.get_running_loop().create_task(self._run_lookup(handle))
        self._active = handle
        return handle

    async def on_email_blur(self) -> None:
        handle = self.commit_email()
        if handle is not None:
            await handle.wait()

    def _is_current(self, handle: LookupHandle) -> bool:
        return (
            self._active is handle
            and not handle.cancelled
            and cache_key(self.state.fields.email) == handle.key
        )

    async def _run_lookup(self, handle: LookupHandle) -> None:
        try:
            try:
                result = await self.api.lookup(handle.email)
            except LookupFailed as e:
                if not self._is_current(handle):
                    return
                logger.warning(f"RSVP lookup failed: {e}")
                self.cache.pop(handle.key, None)
                self.state = to_lookup_error(self.state)
                return

            if not self._is_current(handle):
                return
            self.cache[handle.key] = result
            self.state = apply_lookup_result(self.state, result)
        finally:
            if self._active is handle:
                self._active = None

    async def submit(self) -> bool:
        """Validate and send the form. Returns True when the RSVP was recorded."""
        state = self.state
        if state.submitting or not state.submit_visible or not state.submit_enabled:
            return False

        errors = validate_form(
            state.fields,
            hidden_groups=state.hidden_groups,
            major_other_visible=state.major_other_visible,
            institution_domain=self.institution_domain,
            today=self.today,
        )
        if errors:
            self.state = with_field_errors(state, errors)
            return False

        if state.fields.honey.strip():
            self.state = with_status(state, StatusKind.ERROR, SPAM_MESSAGE)
            return False

        # A lookup landing now would reclassify the form under the request
        self.cancel_pending_lookup()
        self.state = start_submit(with_field_errors(state, {}))
        fields = self.state.fields
        try:
            payload = await self.api.submit(fields, major_other_visible=self.state.major_other_visible)
        except SubmitFailed as e:
            logger.warning(f"RSVP submit failed: {e}")
            self.state = submit_errored(self.state)
            return False

        if payload.get("ok") is not True:
            message = payload.get("error") or payload.get("message")
            self.state = submit_rejected(self.state, message if isinstance(message, str) else None)
            return False

        self.state = submit_succeeded(self.state)
        self._remember_submission(fields)
        return True

    def _remember_submission(self, fields: FormFields) -> None:
        email = fields.email.strip()
        name = fields.full_name.strip()
        if not name or not qualifies_for_lookup(email, self.institution_domain):
            return

        major = fields.major
        if major == MAJOR_OTHER and fields.major_other.strip():
            major = fields.major_other.strip()

        # No event identifiers here, so a later visit classifies as returning
        data = {
            "email": email,
            "full_name": name,
            "phone": fields.phone,
            "major": major,
            "grad_year": fields.grad_year.strip(),
            "notes": fields.notes.strip(),
            "consent": fields.consent,
        }
        self.cache[cache_key(email)] = LookupResult(found=True, data=data, name=name)
