"""Form state and the pure transitions between visitor classifications.

Every function here takes a ``FormState`` and returns a new one; nothing
mutates in place. ``FormController`` owns the current state and is the only
caller.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from src.rsvp_form.interpret import LookupResult, extract_full_name
from src.rsvp_form.validation import MAJOR_OTHER, sanitize_phone


class VisitorState(str, Enum):
    NEW = "new"
    RETURNING = "returning"
    ALREADY_REGISTERED = "already-registered"
    LOOKUP_ERROR = "lookup-error"


class StatusKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


FIELD_GROUPS = ("email", "full_name", "phone", "major", "grad_year", "notes", "consent")
# Already on file for a returning visitor
RETURNING_HIDDEN_GROUPS = frozenset({"phone", "major", "grad_year", "notes", "consent"})

SUBMIT_LABEL = "Submit"
SUBMITTING_LABEL = "Submitting..."
RETURNING_SUBMIT_LABEL = "Confirm RSVP"
RETURNING_SUBMITTING_LABEL = "Confirming..."

LOOKUP_ERROR_MESSAGE = "Couldn't verify, please try again."
SUCCESS_MESSAGE = "You're all set! Check your email shortly."
NETWORK_ERROR_MESSAGE = "We hit a network hiccup. Please try again in a moment."
SAVE_FAILED_MESSAGE = "We could not save your RSVP. Please try again."
SPAM_MESSAGE = "We couldn’t process your submission. Please try again."


@dataclass(frozen=True)
class FormFields:
    email: str = ""
    full_name: str = ""
    phone: str = ""
    major: str = ""
    major_other: str = ""
    grad_year: str = ""
    notes: str = ""
    consent: bool = False
    honey: str = ""


@dataclass(frozen=True)
class StatusMessage:
    kind: StatusKind
    text: str


@dataclass(frozen=True)
class FormState:
    fields: FormFields = field(default_factory=FormFields)
    visitor: VisitorState = VisitorState.NEW
    major_options: tuple[str, ...] = ()
    hidden_groups: frozenset[str] = frozenset()
    name_locked: bool = False
    consent_enabled: bool = True
    submit_visible: bool = True
    submit_enabled: bool = True
    submitting: bool = False
    submit_label: str = SUBMIT_LABEL
    already_registered_name: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    status: StatusMessage | None = None

    @property
    def major_other_visible(self) -> bool:
        return (
            self.fields.major == MAJOR_OTHER
            and self.visitor == VisitorState.NEW
            and "major" not in self.hidden_groups
        )

    def is_visible(self, group: str) -> bool:
        return group not in self.hidden_groups


def initial_state(major_options: tuple[str, ...] = ()) -> FormState:
    return FormState(major_options=tuple(major_options))


def edit_field(state: FormState, name: str, value: Any) -> FormState:
    """Apply one edit. Phone input keeps digits only, up to ten; a locked name is left alone."""
    if name == "full_name" and state.name_locked:
        return state
    if name == "phone":
        value = sanitize_phone(value)
    fields = replace(state.fields, **{name: value})
    if name == "major" and value != MAJOR_OTHER:
        fields = replace(fields, major_other="")

    errors = {key: message for key, message in state.field_errors.items() if key != name}
    return replace(state, fields=fields, field_errors=errors)


def with_field_errors(state: FormState, errors: dict[str, str]) -> FormState:
    return replace(state, field_errors=dict(errors))


def with_status(state: FormState, kind: StatusKind, text: str) -> FormState:
    return replace(state, status=StatusMessage(kind, text))


def to_new(state: FormState) -> FormState:
    """Full form, nothing locked. Field values are left as they are."""
    return replace(
        state,
        visitor=VisitorState.NEW,
        hidden_groups=frozenset(),
        name_locked=False,
        consent_enabled=True,
        submit_visible=True,
        submit_enabled=True,
        submitting=False,
        submit_label=SUBMIT_LABEL,
        already_registered_name=None,
        field_errors={},
        status=None,
    )


def _major_fields(state: FormState, data: dict) -> dict:
    major = data.get("major") if isinstance(data.get("major"), str) else ""
    if not major:
        result = {"major": "", "major_other": ""}
    elif major in state.major_options:
        result = {"major": major, "major_other": ""}
    else:
        result = {"major": MAJOR_OTHER, "major_other": major}

    if isinstance(data.get("major_other"), str) and data["major_other"]:
        result["major_other"] = data["major_other"]
    return result


def _stored_consent(data: dict) -> bool | None:
    for key in ("consent", "consent_given", "consentGiven", "opt_in"):
        if key in data and data[key] is not None:
            return data[key] in (True, 1, "1", "true")
    return None


def _stored_grad_year(data: dict) -> str:
    for key in ("grad_year", "gradYear"):
        if isinstance(data.get(key), str):
            return data[key]
    return ""


def to_returning(state: FormState, data: dict) -> FormState:
    """
    Pre-fill from the stored record and ask only for a confirmation.
    Falls back to the new-visitor form when the record has no name.
    """
    name = extract_full_name(data)
    if not name:
        return to_new(state)

    fields = state.fields
    updates: dict[str, Any] = {"full_name": name, **_major_fields(state, data)}
    if isinstance(data.get("email"), str) and data["email"].strip():
        updates["email"] = data["email"].strip()
    if isinstance(data.get("phone"), str):
        updates["phone"] = data["phone"]
    if _stored_grad_year(data):
        updates["grad_year"] = _stored_grad_year(data)
    if isinstance(data.get("notes"), str):
        updates["notes"] = data["notes"]
    consent = _stored_consent(data)
    if consent is not None:
        updates["consent"] = consent

    return replace(
        to_new(state),
        fields=replace(fields, **updates),
        visitor=VisitorState.RETURNING,
        hidden_groups=RETURNING_HIDDEN_GROUPS,
        submit_label=RETURNING_SUBMIT_LABEL,
    )


def to_already_registered(state: FormState, data: dict, name: str = "") -> FormState:
    """Show who is registered for this event and offer no way to submit again."""
    name = name.strip() or extract_full_name(data)

    updates: dict[str, Any] = {
        "full_name": name,
        "phone": data.get("phone") if isinstance(data.get("phone"), str) else "",
        "grad_year": _stored_grad_year(data),
        "notes": data.get("notes") if isinstance(data.get("notes"), str) else "",
        **_major_fields(state, data),
    }
    if isinstance(data.get("email"), str) and data["email"].strip():
        updates["email"] = data["email"].strip()
    consent = _stored_consent(data)
    if consent is not None:
        updates["consent"] = consent

    return replace(
        to_new(state),
        fields=replace(state.fields, **updates),
        visitor=VisitorState.ALREADY_REGISTERED,
        hidden_groups=frozenset(FIELD_GROUPS) - {"email", "full_name"},
        name_locked=True,
        consent_enabled=False,
        submit_visible=False,
        submit_enabled=False,
        already_registered_name=name or None,
    )


def _hold_submit(before: FormState, after: FormState) -> FormState:
    """Reclassifying while a submission is in flight keeps the submit control disabled."""
    if not before.submitting:
        return after
    returning = after.visitor == VisitorState.RETURNING
    return replace(
        after,
        submitting=True,
        submit_enabled=False,
        submit_label=RETURNING_SUBMITTING_LABEL if returning else SUBMITTING_LABEL,
    )


def to_lookup_error(state: FormState) -> FormState:
    after = replace(
        to_new(state),
        visitor=VisitorState.LOOKUP_ERROR,
        hidden_groups=frozenset(FIELD_GROUPS) - {"email"},
        consent_enabled=False,
        submit_visible=False,
        submit_enabled=False,
        field_errors={"email": LOOKUP_ERROR_MESSAGE},
    )
    return _hold_submit(state, after)


def is_already_registered(result: LookupResult) -> bool:
    # Only an exact match of two known event identifiers counts
    return (
        isinstance(result.latest_event, str)
        and isinstance(result.current_event, str)
        and result.latest_event == result.current_event
    )


def apply_lookup_result(state: FormState, result: LookupResult | None) -> FormState:
    if result is None or not result.found or not extract_full_name(result.data):
        after = to_new(state)
    elif is_already_registered(result):
        after = to_already_registered(state, result.data, result.name)
    else:
        after = to_returning(state, result.data)
    return _hold_submit(state, after)


def email_edited(state: FormState, value: str) -> FormState:
    """
    Typing in the email field invalidates any earlier classification.
    The other field values are kept.
    """
    state = edit_field(state, "email", value)
    if state.visitor == VisitorState.NEW:
        return state
    return _hold_submit(state, to_new(state))


def start_submit(state: FormState) -> FormState:
    returning = state.visitor == VisitorState.RETURNING
    return replace(
        state,
        submitting=True,
        submit_enabled=False,
        submit_label=RETURNING_SUBMITTING_LABEL if returning else SUBMITTING_LABEL,
        status=None,
    )


def _submit_done(state: FormState) -> FormState:
    returning = state.visitor == VisitorState.RETURNING
    return replace(
        state,
        submitting=False,
        submit_enabled=state.submit_visible,
        submit_label=RETURNING_SUBMIT_LABEL if returning else SUBMIT_LABEL,
    )


def submit_succeeded(state: FormState) -> FormState:
    """New entrants get an empty form back, returning ones keep theirs."""
    state = _submit_done(state)
    if state.visitor != VisitorState.RETURNING:
        state = replace(state, fields=FormFields())
    return replace(
        state,
        field_errors={},
        status=StatusMessage(StatusKind.SUCCESS, SUCCESS_MESSAGE),
    )


def submit_rejected(state: FormState, message: str | None) -> FormState:
    return with_status(_submit_done(state), StatusKind.ERROR, message or SAVE_FAILED_MESSAGE)


def submit_errored(state: FormState) -> FormState:
    return with_status(_submit_done(state), StatusKind.ERROR, NETWORK_ERROR_MESSAGE)
