"""Interpretation of lookup payloads.

Lookup answers have used several spellings over time. This module is the one
place that knows them; everything else works with ``LookupResult``.

Precedence, first match wins:

* found flag: ``found``, ``exists``, ``present``, ``existingUser``
* latest event: ``latest_event``, ``latestEvent``, ``data.latest_event``, ``data.event_slug``
* current event: ``current_event``, ``currentEvent``, ``data.current_event``
* name: ``name``, ``data.full_name``, ``data.fullName``

A record is found when the flag is truthy, when ``existingUser`` is truthy and
``data`` is present, or when there is no flag at all but ``ok`` is true and
``data`` is present. A found record without a name counts as not found.
"""

from dataclasses import dataclass
from typing import Any

FOUND_FLAG_KEYS = ("found", "exists", "present", "existingUser")
TRUTHY_FLAGS = (True, "true", 1)
FALSY_FLAGS = (False, "false", 0)


@dataclass(frozen=True)
class LookupResult:
    found: bool
    data: dict | None = None
    name: str = ""
    latest_event: str | None = None
    current_event: str | None = None


NOT_FOUND = LookupResult(found=False)


def _is_flag(value: Any, flags: tuple) -> bool:
    # bool is an int subclass, compare type-aware so 1.0 or "1" don't sneak in
    return any(value is flag or (type(value) is type(flag) and value == flag) for flag in flags)


def _event(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def extract_full_name(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    for key in ("full_name", "fullName"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _first_present(payload: dict, keys: tuple) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def normalize_lookup_response(payload: Any) -> LookupResult:
    if not isinstance(payload, dict):
        return NOT_FOUND

    data = payload.get("data") if isinstance(payload.get("data"), dict) else None
    found_flag = _first_present(payload, FOUND_FLAG_KEYS)

    latest_event = _event(_first_present(payload, ("latest_event", "latestEvent")))
    if latest_event is None and data:
        latest_event = _event(data.get("latest_event")) or _event(data.get("event_slug"))

    current_event = _event(_first_present(payload, ("current_event", "currentEvent")))
    if current_event is None and data:
        current_event = _event(data.get("current_event"))

    name = payload.get("name").strip() if isinstance(payload.get("name"), str) else ""
    if not name:
        name = extract_full_name(data)

    existing_user = _is_flag(payload.get("existingUser"), TRUTHY_FLAGS)

    if _is_flag(found_flag, TRUTHY_FLAGS) or (existing_user and data is not None):
        found = True
    elif _is_flag(found_flag, FALSY_FLAGS):
        found = False
    else:
        found = payload.get("ok") is True and data is not None

    if not found or not extract_full_name(data):
        return LookupResult(
            found=False,
            latest_event=latest_event,
            current_event=current_event,
        )

    return LookupResult(
        found=True,
        data=data,
        name=name,
        latest_event=latest_event,
        current_event=current_event,
    )
