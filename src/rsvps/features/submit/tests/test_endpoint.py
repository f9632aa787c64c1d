"""Tests for the RSVP submit endpoint."""

import ipaddress

import pytest

from src.rsvps.dependencies import get_rsvp_read_model, get_rsvp_write_model
from src.rsvps.dtos import AuditResult
from src.rsvps.tests.inmemory_models import (
    TEST_EVENT,
    InMemoryRsvpReadModel,
    InMemoryRsvpWriteModel,
    create_test_record,
    create_test_storage,
    failing_config,
    failing_db,
    failing_driver,
    failing_unexpected,
)
from src.rsvps.urls import RSVP_URL


@pytest.fixture
def storage():
    return create_test_storage()


@pytest.fixture
def overrides(storage):
    read_model = InMemoryRsvpReadModel(storage)
    write_model = InMemoryRsvpWriteModel(storage)
    return {
        get_rsvp_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }


def ada_form(**fields) -> dict:
    form = {
        "full_name": "Ada L.",
        "email": "ada@purdue.edu",
        "grad_year": "2026",
        "consent": "1",
        "honey": "",
    }
    form.update(fields)
    return form


@pytest.mark.asyncio
async def test_submit_then_lookup(client_factory, overrides, storage, audit_log):
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, data=ada_form())
        lookup = await client.get(RSVP_URL, params={"lookup": "1", "email": "ada@purdue.edu"})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "message": "RSVP recorded"}

    assert lookup.status_code == 200
    data = lookup.json()
    assert data["existingUser"] is True
    assert data["data"]["full_name"] == "Ada L."
    assert data["data"]["consent"] == 1
    assert data["latest_event"] == TEST_EVENT

    assert audit_log.entries == [
        {
            "event_slug": TEST_EVENT,
            "email": "ada@purdue.edu",
            "result": AuditResult.SUCCESS,
            "code": "consent=1",
        }
    ]


@pytest.mark.asyncio
async def test_resubmission_only_moves_latest_event(client_factory):
    storage = create_test_storage(
        [create_test_record(phone="7655551234", major="Physics", grad_year="2025", consent=1)]
    )
    overrides = {
        get_rsvp_read_model: lambda: InMemoryRsvpReadModel(storage),
        get_rsvp_write_model: lambda: InMemoryRsvpWriteModel(storage),
    }

    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL,
            data=ada_form(full_name="Someone Else", phone="1112223333", major="Art", consent="0"),
        )

    assert response.status_code == 200
    record = storage.records["ada@purdue.edu"]
    assert record.latest_event == TEST_EVENT
    assert record.event_slug == "fall-kickoff-2025"
    assert record.full_name == "Ada L."
    assert record.phone == "7655551234"
    assert record.major == "Physics"
    assert record.consent == 1
    assert len(storage.records) == 1


@pytest.mark.asyncio
async def test_honeypot_pretends_success(client_factory, overrides, storage, audit_log):
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, data=ada_form(honey="http://spam.example"))

    assert response.status_code == 200
    assert response.json() == {"ok": True, "message": "RSVP recorded"}
    assert storage.records == {}
    assert audit_log.entries[0]["result"] == AuditResult.SPAM
    assert audit_log.entries[0]["code"] == "honeypot"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fields, message",
    [
        ({"full_name": ""}, "Name and valid email are required."),
        ({"full_name": "   "}, "Name and valid email are required."),
        ({"full_name": "x" * 101}, "Name must be 100 characters or fewer."),
        ({"email": ""}, "Name and valid email are required."),
        ({"email": "a" * 250 + "@purdue.edu"}, "Email must be 254 characters or fewer."),
        ({"email": "ada-at-purdue"}, "Name and valid email are required."),
        ({"phone": "1" * 41}, "Phone number is too long."),
        ({"major": "m" * 121}, "Major is too long."),
        ({"major": "other", "major_other": "m" * 121}, "Major is too long."),
        ({"grad_year": "202a"}, "Graduation year must be four digits."),
        ({"grad_year": "19"}, "Graduation year must be four digits."),
        ({"grad_year": "20255"}, "Graduation year must be four digits."),
        ({"notes": "n" * 4001}, "Notes are too long."),
    ],
)
async def test_submit_validation(client_factory, overrides, storage, fields, message):
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, data=ada_form(**fields))

    assert response.status_code == 422
    assert response.json() == {"ok": False, "error": message}
    assert storage.records == {}


@pytest.mark.asyncio
async def test_first_failing_field_wins(client_factory, overrides):
    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL, data=ada_form(full_name="", grad_year="abcd", notes="n" * 5000)
        )

    assert response.status_code == 422
    assert response.json()["error"] == "Name and valid email are required."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "consent, expected",
    [
        ("", 0),
        ("0", 0),
        (None, 0),
        ("1", 1),
        ("on", 1),
        (["0", "1"], 1),
        (["0"], 0),
    ],
)
async def test_consent_normalization(client_factory, overrides, storage, consent, expected):
    form = ada_form()
    if consent is None:
        del form["consent"]
    else:
        form["consent"] = consent

    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, data=form)

    assert response.status_code == 200
    assert storage.records["ada@purdue.edu"].consent == expected


@pytest.mark.asyncio
async def test_major_other_is_stored_as_major(client_factory, overrides, storage):
    async with client_factory(overrides) as client:
        await client.post(RSVP_URL, data=ada_form(major="other", major_other=" Agronomy "))

    assert storage.records["ada@purdue.edu"].major == "Agronomy"


@pytest.mark.asyncio
async def test_optional_fields_stored_as_null(client_factory, overrides, storage):
    async with client_factory(overrides) as client:
        await client.post(RSVP_URL, data=ada_form(grad_year="", phone=" ", notes=""))

    record = storage.records["ada@purdue.edu"]
    assert record.grad_year is None
    assert record.phone is None
    assert record.notes is None


@pytest.mark.asyncio
async def test_request_metadata_captured(client_factory, overrides, storage):
    async with client_factory(overrides) as client:
        await client.post(RSVP_URL, data=ada_form(), headers={"User-Agent": "u" * 300})

    submission = storage.submissions[0]
    assert submission.user_agent == "u" * 255
    # httpx's ASGI transport reports the client as 127.0.0.1
    assert submission.ip == ipaddress.ip_address("127.0.0.1").packed


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error_factory, code",
    [
        (failing_config, "config"),
        (failing_db, "db"),
        (failing_driver, "db"),
        (failing_unexpected, "db"),
    ],
)
async def test_persistence_failure_is_generic(client_factory, audit_log, error_factory, code):
    storage = create_test_storage()
    write_model = InMemoryRsvpWriteModel(storage, error=error_factory())

    async with client_factory({get_rsvp_write_model: lambda: write_model}) as client:
        response = await client.post(RSVP_URL, data=ada_form())

    assert response.status_code == 500
    assert response.json() == {"ok": False, "error": "Save failed"}
    assert "APP_DB_HOST" not in response.text
    assert "10.0.0.5" not in response.text
    assert audit_log.entries[-1]["result"] == AuditResult.ERROR
    assert audit_log.entries[-1]["code"] == code


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE"])
async def test_other_methods_not_allowed(client_factory, overrides, storage, method):
    async with client_factory(overrides) as client:
        response = await client.request(method, RSVP_URL, data=ada_form())

    assert response.status_code == 405
    assert response.json() == {"ok": False, "error": "Method not allowed"}
    assert storage.records == {}
