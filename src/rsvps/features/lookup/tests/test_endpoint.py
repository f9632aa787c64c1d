"""Tests for the returning-visitor lookup endpoint."""

import pytest

from src.rsvps.dependencies import get_rsvp_read_model
from src.rsvps.tests.inmemory_models import (
    InMemoryRsvpReadModel,
    TEST_EVENT,
    create_test_record,
    create_test_storage,
    failing_config,
    failing_db,
    failing_driver,
    failing_unexpected,
)
from src.rsvps.urls import RSVP_URL


def lookup_params(email: str) -> dict:
    return {"lookup": "1", "email": email}


@pytest.mark.asyncio
async def test_lookup_existing_user(client_factory):
    record = create_test_record(
        phone="7655551234",
        major="Computer Science",
        grad_year="2026",
        notes="See you there",
        consent=1,
    )
    read_model = InMemoryRsvpReadModel(create_test_storage([record]))

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params=lookup_params("ada@purdue.edu"))

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["existingUser"] is True
    assert data["name"] == "Ada L."
    assert data["latest_event"] == "fall-kickoff-2025"
    assert data["current_event"] == TEST_EVENT
    assert data["data"] == {
        "full_name": "Ada L.",
        "email": "ada@purdue.edu",
        "phone": "7655551234",
        "major": "Computer Science",
        "grad_year": "2026",
        "notes": "See you there",
        "consent": 1,
        "latest_event": "fall-kickoff-2025",
    }


@pytest.mark.asyncio
async def test_lookup_falls_back_to_event_slug(client_factory):
    """A record without latest_event reports the event it was created for."""
    record = create_test_record(event_slug="spring-social-2025", latest_event="")
    read_model = InMemoryRsvpReadModel(create_test_storage([record]))

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params=lookup_params("ada@purdue.edu"))

    assert response.status_code == 200
    data = response.json()
    assert data["latest_event"] == "spring-social-2025"
    assert data["data"]["latest_event"] == "spring-social-2025"


@pytest.mark.asyncio
async def test_lookup_unknown_email(client_factory):
    read_model = InMemoryRsvpReadModel(create_test_storage())

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params=lookup_params("nobody@purdue.edu"))

    assert response.status_code == 404
    assert response.json() == {"status": "not_found", "existingUser": False}


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["", "   ", "not-an-email", "ada@", "Ada <ada@purdue.edu>"])
async def test_lookup_invalid_email(client_factory, email):
    read_model = InMemoryRsvpReadModel(create_test_storage())

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params=lookup_params(email))

    assert response.status_code == 400
    assert response.json() == {
        "status": "error",
        "error": "Invalid email supplied",
        "existingUser": False,
    }


@pytest.mark.asyncio
async def test_lookup_missing_email_param(client_factory):
    read_model = InMemoryRsvpReadModel(create_test_storage())

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params={"lookup": "1"})

    assert response.status_code == 400
    assert response.json()["existingUser"] is False


@pytest.mark.asyncio
async def test_lookup_trims_email(client_factory):
    read_model = InMemoryRsvpReadModel(create_test_storage([create_test_record()]))

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params=lookup_params("  ada@purdue.edu  "))

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "ada@purdue.edu"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error_factory",
    [failing_config, failing_db, failing_driver, failing_unexpected],
)
async def test_lookup_server_error_hides_detail(client_factory, error_factory):
    read_model = InMemoryRsvpReadModel(create_test_storage(), error=error_factory())

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params=lookup_params("ada@purdue.edu"))

    assert response.status_code == 500
    assert response.json() == {"status": "error", "error": "Lookup failed"}
    assert "APP_DB_HOST" not in response.text
    assert "10.0.0.5" not in response.text


@pytest.mark.asyncio
async def test_get_without_lookup_is_not_allowed(client_factory):
    read_model = InMemoryRsvpReadModel(create_test_storage())

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(RSVP_URL, params={"email": "ada@purdue.edu"})

    assert response.status_code == 405
    assert response.json() == {"ok": False, "error": "Method not allowed"}
