import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.rsvps.dependencies import get_current_event, get_rsvp_read_model
from src.rsvps.dtos import ConfigurationError, PersistenceError
from src.rsvps.features.lookup.dtos import (
    LookupErrorResponse,
    LookupFoundResponse,
    LookupInvalidResponse,
    LookupNotFoundResponse,
    LookupRecordData,
)
from src.rsvps.features.submit.dtos import SubmitErrorResponse
from src.rsvps.repository.read_models import RsvpReadModel
from src.rsvps.urls import RSVP_URL
from src.rsvps.validation import is_valid_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(RSVP_URL)
async def lookup_rsvp(
    lookup: str | None = None,
    email: str | None = None,
    read_model: RsvpReadModel = Depends(get_rsvp_read_model),
    current_event: str = Depends(get_current_event),
) -> JSONResponse:
    """
    Look up a previously registered email.

    Tells the form whether the visitor is returning, which event they last
    RSVP'd to and what the current event is, so it can pre-fill or lock fields.
    A plain GET without ``lookup`` is not a valid request on this endpoint.
    """
    if lookup is None:
        return JSONResponse(
            status_code=405,
            content=SubmitErrorResponse(error="Method not allowed").model_dump(),
        )

    email = (email or "").strip()
    if not is_valid_email(email):
        return JSONResponse(
            status_code=400,
            content=LookupInvalidResponse(error="Invalid email supplied").model_dump(),
        )

    try:
        record = await read_model.get_by_email(email)
    except (ConfigurationError, PersistenceError, OSError) as e:
        logger.error(f"RSVP lookup failure: {e}")
        return JSONResponse(
            status_code=500,
            content=LookupErrorResponse(error="Lookup failed").model_dump(),
        )
    except Exception:
        logger.exception("Unexpected RSVP lookup failure")
        return JSONResponse(
            status_code=500,
            content=LookupErrorResponse(error="Lookup failed").model_dump(),
        )

    if record is None:
        return JSONResponse(status_code=404, content=LookupNotFoundResponse().model_dump())

    latest_event = record.resolved_latest_event
    response = LookupFoundResponse(
        name=record.full_name,
        latest_event=latest_event,
        current_event=current_event,
        data=LookupRecordData(
            full_name=record.full_name,
            email=record.email or email,
            phone=record.phone,
            major=record.major,
            grad_year=record.grad_year,
            notes=record.notes,
            consent=record.consent,
            latest_event=latest_event,
        ),
    )
    return JSONResponse(status_code=200, content=response.model_dump())
