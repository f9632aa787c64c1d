import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.rsvps.audit_log import AuditLog
from src.rsvps.dependencies import get_audit_log, get_current_event, get_rsvp_write_model
from src.rsvps.dtos import (
    AuditResult,
    ConfigurationError,
    PersistenceError,
    RsvpValidationError,
    SpamDetected,
)
from src.rsvps.features.submit.dtos import (
    FORM_FIELDS,
    SubmitErrorResponse,
    SubmitSuccessResponse,
)
from src.rsvps.repository.write_models import RsvpWriteModel
from src.rsvps.urls import RSVP_URL
from src.rsvps.validation import parse_submission

logger = logging.getLogger(__name__)

router = APIRouter()

RSVP_RECORDED = "RSVP recorded"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=SubmitErrorResponse(error=message).model_dump())


def _recorded() -> JSONResponse:
    return JSONResponse(status_code=200, content=SubmitSuccessResponse(message=RSVP_RECORDED).model_dump())


@router.post(RSVP_URL)
async def submit_rsvp(
    request: Request,
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
    audit_log: AuditLog = Depends(get_audit_log),
    current_event: str = Depends(get_current_event),
) -> JSONResponse:
    """
    Record an RSVP from the form-encoded submission.

    New emails get a full record. Known emails only move ``latest_event`` to
    the current event; the details captured the first time are kept.
    A filled honeypot is answered as a success but nothing is stored.
    """
    form = await request.form()
    # Uploaded files are never valid field values
    fields: dict[str, str | None] = {}
    for name in FORM_FIELDS:
        value = form.get(name)
        fields[name] = value if isinstance(value, str) else None
    email = (fields["email"] or "").strip()

    try:
        submission = parse_submission(
            fields,
            consent=[value for value in form.getlist("consent") if isinstance(value, str)] or None,
            remote_addr=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    except SpamDetected:
        await audit_log.record(current_event, email, AuditResult.SPAM, "honeypot")
        return _recorded()
    except RsvpValidationError as e:
        return _error(422, e.message)

    try:
        await write_model.upsert(submission, event_slug=current_event)
    except ConfigurationError as e:
        logger.error(f"RSVP configuration failure: {e}")
        await audit_log.record(current_event, submission.email, AuditResult.ERROR, "config")
        return _error(500, "Save failed")
    except (PersistenceError, OSError) as e:
        logger.error(f"RSVP DB failure: {e}")
        await audit_log.record(current_event, submission.email, AuditResult.ERROR, "db")
        return _error(500, "Save failed")
    except Exception:
        logger.exception("Unexpected RSVP save failure")
        await audit_log.record(current_event, submission.email, AuditResult.ERROR, "db")
        return _error(500, "Save failed")

    consent_code = "consent=1" if submission.consent else "consent=0"
    await audit_log.record(current_event, submission.email, AuditResult.SUCCESS, consent_code)
    logger.info(f"RSVP recorded for event {current_event} ({consent_code})")
    return _recorded()


@router.api_route(RSVP_URL, methods=["PUT", "PATCH", "DELETE"], include_in_schema=False)
async def method_not_allowed() -> JSONResponse:
    return _error(405, "Method not allowed")
