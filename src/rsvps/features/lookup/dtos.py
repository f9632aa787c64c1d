"""DTOs for the returning-visitor lookup."""

from pydantic import BaseModel


class LookupRecordData(BaseModel):
    """Stored profile returned to pre-fill the form."""

    full_name: str
    email: str
    phone: str | None = None
    major: str | None = None
    grad_year: str | None = None
    notes: str | None = None
    consent: int
    latest_event: str | None = None


class LookupFoundResponse(BaseModel):
    status: str = "ok"
    existingUser: bool = True
    name: str
    latest_event: str | None = None
    current_event: str
    data: LookupRecordData


class LookupNotFoundResponse(BaseModel):
    status: str = "not_found"
    existingUser: bool = False


class LookupInvalidResponse(BaseModel):
    status: str = "error"
    error: str
    existingUser: bool = False


class LookupErrorResponse(BaseModel):
    status: str = "error"
    error: str
