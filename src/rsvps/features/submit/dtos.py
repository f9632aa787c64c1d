"""DTOs for the RSVP submit feature."""

from pydantic import BaseModel

FORM_FIELDS = (
    "full_name",
    "email",
    "phone",
    "major",
    "major_other",
    "grad_year",
    "notes",
    "honey",
)


class SubmitSuccessResponse(BaseModel):
    ok: bool = True
    message: str


class SubmitErrorResponse(BaseModel):
    ok: bool = False
    error: str
