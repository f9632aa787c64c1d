from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.rsvps.dependencies import get_current_event

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    event: str


@router.get("/", response_model=HealthCheckResponse)
async def health_check(current_event: str = Depends(get_current_event)) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running and which event it records RSVPs for.
    """
    return HealthCheckResponse(status="healthy", event=current_event)
