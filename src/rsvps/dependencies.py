"""FastAPI dependencies shared by the RSVP features."""

from src.config.settings import settings
from src.rsvps.audit_log import AuditLog, FileAuditLog, NoOpAuditLog
from src.rsvps.repository.read_models import RsvpReadModel, SqlRsvpReadModel
from src.rsvps.repository.write_models import RsvpWriteModel, SqlRsvpWriteModel


def get_rsvp_read_model() -> RsvpReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRsvpReadModel()


def get_rsvp_write_model() -> RsvpWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRsvpWriteModel()


def get_audit_log() -> AuditLog:
    """An empty APP_AUDIT_LOG_PATH turns the audit log off."""
    if not settings.audit_log_path.strip():
        return NoOpAuditLog()
    return FileAuditLog(settings.audit_log_path)


def get_current_event() -> str:
    return settings.event_slug
