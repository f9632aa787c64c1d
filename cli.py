"""CLI commands for event RSVP management."""

import asyncio

import typer

from src.config.database import dispose_engine, upgrade_database
from src.config.logging import setup_logging
from src.config.settings import settings
from src.rsvps.dependencies import get_audit_log
from src.rsvps.dtos import (
    AuditResult,
    ConfigurationError,
    PersistenceError,
    RsvpRecordDTO,
    RsvpValidationError,
)
from src.rsvps.repository.read_models import SqlRsvpReadModel
from src.rsvps.repository.write_models import SqlRsvpWriteModel
from src.rsvps.validation import is_valid_email, parse_submission

app = typer.Typer(help="CLI commands for event RSVP management")


def run(coro):
    """Run one command on a fresh event loop and release the pool before it closes."""

    async def _main():
        try:
            return await coro
        finally:
            await dispose_engine()

    return asyncio.run(_main())


def classify(record: RsvpRecordDTO | None, current_event: str) -> str:
    if record is None:
        return "new"
    if record.resolved_latest_event and record.resolved_latest_event == current_event:
        return "already-registered"
    return "returning"


@app.command()
def migrate():
    """Upgrade the RSVP database to the latest migration."""
    try:
        run(upgrade_database())
    except ConfigurationError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.secho("Database is up to date.", fg=typer.colors.GREEN)


@app.command()
def lookup(
    email: str = typer.Argument(..., help="Email address to look up"),
):
    """Show the stored RSVP for an email and how the form would treat it."""
    email = email.strip()
    if not is_valid_email(email):
        typer.secho("Invalid email supplied", fg=typer.colors.RED)
        raise typer.Exit(1)

    try:
        record = run(SqlRsvpReadModel().get_by_email(email))
    except (ConfigurationError, PersistenceError) as e:
        typer.secho(f"Lookup failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho(f"Event: {settings.event_slug}", fg=typer.colors.BLUE)
    typer.secho(f"Classification: {classify(record, settings.event_slug)}", fg=typer.colors.MAGENTA)
    if record is None:
        typer.secho("No RSVP on file.", fg=typer.colors.YELLOW)
        return

    typer.secho(f"  Name: {record.full_name}", fg=typer.colors.CYAN)
    typer.secho(f"  Email: {record.email}", fg=typer.colors.CYAN)
    typer.secho(f"  First event: {record.event_slug}", fg=typer.colors.CYAN)
    typer.secho(f"  Latest event: {record.resolved_latest_event or '-'}", fg=typer.colors.CYAN)
    for label, value in (
        ("Phone", record.phone),
        ("Major", record.major),
        ("Grad year", record.grad_year),
        ("Notes", record.notes),
    ):
        if value:
            typer.secho(f"  {label}: {value}", fg=typer.colors.CYAN)
    typer.secho(f"  Consent: {'yes' if record.consent else 'no'}", fg=typer.colors.CYAN)


async def _submit(fields: dict[str, str | None], consent: bool, event_slug: str) -> None:
    audit_log = get_audit_log()
    submission = parse_submission(fields, consent="1" if consent else None)
    try:
        await SqlRsvpWriteModel().upsert(submission, event_slug=event_slug)
    except ConfigurationError:
        await audit_log.record(event_slug, submission.email, AuditResult.ERROR, "config")
        raise
    except PersistenceError:
        await audit_log.record(event_slug, submission.email, AuditResult.ERROR, "db")
        raise
    consent_code = "consent=1" if submission.consent else "consent=0"
    await audit_log.record(event_slug, submission.email, AuditResult.SUCCESS, consent_code)


@app.command()
def submit(
    full_name: str = typer.Option(..., "--name", "-n", help="Full name"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    phone: str = typer.Option("", help="Phone number"),
    major: str = typer.Option("", help="Major"),
    grad_year: str = typer.Option("", help="Four-digit graduation year"),
    notes: str = typer.Option("", help="Notes"),
    consent: bool = typer.Option(False, "--consent/--no-consent", help="Opt in to updates"),
    event: str = typer.Option(None, help="Event slug, defaults to the configured event"),
):
    """Record an RSVP at the door, through the same validation as the form."""
    event_slug = event or settings.event_slug
    fields = {
        "full_name": full_name,
        "email": email,
        "phone": phone,
        "major": major,
        "major_other": "",
        "grad_year": grad_year,
        "notes": notes,
        "honey": "",
    }

    try:
        run(_submit(fields, consent, event_slug))
    except RsvpValidationError as e:
        typer.secho(e.message, fg=typer.colors.RED)
        raise typer.Exit(1)
    except (ConfigurationError, PersistenceError) as e:
        typer.secho(f"Save failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("RSVP recorded!", fg=typer.colors.GREEN)
    typer.secho(f"  Email: {email.strip()}", fg=typer.colors.BLUE)
    typer.secho(f"  Event: {event_slug}", fg=typer.colors.CYAN)


if __name__ == "__main__":
    setup_logging()
    app()
