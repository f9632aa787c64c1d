class LookupFailed(Exception):
    """The lookup could not be completed: transport error, unexpected status or unreadable body."""


class SubmitFailed(Exception):
    """The submission did not produce a readable answer from the server."""
