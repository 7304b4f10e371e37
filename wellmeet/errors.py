"""Exception taxonomy for the service boundary and booking actions."""

from typing import Optional


class WellmeetError(Exception):
    """Base class for all package errors."""


class ServiceError(WellmeetError):
    """The service answered with a non-2xx status or a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(WellmeetError):
    """The service could not be reached."""


class ActionNotAllowedError(WellmeetError):
    """A booking action is not permitted in the booking's current state."""


class DraftLockedError(WellmeetError):
    """A reservation draft was touched while submitting or after submission."""
