"""Error taxonomy shared by every stage of the audit pipeline."""

from typing import Optional


class PageAuditError(Exception):
    """Base class for all audit pipeline errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingParameter(PageAuditError):
    """Raised when a required query or body field is absent."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} missing")


class NetworkError(PageAuditError):
    """Raised on DNS, connection, timeout or redirect-limit failures."""

    def __init__(self, message: str, url: Optional[str] = None, timed_out: bool = False):
        self.url = url
        self.timed_out = timed_out
        super().__init__(message)


class HttpError(PageAuditError):
    """Raised when the target answered with an error status."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Request failed with status code {status_code}")


class ParseError(PageAuditError):
    """Raised when expected markup or structure is absent."""


class RejectedReference(PageAuditError, ValueError):
    """Raised when a reference does not name a fetchable resource."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Rejected reference {reference!r}: {reason}")
