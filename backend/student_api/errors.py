"""Exception types raised by the store and the summary generator.

Controllers in :mod:`student_api.main` translate these into HTTP
responses; nothing here knows about the transport.
"""

from typing import List

from .schemas import FieldError


class StudentNotFoundError(LookupError):
    """Raised when a student id is not present in the store."""

    def __init__(self, student_id: int):
        super().__init__(f"student {student_id} not found")
        self.student_id = student_id


class StudentValidationError(ValueError):
    """Raised when a candidate student fails field validation."""

    def __init__(self, errors: List[FieldError]):
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = list(errors)


class SummaryError(RuntimeError):
    """Base class for failures talking to the text-generation service."""
    status_code = 500
    detail = "Failed to generate summary"


class SummaryUnavailableError(SummaryError):
    status_code = 503
    detail = "Failed to connect to summary service"


class SummaryTimeoutError(SummaryError):
    status_code = 504
    detail = "Summary service timed out"


class SummaryUpstreamError(SummaryError):
    status_code = 502
    detail = "Summary service returned an error"


class SummaryProtocolError(SummaryError):
    status_code = 500
    detail = "Failed to parse summary service response"
