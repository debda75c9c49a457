"""Typed errors surfaced to callers of the SOAP note procedure.

Exactly three kinds ever reach a caller:

    Unauthenticated  -> no verified caller identity (HTTP 401)
    InvalidArgument  -> required payload field missing or malformed (HTTP 400)
    Internal         -> anything from or after the model call (HTTP 500)
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

UNAUTHENTICATED_MESSAGE = "You must be signed in to use this feature."
MISSING_PATIENT_INFO_MESSAGE = "Request is missing 'patientInfo' (core patient data)."
INTERNAL_MESSAGE_PREFIX = "AI engine error: "


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "Unauthenticated"
    INVALID_ARGUMENT = "InvalidArgument"
    INTERNAL = "Internal"


_HTTP_STATUS = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.INTERNAL: 500,
}


class ErrorPayload(BaseModel):
    kind: ErrorKind
    message: str
    field: str | None = None


class NoteServiceError(Exception):
    """Base class for every error the service reports to a caller.

    Attributes:
        kind: One of the three caller-facing error kinds.
        message: Human-readable text returned to the caller.
        cause: The wrapped exception, kept for operator diagnostics.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self.kind]

    def to_payload(self) -> ErrorPayload:
        return ErrorPayload(kind=self.kind, message=self.message)


class UnauthenticatedError(NoteServiceError):
    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = UNAUTHENTICATED_MESSAGE):
        super().__init__(message)


class InvalidArgumentError(NoteServiceError):
    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str = MISSING_PATIENT_INFO_MESSAGE, field: str | None = None):
        self.field = field
        super().__init__(message)

    def to_payload(self) -> ErrorPayload:
        return ErrorPayload(kind=self.kind, message=self.message, field=self.field)


class InternalError(NoteServiceError):
    kind = ErrorKind.INTERNAL

    @classmethod
    def from_exception(cls, exc: BaseException) -> "InternalError":
        """Wrap any failure, keeping its description in the caller-facing message."""
        detail = str(exc).strip() or exc.__class__.__name__
        return cls(f"{INTERNAL_MESSAGE_PREFIX}{detail}", cause=exc)
