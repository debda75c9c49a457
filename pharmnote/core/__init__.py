from pharmnote.core.envelope import StageResult
from pharmnote.core.errors import (
    ErrorKind,
    InternalError,
    InvalidArgumentError,
    NoteServiceError,
    UnauthenticatedError,
)

__all__ = [
    "ErrorKind",
    "InternalError",
    "InvalidArgumentError",
    "NoteServiceError",
    "StageResult",
    "UnauthenticatedError",
]
