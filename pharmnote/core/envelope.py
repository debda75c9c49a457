from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pharmnote.core.errors import NoteServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Success value or typed error handed from one pipeline stage to the next."""

    ok: bool
    value: T | None = None
    error: NoteServiceError | None = None

    def __post_init__(self) -> None:
        if self.ok == (self.error is not None):
            raise ValueError("StageResult carries an error exactly when ok is False")

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: NoteServiceError) -> "StageResult[T]":
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_error(self) -> NoteServiceError:
        if self.error is None:
            raise ValueError("unwrap_error() called on a successful StageResult")
        return self.error
