"""Error taxonomy shared by the engines and the storage layer.

INVARIANT: Expected failures are returned as ``(value, DomainError)``
pairs, never raised. Exceptions are reserved for programming defects.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Machine-readable error categories."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    BOUNDARY_VIOLATION = "BOUNDARY_VIOLATION"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    RECOVERY_WARNING = "RECOVERY_WARNING"


class DomainError(BaseModel):
    """A returned (not raised) failure or informational condition."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def not_found(cls, message: str, **detail: Any) -> DomainError:
        return cls(code=ErrorCode.NOT_FOUND, message=message, detail=detail)

    @classmethod
    def invalid(cls, message: str, **detail: Any) -> DomainError:
        return cls(code=ErrorCode.INVALID_ARGUMENT, message=message, detail=detail)

    @classmethod
    def boundary(cls, message: str, **detail: Any) -> DomainError:
        return cls(code=ErrorCode.BOUNDARY_VIOLATION, message=message, detail=detail)

    @classmethod
    def persistence(cls, message: str, **detail: Any) -> DomainError:
        return cls(code=ErrorCode.PERSISTENCE_FAILURE, message=message, detail=detail)

    @classmethod
    def recovery(cls, message: str, **detail: Any) -> DomainError:
        return cls(code=ErrorCode.RECOVERY_WARNING, message=message, detail=detail)

    @property
    def is_warning(self) -> bool:
        """Recovery warnings accompany a usable value."""
        return self.code == ErrorCode.RECOVERY_WARNING
