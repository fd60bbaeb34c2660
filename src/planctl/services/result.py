"""ServiceResult and ServiceError — the contract every operation returns.

INVARIANT: All service-layer methods return ServiceResult. The CLI
consumes nothing else. Domain ``(value, DomainError)`` pairs are
translated here and never leak past the service boundary.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from planctl.domain.errors import DomainError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, error: DomainError) -> ServiceError:
        return cls(code=error.code.value, message=error.message, detail=dict(error.detail))


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"add_node"``).
        data: Operation-specific payload. A failed save still carries the
            mutated value here.
        warnings: Non-fatal issues, such as recovered project files.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (project name, counts).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
