"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult. Expected
failures (unparseable names, occupied paths, disabled features, store
errors) are reported through ``error``; they are never raised.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Error codes
DATE_PARSE_ERROR = "DATE_PARSE_ERROR"
INVALID_GRANULARITY_PAIRING = "INVALID_GRANULARITY_PAIRING"
ALREADY_EXISTS = "ALREADY_EXISTS"
STORE_IO_ERROR = "STORE_IO_ERROR"
FEATURE_DISABLED = "FEATURE_DISABLED"
NO_STREAM = "NO_STREAM"
NOT_FOUND = "NOT_FOUND"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"update_links"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
