"""ServiceResult and ServiceError — the service-layer return contract.

INVARIANT: All facade methods return ServiceResult.  Domain errors are
converted with :meth:`ServiceError.from_exception`; the CLI never sees a
raw PaymentRailError.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from payrails.domain.errors import PaymentRailError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: PaymentRailError) -> ServiceError:
        """Carry the kind tag, message, every collected problem, and the payload."""
        detail: dict[str, Any] = dict(exc.detail)
        if exc.errors != [exc.message]:
            detail["errors"] = list(exc.errors)
        return cls(code=exc.code, message=exc.message, detail=detail)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"select_rail"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        exc: PaymentRailError,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError.from_exception(exc),
            warnings=warnings or [],
        )
