"""
Normalized error exception type.

Every failure surfaced by the dispatcher, the response classifier and the
stream decoder is (a subclass of) :class:`NormalizedError`, so callers handle a
single shape regardless of dialect or failure stage.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode


@dataclass
class NormalizedError(Exception):
    """Structured error with the HTTP status and dialect error code preserved.

    Attributes:
        message: Human-readable error message suitable for logging.
        http_status: Numeric HTTP status (or the fixed protocol status for
            stream failures). ``None`` when no response was received.
        error_code: Dialect-specific error code/type extracted from the
            response body (e.g. ``"model_not_found"``), when present.
        category: Coarse :class:`ErrorCode` classification. Derived from
            ``http_status`` when left as ``UNKNOWN``.
        provider: Dialect name where the error originated.
        raw: Optional original exception or raw frame for diagnostics.
    """

    message: str
    http_status: Optional[int] = None
    error_code: Optional[str] = None
    category: ErrorCode = ErrorCode.UNKNOWN
    provider: str = "-"
    raw: Any = None

    def __post_init__(self) -> None:
        if self.category is ErrorCode.UNKNOWN and self.http_status is not None:
            from .classification import category_for_status

            self.category = category_for_status(self.http_status)

    def __str__(self) -> str:  # pragma: no cover - trivial
        status = self.http_status if self.http_status is not None else "-"
        code = f"{self.error_code}: " if self.error_code else ""
        return f"{self.provider} [{status}] {code}{self.message}"


__all__ = ["NormalizedError"]
