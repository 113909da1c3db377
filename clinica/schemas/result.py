"""
Uniform outcome of a ledger mutation.

Mutations never raise past the coordinator: callers get either a success carrying
the written record or a failure carrying a user-facing message and an error code.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

from clinica.core.errors import LedgerError

T = TypeVar("T")


@dataclass
class MutationResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None
    http_status: int = 200
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "MutationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: LedgerError) -> "MutationResult[T]":
        return cls(
            success=False,
            error=error.message,
            code=error.code,
            http_status=error.http_status,
            details=error.details,
        )
