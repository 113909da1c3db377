"""
Error hierarchy for ledger operations.

Every error carries a code, a category and the HTTP status the API layer uses when it
renders the failure. Messages are user-facing (Spanish, like the dashboard) and never
include storage internals.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """High-level error categories"""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    BUSINESS_RULE = "business_rule"
    DATABASE = "database"
    CONFLICT = "conflict"


class LedgerError(Exception):
    """Base exception for all ledger failures."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.details = details or {}

    def to_response(self) -> Dict[str, Any]:
        """Failure body returned to the dashboard."""
        body = {"success": False, "error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(LedgerError):
    """Malformed or missing input; the operation is not attempted."""

    def __init__(self, message: str = "Datos inválidos", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", ErrorCategory.VALIDATION, 400, details)


class NotFoundError(LedgerError):
    """Referenced record does not exist."""

    FEMININE = {"Sesión", "Cita"}

    def __init__(self, resource: str, resource_id: Any):
        suffix = "no encontrada" if resource in self.FEMININE else "no encontrado"
        super().__init__(
            f"{resource} {suffix}",
            "NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND,
            404,
            {"resource": resource, "id": resource_id},
        )
        self.resource = resource
        self.resource_id = resource_id


class CapacityError(LedgerError):
    """Package session ceiling reached."""

    def __init__(self, ceiling: int, message: Optional[str] = None):
        super().__init__(
            message or f"El paquete ya alcanzó el máximo de {ceiling} sesión(es)",
            "CAPACITY_EXCEEDED",
            ErrorCategory.BUSINESS_RULE,
            409,
            {"ceiling": ceiling},
        )
        self.ceiling = ceiling


class PersistenceError(LedgerError):
    """Backing store failure. Detail is logged server-side only."""

    def __init__(self, message: str, operation: str):
        super().__init__(message, "PERSISTENCE_ERROR", ErrorCategory.DATABASE, 503)
        self.operation = operation


class InconsistentStateError(LedgerError):
    """A concurrent write left (or would leave) the client with two active packages."""

    def __init__(self, client_id: Any):
        super().__init__(
            "Otro paquete activo fue registrado al mismo tiempo para este cliente",
            "INCONSISTENT_STATE",
            ErrorCategory.CONFLICT,
            409,
            {"client_id": client_id},
        )
        self.client_id = client_id
