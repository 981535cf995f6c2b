"""
Typed errors raised by the service layer.

Every error carries a machine-readable ``code`` and the HTTP status the API
answers with. Services raise these; only the handlers registered in
``main.py`` turn them into responses.
"""
from typing import Any, Dict, Optional

from fastapi import status


class MiniCashError(Exception):
    """Base exception for all MiniCash errors"""

    code = "INTERNAL"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(MiniCashError):
    """Malformed or out-of-range input"""

    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(MiniCashError):
    """Missing, malformed, invalid or expired credential"""

    code = "UNAUTHENTICATED"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials", details=None):
        super().__init__(message, details)


class ForbiddenError(MiniCashError):
    """Authenticated principal lacks the required role"""

    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "This action requires administrator permissions", details=None):
        super().__init__(message, details)


class ConflictError(MiniCashError):
    """Duplicate identity or an already open loan"""

    code = "CONFLICT"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(MiniCashError):
    """Unknown entity"""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any = None):
        message = f"{entity} not found"
        details = {}
        if entity_id is not None:
            message = f"{entity} {entity_id} not found"
            details["id"] = entity_id
        super().__init__(message, details)
        self.entity = entity


class InvalidStateError(MiniCashError):
    """Operation not legal for the loan's current status"""

    code = "INVALID_STATE"
    status_code = status.HTTP_400_BAD_REQUEST
