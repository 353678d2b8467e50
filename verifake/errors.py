"""
Service error hierarchy.

Every error carries a machine-readable code and a client-safe message.
The HTTP layer maps each class to a status code:

    ValidationError -> 400 (field-level messages)
    NotFoundError   -> 404
    InternalError   -> 500 by default, never leaks internal detail
"""

from typing import Any, Dict, List, Optional


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(ServiceError):
    """Malformed or missing input fields.

    ``errors`` holds one ``{"path": [...], "message": str}`` entry per
    violation, so a caller sees every bad field at once.
    """

    status_code = 400

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = errors
        fields = sorted({
            ".".join(str(part) for part in err.get("path", [])) or "body"
            for err in errors
        })
        super().__init__(
            f"Invalid fields: {', '.join(fields)}",
            code="VALIDATION_ERROR",
            details={"fields": fields},
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["errors"] = self.errors
        return result


class NotFoundError(ServiceError):
    """A referenced entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(
            f"{entity} not found",
            code="NOT_FOUND",
            details={"entity": entity, "key": key},
        )
        self.entity = entity
        self.key = key


class InternalError(ServiceError):
    """Unexpected failure. The message is generic; the cause is only logged."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message, code="INTERNAL_ERROR")
        self.status_code = status_code
