"""Error taxonomy shared by validators, the API client and the view flows."""

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError


@dataclass(frozen=True)
class FieldError:
    """A single rejected field."""

    path: str  # dotted path, e.g. "autoEngage.maxDailyInteractions"
    message: str
    error_type: str = "value_error"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message, "type": self.error_type}


class DashboardError(Exception):
    """Base class for dashboard errors."""

    pass


class SchemaValidationError(DashboardError):
    """Raised when a schema rejects one or more fields.

    Validation is all-or-nothing: callers must not persist or submit any part
    of an input that raised this error.
    """

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        self.errors = errors
        paths = ", ".join(error.path for error in errors) or "<root>"
        super().__init__(message or f"Validation failed for: {paths}")

    @property
    def paths(self) -> list[str]:
        return [error.path for error in self.errors]

    @classmethod
    def from_pydantic(cls, exc: ValidationError, prefix: str | None = None) -> "SchemaValidationError":
        """Build from a pydantic ValidationError, keeping every offending path."""
        errors = []
        for item in exc.errors():
            parts = [str(part) for part in item["loc"]]
            if prefix:
                parts.insert(0, prefix)
            errors.append(
                FieldError(
                    path=".".join(parts) or "<root>",
                    message=item["msg"],
                    error_type=item["type"],
                )
            )
        return cls(errors)

    def to_dict(self) -> dict[str, Any]:
        return {"message": str(self), "errors": [error.to_dict() for error in self.errors]}


class PreferencesValidationError(SchemaValidationError):
    """Raised when a user preferences document is invalid."""

    pass


class RequestError(DashboardError):
    """Raised for network or server failures talking to the dashboard API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class EmptyResultError(DashboardError):
    """Raised when a successful response carried no usable payload."""

    pass


class DuplicateRecordError(DashboardError):
    """Raised when a record would break a uniqueness rule of the store."""

    pass
