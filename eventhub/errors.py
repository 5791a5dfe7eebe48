"""Domain error codes for the event catalog."""

from dataclasses import dataclass, field
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    CONFIGURATION = "CONFIGURATION"
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    CONNECTIVITY = "CONNECTIVITY"
    UPSTREAM_SERVICE = "UPSTREAM_SERVICE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ConfigurationError(DomainError):
    """Raised when required environment configuration is missing."""

    def __init__(self, setting: str) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION,
            message=f"Please define the {setting} environment variable",
        )
        self.setting = setting


@dataclass(eq=False, init=False)
class ValidationError(DomainError):
    """Raised when input is malformed or required fields are missing.

    ``missing_fields`` lists every absent field at once so callers can
    report them together.
    """

    missing_fields: list[str] = field(default_factory=list)
    field_name: str | None = None

    def __init__(
        self,
        message: str,
        *,
        missing_fields: list[str] | None = None,
        field_name: str | None = None,
    ) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message)
        self.missing_fields = list(missing_fields or [])
        self.field_name = field_name


class ConflictError(DomainError):
    """Raised when a uniqueness constraint would be violated."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.CONFLICT, message=message)


class NotFoundError(DomainError):
    """Raised when a lookup has no match."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=message)


class ConnectivityError(DomainError):
    """Raised when the database cannot be reached."""

    def __init__(self, message: str = "Database connection error") -> None:
        super().__init__(code=ErrorCode.CONNECTIVITY, message=message)


class UpstreamServiceError(DomainError):
    """Raised when the asset host rejects or fails an upload."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.UPSTREAM_SERVICE, message=message)
