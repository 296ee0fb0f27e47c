"""Application exception hierarchy.

All custom exceptions inherit from WorkflowError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "VDB-1000"
    CONFIGURATION_ERROR = "VDB-1001"
    VALIDATION_ERROR = "VDB-1002"

    # Connection errors (2xxx)
    CONNECTION_ERROR = "VDB-2000"

    # Vector store errors (3xxx)
    VECTOR_STORE_ERROR = "VDB-3000"
    SCHEMA_ERROR = "VDB-3001"
    STATISTICS_ERROR = "VDB-3002"
    INSERT_ERROR = "VDB-3003"
    INDEX_ERROR = "VDB-3004"
    UNSUPPORTED_INDEX = "VDB-3005"
    LOAD_ERROR = "VDB-3006"
    SEARCH_ERROR = "VDB-3007"


class WorkflowError(Exception):
    """Base exception for all workflow errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(WorkflowError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(WorkflowError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class VectorStoreError(WorkflowError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreConnectionError(VectorStoreError):
    """Service unreachable or credentials rejected."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONNECTION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class SchemaError(VectorStoreError):
    """Collection could not be checked or created."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SCHEMA_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class StatisticsError(VectorStoreError):
    """Collection statistics could not be read."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.STATISTICS_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class InsertError(VectorStoreError):
    """Records could not be inserted."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INSERT_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class IndexCreationError(VectorStoreError):
    """Index could not be checked or created."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INDEX_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class LoadError(VectorStoreError):
    """Collection could not be loaded for serving."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LOAD_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class SearchError(VectorStoreError):
    """Similarity search failed."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SEARCH_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
