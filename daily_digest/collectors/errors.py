"""Error types for the collector framework."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class CollectorErrorClass(str, Enum):
    """Classification of collector errors.

    - FETCH: HTTP/network errors during fetch
    - PARSE: Errors parsing response content
    """

    FETCH = "FETCH"
    PARSE = "PARSE"


class CollectorError(Exception):
    """Base exception for collector errors."""

    def __init__(
        self,
        error_class: CollectorErrorClass,
        message: str,
        source_name: str | None = None,
    ) -> None:
        """Initialize the collector error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            source_name: Name of the source that failed.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.source_name = source_name


class ParseError(CollectorError):
    """Error parsing content from a source (malformed feed, bad selector)."""

    def __init__(self, message: str, source_name: str | None = None) -> None:
        """Initialize the parse error.

        Args:
            message: Human-readable error message.
            source_name: Name of the source that failed.
        """
        super().__init__(
            error_class=CollectorErrorClass.PARSE,
            message=message,
            source_name=source_name,
        )


class ErrorRecord(BaseModel):
    """Serializable error record attached to a failed CollectorResult."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: CollectorErrorClass = Field(description="Error classification")
    message: Annotated[str, Field(min_length=1, description="Error message")]
    source_name: str | None = Field(default=None, description="Source name")
    attempts: Annotated[int, Field(ge=1)] = 1

    @classmethod
    def from_exception(
        cls, error: CollectorError, attempts: int = 1
    ) -> "ErrorRecord":
        """Create an ErrorRecord from a CollectorError exception.

        Args:
            error: The exception to convert.
            attempts: Number of attempts made before giving up.

        Returns:
            ErrorRecord instance.
        """
        return cls(
            error_class=error.error_class,
            message=error.message,
            source_name=error.source_name,
            attempts=attempts,
        )
