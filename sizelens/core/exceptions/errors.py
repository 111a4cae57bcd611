"""Custom exception definitions for SizeLens."""

from typing import Any


class SizeLensError(Exception):
    """Base exception for all SizeLens errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class GradleParseError(SizeLensError):
    """Exception raised when a build script cannot be turned into an AST."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize parse error.

        Args:
            message: Error message.
            line: 1-based line of the offending token.
            column: 1-based column of the offending token.
            details: Additional error details.
        """
        details = details or {}
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column
        super().__init__(message, details)
        self.line = line
        self.column = column


class GradleFileError(SizeLensError):
    """Exception raised when a build script file cannot be read."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize file error.

        Args:
            message: Error message.
            file_path: Path of the build script.
            details: Additional error details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, details)


class ContextBuildError(SizeLensError):
    """Exception raised when a build context builder is incomplete."""

    def __init__(
        self,
        message: str,
        missing_fields: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize context build error.

        Args:
            message: Error message.
            missing_fields: Required fields that were never set.
            details: Additional error details.
        """
        details = details or {}
        if missing_fields:
            details["missing_fields"] = missing_fields
        super().__init__(message, details)


class ConfigurationError(SizeLensError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)
