"""Exception definitions module."""

from sizelens.core.exceptions.errors import (
    ConfigurationError,
    ContextBuildError,
    GradleFileError,
    GradleParseError,
    SizeLensError,
)

__all__ = [
    "SizeLensError",
    "GradleParseError",
    "GradleFileError",
    "ContextBuildError",
    "ConfigurationError",
]
