"""Unit tests for the exception hierarchy."""

from sizelens.core.exceptions import (
    ConfigurationError,
    ContextBuildError,
    GradleFileError,
    GradleParseError,
    SizeLensError,
)


class TestErrors:
    """Tests for SizeLens exceptions."""

    def test_base_error_str(self) -> None:
        """Test string representation with and without details."""
        assert str(SizeLensError("boom")) == "boom"
        assert str(SizeLensError("boom", {"a": 1})) == "boom - Details: {'a': 1}"

    def test_parse_error_position(self) -> None:
        """Test line and column are exposed."""
        error = GradleParseError("Unexpected token", line=3, column=7)
        assert error.line == 3
        assert error.column == 7
        assert error.details == {"line": 3, "column": 7}
        assert error.message == "Unexpected token"

    def test_parse_error_without_position(self) -> None:
        """Test a parse error with no position."""
        error = GradleParseError("bad")
        assert error.line is None
        assert error.details == {}

    def test_file_error(self) -> None:
        """Test the file path is recorded."""
        error = GradleFileError("Cannot read", file_path="app/build.gradle")
        assert error.details["file_path"] == "app/build.gradle"

    def test_context_build_error(self) -> None:
        """Test the missing fields are recorded."""
        error = ContextBuildError("incomplete", missing_fields=["min_sdk_version"])
        assert error.details["missing_fields"] == ["min_sdk_version"]

    def test_configuration_error(self) -> None:
        """Test the config key is recorded."""
        error = ConfigurationError("bad", config_key="parser")
        assert error.details["config_key"] == "parser"

    def test_hierarchy(self) -> None:
        """Test every error derives from the base error."""
        for error_type in (GradleParseError, GradleFileError, ContextBuildError, ConfigurationError):
            assert issubclass(error_type, SizeLensError)
