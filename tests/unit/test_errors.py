"""Unit tests for structured error classes and message parsing."""

import pytest

from nameit.errors import (
    ConfigError,
    ExitCode,
    FileOperationError,
    HistoryError,
    InputError,
    TemplateSyntaxError,
    UnrecognizedParameterError,
    ValidationError,
    format_user_error,
    parse_user_error_message,
)


@pytest.mark.unit
def test_structured_errors_expose_message_triad() -> None:
    """Structured error classes retain what/why/remediation and formatted rendering."""
    error = ValidationError(
        what="invalid format",
        why="unclosed marker",
        remediation="close the marker",
    )

    assert error.what == "invalid format"
    assert error.why == "unclosed marker"
    assert error.remediation == "close the marker"
    assert str(error) == "what: invalid format; why: unclosed marker; how-to-fix: close the marker"


@pytest.mark.unit
def test_exit_codes_per_error_category() -> None:
    """Each major failure class maps to a deterministic non-zero exit code."""
    assert ConfigError(what="c", why="w", remediation="r").exit_code == int(ExitCode.CONFIG)
    assert ValidationError(what="c", why="w", remediation="r").exit_code == int(ExitCode.VALIDATION)
    assert HistoryError(what="c", why="w", remediation="r").exit_code == int(ExitCode.HISTORY)
    assert FileOperationError(what="c", why="w", remediation="r").exit_code == int(ExitCode.FILE_OPERATION)


@pytest.mark.unit
def test_template_errors_are_distinct_validation_errors() -> None:
    """Parse and parameter errors can be told apart but share the validation exit code."""
    syntax = TemplateSyntaxError(what="a", why="b", remediation="c")
    unknown = UnrecognizedParameterError(what="a", why="b", remediation="c")

    assert isinstance(syntax, ValidationError) and isinstance(unknown, ValidationError)
    assert not isinstance(syntax, UnrecognizedParameterError)
    assert syntax.exit_code == unknown.exit_code == int(ExitCode.VALIDATION)


@pytest.mark.unit
def test_input_errors_are_plain_value_errors() -> None:
    assert issubclass(InputError, ValueError)


@pytest.mark.unit
def test_parse_user_error_message_extracts_triads() -> None:
    """Triad parser decodes formatted user messages for structured wrapping."""
    rendered = format_user_error(what="a", why="b", how_to_fix="c")

    assert parse_user_error_message(rendered) == ("a", "b", "c")
    assert parse_user_error_message("plain error") is None
