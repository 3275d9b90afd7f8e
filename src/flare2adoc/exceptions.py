#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flare2adoc/exceptions.py
"""Custom exceptions for the flare2adoc library.

This module defines the exception classes raised or recorded while
converting MadCap Flare topics to AsciiDoc. Only a small part of the
hierarchy ever propagates to the caller: most conversion problems are
recoverable and are recorded as diagnostics on the conversion result.

Exception Hierarchy
-------------------
- Flare2AdocError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a component)

  - FatalParseError (input cannot be treated as a tree at all)

  - DependencyError (missing optional parser backend)

  - ConversionDiagnostic (recoverable, recorded as a warning)
    - ResourceUnavailable (missing snippet, variable or xref target)
    - AmbiguousStructure (heuristic decision taken by a tie-break rule)
    - UnknownNodeKind (unsupported construct emitted as plain text)

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from flare2adoc.ast.nodes import SourceLocation


class Flare2AdocError(Exception):
    """Base exception class for all flare2adoc-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Flare2AdocError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation failure
    parameter_name : str, optional
        Name of the parameter that failed validation
    parameter_value : Any, optional
        The invalid value that was provided
    original_error : Exception, optional
        Underlying exception, if any

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when a component receives the wrong options class.

    Parameters
    ----------
    component_name : str
        Name of the component that received the options
    expected_type : type
        The options class the component expects
    received_type : type
        The options class that was actually passed

    """

    def __init__(self, component_name: str, expected_type: type, received_type: type):
        """Initialize the error with the expected and received option types."""
        message = (
            f"{component_name} expected options of type '{expected_type.__name__}', "
            f"but received '{received_type.__name__}'."
        )
        super().__init__(message, parameter_name="options", parameter_value=received_type)
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class FatalParseError(Flare2AdocError):
    """Exception raised when the input cannot be parsed into a tree.

    This is the only conversion error that aborts a document. Everything
    else is recovered locally and reported through diagnostics.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    location : SourceLocation, optional
        Where in the source the failure was detected
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
        parsing_stage: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parse error."""
        super().__init__(message, original_error)
        self.location = location
        self.parsing_stage = parsing_stage


class DependencyError(Flare2AdocError):
    """Exception raised when an optional parser backend is not installed.

    Parameters
    ----------
    message : str
        Description of the missing dependency
    missing_packages : list of str
        Distribution names that need to be installed
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(self, message: str, missing_packages: list[str], original_error: Exception | None = None):
        """Initialize the dependency error with package details."""
        if missing_packages:
            message += f"\nInstall with: pip install {' '.join(missing_packages)}"
        super().__init__(message, original_error)
        self.missing_packages = missing_packages


class ConversionDiagnostic(Flare2AdocError):
    """Base class for recoverable conversion problems.

    Instances are created and handed to a
    :class:`~flare2adoc.result.DiagnosticCollector` rather than raised.
    Each subclass carries a stable ``code`` used in the result's warning
    list.

    Parameters
    ----------
    message : str
        Description of the problem
    location : SourceLocation, optional
        Source position of the offending construct

    """

    code = "conversion-diagnostic"

    def __init__(self, message: str, location: SourceLocation | None = None):
        """Initialize the diagnostic with a message and optional location."""
        super().__init__(message)
        self.location = location


class ResourceUnavailable(ConversionDiagnostic):
    """A snippet, variable, or cross-reference target could not be resolved."""

    code = "resource-unavailable"


class AmbiguousStructure(ConversionDiagnostic):
    """A structural heuristic had no clear answer and a tie-break rule was applied."""

    code = "ambiguous-structure"


class UnknownNodeKind(ConversionDiagnostic):
    """An unsupported construct was flattened to its text content."""

    code = "unknown-node-kind"


__all__ = [
    "Flare2AdocError",
    "ValidationError",
    "InvalidOptionsError",
    "FatalParseError",
    "DependencyError",
    "ConversionDiagnostic",
    "ResourceUnavailable",
    "AmbiguousStructure",
    "UnknownNodeKind",
]
