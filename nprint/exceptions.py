"""N-Print Exception Hierarchy.

Exception hierarchy for the nitrogen-footprint engine with rich error context
for debugging and user feedback.

Exception Hierarchy:
    NPrintException (base)
    ├── ConfigurationError
    ├── UnitConversionError
    └── DataException
        ├── HeaderMismatchError
        └── SnapshotError

All exceptions include rich context:
- error_code: Unique error identifier
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Calculation faults are never raised out of ``calculate``; they are reported
as a ``CalculationFailure`` value. These exceptions cover the edges of the
engine: configuration, the factor registry and reference-table loading.

Example:
    >>> from nprint.exceptions import HeaderMismatchError
    >>> raise HeaderMismatchError(
    ...     message="Header row does not match schema",
    ...     table="food_attribute",
    ...     expected=["name", "Food waste %"],
    ...     actual=["Name", "Waste"],
    ... )
"""

import json
import re
from datetime import datetime
from typing import Any, Dict, List, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class NPrintException(Exception):
    """Base exception for all N-Print errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "NP_DATA_HEADER_MISMATCH_ERROR")
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "NP"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        """Generate error code based on exception class.

        Returns:
            Error code like "NP_DATA_SNAPSHOT_ERROR"
        """
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', self.__class__.__name__).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


class ConfigurationError(NPrintException):
    """Configuration or factor registry is invalid.

    Example:
        >>> raise ConfigurationError(
        ...     message="Energy factor registry not found",
        ...     context={"path": "/etc/nprint/energy_factors.yaml"}
        ... )
    """
    pass


class UnitConversionError(NPrintException):
    """Raised when unit conversion fails"""
    pass


# ==============================================================================
# Data Exceptions
# ==============================================================================

class DataException(NPrintException):
    """Base exception for reference-data errors."""
    ERROR_PREFIX = "NP_DATA"


class HeaderMismatchError(DataException):
    """Header row of a reference table does not match its schema.

    Raised under the ``strict`` header policy so that columns are never
    silently misaligned.
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        expected: Optional[List[str]] = None,
        actual: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        context = context or {}
        if table:
            context["table"] = table
        if expected is not None:
            context["expected_headers"] = list(expected)
        if actual is not None:
            context["actual_headers"] = list(actual)
        super().__init__(message, context=context)
        self.table = table


class SnapshotError(DataException):
    """Reference snapshot could not be loaded or is structurally invalid.

    Example:
        >>> raise SnapshotError(
        ...     message="Unknown reference table",
        ...     context={"table": "GDP_2019"}
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ):
        context = context or {}
        if source:
            context["source"] = source
        super().__init__(message, context=context)


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: Exception) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current = exc

    while current is not None:
        if isinstance(current, NPrintException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")
        current = getattr(current, "__cause__", None)

    return "\n".join(lines)
