"""
Mapforge - Custom Error Types
Structured exceptions for map generation errors with recovery hints.
"""
from typing import Dict, Any, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the map engine."""
    UNKNOWN = "UNKNOWN"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Generation errors
    GENERATION_FAILED = "GENERATION_FAILED"
    INVARIANT_VIOLATED = "INVARIANT_VIOLATED"

    # Export errors
    EXPORT_FAILED = "EXPORT_FAILED"


class MapForgeError(Exception):
    """
    Base exception for all map engine errors.

    Provides structured error information with:
    - Error code for programmatic handling
    - Human-readable message
    - Additional context details
    - Recovery hints for callers
    """

    def __init__(
        self,
        code: ErrorCode = ErrorCode.UNKNOWN,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
                "recoverable": self.recoverable,
                "recovery_hint": self.recovery_hint
            }
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# =============================================================================
# Validation Errors
# =============================================================================

class MapValidationError(MapForgeError):
    """Input validation errors."""

    def __init__(self, field: str, message: str, value: Any = None):
        details = {"field": field}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details=details,
            recovery_hint=f"Check the value for '{field}'"
        )


# =============================================================================
# Generation Errors
# =============================================================================

class GenerationError(MapForgeError):
    """Map generation errors."""

    def __init__(
        self,
        code: ErrorCode = ErrorCode.GENERATION_FAILED,
        message: str = "Map generation failed",
        **kwargs
    ):
        super().__init__(code=code, message=message, **kwargs)


class GenerationInvariantError(GenerationError):
    """
    Raised when a generator produces structurally impossible output.

    This is a programming defect, never a bad input: there is nothing a
    caller can do to recover, so the error is marked unrecoverable.
    """

    def __init__(self, invariant: str, details: Optional[Dict[str, Any]] = None):
        merged = {"invariant": invariant}
        merged.update(details or {})
        super().__init__(
            code=ErrorCode.INVARIANT_VIOLATED,
            message=f"Generation invariant violated: {invariant}",
            details=merged,
            recoverable=False,
        )


# =============================================================================
# Export Errors
# =============================================================================

class ExportError(MapForgeError):
    """Raised when a generated map cannot be encoded or packaged."""

    def __init__(self, reason: str = "Failed to export map"):
        super().__init__(
            code=ErrorCode.EXPORT_FAILED,
            message=reason,
            recovery_hint="Regenerate the map or try a smaller grid size"
        )
