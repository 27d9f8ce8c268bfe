"""
Error types raised by the binding generator.

Only failures that prevent the whole run (or a whole write) are raised.
Per-type problems are reported as diagnostics and never propagate.
"""

from __future__ import annotations

from typing import Any


class BindableCodegenError(Exception):
    """Base class for all generator errors."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize for machine-readable CLI output."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class DeclarationError(BindableCodegenError):
    """Raised when the declaration model cannot be parsed.

    This is the only fatal analysis error: without a valid model the
    initial type scan cannot be constructed.
    """

    @classmethod
    def at(cls, path: str, reason: str) -> DeclarationError:
        return cls(f"Invalid declaration at {path}: {reason}", path=path, reason=reason)


class ConfigError(BindableCodegenError):
    """Configuration-related errors."""

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> ConfigError:
        return cls(
            f"Invalid value for '{field}': {reason}",
            field=field,
            value=str(value),
            reason=reason,
        )


class OutputError(BindableCodegenError):
    """Raised when generated output cannot be handed over.

    This can happen when:
    - The output file exists and the output mode forbids overwriting
    - The generated text fails structural validation before writing
    """
