"""
Diagnostics reported during analysis.

Diagnostics never abort a run. They are collected for the caller and logged
as they are reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import structlog

logger = structlog.get_logger()


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# Diagnostic codes
NESTED_TYPE = "BG001"
NOT_PARTIAL = "BG002"
BAD_ACCESSIBILITY = "BG003"
DUPLICATE_PROPERTY_NAME = "BG004"
UNKNOWN_ALSO_NOTIFY_TARGET = "BG005"


@dataclass(frozen=True)
class Diagnostic:
    code: str
    severity: Severity
    message: str
    type_name: str | None = None

    def __str__(self) -> str:
        location = f" [{self.type_name}]" if self.type_name else ""
        return f"{self.severity.value} {self.code}{location}: {self.message}"


@dataclass
class DiagnosticBag:
    """Collects diagnostics for one generation run."""

    items: list[Diagnostic] = field(default_factory=list)

    def report(self, code: str, severity: Severity, message: str, type_name: str | None = None) -> Diagnostic:
        diagnostic = Diagnostic(code=code, severity=severity, message=message, type_name=type_name)
        self.items.append(diagnostic)

        log = getattr(logger, severity.value)
        log("diagnostic", code=code, message=message, type_name=type_name)
        return diagnostic

    def by_code(self, code: str) -> list[Diagnostic]:
        return [d for d in self.items if d.code == code]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.WARNING]

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
