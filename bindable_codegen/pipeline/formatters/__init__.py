"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .ruff_formatter import RuffFormatter

__all__ = [
    "RuffFormatter",
]
