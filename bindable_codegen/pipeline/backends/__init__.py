"""
Code generation backends.

Each backend renders analyzed types for one target language.
"""

from __future__ import annotations

from .base import CodeBackend, MethodFlavor
from .python_backend import PythonBackend

__all__ = [
    "CodeBackend",
    "MethodFlavor",
    "PythonBackend",
]
