"""
AST-based code generation backends.

The C# backend builds language-native AST nodes and serializes them.
"""

from __future__ import annotations

from .csharp_ast_backend import CSharpAstBackend
from .csharp_serializer import CSharpSerializer

__all__ = [
    "CSharpAstBackend",
    "CSharpSerializer",
]
