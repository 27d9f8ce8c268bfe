"""
Pipeline - multi-phase binding code generator.

1. Phase 1 (Parser): Parse the JSON declaration model into declaration nodes
2. Phase 2 (Analyzer): Scan eligible types, extract members, resolve inheritance
3. Phase 3 (Backend): Render each type (C# AST or Python templates)
4. Phase 4 (Formatter): Optional post-processing (ruff for Python)
5. Phase 5 (Output): Atomic, validated writes
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .generator import BindingGenerator, GenerationResult
from .output import AtomicWriter

__all__ = [
    "AtomicWriter",
    "BindingGenerator",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "GenerationResult",
    "OutputConfig",
    "OutputMode",
]
