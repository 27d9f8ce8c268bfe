"""Bindable Code Generator

Generates change-notifying accessors, static metadata tables and
name-dispatched setters for annotated types. Emits C# partial types or
Python binding mixins.
"""

__version__ = "0.3.0"

from .errors import BindableCodegenError, ConfigError, DeclarationError, OutputError
from .pipeline import (
    AtomicWriter,
    BindingGenerator,
    CodeGeneratorConfig,
    FormatterConfig,
    GenerationResult,
    OutputConfig,
    OutputMode,
)

__all__ = [
    "AtomicWriter",
    "BindableCodegenError",
    "BindingGenerator",
    "CodeGeneratorConfig",
    "ConfigError",
    "DeclarationError",
    "FormatterConfig",
    "GenerationResult",
    "OutputConfig",
    "OutputError",
    "OutputMode",
]
