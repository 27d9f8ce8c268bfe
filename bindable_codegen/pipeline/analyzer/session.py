"""
Per-run generation state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import CodeGeneratorConfig
from ..declarations.nodes import Compilation
from .diagnostics import DiagnosticBag
from .enum_registry import EnumRegistry
from .ir_nodes import TypeDescriptor


@dataclass
class GenerationSession:
    """Everything one invocation knows, discarded when it ends.

    Attributes:
        compilation: The parsed declaration model
        config: Generator configuration
        types: Eligible types by full name, in declaration order
        resolution_order: Full names of resolved types, ancestors first
        enums: Enum metadata registry
        diagnostics: Reported diagnostics
        omitted: Full names of types dropped after an unexpected failure
    """

    compilation: Compilation
    config: CodeGeneratorConfig = field(default_factory=CodeGeneratorConfig)
    types: dict[str, TypeDescriptor] = field(default_factory=dict)
    resolution_order: list[str] = field(default_factory=list)
    enums: EnumRegistry = field(default_factory=EnumRegistry)
    diagnostics: DiagnosticBag = field(default_factory=DiagnosticBag)
    omitted: list[str] = field(default_factory=list)

    def resolved_types(self) -> list[TypeDescriptor]:
        return [self.types[name] for name in self.resolution_order if name in self.types]
