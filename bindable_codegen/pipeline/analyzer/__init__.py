"""
Analyzer module for the binding pipeline.

Contains the scanner, extractor, resolver and enum registry producing the IR.
"""

from __future__ import annotations

from .analyzer import BindingAnalyzer
from .diagnostics import Diagnostic, DiagnosticBag, Severity
from .enum_registry import EnumRegistry, describe_enum
from .extractor import MemberExtractor, TypeClassifier, derive_property_name
from .ir_nodes import (
    DispatchGroup,
    EnumAlias,
    EnumDescriptor,
    EnumValue,
    InjectionPoint,
    PropertyDescriptor,
    TypeDescriptor,
    ValueCategory,
)
from .resolver import InheritanceResolver
from .scanner import TypeScanner
from .session import GenerationSession

__all__ = [
    "BindingAnalyzer",
    "Diagnostic",
    "DiagnosticBag",
    "DispatchGroup",
    "EnumAlias",
    "EnumDescriptor",
    "EnumRegistry",
    "EnumValue",
    "GenerationSession",
    "InheritanceResolver",
    "InjectionPoint",
    "MemberExtractor",
    "PropertyDescriptor",
    "Severity",
    "TypeClassifier",
    "TypeDescriptor",
    "TypeScanner",
    "ValueCategory",
    "derive_property_name",
    "describe_enum",
]
