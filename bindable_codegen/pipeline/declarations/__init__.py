"""
Declaration model module.

Contains the declaration nodes and the parser building them.
"""

from __future__ import annotations

from .nodes import (
    AttributeNode,
    Compilation,
    EnumMemberNode,
    EnumNode,
    FieldNode,
    PropertyNode,
    TypeNode,
    normalize_attribute_name,
)
from .parser import DeclarationParser

__all__ = [
    "AttributeNode",
    "Compilation",
    "DeclarationParser",
    "EnumMemberNode",
    "EnumNode",
    "FieldNode",
    "PropertyNode",
    "TypeNode",
    "normalize_attribute_name",
]
