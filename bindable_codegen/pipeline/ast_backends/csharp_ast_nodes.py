"""
C# AST node definitions.

These nodes represent the structure of a generated C# partial type. They are
built by the C# backend and serialized to source code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class AccessModifier(str, Enum):
    """C# access modifiers."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"


class MemberModifier(str, Enum):
    """C# member modifiers."""

    NEW = "new"
    STATIC = "static"
    READONLY = "readonly"
    VIRTUAL = "virtual"
    OVERRIDE = "override"


@dataclass
class CSharpNode:
    """Base class for all C# AST nodes."""

    pass


@dataclass
class CSharpParameter(CSharpNode):
    """Represents a method parameter."""

    name: str = ""
    type_name: str = ""


@dataclass
class CSharpField(CSharpNode):
    """Represents a field, optionally initialized."""

    name: str = ""
    type_name: str = ""
    access: AccessModifier = AccessModifier.PRIVATE
    modifiers: list[MemberModifier] = field(default_factory=list)
    initializer: list[str] = field(default_factory=list)  # Lines of the initializer expression


@dataclass
class CSharpEvent(CSharpNode):
    """Represents an event declaration."""

    name: str = ""
    type_name: str = ""
    access: AccessModifier = AccessModifier.PUBLIC
    modifiers: list[MemberModifier] = field(default_factory=list)
    doc: list[str] = field(default_factory=list)


@dataclass
class CSharpProperty(CSharpNode):
    """Represents a property.

    ``expression`` makes it an expression-bodied property (``=> expr``).
    Otherwise ``getter`` and ``setter`` hold accessor body statements; a
    single-expression getter without statements is written as ``get => x;``.
    """

    name: str = ""
    type_name: str = ""
    access: AccessModifier = AccessModifier.PUBLIC
    modifiers: list[MemberModifier] = field(default_factory=list)
    expression: str | None = None
    getter: list[str] = field(default_factory=list)
    getter_expression: str | None = None
    setter: list[str] | None = None
    doc: list[str] = field(default_factory=list)


@dataclass
class CSharpStaticConstructor(CSharpNode):
    """Represents a static constructor."""

    class_name: str = ""
    body: list[str] = field(default_factory=list)


@dataclass
class CSharpMethod(CSharpNode):
    """Represents a method."""

    name: str = ""
    return_type: str = "void"
    access: AccessModifier = AccessModifier.PUBLIC
    modifiers: list[MemberModifier] = field(default_factory=list)
    parameters: list[CSharpParameter] = field(default_factory=list)
    body: list[str] = field(default_factory=list)


@dataclass
class CSharpPartialType(CSharpNode):
    """Represents the generated half of a partial class or struct."""

    name: str = ""
    kind: str = "class"
    # Declared modifiers, re-emitted verbatim (e.g. ["public", "sealed", "partial"])
    modifiers: list[str] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    fields: list[CSharpField] = field(default_factory=list)
    properties: list[CSharpProperty] = field(default_factory=list)
    events: list[CSharpEvent] = field(default_factory=list)
    static_constructor: CSharpStaticConstructor | None = None
    accessors: list[CSharpProperty] = field(default_factory=list)
    methods: list[CSharpMethod] = field(default_factory=list)


@dataclass
class CSharpFile(CSharpNode):
    """Represents a complete C# source file."""

    header: list[str] = field(default_factory=list)
    namespace: str | None = None  # Optional namespace to wrap all types
    types: list[CSharpPartialType] = field(default_factory=list)
