"""
Declaration node definitions.

These nodes represent the program's type declarations as handed over by the
host build: types, their fields and hand-written properties, enums, and the
annotations attached to each. Annotation syntax is already resolved; nothing
here is analyzed yet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def normalize_attribute_name(name: str) -> str:
    """Reduce an annotation name to its short form.

    ``UniVue.Model.BindableAttribute`` and ``Bindable`` both become
    ``Bindable``.
    """
    short = name.rsplit(".", 1)[-1]
    if short.endswith("Attribute") and len(short) > len("Attribute"):
        short = short[: -len("Attribute")]
    return short


@dataclass
class AttributeNode:
    """An annotation with its positional and named arguments."""

    name: str = ""
    arguments: list[Any] = field(default_factory=list)
    named: dict[str, Any] = field(default_factory=dict)

    @property
    def short_name(self) -> str:
        return normalize_attribute_name(self.name)


@dataclass
class DeclarationNode:
    """Base class for all declaration nodes."""

    # Location in the declaration model (for error messages)
    source_path: str = ""

    attributes: list[AttributeNode] = field(default_factory=list)

    def find_attributes(self, short_name: str) -> list[AttributeNode]:
        return [a for a in self.attributes if a.short_name == short_name]

    def find_attribute(self, short_name: str) -> AttributeNode | None:
        for attribute in self.attributes:
            if attribute.short_name == short_name:
                return attribute
        return None

    def has_attribute(self, short_name: str) -> bool:
        return self.find_attribute(short_name) is not None


@dataclass
class FieldNode(DeclarationNode):
    """A field declared directly on a type."""

    name: str = ""
    type_name: str = ""
    doc: str | None = None
    modifiers: list[str] = field(default_factory=list)


@dataclass
class PropertyNode(DeclarationNode):
    """A hand-written property declared on a type."""

    name: str = ""
    type_name: str = ""
    # Accessibility of the getter, None when the property has no getter
    getter: str | None = "public"


@dataclass
class TypeNode(DeclarationNode):
    """A class or struct declaration."""

    name: str = ""
    namespace: str | None = None
    kind: str = "class"  # "class" or "struct"
    modifiers: list[str] = field(default_factory=list)
    # Full name of the enclosing type for nested declarations
    containing_type: str | None = None
    # Full name of the base class, if any
    base: str | None = None
    fields: list[FieldNode] = field(default_factory=list)
    properties: list[PropertyNode] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        if self.containing_type:
            return f"{self.containing_type}.{self.name}"
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def is_struct(self) -> bool:
        return self.kind == "struct"

    @property
    def accessibility(self) -> str:
        for modifier in ("public", "internal", "protected", "private", "file"):
            if modifier in self.modifiers:
                return modifier
        return "internal"


@dataclass
class EnumMemberNode(DeclarationNode):
    """A single enum member."""

    name: str = ""
    value: int = 0


@dataclass
class EnumNode(DeclarationNode):
    """An enum declaration."""

    name: str = ""
    namespace: str | None = None
    members: list[EnumMemberNode] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def is_flags(self) -> bool:
        return self.has_attribute("Flags")


@dataclass
class Compilation:
    """The complete declaration model of one program."""

    types: list[TypeNode] = field(default_factory=list)
    enums: list[EnumNode] = field(default_factory=list)

    def __post_init__(self):
        self._types_by_name: dict[str, TypeNode] = {}
        self._enums_by_name: dict[str, EnumNode] = {}
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the name lookup tables after the lists were modified."""
        self._types_by_name = {t.full_name: t for t in self.types}
        self._enums_by_name = {e.full_name: e for e in self.enums}

    def get_type(self, full_name: str) -> TypeNode | None:
        return self._types_by_name.get(full_name)

    def find_enum(self, type_name: str, context_namespace: str | None = None) -> EnumNode | None:
        """Resolve an enum reference by full name, then relative to a namespace."""
        found = self._enums_by_name.get(type_name)
        if found is None and context_namespace:
            found = self._enums_by_name.get(f"{context_namespace}.{type_name}")
        return found
