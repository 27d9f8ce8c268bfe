"""
IR (Intermediate Representation) node definitions.

These nodes represent the analyzed and resolved bindings, ready for code
generation. Member categories are classified, names derived and inherited
members merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..declarations.nodes import TypeNode


class ValueCategory(Enum):
    """Value category of a bindable member."""

    INT = "Int"
    FLOAT = "Float"
    BOOL = "Bool"
    STRING = "String"
    OPAQUE_RESOURCE = "OpaqueResource"  # e.g. sprites
    ENUM = "Enum"
    FLAGS_ENUM = "FlagsEnum"
    LIST_INT = "ListInt"
    LIST_FLOAT = "ListFloat"
    LIST_BOOL = "ListBool"
    LIST_STRING = "ListString"
    LIST_OPAQUE_RESOURCE = "ListOpaqueResource"
    LIST_ENUM = "ListEnum"
    UNSUPPORTED = "Unsupported"

    @property
    def is_enum(self) -> bool:
        return self in (ValueCategory.ENUM, ValueCategory.FLAGS_ENUM)

    @property
    def is_list(self) -> bool:
        return self.value.startswith("List")

    @property
    def dispatch_group(self) -> DispatchGroup | None:
        """The name-keyed setter this category is routed through, if any."""
        return _DISPATCH_GROUPS.get(self)


class DispatchGroup(Enum):
    """The four name-keyed setters, keyed by incoming value type."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"


_DISPATCH_GROUPS = {
    ValueCategory.INT: DispatchGroup.INT,
    ValueCategory.ENUM: DispatchGroup.INT,
    ValueCategory.FLAGS_ENUM: DispatchGroup.INT,
    ValueCategory.FLOAT: DispatchGroup.FLOAT,
    ValueCategory.STRING: DispatchGroup.STRING,
    ValueCategory.BOOL: DispatchGroup.BOOL,
}


class InjectionPoint(Enum):
    """Where an injected statement is placed inside an accessor."""

    ON_GET = "OnGet"
    ON_SET_BEFORE_CHANGE = "OnSetBeforeChange"
    ON_SET_AFTER_CHANGE = "OnSetAfterChange"


@dataclass
class PropertyDescriptor:
    """A single bindable member."""

    field_name: str = ""  # Empty for inherited-only members
    property_name: str = ""
    category: ValueCategory = ValueCategory.UNSUPPORTED
    declared_type_name: str = ""
    is_enum: bool = False
    is_inherited: bool = False

    # Full name of the enum for Enum, FlagsEnum and ListEnum members
    enum_full_name: str | None = None

    also_notify: list[str] = field(default_factory=list)
    injected_code: dict[InjectionPoint, list[str]] = field(default_factory=dict)
    suppress_notify: bool = False

    # Own member hiding a same-named ancestor member
    shadows_inherited: bool = False

    # Field documentation carried to the accessor
    comment: str | None = None

    def injections(self, point: InjectionPoint) -> list[str]:
        return self.injected_code.get(point, [])

    def as_inherited(self) -> PropertyDescriptor:
        """Copy of this descriptor as seen from a descendant type."""
        return PropertyDescriptor(
            property_name=self.property_name,
            category=self.category,
            declared_type_name=self.declared_type_name,
            is_enum=self.is_enum,
            is_inherited=True,
            enum_full_name=self.enum_full_name,
        )


@dataclass
class TypeDescriptor:
    """A generation-eligible type and everything known about it."""

    full_name: str = ""
    simple_name: str = ""
    namespace: str | None = None
    is_value_type: bool = False
    is_sealed: bool = False
    modifiers: list[str] = field(default_factory=list)

    ancestor_already_implements: bool = False
    ancestor_declared_change_event: bool = False
    use_change_event: bool = False
    notify_only: bool = False

    # Ancestor full names, nearest first (classes only)
    base_type_chain: list[str] = field(default_factory=list)
    nearest_bindable_ancestor: str | None = None

    own_properties: list[PropertyDescriptor] = field(default_factory=list)
    merged_properties: list[PropertyDescriptor] = field(default_factory=list)

    declaration: TypeNode | None = None

    @property
    def generated_properties(self) -> list[PropertyDescriptor]:
        """Own members that get an accessor."""
        return [p for p in self.merged_properties if not p.is_inherited]

    def find_merged(self, property_name: str) -> PropertyDescriptor | None:
        for prop in self.merged_properties:
            if prop.property_name == property_name:
                return prop
        return None


@dataclass
class EnumAlias:
    """A localized display text for an enum value."""

    locale: str = "None"
    text: str = ""


@dataclass
class EnumValue:
    """A single enum value with its aliases."""

    int_value: int = 0
    name: str = ""
    aliases: list[EnumAlias] = field(default_factory=list)


@dataclass
class EnumDescriptor:
    """Metadata of an enum referenced by a bindable member."""

    full_name: str = ""
    simple_name: str = ""
    is_flags: bool = False
    values: list[EnumValue] = field(default_factory=list)

