"""
Enum metadata registry.

Global, append-only table of the enums referenced by bindable members. Each
descriptor is handed to exactly one emitted type per run: a type claims the
enums of its own Enum/FlagsEnum members, and the claim is committed once the
type was emitted successfully.
"""

from __future__ import annotations

from ..declarations.nodes import EnumNode
from .ir_nodes import EnumAlias, EnumDescriptor, EnumValue, TypeDescriptor

NO_LOCALE = "None"


def describe_enum(node: EnumNode) -> EnumDescriptor:
    """Build the metadata descriptor of a declared enum."""
    values = []
    for member in node.members:
        aliases = []
        for attribute in member.find_attributes("EnumAlias"):
            args = attribute.arguments
            if len(args) == 1:
                aliases.append(EnumAlias(locale=NO_LOCALE, text=str(args[0])))
            elif len(args) == 2:
                aliases.append(EnumAlias(locale=str(args[0]), text=str(args[1])))
        values.append(EnumValue(int_value=member.value, name=member.name, aliases=aliases))

    return EnumDescriptor(
        full_name=node.full_name,
        simple_name=node.name,
        is_flags=node.is_flags,
        values=values,
    )


class EnumRegistry:
    """Deduplicated enum descriptors plus the set already written out."""

    def __init__(self):
        self._descriptors: dict[str, EnumDescriptor] = {}
        self._emitted: set[str] = set()

    def register(self, descriptor: EnumDescriptor) -> bool:
        """Register an enum on first reference.

        Returns:
            True if the enum was not known yet
        """
        if descriptor.full_name in self._descriptors:
            return False
        self._descriptors[descriptor.full_name] = descriptor
        return True

    def get(self, full_name: str) -> EnumDescriptor | None:
        return self._descriptors.get(full_name)

    def __contains__(self, full_name: str) -> bool:
        return full_name in self._descriptors

    def __iter__(self):
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def is_emitted(self, full_name: str) -> bool:
        return full_name in self._emitted

    def claim(self, type_desc: TypeDescriptor) -> list[EnumDescriptor]:
        """Enums whose registration block the given type would carry."""
        claimed: list[EnumDescriptor] = []
        for prop in type_desc.generated_properties:
            if not prop.category.is_enum or prop.enum_full_name is None:
                continue
            descriptor = self._descriptors.get(prop.enum_full_name)
            if descriptor is None or descriptor.full_name in self._emitted or descriptor in claimed:
                continue
            claimed.append(descriptor)
        return claimed

    def commit(self, claimed: list[EnumDescriptor]) -> None:
        """Mark claimed enums as written; they will not be claimed again."""
        self._emitted.update(d.full_name for d in claimed)
