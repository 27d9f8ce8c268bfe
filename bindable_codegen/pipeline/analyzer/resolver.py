"""
Inheritance resolver.

Merges each type's own members with what it inherits: hand-written
properties of the type and its declared ancestors, and the merged members of
ancestors generated in the same run.
"""

from __future__ import annotations

import structlog

from ..declarations.nodes import TypeNode
from .diagnostics import UNKNOWN_ALSO_NOTIFY_TARGET, Severity
from .extractor import TypeClassifier
from .ir_nodes import PropertyDescriptor, TypeDescriptor, ValueCategory
from .session import GenerationSession

logger = structlog.get_logger()

GET_ACCESSIBLE = ("public", "protected")


class InheritanceResolver:
    """Resolves merged member lists, ancestors before descendants."""

    def __init__(self, session: GenerationSession):
        self.session = session
        self.classifier = TypeClassifier(session)

    def resolution_order(self) -> list[str]:
        """Depth-first order placing every processed ancestor before its descendants."""
        types = self.session.types
        order: list[str] = []
        visited: set[str] = set()

        def visit(name: str) -> None:
            if name in visited:
                return
            visited.add(name)
            for ancestor in reversed(types[name].base_type_chain):
                if ancestor in types:
                    visit(ancestor)
            order.append(name)

        for name in types:
            visit(name)
        return order

    def resolve(self, type_desc: TypeDescriptor) -> list[PropertyDescriptor]:
        """Fill ``merged_properties`` of a type whose ancestors are resolved."""
        merged = [p for p in type_desc.own_properties if not p.suppress_notify]
        if type_desc.notify_only:
            type_desc.merged_properties = merged
            return merged

        names = {p.property_name for p in merged}
        ancestor_names: set[str] = set()

        def inherit(prop: PropertyDescriptor, from_ancestor: bool) -> None:
            if from_ancestor:
                ancestor_names.add(prop.property_name)
            if prop.property_name in names:
                return
            names.add(prop.property_name)
            merged.append(prop)

        # Hand-written properties of the type itself, then of its declared ancestors
        node = type_desc.declaration
        declarations: list[tuple[TypeNode, bool]] = [(node, False)]
        for ancestor_name in type_desc.base_type_chain:
            ancestor = self.session.compilation.get_type(ancestor_name)
            if ancestor is not None and not ancestor.is_struct:
                declarations.append((ancestor, True))

        for declaration, from_ancestor in declarations:
            for prop in self._hand_written(declaration):
                inherit(prop, from_ancestor)

        # Members of ancestors generated in this run
        for ancestor_name in type_desc.base_type_chain:
            ancestor_desc = self.session.types.get(ancestor_name)
            if ancestor_desc is None:
                continue
            for prop in ancestor_desc.merged_properties:
                inherit(prop.as_inherited(), True)

        for prop in merged:
            if not prop.is_inherited and prop.property_name in ancestor_names:
                prop.shadows_inherited = True

        type_desc.merged_properties = merged
        self._check_also_notify(type_desc)
        return merged

    def _hand_written(self, declaration: TypeNode) -> list[PropertyDescriptor]:
        found = []
        for prop in declaration.properties:
            if prop.getter not in GET_ACCESSIBLE:
                continue
            category, enum = self.classifier.classify(prop.type_name, declaration.namespace)
            if category == ValueCategory.UNSUPPORTED:
                continue
            found.append(
                PropertyDescriptor(
                    property_name=prop.name,
                    category=category,
                    declared_type_name=prop.type_name,
                    is_enum=category.is_enum,
                    is_inherited=True,
                    enum_full_name=enum.full_name if enum is not None else None,
                )
            )
        return found

    def _check_also_notify(self, type_desc: TypeDescriptor) -> None:
        for prop in type_desc.generated_properties:
            for target in prop.also_notify:
                if type_desc.find_merged(target) is None:
                    self.session.diagnostics.report(
                        UNKNOWN_ALSO_NOTIFY_TARGET,
                        Severity.INFO,
                        f"property '{prop.property_name}' also notifies unknown member '{target}'",
                        type_name=type_desc.full_name,
                    )
