"""
Type scanner.

Finds the annotated, generation-eligible type declarations and builds the
program-wide map of type descriptors.
"""

from __future__ import annotations

import structlog

from ..declarations.nodes import AttributeNode, TypeNode
from .diagnostics import BAD_ACCESSIBILITY, NESTED_TYPE, NOT_PARTIAL, Severity
from .ir_nodes import TypeDescriptor
from .session import GenerationSession

logger = structlog.get_logger()

BINDABLE = "Bindable"
AUTO_NOTIFY = "AutoNotify"

BINDABLE_ACCESSIBILITY = ("public", "internal")
NOTIFY_ONLY_ACCESSIBILITY = ("public",)


def named_flag(attribute: AttributeNode | None, name: str) -> bool:
    """Read a boolean named annotation argument."""
    if attribute is None:
        return False
    value = attribute.named.get(name, False)
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class TypeScanner:
    """Scans the declaration model for types to generate."""

    def __init__(self, session: GenerationSession):
        self.session = session
        self.compilation = session.compilation

    def scan(self) -> dict[str, TypeDescriptor]:
        """
        Populate the session's type map.

        Returns:
            Map of type full name to descriptor, in declaration order
        """
        ignored = set(self.session.config.ignore_types)

        for node in self.compilation.types:
            if node.full_name in ignored:
                logger.debug("type_ignored", type_name=node.full_name)
                continue

            bindable = node.find_attribute(BINDABLE)
            if bindable is not None:
                notify_only = False
            elif any(f.has_attribute(AUTO_NOTIFY) for f in node.fields):
                notify_only = True
            else:
                continue

            if not self._is_eligible(node, notify_only):
                continue

            self.session.types[node.full_name] = self._describe(node, bindable, notify_only)

        logger.debug("scan_complete", types=len(self.session.types))
        return self.session.types

    def _is_eligible(self, node: TypeNode, notify_only: bool) -> bool:
        annotation = AUTO_NOTIFY if notify_only else BINDABLE
        allowed = NOTIFY_ONLY_ACCESSIBILITY if notify_only else BINDABLE_ACCESSIBILITY

        if node.containing_type:
            code, message = NESTED_TYPE, f"'{node.full_name}' uses [{annotation}] but is nested in '{node.containing_type}'"
        elif "partial" not in node.modifiers:
            code, message = NOT_PARTIAL, f"'{node.full_name}' uses [{annotation}] but is not declared partial"
        elif node.accessibility not in allowed:
            code, message = BAD_ACCESSIBILITY, f"'{node.full_name}' uses [{annotation}] but is {node.accessibility}; expected {' or '.join(allowed)}"
        else:
            return True

        self.session.diagnostics.report(code, Severity.WARNING, message, type_name=node.full_name)
        return False

    def _describe(self, node: TypeNode, bindable: AttributeNode | None, notify_only: bool) -> TypeDescriptor:
        descriptor = TypeDescriptor(
            full_name=node.full_name,
            simple_name=node.name,
            namespace=node.namespace,
            is_value_type=node.is_struct,
            is_sealed=node.is_struct or "sealed" in node.modifiers,
            modifiers=list(node.modifiers),
            notify_only=notify_only,
            use_change_event=named_flag(bindable, "OnPropertyChanged"),
            declaration=node,
        )
        if notify_only or node.is_struct:
            return descriptor

        descriptor.base_type_chain = self.base_type_chain(node)
        for ancestor_name in descriptor.base_type_chain:
            ancestor = self.compilation.get_type(ancestor_name)
            if ancestor is None:
                continue
            ancestor_bindable = ancestor.find_attribute(BINDABLE)
            if ancestor_bindable is None:
                continue
            descriptor.ancestor_already_implements = True
            if descriptor.nearest_bindable_ancestor is None:
                descriptor.nearest_bindable_ancestor = ancestor_name
            if named_flag(ancestor_bindable, "OnPropertyChanged"):
                descriptor.ancestor_declared_change_event = True
        return descriptor

    def base_type_chain(self, node: TypeNode) -> list[str]:
        """Ancestor full names, nearest first.

        The walk follows declared classes; an undeclared base is recorded and
        ends the walk.
        """
        chain: list[str] = []
        current = node
        while current.base:
            base = self.resolve_type_name(current.base, current.namespace)
            if base in chain or base == node.full_name:
                break
            chain.append(base)
            declared = self.compilation.get_type(base)
            if declared is None or declared.is_struct:
                break
            current = declared
        return chain

    def resolve_type_name(self, name: str, context_namespace: str | None) -> str:
        """Resolve a type reference by full name, then relative to a namespace."""
        if self.compilation.get_type(name) is None and context_namespace:
            relative = f"{context_namespace}.{name}"
            if self.compilation.get_type(relative) is not None:
                return relative
        return name
