"""
Member extractor.

Turns the own fields of an eligible type into property descriptors:
classifies each declared type, derives the public property name and
collects the field-level annotations.
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from ..declarations.nodes import EnumNode, FieldNode
from .diagnostics import DUPLICATE_PROPERTY_NAME, Severity
from .enum_registry import describe_enum
from .ir_nodes import InjectionPoint, PropertyDescriptor, TypeDescriptor, ValueCategory
from .scanner import AUTO_NOTIFY
from .session import GenerationSession

logger = structlog.get_logger()

SCALAR_TYPES = {
    "int": ValueCategory.INT,
    "System.Int32": ValueCategory.INT,
    "float": ValueCategory.FLOAT,
    "System.Single": ValueCategory.FLOAT,
    "bool": ValueCategory.BOOL,
    "System.Boolean": ValueCategory.BOOL,
    "string": ValueCategory.STRING,
    "System.String": ValueCategory.STRING,
}

LIST_CATEGORIES = {
    ValueCategory.INT: ValueCategory.LIST_INT,
    ValueCategory.FLOAT: ValueCategory.LIST_FLOAT,
    ValueCategory.BOOL: ValueCategory.LIST_BOOL,
    ValueCategory.STRING: ValueCategory.LIST_STRING,
    ValueCategory.OPAQUE_RESOURCE: ValueCategory.LIST_OPAQUE_RESOURCE,
    ValueCategory.ENUM: ValueCategory.LIST_ENUM,
    ValueCategory.FLAGS_ENUM: ValueCategory.LIST_ENUM,
}

LIST_PATTERN = re.compile(r"^(?:System\.Collections\.Generic\.)?List\s*<\s*(.+?)\s*>$")

INJECTION_POINTS = {
    "OnGet": InjectionPoint.ON_GET,
    "OnSetBeforeChange": InjectionPoint.ON_SET_BEFORE_CHANGE,
    "OnSetAfterChange": InjectionPoint.ON_SET_AFTER_CHANGE,
    "Get": InjectionPoint.ON_GET,
    "Set_BeforeChanged": InjectionPoint.ON_SET_BEFORE_CHANGE,
    "Set_AfterChanged": InjectionPoint.ON_SET_AFTER_CHANGE,
}
INJECTION_ORDINALS = [
    InjectionPoint.ON_GET,
    InjectionPoint.ON_SET_BEFORE_CHANGE,
    InjectionPoint.ON_SET_AFTER_CHANGE,
]

NAME_PREFIXES = ("m_", "_")


def derive_property_name(field_name: str) -> str:
    """Strip one leading ``_`` or ``m_`` and uppercase the first character."""
    name = field_name
    for prefix in NAME_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix) :]
            break
    if not name:
        return ""
    return name[0].upper() + name[1:]


def parse_injection_point(value: Any) -> InjectionPoint | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return INJECTION_ORDINALS[value] if 0 <= value < len(INJECTION_ORDINALS) else None
    if isinstance(value, str):
        # Accept qualified spellings such as "InjectType.Set_AfterChanged"
        return INJECTION_POINTS.get(value.rsplit(".", 1)[-1])
    return None


def split_statements(code: str) -> list[str]:
    return [s.strip() for s in code.split(";") if s.strip()]


class TypeClassifier:
    """Maps declared type names to value categories."""

    def __init__(self, session: GenerationSession):
        self.compilation = session.compilation
        self.opaque_types = set(session.config.opaque_resource_types)

    def classify(self, type_name: str, context_namespace: str | None) -> tuple[ValueCategory, EnumNode | None]:
        """
        Classify a declared type.

        Returns:
            The category and, for enum and enum-list categories, the enum
        """
        type_name = type_name.strip()

        match = LIST_PATTERN.match(type_name)
        if match:
            element, enum = self._classify_scalar(match.group(1), context_namespace)
            return LIST_CATEGORIES.get(element, ValueCategory.UNSUPPORTED), enum

        return self._classify_scalar(type_name, context_namespace)

    def _classify_scalar(self, type_name: str, context_namespace: str | None) -> tuple[ValueCategory, EnumNode | None]:
        if type_name in SCALAR_TYPES:
            return SCALAR_TYPES[type_name], None
        if type_name in self.opaque_types:
            return ValueCategory.OPAQUE_RESOURCE, None

        enum = self.compilation.find_enum(type_name, context_namespace)
        if enum is not None:
            return (ValueCategory.FLAGS_ENUM if enum.is_flags else ValueCategory.ENUM), enum

        return ValueCategory.UNSUPPORTED, None


class MemberExtractor:
    """Extracts the own bindable members of a type."""

    def __init__(self, session: GenerationSession):
        self.session = session
        self.classifier = TypeClassifier(session)

    def extract(self, type_desc: TypeDescriptor) -> list[PropertyDescriptor]:
        """
        Fill ``own_properties`` of a type.

        Suppressed members are kept with ``suppress_notify`` set; they take
        no part in name checks and register no enums.
        """
        node = type_desc.declaration
        used_names: set[str] = set()
        own: list[PropertyDescriptor] = []

        for field_node in node.fields:
            if type_desc.notify_only and not field_node.has_attribute(AUTO_NOTIFY):
                continue

            category, enum = self.classifier.classify(field_node.type_name, node.namespace)
            if category == ValueCategory.UNSUPPORTED:
                logger.debug("field_skipped", type_name=type_desc.full_name, field=field_node.name, declared_type=field_node.type_name)
                continue

            prop = PropertyDescriptor(
                field_name=field_node.name,
                category=category,
                declared_type_name=field_node.type_name,
                is_enum=category.is_enum,
                enum_full_name=enum.full_name if enum is not None else None,
                comment=field_node.doc,
            )
            if type_desc.notify_only:
                rename = field_node.find_attribute(AUTO_NOTIFY).named.get("PropertyName")
            else:
                rename = self._apply_annotations(prop, field_node)

            prop.property_name = rename or derive_property_name(field_node.name)
            if not prop.property_name or prop.property_name == field_node.name:
                logger.debug("field_name_not_derivable", type_name=type_desc.full_name, field=field_node.name)
                continue

            if not prop.suppress_notify:
                if prop.property_name in used_names:
                    self.session.diagnostics.report(
                        DUPLICATE_PROPERTY_NAME,
                        Severity.WARNING,
                        f"field '{field_node.name}' maps to property '{prop.property_name}' which is already generated",
                        type_name=type_desc.full_name,
                    )
                    continue
                used_names.add(prop.property_name)

                if enum is not None and not type_desc.notify_only:
                    self.session.enums.register(describe_enum(enum))

            own.append(prop)

        type_desc.own_properties = own
        return own

    def _apply_annotations(self, prop: PropertyDescriptor, field_node: FieldNode) -> str | None:
        """Collect field annotations into the descriptor; returns an explicit rename."""
        rename = None
        for attribute in field_node.attributes:
            name = attribute.short_name
            if name == "PropertyName" and attribute.arguments:
                rename = str(attribute.arguments[0])
            elif name == "DontNotify":
                prop.suppress_notify = True
            elif name == "AlsoNotify":
                prop.also_notify.extend(str(arg) for arg in attribute.arguments if str(arg).strip())
            elif name == "CodeInject":
                self._add_injection(prop, field_node, attribute.arguments, attribute.named)
        return rename

    def _add_injection(self, prop: PropertyDescriptor, field_node: FieldNode, arguments: list[Any], named: dict[str, Any]) -> None:
        point_value = arguments[0] if arguments else named.get("Type")
        code = arguments[1] if len(arguments) > 1 else named.get("Code", "")

        point = parse_injection_point(point_value)
        if point is None:
            logger.warning("unknown_injection_point", field=field_node.name, point=point_value)
            return

        statements = split_statements(str(code))
        if statements:
            prop.injected_code.setdefault(point, []).extend(statements)
