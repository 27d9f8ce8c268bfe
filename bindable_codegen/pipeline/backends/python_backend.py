"""
Python code generation backend.

Renders one module of binding mixins from Jinja2 templates. Each bindable
type gets a ``<Name>Bindable`` mixin implementing the runtime contract; the
user's class combines it with its own base and holds the backing fields.
"""

from __future__ import annotations

import json
import keyword
from collections import Counter
from typing import Any

from ..analyzer.enum_registry import describe_enum
from ..analyzer.ir_nodes import (
    DispatchGroup,
    EnumDescriptor,
    InjectionPoint,
    PropertyDescriptor,
    TypeDescriptor,
    ValueCategory,
)
from .base import CodeBackend, MethodFlavor

SCALAR_HINTS = {
    ValueCategory.INT: "int",
    ValueCategory.FLOAT: "float",
    ValueCategory.BOOL: "bool",
    ValueCategory.STRING: "str",
    ValueCategory.OPAQUE_RESOURCE: "typing.Any",
}

LIST_ELEMENTS = {
    ValueCategory.LIST_INT: ValueCategory.INT,
    ValueCategory.LIST_FLOAT: ValueCategory.FLOAT,
    ValueCategory.LIST_BOOL: ValueCategory.BOOL,
    ValueCategory.LIST_STRING: ValueCategory.STRING,
    ValueCategory.LIST_OPAQUE_RESOURCE: ValueCategory.OPAQUE_RESOURCE,
}

DISPATCH_METHODS = {
    DispatchGroup.INT: ("update_model_int", "int"),
    DispatchGroup.FLOAT: ("update_model_float", "float"),
    DispatchGroup.STRING: ("update_model_str", "str"),
    DispatchGroup.BOOL: ("update_model_bool", "bool"),
}


def python_literal(value: str) -> str:
    """Double-quoted Python string literal."""
    return json.dumps(value, ensure_ascii=False)


def python_name(name: str) -> str:
    """Escape identifiers that are Python keywords."""
    if keyword.iskeyword(name) or keyword.issoftkeyword(name):
        return f"{name}_"
    return name


def docstring_text(comment: str | None) -> str | None:
    if not comment:
        return None
    return " ".join(comment.split()).replace('"', "'").replace("\\", "\\\\")


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    def __init__(self, config, session):
        super().__init__(config, session)
        self.jinja_env.filters["pystr"] = python_literal
        self.prefix_template = self.jinja_env.get_template("prefix.py.jinja2")
        self.enum_template = self.jinja_env.get_template("enum.py.jinja2")
        self.class_template = self.jinja_env.get_template("class.py.jinja2")

        self.mixin_names = self._mixin_names(list(session.types.values()))
        self.known_enums = self._known_enums(list(session.types.values()))
        self.enum_names = self._enum_names(self.known_enums, set(self.mixin_names.values()))

    def _mixin_names(self, types: list[TypeDescriptor]) -> dict[str, str]:
        counts = Counter(t.simple_name for t in types)
        suffix = self.config.python_mixin_suffix
        names = {}
        for t in types:
            base = t.simple_name if counts[t.simple_name] == 1 else self.identifier(t.full_name)
            names[t.full_name] = python_name(f"{base}{suffix}")
        return names

    def _known_enums(self, types: list[TypeDescriptor]) -> list[EnumDescriptor]:
        """Registered enums, then enums only notify-only members refer to."""
        known = {e.full_name: e for e in self.session.enums}
        for t in types:
            for prop in t.own_properties:
                if prop.enum_full_name and prop.enum_full_name not in known:
                    node = self.session.compilation.find_enum(prop.enum_full_name)
                    if node is not None:
                        known[prop.enum_full_name] = describe_enum(node)
        return list(known.values())

    def _enum_names(self, enums: list[EnumDescriptor], taken: set[str]) -> dict[str, str]:
        counts = Counter(e.simple_name for e in enums)
        names = {}
        for e in enums:
            unique = counts[e.simple_name] == 1 and e.simple_name not in taken
            names[e.full_name] = python_name(e.simple_name if unique else self.identifier(e.full_name))
        return names

    def mixin_name(self, type_desc: TypeDescriptor) -> str:
        return self.mixin_names[type_desc.full_name]

    def enum_name(self, full_name: str) -> str:
        return self.enum_names[full_name]

    def type_hint(self, prop: PropertyDescriptor) -> str:
        if prop.category.is_enum:
            return self.enum_name(prop.enum_full_name)
        if prop.category == ValueCategory.LIST_ENUM:
            return f"list[{self.enum_name(prop.enum_full_name)}]"
        if prop.category in LIST_ELEMENTS:
            return f"list[{SCALAR_HINTS[LIST_ELEMENTS[prop.category]]}]"
        return SCALAR_HINTS[prop.category]

    def render_type(self, type_desc: TypeDescriptor, enums: list[EnumDescriptor]) -> str:
        context = self._prepare_class_context(type_desc, enums)
        return self.class_template.render(cls=context)

    def assemble(self, fragments: list[tuple[TypeDescriptor, str]]) -> dict[str, str]:
        parts = [
            self.prefix_template.render(
                comment=self._generate_command_comment(),
                runtime=self.config.python_runtime_module,
            )
        ]
        for enum in self._referenced_enums([t for t, _ in fragments]):
            parts.append(self.enum_template.render(enum=self._prepare_enum_context(enum)))
        parts.extend(code for _, code in fragments)

        return {f"{self.config.python_module_name}.py": "".join(parts)}

    def _referenced_enums(self, types: list[TypeDescriptor]) -> list[EnumDescriptor]:
        referenced = {p.enum_full_name for t in types for p in t.generated_properties if p.enum_full_name}
        return [e for e in self.known_enums if e.full_name in referenced]

    def _prepare_enum_context(self, enum: EnumDescriptor) -> dict[str, Any]:
        return {
            "class_name": self.enum_name(enum.full_name),
            "full_name": enum.full_name,
            "base": "IntFlag" if enum.is_flags else "IntEnum",
            "members": [{"attr": python_name(v.name), "value": v.int_value} for v in enum.values],
        }

    def _forward_call(self, type_desc: TypeDescriptor, method: str, args: list[str]) -> str | None:
        """Call of the implementing ancestor's version of a method, if any."""
        if self.method_flavor(type_desc) != MethodFlavor.REFINEMENT:
            return None
        ancestor = self.session.types.get(type_desc.nearest_bindable_ancestor or "")
        if ancestor is not None:
            return f"{self.mixin_name(ancestor)}.{method}({', '.join(['self', *args])})"
        return f"super().{method}({', '.join(args)})"

    def _push_expression(self, type_desc: TypeDescriptor, property_name: str, expression: str) -> str:
        target = type_desc.find_merged(property_name)
        if target is not None and target.is_enum:
            return f"int({expression})"
        return expression

    def _prepare_property_context(self, type_desc: TypeDescriptor, prop: PropertyDescriptor) -> dict[str, Any]:
        also_notify = []
        for target in dict.fromkeys(prop.also_notify):
            attr = python_name(target)
            also_notify.append(
                {
                    "name": target,
                    "attr": attr,
                    "snapshot": f"old_value_{self.identifier(target)}",
                    "push": self._push_expression(type_desc, target, f"self.{attr}"),
                }
            )

        return {
            "name": prop.property_name,
            "attr": python_name(prop.property_name),
            "field": prop.field_name,
            "type_hint": self.type_hint(prop),
            "comment": docstring_text(prop.comment),
            # Lists compare by identity
            "same": "is" if prop.category.is_list else "==",
            "push": "int(value)" if prop.is_enum else "value",
            "get_injections": prop.injections(InjectionPoint.ON_GET),
            "before": prop.injections(InjectionPoint.ON_SET_BEFORE_CHANGE),
            "after": prop.injections(InjectionPoint.ON_SET_AFTER_CHANGE),
            "also_notify": also_notify,
        }

    def _sink_push(self, prop: PropertyDescriptor) -> str:
        value = f"int(self.{prop.field_name})" if prop.is_enum else f"self.{prop.field_name}"
        return f"sink.update_ui({python_literal(prop.property_name)}, {value})"

    def _prepare_class_context(self, type_desc: TypeDescriptor, enums: list[EnumDescriptor]) -> dict[str, Any]:
        """
        Prepare the template context for a mixin class.

        Args:
            type_desc: The resolved type
            enums: Enums registered right after the class

        Returns:
            Dictionary of template variables
        """
        table = self.dispatch_table(type_desc)
        methods = []
        for group in DispatchGroup:
            name, param_type = DISPATCH_METHODS[group]
            cases = []
            for prop in table[group]:
                value = f"{self.enum_name(prop.enum_full_name)}(property_value)" if prop.is_enum else "property_value"
                cases.append({"name": prop.property_name, "action": f"self.{python_name(prop.property_name)} = {value}"})
            methods.append(
                {
                    "name": name,
                    "params": f"property_name: str, property_value: {param_type}",
                    "forward": self._forward_call(type_desc, name, ["property_name", "property_value"]),
                    "branch": self.use_branch_table(len(cases)),
                    "cases": cases,
                    "statements": [],
                }
            )

        generated = type_desc.generated_properties
        if not type_desc.notify_only:
            cases = [{"name": p.property_name, "action": self._sink_push(p)} for p in generated]
            methods.append(
                {
                    "name": "push_one",
                    "params": "property_name: str, sink: ModelSink",
                    "forward": self._forward_call(type_desc, "push_one", ["property_name", "sink"]),
                    "branch": self.use_branch_table(len(cases)),
                    "cases": cases,
                    "statements": [],
                }
            )
        methods.append(
            {
                "name": "push_all",
                "params": "sink: ModelSink",
                "forward": self._forward_call(type_desc, "push_all", ["sink"]),
                "branch": False,
                "cases": [],
                "statements": [self._sink_push(p) for p in generated],
            }
        )

        return {
            "mixin_name": self.mixin_name(type_desc),
            "base": "NotifyingModel" if type_desc.notify_only else "BindableModel",
            "full_name": type_desc.full_name,
            "simple_name": type_desc.simple_name,
            "notify_only": type_desc.notify_only,
            "final": self.method_flavor(type_desc) == MethodFlavor.FINAL,
            "use_event": type_desc.use_change_event and not type_desc.notify_only,
            "metadata": [
                {"category": p.category.name, "name": p.property_name, "type_name": p.declared_type_name}
                for p in type_desc.merged_properties
            ],
            "properties": [self._prepare_property_context(type_desc, p) for p in generated],
            "methods": methods,
            "enums": [self._prepare_registration_context(e) for e in enums],
        }

    def _prepare_registration_context(self, enum: EnumDescriptor) -> dict[str, Any]:
        class_name = self.enum_name(enum.full_name)
        values = []
        for value in enum.values:
            aliases = [f"AliasInfo({python_literal(a.locale)}, {python_literal(a.text)})" for a in value.aliases]
            values.append(
                {
                    "int_value": value.int_value,
                    "name": value.name,
                    "member": f"{class_name}.{python_name(value.name)}",
                    "aliases": f"({', '.join(aliases)},)" if aliases else "()",
                }
            )
        return {"full_name": enum.full_name, "entries": values}
