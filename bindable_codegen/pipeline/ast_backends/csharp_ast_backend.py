"""
C# AST Backend.

Generates the C# half of each partial type as AST nodes, then serializes
them. One file per type.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import (
    DispatchGroup,
    EnumDescriptor,
    InjectionPoint,
    PropertyDescriptor,
    TypeDescriptor,
)
from ..backends.base import CodeBackend, MethodFlavor
from .csharp_ast_nodes import (
    AccessModifier,
    CSharpEvent,
    CSharpField,
    CSharpFile,
    CSharpMethod,
    CSharpParameter,
    CSharpPartialType,
    CSharpProperty,
    CSharpStaticConstructor,
    MemberModifier,
)
from .csharp_serializer import CSharpSerializer

PARAMETER_TYPES = {
    DispatchGroup.INT: "int",
    DispatchGroup.FLOAT: "float",
    DispatchGroup.STRING: "string",
    DispatchGroup.BOOL: "bool",
}

FLAVOR_MODIFIERS = {
    MethodFlavor.FINAL: [],
    MethodFlavor.OVERRIDABLE: [MemberModifier.VIRTUAL],
    MethodFlavor.REFINEMENT: [MemberModifier.OVERRIDE],
}


def csharp_literal(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def statement(code: str) -> str:
    return code if code.endswith((";", "}")) else f"{code};"


class CSharpAstBackend(CodeBackend):
    """C# code generation backend using AST nodes."""

    FILE_EXTENSION = "cs"

    INDENT = CSharpSerializer.INDENT

    def __init__(self, config, session):
        super().__init__(config, session)
        self.serializer = CSharpSerializer()

    def runtime(self, name: str) -> str:
        return f"{self.config.csharp_runtime_namespace}.{name}"

    def render_type(self, type_desc: TypeDescriptor, enums: list[EnumDescriptor]) -> str:
        header = ["// <auto-generated/>"]
        comment = self._generate_command_comment()
        if comment:
            header.append(comment)

        file = CSharpFile(
            header=header,
            namespace=type_desc.namespace,
            types=[self.build_type(type_desc, enums)],
        )
        return self.serializer.serialize(file)

    def assemble(self, fragments: list[tuple[TypeDescriptor, str]]) -> dict[str, str]:
        return {f"{type_desc.full_name}.g.cs": code for type_desc, code in fragments}

    def build_type(self, type_desc: TypeDescriptor, enums: list[EnumDescriptor]) -> CSharpPartialType:
        """Build the AST of one generated partial type."""
        partial_type = CSharpPartialType(
            name=type_desc.simple_name,
            kind="struct" if type_desc.is_value_type else "class",
            modifiers=type_desc.modifiers,
        )
        if not type_desc.ancestor_already_implements:
            contract = "INotifyingModel" if type_desc.notify_only else "IBindableModel"
            partial_type.interfaces.append(self.runtime(contract))

        flavor = self.method_flavor(type_desc)
        modifiers = FLAVOR_MODIFIERS[flavor]

        if not type_desc.notify_only:
            partial_type.fields.append(self._type_info_field(type_desc))
            partial_type.properties.append(
                CSharpProperty(
                    name="TypeInfo",
                    type_name=self.runtime("BindableTypeInfo"),
                    modifiers=list(modifiers),
                    expression="__typeInfo",
                )
            )
            if type_desc.use_change_event:
                partial_type.events.append(self._change_event(type_desc))
            if enums:
                partial_type.static_constructor = self._enum_registration(type_desc, enums)

        for prop in type_desc.generated_properties:
            partial_type.accessors.append(self._accessor(type_desc, prop))

        table = self.dispatch_table(type_desc)
        for group in DispatchGroup:
            partial_type.methods.append(self._update_model(group, table[group], flavor))

        if not type_desc.notify_only:
            partial_type.methods.append(self._push_one(type_desc, flavor))
        partial_type.methods.append(self._push_all(type_desc, flavor))

        return partial_type

    def _type_info_field(self, type_desc: TypeDescriptor) -> CSharpField:
        initializer = [
            f"new {self.runtime('BindableTypeInfo')}({csharp_literal(type_desc.simple_name)}, "
            f"{csharp_literal(type_desc.full_name)}, new {self.runtime('BindablePropertyInfo')}[]",
            "{",
        ]
        for prop in type_desc.merged_properties:
            initializer.append(
                f"{self.INDENT}new {self.runtime('BindablePropertyInfo')}({self.runtime('BindableType')}.{prop.category.value}, "
                f"{csharp_literal(prop.property_name)}, {csharp_literal(prop.declared_type_name)}),"
            )
        initializer.append("})")

        return CSharpField(
            name="__typeInfo",
            type_name=self.runtime("BindableTypeInfo"),
            access=AccessModifier.PRIVATE,
            modifiers=[MemberModifier.STATIC, MemberModifier.READONLY],
            initializer=initializer,
        )

    def _change_event(self, type_desc: TypeDescriptor) -> CSharpEvent:
        return CSharpEvent(
            name="OnPropertyChanged",
            type_name=f"System.Action<string, {type_desc.full_name}, object>",
            modifiers=[MemberModifier.NEW] if type_desc.ancestor_declared_change_event else [],
            doc=[
                "<summary>",
                "Raised after a property value changed.",
                "<para>Arguments: property name, sender, old value.</para>",
                "</summary>",
            ],
        )

    def _enum_registration(self, type_desc: TypeDescriptor, enums: list[EnumDescriptor]) -> CSharpStaticConstructor:
        body: list[str] = []
        for i, enum in enumerate(enums):
            body.append(f"{self.runtime('EnumInfo')} enum{i} = new {self.runtime('EnumInfo')}({csharp_literal(enum.full_name)}, new {self.runtime('EnumValueInfo')}[]")
            body.append("{")
            for value in enum.values:
                body.append(
                    f"{self.INDENT}new {self.runtime('EnumValueInfo')}({value.int_value}, {csharp_literal(value.name)}, "
                    f"{enum.full_name}.{value.name}, {self._aliases(value.aliases)}),"
                )
            body.append("});")
            body.append(f"{self.runtime('Enums')}.AddEnumInfo(enum{i});")
        return CSharpStaticConstructor(class_name=type_desc.simple_name, body=body)

    def _aliases(self, aliases) -> str:
        if not aliases:
            return "null"
        items = ", ".join(f"new {self.runtime('AliasInfo')}({self.runtime('Language')}.{a.locale}, {csharp_literal(a.text)})" for a in aliases)
        return f"new {self.runtime('AliasInfo')}[] {{ {items} }}"

    def _push_value(self, type_desc: TypeDescriptor, property_name: str, expression: str) -> str:
        target = type_desc.find_merged(property_name)
        if target is not None and target.is_enum:
            return f"(int){expression}"
        return expression

    def _accessor(self, type_desc: TypeDescriptor, prop: PropertyDescriptor) -> CSharpProperty:
        use_event = type_desc.use_change_event and not type_desc.notify_only
        also_notify = list(dict.fromkeys(prop.also_notify))
        updater = f"{self.runtime('ViewUpdater')}.Current"
        field = f"this.{prop.field_name}"

        changed = [statement(s) for s in prop.injections(InjectionPoint.ON_SET_BEFORE_CHANGE)]
        value = "(int)value" if prop.is_enum else "value"
        changed.append(f"{updater}.UpdateUI(this, {csharp_literal(prop.property_name)}, {value});")
        if use_event:
            changed.append(f"object oldValue = {field};")
            for target in also_notify:
                changed.append(f"object oldValue_{self.identifier(target)} = this.{target};")
        changed.append(f"{field} = value;")
        if use_event:
            changed.append(f"OnPropertyChanged?.Invoke({csharp_literal(prop.property_name)}, this, oldValue);")
        changed.extend(statement(s) for s in prop.injections(InjectionPoint.ON_SET_AFTER_CHANGE))
        for target in also_notify:
            changed.append(f"{updater}.UpdateUI(this, {csharp_literal(target)}, {self._push_value(type_desc, target, f'this.{target}')});")
            if use_event:
                snapshot = f"oldValue_{self.identifier(target)}"
                changed.append(f"if (!Equals(this.{target}, {snapshot}))")
                changed.append(f"{self.INDENT}OnPropertyChanged?.Invoke({csharp_literal(target)}, this, {snapshot});")

        setter = [f"if ({field} != value)", "{", *[self.INDENT + line for line in changed], "}"]

        accessor = CSharpProperty(
            name=prop.property_name,
            type_name=prop.declared_type_name,
            modifiers=[MemberModifier.NEW] if prop.shadows_inherited else [],
            setter=setter,
            doc=self._doc(prop.comment),
        )
        get_injections = prop.injections(InjectionPoint.ON_GET)
        if get_injections:
            accessor.getter = [statement(s) for s in get_injections] + [f"return {field};"]
        else:
            accessor.getter_expression = field
        return accessor

    def _doc(self, comment: str | None) -> list[str]:
        if not comment:
            return []
        return ["<summary>", *[line.strip() for line in comment.strip().splitlines()], "</summary>"]

    def _dispatch(self, cases: list[tuple[str, str]]) -> list[str]:
        """Name-keyed branch table or linear chain over (name, statement) cases."""
        if not cases:
            return []
        if self.use_branch_table(len(cases)):
            lines = ["switch (propertyName)", "{"]
            for name, action in cases:
                lines.append(f"{self.INDENT}case {csharp_literal(name)}:")
                lines.append(f"{self.INDENT * 2}{action}")
                lines.append(f"{self.INDENT * 2}break;")
            lines.append("}")
            return lines

        lines = []
        for i, (name, action) in enumerate(cases):
            keyword = "if" if i == 0 else "else if"
            lines.append(f"{keyword} ({csharp_literal(name)}.Equals(propertyName))")
            lines.append(f"{self.INDENT}{action}")
        return lines

    def _update_model(self, group: DispatchGroup, props: list[PropertyDescriptor], flavor: MethodFlavor) -> CSharpMethod:
        body = []
        if flavor == MethodFlavor.REFINEMENT:
            body.append("base.UpdateModel(propertyName, propertyValue);")

        cases = []
        for prop in props:
            value = f"({prop.enum_full_name})propertyValue" if prop.is_enum else "propertyValue"
            cases.append((prop.property_name, f"this.{prop.property_name} = {value};"))
        body.extend(self._dispatch(cases))

        return CSharpMethod(
            name="UpdateModel",
            modifiers=list(FLAVOR_MODIFIERS[flavor]),
            parameters=[
                CSharpParameter(name="propertyName", type_name="string"),
                CSharpParameter(name="propertyValue", type_name=PARAMETER_TYPES[group]),
            ],
            body=body,
        )

    def _sink_push(self, prop: PropertyDescriptor) -> str:
        value = f"(int)this.{prop.field_name}" if prop.is_enum else f"this.{prop.field_name}"
        return f"sink.UpdateUI({csharp_literal(prop.property_name)}, {value});"

    def _push_one(self, type_desc: TypeDescriptor, flavor: MethodFlavor) -> CSharpMethod:
        body = []
        if flavor == MethodFlavor.REFINEMENT:
            body.append("base.PushOne(propertyName, sink);")
        body.extend(self._dispatch([(p.property_name, self._sink_push(p)) for p in type_desc.generated_properties]))

        return CSharpMethod(
            name="PushOne",
            modifiers=list(FLAVOR_MODIFIERS[flavor]),
            parameters=[
                CSharpParameter(name="propertyName", type_name="string"),
                CSharpParameter(name="sink", type_name=self.runtime("IModelSink")),
            ],
            body=body,
        )

    def _push_all(self, type_desc: TypeDescriptor, flavor: MethodFlavor) -> CSharpMethod:
        body = []
        if flavor == MethodFlavor.REFINEMENT:
            body.append("base.PushAll(sink);")
        body.extend(self._sink_push(p) for p in type_desc.generated_properties)

        return CSharpMethod(
            name="PushAll",
            modifiers=list(FLAVOR_MODIFIERS[flavor]),
            parameters=[CSharpParameter(name="sink", type_name=self.runtime("IModelSink"))],
            body=body,
        )
