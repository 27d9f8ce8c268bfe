"""
C# AST Serializer.

Converts C# AST nodes to properly-formatted C# source code.
Follows C# style guidelines:
- Braces on new lines (Allman style)
- 4-space indentation
- Blank line between members
"""

from __future__ import annotations

from .csharp_ast_nodes import (
    CSharpEvent,
    CSharpField,
    CSharpFile,
    CSharpMethod,
    CSharpPartialType,
    CSharpProperty,
    CSharpStaticConstructor,
    MemberModifier,
)


class CSharpSerializer:
    """Serializes C# AST nodes to source code."""

    INDENT = "    "  # 4 spaces

    def serialize(self, file: CSharpFile) -> str:
        """Serialize a complete C# file to source code."""
        lines: list[str] = list(file.header)
        if file.header:
            lines.append("")

        # Namespace wrapping
        if file.namespace:
            lines.append(f"namespace {file.namespace}")
            lines.append("{")
            indent_level = 1
        else:
            indent_level = 0

        for partial_type in file.types:
            lines.extend(self._indent_lines(self._serialize_type(partial_type), indent_level))

        # Close namespace
        if file.namespace:
            lines.append("}")

        return "\n".join(lines) + "\n"

    def _indent_lines(self, lines: list[str], level: int) -> list[str]:
        """Add indentation to a list of lines."""
        if level == 0:
            return lines
        prefix = self.INDENT * level
        return [prefix + line if line.strip() else line for line in lines]

    def _modifiers(self, modifiers: list[MemberModifier]) -> str:
        return "".join(f" {m.value}" for m in modifiers)

    def _serialize_type(self, partial_type: CSharpPartialType) -> list[str]:
        """Serialize a partial type declaration."""
        modifiers = [m for m in partial_type.modifiers if m != "partial"] + ["partial"]
        declaration = f"{' '.join(modifiers)} {partial_type.kind} {partial_type.name}"
        if partial_type.interfaces:
            declaration += f" : {', '.join(partial_type.interfaces)}"

        members: list[list[str]] = []
        members.extend(self._serialize_field(f) for f in partial_type.fields)
        members.extend(self._serialize_property(p) for p in partial_type.properties)
        members.extend(self._serialize_event(e) for e in partial_type.events)
        if partial_type.static_constructor:
            members.append(self._serialize_static_constructor(partial_type.static_constructor))
        members.extend(self._serialize_property(p) for p in partial_type.accessors)
        members.extend(self._serialize_method(m) for m in partial_type.methods)

        lines = [declaration, "{"]
        for i, member in enumerate(members):
            if i > 0:
                lines.append("")
            lines.extend(self._indent_lines(member, 1))
        lines.append("}")
        return lines

    def _serialize_field(self, field: CSharpField) -> list[str]:
        """Serialize a field declaration."""
        declaration = f"{field.access.value}{self._modifiers(field.modifiers)} {field.type_name} {field.name}"
        if not field.initializer:
            return [declaration + ";"]

        lines = [f"{declaration} = {field.initializer[0]}"]
        lines.extend(field.initializer[1:])
        lines[-1] += ";"
        return lines

    def _serialize_event(self, event: CSharpEvent) -> list[str]:
        """Serialize an event declaration."""
        lines = [f"/// {line}" for line in event.doc]
        lines.append(f"{event.access.value}{self._modifiers(event.modifiers)} event {event.type_name} {event.name};")
        return lines

    def _serialize_property(self, prop: CSharpProperty) -> list[str]:
        """Serialize a property declaration."""
        lines = [f"/// {line}" for line in prop.doc]
        declaration = f"{prop.access.value}{self._modifiers(prop.modifiers)} {prop.type_name} {prop.name}"

        if prop.expression is not None:
            lines.append(f"{declaration} => {prop.expression};")
            return lines

        lines.append(declaration)
        lines.append("{")
        if prop.getter:
            lines.append(f"{self.INDENT}get")
            lines.append(f"{self.INDENT}{{")
            lines.extend(self._indent_lines(prop.getter, 2))
            lines.append(f"{self.INDENT}}}")
        elif prop.getter_expression is not None:
            lines.append(f"{self.INDENT}get => {prop.getter_expression};")

        if prop.setter is not None:
            lines.append(f"{self.INDENT}set")
            lines.append(f"{self.INDENT}{{")
            lines.extend(self._indent_lines(prop.setter, 2))
            lines.append(f"{self.INDENT}}}")
        lines.append("}")
        return lines

    def _serialize_static_constructor(self, constructor: CSharpStaticConstructor) -> list[str]:
        """Serialize a static constructor."""
        lines = [f"static {constructor.class_name}()", "{"]
        lines.extend(self._indent_lines(constructor.body, 1))
        lines.append("}")
        return lines

    def _serialize_method(self, method: CSharpMethod) -> list[str]:
        """Serialize a method declaration."""
        params = ", ".join(f"{p.type_name} {p.name}" for p in method.parameters)
        lines = [
            f"{method.access.value}{self._modifiers(method.modifiers)} {method.return_type} {method.name}({params})",
            "{",
        ]
        lines.extend(self._indent_lines(method.body, 1))
        lines.append("}")
        return lines
