"""
Declaration model parser.

Phase 1 of the pipeline: turn the JSON declaration model into declaration
nodes. Only the shape of the model is checked here; eligibility and
classification happen in the analyzer.
"""

from __future__ import annotations

from typing import Any

from ...errors import DeclarationError
from .nodes import (
    AttributeNode,
    Compilation,
    EnumMemberNode,
    EnumNode,
    FieldNode,
    PropertyNode,
    TypeNode,
)


class DeclarationParser:
    """Parses a declaration model dictionary into a Compilation."""

    TYPE_KINDS = {"class", "struct"}

    def parse(self, model: dict[str, Any]) -> Compilation:
        """
        Parse a declaration model.

        Args:
            model: The decoded JSON declaration model

        Returns:
            Compilation with all type and enum declarations

        Raises:
            DeclarationError: If the model is malformed
        """
        if not isinstance(model, dict):
            raise DeclarationError.at("$", "declaration model must be an object")

        types = [self._parse_type(t, f"types[{i}]") for i, t in enumerate(self._list(model, "types", "$"))]
        enums = [self._parse_enum(e, f"enums[{i}]") for i, e in enumerate(self._list(model, "enums", "$"))]

        self._check_unique([t.full_name for t in types], "types", "type")
        self._check_unique([e.full_name for e in enums], "enums", "enum")

        return Compilation(types=types, enums=enums)

    def _parse_type(self, raw: Any, path: str) -> TypeNode:
        raw = self._object(raw, path)
        kind = raw.get("kind", "class")
        if kind not in self.TYPE_KINDS:
            raise DeclarationError.at(f"{path}.kind", f"expected one of {sorted(self.TYPE_KINDS)}, got {kind!r}")

        node = TypeNode(
            source_path=path,
            name=self._identifier(raw, "name", path),
            namespace=self._optional_str(raw, "namespace", path),
            kind=kind,
            modifiers=self._str_list(raw, "modifiers", path),
            containing_type=self._optional_str(raw, "containing_type", path),
            base=self._optional_str(raw, "base", path),
            attributes=self._parse_attributes(raw, path),
        )
        node.fields = [self._parse_field(f, f"{path}.fields[{i}]") for i, f in enumerate(self._list(raw, "fields", path))]
        node.properties = [self._parse_property(p, f"{path}.properties[{i}]") for i, p in enumerate(self._list(raw, "properties", path))]
        return node

    def _parse_field(self, raw: Any, path: str) -> FieldNode:
        raw = self._object(raw, path)
        return FieldNode(
            source_path=path,
            name=self._identifier(raw, "name", path),
            type_name=self._required_str(raw, "type", path),
            doc=self._optional_str(raw, "doc", path),
            modifiers=self._str_list(raw, "modifiers", path),
            attributes=self._parse_attributes(raw, path),
        )

    def _parse_property(self, raw: Any, path: str) -> PropertyNode:
        raw = self._object(raw, path)
        return PropertyNode(
            source_path=path,
            name=self._identifier(raw, "name", path),
            type_name=self._required_str(raw, "type", path),
            getter=raw["getter"] if "getter" in raw else "public",
            attributes=self._parse_attributes(raw, path),
        )

    def _parse_enum(self, raw: Any, path: str) -> EnumNode:
        raw = self._object(raw, path)
        node = EnumNode(
            source_path=path,
            name=self._identifier(raw, "name", path),
            namespace=self._optional_str(raw, "namespace", path),
            attributes=self._parse_attributes(raw, path),
        )

        # Members without an explicit value continue from the previous one
        next_value = 0
        for i, member in enumerate(self._list(raw, "members", path)):
            member_path = f"{path}.members[{i}]"
            member = self._object(member, member_path)
            value = member.get("value", next_value)
            if not isinstance(value, int) or isinstance(value, bool):
                raise DeclarationError.at(f"{member_path}.value", f"expected an integer, got {value!r}")
            node.members.append(
                EnumMemberNode(
                    source_path=member_path,
                    name=self._identifier(member, "name", member_path),
                    value=value,
                    attributes=self._parse_attributes(member, member_path),
                )
            )
            next_value = value + 1
        return node

    def _parse_attributes(self, raw: dict[str, Any], path: str) -> list[AttributeNode]:
        attributes = []
        for i, attr in enumerate(self._list(raw, "attributes", path)):
            attr_path = f"{path}.attributes[{i}]"
            # Bare strings are accepted for argument-less annotations
            if isinstance(attr, str):
                attributes.append(AttributeNode(name=attr))
                continue
            attr = self._object(attr, attr_path)
            args = attr.get("args", [])
            if not isinstance(args, list):
                raise DeclarationError.at(f"{attr_path}.args", "expected a list")
            named = attr.get("named", {})
            if not isinstance(named, dict):
                raise DeclarationError.at(f"{attr_path}.named", "expected an object")
            attributes.append(
                AttributeNode(
                    name=self._required_str(attr, "name", attr_path),
                    arguments=list(args),
                    named=dict(named),
                )
            )
        return attributes

    def _check_unique(self, names: list[str], section: str, what: str) -> None:
        seen: set[str] = set()
        for i, name in enumerate(names):
            if name in seen:
                raise DeclarationError.at(f"{section}[{i}]", f"duplicate {what} '{name}'")
            seen.add(name)

    @staticmethod
    def _object(raw: Any, path: str) -> dict[str, Any]:
        if not isinstance(raw, dict):
            raise DeclarationError.at(path, "expected an object")
        return raw

    @staticmethod
    def _list(raw: dict[str, Any], key: str, path: str) -> list[Any]:
        value = raw.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise DeclarationError.at(f"{path}.{key}", "expected a list")
        return value

    @staticmethod
    def _required_str(raw: dict[str, Any], key: str, path: str) -> str:
        value = raw.get(key)
        if not isinstance(value, str) or not value.strip():
            raise DeclarationError.at(f"{path}.{key}", "expected a non-empty string")
        return value.strip()

    def _identifier(self, raw: dict[str, Any], key: str, path: str) -> str:
        value = self._required_str(raw, key, path)
        if not (value[0].isalpha() or value[0] == "_") or not all(c.isalnum() or c == "_" for c in value):
            raise DeclarationError.at(f"{path}.{key}", f"'{value}' is not a valid identifier")
        return value

    @staticmethod
    def _optional_str(raw: dict[str, Any], key: str, path: str) -> str | None:
        value = raw.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise DeclarationError.at(f"{path}.{key}", "expected a string")
        return value.strip() or None

    @staticmethod
    def _str_list(raw: dict[str, Any], key: str, path: str) -> list[str]:
        value = raw.get(key)
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise DeclarationError.at(f"{path}.{key}", "expected a list of strings")
        return list(value)
