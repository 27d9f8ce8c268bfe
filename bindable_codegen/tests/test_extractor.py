"""
Tests for member extraction: naming, classification and field annotations.
"""

from __future__ import annotations

import pytest

from bindable_codegen.pipeline.analyzer import (
    GenerationSession,
    InjectionPoint,
    MemberExtractor,
    TypeScanner,
    ValueCategory,
    derive_property_name,
)
from bindable_codegen.pipeline.analyzer.extractor import parse_injection_point, split_statements
from bindable_codegen.pipeline.config import CodeGeneratorConfig
from bindable_codegen.pipeline.declarations import DeclarationParser

ENUMS = [
    {"name": "Team", "namespace": "Game", "members": [{"name": "Red"}, {"name": "Blue"}]},
    {"name": "Mask", "namespace": "Game", "attributes": ["Flags"], "members": [{"name": "A", "value": 1}]},
]


def extract(fields: list[dict], config: CodeGeneratorConfig | None = None, **type_overrides) -> GenerationSession:
    declaration = {
        "name": "Model",
        "namespace": "Game",
        "modifiers": ["public", "partial"],
        "attributes": ["Bindable"],
        "fields": fields,
    }
    declaration.update(type_overrides)
    model = {"types": [declaration], "enums": ENUMS}
    session = GenerationSession(compilation=DeclarationParser().parse(model), config=config or CodeGeneratorConfig())
    TypeScanner(session).scan()
    extractor = MemberExtractor(session)
    for type_desc in session.types.values():
        extractor.extract(type_desc)
    return session


def own(session: GenerationSession):
    return next(iter(session.types.values())).own_properties


@pytest.mark.parametrize(
    "field_name,expected",
    [
        ("_health", "Health"),
        ("m_name", "Name"),
        ("score", "Score"),
        ("__x", "_x"),
        ("m__y", "_y"),
        ("_", ""),
        ("m_", ""),
    ],
)
def test_derive_property_name(field_name, expected):
    assert derive_property_name(field_name) == expected


@pytest.mark.parametrize(
    "declared,category",
    [
        ("int", ValueCategory.INT),
        ("System.Int32", ValueCategory.INT),
        ("float", ValueCategory.FLOAT),
        ("System.Single", ValueCategory.FLOAT),
        ("bool", ValueCategory.BOOL),
        ("string", ValueCategory.STRING),
        ("UnityEngine.Sprite", ValueCategory.OPAQUE_RESOURCE),
        ("Team", ValueCategory.ENUM),
        ("Game.Mask", ValueCategory.FLAGS_ENUM),
        ("List<int>", ValueCategory.LIST_INT),
        ("System.Collections.Generic.List<float>", ValueCategory.LIST_FLOAT),
        ("List<bool>", ValueCategory.LIST_BOOL),
        ("List<string>", ValueCategory.LIST_STRING),
        ("List<UnityEngine.Sprite>", ValueCategory.LIST_OPAQUE_RESOURCE),
        ("List<Team>", ValueCategory.LIST_ENUM),
        ("List<Mask>", ValueCategory.LIST_ENUM),
    ],
)
def test_classification(declared, category):
    props = own(extract([{"name": "_value", "type": declared}]))

    assert len(props) == 1
    assert props[0].category == category
    assert props[0].is_enum == category.is_enum


@pytest.mark.parametrize("declared", ["double", "long", "Dictionary<string, int>", "List<List<int>>", "Other.Team"])
def test_unsupported_types_are_skipped(declared):
    assert own(extract([{"name": "_value", "type": declared}])) == []


def test_opaque_types_are_configurable():
    config = CodeGeneratorConfig(opaque_resource_types=["Texture2D"])
    props = own(extract([{"name": "_a", "type": "Texture2D"}, {"name": "_b", "type": "UnityEngine.Sprite"}], config))

    assert [p.property_name for p in props] == ["A"]


def test_field_whose_name_cannot_be_changed_is_skipped():
    props = own(extract([{"name": "Value", "type": "int"}, {"name": "_", "type": "int"}, {"name": "_ok", "type": "int"}]))

    assert [p.property_name for p in props] == ["Ok"]


def test_annotations():
    fields = [
        {"name": "_health", "type": "int", "doc": "Hit points", "attributes": [{"name": "AlsoNotify", "args": ["IsAlive", "Status"]}]},
        {"name": "_hp", "type": "int", "attributes": [{"name": "PropertyName", "args": ["Hp2"]}]},
        {"name": "_secret", "type": "int", "attributes": ["DontNotify"]},
    ]
    props = own(extract(fields))

    health, renamed, secret = props
    assert health.also_notify == ["IsAlive", "Status"]
    assert health.comment == "Hit points"
    assert renamed.property_name == "Hp2"
    assert secret.suppress_notify
    assert secret.property_name == "Secret"


def test_code_injection():
    attributes = [
        {"name": "CodeInject", "args": ["OnGet", "Log(\"get\");"]},
        {"name": "CodeInject", "args": ["InjectType.Set_BeforeChanged", "Validate(value); Clamp()"]},
        {"name": "CodeInject", "args": [2, "Refresh();"]},
        {"name": "CodeInject", "named": {"Type": "OnSetAfterChange", "Code": "Save();"}},
        {"name": "CodeInject", "args": ["Somewhere", "Lost();"]},
    ]
    props = own(extract([{"name": "_health", "type": "int", "attributes": attributes}]))

    health = props[0]
    assert health.injections(InjectionPoint.ON_GET) == ['Log("get")']
    assert health.injections(InjectionPoint.ON_SET_BEFORE_CHANGE) == ["Validate(value)", "Clamp()"]
    assert health.injections(InjectionPoint.ON_SET_AFTER_CHANGE) == ["Refresh()", "Save()"]


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Get", InjectionPoint.ON_GET),
        ("OnSetAfterChange", InjectionPoint.ON_SET_AFTER_CHANGE),
        (1, InjectionPoint.ON_SET_BEFORE_CHANGE),
        (3, None),
        (True, None),
        (None, None),
    ],
)
def test_parse_injection_point(value, expected):
    assert parse_injection_point(value) == expected


def test_split_statements():
    assert split_statements(" a(); ;b() ;") == ["a()", "b()"]
    assert split_statements("") == []


def test_duplicate_property_name_warns_and_keeps_first():
    fields = [
        {"name": "_score", "type": "int"},
        {"name": "m_score", "type": "float"},
        {"name": "_hidden", "type": "int", "attributes": ["DontNotify"]},
        {"name": "m_hidden", "type": "int"},
    ]
    session = extract(fields)

    props = own(session)
    assert [(p.property_name, p.category) for p in props if not p.suppress_notify] == [
        ("Score", ValueCategory.INT),
        ("Hidden", ValueCategory.INT),
    ]
    duplicates = session.diagnostics.by_code("BG004")
    assert len(duplicates) == 1
    assert "m_score" in duplicates[0].message


def test_enums_registered_once_on_first_reference():
    fields = [
        {"name": "_team", "type": "Team"},
        {"name": "_other", "type": "Game.Team"},
        {"name": "_teams", "type": "List<Team>"},
        {"name": "_mask", "type": "Mask", "attributes": ["DontNotify"]},
    ]
    session = extract(fields)

    assert len(session.enums) == 1
    assert "Game.Team" in session.enums
    assert "Game.Mask" not in session.enums
    assert own(session)[2].enum_full_name == "Game.Team"


def test_notify_only_uses_auto_notify_fields():
    fields = [
        {"name": "_score", "type": "int", "attributes": ["AutoNotify"]},
        {"name": "_hint", "type": "string", "attributes": [{"name": "AutoNotify", "named": {"PropertyName": "Tip"}}]},
        {"name": "_frames", "type": "int"},
        {"name": "_team", "type": "Team", "attributes": ["AutoNotify"]},
    ]
    session = extract(fields, attributes=[])

    assert [p.property_name for p in own(session)] == ["Score", "Tip", "Team"]
    assert len(session.enums) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
