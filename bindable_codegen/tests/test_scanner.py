"""
Tests for the type scanner and its diagnostics.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bindable_codegen.pipeline.analyzer import GenerationSession, Severity, TypeScanner
from bindable_codegen.pipeline.config import CodeGeneratorConfig
from bindable_codegen.pipeline.declarations import DeclarationParser

TEST_DATA_DIR = Path(__file__).with_name("test_data") / "declarations"


def scan(model: dict, config: CodeGeneratorConfig | None = None) -> GenerationSession:
    session = GenerationSession(compilation=DeclarationParser().parse(model), config=config or CodeGeneratorConfig())
    TypeScanner(session).scan()
    return session


def bindable_type(name: str, **overrides) -> dict:
    declaration = {
        "name": name,
        "namespace": "Game",
        "modifiers": ["public", "partial"],
        "attributes": ["Bindable"],
        "fields": [{"name": "_value", "type": "int"}],
    }
    declaration.update(overrides)
    return declaration


@pytest.fixture
def game_model() -> dict:
    with open(TEST_DATA_DIR / "game.json", encoding="utf-8") as f:
        return json.load(f)


class TestEligibility:
    def test_eligible_types_in_declaration_order(self, game_model):
        session = scan(game_model)

        assert list(session.types) == ["Game.Player", "Game.Entity", "Game.Item", "Game.Settings", "Game.UI.Hud"]

    def test_ineligible_types_report_one_warning_each(self, game_model):
        session = scan(game_model)

        assert [(d.code, d.type_name) for d in session.diagnostics] == [
            ("BG001", "Game.Outer.Nested"),
            ("BG002", "Game.Plain"),
            ("BG003", "Game.Hidden"),
        ]
        assert all(d.severity == Severity.WARNING for d in session.diagnostics)

    def test_only_first_violation_reported(self):
        # Nested, not partial and private at once
        session = scan({"types": [bindable_type("Bad", containing_type="Game.Outer", modifiers=["private"])]})

        assert [d.code for d in session.diagnostics] == ["BG001"]
        assert session.types == {}

    def test_unannotated_type_is_ignored_silently(self):
        session = scan({"types": [bindable_type("Quiet", attributes=[])]})

        assert session.types == {}
        assert len(session.diagnostics) == 0

    def test_ignore_types(self, game_model):
        session = scan(game_model, CodeGeneratorConfig(ignore_types=["Game.Item", "Game.Plain"]))

        assert "Game.Item" not in session.types
        assert session.diagnostics.by_code("BG002") == []

    def test_notify_only_requires_public(self):
        hud = {
            "name": "Hud",
            "modifiers": ["internal", "partial"],
            "fields": [{"name": "_score", "type": "int", "attributes": ["AutoNotify"]}],
        }
        session = scan({"types": [hud]})

        assert session.types == {}
        assert session.diagnostics.by_code("BG003")[0].message.endswith("expected public")

    def test_internal_bindable_is_eligible(self):
        session = scan({"types": [bindable_type("Shared", modifiers=["internal", "partial"])]})

        assert "Game.Shared" in session.types


class TestDescriptors:
    def test_chain_and_flags(self, game_model):
        session = scan(game_model)

        player = session.types["Game.Player"]
        assert player.base_type_chain == ["Game.Entity"]
        assert player.ancestor_already_implements
        assert player.ancestor_declared_change_event
        assert player.nearest_bindable_ancestor == "Game.Entity"
        assert player.use_change_event

        entity = session.types["Game.Entity"]
        assert entity.base_type_chain == []
        assert not entity.ancestor_already_implements

    def test_sealed_and_struct(self, game_model):
        session = scan(game_model)

        assert session.types["Game.Item"].is_sealed
        assert not session.types["Game.Item"].use_change_event
        settings = session.types["Game.Settings"]
        assert settings.is_value_type
        assert settings.is_sealed
        assert settings.base_type_chain == []

    def test_notify_only(self, game_model):
        session = scan(game_model)

        hud = session.types["Game.UI.Hud"]
        assert hud.notify_only
        assert hud.namespace == "Game.UI"
        assert not hud.ancestor_already_implements

    def test_chain_through_undeclared_base(self):
        model = {
            "types": [
                bindable_type("Leaf", base="Middle"),
                bindable_type("Middle", base="UnityEngine.MonoBehaviour", attributes=[], fields=[]),
            ]
        }
        session = scan(model)

        leaf = session.types["Game.Leaf"]
        assert leaf.base_type_chain == ["Game.Middle", "UnityEngine.MonoBehaviour"]
        assert not leaf.ancestor_already_implements

    def test_grandparent_implements(self):
        model = {
            "types": [
                bindable_type("Root", attributes=[{"name": "Bindable", "named": {"OnPropertyChanged": "true"}}]),
                bindable_type("Middle", base="Root", attributes=[], fields=[]),
                bindable_type("Leaf", base="Middle"),
            ]
        }
        session = scan(model)

        leaf = session.types["Game.Leaf"]
        assert leaf.base_type_chain == ["Game.Middle", "Game.Root"]
        assert leaf.nearest_bindable_ancestor == "Game.Root"
        assert leaf.ancestor_declared_change_event


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
