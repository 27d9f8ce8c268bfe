"""
Tests for the generator orchestration and file output.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bindable_codegen.errors import DeclarationError, OutputError
from bindable_codegen.pipeline import AtomicWriter, BindingGenerator, CodeGeneratorConfig, OutputMode
from bindable_codegen.pipeline.ast_backends import CSharpAstBackend
from bindable_codegen.pipeline.backends import PythonBackend
from bindable_codegen.pipeline.declarations import DeclarationParser

TEST_DATA_DIR = Path(__file__).with_name("test_data") / "declarations"


@pytest.fixture
def game_model() -> dict:
    with open(TEST_DATA_DIR / "game.json", encoding="utf-8") as f:
        return json.load(f)


class TestGenerate:
    def test_unknown_language(self, game_model):
        with pytest.raises(ValueError, match="Unsupported language"):
            BindingGenerator(game_model, language="java")

    def test_malformed_model_is_fatal(self):
        with pytest.raises(DeclarationError):
            BindingGenerator({"types": "nope"}).generate()

    def test_accepts_parsed_compilation(self, game_model):
        compilation = DeclarationParser().parse(game_model)
        result = BindingGenerator(compilation).generate()

        assert len(result.sources) == 5

    def test_diagnostics_returned(self, game_model):
        result = BindingGenerator(game_model).generate()

        assert [d.code for d in result.diagnostics] == ["BG001", "BG002", "BG003"]
        assert result.omitted == []

    def test_empty_model(self):
        result = BindingGenerator({}).generate()

        assert result.sources == {}
        assert result.diagnostics == []

    @pytest.mark.parametrize("language", ["cs", "python"])
    def test_generation_is_deterministic(self, game_model, language):
        first = BindingGenerator(game_model, language=language).generate().sources
        second = BindingGenerator(game_model, language=language).generate().sources

        assert first == second


class TestIsolation:
    def test_failing_type_is_omitted_in_cs(self, game_model, monkeypatch):
        original = CSharpAstBackend.render_type

        def render_type(self, type_desc, enums):
            if type_desc.simple_name == "Entity":
                raise RuntimeError("boom")
            return original(self, type_desc, enums)

        monkeypatch.setattr(CSharpAstBackend, "render_type", render_type)
        result = BindingGenerator(game_model).generate()

        assert "Game.Entity.g.cs" not in result.sources
        assert len(result.sources) == 4
        assert result.omitted == ["Game.Entity"]

    def test_enum_of_failed_type_moves_to_next_claimant(self, game_model, monkeypatch):
        original = CSharpAstBackend.render_type

        def render_type(self, type_desc, enums):
            if type_desc.simple_name == "Entity":
                raise RuntimeError("boom")
            return original(self, type_desc, enums)

        monkeypatch.setattr(CSharpAstBackend, "render_type", render_type)
        sources = BindingGenerator(game_model).generate().sources

        assert "static Item()" in sources["Game.Item.g.cs"]
        assert 'new Bindable.Runtime.EnumInfo("Game.Team"' in sources["Game.Item.g.cs"]

    def test_failing_type_is_omitted_in_python(self, game_model, monkeypatch):
        original = PythonBackend.render_type

        def render_type(self, type_desc, enums):
            if type_desc.simple_name == "Settings":
                raise RuntimeError("boom")
            return original(self, type_desc, enums)

        monkeypatch.setattr(PythonBackend, "render_type", render_type)
        result = BindingGenerator(game_model, language="python").generate()

        code = result.sources["bindings.py"]
        assert "class SettingsBindable" not in code
        assert "class ItemBindable" in code
        assert result.omitted == ["Game.Settings"]


class TestWrite:
    def test_writes_all_files(self, game_model, tmp_path):
        written = BindingGenerator(game_model).write(tmp_path / "out")

        assert sorted(p.name for p in written) == [
            "Game.Entity.g.cs",
            "Game.Item.g.cs",
            "Game.Player.g.cs",
            "Game.Settings.g.cs",
            "Game.UI.Hud.g.cs",
        ]
        assert (tmp_path / "out" / "Game.Item.g.cs").read_text(encoding="utf-8").startswith("// <auto-generated/>")
        assert not list((tmp_path / "out").glob(".*.tmp"))

    def test_existing_file_is_an_error_by_default(self, game_model, tmp_path):
        (tmp_path / "bindings.py").write_text("# hand edited\n")

        with pytest.raises(OutputError, match="already exists"):
            BindingGenerator(game_model, language="python").write(tmp_path)

        assert (tmp_path / "bindings.py").read_text() == "# hand edited\n"

    @pytest.mark.parametrize("atomic", [True, False])
    def test_force_overwrites(self, game_model, tmp_path, atomic):
        (tmp_path / "bindings.py").write_text("# hand edited\n")
        config = CodeGeneratorConfig()
        config.output.mode = OutputMode.FORCE
        config.output.atomic_write = atomic

        BindingGenerator(game_model, config, "python").write(tmp_path)

        assert "class PlayerBindable" in (tmp_path / "bindings.py").read_text(encoding="utf-8")

    def test_non_atomic_write_respects_error_mode(self, game_model, tmp_path):
        (tmp_path / "Game.Item.g.cs").write_text("// mine\n")
        config = CodeGeneratorConfig()
        config.output.atomic_write = False

        with pytest.raises(OutputError):
            BindingGenerator(game_model, config).write(tmp_path)

    def test_reuses_given_result(self, game_model, tmp_path):
        codegen = BindingGenerator(game_model, language="python")
        result = codegen.generate()
        result.sources = {"custom.py": "x = 1\n"}

        written = codegen.write(tmp_path, result)

        assert [p.name for p in written] == ["custom.py"]

    def test_user_text_with_braces_is_written(self, tmp_path):
        model = {
            "types": [
                {
                    "name": "Unit",
                    "namespace": "Game",
                    "modifiers": ["public", "partial"],
                    "attributes": ["Bindable"],
                    "fields": [{"name": "_team", "type": "Team", "doc": "Side } of the unit"}],
                }
            ],
            "enums": [
                {
                    "name": "Team",
                    "namespace": "Game",
                    "members": [{"name": "Red", "attributes": [{"name": "EnumAlias", "args": ["Red :-{"]}]}],
                }
            ],
        }

        written = BindingGenerator(model).write(tmp_path)

        assert [p.name for p in written] == ["Game.Unit.g.cs"]
        assert '"Red :-{"' in written[0].read_text(encoding="utf-8")


class TestAtomicWriter:
    def test_invalid_python_is_not_written(self, tmp_path):
        target = tmp_path / "bad.py"

        with pytest.raises(OutputError, match="not valid") as exc_info:
            AtomicWriter().write(target, "def broken(:\n", "python")

        assert not target.exists()
        assert exc_info.value.details["path"] == str(target)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.parametrize(
        "content,message",
        [
            ("class A {}\n", "no partial type"),
            ("public partial class A {\n", "unbalanced braces"),
        ],
    )
    def test_invalid_csharp_is_not_written(self, tmp_path, content, message):
        with pytest.raises(OutputError, match=message):
            AtomicWriter().write(tmp_path / "A.g.cs", content, "cs")

    @pytest.mark.parametrize(
        "content",
        [
            'public partial class A { string s = "{"; }\n',
            "public partial class A { char c = '}'; }\n",
            "/// <summary>a { b</summary>\npublic partial class A { }\n",
            'public partial class A { string s = "say \\"}\\" // {"; }\n',
        ],
    )
    def test_braces_in_literals_and_comments_are_ignored(self, tmp_path, content):
        target = tmp_path / "A.g.cs"
        AtomicWriter().write(target, content, "cs")

        assert target.read_text(encoding="utf-8") == content

    def test_validation_can_be_skipped(self, tmp_path):
        target = tmp_path / "bad.py"
        AtomicWriter().write(target, "def broken(:\n", "python", validate=False)

        assert target.read_text(encoding="utf-8") == "def broken(:\n"

    def test_custom_validator(self, tmp_path):
        seen = []
        writer = AtomicWriter(validate_csharp=seen.append)
        writer.write(tmp_path / "A.g.cs", "anything", "cs")

        assert seen == ["anything"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
