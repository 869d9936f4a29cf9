"""Tests for llynx.core.settings module."""

import json
import logging
from pathlib import Path

import pytest

from llynx.core.errors import SettingsError
from llynx.core.settings import (
    LIBRARY_KEY,
    SettingsDocument,
    SettingsFile,
    get_library,
    load_settings,
    serialize,
    with_library,
)

SAY_ENTRY = ".lls_addons/lib/luarocks/say/1.4.1-3/types"


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_loads_library(self):
        doc = load_settings(json.dumps({LIBRARY_KEY: [SAY_ENTRY]}))

        assert get_library(doc) == [SAY_ENTRY]
        assert doc.extra == {}

    def test_empty_text_is_empty_document(self):
        doc = load_settings("  \n")

        assert get_library(doc) is None
        assert doc.extra == {}

    def test_comment_only_text_is_empty_document(self):
        doc = load_settings("// Place your settings in this file\n")

        assert get_library(doc) is None
        assert doc.extra == {}

    def test_block_comment_only_text_is_empty_document(self):
        doc = load_settings("/*\n * workspace settings\n */\n")

        assert get_library(doc) is None
        assert doc.extra == {}

    def test_comment_before_malformed_text_raises(self):
        with pytest.raises(SettingsError, match="invalid settings syntax"):
            load_settings('// libraries\n{"Lua.workspace.library": [')

    def test_missing_library_field(self):
        doc = load_settings('{"editor.tabSize": 2}')

        assert get_library(doc) is None
        assert doc.extra == {"editor.tabSize": 2}

    def test_empty_library_is_not_missing(self):
        doc = load_settings(json.dumps({LIBRARY_KEY: []}))

        assert get_library(doc) == []

    def test_accepts_comments_and_trailing_commas(self):
        text = """\
{
    // workspace libraries
    "Lua.workspace.library": [
        ".lls_addons/lib/luarocks/say/1.4.1-3/types",  /* say */
    ],
    "files.trimTrailingWhitespace": true,
}
"""
        doc = load_settings(text)

        assert get_library(doc) == [SAY_ENTRY]
        assert doc.extra == {"files.trimTrailingWhitespace": True}

    def test_custom_library_key(self):
        doc = load_settings('{"lua.lib": ["a"], "Lua.workspace.library": ["b"]}', "lua.lib")

        assert get_library(doc) == ["a"]
        assert doc.extra == {"Lua.workspace.library": ["b"]}

    def test_malformed_text_raises(self):
        with pytest.raises(SettingsError, match="invalid settings syntax"):
            load_settings('{"Lua.workspace.library": [')

    def test_non_object_raises(self):
        with pytest.raises(SettingsError, match="must be a JSON object"):
            load_settings("[1, 2]")

    def test_library_of_wrong_type_raises(self):
        with pytest.raises(SettingsError, match="must be a list of strings"):
            load_settings(json.dumps({LIBRARY_KEY: [1, 2]}))


class TestWithLibrary:
    """Tests for with_library function."""

    def test_replaces_only_library(self):
        doc = load_settings(json.dumps({"a": 1, LIBRARY_KEY: ["x"], "b": {"c": [1]}}))

        updated = with_library(doc, ["y"])

        assert get_library(updated) == ["y"]
        assert updated.extra == doc.extra
        assert get_library(doc) == ["x"]

    def test_adds_library_to_document_without_one(self):
        updated = with_library(SettingsDocument(), [SAY_ENTRY])

        assert get_library(updated) == [SAY_ENTRY]


class TestSerialize:
    """Tests for serialize function."""

    def test_round_trip_preserves_fields(self):
        original = {
            "editor.tabSize": 4,
            LIBRARY_KEY: ["${3rd}/love2d/library"],
            "Lua.diagnostics.globals": ["vim"],
            "nested": {"deep": [1, 2.5, None, True]},
        }

        doc = load_settings(json.dumps(original))
        result = json.loads(serialize(doc))

        assert result == original

    def test_library_is_written_first(self):
        doc = SettingsDocument(library=["x"], extra={"a": 1})

        assert list(json.loads(serialize(doc))) == [LIBRARY_KEY, "a"]

    def test_absent_library_stays_absent(self):
        doc = load_settings('{"a": 1}')

        assert json.loads(serialize(doc)) == {"a": 1}

    def test_non_ascii_is_preserved(self):
        doc = SettingsDocument(extra={"title": "héllo"})

        assert "héllo" in serialize(doc)


class TestSettingsFileRead:
    """Tests for SettingsFile.read() method."""

    def test_missing_file_is_empty(self, temp_dir: Path, caplog: pytest.LogCaptureFixture):
        settings = SettingsFile(temp_dir / "missing.json")

        with caplog.at_level(logging.WARNING, logger="llynx"):
            doc = settings.read()

        assert get_library(doc) is None
        assert "was not found" in caplog.text

    def test_empty_file_is_empty(self, temp_dir: Path, caplog: pytest.LogCaptureFixture):
        path = temp_dir / "settings.json"
        path.write_text("")

        with caplog.at_level(logging.WARNING, logger="llynx"):
            doc = SettingsFile(path).read()

        assert get_library(doc) is None
        assert "is empty" in caplog.text

    def test_comment_only_file_is_empty(self, temp_dir: Path, caplog: pytest.LogCaptureFixture):
        path = temp_dir / "settings.json"
        path.write_text("// Place your settings in this file to overwrite defaults\n")

        with caplog.at_level(logging.WARNING, logger="llynx"):
            doc = SettingsFile(path).read()

        assert get_library(doc) is None
        assert doc.extra == {}
        assert "is empty" in caplog.text
        assert "not found" not in caplog.text

    def test_missing_key_is_logged(self, temp_dir: Path, caplog: pytest.LogCaptureFixture):
        path = temp_dir / "settings.json"
        path.write_text('{"editor.tabSize": 4}')

        with caplog.at_level(logging.WARNING, logger="llynx"):
            SettingsFile(path).read()

        assert f"key '{LIBRARY_KEY}' not found" in caplog.text

    def test_malformed_file_raises_with_path(self, temp_dir: Path):
        path = temp_dir / "settings.json"
        path.write_text("{not json")

        with pytest.raises(SettingsError) as exc_info:
            SettingsFile(path).read()

        assert exc_info.value.path == str(path)
        assert str(path) in str(exc_info.value)

    def test_directory_raises(self, temp_dir: Path):
        with pytest.raises(SettingsError, match="while reading"):
            SettingsFile(temp_dir).read()


class TestSettingsFileWrite:
    """Tests for SettingsFile.write() method."""

    def test_creates_parent_directories(self, temp_dir: Path):
        path = temp_dir / ".vscode" / "settings.json"
        settings = SettingsFile(path)

        settings.write(SettingsDocument(library=[SAY_ENTRY]))

        assert json.loads(path.read_text()) == {LIBRARY_KEY: [SAY_ENTRY]}

    def test_write_then_read(self, temp_dir: Path):
        settings = SettingsFile(temp_dir / "settings.json", "custom.key")
        doc = SettingsDocument(library_key="custom.key", library=["a"], extra={"b": 2})

        settings.write(doc)

        assert settings.read() == doc
