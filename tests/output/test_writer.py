# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for document serialization and output files."""

import json
from pathlib import Path

import pytest
import yaml

from apiscribe.model.document import Document, Info
from apiscribe.output import AssemblyError, format_for_path, serialize_document, write_document, write_documents

# ###############
# Helpers
# ###############


def _document(title: str = "Pets") -> Document:
    return Document(openapi="3.0.4", info=Info(title=title, version="1.0.0"))


# ###############
# Serialization
# ###############


@pytest.mark.parametrize(
    ("name", "expected"),
    [("api.json", "json"), ("api.YAML", "yaml"), ("api.yml", "yaml"), ("api.txt", "yaml"), ("api", "yaml")],
)
def test_format_for_path(name: str, expected: str) -> None:
    assert format_for_path(Path(name)) == expected


def test_yaml_keeps_member_order() -> None:
    text = serialize_document(_document(), "yaml")
    assert text.startswith("openapi: 3.0.4\ninfo:\n")
    assert yaml.safe_load(text)["info"] == {"title": "Pets", "version": "1.0.0"}


def test_json_output() -> None:
    text = serialize_document(_document(), "json")
    assert text.endswith("}\n")
    assert json.loads(text) == {"openapi": "3.0.4", "info": {"title": "Pets", "version": "1.0.0"}, "paths": {}}


def test_unsupported_format() -> None:
    with pytest.raises(AssemblyError, match="Unsupported output format"):
        serialize_document(_document(), "xml")


# ###############
# Files
# ###############


def test_write_document_creates_parents(tmp_path: Path) -> None:
    path = write_document(_document(), tmp_path / "out" / "api.json")
    assert json.loads(path.read_text(encoding="utf-8"))["info"]["title"] == "Pets"


def test_write_documents_into_directory(tmp_path: Path) -> None:
    paths = write_documents({"public": _document("Public"), "admin": _document("Admin")}, tmp_path / "docs")
    assert paths == [tmp_path / "docs" / "admin.yaml", tmp_path / "docs" / "public.yaml"]
    assert yaml.safe_load(paths[0].read_text(encoding="utf-8"))["info"]["title"] == "Admin"


def test_write_documents_with_file_output_uses_parent(tmp_path: Path) -> None:
    paths = write_documents({"admin": _document()}, tmp_path / "api.json")
    assert paths == [tmp_path / "admin.json"]


def test_write_documents_explicit_format(tmp_path: Path) -> None:
    paths = write_documents({"admin": _document()}, tmp_path / "docs", "json")
    assert paths == [tmp_path / "docs" / "admin.json"]


def test_write_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(AssemblyError, match="Cannot write"):
        write_document(_document(), blocker / "api.yaml")
