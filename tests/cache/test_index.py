# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the checksum cache."""

import hashlib
import json
from pathlib import Path

import pytest

from apiscribe.cache import CacheError, CacheStats, ChecksumCache, file_checksum

# ###############
# Helpers
# ###############


def _source(root: Path, name: str, content: str) -> str:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return name


# ###############
# Normal Cases
# ###############


def test_file_checksum(tmp_path: Path) -> None:
    path = tmp_path / "a.py"
    path.write_bytes(b"x = 1\n")
    assert file_checksum(path) == "sha256:" + hashlib.sha256(b"x = 1\n").hexdigest()


def test_missing_index_starts_empty(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    assert cache.load().files == {}
    assert cache.index_path == tmp_path / ".apiscribe" / "index.json"


def test_new_and_modified_files_need_update(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    name = _source(tmp_path, "pets.py", "a = 1\n")
    assert cache.needs_update(name)

    cache.record_entities(name, ["Pet"], ["getPet"])
    assert not cache.needs_update(name)

    _source(tmp_path, "pets.py", "a = 2\n")
    assert cache.needs_update(name)


def test_deleted_file_needs_update(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    name = _source(tmp_path, "pets.py", "a = 1\n")
    cache.record_entities(name, [], [])
    (tmp_path / name).unlink()
    assert cache.needs_update(name)


def test_save_and_reload(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    name = _source(tmp_path, "api/pets.py", "a = 1\n")
    cache.record_entities(name, ["Pet", "Status"], ["listPets"], ["PetParams"])
    cache.save()

    reloaded = ChecksumCache(tmp_path)
    reloaded.load()
    entry = reloaded.get_entry("api/pets.py")
    assert entry is not None
    assert entry.schemas == ["Pet", "Status"]
    assert entry.routes == ["listPets"]
    assert entry.parameters == ["PetParams"]
    assert not reloaded.needs_update("api/pets.py")


def test_recorded_names_are_sorted(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    name = _source(tmp_path, "m.py", "")
    cache.record_entities(name, ["Zebra", "Ant"], ["op2", "op1"])
    entry = cache.get_entry(name)
    assert entry is not None
    assert (entry.schemas, entry.routes) == (["Ant", "Zebra"], ["op1", "op2"])


def test_prune_and_stats(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    for name in ("a.py", "b.py", "c.py"):
        cache.record_entities(_source(tmp_path, name, name), ["T"], ["op"], ["P"])
    assert cache.prune({"a.py"}) == ["b.py", "c.py"]
    assert cache.stats() == CacheStats(files=1, schemas=1, routes=1, parameters=1)


def test_version_mismatch_discards_index(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    cache.record_entities(_source(tmp_path, "a.py", ""), ["T"], [])
    cache.save()
    data = json.loads(cache.index_path.read_text(encoding="utf-8"))
    data["version"] = "0.9.0"
    cache.index_path.write_text(json.dumps(data), encoding="utf-8")

    assert ChecksumCache(tmp_path).load().files == {}


def test_clean_removes_directory(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    cache.save()
    assert cache.directory.is_dir()
    cache.clean()
    assert not cache.directory.exists()
    assert cache.index.files == {}
    cache.clean()


# ###############
# Error Cases
# ###############


def test_corrupt_index_raises(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    cache.directory.mkdir()
    cache.index_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CacheError, match="Invalid cache index"):
        cache.load()


def test_unknown_index_member_raises(tmp_path: Path) -> None:
    cache = ChecksumCache(tmp_path)
    cache.directory.mkdir()
    cache.index_path.write_text(json.dumps({"version": "1.0.0", "extra": 1}), encoding="utf-8")
    with pytest.raises(CacheError):
        cache.load()


def test_record_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(CacheError, match="Cannot checksum"):
        ChecksumCache(tmp_path).record_entities("missing.py", [], [])
