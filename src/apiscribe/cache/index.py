# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Checksum cache recording which entities each source file produced.

The cache stores names only, never records: it answers "has this file
changed since it was last scanned" and "what did it contain then". The
index lives at ``<root>/.apiscribe/index.json``.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CACHE_DIRECTORY = ".apiscribe"
INDEX_FILE = "index.json"
INDEX_VERSION = "1.0.0"


class CacheError(Exception):
    """Raised when the cache index cannot be read, written, or is invalid."""


class CacheEntry(BaseModel):
    """What one source file contained when it was last scanned."""

    model_config = ConfigDict(extra="forbid")

    checksum: str
    parsed_at: datetime
    schemas: list[str] = Field(default_factory=list)
    routes: list[str] = Field(default_factory=list)
    parameters: list[str] = Field(default_factory=list)


class CacheIndex(BaseModel):
    """Top-level index model, keyed by root-relative source path."""

    model_config = ConfigDict(extra="forbid")

    version: str = INDEX_VERSION
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    files: dict[str, CacheEntry] = Field(default_factory=dict)


@dataclass(frozen=True)
class CacheStats:
    """Totals over every cached file."""

    files: int
    schemas: int
    routes: int
    parameters: int


class ChecksumCache:
    """Loads, queries and saves the checksum index for a source root.

    Args:
        root: The scanned source root. Entry keys are relative to it.
        directory: Cache directory name below *root*.
    """

    def __init__(self, root: Path, directory: str = CACHE_DIRECTORY) -> None:
        self.root = root
        self.directory = root / directory
        self.index_path = self.directory / INDEX_FILE
        self.index = CacheIndex()

    def load(self) -> CacheIndex:
        """Load the index from disk; a missing index starts empty.

        An index written by a different format version is discarded.

        Raises:
            CacheError: If the index cannot be read or is not a valid index.
        """
        if not self.index_path.exists():
            self.index = CacheIndex()
            return self.index
        try:
            raw = self.index_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CacheError(f"Cannot read cache index '{self.index_path}': {exc}") from exc
        try:
            index = CacheIndex.model_validate_json(raw)
        except ValidationError as exc:
            raise CacheError(f"Invalid cache index '{self.index_path}': {exc}") from exc
        if index.version != INDEX_VERSION:
            logger.info("Discarding cache index version %s", index.version)
            index = CacheIndex()
        self.index = index
        return index

    def save(self) -> None:
        """Write the index to disk, creating the cache directory as needed.

        Raises:
            CacheError: If the index cannot be written.
        """
        self.index.updated_at = datetime.now(timezone.utc)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self.index_path.write_text(self.index.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            raise CacheError(f"Cannot write cache index '{self.index_path}': {exc}") from exc

    def needs_update(self, unit_path: str) -> bool:
        """True if the file is not cached or its content changed since it was cached."""
        entry = self.index.files.get(unit_path)
        if entry is None:
            return True
        try:
            return entry.checksum != file_checksum(self.root / unit_path)
        except OSError:
            return True

    def record_entities(
        self,
        unit_path: str,
        type_names: list[str],
        operation_names: list[str],
        parameter_names: list[str] | None = None,
    ) -> None:
        """Record the names extracted from a file together with its current checksum.

        Raises:
            CacheError: If the file cannot be read for checksumming.
        """
        try:
            checksum = file_checksum(self.root / unit_path)
        except OSError as exc:
            raise CacheError(f"Cannot checksum '{unit_path}': {exc}") from exc
        self.index.files[unit_path] = CacheEntry(
            checksum=checksum,
            parsed_at=datetime.now(timezone.utc),
            schemas=sorted(type_names),
            routes=sorted(operation_names),
            parameters=sorted(parameter_names or []),
        )

    def get_entry(self, unit_path: str) -> CacheEntry | None:
        return self.index.files.get(unit_path)

    def prune(self, keep: set[str]) -> list[str]:
        """Forget files not in *keep*; returns the removed paths."""
        removed = sorted(path for path in self.index.files if path not in keep)
        for path in removed:
            del self.index.files[path]
        return removed

    def clean(self) -> None:
        """Delete the cache directory and reset the in-memory index.

        Raises:
            CacheError: If the directory cannot be removed.
        """
        self.index = CacheIndex()
        if not self.directory.exists():
            return
        try:
            shutil.rmtree(self.directory)
        except OSError as exc:
            raise CacheError(f"Cannot remove cache directory '{self.directory}': {exc}") from exc

    def stats(self) -> CacheStats:
        files = self.index.files.values()
        return CacheStats(
            files=len(self.index.files),
            schemas=sum(len(e.schemas) for e in files),
            routes=sum(len(e.routes) for e in files),
            parameters=sum(len(e.parameters) for e in files),
        )


def file_checksum(path: Path) -> str:
    """``sha256:<hex>`` of the file's bytes."""
    return "sha256:" + hashlib.sha256(path.read_bytes()).hexdigest()
