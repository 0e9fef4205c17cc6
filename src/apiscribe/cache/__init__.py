# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Checksum cache of extracted entity names per source file."""

from apiscribe.cache.index import (
    CACHE_DIRECTORY,
    INDEX_FILE,
    INDEX_VERSION,
    CacheEntry,
    CacheError,
    CacheIndex,
    CacheStats,
    ChecksumCache,
    file_checksum,
)

__all__ = [
    "CACHE_DIRECTORY",
    "INDEX_FILE",
    "INDEX_VERSION",
    "CacheEntry",
    "CacheError",
    "CacheIndex",
    "CacheStats",
    "ChecksumCache",
    "file_checksum",
]
