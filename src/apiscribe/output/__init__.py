# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Writing assembled documents to disk."""

from apiscribe.output.writer import (
    FORMAT_EXTENSIONS,
    AssemblyError,
    format_for_path,
    serialize_document,
    write_document,
    write_documents,
)

__all__ = [
    "AssemblyError",
    "FORMAT_EXTENSIONS",
    "format_for_path",
    "serialize_document",
    "write_document",
    "write_documents",
]
