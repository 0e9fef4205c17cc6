# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization of assembled documents to YAML or JSON files.

Members are written in declaration order of the document model, so a
document always starts with ``openapi`` and ``info``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from apiscribe.model.document import Document, document_to_dict

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

FORMAT_EXTENSIONS = {"yaml": ".yaml", "json": ".json"}


class AssemblyError(Exception):
    """Raised when a document cannot be serialized or written."""


def format_for_path(path: Path, default: str = "yaml") -> str:
    """The output format implied by a file extension, falling back to *default*."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    return default


def serialize_document(document: Document, fmt: str = "yaml") -> str:
    """Render *document* as YAML or JSON text.

    Raises:
        AssemblyError: If *fmt* is not a supported format.
    """
    data = document_to_dict(document)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise AssemblyError(f"Unsupported output format: {fmt!r}")


def write_document(document: Document, path: Path, fmt: str | None = None) -> Path:
    """Write one document to *path*, creating parent directories as needed.

    Args:
        document: The document to write.
        path: Destination file.
        fmt: ``yaml`` or ``json``; when omitted it follows the file extension.

    Returns:
        The path written.

    Raises:
        AssemblyError: If the document cannot be serialized or written.
    """
    text = serialize_document(document, fmt or format_for_path(path))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise AssemblyError(f"Cannot write '{path}': {exc}") from exc
    logger.info("Wrote %s", path)
    return path


def write_documents(documents: dict[str, Document], output: Path, fmt: str | None = None) -> list[Path]:
    """Write each document as ``<dir>/<name><ext>``.

    When *output* has a file extension, its parent is the directory and the
    extension selects the format; otherwise *output* itself is the
    directory and the extension follows *fmt* (YAML by default).

    Returns:
        The paths written, in document-name order.

    Raises:
        AssemblyError: If any document cannot be written.
    """
    if output.suffix:
        directory = output.parent
        fmt = fmt or format_for_path(output)
    else:
        directory = output
        fmt = fmt or "yaml"
    if fmt not in FORMAT_EXTENSIONS:
        raise AssemblyError(f"Unsupported output format: {fmt!r}")
    extension = output.suffix if output.suffix and format_for_path(output) == fmt else FORMAT_EXTENSIONS[fmt]
    return [write_document(documents[name], directory / f"{name}{extension}", fmt) for name in sorted(documents)]
