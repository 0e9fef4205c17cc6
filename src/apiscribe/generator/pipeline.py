# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end generation: scan sources, resolve types, assemble and write documents.

A :class:`Generator` runs one scan pass per instance:

1. Source units are loaded from the scan root.
2. Every unit is extracted into a single :class:`ModelRegistry`.
3. Embedded members are expanded; aliases resolve on demand during assembly.
4. The checksum cache records what each file contained.
5. One or all documents are assembled and written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from apiscribe.assembler.assembler import DocumentAssembler
from apiscribe.assembler.config import DEFAULT_OPENAPI_VERSION, AssemblerConfig
from apiscribe.assembler.typemap import TypeMapping, TypeMappingRegistry
from apiscribe.cache.index import ChecksumCache
from apiscribe.extractor.extract import ExtractionIssue, Extractor
from apiscribe.extractor.handlers import HandlerRegistry
from apiscribe.model.document import Document
from apiscribe.model.records import DEFAULT_DOCUMENT
from apiscribe.output.writer import FORMAT_EXTENSIONS, write_document, write_documents
from apiscribe.registry.store import ModelRegistry
from apiscribe.resolver.embeds import TypeResolver
from apiscribe.source.loader import DEFAULT_PATTERN, find_sources, load_sources
from apiscribe.source.semantic import SemanticIndex
from apiscribe.workspace.config import ApiscribeConfig

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_OUTPUT_STEM = "openapi"


@dataclass
class GeneratorOptions:
    """Everything one generation run needs besides the handlers.

    Attributes:
        root: Scan root; cache and relative source paths are anchored here.
        pattern: Glob selecting source files below *root*.
        ignore_paths: Root-relative path prefixes that are never scanned.
        output: Output file or directory; ``None`` selects the default name.
        format: ``yaml`` or ``json``; ``None`` follows the output extension.
        cache: Whether the checksum cache is read and written.
        clean_unused: Emit only schemas reachable from operations.
        enum_refs: Emit enums as component references.
        no_default: Leave the default document out of multi-document output.
        openapi_version: Value of the ``openapi`` field.
        custom_types: Extra type mappings keyed by type name.
    """

    root: Path
    pattern: str = DEFAULT_PATTERN
    ignore_paths: list[str] = field(default_factory=list)
    output: Path | None = None
    format: str | None = None
    cache: bool = True
    clean_unused: bool = True
    enum_refs: bool = True
    no_default: bool = False
    openapi_version: str = DEFAULT_OPENAPI_VERSION
    custom_types: dict[str, TypeMapping] = field(default_factory=dict)

    @classmethod
    def from_config(cls, root: Path, config: ApiscribeConfig) -> GeneratorOptions:
        """Options taken from a project configuration; a relative output is anchored at *root*."""
        output = Path(config.output) if config.output else None
        if output is not None and not output.is_absolute():
            output = root / output
        return cls(
            root=root,
            pattern=config.pattern,
            ignore_paths=list(config.ignore_paths),
            output=output,
            format=config.format,
            cache=config.cache,
            clean_unused=config.clean_unused,
            enum_refs=config.enum_refs,
            no_default=config.no_default,
            openapi_version=config.openapi_version,
            custom_types=dict(config.custom_types),
        )

    def assembler_config(self) -> AssemblerConfig:
        return AssemblerConfig(
            openapi_version=self.openapi_version,
            clean_unused=self.clean_unused,
            enum_refs=self.enum_refs,
            no_default=self.no_default,
        )


class Generator:
    """Runs the scan, resolve and assemble pipeline for one source root.

    Args:
        options: Run options.
        handlers: Directive handlers; defaults to the process-wide registry.
    """

    def __init__(self, options: GeneratorOptions, handlers: HandlerRegistry | None = None) -> None:
        self.options = options
        self.registry = ModelRegistry()
        self.cache = ChecksumCache(options.root)
        self._extractor = Extractor(self.registry, handlers)
        self._type_mappings = TypeMappingRegistry(options.custom_types)
        self._scanned = False

    @property
    def issues(self) -> list[ExtractionIssue]:
        """Declarations dropped during extraction, in extraction order."""
        return list(self._extractor.issues)

    def scan(self) -> ModelRegistry:
        """Load, extract and resolve every source unit. Runs once per generator.

        Raises:
            SourceLoadError: If a source file cannot be read or parsed.
            CacheError: If the checksum cache cannot be read or written.
        """
        if self._scanned:
            return self.registry
        units = load_sources(self.options.root, self.options.pattern, self.options.ignore_paths)
        if self.options.cache:
            self.cache.load()
        changed = [unit.path for unit in units if self.options.cache and self.cache.needs_update(unit.path)]

        extracted = self._extractor.extract_all(units)
        for issue in self._extractor.issues:
            logger.warning("%s: %s", issue.source, issue.message)

        index = SemanticIndex(units)
        TypeResolver(self.registry, self._extractor.semantic_lookup(index)).expand_embeds()

        if self.options.cache:
            for path, names in extracted.items():
                self.cache.record_entities(path, names.schemas, names.routes, names.parameters)
            self.cache.prune(set(extracted))
            self.cache.save()
            logger.info("%d of %d source unit(s) changed since the last scan", len(changed), len(units))
        self._scanned = True
        return self.registry

    def document_names(self) -> list[str]:
        """Names of the documents the scanned sources produce."""
        self.scan()
        return self._assembler().document_names()

    def assemble(self, document: str | None = None, multi: bool = False) -> dict[str, Document]:
        """Assemble one document, or every document when *multi* is set.

        Args:
            document: Target document name; defaults to the default document.
            multi: Assemble every document named by an operation.
        """
        self.scan()
        assembler = self._assembler()
        if multi:
            return assembler.assemble_all()
        target = (document or DEFAULT_DOCUMENT).lower()
        return {target: assembler.assemble_document(target)}

    def generate(self, document: str | None = None, multi: bool = False) -> list[Path]:
        """Assemble and write documents; returns the written paths.

        A single document goes to ``output`` (default ``openapi.<ext>`` in the
        scan root). Multiple documents go to the ``output`` directory (default
        ``openapi/`` in the scan root) as ``<name>.<ext>``.

        Raises:
            AssemblyError: If a document cannot be written.
        """
        documents = self.assemble(document, multi)
        fmt = self.options.format
        if multi:
            output = self.options.output or self.options.root / DEFAULT_OUTPUT_STEM
            return write_documents(documents, output, fmt)
        default_name = f"{DEFAULT_OUTPUT_STEM}{FORMAT_EXTENSIONS[fmt or 'yaml']}"
        output = self.options.output or self.options.root / default_name
        (name,) = documents
        return [write_document(documents[name], output, fmt)]

    def changed_files(self) -> list[str]:
        """Source files that are new or modified since the cache was last saved.

        Raises:
            SourceLoadError: If the scan root does not exist.
            CacheError: If the cache index cannot be read.
        """
        self.cache.load()
        paths = find_sources(self.options.root, self.options.pattern, self.options.ignore_paths)
        return [path for path in paths if self.cache.needs_update(path)]

    def removed_files(self) -> list[str]:
        """Cached files that no longer exist or are no longer selected."""
        self.cache.load()
        present = set(find_sources(self.options.root, self.options.pattern, self.options.ignore_paths))
        return sorted(path for path in self.cache.index.files if path not in present)

    def _assembler(self) -> DocumentAssembler:
        return DocumentAssembler(self.registry, self.options.assembler_config(), self._type_mappings)
