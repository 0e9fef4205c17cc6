# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assembly of OpenAPI documents from a resolved model registry.

One document is built per target-document name:

1. Operations are selected by their ``spec:`` names; untagged operations
   belong to the default document.
2. Metadata comes from the block naming the document, with any member it
   leaves empty inherited from the general block.
3. Converting operations marks every model or enum they reference.
4. The reference closure is computed with a work queue: each referenced
   name is materialized once, preferring a variant declared for the
   document over the general one, and the names it references in turn are
   queued.
5. With ``clean_unused`` the component schemas are exactly that closure;
   otherwise every model and enum visible in the document is included.
"""

from __future__ import annotations

import copy
import logging
from collections import deque

from apiscribe.assembler.config import AssemblerConfig
from apiscribe.assembler.convert import SchemaConverter
from apiscribe.assembler.operations import OperationBuilder
from apiscribe.assembler.typemap import TypeMappingRegistry
from apiscribe.model.document import (
    Components,
    Contact,
    Document,
    ExternalDocs,
    Info,
    License,
    PathItem,
    Schema,
    SecurityScheme,
    Server,
    Tag,
)
from apiscribe.model.records import DEFAULT_DOCUMENT, MetadataBlock
from apiscribe.registry.store import ModelRegistry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_TITLE = "API"
DEFAULT_VERSION = "1.0.0"


class DocumentAssembler:
    """Builds OpenAPI documents from a resolved :class:`ModelRegistry`.

    Args:
        registry: Registry after type resolution. It is only read.
        config: Assembly options.
        type_mappings: Custom type mappings for primitive schemas.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        config: AssemblerConfig | None = None,
        type_mappings: TypeMappingRegistry | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or AssemblerConfig()
        self._type_mappings = type_mappings

    def document_names(self) -> list[str]:
        """Names of the documents :meth:`assemble_all` can produce, sorted."""
        names = self._registry.document_names() or [DEFAULT_DOCUMENT]
        if self._config.no_default:
            names = [n for n in names if n != DEFAULT_DOCUMENT]
        return names

    def assemble_document(self, target: str = DEFAULT_DOCUMENT) -> Document:
        """Assemble the document called *target* (case-insensitive)."""
        target = target.lower()
        tracker = _ReferenceTracker()
        converter = SchemaConverter(self._registry, self._config, self._type_mappings, tracker.mark)
        builder = OperationBuilder(converter, self._registry, target)

        paths: dict[str, PathItem] = {}
        for record in self._registry.all_operations_with_document(target):
            item = paths.setdefault(record.path, PathItem())
            setattr(item, record.method.lower(), builder.build(record))

        schemas: dict[str, Schema] = {}
        self._close(tracker, converter, target, schemas)
        if not self._config.clean_unused:
            for model in self._registry.all_types_with_document(target):
                tracker.mark(model.name)
            if self._config.enum_refs:
                for enum in self._registry.all_enums_with_document(target):
                    tracker.mark(enum.name)
            self._close(tracker, converter, target, schemas)

        document = self._document_shell(target)
        document.paths = {path: paths[path] for path in sorted(paths)}
        if schemas:
            document.components = document.components or Components()
            document.components.schemas = {name: schemas[name] for name in sorted(schemas)}
        logger.info(
            "Assembled document %r: %d path(s), %d schema(s)", target, len(document.paths), len(schemas)
        )
        return document

    def assemble_all(self) -> dict[str, Document]:
        """Assemble every document named by an operation.

        Documents without operations are left out. When the registry has no
        operations at all, the result is the default document alone.
        """
        if not self._registry.operations:
            return {DEFAULT_DOCUMENT: self.assemble_document(DEFAULT_DOCUMENT)}
        documents: dict[str, Document] = {}
        for name in self.document_names():
            document = self.assemble_document(name)
            if not document.paths:
                logger.debug("Omitting document %r without operations", name)
                continue
            documents[name] = document
        return documents

    def _close(
        self,
        tracker: _ReferenceTracker,
        converter: SchemaConverter,
        target: str,
        schemas: dict[str, Schema],
    ) -> None:
        while tracker.pending:
            name = tracker.pending.popleft()
            schema = self._materialize(name, converter, target)
            if schema is not None:
                schemas[name] = schema

    def _materialize(self, name: str, converter: SchemaConverter, target: str) -> Schema | None:
        record = self._registry.get_type(name, target)
        if record is not None and not record.is_parameter:
            return converter.record_schema(record)
        enum = self._registry.get_enum(name)
        if enum is not None:
            return converter.enum_schema(enum)
        logger.debug("Referenced schema %r is not declared for document %r", name, target)
        return None

    def _document_shell(self, target: str) -> Document:
        specific = self._registry.metadata_for(target)
        general = self._registry.general_metadata
        meta = _merge_metadata(specific, general)

        document = Document(
            openapi=self._config.openapi_version,
            info=Info(
                title=meta.title or DEFAULT_TITLE,
                version=meta.version or DEFAULT_VERSION,
                description=meta.description,
                terms_of_service=meta.terms_of_service,
                contact=_contact(meta),
                license=License(name=meta.license.name, url=meta.license.url)
                if meta.license is not None and meta.license.name
                else None,
            ),
        )
        if meta.external_docs is not None and meta.external_docs.url:
            document.external_docs = ExternalDocs(url=meta.external_docs.url, description=meta.external_docs.description)
        servers = _servers(meta)
        if servers:
            document.servers = servers
        if meta.tags:
            document.tags = [Tag(name=t.name, description=t.description) for t in meta.tags]
        if meta.security:
            document.security = [{req.name: list(req.scopes)} for req in meta.security]
        if meta.security_schemes:
            document.components = Components(
                security_schemes={
                    name: SecurityScheme(
                        type=scheme.type,
                        description=scheme.description,
                        name=scheme.param_name,
                        in_=scheme.location,
                        scheme=scheme.scheme,
                        bearer_format=scheme.bearer_format,
                    )
                    for name, scheme in sorted(meta.security_schemes.items())
                }
            )
        return document


# ################
# Implementation
# ################


class _ReferenceTracker:
    """The per-document referenced set and the queue of names not yet materialized."""

    def __init__(self) -> None:
        self.referenced: set[str] = set()
        self.pending: deque[str] = deque()

    def mark(self, name: str) -> None:
        if name not in self.referenced:
            self.referenced.add(name)
            self.pending.append(name)


def _merge_metadata(specific: MetadataBlock | None, general: MetadataBlock | None) -> MetadataBlock:
    """Member-wise merge: members the specific block leaves empty come from the general one."""
    if specific is None and general is None:
        return MetadataBlock()
    if specific is None:
        return general  # type: ignore[return-value]
    if general is None:
        return specific
    merged = specific.model_copy(deep=True)
    for name in MetadataBlock.model_fields:
        if name in ("documents", "source"):
            continue
        if not getattr(merged, name):
            setattr(merged, name, copy.deepcopy(getattr(general, name)))
    return merged


def _contact(meta: MetadataBlock) -> Contact | None:
    if meta.contact is None:
        return None
    contact = Contact(name=meta.contact.name, url=meta.contact.url, email=meta.contact.email)
    return contact if contact.model_dump(exclude_none=True) else None


def _servers(meta: MetadataBlock) -> list[Server]:
    if meta.servers:
        return [Server(url=s.url, description=s.description) for s in meta.servers]
    if not meta.host:
        return [Server(url=meta.base_path)] if meta.base_path else []
    scheme = meta.schemes[0] if meta.schemes else "https"
    return [Server(url=f"{scheme}://{meta.host}{meta.base_path or ''}")]
