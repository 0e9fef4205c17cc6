# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Extracted records, directive values and the output document model."""

from apiscribe.model.records import (
    DEFAULT_DOCUMENT,
    Contact,
    Discriminator,
    EmbedRef,
    EnumRecord,
    ExternalDocs,
    FieldRecord,
    License,
    MetadataBlock,
    OperationRecord,
    ResponseRecord,
    SecurityRequirement,
    SecuritySchemeInfo,
    ServerInfo,
    TagInfo,
    TypeKind,
    TypeRecord,
)
from apiscribe.model.values import (
    DirectiveValue,
    MappingValue,
    RecordValue,
    TextListValue,
    TextValue,
)

__all__ = [
    # Records
    "DEFAULT_DOCUMENT",
    "Contact",
    "License",
    "ExternalDocs",
    "TagInfo",
    "ServerInfo",
    "SecuritySchemeInfo",
    "SecurityRequirement",
    "MetadataBlock",
    "FieldRecord",
    "EmbedRef",
    "Discriminator",
    "TypeKind",
    "TypeRecord",
    "EnumRecord",
    "ResponseRecord",
    "OperationRecord",
    # Directive values
    "TextValue",
    "TextListValue",
    "MappingValue",
    "RecordValue",
    "DirectiveValue",
]
