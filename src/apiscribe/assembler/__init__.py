# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Assembly of OpenAPI documents from the resolved model registry."""

from apiscribe.assembler.assembler import DEFAULT_TITLE, DEFAULT_VERSION, DocumentAssembler
from apiscribe.assembler.config import DEFAULT_OPENAPI_VERSION, AssemblerConfig
from apiscribe.assembler.convert import SCHEMA_REF_PREFIX, SchemaConverter, schema_ref
from apiscribe.assembler.operations import OperationBuilder
from apiscribe.assembler.typemap import (
    BUILTIN_TYPES,
    TypeMapping,
    TypeMappingRegistry,
    cast_value,
    lookup_mapping,
    primitive_schema,
)

__all__ = [
    "AssemblerConfig",
    "DEFAULT_OPENAPI_VERSION",
    "DEFAULT_TITLE",
    "DEFAULT_VERSION",
    "DocumentAssembler",
    "SchemaConverter",
    "OperationBuilder",
    "SCHEMA_REF_PREFIX",
    "schema_ref",
    "TypeMapping",
    "TypeMappingRegistry",
    "BUILTIN_TYPES",
    "lookup_mapping",
    "primitive_schema",
    "cast_value",
]
