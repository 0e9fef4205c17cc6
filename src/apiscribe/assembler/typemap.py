# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Mapping of Python type names to OpenAPI primitive schemas."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from apiscribe.locking import ReadWriteLock
from apiscribe.model.document import Schema
from apiscribe.names import short_name

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class TypeMapping:
    """The schema type, format and optional example/default for a type name."""

    type: str
    format: str | None = None
    example: Any = None
    default: Any = None


BUILTIN_TYPES: dict[str, TypeMapping] = {
    "str": TypeMapping("string"),
    "string": TypeMapping("string"),
    "int": TypeMapping("integer", "int64"),
    "int8": TypeMapping("integer", "int32"),
    "int16": TypeMapping("integer", "int32"),
    "int32": TypeMapping("integer", "int32"),
    "int64": TypeMapping("integer", "int64"),
    "uint": TypeMapping("integer", "int32"),
    "uint8": TypeMapping("integer", "int32"),
    "uint16": TypeMapping("integer", "int32"),
    "uint32": TypeMapping("integer", "int32"),
    "uint64": TypeMapping("integer", "int64"),
    "float": TypeMapping("number", "double"),
    "float32": TypeMapping("number", "float"),
    "float64": TypeMapping("number", "double"),
    "bool": TypeMapping("boolean"),
    "bytes": TypeMapping("string", "byte"),
    "bytearray": TypeMapping("string", "byte"),
    "datetime": TypeMapping("string", "date-time"),
    "date": TypeMapping("string", "date"),
    "time": TypeMapping("string", "time"),
    "timedelta": TypeMapping("string", "duration"),
    "UUID": TypeMapping("string", "uuid"),
    "Decimal": TypeMapping("string", "decimal"),
    "EmailStr": TypeMapping("string", "email"),
    "AnyUrl": TypeMapping("string", "uri"),
    "HttpUrl": TypeMapping("string", "uri"),
    "Path": TypeMapping("string"),
    "UploadFile": TypeMapping("string", "binary"),
    "Any": TypeMapping("object"),
    "object": TypeMapping("object"),
    "dict": TypeMapping("object"),
}


class TypeMappingRegistry:
    """User-defined type mappings, consulted before the built-in ones.

    Safe to mutate from several threads.
    """

    def __init__(self, mappings: dict[str, TypeMapping] | None = None) -> None:
        self._lock = ReadWriteLock()
        self._mappings: dict[str, TypeMapping] = dict(mappings or {})

    def register(self, name: str, mapping: TypeMapping) -> None:
        with self._lock.write():
            self._mappings[name] = mapping

    def unregister(self, name: str) -> bool:
        with self._lock.write():
            return self._mappings.pop(name, None) is not None

    def get(self, name: str) -> TypeMapping | None:
        """The custom mapping for *name* or its short name."""
        with self._lock.read():
            return self._mappings.get(name) or self._mappings.get(short_name(name))

    def names(self) -> list[str]:
        with self._lock.read():
            return sorted(self._mappings)

    def clear(self) -> None:
        with self._lock.write():
            self._mappings.clear()


def lookup_mapping(type_name: str, custom: TypeMappingRegistry | None = None) -> TypeMapping | None:
    """Custom mapping first, then built-in by full name and short name."""
    if custom is not None:
        mapping = custom.get(type_name)
        if mapping is not None:
            return mapping
    return BUILTIN_TYPES.get(type_name) or BUILTIN_TYPES.get(short_name(type_name))


def primitive_schema(type_name: str, custom: TypeMappingRegistry | None = None) -> Schema:
    """An inline schema for a primitive type name; unknown names map to string."""
    mapping = lookup_mapping(type_name, custom)
    if mapping is None:
        return Schema(type="string")
    schema = Schema(type=mapping.type, format=mapping.format)
    if mapping.example is not None:
        schema.example = cast_value(mapping.example, mapping.type)
    if mapping.default is not None:
        schema.default = cast_value(mapping.default, mapping.type)
    return schema


def cast_value(raw: Any, schema_type: str | None) -> Any:
    """Cast an example or default written as text to the schema's type.

    Values that do not parse are returned unchanged.
    """
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    if schema_type == "integer":
        try:
            return int(text)
        except ValueError:
            return raw
    if schema_type == "number":
        try:
            return float(text)
        except ValueError:
            return raw
    if schema_type == "boolean":
        lowered = text.lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        return raw
    if schema_type in ("array", "object"):
        try:
            return json.loads(text)
        except ValueError:
            return raw
    if schema_type == "string" and len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return raw
