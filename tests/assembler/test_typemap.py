# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for primitive type mappings."""

import pytest

from apiscribe.assembler.typemap import (
    TypeMapping,
    TypeMappingRegistry,
    cast_value,
    lookup_mapping,
    primitive_schema,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("str", ("string", None)),
        ("int", ("integer", "int64")),
        ("float", ("number", "double")),
        ("bool", ("boolean", None)),
        ("datetime.datetime", ("string", "date-time")),
        ("uuid.UUID", ("string", "uuid")),
    ],
)
def test_builtin_mappings(name: str, expected: tuple[str, str | None]) -> None:
    schema = primitive_schema(name)
    assert (schema.type, schema.format) == expected


def test_unknown_type_maps_to_string() -> None:
    assert lookup_mapping("Widget") is None
    assert primitive_schema("Widget").type == "string"


class TestTypeMappingRegistry:
    def test_custom_mapping_overrides_builtin(self) -> None:
        registry = TypeMappingRegistry({"int": TypeMapping("string", "int-as-text")})
        assert lookup_mapping("int", registry) == TypeMapping("string", "int-as-text")

    def test_custom_mapping_found_by_short_name(self) -> None:
        registry = TypeMappingRegistry()
        registry.register("Money", TypeMapping("string", "decimal", example="1.50"))
        schema = primitive_schema("billing.Money", registry)
        assert (schema.type, schema.format, schema.example) == ("string", "decimal", "1.50")

    def test_example_and_default_are_cast(self) -> None:
        registry = TypeMappingRegistry({"Count": TypeMapping("integer", example="3", default="0")})
        schema = primitive_schema("Count", registry)
        assert (schema.example, schema.default) == (3, 0)

    def test_unregister_and_clear(self) -> None:
        registry = TypeMappingRegistry({"A": TypeMapping("string"), "B": TypeMapping("integer")})
        assert registry.unregister("A") is True
        assert registry.unregister("A") is False
        assert registry.names() == ["B"]
        registry.clear()
        assert registry.names() == []


@pytest.mark.parametrize(
    ("raw", "schema_type", "expected"),
    [
        ("42", "integer", 42),
        ("4x", "integer", "4x"),
        ("1.5", "number", 1.5),
        ("True", "boolean", True),
        ("maybe", "boolean", "maybe"),
        ('["a", "b"]', "array", ["a", "b"]),
        ('{"a": 1}', "object", {"a": 1}),
        ('"quoted"', "string", "quoted"),
        ("plain", "string", "plain"),
        (7, "string", 7),
    ],
)
def test_cast_value(raw: object, schema_type: str, expected: object) -> None:
    assert cast_value(raw, schema_type) == expected
