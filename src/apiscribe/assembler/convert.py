# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of registry records into OpenAPI schema objects."""

from __future__ import annotations

from collections.abc import Callable

from apiscribe.assembler.config import AssemblerConfig
from apiscribe.assembler.typemap import TypeMappingRegistry, cast_value, lookup_mapping, primitive_schema
from apiscribe.extractor.text import parse_bool
from apiscribe.model.document import Discriminator, Schema
from apiscribe.model.records import EnumRecord, FieldRecord, TypeRecord
from apiscribe.registry.store import ModelRegistry
from apiscribe.resolver.aliases import resolve_alias

# ###############
# Public Interface
# ###############

SCHEMA_REF_PREFIX = "#/components/schemas/"


def schema_ref(name: str) -> Schema:
    """A ``$ref`` to the component schema *name*."""
    return Schema(ref=f"{SCHEMA_REF_PREFIX}{name}")


class SchemaConverter:
    """Builds schemas for types, fields, models and enums.

    Every time a type resolves to a named model or referenced enum, the
    name is passed to *on_reference*.

    Args:
        registry: The resolved registry.
        config: Assembly options.
        type_mappings: Custom type mappings, consulted before the built-ins.
        on_reference: Called with each referenced component name.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        config: AssemblerConfig | None = None,
        type_mappings: TypeMappingRegistry | None = None,
        on_reference: Callable[[str], None] | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or AssemblerConfig()
        self._type_mappings = type_mappings
        self._on_reference = on_reference or (lambda name: None)

    @property
    def type_mappings(self) -> TypeMappingRegistry | None:
        return self._type_mappings

    def type_schema(self, type_name: str) -> Schema:
        """Schema for a type name as written in source.

        Lookup order: model (by name, Python name or short name), enum,
        alias target, then primitive mapping.
        """
        model = self._registry.find_model_name(type_name)
        if model is not None:
            return self._reference(model)
        enum = self._registry.find_enum_for_type(type_name)
        if enum is not None:
            if self._config.enum_refs:
                return self._reference(enum.name)
            return self.enum_schema(enum)
        resolved = resolve_alias(self._registry.aliases, type_name)
        if resolved != type_name:
            model = self._registry.find_model_name(resolved)
            if model is not None:
                return self._reference(model)
            type_name = resolved
        return primitive_schema(type_name, self._type_mappings)

    def field_schema(self, field: FieldRecord) -> Schema:
        """Schema for a field, with its container, constraints and annotations."""
        if field.inline is not None:
            element = self.record_schema(field.inline)
        elif field.enum_values:
            mapping = lookup_mapping(field.type_name, self._type_mappings)
            element = Schema(type=mapping.type if mapping else "string", enum=list(field.enum_values))
        else:
            element = self.type_schema(field.type_name)
        if element.ref is None:
            _apply_value_constraints(element, field.constraints)

        if field.is_array:
            schema = Schema(type="array", items=element)
            _apply_array_constraints(schema, field.constraints)
        elif field.is_map:
            schema = Schema(type="object", additional_properties=element)
        else:
            schema = element

        annotations: dict[str, object] = {}
        if field.description:
            annotations["description"] = field.description
        for flag in ("nullable", "read_only", "write_only", "deprecated"):
            if getattr(field, flag):
                annotations[flag] = True
        if field.example is not None:
            annotations["example"] = cast_value(field.example, schema.type)
        if field.default is not None:
            annotations["default"] = cast_value(field.default, schema.type)
        if not annotations:
            return schema
        if schema.ref is not None:
            # Siblings of $ref are ignored by OpenAPI 3.0 readers.
            return Schema(all_of=[schema], **annotations)
        return schema.model_copy(update=annotations)

    def record_schema(self, record: TypeRecord) -> Schema:
        """Schema for a model declaration."""
        if record.kind == "union":
            schema = self._union_schema(record)
        elif record.kind == "array":
            schema = Schema(type="array", items=self.type_schema(record.element_type or "object"))
        elif record.kind == "map":
            schema = Schema(type="object", additional_properties=self.type_schema(record.element_type or "object"))
        elif record.kind == "primitive":
            schema = self.type_schema(record.element_type or "str")
            if schema.ref is not None:
                schema = Schema(all_of=[schema])
        else:
            schema = self._object_schema(record)

        if record.description:
            schema.description = record.description
        if record.example is not None:
            schema.example = cast_value(record.example, schema.type or "object")
        return schema

    def enum_schema(self, enum: EnumRecord) -> Schema:
        """Inline schema listing an enumeration's values, ordered by member name."""
        mapping = lookup_mapping(enum.base_type, self._type_mappings)
        schema_type = mapping.type if mapping else "string"
        schema = Schema(type=schema_type, enum=enum.sorted_values())
        if enum.description:
            schema.description = enum.description
        if enum.example is not None:
            schema.example = cast_value(enum.example, schema_type)
        return schema

    def _reference(self, name: str) -> Schema:
        self._on_reference(name)
        return schema_ref(name)

    def _object_schema(self, record: TypeRecord) -> Schema:
        properties: dict[str, Schema] = {}
        required: list[str] = []
        for field in record.fields:
            name = field.output_name
            if name == "-":
                continue
            properties[name] = self.field_schema(field)
            if field.is_required:
                required.append(name)
        schema = Schema(type="object", properties=properties or None, required=required or None)
        if record.all_of:
            schema.all_of = [self.type_schema(name) for name in record.all_of]
        if record.one_of:
            schema.one_of = [self.type_schema(name) for name in record.one_of]
        if record.any_of:
            schema.any_of = [self.type_schema(name) for name in record.any_of]
        return schema

    def _union_schema(self, record: TypeRecord) -> Schema:
        branches = [self.type_schema(name) for name in record.branches]
        schema = Schema(any_of=branches) if record.composition == "anyOf" else Schema(one_of=branches)
        if record.discriminator is not None:
            mapping: dict[str, str] = {}
            for value, type_name in record.discriminator.mapping.items():
                target = self.type_schema(type_name)
                if target.ref is not None:
                    mapping[value] = target.ref
            schema.discriminator = Discriminator(
                property_name=record.discriminator.property_name,
                mapping=mapping or None,
            )
        return schema


# ################
# Implementation
# ################


def _apply_value_constraints(schema: Schema, constraints: dict[str, str]) -> None:
    if constraints.get("format"):
        schema.format = constraints["format"]
    if constraints.get("pattern"):
        schema.pattern = constraints["pattern"]
    minimum = _to_float(constraints.get("min"))
    if minimum is not None:
        schema.minimum = minimum
    maximum = _to_float(constraints.get("max"))
    if maximum is not None:
        schema.maximum = maximum
    min_length = _to_int(constraints.get("minLength"))
    if min_length is not None:
        schema.min_length = min_length
    max_length = _to_int(constraints.get("maxLength"))
    if max_length is not None:
        schema.max_length = max_length


def _apply_array_constraints(schema: Schema, constraints: dict[str, str]) -> None:
    min_items = _to_int(constraints.get("minItems"))
    if min_items is not None:
        schema.min_items = min_items
    max_items = _to_int(constraints.get("maxItems"))
    if max_items is not None:
        schema.max_items = max_items
    if "uniqueItems" in constraints and parse_bool(constraints["uniqueItems"]):
        schema.unique_items = True


def _to_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
