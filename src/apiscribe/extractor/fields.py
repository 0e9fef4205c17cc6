# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of class members into field records."""

from __future__ import annotations

import json
from typing import Any

from apiscribe.extractor.handlers import DirectiveContext, HandlerRegistry
from apiscribe.extractor.text import clean_comment_lines, find_directive, free_text
from apiscribe.model.records import FieldRecord, TypeRecord
from apiscribe.source.declarations import (
    ClassDeclaration,
    ListTypeExpr,
    LiteralTypeExpr,
    MapTypeExpr,
    MemberDeclaration,
    NamedTypeExpr,
    OptionalTypeExpr,
    SourceUnit,
    TypeExpr,
    UnionTypeExpr,
)

# ###############
# Public Interface
# ###############


def build_field(
    member: MemberDeclaration,
    handlers: HandlerRegistry,
    context: DirectiveContext = DirectiveContext.FIELD,
    unit: SourceUnit | None = None,
    owner: ClassDeclaration | None = None,
) -> FieldRecord | None:
    """Build the field record for a named class member.

    ``Field(...)`` options supply the output name, default, example and
    constraints; comment directives override them. A member without a
    default that is not optional is implicitly required.

    Args:
        member: The member; must have a name.
        handlers: Directive handlers for the member's comment lines.
        context: ``FIELD`` for models, ``PARAMETER`` for parameter sets.
        unit: Source unit used to qualify imported type names.
        owner: Declaring class, used to find inline nested classes.

    Returns:
        The field, or ``None`` for private, excluded or ``swagger:ignore`` members.
    """
    if member.name is None or member.name.startswith("_"):
        return None
    lines = clean_comment_lines(member.doc)
    if find_directive(lines, "swagger:ignore") is not None:
        return None
    options = member.options
    if options.get("exclude") is True:
        return None

    record = FieldRecord(name=member.name)
    alias = options.get("serialization_alias") or options.get("alias")
    if isinstance(alias, str) and alias:
        record.serialized_name = alias
    _apply_type(record, member.type, handlers, context, unit, owner)
    _apply_options(record, options)
    record.required = bool(options.get("required")) or (not member.has_default and not record.nullable)

    handlers.apply(lines, record, context)
    if record.description is None:
        text = "\n".join(free_text(lines, handlers.keywords(context)))
        record.description = text or _as_text(options.get("description"))
    return record


def qualify_type_name(name: str, unit: SourceUnit | None) -> str:
    """Replace a bare imported name with its qualified form; other names are kept as written."""
    if unit is not None and "." not in name and name in unit.imports and "." in unit.imports[name]:
        return unit.imports[name]
    return name


# ################
# Implementation
# ################

_LITERAL_TYPES = {bool: "bool", int: "int", float: "float", str: "str"}


def _apply_type(
    record: FieldRecord,
    expr: TypeExpr,
    handlers: HandlerRegistry,
    context: DirectiveContext,
    unit: SourceUnit | None,
    owner: ClassDeclaration | None,
) -> None:
    if isinstance(expr, OptionalTypeExpr):
        record.nullable = True
        expr = expr.inner
    if isinstance(expr, UnionTypeExpr):
        expr = expr.options[0]
    if isinstance(expr, ListTypeExpr):
        record.is_array = True
        expr = _strip_optional(expr.element)
    elif isinstance(expr, MapTypeExpr):
        record.is_map = True
        key = _strip_optional(expr.key)
        record.key_type = key.name if isinstance(key, NamedTypeExpr) else "str"
        expr = _strip_optional(expr.value)

    if isinstance(expr, LiteralTypeExpr):
        record.enum_values = list(expr.values)
        first = expr.values[0] if expr.values else ""
        record.type_name = _LITERAL_TYPES.get(type(first), "str")
    elif isinstance(expr, NamedTypeExpr):
        nested = owner.find_nested(expr.name) if owner is not None else None
        if nested is not None:
            record.type_name = "object"
            record.inline = _inline_type(nested, handlers, context, unit)
        else:
            record.type_name = qualify_type_name(expr.name, unit)
    else:
        # Nested containers and unions are documented as free-form objects.
        record.type_name = "object"


def _strip_optional(expr: TypeExpr) -> TypeExpr:
    if isinstance(expr, OptionalTypeExpr):
        expr = expr.inner
    if isinstance(expr, UnionTypeExpr):
        expr = expr.options[0]
    return expr


def _inline_type(
    cls: ClassDeclaration,
    handlers: HandlerRegistry,
    context: DirectiveContext,
    unit: SourceUnit | None,
) -> TypeRecord:
    fields = [
        field
        for field in (build_field(m, handlers, context, unit, cls) for m in cls.members)
        if field is not None
    ]
    return TypeRecord(name=cls.name, fields=fields, python_name=cls.name)


def _apply_options(record: FieldRecord, options: dict[str, Any]) -> None:
    examples = options.get("examples")
    if isinstance(examples, (list, tuple)) and examples:
        record.example = _as_text(examples[0])
    elif "example" in options:
        record.example = _as_text(options["example"])
    if options.get("default") is not None:
        record.default = _as_text(options["default"])

    for option, constraint in (
        ("min_length", "minLength"),
        ("max_length", "maxLength"),
        ("min_items", "minItems"),
        ("max_items", "maxItems"),
        ("pattern", "pattern"),
        ("ge", "min"),
        ("gt", "min"),
        ("le", "max"),
        ("lt", "max"),
    ):
        value = options.get(option)
        if value is not None:
            record.constraints.setdefault(constraint, _as_text(value) or "")


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)
