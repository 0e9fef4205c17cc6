# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Directive extraction from source units into a model registry.

For each source unit the extractor reads, in order: ``swagger:meta`` blocks
from free comment blocks, enumerations, plain aliases, models and parameter
sets, and finally routes. Malformed entities are dropped and recorded as
:class:`ExtractionIssue` instances; extraction never raises for bad
directives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from apiscribe.extractor.fields import build_field, qualify_type_name
from apiscribe.extractor.grammar import GrammarError, parse_route_line
from apiscribe.extractor.handlers import DirectiveContext, HandlerRegistry, default_registry
from apiscribe.extractor.text import clean_comment_lines, extract_documents, find_directive, free_text
from apiscribe.model.records import EmbedRef, EnumRecord, FieldRecord, MetadataBlock, OperationRecord, TypeRecord
from apiscribe.registry.store import ModelRegistry
from apiscribe.resolver.embeds import SemanticLookup
from apiscribe.source.declarations import (
    AliasDeclaration,
    ClassDeclaration,
    FunctionDeclaration,
    ListTypeExpr,
    LiteralTypeExpr,
    MapTypeExpr,
    NamedTypeExpr,
    OptionalTypeExpr,
    SourceUnit,
    TypeExpr,
    UnionTypeExpr,
)
from apiscribe.source.semantic import SemanticIndex

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ExtractionIssue:
    """A declaration dropped during extraction.

    Attributes:
        message: Human-readable description of the problem.
        source: Path of the source unit, with the line number when known.
    """

    message: str
    source: str


@dataclass
class ExtractedNames:
    """Names of the entities extracted from one source unit."""

    schemas: list[str] = field(default_factory=list)
    routes: list[str] = field(default_factory=list)
    parameters: list[str] = field(default_factory=list)


class Extractor:
    """Extracts records from source units into a :class:`ModelRegistry`.

    Args:
        registry: Destination registry.
        handlers: Directive handlers; defaults to the process-wide registry.
    """

    def __init__(self, registry: ModelRegistry, handlers: HandlerRegistry | None = None) -> None:
        self.registry = registry
        self.handlers = handlers if handlers is not None else default_registry()
        self.issues: list[ExtractionIssue] = []

    def extract_all(self, units: list[SourceUnit]) -> dict[str, ExtractedNames]:
        """Extract every unit; returns the extracted names keyed by unit path."""
        return {unit.path: self.extract_unit(unit) for unit in units}

    def extract_unit(self, unit: SourceUnit) -> ExtractedNames:
        """Extract one source unit into the registry."""
        names = ExtractedNames()
        self._extract_meta(unit)
        self._extract_enums(unit, names)
        self._extract_aliases(unit)
        self._extract_types(unit, names)
        self._extract_routes(unit, names)
        return names

    def semantic_lookup(self, index: SemanticIndex) -> SemanticLookup:
        """A lookup that turns classes found in *index* into field records."""

        def lookup(name: str) -> list[FieldRecord] | None:
            members = index.resolve_named_type(name)
            if members is None:
                return None
            fields = [build_field(m, self.handlers) for m in members]
            return [f for f in fields if f is not None]

        return lookup

    def _drop(self, message: str, unit: SourceUnit, line: int) -> None:
        issue = ExtractionIssue(message=message, source=f"{unit.path}:{line}")
        self.issues.append(issue)
        logger.debug("Dropped declaration at %s: %s", issue.source, message)

    def _extract_meta(self, unit: SourceUnit) -> None:
        for block in unit.comment_blocks:
            lines = clean_comment_lines(block)
            found = find_directive(lines, "swagger:meta")
            if found is None:
                continue
            meta = MetadataBlock(documents=extract_documents(lines) or [], source=unit.path)
            self.handlers.apply(lines[found[0] + 1 :], meta, DirectiveContext.META)
            self.registry.put_metadata(meta)

    def _extract_enums(self, unit: SourceUnit, names: ExtractedNames) -> None:
        for cls in unit.classes():
            lines = clean_comment_lines(cls.doc)
            found = find_directive(lines, "swagger:enum")
            if found is None:
                continue
            values = {c.name: c.value for c in cls.constants if not c.name.startswith("_")}
            record = EnumRecord(
                name=_first_token(found[1]) or cls.name,
                base_type=_enum_base(cls, list(values.values())),
                values=values,
            )
            self._finish_enum(record, lines, unit, cls.name)
            names.schemas.append(record.name)

        for alias in unit.aliases():
            lines = clean_comment_lines(alias.doc)
            found = find_directive(lines, "swagger:enum")
            if found is None:
                continue
            target = alias.target.inner if isinstance(alias.target, OptionalTypeExpr) else alias.target
            if not isinstance(target, LiteralTypeExpr):
                self._drop(f"swagger:enum alias {alias.name} is not a Literal", unit, alias.line)
                continue
            values = {str(v): v for v in target.values}
            record = EnumRecord(
                name=_first_token(found[1]) or alias.name,
                base_type=_literal_base(list(values.values())),
                values=values,
            )
            self._finish_enum(record, lines, unit, alias.name)
            names.schemas.append(record.name)

    def _finish_enum(self, record: EnumRecord, lines: list[str], unit: SourceUnit, python_name: str) -> None:
        record.documents = extract_documents(lines) or []
        record.python_name = python_name
        record.source = unit.path
        self.handlers.apply(lines, record, DirectiveContext.ENUM)
        if record.description is None:
            record.description = " ".join(free_text(lines, self.handlers.keywords(DirectiveContext.ENUM))) or None
        if record.example is None and record.values:
            record.example = _example_text(next(iter(record.values.values())))
        self.registry.put_enum(record, [python_name, f"{unit.package}.{python_name}"])

    def _extract_aliases(self, unit: SourceUnit) -> None:
        for alias in unit.aliases():
            lines = clean_comment_lines(alias.doc)
            if any(find_directive(lines, d) is not None for d in _ALIAS_MODEL_DIRECTIVES):
                continue
            if not isinstance(alias.target, NamedTypeExpr):
                continue
            target = unit.qualify(alias.target.name)
            self.registry.put_alias(f"{unit.package}.{alias.name}", target, unit.path)
            self.registry.put_alias(alias.name, target, unit.path)

    def _extract_types(self, unit: SourceUnit, names: ExtractedNames) -> None:
        for cls in unit.classes():
            record = self._class_type(cls, unit)
            if record is None:
                continue
            self.registry.put_type(record, [cls.name, f"{unit.package}.{cls.name}"])
            (names.parameters if record.is_parameter else names.schemas).append(record.name)

        for alias in unit.aliases():
            record = self._alias_type(alias, unit)
            if record is None:
                continue
            self.registry.put_type(record, [alias.name, f"{unit.package}.{alias.name}"])
            names.schemas.append(record.name)

    def _class_type(self, cls: ClassDeclaration, unit: SourceUnit) -> TypeRecord | None:
        lines = clean_comment_lines(cls.doc)
        if find_directive(lines, "swagger:enum") is not None or find_directive(lines, "swagger:ignore") is not None:
            return None

        directive = None
        for candidate in ("swagger:model", "swagger:parameters", "swagger:oneOf", "swagger:anyOf"):
            found = find_directive(lines, candidate)
            if found is not None:
                directive = (candidate, found[1])
                break
        if directive is None:
            return None

        kind, value = directive
        record = TypeRecord(name=cls.name, python_name=cls.name, source=unit.path)
        record.documents = extract_documents(lines) or []
        context = DirectiveContext.FIELD
        if kind == "swagger:parameters":
            record.operations = value.split()
            if not record.operations:
                self._drop(f"swagger:parameters on {cls.name} names no operation", unit, cls.line)
                return None
            record.is_parameter = True
            context = DirectiveContext.PARAMETER
        else:
            record.name = _first_token(value) or cls.name

        if kind in ("swagger:oneOf", "swagger:anyOf"):
            record.kind = "union"
            record.composition = "oneOf" if kind == "swagger:oneOf" else "anyOf"
            record.branches = [qualify_type_name(base, unit) for base in cls.bases]
        else:
            for member in cls.members:
                if member.name is None:
                    assert isinstance(member.type, NamedTypeExpr)
                    record.embeds.append(
                        EmbedRef(name=qualify_type_name(member.type.name, unit), position=len(record.fields))
                    )
                    continue
                field_record = build_field(member, self.handlers, context, unit, cls)
                if field_record is not None:
                    record.fields.append(field_record)

        self._finish_type(record, lines)
        return record

    def _alias_type(self, alias: AliasDeclaration, unit: SourceUnit) -> TypeRecord | None:
        lines = clean_comment_lines(alias.doc)
        directive = None
        for candidate in _ALIAS_MODEL_DIRECTIVES:
            found = find_directive(lines, candidate)
            if found is not None:
                directive = (candidate, found[1])
                break
        if directive is None:
            return None

        kind, value = directive
        record = TypeRecord(name=_first_token(value) or alias.name, python_name=alias.name, source=unit.path)
        record.documents = extract_documents(lines) or []
        target: TypeExpr = alias.target.inner if isinstance(alias.target, OptionalTypeExpr) else alias.target

        if kind != "swagger:model" or isinstance(target, UnionTypeExpr):
            options = target.options if isinstance(target, UnionTypeExpr) else [target]
            record.kind = "union"
            record.composition = "anyOf" if kind == "swagger:anyOf" else "oneOf"
            record.branches = [_expr_name(o, unit) for o in options]
        elif isinstance(target, ListTypeExpr):
            record.kind = "array"
            record.element_type = _expr_name(target.element, unit)
        elif isinstance(target, MapTypeExpr):
            record.kind = "map"
            record.key_type = _expr_name(target.key, unit)
            record.element_type = _expr_name(target.value, unit)
        elif isinstance(target, NamedTypeExpr):
            record.kind = "primitive"
            record.element_type = qualify_type_name(target.name, unit)
        else:
            self._drop(f"swagger:model alias {alias.name} has an unsupported target", unit, alias.line)
            return None

        self._finish_type(record, lines)
        return record

    def _finish_type(self, record: TypeRecord, lines: list[str]) -> None:
        self.handlers.apply(lines, record, DirectiveContext.MODEL)
        if record.description is None:
            text = " ".join(line for line in free_text(lines, self.handlers.keywords(DirectiveContext.MODEL)) if line)
            record.description = text or None

    def _extract_routes(self, unit: SourceUnit, names: ExtractedNames) -> None:
        for function in unit.functions():
            record = self._route(function, unit)
            if record is None:
                continue
            self.registry.put_operation(record)
            names.routes.append(record.operation_id)

    def _route(self, function: FunctionDeclaration, unit: SourceUnit) -> OperationRecord | None:
        lines = clean_comment_lines(function.doc)
        found = find_directive(lines, "swagger:route")
        if found is None:
            return None
        try:
            route = parse_route_line(found[1])
        except GrammarError as exc:
            self._drop(str(exc), unit, function.line)
            return None

        record = OperationRecord(
            method=route.method,
            path=route.path,
            operation_id=route.operation_id,
            tags=list(route.tags),
            documents=extract_documents(lines) or [],
            source=unit.path,
        )
        self.handlers.apply(lines[found[0] + 1 :], record, DirectiveContext.ROUTE)

        leading = free_text(lines, self.handlers.keywords(DirectiveContext.ROUTE))
        if record.summary is None and leading:
            record.summary = leading[0]
            leading = leading[1:]
        if record.description is None:
            record.description = "\n".join(leading).strip() or None
        return record


# ################
# Implementation
# ################

_ALIAS_MODEL_DIRECTIVES = ("swagger:model", "swagger:oneOf", "swagger:anyOf")
_ENUM_BASES = {"str": "str", "StrEnum": "str", "int": "int", "IntEnum": "int", "IntFlag": "int", "float": "float"}


def _first_token(text: str) -> str:
    parts = text.split()
    return parts[0] if parts else ""


def _example_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _enum_base(cls: ClassDeclaration, values: list[object]) -> str:
    for base in cls.bases:
        mapped = _ENUM_BASES.get(base.rsplit(".", 1)[-1])
        if mapped is not None:
            return mapped
    return _literal_base(values)


def _literal_base(values: list[object]) -> str:
    if not values:
        return "str"
    first = values[0]
    if isinstance(first, bool):
        return "bool"
    if isinstance(first, int):
        return "int"
    if isinstance(first, float):
        return "float"
    return "str"


def _expr_name(expr: TypeExpr, unit: SourceUnit) -> str:
    if isinstance(expr, OptionalTypeExpr):
        expr = expr.inner
    if isinstance(expr, NamedTypeExpr):
        return qualify_type_name(expr.name, unit)
    return "object"
