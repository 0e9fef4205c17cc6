# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of Python source units and their declarations."""

from apiscribe.source.declarations import (
    AliasDeclaration,
    ClassDeclaration,
    ConstantDeclaration,
    Declaration,
    FunctionDeclaration,
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
from apiscribe.source.loader import DEFAULT_PATTERN, SourceLoadError, find_sources, load_sources, parse_source
from apiscribe.source.semantic import SemanticIndex

__all__ = [
    # Declarations
    "NamedTypeExpr",
    "ListTypeExpr",
    "MapTypeExpr",
    "OptionalTypeExpr",
    "UnionTypeExpr",
    "LiteralTypeExpr",
    "TypeExpr",
    "MemberDeclaration",
    "ConstantDeclaration",
    "ClassDeclaration",
    "FunctionDeclaration",
    "AliasDeclaration",
    "Declaration",
    "SourceUnit",
    # Loading
    "DEFAULT_PATTERN",
    "SourceLoadError",
    "find_sources",
    "load_sources",
    "parse_source",
    "SemanticIndex",
]
