# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarations read from Python source units.

These models describe source structure only: what was declared, where, and
with which attached comment lines. Interpreting the comments is the job of
the extractor.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class NamedTypeExpr(BaseModel):
    """A bare or dotted type name, e.g. ``str`` or ``models.User``."""

    kind: Literal["named"] = "named"
    name: str


class ListTypeExpr(BaseModel):
    """A sequence-like annotation such as ``list[T]`` or ``tuple[T, ...]``."""

    kind: Literal["list"] = "list"
    element: TypeExpr


class MapTypeExpr(BaseModel):
    """A mapping annotation such as ``dict[K, V]``."""

    kind: Literal["map"] = "map"
    key: TypeExpr
    value: TypeExpr


class OptionalTypeExpr(BaseModel):
    """``Optional[T]`` or ``T | None``."""

    kind: Literal["optional"] = "optional"
    inner: TypeExpr


class UnionTypeExpr(BaseModel):
    """A union of two or more non-None types."""

    kind: Literal["union"] = "union"
    options: list[TypeExpr] = _Field(default_factory=list)


class LiteralTypeExpr(BaseModel):
    """``Literal[...]`` with its literal values."""

    kind: Literal["literal"] = "literal"
    values: list[str | int | float | bool] = _Field(default_factory=list)


# A type annotation, discriminated by `kind`.
TypeExpr = Annotated[
    NamedTypeExpr | ListTypeExpr | MapTypeExpr | OptionalTypeExpr | UnionTypeExpr | LiteralTypeExpr,
    _Field(discriminator="kind"),
]


class MemberDeclaration(BaseModel):
    """A class member: an annotated attribute, or a base class when unnamed.

    Attributes:
        name: Attribute name, or ``None`` for an embedded base class.
        doc: Raw attached comment lines (``#`` comments and attribute docstring).
        options: Literal keyword arguments of a ``Field(...)``/``field(...)``
            call. ``required`` is set when the call's default is ``...``.
        has_default: True when the attribute is assigned a default value.
    """

    name: str | None = None
    type: TypeExpr
    doc: list[str] = _Field(default_factory=list)
    options: dict[str, Any] = _Field(default_factory=dict)
    has_default: bool = False
    line: int = 0


class ConstantDeclaration(BaseModel):
    """A class-level constant, e.g. an enum member ``ACTIVE = "active"``."""

    name: str
    value: str | int | float | bool
    doc: list[str] = _Field(default_factory=list)
    line: int = 0


class ClassDeclaration(BaseModel):
    """A class with its members, constants and nested classes."""

    kind: Literal["class"] = "class"
    name: str
    doc: list[str] = _Field(default_factory=list)
    bases: list[str] = _Field(default_factory=list)
    members: list[MemberDeclaration] = _Field(default_factory=list)
    constants: list[ConstantDeclaration] = _Field(default_factory=list)
    nested: list[ClassDeclaration] = _Field(default_factory=list)
    line: int = 0

    def find_nested(self, name: str) -> ClassDeclaration | None:
        """Return the directly nested class called *name*, if any."""
        for inner in self.nested:
            if inner.name == name:
                return inner
        return None


class FunctionDeclaration(BaseModel):
    """A function or method; *owner* names the enclosing class for methods."""

    kind: Literal["function"] = "function"
    name: str
    doc: list[str] = _Field(default_factory=list)
    owner: str | None = None
    line: int = 0


class AliasDeclaration(BaseModel):
    """A module-level type alias.

    Attributes:
        explicit: True for ``X: TypeAlias = ...`` and ``type X = ...``.
    """

    kind: Literal["alias"] = "alias"
    name: str
    target: TypeExpr
    doc: list[str] = _Field(default_factory=list)
    explicit: bool = False
    line: int = 0


Declaration = Annotated[
    ClassDeclaration | FunctionDeclaration | AliasDeclaration,
    _Field(discriminator="kind"),
]


class SourceUnit(BaseModel):
    """One parsed Python module.

    Attributes:
        path: Path relative to the scanned root, with forward slashes.
        module: Dotted module name derived from *path*.
        package: Qualifier used for this module's names (last module segment).
        comment_blocks: The module docstring and every standalone comment block.
        imports: Local name to qualified name (``package.Name`` or ``package``).
    """

    path: str
    module: str
    package: str
    comment_blocks: list[list[str]] = _Field(default_factory=list)
    declarations: list[Declaration] = _Field(default_factory=list)
    imports: dict[str, str] = _Field(default_factory=dict)

    def classes(self) -> list[ClassDeclaration]:
        return [d for d in self.declarations if isinstance(d, ClassDeclaration)]

    def functions(self) -> list[FunctionDeclaration]:
        return [d for d in self.declarations if isinstance(d, FunctionDeclaration)]

    def aliases(self) -> list[AliasDeclaration]:
        return [d for d in self.declarations if isinstance(d, AliasDeclaration)]

    def qualify(self, name: str) -> str:
        """Qualify a name as written in this module.

        Imported names map through the import table, dotted names have their
        head replaced when it is an imported module, and local names are
        prefixed with this module's package qualifier.
        """
        head, dot, rest = name.partition(".")
        if not dot:
            return self.imports.get(name, f"{self.package}.{name}")
        if head in self.imports:
            return f"{self.imports[head]}.{rest}"
        return name


# Resolve forward references for models that use TypeExpr.
ListTypeExpr.model_rebuild()
MapTypeExpr.model_rebuild()
OptionalTypeExpr.model_rebuild()
UnionTypeExpr.model_rebuild()
MemberDeclaration.model_rebuild()
ClassDeclaration.model_rebuild()
AliasDeclaration.model_rebuild()
SourceUnit.model_rebuild()
