# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Cross-module lookup of class members by qualified name."""

from __future__ import annotations

from apiscribe.source.declarations import ClassDeclaration, MemberDeclaration, NamedTypeExpr, SourceUnit

# ###############
# Public Interface
# ###############


class SemanticIndex:
    """Indexes every loaded class by ``module.Name``, ``package.Name`` and ``Name``.

    Used by the type resolver when an embedded type is not an extracted model,
    e.g. a plain base class declared in another module.
    """

    def __init__(self, units: list[SourceUnit]) -> None:
        self._classes: dict[str, ClassDeclaration] = {}
        for unit in units:
            for cls in unit.classes():
                # Bare names are first-come so a later module cannot shadow them.
                self._classes.setdefault(cls.name, cls)
                self._classes[f"{unit.package}.{cls.name}"] = cls
                self._classes[f"{unit.module}.{cls.name}"] = cls

    def resolve_named_type(self, qualified_name: str) -> list[MemberDeclaration] | None:
        """Return the named members of a class, base class members first.

        Base classes are flattened recursively; a class already being
        flattened is skipped so inheritance cycles terminate.

        Returns:
            The member list, or ``None`` when no class of that name is known.
        """
        cls = self._lookup(qualified_name)
        if cls is None:
            return None
        return self._flatten(cls, set())

    def _lookup(self, name: str) -> ClassDeclaration | None:
        found = self._classes.get(name)
        if found is None and "." in name:
            found = self._classes.get(name.rsplit(".", 1)[-1])
        return found

    def _flatten(self, cls: ClassDeclaration, visiting: set[str]) -> list[MemberDeclaration]:
        visiting.add(cls.name)
        members: list[MemberDeclaration] = []
        for member in cls.members:
            if member.name is not None:
                members.append(member)
                continue
            assert isinstance(member.type, NamedTypeExpr)
            base = self._lookup(member.type.name)
            if base is None or base.name in visiting:
                continue
            members.extend(self._flatten(base, visiting))
        return members
