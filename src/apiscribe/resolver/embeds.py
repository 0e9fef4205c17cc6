# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Expansion of embedded (base class) members into their owning types."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from apiscribe.model.records import FieldRecord, TypeRecord
from apiscribe.resolver.aliases import resolve_alias

if TYPE_CHECKING:
    from apiscribe.registry.store import ModelRegistry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Returns the fields of a type the registry does not hold, or None if unknown.
SemanticLookup = Callable[[str], list[FieldRecord] | None]


class TypeResolver:
    """Post-processes a registry: embedded member expansion and alias resolution.

    Args:
        registry: The registry to resolve in place.
        semantic_lookup: Fallback for embedded types that are not extracted
            models, e.g. plain mixin classes.
    """

    def __init__(self, registry: ModelRegistry, semantic_lookup: SemanticLookup | None = None) -> None:
        self._registry = registry
        self._semantic_lookup = semantic_lookup

    def expand_embeds(self) -> None:
        """Expand every type's embedded members, depth-first.

        One visited set is shared by the whole pass: a type is expanded at
        most once, and a type met again while it is being expanded is taken
        as complete, which ends embedding cycles. Embedded fields are placed
        where the embed was declared; a field already present under the same
        name (declared on the type itself or by an earlier embed) is kept.
        Embeds that cannot be found are dropped.
        """
        resolved: set[tuple[str, tuple[str, ...]]] = set()
        for record in self._registry.type_variants():
            self._expand(record, resolved)

    def resolve_alias(self, name: str) -> str:
        """Resolve an alias chain over the registry's alias map."""
        return resolve_alias(self._registry.aliases, name)

    def _expand(self, record: TypeRecord, resolved: set[tuple[str, tuple[str, ...]]]) -> None:
        key = (record.name, tuple(sorted(record.documents)))
        if key in resolved:
            return
        resolved.add(key)
        if not record.embeds:
            return

        insertions: dict[int, list[FieldRecord]] = {}
        for embed in record.embeds:
            fields = self._embedded_fields(embed.name, record, resolved)
            if fields is None:
                logger.debug("Dropping unknown embedded type %s in %s", embed.name, record.name)
                continue
            insertions.setdefault(embed.position, []).extend(fields)

        own = record.fields
        seen = {f.name for f in own}
        expanded: list[FieldRecord] = []
        for index in range(len(own) + 1):
            for embedded in insertions.get(index, []):
                if embedded.name in seen:
                    continue
                seen.add(embedded.name)
                expanded.append(embedded.model_copy(deep=True))
            if index < len(own):
                expanded.append(own[index])
        trailing = [f for pos, fields in insertions.items() if pos > len(own) for f in fields]
        for embedded in trailing:
            if embedded.name not in seen:
                seen.add(embedded.name)
                expanded.append(embedded.model_copy(deep=True))
        record.fields = expanded

    def _embedded_fields(
        self,
        name: str,
        owner: TypeRecord,
        resolved: set[tuple[str, tuple[str, ...]]],
    ) -> list[FieldRecord] | None:
        target = self._find_type(name, owner)
        if target is not None:
            self._expand(target, resolved)
            return target.fields
        if self._semantic_lookup is not None:
            return self._semantic_lookup(name)
        return None

    def _find_type(self, name: str, owner: TypeRecord) -> TypeRecord | None:
        model = self._registry.find_model_name(name)
        if model is None:
            return None
        document = owner.documents[0] if owner.documents else ""
        return self._registry.get_type(model, document) or self._registry.get_type(model)
