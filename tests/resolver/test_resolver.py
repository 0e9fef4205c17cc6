# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for alias resolution and embedded member expansion."""

from apiscribe.model import EmbedRef, FieldRecord, TypeRecord
from apiscribe.registry import ModelRegistry
from apiscribe.resolver import TypeResolver, resolve_alias

# ###############
# Helpers
# ###############


def _record(name: str, fields: list[str], embeds: list[tuple[str, int]] | None = None) -> TypeRecord:
    return TypeRecord(
        name=name,
        fields=[FieldRecord(name=f) for f in fields],
        embeds=[EmbedRef(name=e, position=p) for e, p in embeds or []],
    )


def _field_names(registry: ModelRegistry, name: str) -> list[str]:
    record = registry.get_type(name)
    assert record is not None
    return [f.name for f in record.fields]


# ###############
# Aliases
# ###############


class TestResolveAlias:
    def test_qualified_alias(self) -> None:
        assert resolve_alias({"model.Fee": "workspace.Fee"}, "model.Fee") == "workspace.Fee"

    def test_chain_follows_short_names(self) -> None:
        aliases = {"api.Charge": "model.Fee", "Fee": "billing.Money"}
        assert resolve_alias(aliases, "api.Charge") == "billing.Money"

    def test_non_alias_is_returned_unchanged(self) -> None:
        assert resolve_alias({"A": "B"}, "C") == "C"

    def test_cycle_terminates_on_repeated_name(self) -> None:
        assert resolve_alias({"A": "B", "B": "A"}, "A") == "A"

    def test_resolver_uses_registry_aliases(self) -> None:
        registry = ModelRegistry()
        registry.put_alias("model.Fee", "workspace.Fee")
        assert TypeResolver(registry).resolve_alias("model.Fee") == "workspace.Fee"


# ###############
# Embeds
# ###############


class TestExpandEmbeds:
    def test_transitive_embedding(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("A", [], [("B", 0)]))
        registry.put_type(_record("B", [], [("C", 0)]))
        registry.put_type(_record("C", ["x"]))
        TypeResolver(registry).expand_embeds()
        assert _field_names(registry, "A") == ["x"]
        assert _field_names(registry, "B") == ["x"]

    def test_embedded_fields_inserted_at_position(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("Pet", ["id", "name"], [("Audit", 1)]))
        registry.put_type(_record("Audit", ["created", "updated"]))
        TypeResolver(registry).expand_embeds()
        assert _field_names(registry, "Pet") == ["id", "created", "updated", "name"]

    def test_own_field_wins_over_embedded(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("Pet", ["id"], [("Base", 0)]))
        registry.put_type(_record("Base", ["id", "kind"]))
        TypeResolver(registry).expand_embeds()
        assert _field_names(registry, "Pet") == ["kind", "id"]

    def test_embedded_fields_are_copies(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("Pet", [], [("Base", 0)]))
        registry.put_type(_record("Base", ["kind"]))
        TypeResolver(registry).expand_embeds()
        pet = registry.get_type("Pet")
        base = registry.get_type("Base")
        assert pet is not None and base is not None
        assert pet.fields[0] is not base.fields[0]

    def test_self_embedding_terminates(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("Node", ["value"], [("Node", 0)]))
        TypeResolver(registry).expand_embeds()
        assert _field_names(registry, "Node") == ["value"]

    def test_mutual_embedding_terminates(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("A", ["a"], [("B", 0)]))
        registry.put_type(_record("B", ["b"], [("A", 0)]))
        TypeResolver(registry).expand_embeds()
        assert _field_names(registry, "B") == ["a", "b"]
        assert _field_names(registry, "A") == ["b", "a"]

    def test_unknown_embed_is_dropped(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("Pet", ["id"], [("pydantic.BaseModel", 0)]))
        TypeResolver(registry).expand_embeds()
        assert _field_names(registry, "Pet") == ["id"]

    def test_semantic_lookup_fallback(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("Pet", ["id"], [("mixins.Timestamps", 1)]))
        calls: list[str] = []

        def lookup(name: str) -> list[FieldRecord] | None:
            calls.append(name)
            return [FieldRecord(name="created")] if name == "mixins.Timestamps" else None

        TypeResolver(registry, lookup).expand_embeds()
        assert _field_names(registry, "Pet") == ["id", "created"]
        assert calls == ["mixins.Timestamps"]

    def test_embed_found_by_python_name(self) -> None:
        registry = ModelRegistry()
        registry.put_type(_record("Pet", ["id"], [("models.Base", 0)]))
        registry.put_type(_record("BaseDTO", ["kind"]), ["Base", "models.Base"])
        TypeResolver(registry).expand_embeds()
        assert _field_names(registry, "Pet") == ["kind", "id"]
