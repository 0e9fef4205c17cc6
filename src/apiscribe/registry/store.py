# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Name-keyed store of everything extracted in one scan pass.

The registry is passive: it stores records and answers lookups. Putting a
record under an existing name replaces the earlier one without error.
"""

from __future__ import annotations

from apiscribe.model.records import (
    DEFAULT_DOCUMENT,
    EnumRecord,
    MetadataBlock,
    OperationRecord,
    TypeRecord,
)
from apiscribe.names import name_candidates
from apiscribe.resolver.aliases import resolve_alias

# ###############
# Public Interface
# ###############


class ModelRegistry:
    """Records of one scan plus lookup indices.

    Attributes:
        types: Latest type record per name, regardless of target documents.
        type_to_struct: Python class name (bare and ``package.Name``) to model name.
        type_to_enum: Python class name (bare and ``package.Name``) to enum name.
        aliases: Alias name (bare and ``package.Name``) to target name.
        sources: Entity name to the source unit path that declared it, per
            entity kind (``"type"``, ``"enum"``, ``"operation"``, ``"alias"``).
    """

    def __init__(self) -> None:
        self.metadata: list[MetadataBlock] = []
        self.types: dict[str, TypeRecord] = {}
        self.enums: dict[str, EnumRecord] = {}
        self.operations: dict[str, OperationRecord] = {}
        self.type_to_struct: dict[str, str] = {}
        self.type_to_enum: dict[str, str] = {}
        self.aliases: dict[str, str] = {}
        self.sources: dict[str, dict[str, str]] = {"type": {}, "enum": {}, "operation": {}, "alias": {}}
        # Name -> target-document set -> record. The empty tuple is the general variant.
        self._variants: dict[str, dict[tuple[str, ...], TypeRecord]] = {}

    # -------- metadata --------

    def put_metadata(self, block: MetadataBlock) -> None:
        self.metadata.append(block)

    @property
    def general_metadata(self) -> MetadataBlock | None:
        """The first metadata block without target documents."""
        return next((m for m in self.metadata if not m.documents), None)

    def metadata_for(self, document: str) -> MetadataBlock | None:
        """The first metadata block that names *document*."""
        return next((m for m in self.metadata if document in m.documents), None)

    # -------- types --------

    def put_type(self, record: TypeRecord, python_names: list[str] | None = None) -> None:
        """Store a type record and index its Python names."""
        self.types[record.name] = record
        self._variants.setdefault(record.name, {})[tuple(sorted(record.documents))] = record
        for python_name in python_names or []:
            self.type_to_struct[python_name] = record.name
        self.sources["type"][record.name] = record.source

    def get_type(self, name: str, document: str | None = None) -> TypeRecord | None:
        """Look up a type by name.

        Args:
            name: Model name.
            document: When given, prefer the variant declared for this
                document, falling back to the general variant. Variants that
                belong only to other documents are not returned.
        """
        if document is None:
            return self.types.get(name)
        variants = self._variants.get(name, {})
        specific = [record for key, record in variants.items() if document in key]
        if specific:
            return specific[-1]
        return variants.get(())

    def type_variants(self) -> list[TypeRecord]:
        """Every stored type record, including per-document variants, in name order."""
        return [
            record
            for name in sorted(self._variants)
            for _, record in sorted(self._variants[name].items())
        ]

    def find_model_name(self, type_name: str) -> str | None:
        """Map a type name as written in source to a model name.

        Tries the model names, then the Python class index, first with the
        full name and then with its short name.
        """
        for candidate in name_candidates(type_name):
            if candidate in self.types:
                return candidate
            if candidate in self.type_to_struct:
                return self.type_to_struct[candidate]
        return None

    def find_parameters(self, operation_id: str, document: str | None = None) -> TypeRecord | None:
        """The parameter set declared for *operation_id*, if any.

        With a *document*, a set declared for that document is preferred over
        a general one; without, only general sets qualify first.
        """
        general: TypeRecord | None = None
        specific: TypeRecord | None = None
        for record in self.type_variants():
            if not record.is_parameter or operation_id not in record.operations:
                continue
            if not record.documents:
                general = general or record
            elif document is None or document in record.documents:
                specific = specific or record
        if document is None:
            return general or specific
        return specific or general

    def all_types_with_document(self, document: str) -> list[TypeRecord]:
        """Model types visible in *document*, sorted by name.

        A variant declared for the document replaces the general one of the
        same name. Parameter sets are not models and are excluded.
        """
        visible: list[TypeRecord] = []
        for name in sorted(self._variants):
            record = self.get_type(name, document)
            if record is not None and not record.is_parameter:
                visible.append(record)
        return visible

    # -------- enums --------

    def put_enum(self, record: EnumRecord, python_names: list[str] | None = None) -> None:
        self.enums[record.name] = record
        for python_name in python_names or []:
            self.type_to_enum[python_name] = record.name
        self.sources["enum"][record.name] = record.source

    def get_enum(self, name: str) -> EnumRecord | None:
        return self.enums.get(name)

    def find_enum_for_type(self, type_name: str) -> EnumRecord | None:
        """Find the enumeration a type name refers to.

        Tries the name directly, then its short name, then resolves it as an
        alias and repeats with the result until an enum is found or the name
        is not an alias.
        """
        seen: set[str] = set()
        name = type_name
        while name not in seen:
            seen.add(name)
            for candidate in name_candidates(name):
                if candidate in self.enums:
                    return self.enums[candidate]
                if candidate in self.type_to_enum:
                    return self.enums.get(self.type_to_enum[candidate])
            resolved = resolve_alias(self.aliases, name)
            if resolved == name:
                return None
            name = resolved
        return None

    def all_enums_with_document(self, document: str) -> list[EnumRecord]:
        """General enums plus those declared for *document*, sorted by name."""
        return [
            self.enums[name]
            for name in sorted(self.enums)
            if not self.enums[name].documents or document in self.enums[name].documents
        ]

    # -------- operations --------

    def put_operation(self, record: OperationRecord) -> None:
        self.operations[record.operation_id] = record
        self.sources["operation"][record.operation_id] = record.source

    def get_operation(self, operation_id: str) -> OperationRecord | None:
        return self.operations.get(operation_id)

    def all_operations_with_document(self, document: str) -> list[OperationRecord]:
        """Operations that belong to *document*, sorted by path and method.

        For the default document this includes every operation without
        target documents.
        """
        selected = [
            op
            for op in self.operations.values()
            if document in op.documents or (document == DEFAULT_DOCUMENT and not op.documents)
        ]
        return sorted(selected, key=lambda op: (op.path, op.method, op.operation_id))

    def document_names(self) -> list[str]:
        """Every document named by an operation; untagged operations add the default."""
        names: set[str] = set()
        for op in self.operations.values():
            if op.documents:
                names.update(op.documents)
            else:
                names.add(DEFAULT_DOCUMENT)
        return sorted(names)

    # -------- aliases --------

    def put_alias(self, name: str, target: str, source: str = "") -> None:
        self.aliases[name] = target
        self.sources["alias"][name] = source
