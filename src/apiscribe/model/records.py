# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Records extracted from annotated source declarations.

Records are created once during extraction, extended in place by the type
resolver (which only appends fields) and read-only afterwards.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# Name of the document that collects every entity without a ``spec:`` directive.
DEFAULT_DOCUMENT = "default"

TypeKind = Literal["record", "array", "map", "primitive", "union"]


class Contact(BaseModel):
    """Contact details from a ``Contact:`` section."""

    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(BaseModel):
    """License details from a ``License:`` section."""

    name: str | None = None
    url: str | None = None


class ExternalDocs(BaseModel):
    """A link to external documentation."""

    description: str | None = None
    url: str | None = None


class TagInfo(BaseModel):
    """A named tag with an optional description."""

    name: str
    description: str | None = None


class ServerInfo(BaseModel):
    """A server URL with an optional description."""

    url: str
    description: str | None = None


class SecuritySchemeInfo(BaseModel):
    """A named security scheme declared in a metadata block."""

    name: str
    type: str = "apiKey"
    description: str | None = None
    location: str | None = None
    param_name: str | None = None
    scheme: str | None = None
    bearer_format: str | None = None


class SecurityRequirement(BaseModel):
    """A reference to a security scheme, with optional scopes."""

    name: str
    scopes: list[str] = _Field(default_factory=list)


class MetadataBlock(BaseModel):
    """Document-level metadata from a ``swagger:meta`` comment block.

    Attributes:
        documents: Target documents this block applies to. Empty means the
            block is general and visible to every document.
    """

    title: str | None = None
    version: str | None = None
    description: str | None = None
    terms_of_service: str | None = None
    host: str | None = None
    base_path: str | None = None
    schemes: list[str] = _Field(default_factory=list)
    contact: Contact | None = None
    license: License | None = None
    external_docs: ExternalDocs | None = None
    tags: list[TagInfo] = _Field(default_factory=list)
    servers: list[ServerInfo] = _Field(default_factory=list)
    security_schemes: dict[str, SecuritySchemeInfo] = _Field(default_factory=dict)
    security: list[SecurityRequirement] = _Field(default_factory=list)
    consumes: list[str] = _Field(default_factory=list)
    produces: list[str] = _Field(default_factory=list)
    documents: list[str] = _Field(default_factory=list)
    source: str = ""


class FieldRecord(BaseModel):
    """A member of a composite type or parameter set."""

    name: str
    serialized_name: str | None = None
    type_name: str = "str"
    is_array: bool = False
    is_map: bool = False
    key_type: str | None = None
    nullable: bool = False
    required: bool = False
    explicit_required: bool = False
    explicit_optional: bool = False
    request_body: bool = False
    deprecated: bool = False
    read_only: bool = False
    write_only: bool = False
    location: str | None = None
    description: str | None = None
    example: str | None = None
    default: str | None = None
    enum_values: list[Any] = _Field(default_factory=list)
    constraints: dict[str, str] = _Field(default_factory=dict)
    inline: TypeRecord | None = None

    @property
    def output_name(self) -> str:
        """The property name used in the produced document."""
        return self.serialized_name or self.name

    @property
    def is_required(self) -> bool:
        """True when the field must be present; ``required: false`` always wins."""
        if self.explicit_optional:
            return False
        return self.required or self.explicit_required


class EmbedRef(BaseModel):
    """An unresolved embedded type and the field position it expands at."""

    name: str
    position: int = 0


class Discriminator(BaseModel):
    """Discriminator property and value-to-type mapping of a union type."""

    property_name: str
    mapping: dict[str, str] = _Field(default_factory=dict)


class TypeRecord(BaseModel):
    """A composite, container, alias or union type declaration.

    Attributes:
        kind: ``record`` for classes with fields, ``array``/``map``/``primitive``
            for annotated aliases, ``union`` for oneOf/anyOf declarations.
        element_type: Element type of an array or map, or the underlying
            type of a primitive alias.
        embeds: Base classes not yet expanded by the type resolver.
        operations: For parameter sets, the operation ids they describe.
    """

    name: str
    kind: TypeKind = "record"
    fields: list[FieldRecord] = _Field(default_factory=list)
    element_type: str | None = None
    key_type: str | None = None
    branches: list[str] = _Field(default_factory=list)
    composition: Literal["oneOf", "anyOf"] | None = None
    discriminator: Discriminator | None = None
    all_of: list[str] = _Field(default_factory=list)
    one_of: list[str] = _Field(default_factory=list)
    any_of: list[str] = _Field(default_factory=list)
    embeds: list[EmbedRef] = _Field(default_factory=list)
    description: str | None = None
    example: str | None = None
    is_parameter: bool = False
    operations: list[str] = _Field(default_factory=list)
    documents: list[str] = _Field(default_factory=list)
    python_name: str = ""
    source: str = ""


class EnumRecord(BaseModel):
    """An enumeration with its literal values keyed by member name."""

    name: str
    base_type: str = "str"
    values: dict[str, Any] = _Field(default_factory=dict)
    description: str | None = None
    example: str | None = None
    documents: list[str] = _Field(default_factory=list)
    python_name: str = ""
    source: str = ""

    def sorted_values(self) -> list[Any]:
        """Values ordered by member name."""
        return [self.values[key] for key in sorted(self.values)]


class ResponseRecord(BaseModel):
    """One ``STATUS: [[]|map[K]]Type [description: text]`` response line."""

    status: str
    type_name: str | None = None
    is_array: bool = False
    is_map: bool = False
    key_type: str | None = None
    description: str = ""


class OperationRecord(BaseModel):
    """An HTTP operation declared with ``swagger:route``."""

    method: str
    path: str
    operation_id: str
    tags: list[str] = _Field(default_factory=list)
    summary: str | None = None
    description: str | None = None
    deprecated: bool = False
    responses: list[ResponseRecord] = _Field(default_factory=list)
    security: list[SecurityRequirement] = _Field(default_factory=list)
    consumes: list[str] = _Field(default_factory=list)
    produces: list[str] = _Field(default_factory=list)
    ignored_parameters: list[str] = _Field(default_factory=list)
    extensions: dict[str, Any] = _Field(default_factory=dict)
    documents: list[str] = _Field(default_factory=list)
    source: str = ""


# Resolve the forward reference between FieldRecord and TypeRecord.
FieldRecord.model_rebuild()
TypeRecord.model_rebuild()
