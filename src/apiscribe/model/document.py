# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""OpenAPI 3 document model produced by the assembler.

Models use the OpenAPI spelling as aliases. Serialize with
:func:`document_to_dict` so unset members are omitted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

_CONFIG = ConfigDict(populate_by_name=True)


class Discriminator(BaseModel):
    model_config = _CONFIG

    property_name: str = _Field(alias="propertyName")
    mapping: dict[str, str] | None = None


class Schema(BaseModel):
    """A schema object, either a ``$ref`` or an inline definition."""

    model_config = _CONFIG

    ref: str | None = _Field(default=None, alias="$ref")
    type: str | None = None
    format: str | None = None
    description: str | None = None
    properties: dict[str, Schema] | None = None
    required: list[str] | None = None
    items: Schema | None = None
    additional_properties: Schema | None = _Field(default=None, alias="additionalProperties")
    enum: list[Any] | None = None
    example: Any = None
    default: Any = None
    nullable: bool | None = None
    deprecated: bool | None = None
    read_only: bool | None = _Field(default=None, alias="readOnly")
    write_only: bool | None = _Field(default=None, alias="writeOnly")
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = _Field(default=None, alias="minLength")
    max_length: int | None = _Field(default=None, alias="maxLength")
    pattern: str | None = None
    min_items: int | None = _Field(default=None, alias="minItems")
    max_items: int | None = _Field(default=None, alias="maxItems")
    unique_items: bool | None = _Field(default=None, alias="uniqueItems")
    all_of: list[Schema] | None = _Field(default=None, alias="allOf")
    one_of: list[Schema] | None = _Field(default=None, alias="oneOf")
    any_of: list[Schema] | None = _Field(default=None, alias="anyOf")
    discriminator: Discriminator | None = None


class Contact(BaseModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(BaseModel):
    name: str
    url: str | None = None


class Info(BaseModel):
    model_config = _CONFIG

    title: str
    version: str
    description: str | None = None
    terms_of_service: str | None = _Field(default=None, alias="termsOfService")
    contact: Contact | None = None
    license: License | None = None


class ExternalDocs(BaseModel):
    url: str
    description: str | None = None


class Server(BaseModel):
    url: str
    description: str | None = None


class Tag(BaseModel):
    name: str
    description: str | None = None


class SecurityScheme(BaseModel):
    model_config = _CONFIG

    type: str
    description: str | None = None
    name: str | None = None
    in_: str | None = _Field(default=None, alias="in")
    scheme: str | None = None
    bearer_format: str | None = _Field(default=None, alias="bearerFormat")


class Encoding(BaseModel):
    model_config = _CONFIG

    content_type: str | None = _Field(default=None, alias="contentType")


class MediaType(BaseModel):
    model_config = _CONFIG

    schema_: Schema | None = _Field(default=None, alias="schema")
    encoding: dict[str, Encoding] | None = None


class Parameter(BaseModel):
    model_config = _CONFIG

    name: str
    in_: str = _Field(alias="in")
    description: str | None = None
    required: bool | None = None
    deprecated: bool | None = None
    schema_: Schema | None = _Field(default=None, alias="schema")
    example: Any = None


class RequestBody(BaseModel):
    description: str | None = None
    required: bool | None = None
    content: dict[str, MediaType] = _Field(default_factory=dict)


class Response(BaseModel):
    description: str = ""
    content: dict[str, MediaType] | None = None


class Operation(BaseModel):
    """A path operation. Extra ``x-`` members are kept as vendor extensions."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = _Field(default=None, alias="operationId")
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = _Field(default=None, alias="requestBody")
    responses: dict[str, Response] = _Field(default_factory=dict)
    deprecated: bool | None = None
    security: list[dict[str, list[str]]] | None = None


class PathItem(BaseModel):
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None

    def operations(self) -> dict[str, Operation]:
        """The operations defined on this path, keyed by lower-case method."""
        return {
            method: op
            for method in ("get", "put", "post", "delete", "options", "head", "patch")
            if (op := getattr(self, method)) is not None
        }


class Components(BaseModel):
    model_config = _CONFIG

    schemas: dict[str, Schema] | None = None
    security_schemes: dict[str, SecurityScheme] | None = _Field(default=None, alias="securitySchemes")


class Document(BaseModel):
    """A complete OpenAPI document."""

    model_config = _CONFIG

    openapi: str
    info: Info
    external_docs: ExternalDocs | None = _Field(default=None, alias="externalDocs")
    servers: list[Server] | None = None
    tags: list[Tag] | None = None
    security: list[dict[str, list[str]]] | None = None
    paths: dict[str, PathItem] = _Field(default_factory=dict)
    components: Components | None = None

    def schema_names(self) -> list[str]:
        """Names of the component schemas, in document order."""
        if self.components is None or self.components.schemas is None:
            return []
        return list(self.components.schemas)

    def operation_ids(self) -> list[str]:
        """Operation ids across all paths, in document order."""
        ids: list[str] = []
        for item in self.paths.values():
            for op in item.operations().values():
                if op.operation_id:
                    ids.append(op.operation_id)
        return ids


def document_to_dict(document: Document) -> dict[str, Any]:
    """Convert a document to plain data with OpenAPI member names."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


# Resolve forward references for the recursive schema model.
Schema.model_rebuild()
