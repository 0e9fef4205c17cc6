# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of operation records into OpenAPI operations."""

from __future__ import annotations

import http
import logging
import re

from apiscribe.assembler.convert import SchemaConverter
from apiscribe.assembler.typemap import lookup_mapping
from apiscribe.model.document import Encoding, MediaType, Operation, Parameter, RequestBody, Response, Schema
from apiscribe.model.records import FieldRecord, OperationRecord, ResponseRecord
from apiscribe.registry.store import ModelRegistry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_CONTENT_TYPE = "application/json"
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class OperationBuilder:
    """Builds OpenAPI operations for one target document.

    Parameters come from the ``swagger:parameters`` set naming the
    operation id. A member located ``in: body`` becomes the request body,
    which is only kept for POST, PUT and PATCH.
    """

    def __init__(self, converter: SchemaConverter, registry: ModelRegistry, document: str) -> None:
        self._converter = converter
        self._registry = registry
        self._document = document

    def build(self, record: OperationRecord) -> Operation:
        parameters: list[Parameter] = []
        body: RequestBody | None = None
        params = self._registry.find_parameters(record.operation_id, self._document)
        if params is not None:
            path_names = set(_PATH_PARAM.findall(record.path))
            ignored = set(record.ignored_parameters)
            for field in params.fields:
                if field.output_name in ignored or field.name in ignored:
                    continue
                if field.request_body or field.location == "body":
                    body = self._request_body(field, record)
                    continue
                parameters.append(self._parameter(field, path_names))

        if body is not None and record.method not in BODY_METHODS:
            logger.debug("Dropping request body of %s %s", record.method, record.path)
            body = None

        return Operation(
            tags=record.tags or None,
            summary=record.summary,
            description=record.description,
            operation_id=record.operation_id,
            parameters=parameters or None,
            request_body=body,
            responses=self._responses(record),
            deprecated=True if record.deprecated else None,
            security=[{req.name: list(req.scopes)} for req in record.security] or None,
            **record.extensions,
        )

    def _parameter(self, field: FieldRecord, path_names: set[str]) -> Parameter:
        name = field.output_name
        location = field.location or ("path" if name in path_names else "query")
        schema = self._converter.field_schema(field)
        schema.description = None
        required = location == "path" or field.is_required
        return Parameter(
            name=name,
            in_=location,
            description=field.description or None,
            required=True if required else None,
            deprecated=True if field.deprecated else None,
            schema_=schema,
        )

    def _request_body(self, field: FieldRecord, record: OperationRecord) -> RequestBody:
        schema = self._converter.field_schema(field)
        schema.description = None
        content: dict[str, MediaType] = {}
        for content_type in record.consumes or [DEFAULT_CONTENT_TYPE]:
            media = MediaType(schema_=schema)
            if content_type == "multipart/form-data":
                media.encoding = self._binary_encoding(field) or None
            content[content_type] = media
        return RequestBody(
            description=field.description or None,
            required=True if field.is_required else None,
            content=content,
        )

    def _binary_encoding(self, field: FieldRecord) -> dict[str, Encoding]:
        if field.inline is not None:
            members = field.inline.fields
        else:
            model = self._registry.find_model_name(field.type_name)
            target = self._registry.get_type(model, self._document) if model else None
            members = target.fields if target is not None else []
        encoding: dict[str, Encoding] = {}
        for member in members:
            mapping = lookup_mapping(member.type_name, self._converter.type_mappings)
            fmt = member.constraints.get("format") or (mapping.format if mapping else None)
            if fmt == "binary":
                encoding[member.output_name] = Encoding(content_type="application/octet-stream")
        return encoding

    def _responses(self, record: OperationRecord) -> dict[str, Response]:
        responses: dict[str, Response] = {}
        for entry in record.responses:
            key = "default" if entry.status.lower() == "default" else entry.status
            response = Response(description=entry.description or _reason(entry.status))
            if entry.type_name:
                schema = self._response_schema(entry)
                response.content = {
                    content_type: MediaType(schema_=schema)
                    for content_type in record.produces or [DEFAULT_CONTENT_TYPE]
                }
            responses[key] = response
        return responses

    def _response_schema(self, entry: ResponseRecord) -> Schema:
        schema = self._converter.type_schema(entry.type_name or "object")
        if entry.is_array:
            return Schema(type="array", items=schema)
        if entry.is_map:
            return Schema(type="object", additional_properties=schema)
        return schema


# ################
# Implementation
# ################

_PATH_PARAM = re.compile(r"\{([^}/]+)\}")


def _reason(status: str) -> str:
    try:
        return http.HTTPStatus(int(status)).phrase
    except ValueError:
        return ""
