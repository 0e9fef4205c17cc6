# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for OpenAPI document assembly."""

from typing import Any

from apiscribe.assembler import AssemblerConfig, DocumentAssembler, TypeMapping, TypeMappingRegistry
from apiscribe.model import (
    EnumRecord,
    FieldRecord,
    MetadataBlock,
    OperationRecord,
    ResponseRecord,
    SecuritySchemeInfo,
    TypeRecord,
)
from apiscribe.model.document import document_to_dict
from apiscribe.output import serialize_document
from apiscribe.registry import ModelRegistry

# ###############
# Helpers
# ###############


def _op(
    operation_id: str,
    path: str,
    method: str = "GET",
    documents: list[str] | None = None,
    responses: list[ResponseRecord] | None = None,
    **kwargs: Any,
) -> OperationRecord:
    return OperationRecord(
        method=method,
        path=path,
        operation_id=operation_id,
        documents=documents or [],
        responses=responses or [],
        **kwargs,
    )


def _ok(type_name: str | None = None) -> list[ResponseRecord]:
    return [ResponseRecord(status="200", type_name=type_name, description="ok")]


def _field(name: str, type_name: str = "str", required: bool = True, **kwargs: Any) -> FieldRecord:
    return FieldRecord(name=name, type_name=type_name, required=required, **kwargs)


def _assemble(registry: ModelRegistry, document: str = "default", **config: Any) -> dict[str, Any]:
    return document_to_dict(DocumentAssembler(registry, AssemblerConfig(**config)).assemble_document(document))


def _user_registry() -> ModelRegistry:
    registry = ModelRegistry()
    registry.put_type(TypeRecord(name="User", fields=[_field("name"), _field("address", "Address")]))
    registry.put_type(TypeRecord(name="Address", fields=[_field("city")]))
    registry.put_type(TypeRecord(name="Orphan", fields=[_field("x", "int")]))
    registry.put_operation(_op("getUser", "/users/{id}", responses=_ok("User")))
    return registry


# ###############
# Document partition
# ###############


class TestDocumentPartition:
    def test_operations_split_by_document(self) -> None:
        registry = ModelRegistry()
        registry.put_operation(_op("op1", "/a", responses=_ok()))
        registry.put_operation(_op("op2", "/b", documents=["admin"], responses=_ok()))
        documents = DocumentAssembler(registry).assemble_all()
        assert sorted(documents) == ["admin", "default"]
        assert documents["default"].operation_ids() == ["op1"]
        assert documents["admin"].operation_ids() == ["op2"]

    def test_operation_in_several_documents(self) -> None:
        registry = ModelRegistry()
        registry.put_operation(_op("op1", "/a", responses=_ok()))
        registry.put_operation(_op("op3", "/c", documents=["admin", "public"], responses=_ok()))
        documents = DocumentAssembler(registry).assemble_all()
        assert documents["admin"].operation_ids() == ["op3"]
        assert documents["public"].operation_ids() == ["op3"]
        assert documents["default"].operation_ids() == ["op1"]

    def test_target_name_is_case_insensitive(self) -> None:
        registry = ModelRegistry()
        registry.put_operation(_op("op2", "/b", documents=["admin"], responses=_ok()))
        document = DocumentAssembler(registry).assemble_document("Admin")
        assert document.operation_ids() == ["op2"]

    def test_no_default_leaves_default_document_out(self) -> None:
        registry = ModelRegistry()
        registry.put_operation(_op("op1", "/a", responses=_ok()))
        registry.put_operation(_op("op2", "/b", documents=["admin"], responses=_ok()))
        documents = DocumentAssembler(registry, AssemblerConfig(no_default=True)).assemble_all()
        assert list(documents) == ["admin"]

    def test_empty_registry_yields_default_document(self) -> None:
        documents = DocumentAssembler(ModelRegistry()).assemble_all()
        assert list(documents) == ["default"]
        assert document_to_dict(documents["default"]) == {
            "openapi": "3.0.4",
            "info": {"title": "API", "version": "1.0.0"},
            "paths": {},
        }

    def test_document_variant_of_model_is_preferred(self) -> None:
        registry = ModelRegistry()
        registry.put_type(TypeRecord(name="Pet", description="general"))
        registry.put_type(TypeRecord(name="Pet", description="admin view", documents=["admin"]))
        registry.put_operation(_op("op1", "/a", responses=_ok("Pet")))
        registry.put_operation(_op("op2", "/b", documents=["admin"], responses=_ok("Pet")))
        admin = _assemble(registry, "admin")
        default = _assemble(registry)
        assert admin["components"]["schemas"]["Pet"]["description"] == "admin view"
        assert default["components"]["schemas"]["Pet"]["description"] == "general"


# ###############
# Component schemas
# ###############


class TestComponents:
    def test_reference_closure_prunes_unused(self) -> None:
        data = _assemble(_user_registry())
        schemas = data["components"]["schemas"]
        assert list(schemas) == ["Address", "User"]
        assert schemas["User"] == {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "address": {"$ref": "#/components/schemas/Address"},
            },
            "required": ["name", "address"],
        }

    def test_closure_follows_branches_and_element_types(self) -> None:
        """Union branches, array and map elements and nested properties are all reachable."""
        registry = ModelRegistry()
        registry.put_type(TypeRecord(name="Pets", kind="array", element_type="Pet"))
        registry.put_type(TypeRecord(name="Pet", kind="union", branches=["Cat", "Dog"], composition="oneOf"))
        registry.put_type(TypeRecord(name="Cat", fields=[_field("toy", "Toy")]))
        registry.put_type(TypeRecord(name="Dog", fields=[_field("owners", "Owners")]))
        registry.put_type(TypeRecord(name="Owners", kind="map", element_type="Owner"))
        registry.put_type(TypeRecord(name="Owner", fields=[_field("name")]))
        registry.put_type(TypeRecord(name="Toy", fields=[_field("label")]))
        registry.put_type(TypeRecord(name="Bird", fields=[_field("wings", "int")]))
        registry.put_operation(_op("listPets", "/pets", responses=_ok("Pets")))

        schemas = _assemble(registry)["components"]["schemas"]
        assert list(schemas) == ["Cat", "Dog", "Owner", "Owners", "Pet", "Pets", "Toy"]
        assert schemas["Pets"] == {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
        assert schemas["Pet"] == {
            "oneOf": [{"$ref": "#/components/schemas/Cat"}, {"$ref": "#/components/schemas/Dog"}]
        }
        assert schemas["Owners"] == {
            "type": "object",
            "additionalProperties": {"$ref": "#/components/schemas/Owner"},
        }

    def test_keep_unused_includes_every_model(self) -> None:
        data = _assemble(_user_registry(), clean_unused=False)
        assert list(data["components"]["schemas"]) == ["Address", "Orphan", "User"]

    def test_enum_is_referenced_by_default(self) -> None:
        registry = ModelRegistry()
        registry.put_enum(EnumRecord(name="Status", values={"S": "sold", "A": "available"}), ["Status"])
        registry.put_type(TypeRecord(name="Pet", fields=[_field("status", "Status")]))
        registry.put_operation(_op("getPet", "/pet", responses=_ok("Pet")))
        schemas = _assemble(registry)["components"]["schemas"]
        assert schemas["Pet"]["properties"]["status"] == {"$ref": "#/components/schemas/Status"}
        assert schemas["Status"] == {"type": "string", "enum": ["available", "sold"]}

    def test_inline_enums(self) -> None:
        registry = ModelRegistry()
        registry.put_enum(EnumRecord(name="Status", values={"S": "sold", "A": "available"}), ["Status"])
        registry.put_type(TypeRecord(name="Pet", fields=[_field("status", "Status")]))
        registry.put_operation(_op("getPet", "/pet", responses=_ok("Pet")))
        schemas = _assemble(registry, enum_refs=False)["components"]["schemas"]
        assert list(schemas) == ["Pet"]
        assert schemas["Pet"]["properties"]["status"] == {"type": "string", "enum": ["available", "sold"]}

    def test_inline_enums_are_not_components_when_keeping_unused(self) -> None:
        registry = ModelRegistry()
        registry.put_enum(EnumRecord(name="Status", values={"S": "sold"}), ["Status"])
        registry.put_type(TypeRecord(name="Pet", fields=[_field("status", "Status")]))
        registry.put_operation(_op("getPet", "/pet", responses=_ok("Pet")))
        schemas = _assemble(registry, enum_refs=False, clean_unused=False)["components"]["schemas"]
        assert list(schemas) == ["Pet"]

    def test_reference_with_annotations_is_wrapped(self) -> None:
        registry = ModelRegistry()
        registry.put_type(TypeRecord(name="Address", fields=[_field("city")]))
        registry.put_type(
            TypeRecord(name="User", fields=[_field("home", "Address", description="Where they live.", nullable=True)])
        )
        registry.put_operation(_op("getUser", "/user", responses=_ok("User")))
        home = _assemble(registry)["components"]["schemas"]["User"]["properties"]["home"]
        assert home == {
            "allOf": [{"$ref": "#/components/schemas/Address"}],
            "description": "Where they live.",
            "nullable": True,
        }

    def test_array_field_and_constraints(self) -> None:
        registry = ModelRegistry()
        registry.put_type(
            TypeRecord(
                name="Tagged",
                fields=[
                    _field("tags", is_array=True, constraints={"minItems": "1", "maxLength": "8"}),
                    _field("count", "int", required=False, example="3"),
                ],
            )
        )
        registry.put_operation(_op("getTagged", "/tagged", responses=_ok("Tagged")))
        schema = _assemble(registry)["components"]["schemas"]["Tagged"]
        assert schema["properties"]["tags"] == {
            "type": "array",
            "items": {"type": "string", "maxLength": 8},
            "minItems": 1,
        }
        assert schema["properties"]["count"] == {"type": "integer", "format": "int64", "example": 3}
        assert schema["required"] == ["tags"]


# ###############
# Metadata
# ###############


class TestMetadata:
    def test_security_schemes_inherited_from_general_block(self) -> None:
        registry = ModelRegistry()
        registry.put_metadata(
            MetadataBlock(
                title="Store",
                security_schemes={
                    "api_key": SecuritySchemeInfo(
                        name="api_key", type="apiKey", location="header", param_name="X-API-Key"
                    )
                },
            )
        )
        registry.put_metadata(MetadataBlock(title="Admin", documents=["admin"]))
        registry.put_operation(_op("op2", "/b", documents=["admin"], responses=_ok()))
        data = _assemble(registry, "admin")
        assert data["info"]["title"] == "Admin"
        assert data["components"]["securitySchemes"] == {
            "api_key": {"type": "apiKey", "name": "X-API-Key", "in": "header"}
        }

    def test_servers_from_host_and_base_path(self) -> None:
        registry = ModelRegistry()
        registry.put_metadata(MetadataBlock(host="pets.example.com", base_path="/v1", schemes=["http"]))
        assert _assemble(registry)["servers"] == [{"url": "http://pets.example.com/v1"}]


# ###############
# Operations
# ###############


class TestOperations:
    def test_path_and_query_parameters(self) -> None:
        registry = ModelRegistry()
        registry.put_type(
            TypeRecord(
                name="GetPetParams",
                is_parameter=True,
                operations=["getPet"],
                fields=[_field("id", "int", required=False), _field("verbose", "bool", required=False)],
            )
        )
        registry.put_operation(_op("getPet", "/pets/{id}", responses=_ok()))
        operation = _assemble(registry)["paths"]["/pets/{id}"]["get"]
        assert operation["parameters"] == [
            {"name": "id", "in": "path", "required": True, "schema": {"type": "integer", "format": "int64"}},
            {"name": "verbose", "in": "query", "schema": {"type": "boolean"}},
        ]

    def test_parameter_sets_are_not_components(self) -> None:
        registry = ModelRegistry()
        registry.put_type(TypeRecord(name="Params", is_parameter=True, operations=["op"], fields=[_field("q")]))
        registry.put_operation(_op("op", "/q", responses=_ok()))
        assert "components" not in _assemble(registry, clean_unused=False)

    def test_request_body_for_post(self) -> None:
        registry = ModelRegistry()
        registry.put_type(TypeRecord(name="Pet", fields=[_field("name")]))
        registry.put_type(
            TypeRecord(
                name="CreatePetParams",
                is_parameter=True,
                operations=["createPet", "listPets"],
                fields=[_field("body", "Pet", location="body", request_body=True)],
            )
        )
        registry.put_operation(_op("createPet", "/pets", "POST", responses=_ok("Pet")))
        registry.put_operation(_op("listPets", "/pets", "GET", responses=_ok()))
        path = _assemble(registry)["paths"]["/pets"]
        assert path["post"]["requestBody"] == {
            "required": True,
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
        }
        assert "requestBody" not in path["get"]

    def test_multipart_body_encodes_binary_members(self) -> None:
        """Binary members of a multipart body, by format or by custom type, are sent as octet streams."""
        registry = ModelRegistry()
        registry.put_type(
            TypeRecord(
                name="UploadForm",
                fields=[
                    _field("file", constraints={"format": "binary"}),
                    _field("thumbnail", "Blob"),
                    _field("caption"),
                ],
            )
        )
        registry.put_type(
            TypeRecord(
                name="UploadParams",
                is_parameter=True,
                operations=["upload"],
                fields=[_field("form", "UploadForm", location="body", request_body=True)],
            )
        )
        registry.put_operation(
            _op("upload", "/files", "POST", consumes=["multipart/form-data", "application/json"], responses=_ok())
        )
        mappings = TypeMappingRegistry({"Blob": TypeMapping("string", "binary")})
        document = DocumentAssembler(registry, type_mappings=mappings).assemble_document()

        content = document_to_dict(document)["paths"]["/files"]["post"]["requestBody"]["content"]
        octet = {"contentType": "application/octet-stream"}
        assert content["multipart/form-data"] == {
            "schema": {"$ref": "#/components/schemas/UploadForm"},
            "encoding": {"file": octet, "thumbnail": octet},
        }
        assert "encoding" not in content["application/json"]

    def test_responses(self) -> None:
        registry = ModelRegistry()
        registry.put_type(TypeRecord(name="Pet", fields=[_field("name")]))
        registry.put_operation(
            _op(
                "listPets",
                "/pets",
                responses=[
                    ResponseRecord(status="200", type_name="Pet", is_array=True),
                    ResponseRecord(status="404"),
                    ResponseRecord(status="default", description="unexpected error"),
                ],
                produces=["application/json", "application/xml"],
            )
        )
        responses = _assemble(registry)["paths"]["/pets"]["get"]["responses"]
        array = {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
        assert responses["200"] == {
            "description": "OK",
            "content": {"application/json": {"schema": array}, "application/xml": {"schema": array}},
        }
        assert responses["404"] == {"description": "Not Found"}
        assert responses["default"] == {"description": "unexpected error"}

    def test_tags_security_and_extensions(self) -> None:
        registry = ModelRegistry()
        registry.put_operation(
            _op(
                "getPet",
                "/pet",
                tags=["pets"],
                deprecated=True,
                extensions={"x-rate-limit": "100"},
                responses=_ok(),
            )
        )
        operation = _assemble(registry)["paths"]["/pet"]["get"]
        assert operation["tags"] == ["pets"]
        assert operation["deprecated"] is True
        assert operation["x-rate-limit"] == "100"
        assert operation["operationId"] == "getPet"


# ###############
# Determinism
# ###############


def test_assembly_is_deterministic() -> None:
    registry = _user_registry()
    registry.put_operation(_op("listUsers", "/users", responses=_ok("User")))
    first = serialize_document(DocumentAssembler(registry).assemble_document(), "json")
    second = serialize_document(DocumentAssembler(registry).assemble_document(), "json")
    assert first == second
    assert first.index('"/users":') < first.index('"/users/{id}":')
