# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests demonstrating how records and OpenAPI documents are built."""

from apiscribe.model import EnumRecord, FieldRecord, TypeRecord
from apiscribe.model.document import (
    Components,
    Document,
    Info,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    Response,
    Schema,
    SecurityScheme,
    document_to_dict,
)


def test_field_output_name_prefers_serialized_name() -> None:
    """A field is emitted under its serialized name when it has one."""
    assert FieldRecord(name="pet_name", serialized_name="petName").output_name == "petName"
    assert FieldRecord(name="pet_name").output_name == "pet_name"


def test_explicit_optional_overrides_required() -> None:
    """required: false wins over both implicit and explicit required."""
    field = FieldRecord(name="x", required=True, explicit_required=True, explicit_optional=True)
    assert not field.is_required


def test_nested_inline_record() -> None:
    """A field can carry an inline record, which can itself nest fields."""
    inner = TypeRecord(name="Line", fields=[FieldRecord(name="sku")])
    outer = TypeRecord(name="Order", fields=[FieldRecord(name="line", inline=inner)])
    assert outer.fields[0].inline is not None
    assert outer.fields[0].inline.fields[0].name == "sku"


def test_enum_values_sorted_by_member_name() -> None:
    enum = EnumRecord(name="Size", values={"SMALL": "s", "LARGE": "l", "MEDIUM": "m"})
    assert enum.sorted_values() == ["l", "m", "s"]


def test_document_uses_openapi_member_names() -> None:
    """Serialization uses aliases such as $ref, in and operationId and drops unset members."""
    document = Document(
        openapi="3.0.4",
        info=Info(title="Pets", version="1.0.0", terms_of_service="https://example.com/tos"),
        paths={
            "/pets/{id}": PathItem(
                get=Operation(
                    operation_id="getPet",
                    parameters=[Parameter(name="id", in_="path", required=True, schema_=Schema(type="integer"))],
                    responses={
                        "200": Response(
                            description="OK",
                            content={"application/json": MediaType(schema_=Schema(ref="#/components/schemas/Pet"))},
                        )
                    },
                )
            )
        },
        components=Components(
            schemas={"Pet": Schema(type="object", additional_properties=Schema(type="string"))},
            security_schemes={"key": SecurityScheme(type="apiKey", name="X-Key", in_="header")},
        ),
    )
    data = document_to_dict(document)

    assert data["info"]["termsOfService"] == "https://example.com/tos"
    operation = data["paths"]["/pets/{id}"]["get"]
    assert operation["operationId"] == "getPet"
    assert operation["parameters"] == [{"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}}]
    assert operation["responses"]["200"]["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/Pet"
    }
    assert data["components"]["schemas"]["Pet"]["additionalProperties"] == {"type": "string"}
    assert data["components"]["securitySchemes"]["key"]["in"] == "header"
    assert "put" not in data["paths"]["/pets/{id}"]


def test_document_helpers() -> None:
    """schema_names and operation_ids list names in document order."""
    document = Document(
        openapi="3.0.4",
        info=Info(title="Pets", version="1.0.0"),
        paths={"/pets": PathItem(get=Operation(operation_id="listPets"), post=Operation(operation_id="addPet"))},
        components=Components(schemas={"Pet": Schema(type="object")}),
    )
    assert document.operation_ids() == ["listPets", "addPet"]
    assert document.schema_names() == ["Pet"]
    assert list(document.paths["/pets"].operations()) == ["get", "post"]
