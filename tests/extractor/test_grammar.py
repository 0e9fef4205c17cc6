# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for route, response and discriminator grammars."""

import pytest

from apiscribe.extractor.grammar import (
    GrammarError,
    parse_discriminator,
    parse_response,
    parse_route_line,
    parse_security_item,
)

# ###############
# Route lines
# ###############


def test_route_line_with_tags() -> None:
    route = parse_route_line("get /pets/{id} pets store getPet")
    assert route.method == "GET"
    assert route.path == "/pets/{id}"
    assert route.tags == ["pets", "store"]
    assert route.operation_id == "getPet"


def test_route_line_without_tags() -> None:
    route = parse_route_line("DELETE /pets/{id} deletePet")
    assert route.tags == []
    assert route.operation_id == "deletePet"


@pytest.mark.parametrize(
    "text",
    ["", "GET /pets", "FETCH /pets listPets", "GET pets listPets"],
)
def test_malformed_route_lines_raise(text: str) -> None:
    with pytest.raises(GrammarError):
        parse_route_line(text)


# ###############
# Responses
# ###############


class TestParseResponse:
    def test_plain_type(self) -> None:
        response = parse_response("200", "Pet")
        assert (response.status, response.type_name, response.is_array, response.is_map) == ("200", "Pet", False, False)
        assert response.description == ""

    def test_array_with_description(self) -> None:
        response = parse_response("200", "[]Pet description: all pets")
        assert response.is_array
        assert response.type_name == "Pet"
        assert response.description == "all pets"

    def test_map_with_key_type(self) -> None:
        response = parse_response("200", "map[string]Pet")
        assert response.is_map
        assert response.key_type == "string"
        assert response.type_name == "Pet"

    def test_description_only(self) -> None:
        response = parse_response("404", "description: not found")
        assert response.type_name is None
        assert response.description == "not found"

    def test_empty_body(self) -> None:
        response = parse_response("default", "")
        assert response.status == "default"
        assert response.type_name is None


# ###############
# Discriminators and security
# ###############


def test_discriminator_with_mapping() -> None:
    discriminator = parse_discriminator("kind cat=Cat, dog=Dog")
    assert discriminator is not None
    assert discriminator.property_name == "kind"
    assert discriminator.mapping == {"cat": "Cat", "dog": "Dog"}


def test_empty_discriminator_is_none() -> None:
    assert parse_discriminator("  ") is None


def test_security_item_scopes() -> None:
    requirement = parse_security_item("oauth", "read, write")
    assert requirement.name == "oauth"
    assert requirement.scopes == ["read", "write"]
    assert parse_security_item("api_key", "").scopes == []
