# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Micro-grammars for directive bodies: route lines, response lines, discriminators."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from apiscribe.extractor.text import has_keyword, keyword_value, tokenize_directive
from apiscribe.model.records import Discriminator, ResponseRecord, SecurityRequirement

# ###############
# Public Interface
# ###############

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")


@dataclass(frozen=True)
class RouteLine:
    """The parsed body of ``swagger:route METHOD /path [tag...] operationId``."""

    method: str
    path: str
    operation_id: str
    tags: list[str] = field(default_factory=list)


class GrammarError(ValueError):
    """Raised when a directive body lacks a mandatory token."""


def parse_route_line(text: str) -> RouteLine:
    """Parse a route directive body.

    The method is upper-cased and must be a known HTTP method. The path must
    be absolute. Tokens between the path and the final token are tags.

    Raises:
        GrammarError: If there are fewer than three tokens, the method is
            unknown or the path is not absolute.
    """
    tokens = tokenize_directive(text)
    if len(tokens) < 3:
        raise GrammarError(f"route needs METHOD, path and operation id: {text!r}")
    method = tokens[0].upper()
    if method not in HTTP_METHODS:
        raise GrammarError(f"unknown HTTP method {tokens[0]!r}")
    path = tokens[1]
    if not path.startswith("/"):
        raise GrammarError(f"route path must start with '/': {path!r}")
    return RouteLine(method=method, path=path, operation_id=tokens[-1], tags=tokens[2:-1])


def parse_response(status: str, body: str) -> ResponseRecord:
    """Parse one response entry, ``STATUS: [[]|map[K]]Type [description: text]``.

    A body that starts with ``description:`` declares a response without
    content.
    """
    status = status.strip()
    body = body.strip()
    if not body:
        return ResponseRecord(status=status)
    if has_keyword(body, "description:"):
        return ResponseRecord(status=status, description=keyword_value(body, "description:"))

    type_token, _, rest = body.partition(" ")
    rest = rest.strip()
    description = keyword_value(rest, "description:") if has_keyword(rest, "description:") else rest

    record = ResponseRecord(status=status, description=description)
    if type_token.startswith("[]"):
        record.is_array = True
        type_token = type_token[2:]
    else:
        match = _MAP_PREFIX.match(type_token)
        if match:
            record.is_map = True
            record.key_type = match.group(1).strip() or "string"
            type_token = type_token[match.end() :]
    record.type_name = type_token or None
    return record


def parse_discriminator(text: str) -> Discriminator | None:
    """Parse ``propertyName [value=Type ...]``; ``None`` for an empty body."""
    tokens = tokenize_directive(text.replace(",", " "))
    if not tokens:
        return None
    mapping: dict[str, str] = {}
    for token in tokens[1:]:
        value, sep, type_name = token.partition("=")
        if sep and value and type_name:
            mapping[value] = type_name
    return Discriminator(property_name=tokens[0], mapping=mapping)


def parse_security_item(name: str, scopes: str) -> SecurityRequirement:
    """Build a requirement from ``- scheme`` or ``- scheme: scope1, scope2``."""
    return SecurityRequirement(
        name=name.strip(),
        scopes=[s.strip() for s in scopes.split(",") if s.strip()],
    )


# ################
# Implementation
# ################

_MAP_PREFIX = re.compile(r"^map\[([^\]]*)\]")
