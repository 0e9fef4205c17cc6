# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed values produced by directive handlers and consumed by their setters."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class TextValue(BaseModel):
    """A single trimmed string, e.g. the body of ``Title: Pet Store``."""

    kind: Literal["text"] = "text"
    text: str = ""


class TextListValue(BaseModel):
    """An ordered list of non-empty strings, e.g. ``Tags: pets, store``."""

    kind: Literal["list"] = "list"
    items: list[str] = _Field(default_factory=list)


class MappingValue(BaseModel):
    """Ordered ``key: value`` pairs collected from a dashed section.

    Keys are kept in source order. A dashed item without a colon maps to an
    empty value.
    """

    kind: Literal["mapping"] = "mapping"
    entries: list[tuple[str, str]] = _Field(default_factory=list)


class RecordValue(BaseModel):
    """A list of structured records, each opened by a dashed ``- key: value`` line."""

    kind: Literal["record"] = "record"
    records: list[dict[str, str]] = _Field(default_factory=list)


# A directive value. The `kind` discriminator lets a setter check the shape
# it receives once instead of probing it at each use.
DirectiveValue = Annotated[
    TextValue | TextListValue | MappingValue | RecordValue,
    _Field(discriminator="kind"),
]
