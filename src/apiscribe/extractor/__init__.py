# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Directive extraction from annotated Python declarations."""

from apiscribe.extractor.extract import ExtractedNames, ExtractionIssue, Extractor
from apiscribe.extractor.fields import build_field
from apiscribe.extractor.grammar import GrammarError, RouteLine, parse_response, parse_route_line
from apiscribe.extractor.handlers import (
    DirectiveContext,
    DirectiveHandler,
    HandlerRegistry,
    ListHandler,
    MappingHandler,
    MultiLineHandler,
    RecordHandler,
    SingleLineHandler,
    builtin_handlers,
    default_registry,
    register_handler,
)

__all__ = [
    # Extraction
    "Extractor",
    "ExtractedNames",
    "ExtractionIssue",
    "build_field",
    # Grammar
    "GrammarError",
    "RouteLine",
    "parse_route_line",
    "parse_response",
    # Handlers
    "DirectiveContext",
    "DirectiveHandler",
    "SingleLineHandler",
    "MultiLineHandler",
    "ListHandler",
    "MappingHandler",
    "RecordHandler",
    "HandlerRegistry",
    "builtin_handlers",
    "default_registry",
    "register_handler",
]
