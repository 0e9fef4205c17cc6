# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Directive handlers and the registry that dispatches comment lines to them.

A handler recognizes one keyword, parses its body into a typed
:data:`~apiscribe.model.values.DirectiveValue` and hands the value to a
setter registered for the current context. Hosting applications may
register extra handlers at any time; the registry is guarded by a
shared-read / exclusive-write lock.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, ClassVar

from apiscribe.extractor.grammar import parse_discriminator, parse_response, parse_security_item
from apiscribe.extractor.text import (
    SPEC_KEYWORD,
    dash_item,
    has_keyword,
    keyword_value,
    matches_any,
    parse_bool,
    section_span,
    split_pair,
)
from apiscribe.locking import ReadWriteLock
from apiscribe.model.records import (
    Contact,
    EnumRecord,
    ExternalDocs,
    FieldRecord,
    License,
    MetadataBlock,
    OperationRecord,
    SecuritySchemeInfo,
    ServerInfo,
    TagInfo,
    TypeRecord,
)
from apiscribe.model.values import DirectiveValue, MappingValue, RecordValue, TextListValue, TextValue

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class DirectiveContext(Enum):
    """Where a comment block was found, which fixes the type of its target record."""

    META = "meta"
    ROUTE = "route"
    MODEL = "model"
    FIELD = "field"
    PARAMETER = "parameter"
    ENUM = "enum"


CONTEXT_TARGETS: dict[DirectiveContext, type] = {
    DirectiveContext.META: MetadataBlock,
    DirectiveContext.ROUTE: OperationRecord,
    DirectiveContext.MODEL: TypeRecord,
    DirectiveContext.FIELD: FieldRecord,
    DirectiveContext.PARAMETER: FieldRecord,
    DirectiveContext.ENUM: EnumRecord,
}

Setter = Callable[[Any, Any], None]


class DirectiveHandler(ABC):
    """Base class for handlers of one directive keyword.

    Args:
        keyword: The keyword, e.g. ``"Title:"``. Matching ignores case.
        setters: Per-context callbacks receiving ``(target, value)``.
    """

    value_type: ClassVar[type]

    def __init__(self, keyword: str, setters: dict[DirectiveContext, Setter]) -> None:
        self.keyword = keyword
        self._setters = dict(setters)

    @property
    def contexts(self) -> frozenset[DirectiveContext]:
        return frozenset(self._setters)

    def matches(self, line: str) -> bool:
        return has_keyword(line, self.keyword)

    @abstractmethod
    def parse(self, lines: list[str], index: int, stops: list[str]) -> tuple[DirectiveValue | None, int]:
        """Parse the directive starting at ``lines[index]``.

        Returns:
            The parsed value (or ``None`` for an unusable body) and the index
            of the first line not consumed.
        """

    def apply(self, target: object, value: object, context: DirectiveContext) -> bool:
        """Pass *value* to the setter for *context*.

        Returns:
            False, without calling anything, when the handler has no setter
            for the context or the value or target has the wrong type.
        """
        setter = self._setters.get(context)
        if setter is None or not isinstance(value, self.value_type):
            return False
        if not isinstance(target, CONTEXT_TARGETS[context]):
            return False
        setter(target, value)
        return True

    def _rest(self, line: str) -> str:
        rest = keyword_value(line, self.keyword)
        if not self.keyword.endswith(":") and rest.startswith(":"):
            rest = rest[1:].strip()
        return rest


class SingleLineHandler(DirectiveHandler):
    """``Keyword: value`` on one line."""

    value_type = TextValue

    def parse(self, lines: list[str], index: int, stops: list[str]) -> tuple[DirectiveValue | None, int]:
        return TextValue(text=self._rest(lines[index])), index + 1


class MultiLineHandler(DirectiveHandler):
    """A keyword whose body continues until the next recognized keyword.

    Args:
        joiner: ``"\\n"`` keeps line structure; ``" "`` folds the lines into
            one paragraph and drops blank lines.
    """

    value_type = TextValue

    def __init__(self, keyword: str, setters: dict[DirectiveContext, Setter], joiner: str = "\n") -> None:
        super().__init__(keyword, setters)
        self.joiner = joiner

    def parse(self, lines: list[str], index: int, stops: list[str]) -> tuple[DirectiveValue | None, int]:
        collected = [self._rest(lines[index])]
        end = index + 1
        while end < len(lines) and not matches_any(lines[end], stops):
            collected.append(lines[end])
            end += 1
        if self.joiner.strip() == "":
            collected = [line for line in collected if line]
        return TextValue(text=self.joiner.join(collected).strip()), end


class ListHandler(DirectiveHandler):
    """``Keyword: a, b, c`` on one line, or a dashed list below the keyword."""

    value_type = TextListValue

    def __init__(self, keyword: str, setters: dict[DirectiveContext, Setter], separator: str = ",") -> None:
        super().__init__(keyword, setters)
        self.separator = separator

    def parse(self, lines: list[str], index: int, stops: list[str]) -> tuple[DirectiveValue | None, int]:
        rest = self._rest(lines[index])
        if rest:
            items = [item.strip() for item in rest.split(self.separator)]
            return TextListValue(items=[item for item in items if item]), index + 1
        body, end = section_span(lines, index, stops)
        items = [item for item in (dash_item(line) for line in body) if item]
        return TextListValue(items=items), end


class MappingHandler(DirectiveHandler):
    """A section of dashed ``- key: value`` items."""

    value_type = MappingValue

    def parse(self, lines: list[str], index: int, stops: list[str]) -> tuple[DirectiveValue | None, int]:
        body, end = section_span(lines, index, stops)
        entries = [split_pair(item) for item in (dash_item(line) for line in body) if item]
        return MappingValue(entries=entries), end


class RecordHandler(DirectiveHandler):
    """A section of records, each opened by ``- <start_key>: value``.

    Following ``key: value`` lines whose key is in *fields* extend the open
    record. Sub-keys match case-sensitively, so ``description:`` belongs to
    the record while ``Description:`` ends the section. Record keys are
    stored lower-cased.
    """

    value_type = RecordValue

    def __init__(
        self,
        keyword: str,
        setters: dict[DirectiveContext, Setter],
        start_key: str,
        fields: Iterable[str] = (),
    ) -> None:
        super().__init__(keyword, setters)
        self.start_key = start_key
        self.fields = frozenset(fields)

    def parse(self, lines: list[str], index: int, stops: list[str]) -> tuple[DirectiveValue | None, int]:
        records: list[dict[str, str]] = []
        end = index + 1
        while end < len(lines):
            line = lines[end]
            if not line:
                end += 1
                continue
            item = dash_item(line)
            if item is not None:
                key, value = split_pair(item)
                if key == self.start_key or key in self.fields:
                    if key == self.start_key or not records:
                        records.append({})
                    records[-1][key.lower()] = value
                else:
                    records.append({self.start_key.lower(): item})
            else:
                key, value = split_pair(line)
                if not records or key not in self.fields:
                    break
                records[-1][key.lower()] = value
            end += 1
        return RecordValue(records=records), end


class HandlerRegistry:
    """Maps directive contexts to ordered handlers.

    Handlers registered earlier win when more than one matches a line.
    """

    def __init__(self, handlers: Iterable[DirectiveHandler] = ()) -> None:
        self._lock = ReadWriteLock()
        self._handlers: dict[DirectiveContext, list[DirectiveHandler]] = {}
        for handler in handlers:
            self.register(handler)

    @classmethod
    def with_builtins(cls) -> HandlerRegistry:
        """A new registry holding the built-in handlers."""
        return cls(builtin_handlers())

    def register(self, handler: DirectiveHandler) -> None:
        with self._lock.write():
            for context in handler.contexts:
                self._handlers.setdefault(context, []).append(handler)

    def unregister(self, keyword: str, context: DirectiveContext | None = None) -> int:
        """Remove handlers for *keyword*, in one context or all of them.

        Returns:
            The number of (context, handler) registrations removed.
        """
        removed = 0
        with self._lock.write():
            for ctx, handlers in self._handlers.items():
                if context is not None and ctx is not context:
                    continue
                kept = [h for h in handlers if h.keyword.lower() != keyword.lower()]
                removed += len(handlers) - len(kept)
                self._handlers[ctx] = kept
        return removed

    def handlers_for(self, context: DirectiveContext) -> list[DirectiveHandler]:
        with self._lock.read():
            return list(self._handlers.get(context, []))

    def keywords(self, context: DirectiveContext) -> list[str]:
        return [h.keyword for h in self.handlers_for(context)]

    def names(self) -> list[str]:
        """Every registered keyword, sorted and de-duplicated."""
        with self._lock.read():
            return sorted({h.keyword for handlers in self._handlers.values() for h in handlers})

    def count(self) -> int:
        with self._lock.read():
            return sum(len(handlers) for handlers in self._handlers.values())

    def clear(self) -> None:
        with self._lock.write():
            self._handlers.clear()

    def apply(self, lines: list[str], target: object, context: DirectiveContext) -> None:
        """Run every matching handler over *lines* against *target*.

        Lines consumed by a multi-line or section directive are not offered
        to other handlers. A target of the wrong type is ignored.
        """
        if not isinstance(target, CONTEXT_TARGETS[context]):
            logger.debug("Ignoring %s directives for %s target", context.value, type(target).__name__)
            return
        handlers = self.handlers_for(context)
        stops = [h.keyword for h in handlers] + [SPEC_KEYWORD]
        index = 0
        while index < len(lines):
            handler = next((h for h in handlers if h.matches(lines[index])), None)
            if handler is None:
                index += 1
                continue
            value, end = handler.parse(lines, index, stops)
            if value is not None:
                handler.apply(target, value, context)
            index = max(end, index + 1)


def builtin_handlers() -> list[DirectiveHandler]:
    """Fresh instances of every built-in handler."""
    meta, route = DirectiveContext.META, DirectiveContext.ROUTE
    model, enum = DirectiveContext.MODEL, DirectiveContext.ENUM
    member = (DirectiveContext.FIELD, DirectiveContext.PARAMETER)

    def on_members(setter: Setter) -> dict[DirectiveContext, Setter]:
        return {ctx: setter for ctx in member}

    handlers: list[DirectiveHandler] = [
        # Document metadata
        SingleLineHandler("Title:", {meta: _attr("title")}),
        SingleLineHandler("Version:", {meta: _attr("version")}),
        SingleLineHandler("TermsOfService:", {meta: _attr("terms_of_service")}),
        SingleLineHandler("Host:", {meta: _attr("host")}),
        SingleLineHandler("BasePath:", {meta: _attr("base_path")}),
        ListHandler("Schemes:", {meta: _list_attr("schemes")}),
        MappingHandler("Contact:", {meta: _set_contact}),
        MappingHandler("License:", {meta: _set_license}),
        MappingHandler("ExternalDocs:", {meta: _set_external_docs}),
        RecordHandler("SecuritySchemes:", {meta: _set_security_schemes}, "name", _SCHEME_FIELDS),
        RecordHandler("Servers:", {meta: _set_servers}, "url", ("description",)),
        # Shared by metadata and routes
        RecordHandler("Tags:", {meta: _set_meta_tags}, "name", ("description",)),
        ListHandler("Tags:", {route: _set_route_tags}),
        MappingHandler("Security:", {meta: _set_security, route: _set_security}),
        ListHandler("Consumes:", {meta: _list_attr("consumes"), route: _list_attr("consumes")}),
        ListHandler("Produces:", {meta: _list_attr("produces"), route: _list_attr("produces")}),
        # Routes
        SingleLineHandler("summary:", {route: _attr("summary")}),
        MappingHandler("Responses:", {route: _set_responses}),
        ListHandler("IgnoredParameters:", {route: _list_attr("ignored_parameters")}),
        MappingHandler("Extensions:", {route: _set_extensions}),
        # Models
        SingleLineHandler("discriminator:", {model: _set_discriminator}),
        ListHandler("allOf:", {model: _list_attr("all_of")}),
        ListHandler("oneOf:", {model: _list_attr("one_of")}),
        ListHandler("anyOf:", {model: _list_attr("any_of")}),
        # Fields and parameters
        SingleLineHandler("default:", on_members(_attr("default"))),
        SingleLineHandler("required:", on_members(_set_required)),
        SingleLineHandler("nullable:", on_members(_flag("nullable"))),
        SingleLineHandler("in:", on_members(_set_location)),
        SingleLineHandler("readOnly:", on_members(_flag("read_only"))),
        SingleLineHandler("writeOnly:", on_members(_flag("write_only"))),
        *[SingleLineHandler(f"{key}:", on_members(_constraint(key))) for key in _CONSTRAINT_KEYS],
        # Shared across contexts
        SingleLineHandler("example:", {model: _attr("example"), enum: _attr("example"), **on_members(_attr("example"))}),
        SingleLineHandler("deprecated", {route: _flag("deprecated"), **on_members(_flag("deprecated"))}),
        MultiLineHandler("Description:", {meta: _attr("description"), model: _attr("description")}, joiner=" "),
        MultiLineHandler(
            "description:",
            {route: _attr("description"), enum: _attr("description"), **on_members(_attr("description"))},
        ),
    ]
    return handlers


def default_registry() -> HandlerRegistry:
    """The process-wide registry, created with the built-in handlers on first use."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = HandlerRegistry.with_builtins()
    return _DEFAULT_REGISTRY


def register_handler(handler: DirectiveHandler) -> None:
    """Register *handler* with the process-wide registry."""
    default_registry().register(handler)


# ################
# Implementation
# ################

_DEFAULT_REGISTRY: HandlerRegistry | None = None

_CONSTRAINT_KEYS = ("format", "pattern", "min", "max", "minLength", "maxLength", "minItems", "maxItems", "uniqueItems")
_SCHEME_FIELDS = ("type", "description", "in", "scheme", "bearerFormat", "paramName")


def _attr(name: str) -> Setter:
    def setter(target: Any, value: TextValue) -> None:
        setattr(target, name, value.text or None)

    return setter


def _flag(name: str) -> Setter:
    def setter(target: Any, value: TextValue) -> None:
        setattr(target, name, parse_bool(value.text))

    return setter


def _list_attr(name: str) -> Setter:
    def setter(target: Any, value: TextListValue) -> None:
        current: list[str] = getattr(target, name)
        current.extend(item for item in value.items if item not in current)

    return setter


def _constraint(key: str) -> Setter:
    def setter(target: FieldRecord, value: TextValue) -> None:
        if value.text:
            target.constraints[key] = value.text

    return setter


def _set_required(target: FieldRecord, value: TextValue) -> None:
    if parse_bool(value.text):
        target.explicit_required = True
        target.explicit_optional = False
    else:
        target.explicit_required = False
        target.explicit_optional = True


def _set_location(target: FieldRecord, value: TextValue) -> None:
    words = value.text.split()
    if not words:
        return
    location = words[0].lower()
    target.location = location
    if location == "body":
        target.request_body = True


def _set_contact(target: MetadataBlock, value: MappingValue) -> None:
    data = {k.lower(): v for k, v in value.entries}
    target.contact = Contact(name=data.get("name"), url=data.get("url"), email=data.get("email"))


def _set_license(target: MetadataBlock, value: MappingValue) -> None:
    data = {k.lower(): v for k, v in value.entries}
    target.license = License(name=data.get("name"), url=data.get("url"))


def _set_external_docs(target: MetadataBlock, value: MappingValue) -> None:
    data = {k.lower(): v for k, v in value.entries}
    target.external_docs = ExternalDocs(description=data.get("description"), url=data.get("url"))


def _set_meta_tags(target: MetadataBlock, value: RecordValue) -> None:
    for record in value.records:
        if record.get("name"):
            target.tags.append(TagInfo(name=record["name"], description=record.get("description") or None))


def _set_route_tags(target: OperationRecord, value: TextListValue) -> None:
    target.tags.extend(tag for tag in value.items if tag not in target.tags)


def _set_security_schemes(target: MetadataBlock, value: RecordValue) -> None:
    for record in value.records:
        name = record.get("name")
        if not name:
            continue
        target.security_schemes[name] = SecuritySchemeInfo(
            name=name,
            type=record.get("type") or "apiKey",
            description=record.get("description") or None,
            location=record.get("in") or None,
            param_name=record.get("paramname") or None,
            scheme=record.get("scheme") or None,
            bearer_format=record.get("bearerformat") or None,
        )


def _set_servers(target: MetadataBlock, value: RecordValue) -> None:
    for record in value.records:
        if record.get("url"):
            target.servers.append(ServerInfo(url=record["url"], description=record.get("description") or None))


def _set_security(target: MetadataBlock | OperationRecord, value: MappingValue) -> None:
    target.security.extend(parse_security_item(name, scopes) for name, scopes in value.entries if name)


def _set_responses(target: OperationRecord, value: MappingValue) -> None:
    target.responses.extend(parse_response(status, body) for status, body in value.entries if status)


def _set_extensions(target: OperationRecord, value: MappingValue) -> None:
    for key, raw in value.entries:
        if not key:
            continue
        name = key if key.lower().startswith("x-") else f"x-{key}"
        target.extensions[name] = raw


def _set_discriminator(target: TypeRecord, value: TextValue) -> None:
    target.discriminator = parse_discriminator(value.text)
