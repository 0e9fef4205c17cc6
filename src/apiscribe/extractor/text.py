# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line-level helpers for reading directive comment blocks.

All keyword matching is case-insensitive and prefix-based on the trimmed
line after comment markers have been stripped.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Iterable

# ###############
# Public Interface
# ###############

STRUCTURE_PREFIX = "swagger:"
SPEC_KEYWORD = "spec:"


def clean_comment_lines(lines: list[str]) -> list[str]:
    """Strip comment markers (``#``, ``//``, ``/*``, ``*/``, leading ``*``) and trim."""
    return [_clean_line(line) for line in lines]


def has_keyword(line: str, keyword: str) -> bool:
    """True if *line* starts with *keyword*, ignoring case."""
    return line.lower().startswith(keyword.lower())


def keyword_value(line: str, keyword: str) -> str:
    """The trimmed remainder of *line* after *keyword*."""
    return line[len(keyword) :].strip()


def matches_any(line: str, keywords: list[str]) -> bool:
    """True if *line* is a structure directive or starts with any of *keywords*."""
    return has_keyword(line, STRUCTURE_PREFIX) or any(has_keyword(line, k) for k in keywords)


def find_directive(lines: list[str], directive: str) -> tuple[int, str] | None:
    """Locate a structure directive such as ``swagger:model``.

    The directive must be a whole word, so ``swagger:model`` does not match
    ``swagger:models``.

    Returns:
        The line index and the trimmed text following the directive, or
        ``None`` when the directive is absent.
    """
    for index, line in enumerate(lines):
        if not has_keyword(line, directive):
            continue
        rest = line[len(directive) :]
        if rest and not rest[0].isspace():
            continue
        return index, rest.strip()
    return None


def extract_documents(lines: list[str]) -> list[str] | None:
    """Parse a ``spec: name1 name2`` directive.

    Returns:
        Lower-cased document names, or ``None`` when the directive is absent
        or has no names.
    """
    for line in lines:
        if has_keyword(line, SPEC_KEYWORD):
            names = [name.lower() for name in keyword_value(line, SPEC_KEYWORD).split()]
            return names or None
    return None


def section_lines(lines: list[str], start: int, stops: Iterable[str] = ()) -> list[str]:
    """Collect the body of a section whose keyword sits on line *start*.

    Collection stops at the first non-empty line that does not start with
    ``-`` and either contains ``:`` or starts with one of *stops*. Empty
    lines are skipped.
    """
    return section_span(lines, start, stops)[0]


def section_span(lines: list[str], start: int, stops: Iterable[str] = ()) -> tuple[list[str], int]:
    """Like :func:`section_lines`, also returning the index where collection stopped."""
    keywords = list(stops)
    collected: list[str] = []
    index = start + 1
    while index < len(lines):
        line = lines[index]
        if line and not line.startswith("-") and (":" in line or matches_any(line, keywords)):
            break
        if line:
            collected.append(line)
        index += 1
    return collected, index


def dash_item(line: str) -> str | None:
    """The trimmed text of a ``- item`` line, or ``None`` for other lines."""
    if not line.startswith("-"):
        return None
    return line[1:].strip()


def split_pair(text: str) -> tuple[str, str]:
    """Split ``key: value`` on the first colon; a missing colon yields an empty value."""
    key, _, value = text.partition(":")
    return key.strip(), value.strip()


def tokenize_directive(text: str) -> list[str]:
    """Split a directive body on whitespace, honouring quoted tokens."""
    try:
        return shlex.split(text)
    except ValueError:
        return text.split()


def free_text(lines: list[str], keywords: list[str]) -> list[str]:
    """The text lines before the first directive or keyword line, trimmed of blanks.

    Structure directives and ``spec:`` lines that precede any text are
    skipped, so a ``# swagger:model`` comment above a class does not hide
    the class docstring.
    """
    collected: list[str] = []
    for line in lines:
        directive = has_keyword(line, STRUCTURE_PREFIX) or has_keyword(line, SPEC_KEYWORD)
        if directive and not any(collected):
            continue
        if directive or matches_any(line, keywords):
            break
        collected.append(line)
    while collected and not collected[0]:
        collected.pop(0)
    while collected and not collected[-1]:
        collected.pop()
    return collected


def parse_bool(text: str, default: bool = True) -> bool:
    """Interpret a directive flag; an empty body means *default*."""
    value = text.strip().lower()
    if not value:
        return default
    return value in ("true", "yes", "1", "on")


# ################
# Implementation
# ################

_MARKERS = re.compile(r"^(?:#+|//+|/\*+|\*+(?!/))")


def _clean_line(line: str) -> str:
    text = line.strip()
    if text.endswith("*/"):
        text = text[:-2].rstrip()
    text = _MARKERS.sub("", text, count=1)
    return text.strip()
