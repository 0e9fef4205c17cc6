# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Alias chain resolution over a registry's alias map."""

from __future__ import annotations

from collections.abc import Mapping

from apiscribe.names import short_name

# ###############
# Public Interface
# ###############


def resolve_alias(aliases: Mapping[str, str], name: str) -> str:
    """Follow an alias chain to its original type name.

    Each step looks up the full name, then its short name. When a name
    comes round a second time the chain is cyclic and that repeated name is
    returned as the result; no error is raised.

    Args:
        aliases: Alias name to target name.
        name: The name to resolve.

    Returns:
        The original type name, or *name* itself when it is not an alias.
    """
    visited: set[str] = set()
    current = name
    while current not in visited:
        visited.add(current)
        target = aliases.get(current)
        if target is None:
            target = aliases.get(short_name(current))
        if target is None:
            return current
        current = target
    return current
