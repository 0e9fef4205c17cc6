# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Helpers for qualified type names such as ``workspace.Fee``."""

# ###############
# Public Interface
# ###############


def short_name(name: str) -> str:
    """The part of a dotted name after its last ``.``."""
    return name.rsplit(".", 1)[-1]


def name_candidates(name: str) -> list[str]:
    """*name* followed by its short name when the two differ."""
    short = short_name(name)
    return [name] if short == name else [name, short]
