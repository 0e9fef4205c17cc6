# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type resolution: embedded member expansion and alias chains."""

from apiscribe.resolver.aliases import resolve_alias
from apiscribe.resolver.embeds import SemanticLookup, TypeResolver

__all__ = ["resolve_alias", "SemanticLookup", "TypeResolver"]
