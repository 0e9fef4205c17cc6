# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""In-memory model registry for one scan pass."""

from apiscribe.registry.store import ModelRegistry

__all__ = ["ModelRegistry"]
