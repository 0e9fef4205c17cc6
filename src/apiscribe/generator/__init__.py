# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""The scan, resolve, assemble and write pipeline."""

from apiscribe.generator.pipeline import DEFAULT_OUTPUT_STEM, Generator, GeneratorOptions

__all__ = ["DEFAULT_OUTPUT_STEM", "Generator", "GeneratorOptions"]
