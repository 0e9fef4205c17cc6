# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Apiscribe: OpenAPI documents from annotated Python source."""
