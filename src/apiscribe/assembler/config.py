# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Options controlling document assembly."""

from __future__ import annotations

from dataclasses import dataclass

# ###############
# Public Interface
# ###############

DEFAULT_OPENAPI_VERSION = "3.0.4"


@dataclass
class AssemblerConfig:
    """Assembly options.

    Attributes:
        openapi_version: Value of the document's ``openapi`` member.
        clean_unused: Keep only schemas reachable from the document's operations.
        enum_refs: Emit enumerations as component schemas referenced by
            ``$ref``; when False they are inlined where used.
        no_default: Leave the default document out of multi-document output.
    """

    openapi_version: str = DEFAULT_OPENAPI_VERSION
    clean_unused: bool = True
    enum_refs: bool = True
    no_default: bool = False
