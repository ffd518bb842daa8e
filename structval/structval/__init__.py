# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structural validator for JSON-Schema-style documents."""

from typing import Any, Dict, Optional

from .exceptions import (
    CompilationError,
    DocumentLoadError,
    ReferenceResolutionError,
    SchemaDocumentError,
    StructvalError,
)
from .schema import Context, ErrorRecord, ExternalResolver, ReferenceNode, SchemaNode, ValidationResult

__version__ = "0.4.0"

__all__ = [
    "CompilationError",
    "Context",
    "DocumentLoadError",
    "ErrorRecord",
    "ReferenceNode",
    "ReferenceResolutionError",
    "SchemaDocumentError",
    "SchemaNode",
    "StructvalError",
    "ValidationResult",
    "compile_schema",
    "validate",
]


def compile_schema(
    document: Dict[str, Any],
    *,
    base_uri: Optional[str] = None,
    external_resolver: Optional[ExternalResolver] = None,
    validate_schema_itself: Optional[bool] = None,
    resolve_refs: bool = False,
) -> SchemaNode:
    """Compile *document* in a new Context.

    Args:
        document: Schema document
        base_uri: Base URI for ids and references (default: configured base URI)
        external_resolver: Callback returning documents for URIs not compiled yet
        validate_schema_itself: Check the document against the draft-04 meta-schema first
        resolve_refs: Resolve every reference at compile time

    Returns:
        The compiled root SchemaNode
    """
    context = Context(
        base_uri=base_uri,
        external_resolver=external_resolver,
        validate_schema_itself=validate_schema_itself,
    )
    return context.compile(document, resolve_refs=resolve_refs)


def validate(schema: SchemaNode, instance: Any) -> ValidationResult:
    """Validate *instance* against a compiled schema and return ``(valid, errors)``."""
    return schema.context.validate(schema, instance)
