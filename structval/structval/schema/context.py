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

"""Compilation and validation context.

A Context owns everything that lives for one validation session: the table mapping
absolute URIs to compiled SchemaNodes, the base-URI stack used while compiling, the
error log of the current ``validate`` call and the external-reference resolver.
Contexts are not thread-safe; use one per thread.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Set

from ..config import ValidatorConfig, default_config
from ..exceptions import ReferenceResolutionError, SchemaDocumentError, StructvalError
from ..utils.uri import document_uri, is_json_pointer, normalize_uri, split_json_pointer, split_uri
from .meta_schema import check_schema_document
from .node import ReferenceNode, SchemaNode
from .records import ErrorRecord, ValidationResult
from .validators import Validator

logger = logging.getLogger(__name__)

ExternalResolver = Callable[[str], Optional[Dict[str, Any]]]


def _child_nodes(value: Any) -> Iterator[SchemaNode]:
    if isinstance(value, SchemaNode):
        yield value
    elif isinstance(value, Validator):
        yield from _child_nodes(value.value)
    elif isinstance(value, dict):
        for entry in value.values():
            yield from _child_nodes(entry)
    elif isinstance(value, list):
        for entry in value:
            yield from _child_nodes(entry)


class Context:
    """Per-session state shared by every node compiled through it."""

    def __init__(
        self,
        base_uri: Optional[str] = None,
        external_resolver: Optional[ExternalResolver] = None,
        validate_schema_itself: Optional[bool] = None,
        config: Optional[ValidatorConfig] = None,
    ):
        self.config = config or default_config
        self.validate_schema_itself = (
            self.config.validate_schema_itself if validate_schema_itself is None else validate_schema_itself
        )
        self._resolution_table: Dict[str, SchemaNode] = {}
        self._base_uri_stack: List[str] = [normalize_uri(base_uri or self.config.base_uri)]
        self._errors: List[ErrorRecord] = []
        self._external_resolver: Optional[ExternalResolver] = None
        self._fetched: Set[str] = set()

        if external_resolver is not None:
            self.on_external_ref(external_resolver)

    # ---- base URI -----------------------------------------------------------

    @property
    def base_uri(self) -> str:
        return self._base_uri_stack[-1]

    def set_base_uri(self, uri: str) -> None:
        """Override the base URI used to resolve ids of documents compiled afterwards."""
        self._base_uri_stack[-1] = normalize_uri(uri)

    @contextmanager
    def base_uri_scope(self, uri: str) -> Iterator[str]:
        self._base_uri_stack.append(normalize_uri(uri))
        logger.debug(f"Entering base URI scope: {self.base_uri}")
        try:
            yield self.base_uri
        finally:
            popped = self._base_uri_stack.pop()
            logger.debug(f"Leaving base URI scope: {popped}")

    # ---- error log ----------------------------------------------------------

    @property
    def errors(self) -> List[ErrorRecord]:
        return self._errors

    def log_error(self, record: ErrorRecord) -> None:
        self._errors.append(record)

    @contextmanager
    def suppressed_errors(self) -> Iterator[None]:
        """Discard every error logged inside the block."""
        checkpoint = len(self._errors)
        try:
            yield
        finally:
            del self._errors[checkpoint:]

    # ---- compilation --------------------------------------------------------

    def register(self, uri: str, node: SchemaNode) -> SchemaNode:
        """Register *node* under *uri*; the first registration of a URI wins."""
        existing = self._resolution_table.get(uri)
        if existing is not None:
            logger.debug(f"URI already registered, keeping first schema: {uri}")
            return existing
        self._resolution_table[uri] = node
        logger.debug(f"Registered schema: {uri}")
        return node

    def compile(self, document: Dict[str, Any], resolve_refs: bool = False) -> SchemaNode:
        """Compile a schema document into a SchemaNode tree.

        Args:
            document: Schema document (nested dicts/lists/scalars)
            resolve_refs: Resolve every reachable $ref now instead of on first use

        Returns:
            The root SchemaNode (a ReferenceNode if the document is a bare $ref)

        Raises:
            SchemaDocumentError: If the document is malformed or fails self-validation
            ReferenceResolutionError: If resolve_refs is set and a reference can't be resolved
        """
        if not isinstance(document, dict):
            raise SchemaDocumentError(f"Schema document must be an object, got: {type(document).__name__}")
        if self.validate_schema_itself:
            check_schema_document(document)

        node = self.compile_node(document, parent=None)
        if resolve_refs:
            self.resolve_all(node)
        return node

    def compile_node(self, document: Dict[str, Any], parent: Optional[SchemaNode] = None) -> SchemaNode:
        if "$ref" in document:
            # sibling keywords of $ref are ignored
            return ReferenceNode(self, parent, document["$ref"])
        return SchemaNode(self, parent).parse(document)

    def resolve_all(self, node: SchemaNode) -> None:
        """Force resolution of every reference reachable from *node*."""
        seen: Set[int] = set()
        pending = [node]
        while pending:
            current = pending.pop()
            if id(current) in seen:
                continue
            seen.add(id(current))
            for value in current.tree.values():
                pending.extend(_child_nodes(value))

    # ---- reference resolution -----------------------------------------------

    def on_external_ref(self, callback: ExternalResolver) -> ExternalResolver:
        """Install the resolver called for documents missing from the resolution table.

        The callback receives an absolute URI without fragment and returns the schema
        document or None.  Usable as a decorator.
        """
        if self._external_resolver is not None:
            raise StructvalError("External reference resolver is already set for this context")
        self._external_resolver = callback
        return callback

    def resolve_reference(self, uri: str) -> SchemaNode:
        node = self.lookup(uri)
        if node is None:
            raise ReferenceResolutionError(uri)
        return node

    def lookup(self, uri: str) -> Optional[SchemaNode]:
        uri = normalize_uri(uri)
        return self._try_table(uri) or self._fetch_external(uri)

    def _try_table(self, uri: str) -> Optional[SchemaNode]:
        node = self._resolution_table.get(uri)
        if node is not None:
            return node

        document_key, fragment = split_uri(uri)
        if not is_json_pointer(fragment):
            return None
        root = self._resolution_table.get(document_key)
        if root is None:
            return None
        return self.resolve_json_pointer(root, fragment)

    def _fetch_external(self, uri: str) -> Optional[SchemaNode]:
        if self._external_resolver is None:
            return None

        document_key, _ = split_uri(uri)
        if document_key in self._resolution_table or document_key in self._fetched:
            return None
        self._fetched.add(document_key)

        fetch_uri = document_uri(uri)
        logger.debug(f"Fetching external schema: {fetch_uri}")
        document = self._external_resolver(fetch_uri)
        if document is None:
            logger.warning(f"External resolver returned no schema for {fetch_uri}")
            return None
        if not isinstance(document, dict):
            raise SchemaDocumentError(
                f"External schema {fetch_uri} must be an object, got: {type(document).__name__}"
            )

        snapshot = dict(self._resolution_table)
        try:
            with self.base_uri_scope(document_key):
                node = self.compile(document)
        except StructvalError:
            # drop the ids a failed document registered before raising
            self._resolution_table = snapshot
            raise

        # the fetched root stays reachable by its URI even when it declares another id;
        # a bare $ref document is registered as the schema it points to
        seen: Set[str] = set()
        while isinstance(node, ReferenceNode):
            if node.id in seen:
                raise ReferenceResolutionError(node.id, f"Circular reference: {node.id}")
            seen.add(node.id)
            node = self.resolve_reference(node.id)
        self.register(document_key, node)
        return self._try_table(uri)

    def resolve_json_pointer(self, root: SchemaNode, pointer: str) -> Optional[SchemaNode]:
        """Walk the compiled tree of *root* along a JSON pointer.

        Validators are walked through their parsed value, so ``/properties/a`` and
        ``/items/0`` reach the compiled sub-schemas.  Returns None when a segment is
        missing or the pointer does not end on a schema.
        """
        data: Any = root
        for token in split_json_pointer(pointer):
            if isinstance(data, Validator):
                data = data.value
            if isinstance(data, SchemaNode):
                data = data.tree.get(token)
            elif isinstance(data, list):
                data = data[int(token)] if token.isdigit() and int(token) < len(data) else None
            elif isinstance(data, dict):
                data = data.get(token)
            else:
                return None
            if data is None:
                return None

        if isinstance(data, Validator):
            data = data.value
        return data if isinstance(data, SchemaNode) else None

    # ---- validation ---------------------------------------------------------

    def validate(self, schema: SchemaNode, instance: Any) -> ValidationResult:
        """Validate *instance* against *schema*, starting from a fresh error log."""
        self._errors = []
        valid = schema.validate(instance, ())
        return ValidationResult(valid=valid, errors=list(self._errors))
