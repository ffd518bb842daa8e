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

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from ..exceptions import ReferenceResolutionError, SchemaDocumentError
from ..utils.uri import PathToken, merge_uri
from .instance_types import instance_type_of
from .validators import PatternProperties, Properties, ValidatorRegistry

if TYPE_CHECKING:
    from .context import Context
    from .records import ValidationResult

logger = logging.getLogger(__name__)


class SchemaNode:
    """A compiled schema: an absolute id, a parent link and a keyword tree.

    Tree values are Validator instances for recognized keywords, nested SchemaNodes
    for other mapping-valued keys, and raw values for everything else.
    """

    def __init__(self, context: "Context", parent: Optional["SchemaNode"] = None):
        self.context = context
        self._parent = weakref.ref(parent) if parent is not None else None
        self._id: Optional[str] = None
        self._tree: Dict[str, Any] = {}
        # keyword elected to run the map-shaped property check, if any
        self.property_check_keyword: Optional[str] = None

    @property
    def parent(self) -> Optional["SchemaNode"]:
        return self._parent() if self._parent is not None else None

    @property
    def id(self) -> Optional[str]:
        if self._id is not None:
            return self._id
        parent = self.parent
        return parent.id if parent is not None else None

    @property
    def tree(self) -> Dict[str, Any]:
        return self._tree

    def make_id(self, raw_id: Optional[str]) -> Optional[str]:
        parent = self.parent
        if raw_id is not None and parent is not None:
            return merge_uri(parent.id, raw_id)
        if raw_id is not None:
            return merge_uri(self.context.base_uri, raw_id)
        if parent is None:
            return merge_uri(self.context.base_uri, "#")
        return None

    def set_id(self, raw_id: Optional[str] = None) -> None:
        self._id = self.make_id(raw_id)
        if self._id is not None:
            self.context.register(self._id, self)

    def parse(self, document: Dict[str, Any]) -> "SchemaNode":
        raw_id = document.get("id")
        # a non-string "id" is ordinary data, e.g. a property schema named "id"
        self.set_id(raw_id if isinstance(raw_id, str) else None)

        for keyword, raw in document.items():
            validator = ValidatorRegistry.get(keyword)
            if validator is not None:
                self._tree[keyword] = validator.new_and_parse(self, raw)
            elif isinstance(raw, dict):
                self._tree[keyword] = self.compile_child(raw)
            else:
                self._tree[keyword] = raw

        if Properties.KEYWORD in self._tree:
            self.property_check_keyword = Properties.KEYWORD
        elif PatternProperties.KEYWORD in self._tree:
            self.property_check_keyword = PatternProperties.KEYWORD
        return self

    def compile_child(self, document: Dict[str, Any]) -> "SchemaNode":
        return self.context.compile_node(document, parent=self)

    def validate(self, instance: Any, path: Tuple[PathToken, ...] = ()) -> bool:
        """Run every applicable keyword; errors go to the context's log."""
        applicable = ValidatorRegistry.keywords_for(instance_type_of(instance))
        valid = True
        for keyword, validator in self.tree.items():
            if keyword in applicable:
                valid &= validator.validate(instance, path)
        return valid

    def check(self, instance: Any) -> "ValidationResult":
        return self.context.validate(self, instance)

    def is_valid(self, instance: Any) -> bool:
        return self.context.validate(self, instance).valid

    def on_external_ref(self, callback):
        return self.context.on_external_ref(callback)

    @property
    def errors(self):
        return self.context.errors

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} keywords={list(self._tree)}>"


class ReferenceNode(SchemaNode):
    """A ``$ref`` schema whose keyword tree is borrowed from the referenced node.

    Reference nodes never register themselves in the resolution table, so a
    reference cannot be the target of another reference through its own id.
    """

    def __init__(self, context: "Context", parent: Optional[SchemaNode], ref: str):
        super().__init__(context, parent)
        if not isinstance(ref, str):
            raise SchemaDocumentError(f"'$ref' must be a string, got: {ref!r}")
        self.ref = ref
        self._id = self.make_id(ref)
        self._resolved_tree: Optional[Dict[str, Any]] = None
        self._resolving = False

    @property
    def tree(self) -> Dict[str, Any]:
        if self._resolved_tree is None:
            if self._resolving:
                raise ReferenceResolutionError(self._id, f"Circular reference: {self._id}")
            self._resolving = True
            try:
                target = self.context.resolve_reference(self._id)
                self._resolved_tree = target.tree
            finally:
                self._resolving = False
            logger.debug(f"Resolved reference '{self.ref}' to {self._id}")
        return self._resolved_tree

    @property
    def is_resolved(self) -> bool:
        return self._resolved_tree is not None
