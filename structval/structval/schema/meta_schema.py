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

"""Self-validation of schema documents against the draft-04 meta-schema."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import jsonschema

from ..exceptions import SchemaDocumentError
from ..utils.uri import JsonPointer, format_json_pointer


@dataclass(frozen=True)
class SchemaIssue:
    message: str
    json_pointer: Optional[JsonPointer] = None


_META_VALIDATOR = jsonschema.Draft4Validator(jsonschema.Draft4Validator.META_SCHEMA)


def find_schema_issues(document: Dict[str, Any]) -> List[SchemaIssue]:
    issues: List[SchemaIssue] = []
    for error in sorted(_META_VALIDATOR.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path]):
        pointer = format_json_pointer(tuple(error.absolute_path))
        issues.append(SchemaIssue(message=error.message, json_pointer=pointer))
    return issues


def check_schema_document(document: Dict[str, Any]) -> None:
    """Raise SchemaDocumentError if *document* is not a valid draft-04 schema."""
    issues = find_schema_issues(document)
    if issues:
        details = "\n".join(
            f"  - {i.message}" + (f" (json_pointer={i.json_pointer})" if i.json_pointer else "")
            for i in issues
        )
        raise SchemaDocumentError(f"Schema document is not a valid schema:\n{details}", issues=issues)
