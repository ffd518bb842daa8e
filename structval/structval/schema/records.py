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

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, NamedTuple, Tuple, Type

from ..utils.uri import JsonPointer, PathToken, format_json_pointer

if TYPE_CHECKING:
    from .validators import Validator


@dataclass(frozen=True)
class ErrorRecord:
    """A single violation found while validating an instance.

    ``path`` locates the offending value from the validation root, ``validator`` is
    the Validator class that failed and ``params`` its parsed keyword value.
    """

    path: Tuple[PathToken, ...]
    validator: Type["Validator"]
    params: Any

    @property
    def keyword(self) -> str:
        return self.validator.KEYWORD

    @property
    def json_pointer(self) -> JsonPointer:
        return format_json_pointer(self.path)

    @property
    def message(self) -> str:
        return self.validator.describe(self.params)

    def to_dict(self) -> dict:
        return {
            "path": list(self.path),
            "json_pointer": self.json_pointer,
            "keyword": self.keyword,
            "message": self.message,
        }


class ValidationResult(NamedTuple):
    valid: bool
    errors: List[ErrorRecord]
