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

"""Runtime shape of instance data and structural equality."""

from __future__ import annotations

from typing import Any, List, Optional


class InstanceType:
    """Structural categories an instance value can fall into."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def get_all_types(cls) -> List[str]:
        return [cls.NULL, cls.BOOLEAN, cls.NUMBER, cls.STRING, cls.ARRAY, cls.OBJECT]


def instance_type_of(value: Any) -> Optional[str]:
    """Return the InstanceType of *value*, or None for values outside the JSON data model."""
    if value is None:
        return InstanceType.NULL
    # bool is a subclass of int and must be checked first
    if isinstance(value, bool):
        return InstanceType.BOOLEAN
    if isinstance(value, (int, float)):
        return InstanceType.NUMBER
    if isinstance(value, str):
        return InstanceType.STRING
    if isinstance(value, (list, tuple)):
        return InstanceType.ARRAY
    if isinstance(value, dict):
        return InstanceType.OBJECT
    return None


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality over JSON values.

    Numbers compare by value (``1 == 1.0``) but booleans never equal numbers.
    """
    left_type = instance_type_of(left)
    if left_type != instance_type_of(right):
        return False

    if left_type == InstanceType.ARRAY:
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if left_type == InstanceType.OBJECT:
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[k], right[k]) for k in left)
    return left == right
