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

"""Compiled keyword validators.

Each recognized schema keyword compiles into one Validator instance that keeps the
owning SchemaNode and the keyword's *parsed* value (regular expressions compiled,
sub-schemas turned into SchemaNodes).  ``validate(instance, path)`` returns a bool
and appends ErrorRecords to the owning Context's error log on failure.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Optional, Tuple

from ..exceptions import SchemaDocumentError
from ..utils.uri import PathToken
from .instance_types import InstanceType, instance_type_of, is_integer, json_equal
from .records import ErrorRecord

if TYPE_CHECKING:
    from .context import Context
    from .node import SchemaNode

Path = Tuple[PathToken, ...]


def _expect(keyword: str, raw: Any, expected: type, description: str) -> None:
    if not isinstance(raw, expected):
        raise SchemaDocumentError(f"'{keyword}' must be {description}, got: {raw!r}")


def _expect_count(keyword: str, raw: Any) -> None:
    if not is_integer(raw) or raw < 0:
        raise SchemaDocumentError(f"'{keyword}' must be a non-negative integer, got: {raw!r}")


def _expect_number(keyword: str, raw: Any) -> None:
    if instance_type_of(raw) != InstanceType.NUMBER:
        raise SchemaDocumentError(f"'{keyword}' must be a number, got: {raw!r}")


class Validator(ABC):
    """Abstract base validator."""

    KEYWORD: str = ""
    MESSAGE: str = "Value does not satisfy '{keyword}'"

    def __init__(self, schema: "SchemaNode", value: Any):
        self.schema = schema
        self.value = value

    @classmethod
    def parse(cls, schema: "SchemaNode", raw: Any) -> Any:
        """Turn the raw keyword value into its working representation."""
        return raw

    @classmethod
    def new_and_parse(cls, schema: "SchemaNode", raw: Any) -> "Validator":
        return cls(schema, cls.parse(schema, raw))

    @classmethod
    def describe(cls, params: Any) -> str:
        return cls.MESSAGE.format(keyword=cls.KEYWORD, params=params)

    @property
    def context(self) -> "Context":
        return self.schema.context

    @abstractmethod
    def validate(self, instance: Any, path: Path) -> bool:
        """Check *instance* located at *path*; log errors and return the outcome."""

    def error(self, path: Path) -> bool:
        self.context.log_error(ErrorRecord(path=tuple(path), validator=type(self), params=self.value))
        return False

    def value_or(self, keyword: str, default: Any) -> Any:
        """Parsed value of a sibling keyword validator, or *default* when absent."""
        validator = self.schema.tree.get(keyword)
        if isinstance(validator, Validator):
            return validator.value
        return default

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.value!r}>"


class BoolCheckValidator(Validator):
    """Validator whose outcome is a single predicate over the instance."""

    @abstractmethod
    def check(self, instance: Any) -> bool:
        pass

    def validate(self, instance: Any, path: Path) -> bool:
        if self.check(instance):
            return True
        return self.error(path)


class StubValidator(Validator):
    """Keyword read as configuration by a sibling; never fails on its own."""

    @classmethod
    def parse(cls, schema: "SchemaNode", raw: Any) -> Any:
        if isinstance(raw, dict):
            return schema.compile_child(raw)
        _expect(cls.KEYWORD, raw, bool, "a boolean or a schema")
        return raw

    def validate(self, instance: Any, path: Path) -> bool:
        return True


# ---- common -----------------------------------------------------------------


class Type(BoolCheckValidator):
    KEYWORD = "type"
    MESSAGE = "Value is not of type {params!r}"

    @staticmethod
    def same_type(type_name: str, instance: Any) -> bool:
        if type_name == "integer":
            return is_integer(instance)
        return instance_type_of(instance) == type_name

    def check(self, instance):
        if isinstance(self.value, list):
            return any(self.same_type(t, instance) for t in self.value)
        return self.same_type(self.value, instance)


class Enum(Validator):
    KEYWORD = "enum"
    MESSAGE = "Value is not one of {params!r}"

    @classmethod
    def parse(cls, schema, raw):
        _expect(cls.KEYWORD, raw, list, "an array")
        return raw

    def validate(self, instance, path):
        if any(json_equal(instance, candidate) for candidate in self.value):
            return True
        return self.error(path)


class Not(Validator):
    KEYWORD = "not"
    MESSAGE = "Value must not be valid against the schema in 'not'"

    @classmethod
    def parse(cls, schema, raw):
        _expect(cls.KEYWORD, raw, dict, "a schema")
        return schema.compile_child(raw)

    def validate(self, instance, path):
        with self.context.suppressed_errors():
            matched = self.value.validate(instance, path)
        if not matched:
            return True
        return self.error(path)


class CombinatorValidator(Validator):
    """Speculatively evaluates every sub-schema and applies a count predicate."""

    @classmethod
    def parse(cls, schema, raw):
        _expect(cls.KEYWORD, raw, list, "an array of schemas")
        for entry in raw:
            _expect(cls.KEYWORD, entry, dict, "an array of schemas")
        return [schema.compile_child(entry) for entry in raw]

    @abstractmethod
    def predicate(self, passed: int) -> bool:
        pass

    def validate(self, instance, path):
        with self.context.suppressed_errors():
            passed = sum(1 for node in self.value if node.validate(instance, path))
        if self.predicate(passed):
            return True
        return self.error(path)


class OneOf(CombinatorValidator):
    KEYWORD = "oneOf"
    MESSAGE = "Value must be valid against exactly one schema in 'oneOf'"

    def predicate(self, passed):
        return passed == 1


class AnyOf(CombinatorValidator):
    KEYWORD = "anyOf"
    MESSAGE = "Value must be valid against at least one schema in 'anyOf'"

    def predicate(self, passed):
        return passed > 0


class AllOf(CombinatorValidator):
    KEYWORD = "allOf"
    MESSAGE = "Value must be valid against all schemas in 'allOf'"

    def predicate(self, passed):
        return passed == len(self.value)


# ---- numbers ----------------------------------------------------------------


class MultipleOf(BoolCheckValidator):
    KEYWORD = "multipleOf"
    MESSAGE = "Value is not a multiple of {params}"

    @classmethod
    def parse(cls, schema, raw):
        _expect_number(cls.KEYWORD, raw)
        if raw <= 0:
            raise SchemaDocumentError(f"'{cls.KEYWORD}' must be greater than 0, got: {raw!r}")
        return raw

    def check(self, instance):
        return instance % self.value == 0


class Minimum(BoolCheckValidator):
    KEYWORD = "minimum"
    MESSAGE = "Value is less than the minimum of {params}"

    @classmethod
    def parse(cls, schema, raw):
        _expect_number(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        if self.schema.tree.get("exclusiveMinimum") is True:
            return instance > self.value
        return instance >= self.value


class Maximum(BoolCheckValidator):
    KEYWORD = "maximum"
    MESSAGE = "Value is greater than the maximum of {params}"

    @classmethod
    def parse(cls, schema, raw):
        _expect_number(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        if self.schema.tree.get("exclusiveMaximum") is True:
            return instance < self.value
        return instance <= self.value


# ---- objects ----------------------------------------------------------------


def _parse_schema_mapping(keyword: str, schema: "SchemaNode", raw: Any) -> Dict[str, "SchemaNode"]:
    _expect(keyword, raw, dict, "an object of schemas")
    parsed = {}
    for name, entry in raw.items():
        _expect(f"{keyword}/{name}", entry, dict, "a schema")
        parsed[name] = schema.compile_child(entry)
    return parsed


class PropertyCheckValidator(Validator):
    """Shared map-shaped check for ``properties`` and ``patternProperties``.

    The owning SchemaNode elects exactly one of the two keywords to run the check
    (see ``SchemaNode.property_check_keyword``); the other one is a no-op.
    """

    @classmethod
    def parse(cls, schema, raw):
        return _parse_schema_mapping(cls.KEYWORD, schema, raw)

    def validate(self, instance, path):
        if self.schema.property_check_keyword != self.KEYWORD:
            return True
        return self.check_properties(instance, path)

    def check_properties(self, instance: dict, path: Path) -> bool:
        valid = True
        pending = dict.fromkeys(instance)

        for name, node in self.value_or("properties", {}).items():
            if name in pending:
                del pending[name]
                valid &= node.validate(instance[name], path + (name,))

        pattern_validator = self.schema.tree.get("patternProperties")
        if isinstance(pattern_validator, PatternProperties):
            for pattern, node in pattern_validator.value.items():
                regex = pattern_validator.regexes[pattern]
                for key in list(pending):
                    # non-string keys (e.g. from YAML) never match a pattern
                    if isinstance(key, str) and regex.search(key):
                        del pending[key]
                        valid &= node.validate(instance[key], path + (key,))

        additional = self.value_or("additionalProperties", True)
        if additional is False and pending:
            return self.schema.tree["additionalProperties"].error(path)
        if not isinstance(additional, bool):
            for key in pending:
                valid &= additional.validate(instance[key], path + (key,))
        return valid


class Properties(PropertyCheckValidator):
    KEYWORD = "properties"
    MESSAGE = "Object properties are invalid"


class PatternProperties(PropertyCheckValidator):
    KEYWORD = "patternProperties"
    MESSAGE = "Object properties are invalid"

    def __init__(self, schema, value):
        super().__init__(schema, value)
        self.regexes = {}
        for pattern in value:
            try:
                self.regexes[pattern] = re.compile(pattern)
            except re.error as exc:
                raise SchemaDocumentError(f"Invalid regular expression in '{self.KEYWORD}': {pattern!r}: {exc}")


class AdditionalProperties(StubValidator):
    KEYWORD = "additionalProperties"
    MESSAGE = "Additional properties are not allowed"


class MaxProperties(BoolCheckValidator):
    KEYWORD = "maxProperties"
    MESSAGE = "Object has more than {params} properties"

    @classmethod
    def parse(cls, schema, raw):
        _expect_count(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        return len(instance) <= self.value


class MinProperties(BoolCheckValidator):
    KEYWORD = "minProperties"
    MESSAGE = "Object has fewer than {params} properties"

    @classmethod
    def parse(cls, schema, raw):
        _expect_count(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        return len(instance) >= self.value


class Required(BoolCheckValidator):
    KEYWORD = "required"
    MESSAGE = "Missing required properties among {params!r}"

    @classmethod
    def parse(cls, schema, raw):
        _expect(cls.KEYWORD, raw, list, "an array of property names")
        return raw

    def check(self, instance):
        return all(name in instance for name in self.value)


class Dependencies(Validator):
    KEYWORD = "dependencies"
    MESSAGE = "Property dependencies are not satisfied"

    @classmethod
    def parse(cls, schema, raw):
        _expect(cls.KEYWORD, raw, dict, "an object")
        parsed = {}
        for trigger, entry in raw.items():
            if isinstance(entry, list):
                parsed[trigger] = entry
            else:
                _expect(f"{cls.KEYWORD}/{trigger}", entry, dict, "an array or a schema")
                parsed[trigger] = schema.compile_child(entry)
        return parsed

    def validate(self, instance, path):
        valid = True
        for trigger, dependency in self.value.items():
            if trigger not in instance:
                continue
            if isinstance(dependency, list):
                if not all(name in instance for name in dependency):
                    valid = self.error(path)
            else:
                valid &= dependency.validate(instance, path)
        return valid


# ---- strings ----------------------------------------------------------------


class MinLength(BoolCheckValidator):
    KEYWORD = "minLength"
    MESSAGE = "String is shorter than {params} characters"

    @classmethod
    def parse(cls, schema, raw):
        _expect_count(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        return len(instance) >= self.value


class MaxLength(BoolCheckValidator):
    KEYWORD = "maxLength"
    MESSAGE = "String is longer than {params} characters"

    @classmethod
    def parse(cls, schema, raw):
        _expect_count(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        return len(instance) <= self.value


class Pattern(BoolCheckValidator):
    KEYWORD = "pattern"
    MESSAGE = "String does not match pattern {params.pattern!r}"

    @classmethod
    def parse(cls, schema, raw):
        _expect(cls.KEYWORD, raw, str, "a string")
        try:
            return re.compile(raw)
        except re.error as exc:
            raise SchemaDocumentError(f"Invalid regular expression in '{cls.KEYWORD}': {raw!r}: {exc}")

    def check(self, instance):
        return self.value.search(instance) is not None


# ---- arrays -----------------------------------------------------------------


class Items(Validator):
    KEYWORD = "items"
    MESSAGE = "Array items are invalid"

    @classmethod
    def parse(cls, schema, raw):
        if isinstance(raw, list):
            for entry in raw:
                _expect(cls.KEYWORD, entry, dict, "a schema or an array of schemas")
            return [schema.compile_child(entry) for entry in raw]
        _expect(cls.KEYWORD, raw, dict, "a schema or an array of schemas")
        return schema.compile_child(raw)

    def validate(self, instance, path):
        if not isinstance(self.value, list):
            valid = True
            for index, item in enumerate(instance):
                valid &= self.value.validate(item, path + (index,))
            return valid

        additional = self.value_or("additionalItems", True)
        if len(instance) > len(self.value) and additional is False:
            return self.schema.tree["additionalItems"].error(path)

        valid = True
        for index, item in enumerate(instance):
            if index < len(self.value):
                node = self.value[index]
            elif isinstance(additional, bool):
                break
            else:
                node = additional
            valid &= node.validate(item, path + (index,))
        return valid


class AdditionalItems(StubValidator):
    KEYWORD = "additionalItems"
    MESSAGE = "Additional items are not allowed"


class MaxItems(BoolCheckValidator):
    KEYWORD = "maxItems"
    MESSAGE = "Array has more than {params} items"

    @classmethod
    def parse(cls, schema, raw):
        _expect_count(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        return len(instance) <= self.value


class MinItems(BoolCheckValidator):
    KEYWORD = "minItems"
    MESSAGE = "Array has fewer than {params} items"

    @classmethod
    def parse(cls, schema, raw):
        _expect_count(cls.KEYWORD, raw)
        return raw

    def check(self, instance):
        return len(instance) >= self.value


class UniqueItems(BoolCheckValidator):
    KEYWORD = "uniqueItems"
    MESSAGE = "Array items are not unique"

    @classmethod
    def parse(cls, schema, raw):
        _expect(cls.KEYWORD, raw, bool, "a boolean")
        return raw

    def check(self, instance):
        if self.value is False:
            return True
        for i, left in enumerate(instance):
            for right in instance[i + 1:]:
                if json_equal(left, right):
                    return False
        return True


# ---- registry ---------------------------------------------------------------

COMMON = "common"

VALIDATORS: Dict[str, Dict[str, type[Validator]]] = {
    COMMON: {v.KEYWORD: v for v in (Type, Enum, Not, OneOf, AnyOf, AllOf)},
    InstanceType.NUMBER: {v.KEYWORD: v for v in (MultipleOf, Minimum, Maximum)},
    InstanceType.OBJECT: {
        v.KEYWORD: v
        for v in (
            Properties,
            PatternProperties,
            AdditionalProperties,
            MaxProperties,
            MinProperties,
            Required,
            Dependencies,
        )
    },
    InstanceType.STRING: {v.KEYWORD: v for v in (MinLength, MaxLength, Pattern)},
    InstanceType.ARRAY: {v.KEYWORD: v for v in (Items, AdditionalItems, MaxItems, MinItems, UniqueItems)},
}


class ValidatorRegistry:
    """Static lookup from keyword name to Validator class, and from instance type to keywords."""

    _by_keyword: Dict[str, type[Validator]] = {
        keyword: validator for group in VALIDATORS.values() for keyword, validator in group.items()
    }
    _by_instance_type: Dict[Optional[str], FrozenSet[str]] = {
        instance_type: frozenset(VALIDATORS[COMMON]) | frozenset(VALIDATORS.get(instance_type, {}))
        for instance_type in InstanceType.get_all_types() + [None]
    }

    @classmethod
    def get(cls, keyword: str) -> Optional[type[Validator]]:
        return cls._by_keyword.get(keyword)

    @classmethod
    def keywords_for(cls, instance_type: Optional[str]) -> FrozenSet[str]:
        """Keywords applicable to an instance of the given InstanceType."""
        return cls._by_instance_type[instance_type]

    @classmethod
    def all_keywords(cls) -> FrozenSet[str]:
        return frozenset(cls._by_keyword)
