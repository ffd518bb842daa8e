"""Tests for the properties / patternProperties / additionalProperties group."""

from structval.schema.records import ErrorRecord
from structval.schema.validators import AdditionalProperties, Type


def test_declared_properties(make_schema):
    schema = make_schema(
        {
            "type": "object",
            "properties": {
                "a": {"type": "integer"},
                "b": {"type": "string"},
                "c": {"type": "integer"},
            },
            "required": ["a", "b"],
        }
    )
    assert schema.is_valid({"a": 1, "b": "foo", "extra": None})
    assert schema.check({"a": 1, "b": 1, "c": "bar"}).errors == [
        ErrorRecord(path=("b",), validator=Type, params="string"),
        ErrorRecord(path=("c",), validator=Type, params="integer"),
    ]


def test_properties_ignore_non_objects(make_schema):
    schema = make_schema({"properties": {"a": {"type": "integer"}}})
    assert schema.is_valid([])
    assert schema.is_valid("a")


def test_additional_properties_false(make_schema):
    schema = make_schema({"properties": {"a": {}}, "additionalProperties": False})
    assert schema.is_valid({"a": 1})
    assert schema.check({"a": 1, "b": 2}).errors == [
        ErrorRecord(path=(), validator=AdditionalProperties, params=False)
    ]


def test_additional_properties_schema(make_schema):
    schema = make_schema({"properties": {"a": {}}, "additionalProperties": {"type": "boolean"}})
    assert schema.is_valid({"a": 1, "b": True})
    assert schema.check({"a": 1, "b": 2}).errors == [ErrorRecord(path=("b",), validator=Type, params="boolean")]


def test_pattern_properties_alone(make_schema):
    schema = make_schema({"patternProperties": {"^x_": {"type": "integer"}}, "additionalProperties": False})
    assert schema.is_valid({"x_a": 1})
    assert schema.check({"x_a": "no"}).errors == [ErrorRecord(path=("x_a",), validator=Type, params="integer")]
    assert schema.check({"y": 1}).errors == [ErrorRecord(path=(), validator=AdditionalProperties, params=False)]


def test_property_check_runs_once_when_both_keywords_are_present(make_schema):
    schema = make_schema(
        {
            "properties": {"title": {"type": "string"}},
            "patternProperties": {"_id$": {"type": "integer"}},
        }
    )
    assert schema.property_check_keyword == "properties"
    assert schema.check({"title": "x", "author_id": "steve"}).errors == [
        ErrorRecord(path=("author_id",), validator=Type, params="integer")
    ]


def test_declared_properties_are_not_matched_against_patterns(make_schema):
    schema = make_schema(
        {
            "properties": {"a_id": {"type": "string"}},
            "patternProperties": {"_id$": {"type": "integer"}},
        }
    )
    assert schema.is_valid({"a_id": "declared", "b_id": 2})


def test_check_order_is_declared_then_patterns_then_additional(make_schema):
    schema = make_schema(
        {
            "properties": {"b": {"type": "string"}},
            "patternProperties": {"^n": {"type": "integer"}},
            "additionalProperties": {"type": "boolean"},
        }
    )
    errors = schema.check({"z": 1, "n1": "x", "b": 2, "a": "q"}).errors
    assert [e.path for e in errors] == [("b",), ("n1",), ("z",), ("a",)]


def test_additional_properties_alone_never_fails(make_schema):
    schema = make_schema({"additionalProperties": False})
    assert schema.is_valid({"a": 1})


def test_property_named_id_with_schema_value(make_schema):
    schema = make_schema({"properties": {"id": {"type": "integer"}}})
    assert schema.is_valid({"id": 3})
    assert not schema.is_valid({"id": "3"})


def test_non_string_keys_never_match_patterns(make_schema):
    schema = make_schema({"patternProperties": {"^1": {"type": "string"}}, "additionalProperties": False})
    assert schema.is_valid({"1a": "x"})
    assert schema.check({1: "x", "1a": "y"}).errors == [
        ErrorRecord(path=(), validator=AdditionalProperties, params=False)
    ]
