"""Tests for ids, $ref resolution and external documents."""

import logging

import pytest

from structval import (
    Context,
    ReferenceNode,
    ReferenceResolutionError,
    SchemaDocumentError,
    StructvalError,
    compile_schema,
)
from structval.schema.records import ErrorRecord
from structval.schema.validators import Minimum, Type


class TestInternalReferences:
    def test_pointer_and_id_references(self, make_schema):
        schema = make_schema(
            {
                "definitions": {
                    "int": {"type": "integer"},
                    "str": {"id": "#str", "type": "string"},
                },
                "properties": {
                    "a": {"$ref": "#/definitions/int"},
                    "b": {"$ref": "#str"},
                },
            }
        )
        assert schema.is_valid({"a": 1, "b": "foo"})
        assert schema.check({"a": "foo", "b": 1}).errors == [
            ErrorRecord(path=("a",), validator=Type, params="integer"),
            ErrorRecord(path=("b",), validator=Type, params="string"),
        ]

    def test_recursive_reference_to_root(self, make_schema):
        schema = make_schema(
            {
                "oneOf": [
                    {
                        "type": "object",
                        "properties": {"left": {"$ref": "#"}, "right": {"$ref": "#"}},
                        "required": ["left", "right"],
                    },
                    {"type": "integer"},
                    {"type": "null"},
                ]
            }
        )
        assert schema.is_valid({"left": {"left": 1, "right": None}, "right": 2})
        assert schema.is_valid(None)
        assert not schema.is_valid({"left": {"left": "x", "right": None}, "right": 2})
        assert not schema.is_valid({"left": 1})

    def test_deeply_nested_recursion(self, make_schema):
        schema = make_schema(
            {
                "type": "object",
                "properties": {"child": {"$ref": "#"}, "value": {"type": "integer"}},
            }
        )
        instance = {"value": 0}
        for depth in range(1, 30):
            instance = {"value": depth, "child": instance}
        assert schema.is_valid(instance)

    def test_pointer_walks_through_keyword_values(self, make_schema):
        schema = make_schema(
            {
                "definitions": {"pair": {"items": [{"type": "string"}, {"type": "integer"}]}},
                "properties": {
                    "a": {"type": "integer"},
                    "b": {"$ref": "#/properties/a"},
                    "second": {"$ref": "#/definitions/pair/items/1"},
                },
            }
        )
        assert schema.is_valid({"b": 1, "second": 2})
        assert [e.path for e in schema.check({"b": "x", "second": "y"}).errors] == [("b",), ("second",)]

    def test_escaped_pointer_segments(self, make_schema):
        schema = make_schema(
            {
                "definitions": {
                    "a/b": {"type": "integer"},
                    "t~n": {"type": "string"},
                    "with space": {"type": "boolean"},
                },
                "properties": {
                    "slash": {"$ref": "#/definitions/a~1b"},
                    "tilde": {"$ref": "#/definitions/t~0n"},
                    "space": {"$ref": "#/definitions/with%20space"},
                },
            }
        )
        assert schema.is_valid({"slash": 1, "tilde": "x", "space": True})
        assert not schema.is_valid({"slash": "1"})
        assert not schema.is_valid({"tilde": 1})
        assert not schema.is_valid({"space": 1})

    def test_sibling_keywords_of_ref_are_ignored(self, make_schema):
        schema = make_schema(
            {
                "definitions": {"int": {"type": "integer"}},
                "properties": {"a": {"$ref": "#/definitions/int", "minimum": 10}},
            }
        )
        node = schema.tree["properties"].value["a"]
        assert isinstance(node, ReferenceNode)
        assert schema.is_valid({"a": 1})

    def test_references_resolve_lazily(self, make_schema):
        schema = make_schema({"properties": {"a": {"$ref": "#/definitions/missing"}}})
        node = schema.tree["properties"].value["a"]
        assert not node.is_resolved
        assert schema.is_valid({})
        with pytest.raises(ReferenceResolutionError) as excinfo:
            schema.is_valid({"a": 1})
        assert excinfo.value.uri == "http://localhost/#/definitions/missing"

    def test_resolve_refs_at_compile_time(self):
        with pytest.raises(ReferenceResolutionError):
            compile_schema({"properties": {"a": {"$ref": "#/definitions/missing"}}}, resolve_refs=True)

        schema = compile_schema(
            {"definitions": {"int": {"type": "integer"}}, "items": {"$ref": "#/definitions/int"}},
            resolve_refs=True,
        )
        assert schema.tree["items"].value.is_resolved

    def test_circular_references_are_reported(self, make_schema):
        schema = make_schema(
            {
                "definitions": {"a": {"$ref": "#/definitions/b"}, "b": {"$ref": "#/definitions/a"}},
                "properties": {"x": {"$ref": "#/definitions/a"}},
            }
        )
        with pytest.raises(ReferenceResolutionError, match="Circular reference"):
            schema.is_valid({"x": 1})

    def test_first_registration_wins(self, make_schema):
        schema = make_schema(
            {
                "definitions": {
                    "first": {"id": "#dup", "type": "integer"},
                    "second": {"id": "#dup", "type": "string"},
                },
                "properties": {"a": {"$ref": "#dup"}},
            }
        )
        assert schema.is_valid({"a": 1})
        assert not schema.is_valid({"a": "x"})


class TestIds:
    def test_root_id_defaults_to_base_uri(self, make_schema):
        assert make_schema({}).id == "http://localhost/#"

    def test_ids_merge_against_enclosing_scope(self, make_schema):
        schema = make_schema(
            {
                "id": "http://example.com/root.json",
                "definitions": {
                    "a": {"id": "#foo"},
                    "b": {"id": "other.json", "definitions": {"c": {"id": "#bar"}}},
                },
            }
        )
        definitions = schema.tree["definitions"]
        assert schema.id == "http://example.com/root.json#"
        assert definitions.id == "http://example.com/root.json#"
        assert definitions.tree["a"].id == "http://example.com/root.json#foo"
        assert definitions.tree["b"].id == "http://example.com/other.json#"
        assert definitions.tree["b"].tree["definitions"].tree["c"].id == "http://example.com/other.json#bar"

    def test_base_uri_argument(self, make_schema):
        schema = make_schema({"id": "root.json"}, base_uri="http://example.com/schemas/")
        assert schema.id == "http://example.com/schemas/root.json#"

    def test_set_base_uri(self):
        context = Context()
        context.set_base_uri("http://example.com/")
        assert context.compile({}).id == "http://example.com/#"

    def test_base_uri_scope_restores_previous_base(self):
        context = Context()
        with context.base_uri_scope("http://example.com/a.json") as scoped:
            assert scoped == "http://example.com/a.json#"
            assert context.compile({}).id == "http://example.com/a.json#"
        assert context.base_uri == "http://localhost/#"

    def test_non_string_id_is_plain_data(self, make_schema):
        schema = make_schema({"id": 5, "type": "integer"})
        assert schema.id == "http://localhost/#"
        assert schema.tree["id"] == 5


class TestExternalReferences:
    def test_resolver_supplies_missing_documents(self, make_schema):
        schema = make_schema(
            {
                "inner": {"id": "inner.json", "type": "string"},
                "properties": {"a": {"$ref": "inner.json"}, "b": {"$ref": "outer.json"}},
            }
        )
        requested = []

        @schema.on_external_ref
        def resolve(uri):
            requested.append(uri)
            return {"type": "integer"}

        assert schema.is_valid({"a": "foo", "b": 1})
        assert not schema.is_valid({"a": 1})
        assert not schema.is_valid({"b": "foo"})
        assert requested == ["http://localhost/outer.json"]

    def test_resolver_is_called_once_per_document(self, make_schema):
        calls = []

        def resolve(uri):
            calls.append(uri)
            return {
                "foo": {"id": "#foo", "type": "string"},
                "definitions": {"bar": {"type": "integer"}},
            }

        schema = make_schema(
            {
                "properties": {
                    "a": {"$ref": "outer.json#foo"},
                    "b": {"$ref": "outer.json#/definitions/bar"},
                    "c": {"$ref": "outer.json#foo"},
                }
            },
            external_resolver=resolve,
        )
        assert schema.is_valid({"a": "x", "b": 1, "c": "y"})
        assert not schema.is_valid({"a": 1, "b": "x"})
        assert calls == ["http://localhost/outer.json"]

    def test_resolver_returning_none_is_not_retried(self, make_schema, caplog):
        calls = []

        def resolve(uri):
            calls.append(uri)
            return None

        schema = make_schema(
            {"properties": {"a": {"$ref": "missing.json"}, "b": {"$ref": "missing.json"}}},
            external_resolver=resolve,
        )
        with caplog.at_level(logging.WARNING, logger="structval"):
            with pytest.raises(ReferenceResolutionError):
                schema.is_valid({"a": 1})
            with pytest.raises(ReferenceResolutionError):
                schema.is_valid({"b": 1})
        assert calls == ["http://localhost/missing.json"]
        assert "External resolver returned no schema" in caplog.text

    def test_external_document_with_its_own_id(self):
        def resolve(uri):
            return {"id": "http://other.example/x.json", "minimum": 0}

        schema = compile_schema({"items": {"$ref": "ext.json"}}, external_resolver=resolve)
        assert schema.check([1, -1]).errors == [ErrorRecord(path=(1,), validator=Minimum, params=0)]
        assert schema.context.lookup("http://other.example/x.json") is not None
        assert schema.context.lookup("http://localhost/ext.json") is not None

    def test_external_document_references_resolve_in_its_scope(self):
        documents = {
            "http://example.com/a.json": {"properties": {"n": {"$ref": "b.json#/definitions/n"}}},
            "http://example.com/b.json": {"definitions": {"n": {"type": "number"}}},
        }
        schema = compile_schema(
            {"$ref": "a.json"},
            base_uri="http://example.com/root.json",
            external_resolver=documents.get,
        )
        assert isinstance(schema, ReferenceNode)
        assert schema.is_valid({"n": 1.5})
        assert not schema.is_valid({"n": "x"})

    def test_unresolvable_without_resolver(self, make_schema):
        schema = make_schema({"$ref": "http://nowhere.example/x.json"})
        with pytest.raises(ReferenceResolutionError):
            schema.is_valid(1)

    def test_resolver_can_only_be_set_once(self):
        context = Context(external_resolver=lambda uri: None)
        with pytest.raises(StructvalError):
            context.on_external_ref(lambda uri: None)

    def test_bare_ref_document_registers_its_target(self):
        documents = {
            "http://localhost/alias.json": {"$ref": "target.json"},
            "http://localhost/target.json": {"type": "integer"},
        }
        schema = compile_schema(
            {"properties": {"a": {"$ref": "alias.json"}, "b": {"$ref": "alias.json"}}},
            external_resolver=documents.get,
        )
        assert schema.is_valid({"a": 1, "b": 2})
        assert not schema.is_valid({"b": "x"})

        registered = schema.context.lookup("http://localhost/alias.json")
        assert not isinstance(registered, ReferenceNode)
        assert registered is schema.context.lookup("http://localhost/target.json")

    def test_failed_external_document_leaves_no_ids_behind(self):
        def resolve(uri):
            return {"definitions": {"ok": {"id": "#ok", "type": "string"}}, "properties": []}

        schema = compile_schema(
            {"properties": {"a": {"$ref": "bad.json"}, "b": {"$ref": "bad.json#ok"}}},
            external_resolver=resolve,
        )
        with pytest.raises(SchemaDocumentError):
            schema.is_valid({"a": 1})
        assert schema.context.lookup("http://localhost/bad.json#ok") is None
        assert schema.context.lookup("http://localhost/bad.json") is None
        with pytest.raises(ReferenceResolutionError):
            schema.is_valid({"b": "x"})
