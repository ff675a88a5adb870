# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for alias dispatch and error reporting to the diagnostic sink."""

import logging

import pytest

from kvcollection import (
    Collection,
    KeyAlreadyAddedError,
    KeyInvalidError,
    MethodDoesNotExistError,
    Severity,
)
from kvcollection._concepts import DiagnosticSink


class ExplodingSink(DiagnosticSink):
    def write(self, severity, category, message):
        raise RuntimeError("sink is down")


class TestAliases:
    @pytest.fixture
    def filled(self, collection):
        return collection.add("foo").add("bar")

    def test_count_and_size(self, filled):
        assert filled.count() == 2
        assert filled.size() == 2

    def test_all(self, filled):
        assert filled.all() == {0: "foo", 1: "bar"}

    def test_first_and_last(self, filled):
        assert filled.first() == "foo"
        assert filled.last() == "bar"

    def test_first_and_last_on_empty(self, collection):
        assert collection.first() is None
        assert collection.last() is None

    def test_call_dispatches_aliases(self, filled):
        assert filled.call("size") == 2
        assert filled.call("last") == "bar"

    def test_call_dispatches_operations_with_arguments(self, filled):
        filled.call("add", "baz", "k")
        assert filled.call("get", "k") == "baz"

    def test_unknown_alias(self, collection, sink):
        with pytest.raises(MethodDoesNotExistError) as exc_info:
            collection.unknown()
        assert exc_info.value.code == 502
        assert exc_info.value.details == {"name": "unknown"}
        assert sink.messages == [
            "Method or alias unknown does not exist. Code : 502"
        ]

    def test_call_unknown_name(self, collection):
        with pytest.raises(MethodDoesNotExistError):
            collection.call("explode")

    def test_unknown_alias_is_attribute_error(self, collection):
        assert not hasattr(collection, "unknown")
        assert getattr(collection, "unknown", "default") == "default"
        with pytest.raises(AttributeError):
            collection.unknown

    def test_private_names_do_not_dispatch(self, collection, sink):
        with pytest.raises(AttributeError):
            collection._missing
        assert len(sink) == 0


class TestDiagnostics:
    def test_key_already_added_is_reported(self, collection, sink):
        collection.add("a", "k")
        with pytest.raises(KeyAlreadyAddedError):
            collection.add("b", "k")
        assert len(sink) == 1
        record = sink.records[0]
        assert record.severity is Severity.ERROR
        assert record.category == "COLLECTION"
        assert record.message == "Key k already added. Code : 500"

    def test_key_invalid_is_reported(self, collection, sink):
        with pytest.raises(KeyInvalidError):
            collection.get("missing")
        assert sink.messages == [
            "The key missing does not exist in the collection. Code : 501"
        ]

    def test_successful_calls_report_nothing(self, keyed, sink):
        keyed.get("key")
        keyed.replace("key", "x").drop("key2")
        assert sink.records == []

    def test_failing_sink_does_not_mask_error(self, caplog):
        collection = Collection(sink=ExplodingSink())
        with caplog.at_level(logging.WARNING, logger="kvcollection"):
            with pytest.raises(KeyInvalidError) as exc_info:
                collection.drop("nope")
        assert exc_info.value.code == 501
        assert "failed to record" in caplog.text

    def test_derived_collections_share_sink(self, keyed, sink):
        mapped = keyed.map(lambda value, key: value)
        with pytest.raises(KeyInvalidError):
            mapped.get("absent")
        assert len(sink) == 1
