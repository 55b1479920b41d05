"""
JSON specification compliance tests for valid JSON inputs.

Validates that properly formatted JSON strings parse without recorded
problems and produce the expected Value trees.
"""

import json

import joson
from joson import Kind

from .conftest import JsonTestCase


def test_json_standard_compliance(json_pass_cases: list[JsonTestCase]) -> None:
    """
    Validates JSON strings that must parse cleanly.

    The plain Python form of each result must match the standard library's
    reading of the same document.
    """
    for case in json_pass_cases:
        parser = joson.JsonParser(case.input_data)
        result = parser.parse()

        assert parser.errors == [], case.description
        assert parser.complete, case.description
        assert result.to_python() == json.loads(case.input_data)


def test_strict_mode_accepts_valid_documents(
    json_pass_cases: list[JsonTestCase],
) -> None:
    """
    Validates strict parsing does not raise on valid documents.
    """
    for case in json_pass_cases:
        joson.loads(case.input_data, strict=True)


def test_basic_json_values(basic_json_values: list[JsonTestCase]) -> None:
    """
    Validates parsing of fundamental JSON value types.
    """
    for case in basic_json_values:
        result = joson.loads(case.input_data)
        assert result.to_python() == case.expected_output, case.description


def test_empty_containers() -> None:
    """
    Validates parsing of empty JSON containers.
    """
    assert joson.loads("[]").kind is Kind.SEQUENCE
    assert joson.loads("[]").size() == 0
    assert joson.loads("{}").kind is Kind.MAPPING
    assert joson.loads("{}").size() == 0
    assert joson.loads(" [] ").size() == 0  # With whitespace
    assert joson.loads(" {} ").size() == 0  # With whitespace


def test_whitespace_handling() -> None:
    """
    Validates proper handling of JSON whitespace.
    """
    # Leading/trailing whitespace should be ignored
    assert joson.loads(" null ").is_null()
    assert joson.loads("\n\ttrue\n").get_bool() is True
    assert joson.loads("\r\n42\r\n").get_int32() == 42

    # Whitespace in containers
    assert joson.loads("[ 1 , 2 , 3 ]").to_python() == [1, 2, 3]
    assert joson.loads('{ "key" : "value" }').to_python() == {"key": "value"}


def test_end_to_end_mapping() -> None:
    """
    Validates the kinds produced for a mixed document.
    """
    doc = joson.loads('{"a": 1, "b": [true, null, "x"]}')

    assert doc.kind is Kind.MAPPING
    assert doc.size() == 2
    assert doc["a"].kind is Kind.INT32
    assert doc["a"].get_int32() == 1

    items = doc["b"]
    assert items.kind is Kind.SEQUENCE
    assert [item.kind for item in items.get_sequence()] == [
        Kind.BOOL,
        Kind.NULL,
        Kind.STRING,
    ]
    assert items.at(0).get_bool() is True
    assert items.at(2).get_str() == "x"

    assert joson.loads(joson.dumps(doc)) == doc
