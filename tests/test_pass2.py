"""
JSON specification pass2 test from json.org test suite.

Validates parsing of deeply nested array structure, and documents far
deeper than the interpreter's recursion limit.
"""

import sys

import joson
from joson import Kind

from .conftest import nested_arrays
from .conftest import nested_objects

# from https://json.org/JSON_checker/test/pass2.json
JSON = r"""
[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]
"""

DEEP = 10_000


def test_parse() -> None:
    """
    Validates JSON parsing and round-trip encoding for deeply nested arrays.
    """
    res = joson.loads(JSON)

    out = joson.dumps(res)
    assert res == joson.loads(out)


def test_deep_arrays_without_recursion() -> None:
    """
    Validates parse, print, clone and compare on nesting deeper than the
    recursion limit.
    """
    assert DEEP > sys.getrecursionlimit()
    text = nested_arrays(DEEP)

    doc = joson.loads(text, strict=True)
    assert doc.kind is Kind.SEQUENCE

    out = joson.dumps(doc)
    assert out == text

    copy = doc.clone()
    assert copy == doc
    assert joson.loads(out) == copy


def test_deep_objects_without_recursion() -> None:
    """
    Validates deep Mapping chains survive a print and parse cycle.
    """
    doc = joson.loads(nested_objects(DEEP), strict=True)

    node = doc
    for _ in range(DEEP):
        node = node["k"]
    assert node.get_int32() == 0

    assert joson.loads(joson.dumps(doc, indent=None)) == doc


def test_deep_python_conversion() -> None:
    """
    Validates Python conversion in both directions on deep trees.
    """
    data = joson.loads(nested_arrays(DEEP, '"leaf"')).to_python()

    node = data
    for _ in range(DEEP - 1):
        node = node[0]
    assert node == ["leaf"]

    expected = joson.loads(nested_arrays(DEEP, '"leaf"'))
    assert joson.Value.from_python(data) == expected
