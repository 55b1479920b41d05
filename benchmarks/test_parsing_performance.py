"""
Parsing and printing benchmarks comparing joson against standard libraries.

Compares speed across different JSON data sets:
- Standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)
- joson (typed Value trees, explicit-stack walkers)
"""

import json
from collections.abc import Callable
from typing import Any

import orjson
import pytest
import ujson  # type: ignore[import-untyped]

import joson
from benchmarks.data_generators import generate_test_data

PARSERS = [
    ("stdlib_json", json.loads),
    ("orjson", orjson.loads),
    ("ujson", ujson.loads),
    ("joson", joson.loads),
]

DATA_SETS = [
    ("small_object", dict),
    ("large_object", dict),
    ("mixed_array", list),
    ("nested_structure", dict),
    ("string_heavy", dict),
]


def _plain(result: Any) -> Any:
    return result.to_python() if isinstance(result, joson.Value) else result


class TestParsingBenchmarks:
    """Benchmarks for JSON parsing across libraries."""

    @pytest.mark.benchmark(group="parsing")
    @pytest.mark.parametrize("data_type,expected_type", DATA_SETS)
    @pytest.mark.parametrize("parser,parse_func", PARSERS)
    def test_parsing(
        self,
        benchmark: Any,
        parser: str,
        parse_func: Callable[[Any], Any],
        data_type: str,
        expected_type: type,
    ) -> None:
        test_data = generate_test_data(data_type)

        if parser == "orjson":
            # orjson expects bytes for optimal performance
            result = benchmark(parse_func, test_data.encode("utf-8"))
        else:
            result = benchmark(parse_func, test_data)

        assert isinstance(_plain(result), expected_type)
        assert _plain(result) == json.loads(test_data)

    @pytest.mark.benchmark(group="deep_nesting")
    def test_deep_nesting_parsing(self, benchmark: Any) -> None:
        """Only the explicit-stack parser handles this depth."""
        test_data = generate_test_data("deep_arrays")

        result = benchmark(joson.loads, test_data)

        assert result.kind is joson.Kind.SEQUENCE


class TestPrintingBenchmarks:
    """Benchmarks for serialization across libraries."""

    @pytest.mark.benchmark(group="printing")
    @pytest.mark.parametrize("data_type", [name for name, _ in DATA_SETS])
    @pytest.mark.parametrize(
        "printer",
        ["stdlib_json", "orjson", "ujson", "joson", "joson_visualize"],
    )
    def test_printing(self, benchmark: Any, printer: str, data_type: str) -> None:
        test_data = generate_test_data(data_type)
        plain = json.loads(test_data)
        tree = joson.loads(test_data)

        printers: dict[str, Callable[[], Any]] = {
            "stdlib_json": lambda: json.dumps(plain, indent=2),
            "orjson": lambda: orjson.dumps(plain, option=orjson.OPT_INDENT_2),
            "ujson": lambda: ujson.dumps(plain, indent=2),
            "joson": lambda: joson.dumps(tree),
            "joson_visualize": lambda: joson.visualize(tree),
        }
        result = benchmark(printers[printer])

        assert len(result) > 0

    @pytest.mark.benchmark(group="deep_nesting")
    def test_deep_nesting_printing(self, benchmark: Any) -> None:
        test_data = generate_test_data("deep_arrays")
        tree = joson.loads(test_data)

        result = benchmark(joson.dumps, tree)

        assert result == test_data

    @pytest.mark.benchmark(group="deep_nesting")
    def test_deep_nesting_clone(self, benchmark: Any) -> None:
        tree = joson.loads(generate_test_data("deep_arrays"))

        result = benchmark(tree.clone)

        assert result == tree
