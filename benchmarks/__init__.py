"""
Benchmark suite for joson parsing and printing performance.

Compares joson against standard JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Also measures the explicit-stack parser, printer and clone on documents
nested deeper than the recursion limit.
"""
