"""
Test data generators for JSON parsing and printing benchmarks.

Documents are built from a seeded generator so every run measures the same
text:
- Flat records and large, wide objects
- Mixed-kind arrays exercising Int32/Int64/Float64 promotion
- Nested mappings and very deep arrays for the explicit-stack walkers
- String-heavy content with escape sequences
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

SEED = 20240115
DEEP_NESTING = 5_000
_ESCAPES = ('\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t", "\\u00e9")
_ESCAPE_PROBABILITY = 0.3


def generate_test_data(data_type: str, seed: int = SEED) -> str:
    """Generates JSON text for the named benchmark data set."""
    generators: dict[str, Callable[[random.Random], str]] = {
        "small_object": _generate_small_object,
        "large_object": _generate_large_object,
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "deep_arrays": _generate_deep_arrays,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type](random.Random(seed))


def _random_string(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))


def _generate_small_object(rng: random.Random) -> str:
    """A record under 1KB."""
    data = {
        "id": 12345,
        "name": "Alice Johnson",
        "email": "alice@example.com",
        "active": True,
        "balance": 1234.56,
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }
    return json.dumps(data)


def _generate_large_object(rng: random.Random) -> str:
    """A wide object over 10KB with transaction and activity lists."""
    data = {
        "user_id": rng.randint(1_000_000, 9_999_999),
        "account_number": rng.randint(10**12, 10**15),
        "profile": {
            "first_name": _random_string(rng, 10),
            "last_name": _random_string(rng, 12),
            "email": f"{_random_string(rng, 8)}@{_random_string(rng, 6)}.com",
            "address": {
                "street": f"{rng.randint(1, 9999)} {_random_string(rng, 8)} St",
                "city": _random_string(rng, 12),
                "zip": f"{rng.randint(10000, 99999)}",
                "country": "US",
            },
            "notifications": {
                channel: rng.choice([True, False])
                for channel in ("email", "sms", "push")
            },
        },
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount": round(rng.uniform(1.0, 1000.0), 2),
                "currency": rng.choice(["USD", "EUR", "GBP", "JPY"]),
                "description": f"Payment for {_random_string(rng, 20)}",
                "status": rng.choice(["completed", "pending", "failed"]),
            }
            for i in range(50)
        ],
        "activity_log": [
            {
                "sequence": i,
                "action": rng.choice(["login", "logout", "purchase", "view"]),
                "user_agent": f"Mozilla/5.0 ({_random_string(rng, 20)})",
            }
            for i in range(30)
        ],
    }
    return json.dumps(data)


def _generate_mixed_array(rng: random.Random) -> str:
    """A large array mixing every literal kind and small records."""
    makers: list[Callable[[int], Any]] = [
        lambda _: rng.randint(-1000, 1000),
        lambda _: rng.randint(10**10, 10**15),
        lambda _: round(rng.uniform(-100.0, 100.0), 3),
        lambda _: _random_string(rng, rng.randint(5, 30)),
        lambda _: rng.choice([True, False]),
        lambda _: None,
        lambda i: {"index": i, "score": round(rng.uniform(0, 100), 2)},
    ]
    return json.dumps([rng.choice(makers)(i) for i in range(200)])


def _generate_nested_structure(rng: random.Random) -> str:
    """Mappings nested 8 levels deep with three children per level."""

    def create_nested_dict(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(rng, 10)}

        return {
            "level": depth,
            "items": [create_nested_dict(depth - 1) for _ in range(3)],
        }

    return json.dumps(create_nested_dict(8))


def _generate_deep_arrays(rng: random.Random) -> str:
    """Arrays nested past the interpreter's recursion limit."""
    leaf = json.dumps(_random_string(rng, 10))
    return "[" * DEEP_NESTING + leaf + "]" * DEEP_NESTING


def _generate_string_heavy(rng: random.Random) -> str:
    """Strings dense with escape sequences."""

    def create_escaped_string() -> str:
        chars = []
        for _ in range(50):
            if rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice(_ESCAPES))
            else:
                chars.append(rng.choice(string.ascii_letters + string.digits + " "))
        return "".join(chars)

    # Escapes are spliced in as raw text, so build the document by hand
    strings = ", ".join(f'"{create_escaped_string()}"' for _ in range(100))
    entries = ", ".join(
        f'"key_{i}": {{"description": "{create_escaped_string()}"}}'
        for i in range(20)
    )
    return f'{{"strings": [{strings}], "mixed_content": {{{entries}}}}}'
