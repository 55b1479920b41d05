"""
Iterative serializers for Value trees.

``to_string`` and ``write_to`` share one walk that keeps two explicit
stacks: the pending frames (node, prefix, depth) and the closing delimiters
of the composites still open. After each leaf the closer stack is drained
down to the depth of the next pending frame, so arbitrarily deep trees print
without recursion.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal
from typing import IO

from ._config import PrintConfig
from ._profile import ProfileContext
from ._value import INDEXED_KINDS
from ._value import Kind
from ._value import Value

CONTROL_LIMIT = 0x20

CANONICAL_EMPTY = {
    Kind.FIXED_SEQUENCE: "[]",
    Kind.SEQUENCE: "[]",
    Kind.MAPPING: "{}",
}
VISUAL_EMPTY = {
    Kind.FIXED_SEQUENCE: "(Null)",
    Kind.SEQUENCE: "[Null]",
    Kind.MAPPING: "{Null}",
}


@dataclass(frozen=True, slots=True)
class _Frame:
    node: Value
    prefix: str
    depth: int


def _encode_string(s: str) -> str:
    """Encode string with proper escape sequences."""
    result = ['"']
    for char in s:
        if char == '"':
            result.append('\\"')
        elif char == "\\":
            result.append("\\\\")
        elif char == "\b":
            result.append("\\b")
        elif char == "\f":
            result.append("\\f")
        elif char == "\n":
            result.append("\\n")
        elif char == "\r":
            result.append("\\r")
        elif char == "\t":
            result.append("\\t")
        elif ord(char) < CONTROL_LIMIT:
            result.append(f"\\u{ord(char):04x}")
        else:
            result.append(char)
    result.append('"')
    return "".join(result)


def _encode_number(n: int | float | Decimal) -> str:
    """Encode numeric values with JSON compliance."""
    if isinstance(n, Decimal):
        if not n.is_finite():
            raise ValueError("Out of range float values are not JSON compliant")
        text = str(n)
        if not any(marker in text for marker in ".eE"):
            text += ".0"
        return text
    if isinstance(n, float):
        if math.isnan(n) or math.isinf(n):
            raise ValueError("Out of range float values are not JSON compliant")
        return repr(n)
    return str(n)


def _format_canonical(node: Value) -> str:  # noqa: PLR0911
    kind = node.kind
    if kind is Kind.NULL:
        return "null"
    elif kind is Kind.BOOL:
        return "true" if node.get_bool() else "false"
    elif kind is Kind.STRING:
        return _encode_string(node.get_str())
    elif kind is Kind.CHAR:
        return str(ord(node.get_char()))
    elif kind is Kind.INT32:
        return _encode_number(node.get_int32())
    elif kind is Kind.INT64:
        return _encode_number(node.get_int64())
    elif kind is Kind.FLOAT32:
        return _encode_number(node.get_float32())
    elif kind is Kind.FLOAT64:
        return _encode_number(node.get_float64())
    elif kind is Kind.FLOAT80:
        return _encode_number(node.get_float80())
    return CANONICAL_EMPTY[kind]


def _format_visual(node: Value) -> str:  # noqa: PLR0911
    kind = node.kind
    if kind is Kind.NULL:
        return "NullPtr"
    elif kind is Kind.BOOL:
        return "True" if node.get_bool() else "False"
    elif kind is Kind.STRING:
        return _encode_string(node.get_str())
    elif kind is Kind.CHAR:
        return f"'{node.get_char()}'"
    elif kind is Kind.INT32:
        return f"{node.get_int32():_}"
    elif kind is Kind.INT64:
        return f"{node.get_int64():_}"
    elif kind is Kind.FLOAT32:
        return f"{node.get_float32():.4e}"
    elif kind is Kind.FLOAT64:
        return f"{node.get_float64():.8e}"
    elif kind is Kind.FLOAT80:
        return f"{node.get_float80():.12e}"
    return VISUAL_EMPTY[kind]


def _newline(config: PrintConfig, depth: int) -> str:
    if config.indent is None:
        return "\n"
    return "\n" + " " * (config.indent * depth)


def _separator(closer: str, depth: int, config: PrintConfig) -> str:
    """Text between two siblings of the composite that ``closer`` ends."""
    if closer == "}":
        return "," + _newline(config, depth)
    return ", "


def _walk(value: Value, config: PrintConfig) -> Iterator[str]:
    """Yields the serialized text of ``value`` chunk by chunk."""
    format_leaf = _format_visual if config.visualize else _format_canonical
    frames = [_Frame(value, "", 0)]
    closers: list[str] = []

    while frames:
        frame = frames.pop()
        node, depth = frame.node, frame.depth
        if frame.prefix:
            yield frame.prefix
        kind = node.kind

        if kind is Kind.MAPPING and node.size():
            yield "{" + _newline(config, depth + 1)
            closers.append("}")
            entries = list(node.get_mapping().items())
            frames.extend(
                _Frame(child, _encode_string(key) + ": ", depth + 1)
                for key, child in reversed(entries)
            )
            continue

        if kind in INDEXED_KINDS and node.size():
            if kind is Kind.FIXED_SEQUENCE:
                children = list(node.get_fixed_sequence())
                opener, closer = ("(", ")") if config.visualize else ("[", "]")
            else:
                children = list(node.get_sequence())
                opener, closer = "[", "]"
            yield opener
            closers.append(closer)
            frames.extend(_Frame(child, "", depth + 1) for child in reversed(children))
            continue

        yield format_leaf(node)

        next_depth = frames[-1].depth if frames else 0
        if frames and depth == next_depth:
            yield _separator(closers[-1], depth, config)
        while depth > next_depth and closers:
            depth -= 1
            closer = closers.pop()
            if closer == "}":
                yield _newline(config, depth)
            yield closer
            if frames and depth == next_depth:
                yield _separator(closers[-1], depth, config)


def to_string(value: Value, config: PrintConfig | None = None) -> str:
    """
    Serializes ``value`` into a string.

    Canonical mode produces JSON with ``config.indent`` spaces per level;
    visualize mode produces the debugging dialect.

    Raises:
        ValueError: A float payload is NaN or infinite in canonical mode
    """
    config = config or PrintConfig()
    with ProfileContext("to_string"):
        return "".join(_walk(value, config))


def write_to(
    value: Value, stream: IO[str], config: PrintConfig | None = None
) -> None:
    """Writes ``value`` to ``stream`` without building the whole text first."""
    if not hasattr(stream, "write"):
        raise TypeError("stream must have a write() method")
    config = config or PrintConfig()
    with ProfileContext("write_to"):
        for chunk in _walk(value, config):
            stream.write(chunk)
