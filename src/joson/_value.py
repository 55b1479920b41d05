"""
Tagged-union document model.

A Value carries exactly one payload selected by its Kind. Composite payloads
(Sequence, FixedSequence, Mapping) are owned by a single Value, and every
Value node occupies at most one container slot. Inserting a node that
already lives elsewhere stores a deep clone, so two live trees never share
an allocation.

Deep copies, equality and Python conversion all walk the tree with explicit
work lists, so document depth is bounded by memory rather than the
interpreter's recursion limit.
"""

import ctypes
from collections.abc import ItemsView
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import KeysView
from collections.abc import ValuesView
from decimal import Decimal
from enum import Enum
from typing import IO
from typing import Any
from typing import TypeAlias

from ._config import VISUALIZE
from ._config import PrintConfig
from ._errors import IndexOutOfRangeError
from ._errors import InvalidOperationError
from ._errors import TypeMismatchError

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
DEFAULT_CAPACITY = 8


class Kind(Enum):
    """
    Discriminant of a Value.

    Member values are the display names returned by ``Value.type_name``.
    """

    CHAR = "Char"
    INT32 = "Int32"
    INT64 = "Int64"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    FLOAT80 = "Float80"
    BOOL = "Bool"
    STRING = "String"
    NULL = "Null"
    FIXED_SEQUENCE = "FixedSequence"
    SEQUENCE = "Sequence"
    MAPPING = "Mapping"


COMPOSITE_KINDS = frozenset({Kind.FIXED_SEQUENCE, Kind.SEQUENCE, Kind.MAPPING})
INDEXED_KINDS = frozenset({Kind.FIXED_SEQUENCE, Kind.SEQUENCE})


def _is_int(obj: object) -> bool:
    return isinstance(obj, int) and not isinstance(obj, bool)


def _is_real(obj: object) -> bool:
    return isinstance(obj, int | float) and not isinstance(obj, bool)


def _mismatch(kind: Kind, expected: str, payload: object) -> TypeMismatchError:
    return TypeMismatchError(
        f"{kind.value} payload must be {expected}, not {type(payload).__name__}"
    )


def _check_int(payload: object, low: int, high: int, kind: Kind) -> int:
    if not _is_int(payload):
        raise _mismatch(kind, "int", payload)
    if not low <= payload <= high:  # type: ignore[operator]
        raise OverflowError(f"{payload} does not fit in {kind.value}")
    return payload  # type: ignore[return-value]


def _coerce(kind: Kind, payload: Any) -> Any:  # noqa: PLR0911, PLR0912
    """Validates ``payload`` for ``kind`` and returns its stored form."""
    if kind is Kind.CHAR:
        if not isinstance(payload, str) or len(payload) != 1:
            raise TypeMismatchError("Char payload must be a single character")
        return payload
    elif kind is Kind.INT32:
        return _check_int(payload, INT32_MIN, INT32_MAX, kind)
    elif kind is Kind.INT64:
        return _check_int(payload, INT64_MIN, INT64_MAX, kind)
    elif kind is Kind.FLOAT32:
        if not _is_real(payload):
            raise _mismatch(kind, "a real number", payload)
        return ctypes.c_float(float(payload)).value
    elif kind is Kind.FLOAT64:
        if not _is_real(payload):
            raise _mismatch(kind, "a real number", payload)
        return float(payload)
    elif kind is Kind.FLOAT80:
        if isinstance(payload, Decimal):
            return payload
        if _is_int(payload):
            return Decimal(payload)
        if isinstance(payload, float):
            return Decimal(repr(payload))
        raise _mismatch(kind, "Decimal", payload)
    elif kind is Kind.BOOL:
        if not isinstance(payload, bool):
            raise _mismatch(kind, "bool", payload)
        return payload
    elif kind is Kind.STRING:
        if not isinstance(payload, str):
            raise _mismatch(kind, "str", payload)
        return payload
    elif kind is Kind.NULL:
        if payload is not None:
            raise _mismatch(kind, "None", payload)
        return None
    elif kind is Kind.FIXED_SEQUENCE:
        if not isinstance(payload, FixedSequence):
            raise _mismatch(kind, "FixedSequence", payload)
        return payload
    elif kind is Kind.SEQUENCE:
        if not isinstance(payload, Sequence):
            raise _mismatch(kind, "Sequence", payload)
        return payload
    else:
        if not isinstance(payload, Mapping):
            raise _mismatch(kind, "Mapping", payload)
        return payload


def _default_payload(kind: Kind) -> Any:  # noqa: PLR0911
    """Returns the zero or empty payload of ``kind``."""
    if kind is Kind.CHAR:
        return "\0"
    elif kind in (Kind.INT32, Kind.INT64):
        return 0
    elif kind in (Kind.FLOAT32, Kind.FLOAT64):
        return 0.0
    elif kind is Kind.FLOAT80:
        return Decimal(0)
    elif kind is Kind.BOOL:
        return False
    elif kind is Kind.STRING:
        return ""
    elif kind is Kind.FIXED_SEQUENCE:
        return FixedSequence()
    elif kind is Kind.SEQUENCE:
        return Sequence()
    elif kind is Kind.MAPPING:
        return Mapping()
    return None


def _infer_kind(payload: Any) -> Kind:  # noqa: PLR0911
    """Picks the discriminant for a bare Python payload."""
    if payload is None:
        return Kind.NULL
    elif isinstance(payload, bool):
        return Kind.BOOL
    elif isinstance(payload, int):
        return Kind.INT32 if INT32_MIN <= payload <= INT32_MAX else Kind.INT64
    elif isinstance(payload, float):
        return Kind.FLOAT64
    elif isinstance(payload, str):
        return Kind.STRING
    elif isinstance(payload, Decimal):
        return Kind.FLOAT80
    elif isinstance(payload, FixedSequence):
        return Kind.FIXED_SEQUENCE
    elif isinstance(payload, Sequence):
        return Kind.SEQUENCE
    elif isinstance(payload, Mapping):
        return Kind.MAPPING
    raise TypeMismatchError(
        f"Object of type {type(payload).__name__} cannot be stored in a Value"
    )


def _reaches(start: "Container", target: object) -> bool:
    """Whether ``target`` (a node or a container) lies within ``start``."""
    stack = [start]
    while stack:
        container = stack.pop()
        if container is target:
            return True
        if isinstance(container, Mapping):
            children: Iterable[Value] = container.values()
        else:
            children = container
        for child in children:
            if child is target:
                return True
            if child._kind in COMPOSITE_KINDS:
                stack.append(child._payload)
    return False


def _adopt(value: "Value", container: "Container | None" = None) -> "Value":
    """
    Prepares ``value`` for a slot of ``container``.

    The node is cloned when it is already placed, or when ``container``
    lies within its own subtree.
    """
    if not isinstance(value, Value):
        raise TypeMismatchError(
            f"containers hold Value, not {type(value).__name__}"
        )
    if value._attached or (
        container is not None
        and value._kind in COMPOSITE_KINDS
        and _reaches(value._payload, container)
    ):
        value = value.clone()
    value._attached = True
    return value


def _detach(value: "Value | None") -> None:
    if value is not None:
        value._attached = False


def _check_index(index: int, size: int, owner: str) -> None:
    if not _is_int(index):
        raise TypeError(
            f"{owner} indices must be integers, not {type(index).__name__}"
        )
    if not 0 <= index < size:
        raise IndexOutOfRangeError(
            f"Index {index} out of range for {owner} of size {size}"
        )


def _check_key(key: object) -> str:
    if not isinstance(key, str):
        raise TypeMismatchError(
            f"Mapping keys must be str, not {type(key).__name__}"
        )
    return key


def _check_capacity(capacity: int) -> None:
    if not _is_int(capacity):
        raise TypeError("capacity must be an integer")
    if capacity < 0:
        raise ValueError("capacity must be non-negative")


class Value:
    """
    Node of a JSON document tree.

    Construct with ``Value()`` (Null), ``Value(Kind.X)`` (the kind's zero
    value), ``Value(payload)`` (kind inferred) or ``Value(payload, Kind.X)``
    (kind forced, e.g. ``Value("a", Kind.CHAR)``). Passing another Value
    deep-copies it.

    Accessors raise TypeMismatchError on a mismatched discriminant and
    container operations raise InvalidOperationError on the wrong kind.
    """

    __slots__ = ("_attached", "_kind", "_payload")

    def __init__(self, payload: Any = None, kind: Kind | None = None) -> None:
        self._attached = False
        self._kind = Kind.NULL
        self._payload: Any = None

        if isinstance(payload, Kind) and kind is None:
            payload, kind = None, payload

        if isinstance(payload, Value):
            if kind is not None and kind is not payload._kind:
                raise TypeMismatchError(
                    f"cannot copy a {payload._kind.value} as {kind.value}"
                )
            self.assign(payload)
            return

        if kind is None:
            kind = _infer_kind(payload)
        elif payload is None:
            payload = _default_payload(kind)
        self._install(kind, _coerce(kind, payload))

    @classmethod
    def _wrap(cls, kind: Kind, payload: Any) -> "Value":
        """Builds a node around an already validated payload."""
        node = cls.__new__(cls)
        node._attached = False
        node._kind = kind
        node._payload = payload
        if kind in COMPOSITE_KINDS:
            payload._owned = True
        return node

    def _install(self, kind: Kind, payload: Any) -> None:
        """Swaps in a validated payload, releasing the previous container."""
        if kind in COMPOSITE_KINDS:
            if payload is self._payload:
                return
            if payload._owned or _reaches(payload, self):
                payload = payload.clone()
            payload._owned = True

        previous = self._payload if self._kind in COMPOSITE_KINDS else None
        self._kind, self._payload = kind, payload
        if previous is not None:
            previous._owned = False

    @classmethod
    def from_python(cls, obj: Any) -> "Value":
        """
        Converts plain Python data into a Value tree.

        Lists become Sequence, tuples FixedSequence and dicts (with str keys)
        Mapping. Nested Value instances are deep-copied.
        """
        root = _shell(obj)
        stack: list[tuple[Any, Value]] = []
        if isinstance(obj, dict | list | tuple):
            stack.append((obj, root))

        while stack:
            source, target = stack.pop()
            if isinstance(source, dict):
                for key, item in source.items():
                    child = _shell(item)
                    target.upsert(key, child)
                    if isinstance(item, dict | list | tuple):
                        stack.append((item, child))
                continue

            children = [_shell(item) for item in source]
            if isinstance(source, tuple):
                target._payload.set_values(children)
            else:
                for child in children:
                    target._payload.append(child)
            stack.extend(
                (item, child)
                for item, child in zip(source, children, strict=True)
                if isinstance(item, dict | list | tuple)
            )
        return root

    def to_python(self) -> Any:
        """
        Converts the tree into plain Python data.

        Sequence becomes list, FixedSequence tuple, Mapping dict, Char a
        one-character str and Float80 a Decimal.
        """
        results: list[Any] = []
        stack: list[tuple[Value, bool]] = [(self, False)]

        while stack:
            node, expanded = stack.pop()
            kind = node._kind
            if kind not in COMPOSITE_KINDS:
                results.append(node._payload)
                continue
            if not expanded:
                stack.append((node, True))
                children = (
                    list(node._payload.values())
                    if kind is Kind.MAPPING
                    else list(node._payload)
                )
                stack.extend((child, False) for child in reversed(children))
                continue

            count = node._payload.size()
            items = results[len(results) - count :]
            del results[len(results) - count :]
            if kind is Kind.MAPPING:
                results.append(dict(zip(node._payload.keys(), items, strict=True)))
            elif kind is Kind.FIXED_SEQUENCE:
                results.append(tuple(items))
            else:
                results.append(items)
        return results[0]

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def type_name(self) -> str:
        return self._kind.value

    def is_null(self) -> bool:
        return self._kind is Kind.NULL

    def is_composite(self) -> bool:
        return self._kind in COMPOSITE_KINDS

    def size(self) -> int:
        """Element count for composites, 1 for every scalar including Null."""
        if self._kind in COMPOSITE_KINDS:
            return self._payload.size()
        return 1

    def _expect(self, kind: Kind) -> Any:
        if self._kind is not kind:
            raise TypeMismatchError(
                f"Value holds {self._kind.value}, not {kind.value}"
            )
        return self._payload

    def get_char(self) -> str:
        return self._expect(Kind.CHAR)

    def get_int32(self) -> int:
        return self._expect(Kind.INT32)

    def get_int64(self) -> int:
        return self._expect(Kind.INT64)

    def get_float32(self) -> float:
        return self._expect(Kind.FLOAT32)

    def get_float64(self) -> float:
        return self._expect(Kind.FLOAT64)

    def get_float80(self) -> Decimal:
        return self._expect(Kind.FLOAT80)

    def get_bool(self) -> bool:
        return self._expect(Kind.BOOL)

    def get_str(self) -> str:
        return self._expect(Kind.STRING)

    def get_fixed_sequence(self) -> "FixedSequence":
        return self._expect(Kind.FIXED_SEQUENCE)

    def get_sequence(self) -> "Sequence":
        return self._expect(Kind.SEQUENCE)

    def get_mapping(self) -> "Mapping":
        return self._expect(Kind.MAPPING)

    def set_char(self, value: str) -> None:
        self._install(Kind.CHAR, _coerce(Kind.CHAR, value))

    def set_int32(self, value: int) -> None:
        self._install(Kind.INT32, _coerce(Kind.INT32, value))

    def set_int64(self, value: int) -> None:
        self._install(Kind.INT64, _coerce(Kind.INT64, value))

    def set_float32(self, value: float) -> None:
        self._install(Kind.FLOAT32, _coerce(Kind.FLOAT32, value))

    def set_float64(self, value: float) -> None:
        self._install(Kind.FLOAT64, _coerce(Kind.FLOAT64, value))

    def set_float80(self, value: Decimal | float | int) -> None:
        self._install(Kind.FLOAT80, _coerce(Kind.FLOAT80, value))

    def set_bool(self, value: bool) -> None:
        self._install(Kind.BOOL, _coerce(Kind.BOOL, value))

    def set_str(self, value: str) -> None:
        self._install(Kind.STRING, _coerce(Kind.STRING, value))

    def set_fixed_sequence(self, value: "FixedSequence") -> None:
        self._install(Kind.FIXED_SEQUENCE, _coerce(Kind.FIXED_SEQUENCE, value))

    def set_sequence(self, value: "Sequence") -> None:
        self._install(Kind.SEQUENCE, _coerce(Kind.SEQUENCE, value))

    def set_mapping(self, value: "Mapping") -> None:
        self._install(Kind.MAPPING, _coerce(Kind.MAPPING, value))

    def set_null(self) -> None:
        self._install(Kind.NULL, None)

    def _container(self, kind: Kind, operation: str) -> Any:
        if self._kind is not kind:
            raise InvalidOperationError(
                f"{operation} is only available for {kind.value}, "
                f"not {self._kind.value}"
            )
        return self._payload

    def upsert(self, key: str, value: "Value") -> None:
        """Inserts or replaces ``key`` in a Mapping."""
        self._container(Kind.MAPPING, "upsert").upsert(key, value)

    def erase_key(self, key: str) -> bool:
        """Removes ``key`` from a Mapping; False when it was absent."""
        return self._container(Kind.MAPPING, "erase_key").erase(key)

    def append(self, value: "Value") -> None:
        self._container(Kind.SEQUENCE, "append").append(value)

    def pop_back(self) -> bool:
        return self._container(Kind.SEQUENCE, "pop_back").pop_back()

    def at(self, index: int) -> "Value":
        """Returns the element at ``index`` of a Sequence or FixedSequence."""
        if self._kind not in INDEXED_KINDS:
            raise InvalidOperationError(
                "at() is only available for Sequence and FixedSequence, "
                f"not {self._kind.value}"
            )
        return self._payload.at(index)

    def __getitem__(self, item: int | str) -> "Value":
        """
        Indexes a Sequence/FixedSequence, or looks up a Mapping key.

        A missing Mapping key is inserted with a Null value and returned,
        so ``doc["count"].set_int32(3)`` works on fresh keys.
        """
        if isinstance(item, str):
            mapping = self._container(Kind.MAPPING, "key access")
            entry = mapping.get(item)
            if entry is None:
                mapping.upsert(item, Value())
                entry = mapping[item]
            return entry
        return self.at(item)

    def to_fixed_sequence(self) -> "Value":
        """Returns a FixedSequence Value holding copies of the elements."""
        if self._kind is Kind.FIXED_SEQUENCE:
            return self.clone()
        sequence = self._container(Kind.SEQUENCE, "to_fixed_sequence")
        return Value._wrap(Kind.FIXED_SEQUENCE, sequence.to_fixed_sequence())

    def to_sequence(self) -> "Value":
        """Returns a Sequence Value holding copies of the elements."""
        if self._kind is Kind.SEQUENCE:
            return self.clone()
        fixed = self._container(Kind.FIXED_SEQUENCE, "to_sequence")
        return Value._wrap(Kind.SEQUENCE, fixed.to_sequence())

    def clone(self) -> "Value":
        """Deep copy; the result shares no container with ``self``."""
        if self._kind in COMPOSITE_KINDS:
            return Value._wrap(self._kind, _clone_container(self._payload))
        return Value._wrap(self._kind, self._payload)

    def take(self) -> "Value":
        """Moves the payload into a new Value and resets ``self`` to Null."""
        moved = Value._wrap(self._kind, self._payload)
        self._kind, self._payload = Kind.NULL, None
        return moved

    def assign(self, other: "Value") -> None:
        """Copy assignment: ``self`` becomes a deep copy of ``other``."""
        if other is self:
            return
        if not isinstance(other, Value):
            raise TypeMismatchError(
                f"cannot assign {type(other).__name__} to a Value"
            )
        source = other.clone()
        if source._kind in COMPOSITE_KINDS:
            source._payload._owned = False
        self._install(source._kind, source._payload)

    def __copy__(self) -> "Value":
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> "Value":
        return self.clone()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return _trees_equal([(self, other)])

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._kind in COMPOSITE_KINDS:
            return f"Value({self._kind.value}, size={self.size()})"
        return f"Value({self._kind.value}, {self._payload!r})"

    def __str__(self) -> str:
        return self.to_string()

    def to_string(self, visualize: bool = False) -> str:
        """Canonical JSON, or the visualized debug dialect."""
        # Local imports
        from ._printer import to_string

        return to_string(self, VISUALIZE if visualize else PrintConfig())

    def write_to(self, stream: IO[str], config: PrintConfig | None = None) -> None:
        """Writes canonical JSON with 2-space indentation to ``stream``."""
        # Local imports
        from ._printer import write_to

        write_to(self, stream, config or PrintConfig())


class Sequence:
    """
    Growable, index-addressed list of Value backing JSON arrays.

    The backing list's length is the capacity; slots past ``size()`` hold
    None. Capacity doubles when an append finds the storage full.
    """

    __slots__ = ("_buffer", "_length", "_owned")

    DEFAULT_CAPACITY = DEFAULT_CAPACITY

    def __init__(
        self,
        buffer: list[Value] | None = None,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        """
        Creates an empty sequence, or takes ownership of ``buffer``.

        Args:
            buffer: Values to adopt as backing storage; size and capacity
                both become ``len(buffer)``
            capacity: Initial capacity of an empty sequence
        """
        self._owned = False
        self._buffer: list[Value | None]
        if buffer is not None:
            if not isinstance(buffer, list):
                raise TypeError("buffer must be a list of Value")
            for index, item in enumerate(buffer):
                buffer[index] = _adopt(item)
            self._buffer = buffer  # type: ignore[assignment]
            self._length = len(buffer)
        else:
            _check_capacity(capacity)
            self._buffer = [None] * capacity
            self._length = 0

    def size(self) -> int:
        return self._length

    def capacity(self) -> int:
        return len(self._buffer)

    def full(self) -> bool:
        return self._length == len(self._buffer)

    def _reallocate(self, capacity: int) -> None:
        buffer: list[Value | None] = [None] * capacity
        buffer[: self._length] = self._buffer[: self._length]
        self._buffer = buffer

    def append(self, value: Value) -> None:
        node = _adopt(value, self)
        if self.full():
            self._reallocate(len(self._buffer) * 2 or DEFAULT_CAPACITY)
        self._buffer[self._length] = node
        self._length += 1

    def pop_back(self) -> bool:
        """Drops the last element; False when the sequence is empty."""
        if not self._length:
            return False
        self._length -= 1
        _detach(self._buffer[self._length])
        self._buffer[self._length] = None
        return True

    def resize(self, new_capacity: int) -> None:
        """Reallocates storage to exactly ``new_capacity``, truncating if needed."""
        _check_capacity(new_capacity)
        while self._length > new_capacity:
            self.pop_back()
        self._reallocate(new_capacity)

    def at(self, index: int) -> Value:
        _check_index(index, self._length, "Sequence")
        return self._buffer[index]  # type: ignore[return-value]

    def set_value(self, pos: int, value: Value) -> bool:
        """
        Replaces the element at ``pos``, or appends when ``pos == size()``.

        Returns False when ``pos`` lies beyond the end.
        """
        if not _is_int(pos) or pos < 0 or pos > self._length:
            return False
        if pos == self._length:
            self.append(value)
            return True
        node = _adopt(value, self)
        _detach(self._buffer[pos])
        self._buffer[pos] = node
        return True

    def set_values(self, values: Iterable[Value]) -> None:
        """
        Overwrites elements from index 0 with ``values``.

        Elements past ``len(values)`` are kept, so the size becomes
        ``max(size(), len(values))``.
        """
        nodes = [_adopt(value, self) for value in values]
        capacity = len(self._buffer)
        if len(nodes) > capacity:
            self._reallocate(max(len(nodes), 2 * capacity))
        for index, node in enumerate(nodes):
            if index < self._length:
                _detach(self._buffer[index])
            self._buffer[index] = node
        self._length = max(self._length, len(nodes))

    def to_fixed_sequence(self) -> "FixedSequence":
        return FixedSequence(value.clone() for value in self)

    def clone(self) -> "Sequence":
        return _clone_container(self)  # type: ignore[return-value]

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[Value]:
        return iter(self._buffer[: self._length])  # type: ignore[arg-type]

    def __getitem__(self, index: int) -> Value:
        return self.at(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return self._length == other._length and _trees_equal(
            zip(self, other, strict=True)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Sequence(size={self._length}, capacity={self.capacity()})"


class FixedSequence:
    """
    Fixed-arity list of Value, the tuple counterpart of Sequence.

    Elements can be replaced all at once with ``set_values`` but the
    sequence never grows or shrinks one element at a time.
    """

    __slots__ = ("_items", "_owned")

    def __init__(self, values: Iterable[Value] = ()) -> None:
        self._owned = False
        self._items: tuple[Value, ...] = tuple(_adopt(value) for value in values)

    def size(self) -> int:
        return len(self._items)

    def at(self, index: int) -> Value:
        _check_index(index, len(self._items), "FixedSequence")
        return self._items[index]

    def set_values(self, values: Iterable[Value]) -> None:
        """Replaces every element; the arity becomes ``len(values)``."""
        nodes = tuple(_adopt(value, self) for value in values)
        for previous in self._items:
            _detach(previous)
        self._items = nodes

    def to_sequence(self) -> Sequence:
        return Sequence([value.clone() for value in self._items])

    def clone(self) -> "FixedSequence":
        return _clone_container(self)  # type: ignore[return-value]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Value:
        return self.at(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedSequence):
            return NotImplemented
        return len(self._items) == len(other._items) and _trees_equal(
            zip(self._items, other._items, strict=True)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FixedSequence(size={len(self._items)})"


class Mapping:
    """
    String-keyed collection of Value backing JSON objects.

    Keys compare by content. Iteration follows insertion order, but no
    ordering is promised to callers.
    """

    __slots__ = ("_entries", "_owned")

    def __init__(
        self,
        entries: dict[str, Value] | Iterable[tuple[str, Value]] | None = None,
    ) -> None:
        self._owned = False
        self._entries: dict[str, Value] = {}
        if entries is not None:
            pairs = entries.items() if isinstance(entries, dict) else entries
            for key, value in pairs:
                self.upsert(key, value)

    def size(self) -> int:
        return len(self._entries)

    def upsert(self, key: str, value: Value) -> None:
        """Replaces the value under ``key`` or inserts a new entry."""
        _check_key(key)
        node = _adopt(value, self)
        previous = self._entries.get(key)
        if previous is not None:
            _detach(previous)
        self._entries[key] = node

    def erase(self, key: str) -> bool:
        """Removes ``key``; False when it was absent."""
        node = self._entries.pop(_check_key(key), None)
        if node is None:
            return False
        _detach(node)
        return True

    def get(self, key: str, default: Value | None = None) -> Value | None:
        return self._entries.get(_check_key(key), default)

    def keys(self) -> KeysView[str]:
        return self._entries.keys()

    def values(self) -> ValuesView[Value]:
        return self._entries.values()

    def items(self) -> ItemsView[str, Value]:
        return self._entries.items()

    def clone(self) -> "Mapping":
        return _clone_container(self)  # type: ignore[return-value]

    def __getitem__(self, key: str) -> Value:
        return self._entries[_check_key(key)]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        if self._entries.keys() != other._entries.keys():
            return False
        return _trees_equal(
            (value, other._entries[key]) for key, value in self._entries.items()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Mapping(size={len(self._entries)})"


Container: TypeAlias = Sequence | FixedSequence | Mapping


def _shell(obj: Any) -> Value:
    """Value for ``obj`` with composites left empty for the caller to fill."""
    if isinstance(obj, Value):
        return obj.clone()
    elif isinstance(obj, dict):
        return Value(Kind.MAPPING)
    elif isinstance(obj, list):
        return Value(Kind.SEQUENCE)
    elif isinstance(obj, tuple):
        return Value(Kind.FIXED_SEQUENCE)
    return Value(obj)


def _empty_like(container: Container) -> Container:
    if isinstance(container, Sequence):
        return Sequence(capacity=container.capacity())
    elif isinstance(container, FixedSequence):
        return FixedSequence()
    return Mapping()


def _clone_container(container: Container) -> Container:
    """Deep-copies a container with an explicit work list."""
    root = _empty_like(container)
    stack: list[tuple[Container, Container]] = [(container, root)]

    def copy_node(node: Value) -> Value:
        if node._kind in COMPOSITE_KINDS:
            payload = _empty_like(node._payload)
            stack.append((node._payload, payload))
        else:
            payload = node._payload
        copy = Value._wrap(node._kind, payload)
        copy._attached = True
        return copy

    while stack:
        source, target = stack.pop()
        if isinstance(source, Mapping):
            for key, child in source.items():
                target._entries[key] = copy_node(child)  # type: ignore[union-attr]
        elif isinstance(source, FixedSequence):
            fixed: FixedSequence = target  # type: ignore[assignment]
            fixed._items = tuple(copy_node(child) for child in source)
        else:
            sequence: Sequence = target  # type: ignore[assignment]
            for child in source:
                sequence._buffer[sequence._length] = copy_node(child)
                sequence._length += 1
    return root


def _trees_equal(pairs: Iterable[tuple[Value, Value]]) -> bool:
    """Structural equality over pairs of nodes, without recursion."""
    stack = list(pairs)
    while stack:
        left, right = stack.pop()
        if left is right:
            continue
        if left._kind is not right._kind:
            return False
        kind = left._kind
        if kind is Kind.MAPPING:
            left_entries = left._payload._entries
            right_entries = right._payload._entries
            if left_entries.keys() != right_entries.keys():
                return False
            stack.extend(
                (child, right_entries[key]) for key, child in left_entries.items()
            )
        elif kind in INDEXED_KINDS:
            if left._payload.size() != right._payload.size():
                return False
            stack.extend(zip(left._payload, right._payload, strict=True))
        elif left._payload != right._payload:
            return False
    return True
