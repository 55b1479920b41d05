"""
Lenient, non-recursive JSON parser.

Container nesting is tracked with an explicit stack of open Values, so the
depth of a document is bounded by memory rather than the call stack.
Malformed input never aborts a parse: bad tokens degrade to Null, and a
document that runs out before its root closes yields the innermost
still-open container. Every problem is recorded on ``JsonParser.errors``.
"""

import math
import string
from logging import getLogger

from rich.console import Console

from ._config import ParseConfig
from ._errors import EmptyInputError
from ._errors import JSONDecodeError
from ._errors import MalformedDocumentError
from ._errors import Position
from ._profile import ProfileContext
from ._progress import ProgressReporter
from ._value import Kind
from ._value import Value

logger = getLogger(__name__)

WHITESPACE = frozenset(" \t\n\r\0")
# Characters that may directly follow a literal, besides the stop delimiter
LITERAL_TERMINATORS = frozenset(" \t\n\r\0,")
CLOSERS = {"{": "}", "[": "]"}

# Digit counts at which a literal is promoted to the next numeric kind
INT32_DIGITS = 9
INT64_DIGITS = 16
# Decimal exponents beyond which a double is certainly infinite or zero
FLOAT_EXPONENT_LIMIT = 400

ESCAPE_MAP = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
KEYWORDS = (("true", True), ("false", False), ("null", None))
NUMBER_START = frozenset("+-.0123456789")


def _trim(text: str) -> tuple[Position, Position]:
    """Returns the [start, end) span left after trimming whitespace."""
    start, end = 0, len(text)
    while start < end and text[start] in WHITESPACE:
        start += 1
    while end > start and text[end - 1] in WHITESPACE:
        end -= 1
    return start, end


def _skip_whitespace(text: str, pos: Position, end: Position) -> Position:
    while pos < end and text[pos] in WHITESPACE:
        pos += 1
    return pos


def _skip_token(
    text: str, pos: Position, end: Position, stop: str | None
) -> Position:
    """Advances to the next ``,`` or stop delimiter without consuming it."""
    while pos < end and text[pos] != "," and text[pos] != stop:
        pos += 1
    return pos


def _decode_escape(text: str, i: Position, end: Position) -> tuple[str, Position]:
    """Decodes the escape sequence whose backslash sits at ``i``."""
    if i + 1 >= end:
        raise JSONDecodeError("Incomplete escape sequence", text, i)
    next_char = text[i + 1]

    if next_char in ESCAPE_MAP:
        return ESCAPE_MAP[next_char], i + 2
    elif next_char == "u":
        hex_digits = text[i + 2 : min(i + 6, end)]
        if len(hex_digits) < 4:  # noqa: PLR2004
            raise JSONDecodeError("Incomplete unicode escape sequence", text, i)
        if not all(c in string.hexdigits for c in hex_digits):
            raise JSONDecodeError(
                f"Invalid unicode escape sequence: \\u{hex_digits}", text, i
            )
        return chr(int(hex_digits, 16)), i + 6
    raise JSONDecodeError(f"Invalid escape sequence: \\{next_char}", text, i)


def _scan_string(text: str, pos: Position, end: Position) -> tuple[str, Position]:
    """
    Scans the double-quoted string opening at ``pos``.

    Returns the decoded content and the position after the closing quote.
    """
    chunks: list[str] = []
    cursor = run_start = pos + 1
    while cursor < end:
        char = text[cursor]
        if char == '"':
            chunks.append(text[run_start:cursor])
            return "".join(chunks), cursor + 1
        if char == "\\":
            chunks.append(text[run_start:cursor])
            decoded, cursor = _decode_escape(text, cursor, end)
            chunks.append(decoded)
            run_start = cursor
            continue
        cursor += 1
    raise JSONDecodeError("Unterminated string starting at", text, pos)


def _compose_float(mantissa: int, scale: int, digits: int) -> float:
    """Returns ``mantissa * 10**scale`` rounded once to a double."""
    if not mantissa:
        return 0.0
    if scale > FLOAT_EXPONENT_LIMIT:
        return math.inf
    if scale < -(FLOAT_EXPONENT_LIMIT + digits):
        return 0.0
    try:
        if scale >= 0:
            return float(mantissa * 10**scale)
        return mantissa / 10**-scale
    except OverflowError:
        return math.inf


def _scan_number(text: str, pos: Position, end: Position) -> tuple[Value, Position]:
    """
    Scans a numeric literal with Int32 -> Int64 -> Float64 promotion.

    Up to 9 digits stay Int32, up to 16 become Int64, more become Float64.
    A decimal point or an exponent forces Float64.
    """
    cursor = pos
    negative = False
    if text[cursor] in "+-":
        negative = text[cursor] == "-"
        cursor += 1

    kind = Kind.INT32
    mantissa = 0
    digits = 0
    fraction_digits = 0
    has_point = False

    while cursor < end:
        char = text[cursor]
        if char == ".":
            if has_point:
                raise JSONDecodeError("Second decimal point in number", text, cursor)
            has_point = True
            kind = Kind.FLOAT64
            cursor += 1
            continue
        if not "0" <= char <= "9":
            break
        if kind is Kind.INT32 and digits == INT32_DIGITS:
            kind = Kind.INT64
        if kind is Kind.INT64 and digits == INT64_DIGITS:
            kind = Kind.FLOAT64
        if has_point:
            fraction_digits += 1
        mantissa = mantissa * 10 + ord(char) - ord("0")
        digits += 1
        cursor += 1

    if not digits:
        raise JSONDecodeError("Invalid number", text, pos)

    exponent = 0
    if cursor < end and text[cursor] in "eE":
        kind = Kind.FLOAT64
        cursor += 1
        exponent_negative = False
        if cursor < end and text[cursor] in "+-":
            exponent_negative = text[cursor] == "-"
            cursor += 1
        exponent_start = cursor
        while cursor < end and "0" <= text[cursor] <= "9":
            exponent = exponent * 10 + ord(text[cursor]) - ord("0")
            cursor += 1
        if cursor == exponent_start:
            raise JSONDecodeError("Invalid exponent", text, pos)
        if exponent_negative:
            exponent = -exponent

    if kind is Kind.FLOAT64:
        number = _compose_float(mantissa, exponent - fraction_digits, digits)
        return Value(-number if negative else number, Kind.FLOAT64), cursor
    return Value(-mantissa if negative else mantissa, kind), cursor


def _read_literal(text: str, pos: Position, end: Position) -> tuple[Value, Position]:
    char = text[pos]
    if char == '"':
        content, cursor = _scan_string(text, pos, end)
        return Value(content, Kind.STRING), cursor
    for token, payload in KEYWORDS:
        if text.startswith(token, pos, end):
            return Value(payload), pos + len(token)
    if char in NUMBER_START:
        return _scan_number(text, pos, end)
    raise JSONDecodeError("Expecting value", text, pos)


def scan_literal(
    text: str,
    pos: Position,
    end: Position | None = None,
    stop: str | None = None,
    errors: list[JSONDecodeError] | None = None,
) -> tuple[Value, Position]:
    """
    Parses the primitive literal starting at ``pos``.

    Recognizes, in order, a double-quoted string, ``true``/``false``/``null``
    and numbers. A literal is accepted only when followed by the end of the
    buffer, whitespace, ``,`` or ``stop``. Anything else is skipped up to the
    next ``,`` or ``stop`` and yields Null.

    Args:
        text: Source buffer
        pos: Position of the literal's first character
        end: Exclusive end of the scanned region (defaults to ``len(text)``)
        stop: Closing delimiter of the enclosing container, if any
        errors: List receiving a JSONDecodeError for each malformed token

    Returns:
        The parsed Value and the position just after it
    """
    if end is None:
        end = len(text)
    with ProfileContext("scan_literal"):
        try:
            value, cursor = _read_literal(text, pos, end)
        except JSONDecodeError as error:
            logger.debug(f"Malformed literal replaced by null: {error}")
            if errors is not None:
                errors.append(error)
            return Value(), _skip_token(text, pos + 1, end, stop)

        if (
            cursor >= end
            or text[cursor] in LITERAL_TERMINATORS
            or text[cursor] == stop
        ):
            return value, cursor

        error = JSONDecodeError("Unexpected character after literal", text, cursor)
        logger.debug(f"Malformed literal replaced by null: {error}")
        if errors is not None:
            errors.append(error)
        return Value(), _skip_token(text, cursor, end, stop)


class JsonParser:
    """
    Builds a Value tree from JSON text without recursion.

    The buffer is trimmed and classified by its first and last characters:
    ``{...}`` gives a Mapping root, ``[...]`` a Sequence root and anything
    else a single primitive literal. Containers are filled by a forward scan
    driven by a stack of the open containers.

    After ``parse()``, ``complete`` tells whether the root container was
    closed and ``errors`` lists every recovered problem.
    """

    def __init__(
        self,
        text: str,
        config: ParseConfig | None = None,
        console: Console | None = None,
    ) -> None:
        if not isinstance(text, str):
            raise TypeError(
                f"the JSON object must be str, not {type(text).__name__}"
            )
        self.text = text
        self.config = config or ParseConfig()
        self.errors: list[JSONDecodeError] = []
        self.complete = False
        self.pos: Position = 0
        self._console = console

    def parse(self) -> Value:
        """
        Parses the whole buffer.

        Raises:
            JSONDecodeError: In strict mode, the first recorded problem
        """
        with ProfileContext("parse_document", len(self.text)):
            root = self._parse_document()

        if self.errors:
            logger.warning(
                f"Recovered from {len(self.errors)} problem(s) while parsing: "
                f"{self.errors[0]}"
            )
            if self.config.strict:
                raise self.errors[0]
        return root

    def _record(self, error: JSONDecodeError) -> None:
        self.errors.append(error)

    def _parse_document(self) -> Value:
        text = self.text
        start, end = _trim(text)
        if start >= end:
            self._record(EmptyInputError("Empty or invalid JSON content", text, 0))
            return Value()

        first, last = text[start], text[end - 1]
        if first not in CLOSERS:
            value, cursor = scan_literal(text, start, end, None, self.errors)
            cursor = _skip_whitespace(text, cursor, end)
            if cursor < end:
                self._record(MalformedDocumentError("Extra data", text, cursor))
            self.pos = cursor
            self.complete = cursor >= end
            return value

        if CLOSERS[first] != last:
            self._record(
                MalformedDocumentError(
                    f"Expecting '{CLOSERS[first]}' to close the document",
                    text,
                    end - 1,
                )
            )
            return Value()

        root = Value(Kind.MAPPING if first == "{" else Kind.SEQUENCE)
        if not self.config.show_progress:
            return self._scan_containers(root, start + 1, end, None)

        reporter = ProgressReporter(
            end, "Parsing", self.config.progress, self._console
        )
        with reporter:
            result = self._scan_containers(root, start + 1, end, reporter)
            reporter.finish()
        return result

    def _scan_containers(
        self,
        root: Value,
        pos: Position,
        end: Position,
        reporter: ProgressReporter | None,
    ) -> Value:
        text = self.text
        stack = [root]

        while pos < end:
            char = text[pos]
            if char in WHITESPACE or char == ",":
                pos += 1
                continue

            if char in "}]":
                node = stack.pop()
                expected = "}" if node.kind is Kind.MAPPING else "]"
                if char != expected:
                    self._record(
                        MalformedDocumentError(
                            f"Expecting '{expected}' delimiter", text, pos
                        )
                    )
                pos += 1
                if not stack:
                    return self._finish(node, pos, end)
                continue

            current = stack[-1]
            if current.kind is Kind.MAPPING:
                key, pos = self._read_key(pos, end)
                if key is None:
                    break
                pos = _skip_whitespace(text, pos, end)
                if pos >= end:
                    break
                pos = self._read_entry(current, key, pos, end, "}", stack)
            else:
                pos = self._read_entry(current, None, pos, end, "]", stack)

            if reporter is not None:
                reporter.update(pos)

        self.pos = min(pos, end)
        self._record(MalformedDocumentError("Unterminated document", text, self.pos))
        return stack[-1]

    def _finish(self, root: Value, pos: Position, end: Position) -> Value:
        self.complete = True
        self.pos = pos
        trailing = _skip_whitespace(self.text, pos, end)
        if trailing < end:
            self._record(MalformedDocumentError("Extra data", self.text, trailing))
        return root

    def _read_key(self, pos: Position, end: Position) -> tuple[str | None, Position]:
        """
        Reads a Mapping key up to its ``:`` delimiter.

        Returns the key and the position after the colon, or None when no
        colon follows.
        """
        text = self.text
        quoted: str | None = None
        search_from = pos
        if text[pos] == '"':
            try:
                quoted, search_from = _scan_string(text, pos, end)
            except JSONDecodeError as error:
                self._record(error)
                return None, end

        colon = text.find(":", search_from, end)
        if colon < 0:
            self._record(
                MalformedDocumentError("Expecting ':' delimiter", text, search_from)
            )
            return None, end

        if quoted is not None:
            return quoted, colon + 1
        key = text[pos:colon].strip("".join(WHITESPACE))
        return key, colon + 1

    def _read_entry(
        self,
        container: Value,
        key: str | None,
        pos: Position,
        end: Position,
        stop: str,
        stack: list[Value],
    ) -> Position:
        """Stores the value starting at ``pos`` under ``key`` (or appends it)."""
        char = self.text[pos]
        if char in CLOSERS:
            child = Value(Kind.MAPPING if char == "{" else Kind.SEQUENCE)
            self._store(container, key, child)
            stack.append(child)
            return pos + 1

        if char in "}],":
            self._store(container, key, Value())
            return pos

        value, pos = scan_literal(self.text, pos, end, stop, self.errors)
        self._store(container, key, value)
        return pos

    @staticmethod
    def _store(container: Value, key: str | None, value: Value) -> None:
        if key is None:
            container.append(value)
        else:
            container.upsert(key, value)
