"""
Exception taxonomy for the document engine.

API misuse (wrong discriminant, wrong container, bad index) raises
immediately. Malformed JSON is reported through JSONDecodeError instances
that the lenient parser records instead of raising.
"""

from typing import TypeAlias

Position: TypeAlias = int


class JosonError(Exception):
    """Base class for every error raised by joson."""


class TypeMismatchError(JosonError, TypeError):
    """Accessor or payload does not match the Value's discriminant."""


class InvalidOperationError(JosonError, TypeError):
    """Container-only operation invoked on a Value of another kind."""


class IndexOutOfRangeError(JosonError, IndexError):
    """Composite index at or beyond the element count."""


class JSONDecodeError(JosonError, ValueError):
    """
    Describes a parsing problem with position and line/column context.

    The lenient parser collects these on ``JsonParser.errors``; strict mode
    raises the first one.
    """

    def __init__(self, msg: str, doc: str = "", pos: Position = 0) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    def __reduce__(self) -> tuple[type, tuple[str, str, Position]]:
        return self.__class__, (self.msg, self.doc, self.pos)


class EmptyInputError(JSONDecodeError):
    """Buffer holds nothing but whitespace."""


class MalformedDocumentError(JSONDecodeError):
    """Buffer could not be classified or was not fully consumed."""
