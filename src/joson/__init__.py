"""
Schema-less JSON document engine.

Parses JSON text into a mutable tree of typed Value nodes, lets callers
query and edit it through typed accessors, and serializes it back either as
canonical JSON or as a visualized debugging dialect. Parsing, printing,
copying and comparison never recurse, so document depth is limited only by
memory.
"""

from logging import NullHandler
from logging import getLogger
from typing import IO
from typing import Any

from ._colorize import json_print
from ._colorize import render_colorized
from ._config import VISUALIZE
from ._config import ColorScheme
from ._config import ParseConfig
from ._config import PrintConfig
from ._config import ProgressConfig
from ._errors import EmptyInputError
from ._errors import IndexOutOfRangeError
from ._errors import InvalidOperationError
from ._errors import JosonError
from ._errors import JSONDecodeError
from ._errors import MalformedDocumentError
from ._errors import Position
from ._errors import TypeMismatchError
from ._files import BANNER_KEY
from ._files import read_json_file
from ._files import write_json_file
from ._parser import JsonParser
from ._parser import scan_literal
from ._printer import to_string
from ._printer import write_to
from ._profile import HotPathStats
from ._profile import clear_hot_path_stats
from ._profile import get_hot_path_stats
from ._progress import ProgressReporter
from ._value import FixedSequence
from ._value import Kind
from ._value import Mapping
from ._value import Sequence
from ._value import Value

__version__ = "0.1.0"

getLogger(__name__).addHandler(NullHandler())


def _as_value(obj: Any) -> Value:
    return obj if isinstance(obj, Value) else Value.from_python(obj)


def loads(s: str, **kwargs: Any) -> Value:
    """
    Parses JSON text into a Value tree.

    Keyword arguments build a ParseConfig. Malformed input is recovered
    from unless ``strict=True`` is passed.
    """
    if not isinstance(s, str):
        raise TypeError(f"the JSON object must be str, not {type(s).__name__}")

    config = ParseConfig(**kwargs)
    return JsonParser(s, config).parse()


def load(fp: IO[str], **kwargs: Any) -> Value:
    """Parses JSON from a file-like object."""
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return loads(fp.read(), **kwargs)


def dumps(obj: Any, **kwargs: Any) -> str:
    """
    Serializes a Value, or plain Python data, to a string.

    Keyword arguments build a PrintConfig.
    """
    config = PrintConfig(**kwargs)
    return to_string(_as_value(obj), config)


def dump(obj: Any, fp: IO[str], **kwargs: Any) -> None:
    """Serializes a Value, or plain Python data, to a file-like object."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    write_to(_as_value(obj), fp, PrintConfig(**kwargs))


def visualize(obj: Any) -> str:
    """Renders ``obj`` in the visualized debugging dialect."""
    return to_string(_as_value(obj), VISUALIZE)


__all__ = [
    "BANNER_KEY",
    "VISUALIZE",
    "ColorScheme",
    "EmptyInputError",
    "FixedSequence",
    "HotPathStats",
    "IndexOutOfRangeError",
    "InvalidOperationError",
    "JSONDecodeError",
    "JosonError",
    "JsonParser",
    "Kind",
    "MalformedDocumentError",
    "Mapping",
    "ParseConfig",
    "Position",
    "PrintConfig",
    "ProgressConfig",
    "ProgressReporter",
    "Sequence",
    "TypeMismatchError",
    "Value",
    "clear_hot_path_stats",
    "dump",
    "dumps",
    "get_hot_path_stats",
    "json_print",
    "load",
    "loads",
    "read_json_file",
    "render_colorized",
    "scan_literal",
    "to_string",
    "visualize",
    "write_json_file",
    "write_to",
]
