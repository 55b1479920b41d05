"""Reading and writing JSON documents on disk."""

import os
from logging import getLogger
from typing import IO
from typing import TypeAlias

from ._config import ParseConfig
from ._config import PrintConfig
from ._config import ProgressConfig
from ._parser import JsonParser
from ._printer import to_string
from ._progress import ProgressReporter
from ._value import Kind
from ._value import Value

logger = getLogger(__name__)

# Key under which non-object roots are stored
BANNER_KEY = "Welcome to JoSon"

StrPath: TypeAlias = str | os.PathLike[str]


def _read_with_progress(fp: IO[str], config: ProgressConfig) -> str:
    """Reads ``fp`` line by line, reporting progress against its line count."""
    total = sum(1 for _ in fp)
    fp.seek(0)

    lines: list[str] = []
    with ProgressReporter(total, "Reading JSON file", config) as reporter:
        for line in fp:
            lines.append(line)
            reporter.update(len(lines))
        reporter.finish()
    return "".join(lines)


def read_json_file(
    path: StrPath,
    show_progress: bool = False,
    config: ParseConfig | None = None,
) -> Value:
    """
    Loads and parses the JSON document stored at ``path``.

    Args:
        path: File to read
        show_progress: Render progress bars while reading and parsing
        config: Parser configuration; built from ``show_progress`` if omitted

    Returns:
        The parsed document, or Null when the file cannot be opened or decoded
    """
    if config is None:
        config = ParseConfig(show_progress=show_progress)

    try:
        with open(path, encoding="utf-8") as fp:
            if show_progress:
                text = _read_with_progress(fp, config.progress)
            else:
                text = fp.read()
    except OSError as e:
        logger.error(f"Cannot open {path} for reading: {e}")
        return Value()
    except UnicodeDecodeError as e:
        logger.error(f"Cannot decode {path} as UTF-8: {e}")
        return Value()

    logger.debug(f"Read {len(text):,} characters from {path}")
    return JsonParser(text, config).parse()


def write_json_file(
    path: StrPath, value: Value, config: PrintConfig | None = None
) -> bool:
    """
    Stores ``value`` as canonical JSON at ``path``.

    A root that is not a Mapping is stored under ``BANNER_KEY`` so the file
    always holds a JSON object.

    Returns:
        False when the document cannot be serialized or the file written
    """
    if value.kind is Kind.MAPPING:
        document = value
    else:
        document = Value(Kind.MAPPING)
        document.upsert(BANNER_KEY, value.clone())

    # A serialization failure must leave any existing file untouched
    try:
        text = to_string(document, config or PrintConfig())
    except ValueError as e:
        logger.error(f"Cannot serialize document for {path}: {e}")
        return False

    try:
        with open(path, "w", encoding="utf-8") as fp:
            fp.write(text)
    except OSError as e:
        logger.error(f"Cannot open {path} for writing: {e}")
        return False

    logger.debug(f"Wrote {value.type_name} document to {path}")
    return True
