"""Re-indenting, syntax-highlighting printer for serialized JSON text."""

from rich.console import Console
from rich.text import Text

from ._config import ColorScheme

KEYWORDS = ("true", "false", "null", "True", "False", "NullPtr")
DIGITS = frozenset("0123456789.")
LINE_PADDING = frozenset(" \t")


def _string_end(json_str: str, start: int) -> int:
    """Position after the quote closing the string opened at ``start``."""
    cursor = start + 1
    while cursor < len(json_str):
        char = json_str[cursor]
        if char == "\\":
            cursor += 2
            continue
        if char == '"':
            return cursor + 1
        cursor += 1
    return len(json_str)


def _match_keyword(json_str: str, pos: int) -> str | None:
    for keyword in KEYWORDS:
        if json_str.startswith(keyword, pos):
            return keyword
    return None


def render_colorized(
    json_str: str, indents: int = 2, scheme: ColorScheme | None = None
) -> Text:
    """
    Re-indents ``json_str`` by brace level and highlights its tokens.

    Leading blanks of every line are replaced by ``indents`` spaces per
    open ``{``. Quoted strings, digits and the keywords of both the
    canonical and the visualized dialect get the scheme's styles.
    """
    scheme = scheme or ColorScheme()
    if indents < 0:
        raise ValueError("indents must be non-negative")

    def style(name: str) -> str | None:
        return name if scheme.colorful else None

    text = Text()
    level = 0
    line_start = False
    pos = 0
    end = len(json_str)

    while pos < end:
        char = json_str[pos]
        if line_start and char in LINE_PADDING:
            pos += 1
            continue

        if char == "\n":
            text.append(char)
            line_start = True
            pos += 1
            continue

        if char == "{":
            level += 1
            text.append(char)
        elif char == "}":
            level = max(level - 1, 0)
            if line_start:
                text.append(" " * (indents * level))
            text.append(char)
        else:
            if line_start:
                text.append(" " * (indents * level))
            keyword = _match_keyword(json_str, pos)
            if char == '"':
                closing = _string_end(json_str, pos)
                text.append(json_str[pos:closing], style=style(scheme.string))
                pos = closing
                line_start = False
                continue
            elif keyword is not None:
                text.append(keyword, style=style(scheme.keyword))
                pos += len(keyword)
                line_start = False
                continue
            elif char in DIGITS:
                text.append(char, style=style(scheme.digit))
            else:
                text.append(char)
        line_start = False
        pos += 1

    return text


def json_print(
    json_str: str,
    indents: int = 2,
    scheme: ColorScheme | None = None,
    console: Console | None = None,
) -> None:
    """Prints ``json_str`` re-indented and highlighted through rich."""
    console = console or Console()
    console.print(
        render_colorized(json_str, indents, scheme),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
