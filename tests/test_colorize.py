"""
Colorized re-printer tests.
"""

from io import StringIO

import pytest
from rich.console import Console

import joson
from joson import ColorScheme
from joson import Value


def styled(text: object, style: str) -> list[str]:
    """Substrings of a rich Text carrying ``style``."""
    return [
        text.plain[span.start : span.end]  # type: ignore[attr-defined]
        for span in text.spans  # type: ignore[attr-defined]
        if span.style == style
    ]


def test_plain_text_is_preserved() -> None:
    assert joson.render_colorized('{"a": 1}').plain == '{"a": 1}'


def test_reindents_by_brace_level() -> None:
    doc = Value.from_python({"a": {"b": True}})

    rendered = joson.render_colorized(joson.dumps(doc, indent=None))
    assert rendered.plain == '{\n  "a": {\n    "b": true\n  }\n}'

    # Existing indentation is replaced
    wide = joson.dumps(doc, indent=4)
    assert joson.render_colorized(wide).plain == joson.dumps(doc)
    assert joson.render_colorized(wide, indents=0).plain == joson.dumps(
        doc, indent=None
    )


def test_token_styles() -> None:
    text = joson.render_colorized('{"k": [12, true, null, "v\\"q"]}')

    assert styled(text, "bold green") == ['"k"', '"v\\"q"']
    assert styled(text, "bold red") == ["true", "null"]
    assert "".join(styled(text, "bold cyan")) == "12"


def test_visualized_keywords() -> None:
    doc = Value.from_python([True, False, None, 1.5])
    text = joson.render_colorized(joson.visualize(doc))

    assert styled(text, "bold red") == ["True", "False", "NullPtr"]


def test_custom_and_disabled_schemes() -> None:
    scheme = ColorScheme(string="magenta")
    text = joson.render_colorized('["x"]', scheme=scheme)
    assert styled(text, "magenta") == ['"x"']

    plain = joson.render_colorized(
        '["x", 1, true]', scheme=ColorScheme(colorful=False)
    )
    assert plain.spans == []

    with pytest.raises(TypeError):
        ColorScheme(colorful="no")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        joson.render_colorized("{}", indents=-1)


def test_json_print() -> None:
    sio = StringIO()
    console = Console(file=sio, force_terminal=False, color_system=None)
    doc = joson.loads('{"a": [1, 2], "b": {"c": null}}')

    joson.json_print(joson.dumps(doc), console=console)

    assert sio.getvalue() == joson.dumps(doc) + "\n"
