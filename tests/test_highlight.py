from __future__ import annotations

import pytest

from docweave.adapters.highlight import (
    ThemeHighlighter,
    ThemeNotFoundError,
    get_theme,
    list_themes,
    theme_definitions,
)


def test_list_themes_is_sorted_and_contains_default() -> None:
    names = list_themes()

    assert "default" in names
    assert names == sorted(names)


def test_get_theme_exposes_colours() -> None:
    theme = get_theme("monokai")

    assert theme.name == "monokai"
    assert theme.background == "#272822"
    assert theme.tokens
    assert all(color.startswith("#") for color in theme.tokens.values())


def test_unknown_theme_raises() -> None:
    with pytest.raises(ThemeNotFoundError, match="docweave themes"):
        get_theme("not-a-theme")
    with pytest.raises(LookupError):
        theme_definitions("not-a-theme")


def test_theme_definitions_latex_and_html() -> None:
    latex = theme_definitions("default", "latex", commandprefix="PYG")
    css = theme_definitions("default", "html")

    assert "PYG@" in latex
    assert ".highlight" in css


def test_theme_definitions_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        theme_definitions("default", "rtf")  # type: ignore[arg-type]


def test_highlighter_renders_html_and_latex() -> None:
    highlighter = ThemeHighlighter(theme="default")

    html, css = highlighter.render("x = 1", "python")
    latex, macros = highlighter.render("x = 1", "python", fmt="latex")

    assert 'class="highlight"' in html
    assert ".highlight" in css
    assert "\\begin{Verbatim}" in latex
    assert "PY@" in macros


def test_highlighter_falls_back_to_plain_text() -> None:
    html, _css = ThemeHighlighter().render("some words", "no-such-language")

    assert "some words" in html
