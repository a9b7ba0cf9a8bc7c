from pathlib import Path

import pytest

from markdown_pdf.models import ConversionRequest
from markdown_pdf.styles import (
    DEFAULT_STYLESHEET,
    GITHUB_STYLESHEET,
    HIGHLIGHT_STYLESHEET,
    compose_styles,
    select_stylesheets,
    styles_to_html,
)


def make_request(tmp_path: Path, **kwargs) -> ConversionRequest:
    return ConversionRequest(source_path=tmp_path / "doc.md", destination_path=tmp_path / "doc.pdf", **kwargs)


def test_bundled_stylesheets_exist():
    for path in (GITHUB_STYLESHEET, HIGHLIGHT_STYLESHEET, DEFAULT_STYLESHEET):
        assert path.is_file()


def test_selection_order_with_everything_enabled(tmp_path):
    user_css = tmp_path / "user.css"
    request = make_request(tmp_path, gh_style=True, default_style=True, stylesheet_path=user_css)
    assert select_stylesheets(request) == [GITHUB_STYLESHEET, HIGHLIGHT_STYLESHEET, DEFAULT_STYLESHEET, user_css]


def test_highlight_stylesheet_is_always_selected(tmp_path):
    request = make_request(tmp_path, gh_style=False, default_style=False)
    assert select_stylesheets(request) == [HIGHLIGHT_STYLESHEET]


def test_user_stylesheet_is_inlined_last_and_verbatim(tmp_path):
    user_css = tmp_path / "user.css"
    user_css.write_text("h1 { color: red; } /* not validated {", encoding="utf-8")
    request = make_request(tmp_path, gh_style=False, default_style=False, stylesheet_path=user_css)

    html = compose_styles(request)

    assert html.count("<style>") == 2
    assert html.endswith("<style>h1 { color: red; } /* not validated {</style>")


def test_missing_user_stylesheet_is_fatal(tmp_path):
    request = make_request(tmp_path, stylesheet_path=tmp_path / "missing.css")
    with pytest.raises(FileNotFoundError):
        compose_styles(request)


def test_each_sheet_gets_its_own_style_block():
    assert styles_to_html(["a {}", "b {}"]) == "<style>a {}</style><style>b {}</style>"
