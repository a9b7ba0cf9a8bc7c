import asyncio

import pytest

from markdown_pdf.converter import compose_document, convert, convert_many, convert_sync
from markdown_pdf.errors import ConfigurationError
from markdown_pdf.models import ConversionRequest


def test_end_to_end_conversion(tmp_path, fake_engine, write_file):
    source = write_file("doc.md", "# Title\n\n![x](img.png)")
    options = {
        "source": str(source),
        "destination": str(tmp_path / "doc.pdf"),
        "ghStyle": True,
        "debug": str(tmp_path / "debug" / "doc.html"),
    }
    (tmp_path / "debug").mkdir()

    result = asyncio.run(convert(options))

    assert result == tmp_path / "doc.pdf"
    assert result.read_bytes().startswith(b"%PDF")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["debug", "doc.md", "doc.pdf"]

    debug_html = (tmp_path / "debug" / "doc.html").read_text(encoding="utf-8")
    assert '<h1 id="title">Title</h1>' in debug_html
    assert f'src="{(tmp_path / "img.png").as_uri()}"' in debug_html
    assert "markdown-body" in debug_html
    assert debug_html == fake_engine.html_at_goto

    assert fake_engine.pdf_calls[0]["display_header_footer"] is False
    assert fake_engine.pdf_calls[0]["format"] == "A4"


def test_missing_source_fails_before_any_io(tmp_path, fake_engine):
    with pytest.raises(ConfigurationError):
        asyncio.run(convert({"destination": str(tmp_path / "doc.pdf")}))

    assert fake_engine.launches == []
    assert list(tmp_path.iterdir()) == []


def test_missing_source_file_aborts_before_rendering(tmp_path, fake_engine):
    with pytest.raises(FileNotFoundError):
        convert_sync({"source": str(tmp_path / "nope.md"), "destination": str(tmp_path / "nope.pdf")})

    assert fake_engine.launches == []
    assert list(tmp_path.iterdir()) == []


def test_header_and_footer_use_source_directory_for_images(tmp_path, fake_engine, write_file):
    source = write_file("docs/doc.md", "Body text\n")
    header = write_file("chrome/header.html", '<img src="logo.png"> <span class="title"></span>')
    footer = write_file("chrome/footer.html", 'Page <span class="pageNumber"></span>')

    convert_sync({
        "source": str(source),
        "destination": str(tmp_path / "doc.pdf"),
        "header": str(header),
        "footer": str(footer),
    })

    options = fake_engine.pdf_calls[0]
    assert options["display_header_footer"] is True
    assert (tmp_path / "docs" / "logo.png").as_uri() in options["header_template"]
    assert (tmp_path / "chrome" / "logo.png").as_uri() not in options["header_template"]
    assert 'Page <span class="pageNumber"></span>' in options["footer_template"]


def test_footer_alone_requests_header_footer_display(tmp_path, fake_engine, write_file):
    source = write_file("doc.md", "Body\n")
    footer = write_file("footer.html", "Confidential")

    convert_sync({"source": str(source), "destination": str(tmp_path / "doc.pdf"), "footer": str(footer)})

    options = fake_engine.pdf_calls[0]
    assert options["display_header_footer"] is True
    assert "Confidential" in options["footer_template"]
    assert "Confidential" not in options["header_template"]


def test_missing_header_file_is_fatal(tmp_path, fake_engine, write_file):
    source = write_file("doc.md", "Body\n")
    with pytest.raises(FileNotFoundError):
        convert_sync({"source": str(source), "destination": str(tmp_path / "doc.pdf"),
                      "header": str(tmp_path / "missing.html")})
    assert fake_engine.launches == []


def test_no_emoji_option(tmp_path, fake_engine, write_file):
    source = write_file("doc.md", "Done :smile: at 00:00:00\n")

    convert_sync({"source": str(source), "destination": str(tmp_path / "a.pdf"), "noEmoji": True})
    assert ":smile:" in fake_engine.html_at_goto

    convert_sync({"source": str(source), "destination": str(tmp_path / "b.pdf")})
    assert "\U0001F604" in fake_engine.html_at_goto
    assert "00:00:00" in fake_engine.html_at_goto


def test_intermediate_html_is_idempotent(tmp_path, write_file):
    source = write_file("doc.md", "# Title\n\n![x](img.png)\n\n```python\nx = 1\n```\n")
    styles = write_file("theme.css", "body { color: #111; }")
    header = write_file("header.html", "<b>Head</b>")
    request = ConversionRequest(source_path=source, destination_path=tmp_path / "doc.pdf",
                                stylesheet_path=styles, header_path=header, gh_style=True)

    first = compose_document(request)
    second = compose_document(request)

    assert first == second
    assert first.body_html.index("body { color: #111; }") > first.body_html.index(".markdown-body")


def test_styles_are_inlined_not_linked(tmp_path, write_file):
    source = write_file("doc.md", "text\n")
    document = compose_document(ConversionRequest(source_path=source, destination_path=tmp_path / "doc.pdf",
                                                  gh_style=True, default_style=True))
    assert "<link" not in document.body_html
    assert document.body_html.count("<style>") == 3
    assert document.header_html is None
    assert document.footer_html is None


def test_bare_options_inline_only_the_highlight_stylesheet(tmp_path, write_file):
    source = write_file("doc.md", "text\n")
    document = compose_document(ConversionRequest.from_options({"source": str(source),
                                                               "destination": str(tmp_path / "doc.pdf")}))
    assert document.body_html.count("<style>") == 1
    assert ".markdown-body" not in document.body_html


def test_convert_many_isolates_failures(tmp_path, fake_engine, write_file):
    good = write_file("good.md", "# Good\n")
    requests = [
        {"source": str(good), "destination": str(tmp_path / "good.pdf")},
        {"source": str(tmp_path / "missing.md"), "destination": str(tmp_path / "missing.pdf")},
    ]

    results = asyncio.run(convert_many(requests, max_concurrency=2))

    assert [result.ok for result in results] == [True, False]
    assert results[0].destination == tmp_path / "good.pdf"
    assert isinstance(results[1].error, FileNotFoundError)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["good.md", "good.pdf"]


def test_convert_many_uses_separate_temp_files(tmp_path, fake_engine, write_file):
    sources = [write_file(f"doc{i}.md", f"# Doc {i}\n") for i in range(3)]
    requests = [ConversionRequest(source_path=s, destination_path=tmp_path / f"{s.stem}.pdf") for s in sources]

    results = asyncio.run(convert_many(requests, max_concurrency=3))

    assert all(result.ok for result in results)
    urls = {url for url, _ in fake_engine.goto_calls}
    assert len(urls) == 3
    assert len(fake_engine.launches) == 3
    assert not list(tmp_path.glob("_*_temp.html"))


def test_convert_many_records_invalid_options(tmp_path, fake_engine, write_file):
    good = write_file("good.md", "# Good\n")
    requests = [
        {"destination": str(tmp_path / "nosource.pdf")},
        {"source": str(good), "destination": str(tmp_path / "good.pdf")},
    ]

    results = asyncio.run(convert_many(requests))

    assert [result.ok for result in results] == [False, True]
    assert isinstance(results[0].error, ConfigurationError)
    assert results[0].request is None
    assert results[0].options == requests[0]
    assert results[1].destination == tmp_path / "good.pdf"
