"""
In-process stand-ins for the Playwright engine, so tests run without Chromium.
"""

from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

import pytest
from playwright.async_api import Error as PlaywrightError

import markdown_pdf.renderer


class EngineRecorder:
    """Collects what the fake engine was asked to do."""

    def __init__(self):
        self.fail_on = None
        self.launches = []
        self.goto_calls = []
        self.html_at_goto = None
        self.pdf_calls = []
        self.pages_closed = 0
        self.browsers_closed = 0
        self.stopped = False

    def maybe_fail(self, step):
        if self.fail_on == step:
            raise PlaywrightError(f"simulated {step} failure")


class FakePage:
    def __init__(self, recorder):
        self.recorder = recorder

    async def goto(self, url, wait_until=None):
        self.recorder.goto_calls.append((url, wait_until))
        self.recorder.maybe_fail("goto")
        path = Path(url2pathname(urlsplit(url).path))
        self.recorder.html_at_goto = path.read_text(encoding="utf-8")

    async def pdf(self, **options):
        self.recorder.pdf_calls.append(options)
        self.recorder.maybe_fail("pdf")
        Path(options["path"]).write_bytes(b"%PDF-1.4\n%fake\n")

    async def close(self):
        self.recorder.pages_closed += 1


class FakeBrowser:
    def __init__(self, recorder):
        self.recorder = recorder

    async def new_page(self):
        self.recorder.maybe_fail("new_page")
        return FakePage(self.recorder)

    async def close(self):
        self.recorder.browsers_closed += 1


class FakeChromium:
    def __init__(self, recorder):
        self.recorder = recorder

    async def launch(self, **kwargs):
        self.recorder.launches.append(kwargs)
        self.recorder.maybe_fail("launch")
        return FakeBrowser(self.recorder)


class FakePlaywright:
    def __init__(self, recorder):
        self.recorder = recorder
        self.chromium = FakeChromium(recorder)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.recorder.stopped = True
        return False


@pytest.fixture
def fake_engine(monkeypatch):
    recorder = EngineRecorder()
    monkeypatch.setattr(markdown_pdf.renderer, "async_playwright", lambda: FakePlaywright(recorder))
    return recorder


@pytest.fixture
def write_file(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write
