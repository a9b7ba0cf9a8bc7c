"""
Markdown to HTML fragment conversion.

GitHub-flavored parsing via markdown-it-py. A new parser is built for every
call from an immutable MarkdownOptions, so concurrent conversions never
share parser configuration.
"""

import html
from dataclasses import dataclass

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .emoji_plugin import emoji_plugin

FLAVOR = "gfm-like"


@dataclass(frozen=True)
class MarkdownOptions:
    convert_emoji: bool = True
    highlight_code: bool = True


def highlight_code(code: str, lang: str, attrs: str) -> str:
    """Pygments highlighter for fenced code. Returns "" for unknown languages so markdown-it escapes them."""
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ""
    formatter = HtmlFormatter(nowrap=True)
    body = highlight(code, lexer, formatter)
    return f'<pre class="highlight"><code class="language-{html.escape(lang)}">{body}</code></pre>'


def build_parser(options: MarkdownOptions) -> MarkdownIt:
    md = MarkdownIt(FLAVOR, {"highlight": highlight_code if options.highlight_code else None})
    # GitHub-compatible ids on every heading level, no prefix
    md.use(anchors_plugin, min_level=1, max_level=6, permalink=False)
    md.use(tasklists_plugin)
    if options.convert_emoji:
        md.use(emoji_plugin)
    return md


def markdown_to_html(text: str, convert_emoji: bool = True) -> str:
    """Convert Markdown text to an HTML fragment.

    Emoji conversion can be switched off because shortcode-like text (for
    example ``00:00:00`` next to real shortcodes) may be rewritten by mistake.
    """
    return build_parser(MarkdownOptions(convert_emoji=convert_emoji)).render(text)
