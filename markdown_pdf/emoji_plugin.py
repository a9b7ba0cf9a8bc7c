"""
markdown-it plugin that turns ``:shortcode:`` tokens into emoji glyphs.

Only plain text is rewritten; inline code and code blocks are left alone.
Colon-delimited text that is not a known shortcode (``00:00:00``) stays as is.
"""

import re

import emoji
from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore

SHORTCODE_PATTERN = re.compile(r":[a-zA-Z0-9_+\-]+:")


def emojize_text(text: str) -> str:
    """Replace known shortcodes in ``text`` with their Unicode glyphs."""
    parts = []
    pos = 0
    last = 0
    while True:
        match = SHORTCODE_PATTERN.search(text, pos)
        if match is None:
            break
        glyph = emoji.emojize(match.group(0), language="alias")
        if glyph != match.group(0):
            parts.append(text[last:match.start()])
            parts.append(glyph)
            pos = last = match.end()
        else:
            # The closing colon may open the next shortcode, e.g. "12:30:smile:"
            pos = match.end() - 1
    parts.append(text[last:])
    return "".join(parts)


def _emoji_rule(state: StateCore) -> None:
    for token in state.tokens:
        if token.type != "inline" or not token.children:
            continue
        for child in token.children:
            if child.type == "text" and ":" in child.content:
                child.content = emojize_text(child.content)


def emoji_plugin(md: MarkdownIt) -> None:
    # Runs last so it sees text tokens after they have been joined
    md.core.ruler.push("emoji", _emoji_rule)
