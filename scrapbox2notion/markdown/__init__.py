"""Scrapbox-to-Markdown translation engine."""

from scrapbox2notion.markdown.inline import convert_inline
from scrapbox2notion.markdown.tags import extract_tags
from scrapbox2notion.markdown.translator import CodeBlock, convert_line, translate

__all__ = [
    "CodeBlock",
    "convert_inline",
    "convert_line",
    "extract_tags",
    "translate",
]
