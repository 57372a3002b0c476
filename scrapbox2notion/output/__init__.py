"""Output subsystem: writes translated pages as .md files."""

from scrapbox2notion.output.writer import MarkdownWriter, sanitize_title

__all__ = [
    "MarkdownWriter",
    "sanitize_title",
]
