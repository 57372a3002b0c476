"""Scrapbox page -> Markdown document translation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from scrapbox2notion.markdown.inline import convert_inline
from scrapbox2notion.markdown.lines import (
    bullet_prefix,
    code_language,
    indent_level,
    is_code_body,
    is_tag_line,
    strip_indent,
)

if TYPE_CHECKING:
    from scrapbox2notion.scrapbox.models import Document


@dataclass(frozen=True)
class CodeBlock:
    """Accumulator for a ``code:`` block while its indented body is read."""

    active: bool = False
    language: str = ""
    buffer: tuple[str, ...] = ()

    def append(self, line: str) -> CodeBlock:
        return replace(self, buffer=self.buffer + (line,))

    def render(self) -> str:
        body = "\n".join(self.buffer)
        return f"```{self.language}\n{body}\n```\n"


def translate(document: Document) -> str:
    """Render a document as Markdown: title heading, blank line, then the body.

    The first line is dropped when it repeats the title, tag lines are
    dropped, and each ``code:`` header plus its indented lines becomes one
    fenced block.
    """
    out = [f"# {document.title}\n\n"]
    block = CodeBlock()

    for index, line in enumerate(document.lines):
        text = line.text

        if index == 0 and text == document.title:
            continue

        # Tags are published separately, not rendered
        if is_tag_line(text):
            continue

        language = code_language(text)
        if language is not None:
            # A header inside an open block only relabels it; the body carries on
            block = replace(block, active=True, language=language)
            continue

        if block.active:
            if is_code_body(text):
                block = block.append(strip_indent(text))
                continue
            out.append(block.render())
            block = CodeBlock()

        converted = convert_line(text, document.link_targets)
        if converted:
            out.append(converted + "\n")

    if block.active and block.buffer:
        out.append(block.render())

    return "".join(out)


def convert_line(text: str, link_targets: Sequence[str] = ()) -> str:
    """Convert one body line; indentation becomes a (nested) bullet.

    Returns an empty string for lines with no content.
    """
    level = indent_level(text)
    converted = convert_inline(strip_indent(text), link_targets)
    if not converted:
        return ""
    return bullet_prefix(level) + converted
