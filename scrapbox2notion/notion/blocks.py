"""Markdown -> Notion block payloads.

Only the constructs the translator emits are recognised: headings, fenced
code, bullets and paragraphs. Inline markup is sent as plain text.
"""

from __future__ import annotations

# Notion rejects text objects longer than this
MAX_TEXT_LENGTH = 2000

_HEADINGS = (
    ("#### ", 3),
    ("### ", 3),
    ("## ", 2),
    ("# ", 1),
)


def rich_text(content: str) -> list[dict]:
    """Split content into text objects that respect the API length limit."""
    return [
        {"type": "text", "text": {"content": content[i:i + MAX_TEXT_LENGTH]}}
        for i in range(0, len(content), MAX_TEXT_LENGTH)
    ]


def _block(block_type: str, body: dict) -> dict:
    return {"object": "block", "type": block_type, block_type: body}


def heading_block(text: str, level: int) -> dict:
    block_type = {1: "heading_1", 2: "heading_2"}.get(level, "heading_3")
    return _block(block_type, {"rich_text": rich_text(text)})


def code_block(content: str, language: str = "plain text") -> dict:
    return _block("code", {"rich_text": rich_text(content), "language": language})


def bulleted_block(text: str) -> dict:
    return _block("bulleted_list_item", {"rich_text": rich_text(text)})


def paragraph_block(text: str) -> dict:
    return _block("paragraph", {"rich_text": rich_text(text)})


def markdown_to_blocks(markdown: str) -> list[dict]:
    blocks: list[dict] = []
    lines = markdown.split("\n")

    i = 0
    while i < len(lines):
        line = lines[i].strip()
        i += 1
        if not line:
            continue

        if line.startswith("```"):
            code_lines = []
            while i < len(lines) and not lines[i].startswith("```"):
                code_lines.append(lines[i])
                i += 1
            i += 1  # closing fence
            blocks.append(code_block("\n".join(code_lines)))
            continue

        for prefix, level in _HEADINGS:
            if line.startswith(prefix):
                blocks.append(heading_block(line[len(prefix):], level))
                break
        else:
            if line.startswith("- "):
                blocks.append(bulleted_block(line[2:]))
            else:
                blocks.append(paragraph_block(line))

    return blocks
