"""Hashtag extraction from Scrapbox page lines."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scrapbox2notion.scrapbox.models import Line


def extract_tags(lines: Iterable[Line]) -> list[str]:
    """Return every ``#tag`` token in reading order, duplicates included.

    Lines are scanned top to bottom and tokens left to right. A bare ``#``
    is not a tag.
    """
    tags: list[str] = []
    for line in lines:
        for word in line.text.split():
            if word.startswith("#") and len(word) > 1:
                tags.append(word[1:])
    return tags
