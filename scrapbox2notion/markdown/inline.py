"""Inline Scrapbox bracket syntax to Markdown, one stripped line at a time.

Each style converter replaces only the first matching span on a line. The
scan is a plain ``str.find`` so unclosed brackets are left untouched.
"""

from __future__ import annotations

from collections.abc import Sequence

_HEADING_PREFIX = "[**"

# Scrapbox asterisk count -> Markdown heading depth
_HEADING_LEVELS = {2: 4, 3: 3, 4: 2}
_DEFAULT_HEADING_LEVEL = 4

# (opener, markdown open, markdown close)
_STYLE_SPANS = (
    ("[- ", "~~", "~~"),
    ("[* ", "**", "**"),
    ("[/ ", "_", "_"),
    ("[$ ", "$", "$"),
)
_MATH_OPENER = "[$ "

# Bracket openers that belong to styles, never to page links
_RESERVED_OPENERS = ("[- ", "[* ", "[$ ", "[**", "[/ ")

_IMAGE_SUFFIXES = (".jpg", ".png", ".gif", ".jpeg")


def convert_inline(text: str, link_targets: Sequence[str] = ()) -> str:
    if text.startswith(_HEADING_PREFIX):
        return convert_heading(text)

    for opener, md_open, md_close in _STYLE_SPANS:
        text = replace_enclosed(text, opener, md_open, md_close)

    if text.startswith("`") and text.endswith("`"):
        return text

    text = convert_page_link(text, link_targets)
    return convert_external_link(text)


def convert_heading(text: str) -> str:
    """``[** x]`` -> ``#### x``, ``[*** x]`` -> ``### x``, ``[**** x]`` -> ``## x``."""
    after_bracket = text[1:]
    stars = len(after_bracket) - len(after_bracket.lstrip("*"))
    heading = after_bracket[stars:]
    if heading.startswith(" "):
        heading = heading[1:]
    heading = heading.removesuffix("]")
    level = _HEADING_LEVELS.get(stars, _DEFAULT_HEADING_LEVEL)
    return "#" * level + " " + heading


def replace_enclosed(text: str, opener: str, md_open: str, md_close: str) -> str:
    """Rewrite the first ``<opener>...]`` span of ``text``."""
    start = text.find(opener)
    if start == -1:
        return text
    end = text.find("]", start)
    if end == -1:
        return text

    content = text[start + len(opener):end]
    if opener == _MATH_OPENER:
        # LaTeX arrives with doubled backslashes
        content = content.replace("\\\\", "\\")
    return text[:start] + md_open + content + md_close + text[end + 1:]


def link_id(title: str) -> str:
    """Normalize a bracket title the way Scrapbox's ``linksLc`` does."""
    return title.replace(" ", "_").lower()


def convert_page_link(text: str, link_targets: Sequence[str]) -> str:
    """Resolve ``[Page Title]`` at the first bracket against known link targets.

    Only the first ``[`` on the line is considered; if it opens a style span,
    the line has no link.
    """
    start = text.find("[")
    if start == -1 or text.startswith(_RESERVED_OPENERS, start):
        return text
    end = text.find("]", start)
    if end == -1:
        return text

    title = text[start + 1:end]
    wanted = link_id(title)
    for target in link_targets:
        if target.lower() == wanted:
            return text[:start] + f"[{title}](./{target}.md)" + text[end + 1:]
    return text


def convert_external_link(text: str) -> str:
    """Wrap bare image URLs as Markdown images; other URLs pass through."""
    if text.startswith("http") and text.endswith(_IMAGE_SUFFIXES):
        return f"![image]({text})"
    return text
