"""Line classification helpers shared by the translator."""

CODE_PREFIX = "code:"

_INDENT_CHARS = " \t"


def indent_level(text: str) -> int:
    """Number of leading space/tab characters."""
    return len(text) - len(text.lstrip(_INDENT_CHARS))


def strip_indent(text: str) -> str:
    return text.lstrip(_INDENT_CHARS)


def is_tag_line(text: str) -> bool:
    return text.strip().startswith("#")


def code_language(text: str) -> str | None:
    """Language of a ``code:`` header line, or None if the line is not one.

    ``code:`` with nothing after it yields an empty string.
    """
    stripped = text.strip()
    if not stripped.startswith(CODE_PREFIX):
        return None
    return stripped[len(CODE_PREFIX):].strip()


def is_code_body(text: str) -> bool:
    """Code-block bodies are the indented lines following a header."""
    return text.startswith((" ", "\t"))


def bullet_prefix(level: int) -> str:
    """Markdown list marker for an indentation depth; level 0 is no bullet."""
    if level <= 0:
        return ""
    return "  " * (level - 1) + "- "
