"""scrapbox2notion: migrate Scrapbox projects to Markdown and Notion."""

from scrapbox2notion.markdown import extract_tags, translate
from scrapbox2notion.scrapbox import Document, Line, load_export

__version__ = "0.1.0"

__all__ = ["Document", "Line", "extract_tags", "load_export", "translate"]
