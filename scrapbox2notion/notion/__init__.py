"""Notion publisher: REST client and markdown-to-block conversion."""

from scrapbox2notion.notion.blocks import markdown_to_blocks
from scrapbox2notion.notion.client import NotionClient, create_notion_client
from scrapbox2notion.notion.models import NotionError

__all__ = [
    "NotionClient",
    "NotionError",
    "create_notion_client",
    "markdown_to_blocks",
]
