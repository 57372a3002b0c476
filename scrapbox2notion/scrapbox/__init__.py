"""Scrapbox export models and loader."""

from scrapbox2notion.scrapbox.loader import (
    ExportError,
    MalformedExportError,
    MissingFieldError,
    load_export,
    parse_export,
)
from scrapbox2notion.scrapbox.models import Document, Line, Page, ScrapboxExport

__all__ = [
    "Document",
    "ExportError",
    "Line",
    "MalformedExportError",
    "MissingFieldError",
    "Page",
    "ScrapboxExport",
    "load_export",
    "parse_export",
]
