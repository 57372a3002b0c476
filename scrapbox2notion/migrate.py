"""Migrator: translate, write and publish the pages of an export."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from scrapbox2notion.markdown import extract_tags, translate
from scrapbox2notion.output.writer import MarkdownWriter
from scrapbox2notion.scrapbox.models import Page, ScrapboxExport

logger = logging.getLogger(__name__)


@runtime_checkable
class PagePublisher(Protocol):
    """Remote destination for translated pages."""

    def create_page(self, title: str, markdown: str, tags: Sequence[str]) -> list[str]: ...


class PageError(BaseModel):
    title: str
    error: str


class MigrationReport(BaseModel):
    total: int = 0
    written: int = 0
    published: int = 0
    errors: list[PageError] = []
    duration: float = 0.0

    @property
    def failed(self) -> int:
        return len(self.errors)


class Migrator:
    def __init__(self, writer: MarkdownWriter, publisher: PagePublisher | None = None):
        """
        Args:
            writer: Sink for the translated markdown files
            publisher: Remote destination; None writes markdown only
        """
        self.writer = writer
        self.publisher = publisher

    def run(self, export: ScrapboxExport, *, dry_run: bool = False) -> MigrationReport:
        """Process every page; a failing page is recorded and skipped."""
        start = time.monotonic()
        report = MigrationReport(total=len(export.pages))
        logger.info("Found %d pages to process", report.total)

        for page in export.pages:
            try:
                self._migrate_page(page, report, dry_run=dry_run)
            except Exception as exc:
                report.errors.append(PageError(title=page.title, error=str(exc)))
                logger.error(
                    "Failed to migrate %s: %s", page.title, exc, extra={"page": page.title}
                )

        self.writer.flush_index()

        report.duration = time.monotonic() - start
        logger.info(
            "Migration completed: %d written, %d published, %d failed",
            report.written, report.published, report.failed,
        )
        return report

    def _migrate_page(self, page: Page, report: MigrationReport, *, dry_run: bool) -> Path:
        document = page.to_document()
        markdown = translate(document)
        tags = extract_tags(document.lines)

        path = self.writer.write(page.title, markdown, tags=tags, dry_run=dry_run)
        if not dry_run:
            report.written += 1

        if self.publisher is not None and not dry_run:
            self.publisher.create_page(page.title, markdown, tags)
            report.published += 1
        return path
