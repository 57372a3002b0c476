"""MarkdownWriter: writes translated pages to .md files on disk."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

import yaml

from scrapbox2notion.config.models import OutputConfig

logger = logging.getLogger(__name__)

INDEX_FILE = "_index.yaml"

_UNSAFE_CHARS_RE = re.compile(r'[<>:"|?*\x00-\x1f]')


def sanitize_title(title: str) -> str:
    """Make a page title safe for use as a filename stem.

    Path separators become `-`, `..` segments are dropped, and characters
    rejected by common filesystems are removed. Non-ASCII letters are kept
    since Scrapbox titles are frequently Japanese.
    """
    name = title.replace("/", "-").replace("\\", "-")
    name = name.replace("..", "")
    name = _UNSAFE_CHARS_RE.sub("", name)
    name = name.strip(" .")
    if not name:
        name = "_untitled"
    return name


class MarkdownWriter:
    """Writes translated pages to `<base_dir>/<title>.md`.

    Titles are sanitized into filenames. Index entries are collected as pages
    are written and merged into `_index.yaml` by `flush_index()`, when the
    config asks for an index.
    """

    def __init__(self, config: OutputConfig) -> None:
        self.config = config
        self.base_dir = Path(config.base_dir)
        self._pending: dict[str, dict] = {}
        self._owners: dict[Path, str] = {}

    def path_for(self, title: str) -> Path:
        return self.base_dir / f"{sanitize_title(title)}.md"

    def write(
        self,
        title: str,
        markdown: str,
        *,
        tags: Sequence[str] = (),
        dry_run: bool = False,
    ) -> Path:
        """Write one page. Returns the Path of the written (or would-be) file."""
        dest = self.path_for(title)

        owner = self._owners.setdefault(dest, title)
        if owner != title:
            logger.warning(
                "%r and %r share the filename %s; the later page replaces the earlier",
                owner, title, dest.name,
                extra={"page": title, "path": str(dest)},
            )
            self._owners[dest] = title

        if dry_run:
            logger.debug("dry-run: would write %s", dest, extra={"page": title})
            return dest

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(markdown, encoding="utf-8")
        logger.info(
            "wrote %s (%d bytes)",
            dest,
            len(markdown.encode("utf-8")),
            extra={"page": title, "path": str(dest)},
        )

        if self.config.create_index:
            # Re-inserting keeps the most recent write last
            self._pending.pop(title, None)
            self._pending[title] = {
                "title": title,
                "path": str(dest),
                "tags": list(tags),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

        return dest

    # -- index management --------------------------------------------------

    def flush_index(self) -> Path | None:
        """Upsert the pending entries into _index.yaml in one read and one write.

        Returns the index path, or None when nothing was pending.
        """
        if not self._pending:
            return None
        index_path = self.base_dir / INDEX_FILE

        entries: list[dict] = []
        if index_path.exists():
            loaded = yaml.safe_load(index_path.read_text(encoding="utf-8"))
            if isinstance(loaded, list):
                entries = loaded

        entries = [e for e in entries if e.get("title") not in self._pending]
        entries.extend(self._pending.values())
        self._pending.clear()

        index_path.parent.mkdir(parents=True, exist_ok=True)
        index_path.write_text(
            yaml.safe_dump(entries, default_flow_style=False, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        logger.debug("updated index %s (%d entries)", index_path, len(entries))
        return index_path
