"""Load and validate Scrapbox JSON exports."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from scrapbox2notion.scrapbox.models import ScrapboxExport

logger = logging.getLogger(__name__)


class ExportError(ValueError):
    """The export could not be turned into pages."""


class MalformedExportError(ExportError):
    """Unreadable file, invalid JSON, or values of the wrong shape."""


class MissingFieldError(ExportError):
    """A required field (e.g. a page title) is absent."""


def load_export(path: str | Path) -> ScrapboxExport:
    """Read a Scrapbox export file from disk."""
    path = Path(path)
    logger.debug("Reading Scrapbox export %s", path, extra={"path": str(path)})
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise MalformedExportError(f"Failed to read {path}: {e}") from e

    export = parse_export(raw, source=str(path))
    logger.info(
        "Parsed %s: %d pages", path, len(export.pages), extra={"path": str(path)}
    )
    return export


def parse_export(raw: str | bytes, source: str = "<export>") -> ScrapboxExport:
    """Validate raw export JSON."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedExportError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(data, dict):
        raise MalformedExportError(
            f"Invalid export in {source}: expected an object, got {type(data).__name__}"
        )

    try:
        return ScrapboxExport.model_validate(data)
    except ValidationError as e:
        missing = [err for err in e.errors() if err["type"] == "missing"]
        if missing:
            fields = ", ".join(_format_loc(err["loc"]) for err in missing)
            raise MissingFieldError(f"Missing required field in {source}: {fields}") from e
        problems = "; ".join(
            f"{_format_loc(err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise MalformedExportError(f"Invalid export in {source}: {problems}") from e


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)
