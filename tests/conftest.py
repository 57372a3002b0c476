"""Shared test fixtures for scrapbox2notion."""

import json
from pathlib import Path

import pytest

from scrapbox2notion.config.models import AppConfig, NotionConfig, OutputConfig

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture
def sample_export_path():
    return FIXTURES / "sample_export.json"


@pytest.fixture
def sample_export_data(sample_export_path):
    return json.loads(sample_export_path.read_text(encoding="utf-8"))


@pytest.fixture
def sample_config():
    return AppConfig()


@pytest.fixture
def notion_config():
    """No waiting between confirmation polls."""
    return NotionConfig(confirm_delay=0, database_confirm_attempts=3, page_confirm_attempts=2)


@pytest.fixture
def output_config(tmp_path):
    return OutputConfig(base_dir=str(tmp_path / "out"), create_index=False)


@pytest.fixture
def write_export(tmp_path):
    """Write an export dict (or raw string) to a temp file and return its path."""

    def _write(data, name="export.json"):
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return path

    return _write
