"""Tests for the scrapbox2notion CLI commands."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from scrapbox2notion.cli import app
from scrapbox2notion.config.loader import DEFAULT_CONFIG_TEMPLATE
from scrapbox2notion.notion import NotionError

runner = CliRunner()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Run each command from an empty directory with no config or credentials."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("LOG_LEVEL", "OUTPUT_DIR", "NOTION_API_KEY", "NOTION_PARENT_PAGE_ID"):
        monkeypatch.delenv(name, raising=False)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == "scrapbox2notion":
            root.removeHandler(handler)


@pytest.fixture()
def mock_publisher():
    """Patch create_notion_client at the CLI import site and return the client mock."""
    instance = MagicMock(name="NotionClient_instance")
    instance.create_page.return_value = ["page-1"]
    with patch("scrapbox2notion.cli.create_notion_client", return_value=instance):
        yield instance


# ---------------------------------------------------------------------------
# scrapbox2notion migrate
# ---------------------------------------------------------------------------


class TestMigrateCommand:
    def test_no_publish_writes_markdown(self, tmp_path, sample_export_path):
        out = tmp_path / "md"
        result = runner.invoke(app, ["migrate", str(sample_export_path), "-o", str(out), "--no-publish"])

        assert result.exit_code == 0, result.output
        assert (out / "Sample Page.md").exists()
        assert (out / "Other Page.md").exists()
        assert "Migration" in result.output

    def test_publishes_every_page(self, tmp_path, sample_export_path, mock_publisher):
        result = runner.invoke(app, ["migrate", str(sample_export_path), "-o", str(tmp_path / "md")])

        assert result.exit_code == 0, result.output
        assert mock_publisher.create_page.call_count == 2
        first = mock_publisher.create_page.call_args_list[0]
        assert first.args[0] == "Sample Page"
        assert first.args[2] == ["scrapbox", "notes"]

    def test_publish_failure_exits_nonzero(self, tmp_path, sample_export_path, mock_publisher):
        mock_publisher.create_page.side_effect = NotionError("create_page", "boom")
        result = runner.invoke(app, ["migrate", str(sample_export_path), "-o", str(tmp_path / "md")])

        assert result.exit_code == 1
        assert "boom" in result.output
        # markdown is still saved before publishing fails
        assert (tmp_path / "md" / "Sample Page.md").exists()

    def test_missing_token_exits(self, tmp_path, sample_export_path):
        result = runner.invoke(app, ["migrate", str(sample_export_path), "-o", str(tmp_path / "md")])

        assert result.exit_code == 1
        assert "NOTION_API_KEY" in result.output
        assert not (tmp_path / "md").exists()

    def test_dry_run_needs_no_token(self, tmp_path, sample_export_path):
        result = runner.invoke(app, ["migrate", str(sample_export_path), "-o", str(tmp_path / "md"), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Dry Run" in result.output
        assert not (tmp_path / "md").exists()

    def test_publish_disabled_in_config(self, tmp_path, sample_export_path):
        (tmp_path / "scrapbox2notion.yaml").write_text("migration:\n  publish: false\n")
        result = runner.invoke(app, ["migrate", str(sample_export_path), "-o", str(tmp_path / "md")])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "md" / "Sample Page.md").exists()

    def test_output_dir_from_config(self, tmp_path, sample_export_path):
        (tmp_path / "scrapbox2notion.yaml").write_text("output:\n  base_dir: from-config\n")
        result = runner.invoke(app, ["migrate", str(sample_export_path), "--no-publish"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "from-config" / "Other Page.md").exists()

    def test_invalid_export_exits(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{broken")
        result = runner.invoke(app, ["migrate", str(bad), "--no-publish"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_export_exits(self, tmp_path):
        result = runner.invoke(app, ["migrate", str(tmp_path / "nope.json"), "--no-publish"])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# scrapbox2notion convert
# ---------------------------------------------------------------------------


class TestConvertCommand:
    def test_single_page_to_stdout(self, sample_export_path, fixtures_dir):
        result = runner.invoke(
            app, ["--log-level", "error", "convert", str(sample_export_path), "--page", "Other Page"]
        )

        assert result.exit_code == 0, result.output
        expected = (fixtures_dir / "expected" / "Other Page.md").read_text(encoding="utf-8")
        assert result.stdout == expected

    def test_all_pages_to_directory(self, tmp_path, sample_export_path):
        out = tmp_path / "md"
        result = runner.invoke(app, ["convert", str(sample_export_path), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out.glob("*.md")) == ["Other Page.md", "Sample Page.md"]

    def test_single_page_to_directory(self, tmp_path, sample_export_path):
        out = tmp_path / "md"
        result = runner.invoke(app, ["convert", str(sample_export_path), "-p", "Sample Page", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert [p.name for p in out.glob("*.md")] == ["Sample Page.md"]

    def test_unknown_page(self, sample_export_path):
        result = runner.invoke(app, ["convert", str(sample_export_path), "--page", "Nope"])

        assert result.exit_code == 1
        assert "no page titled" in result.output

    def test_never_publishes(self, tmp_path, sample_export_path, mock_publisher):
        runner.invoke(app, ["convert", str(sample_export_path), "-o", str(tmp_path / "md")])
        mock_publisher.create_page.assert_not_called()


# ---------------------------------------------------------------------------
# scrapbox2notion tags
# ---------------------------------------------------------------------------


class TestTagsCommand:
    def test_lists_tags(self, sample_export_path):
        result = runner.invoke(app, ["tags", str(sample_export_path)])

        assert result.exit_code == 0, result.output
        assert "scrapbox" in result.output
        assert "notes" in result.output

    def test_invalid_export(self, write_export):
        path = write_export({"pages": [{"lines": []}]})
        result = runner.invoke(app, ["tags", str(path)])

        assert result.exit_code == 1
        assert "title" in result.output


# ---------------------------------------------------------------------------
# scrapbox2notion config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_init_creates_file(self, tmp_path):
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "scrapbox2notion.yaml").read_text() == DEFAULT_CONFIG_TEMPLATE

    def test_init_refuses_overwrite(self, tmp_path):
        (tmp_path / "scrapbox2notion.yaml").write_text("log_level: debug\n")
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (tmp_path / "scrapbox2notion.yaml").read_text() == "log_level: debug\n"

    def test_init_force(self, tmp_path):
        (tmp_path / "scrapbox2notion.yaml").write_text("log_level: debug\n")
        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "scrapbox2notion.yaml").read_text() == DEFAULT_CONFIG_TEMPLATE

    def test_show(self):
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert "base_dir" in result.output
        assert "NOTION_API_KEY" in result.output

    def test_invalid_config_file(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("log_level: loud\n")
        result = runner.invoke(app, ["--config", str(bad), "config", "show"])

        assert result.exit_code == 1
        assert "Invalid config" in result.output
