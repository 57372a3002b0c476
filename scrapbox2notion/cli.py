"""CLI entry point for scrapbox2notion."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from scrapbox2notion.config import AppConfig, load_config
from scrapbox2notion.config.loader import DEFAULT_CONFIG_TEMPLATE
from scrapbox2notion.markdown import translate
from scrapbox2notion.migrate import MigrationReport, Migrator
from scrapbox2notion.notion import create_notion_client
from scrapbox2notion.observability import setup_logging
from scrapbox2notion.output import MarkdownWriter
from scrapbox2notion.scrapbox import ExportError, ScrapboxExport, load_export

app = typer.Typer(
    name="scrapbox2notion",
    help="Migrate a Scrapbox JSON export to Markdown files and Notion pages.",
)

config_app = typer.Typer(help="Manage scrapbox2notion configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: AppConfig | None = None


def _get_config() -> AppConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to scrapbox2notion.yaml")
    ] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="debug | info | warn | error")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    setup_logging(log_level or _config.log_level, _config.log_format)


def _load_export_or_exit(input_file: str) -> ScrapboxExport:
    try:
        return load_export(input_file)
    except ExportError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _writer_for(cfg: AppConfig, output: str | None) -> MarkdownWriter:
    out_cfg = cfg.output
    if output:
        out_cfg = out_cfg.model_copy(update={"base_dir": output})
    return MarkdownWriter(out_cfg)


def _display_report(report: MigrationReport, title: str) -> None:
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Pages", str(report.total))
    table.add_row("Written", str(report.written))
    table.add_row("Published", str(report.published))
    table.add_row("Errors", str(report.failed))
    table.add_row("Duration", f"{report.duration:.2f}s")
    rprint(table)

    for err in report.errors:
        rprint(f"  [red]error:[/red] {escape(err.title)}: {escape(err.error)}")


@app.command()
def migrate(
    input_file: str = typer.Argument(..., metavar="INPUT", help="Scrapbox JSON export file"),
    output: str | None = typer.Option(None, "--output", "-o", help="Directory for .md files"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Translate without writing or publishing"),
    no_publish: bool = typer.Option(False, "--no-publish", help="Write markdown only"),
) -> None:
    """Translate every page, save it as Markdown, and publish it to Notion."""
    cfg = _get_config()
    export = _load_export_or_exit(input_file)
    writer = _writer_for(cfg, output)

    publisher = None
    if cfg.migration.publish and not no_publish and not dry_run:
        try:
            publisher = create_notion_client(cfg.notion)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    report = Migrator(writer, publisher).run(export, dry_run=dry_run)
    _display_report(report, "Dry Run" if dry_run else "Migration")

    if report.errors:
        raise typer.Exit(1)


@app.command()
def convert(
    input_file: str = typer.Argument(..., metavar="INPUT", help="Scrapbox JSON export file"),
    output: str | None = typer.Option(None, "--output", "-o", help="Directory for .md files"),
    page: str | None = typer.Option(None, "--page", "-p", help="Only convert the page with this title"),
) -> None:
    """Translate pages to Markdown files without publishing."""
    cfg = _get_config()
    export = _load_export_or_exit(input_file)

    pages = export.pages
    if page is not None:
        pages = [p for p in pages if p.title == page]
        if not pages:
            typer.echo(f"Error: no page titled {page!r}", err=True)
            raise typer.Exit(1)
        if output is None:
            typer.echo(translate(pages[0].to_document()), nl=False)
            return

    writer = _writer_for(cfg, output)
    for p in pages:
        path = writer.write(p.title, translate(p.to_document()), tags=p.tags)
        rprint(f"[green]Written[/green] {path}")
    writer.flush_index()


@app.command()
def tags(
    input_file: str = typer.Argument(..., metavar="INPUT", help="Scrapbox JSON export file"),
) -> None:
    """List the tags found on each page."""
    export = _load_export_or_exit(input_file)

    table = Table(title=f"Tags ({len(export.pages)} pages)")
    table.add_column("Page", style="cyan")
    table.add_column("Tags", style="yellow")
    for p in export.pages:
        page_tags = p.tags
        table.add_row(escape(p.title), escape(", ".join(page_tags)) if page_tags else "-")
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default scrapbox2notion.yaml in current directory."""
    target = Path("scrapbox2notion.yaml")
    if target.exists() and not force:
        rprint("[yellow]scrapbox2notion.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
