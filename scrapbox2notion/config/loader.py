"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import AppConfig

_ENV_REF_RE = re.compile(r"\$\{(\w+)\}")

# Environment variables honoured on top of the config file
_ENV_OVERRIDES = {
    "LOG_LEVEL": ("log_level",),
    "OUTPUT_DIR": ("output", "base_dir"),
}


def load_config(cli_path: str | None = None) -> AppConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./scrapbox2notion.yaml"),
        Path.home() / ".scrapbox2notion" / "config.yaml",
    ]

    raw: dict = {}
    source = "defaults"
    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            if loaded is None:
                continue
            if not isinstance(loaded, dict):
                raise ValueError(f"Invalid config in {path}: expected a mapping")
            raw = _expand_env_vars(loaded)
            source = str(path)
            break

    raw = _apply_env_overrides(raw)
    try:
        return AppConfig(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid config in {source}: {e}") from e


def _expand_env_vars(node: object) -> object:
    """Substitute ${VAR} references throughout a parsed YAML tree.

    Unset variables become empty strings; non-string scalars pass through.
    """
    if isinstance(node, dict):
        return {key: _expand_env_vars(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_expand_env_vars(item) for item in node]
    if isinstance(node, str):
        return _ENV_REF_RE.sub(_env_value, node)
    return node


def _env_value(match: re.Match) -> str:
    return os.environ.get(match.group(1), "")


def _apply_env_overrides(raw: dict) -> dict:
    merged = dict(raw)
    for env_name, keys in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        target = merged
        for key in keys[:-1]:
            section = target.get(key)
            target[key] = dict(section) if isinstance(section, dict) else {}
            target = target[key]
        target[keys[-1]] = value.lower() if env_name == "LOG_LEVEL" else value
    return merged


# Default YAML template for `scrapbox2notion config init`
DEFAULT_CONFIG_TEMPLATE = """\
# scrapbox2notion.yaml

# Notion API
notion:
  api_url: "https://api.notion.com/v1"
  api_version: "2022-06-28"
  token_env: "NOTION_API_KEY"              # integration token
  parent_page_env: "NOTION_PARENT_PAGE_ID" # page that holds tag databases
  timeout: 30
  max_retries: 3
  retry_delay: 1.0
  confirm_delay: 1.0
  database_confirm_attempts: 10
  page_confirm_attempts: 5

# Markdown output
output:
  base_dir: "output"
  create_index: true

# Migration
migration:
  publish: true                # false = write markdown only

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
