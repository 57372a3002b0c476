from pydantic import BaseModel, Field
from typing import Literal


class NotionConfig(BaseModel):
    api_url: str = "https://api.notion.com/v1"
    api_version: str = "2022-06-28"
    token_env: str = "NOTION_API_KEY"
    parent_page_env: str = "NOTION_PARENT_PAGE_ID"
    timeout: int = Field(default=30, gt=0)
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)
    confirm_delay: float = Field(default=1.0, ge=0)
    database_confirm_attempts: int = Field(default=10, gt=0)
    page_confirm_attempts: int = Field(default=5, gt=0)


class OutputConfig(BaseModel):
    base_dir: str = "output"
    create_index: bool = True


class MigrationConfig(BaseModel):
    publish: bool = True


class AppConfig(BaseModel):
    notion: NotionConfig = Field(default_factory=NotionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
