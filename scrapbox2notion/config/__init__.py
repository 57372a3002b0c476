from .loader import load_config
from .models import (
    AppConfig,
    MigrationConfig,
    NotionConfig,
    OutputConfig,
)

__all__ = [
    "AppConfig",
    "MigrationConfig",
    "NotionConfig",
    "OutputConfig",
    "load_config",
]
