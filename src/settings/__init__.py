"""Project configuration loading."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    RebuildConfig,
    load_config,
    resolve_output_dir,
    resolve_record_path,
    resolve_sources_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "RebuildConfig",
    "load_config",
    "resolve_output_dir",
    "resolve_record_path",
    "resolve_sources_dir",
]
