from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from create_context.config import DEFAULT_OUTPUT_FILE, FilterConfig
from create_context.exceptions import ConfigFileError


class Settings(BaseModel):
    """Run settings for the create_context command."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path = Field(default_factory=Path.cwd, description="Project root to walk.")
    output: Path = Field(default=Path(DEFAULT_OUTPUT_FILE), description="Output markdown file.")
    config: Path | None = Field(default=None, description="YAML file overriding the filter rules.")
    log_file: str = Field(default="", description="Log file path.")
    debug: bool = Field(default=False, description="Verbose logging.")

    def output_path(self) -> Path:
        """Resolve the output file; a relative output lands in the project root."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output


def load_filter_config(path: Path | None = None) -> FilterConfig:
    """Build the filter rules, optionally overridden by a YAML file.

    The YAML document is a mapping whose keys are the fields of FilterConfig
    (`exclude_paths`, `include_paths`, `include_extensions`, `max_file_size_kb`).
    Missing keys keep their defaults.

    Args:
        path (Path | None): the YAML file to load, or None for the defaults

    Raises:
        ConfigFileError: if the file cannot be read, is not a mapping, has unknown
            keys or invalid values.

    Returns:
        FilterConfig: the filter rules for the run
    """
    if path is None:
        return FilterConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigFileError(path=path, reason=e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigFileError(path=path, reason=f"YAML error: {e}") from e
    if not isinstance(data, dict):
        raise ConfigFileError(path=path, reason="top-level value must be a mapping")
    unknown = sorted(set(data) - set(FilterConfig.model_fields))
    if unknown:
        raise ConfigFileError(path=path, reason=f"unknown keys: {', '.join(map(str, unknown))}")
    try:
        return FilterConfig(**data)
    except ValidationError as e:
        raise ConfigFileError(path=path, reason=str(e)) from e
