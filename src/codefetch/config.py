"""Configuration management for codefetch."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from codefetch.exceptions import InvalidConfigurationError
from codefetch.files.ignore import IGNORE_FILE
from codefetch.markdown.models import AssemblyOptions

CONFIG_FILE = "codefetch.config.json"
OUTPUT_DIR = "codefetch"
DEFAULT_IGNORE_FILE_CONTENT = "# Codefetch specific ignores\ncodefetch/\n"


class CacheConfig(BaseModel):
    """Cache layer configuration."""

    enabled: bool = False
    backend: Literal["auto", "memory", "filesystem"] = "auto"
    ttl_seconds: int = Field(default=3600, gt=0)
    max_entries: int = Field(default=100, gt=0)
    directory: str | None = None  # None = ~/.cache/codefetch


class CodefetchConfig(BaseModel):
    """Full project configuration."""

    output_dir: str = OUTPUT_DIR
    output_file: str | None = None
    max_tokens: int | None = Field(default=None, gt=0)
    extensions: list[str] = Field(default_factory=list)  # empty = all files
    include_tree: bool = False
    disable_line_numbers: bool = False
    token_encoder: str = "cl100k"
    cache: CacheConfig = Field(default_factory=CacheConfig)

    def to_assembly_options(self) -> AssemblyOptions:
        return AssemblyOptions(
            max_tokens=self.max_tokens,
            include_tree_structure=self.include_tree,
            token_encoder=self.token_encoder,
            disable_line_numbers=self.disable_line_numbers,
        )


def normalize_extensions(extensions: list[str] | str | None) -> list[str]:
    """Normalize ``"ts,.js"`` style input to ``[".ts", ".js"]``."""
    if not extensions:
        return []
    if isinstance(extensions, str):
        extensions = extensions.split(",")
    result = []
    for ext in extensions:
        ext = ext.strip()
        if not ext:
            continue
        result.append(ext if ext.startswith(".") else f".{ext}")
    return result


def load_config(root: Path) -> CodefetchConfig:
    """Load configuration from codefetch.config.json, or defaults if absent."""
    config_path = root / CONFIG_FILE
    if not config_path.exists():
        return CodefetchConfig()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        config = CodefetchConfig(**data)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise InvalidConfigurationError(f"Invalid config file {config_path}: {e}") from e
    config.extensions = normalize_extensions(config.extensions)
    return config


def save_config(root: Path, config: CodefetchConfig) -> None:
    """Save configuration to codefetch.config.json."""
    root.mkdir(parents=True, exist_ok=True)
    config_path = root / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")


def set_config_value(config: CodefetchConfig, key: str, value: Any) -> CodefetchConfig:
    """Set a nested config value using dot notation (e.g., 'cache.enabled')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    if key == "extensions" and isinstance(value, str):
        # Same ".ts,.js" syntax as the -e flag
        value = normalize_extensions(value)
    target[parts[-1]] = value
    try:
        return CodefetchConfig(**data)
    except ValidationError as e:
        raise InvalidConfigurationError(f"Invalid value for {key}: {e}") from e


def ensure_ignore_file(root: Path) -> bool:
    """Create .codefetchignore with the output directory excluded.

    Returns True if the file was created.
    """
    ignore_path = root / IGNORE_FILE
    if ignore_path.exists():
        return False
    ignore_path.write_text(DEFAULT_IGNORE_FILE_CONTENT, encoding="utf-8")
    return True
