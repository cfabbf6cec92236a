"""Configuration loading for docsync (.docsync.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".docsync.yml"

SOURCE_EXTENSION = ".java"
DEFAULT_DEBOUNCE_SECONDS = 0.15
DEFAULT_SOURCE_ROOT = Path("..") / "src" / "main" / "java"
DEFAULT_OUTPUT_ROOT = Path("src") / "content" / "reference"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4322


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ServiceConfig:
    """Dev server bind settings."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class SyncConfig:
    """Represents the settings defined in .docsync.yml."""

    root: Path
    source_root: Path
    output_root: Path
    exclude_paths: List[str] = field(default_factory=list)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    extension: str = SOURCE_EXTENSION

    @classmethod
    def defaults(cls, root: Path) -> "SyncConfig":
        root = root.resolve()
        return cls(
            root=root,
            source_root=(root / DEFAULT_SOURCE_ROOT).resolve(),
            output_root=(root / DEFAULT_OUTPUT_ROOT).resolve(),
        )


def load_config(config_path: Path) -> SyncConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    config = SyncConfig.defaults(root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_root = _as_str(data.get("source_root"))
    if source_root:
        config.source_root = (root / source_root).resolve()

    output_root = _as_str(data.get("output_root"))
    if output_root:
        config.output_root = (root / output_root).resolve()

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    service_data = _as_dict(data.get("service"))
    if service_data:
        host = _as_str(service_data.get("host"))
        port = _as_int(service_data.get("port"))
        config.service = ServiceConfig(
            host=host or DEFAULT_HOST,
            port=port if port is not None else DEFAULT_PORT,
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
