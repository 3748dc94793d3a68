"""Configuration loading for changegen (.changegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".changegen.yml"
DEFAULT_OUTPUT = "CHANGELOG.md"
DEFAULT_REMOTE = "origin"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ChangegenConfig:
    """Represents the settings defined in .changegen.yml."""

    root: Path
    output: str = DEFAULT_OUTPUT
    url: Optional[str] = None
    follow: List[str] = field(default_factory=list)
    remote: str = DEFAULT_REMOTE

    @property
    def output_path(self) -> Path:
        path = Path(self.output).expanduser()
        return path if path.is_absolute() else self.root / path


def load_config(config_path: Path) -> ChangegenConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ChangegenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    url = _as_str(data.get("url"))
    if url:
        url = url.rstrip("/")

    return ChangegenConfig(
        root=root,
        output=_as_str(data.get("output")) or DEFAULT_OUTPUT,
        url=url or None,
        follow=_as_str_list(data.get("follow")),
        remote=_as_str(data.get("remote")) or DEFAULT_REMOTE,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ChangegenConfig", "ConfigError", "load_config"]
