"""Runtime configuration.

Settings come from three layers, highest precedence first:

1. ``AGENTNAV_*`` environment variables
2. an optional YAML file (``AGENTNAV_CONFIG``, else ``<data_dir>/config.yaml``)
3. built-in defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

ENV_PREFIX = "AGENTNAV_"
DEFAULT_PASSWORD = "default_password"
BUNDLED_DATASET = Path(__file__).resolve().parent.parent / "data" / "navigation.json"


@dataclass
class Settings:
    """Resolved application settings."""

    data_dir: Path = field(default_factory=lambda: Path.home() / ".agentnav")
    bundled_source: str = str(BUNDLED_DATASET)
    admin_password: str = DEFAULT_PASSWORD
    token_expiry_hours: float = 24
    log_level: str = "WARNING"
    log_format: str = "console"  # console | json

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir).expanduser()
        self.token_expiry_hours = float(self.token_expiry_hours)
        self.log_level = str(self.log_level).upper()
        if self.log_format not in ("console", "json"):
            raise ValueError(f"Invalid log_format '{self.log_format}'. Must be 'console' or 'json'")
        if self.token_expiry_hours <= 0:
            raise ValueError("token_expiry_hours must be positive")

    @property
    def storage_dir(self) -> Path:
        return self.data_dir / "storage"

    @property
    def password_configured(self) -> bool:
        return self.admin_password != DEFAULT_PASSWORD


def _field_names() -> set[str]:
    return {f.name for f in fields(Settings)}


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load settings overrides from a YAML file. Unknown keys are rejected."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    unknown = set(data) - _field_names()
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides = {}
    for name in _field_names():
        value = environ.get(ENV_PREFIX + name.upper())
        if value is not None and value != "":
            overrides[name] = value
    return overrides


def get_settings(
    environ: Optional[Mapping[str, str]] = None,
    data_dir: Optional[str | Path] = None,
) -> Settings:
    """Resolve settings from defaults, the YAML config file, and the environment.

    ``data_dir`` (from the CLI) overrides every other source for that field.
    """
    if environ is None:
        environ = os.environ

    env = _env_overrides(environ)
    if data_dir is not None:
        env["data_dir"] = data_dir

    base = Settings(**{k: v for k, v in env.items() if k == "data_dir"})

    config_path = environ.get(ENV_PREFIX + "CONFIG")
    candidate = Path(config_path) if config_path else base.data_dir / "config.yaml"
    file_values: dict[str, Any] = {}
    if config_path or candidate.exists():
        file_values = load_config_file(candidate)
        if "data_dir" in env:
            file_values.pop("data_dir", None)

    return replace(base, **{**file_values, **env})
