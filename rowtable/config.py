from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, field_validator


class AppConfig(BaseModel):
    """Typed configuration loaded from YAML or environment."""

    model_config = ConfigDict(validate_assignment=True)

    LOG_LEVEL: str = "INFO"
    # Raise NoFormatterConfigured instead of falling back to ``str()``
    STRICT_FORMATTERS: bool = False
    # "deep" merges repeated column_format declarations, "shallow" replaces
    MERGE_POLICY: str = "deep"
    EXCLUDE_COLUMNS: List[str] = [
        "id",
        "updated_at",
        "created_at",
        "updated_on",
        "created_on",
    ]
    EXCLUDE_FOREIGN_KEYS: bool = True
    FOREIGN_KEY_SUFFIX: str = "_id"
    ODD_ROW_CLASS: str = "odd"
    EVEN_ROW_CLASS: str = "even"
    TOTALS: bool = True

    @field_validator("MERGE_POLICY")
    @classmethod
    def _known_policy(cls, value: str) -> str:
        value = str(value).strip().lower()
        if value not in {"deep", "shallow"}:
            raise ValueError("MERGE_POLICY must be 'deep' or 'shallow'")
        return value


def _load_env(path: Path) -> Dict[str, Any]:
    """Parse simple KEY=VALUE lines from an .env file."""
    data: Dict[str, Any] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            key, val = line.split("=", 1)
            data[key.strip()] = val.strip()
    return data


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load configuration from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        content = yaml.safe_load(f)
    return content or {}


def load_config() -> AppConfig:
    """Load configuration from the ``ROWTABLE_CONFIG`` file, YAML or .env."""
    config_path = os.environ.get("ROWTABLE_CONFIG")
    if config_path:
        path: Path | None = Path(config_path)
    else:
        base = Path.cwd()
        candidates = [
            base / "rowtable.yaml",
            base / "rowtable.yml",
            base / ".env",
        ]
        path = next((p for p in candidates if p.exists()), None)

    data: Dict[str, Any] = {}
    if path and path.exists():
        if path.suffix in {".yaml", ".yml"}:
            data = _load_yaml(path)
        else:
            data = _load_env(path)

    known = AppConfig.model_fields
    cfg = {**AppConfig().model_dump(), **{k: v for k, v in data.items() if k in known}}
    if isinstance(cfg.get("EXCLUDE_COLUMNS"), str):
        cfg["EXCLUDE_COLUMNS"] = [
            c.strip() for c in cfg["EXCLUDE_COLUMNS"].split(",") if c.strip()
        ]
    return AppConfig(**cfg)


CONFIG = load_config()
LOCK = threading.Lock()


def get(name: str, default: Any | None = None) -> Any:
    """Return configuration value for name with optional fallback."""
    with LOCK:
        return getattr(CONFIG, name, default)


def reload() -> None:
    """Reload configuration from disk into the global CONFIG object."""
    global CONFIG
    with LOCK:
        CONFIG = load_config()


def update(values: Dict[str, Any]) -> None:
    """Update global configuration in memory with the given key/value pairs."""
    with LOCK:
        for key, val in values.items():
            if hasattr(CONFIG, key):
                setattr(CONFIG, key, val)
