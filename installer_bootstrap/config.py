from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logging_utils import DEFAULT_LOG_PATH

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def resources_dir(self) -> Optional[str]:
        value = self.raw.get("resources_dir")
        return str(value) if value else None

    @property
    def conditions(self) -> Dict[str, bool]:
        raw = self.raw.get("conditions") or {}
        if not isinstance(raw, dict):
            raise ValueError("conditions must be a mapping of condition id to boolean")
        return {str(k): parse_bool(v) for k, v in raw.items()}

    @property
    def log_path(self) -> str:
        return str(self.raw.get("log_path") or DEFAULT_LOG_PATH)

    @property
    def summary_path(self) -> Optional[str]:
        value = self.raw.get("summary_path")
        return str(value) if value else None


def load_bootstrap_config(path: Optional[str]) -> BootstrapConfig:
    if not path:
        return BootstrapConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return BootstrapConfig(raw=raw)
