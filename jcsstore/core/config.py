"""
jcsstore/core/config.py

Store configuration.

Precedence, lowest first:
    1. Defaults below
    2. YAML file            — StoreConfig.from_yaml(path)
    3. Environment          — JCSSTORE_ROOT, JCSSTORE_FSYNC, JCSSTORE_LOG_LEVEL
    4. Explicit arguments   — CLI options, applied by the caller via replace()
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_ROOT = ".jcsstore"

_TRUE  = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(raw: Any, name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{name}: expected a boolean, got {raw!r}")


def _parse_level(raw: Any, name: str) -> str:
    level = str(raw).strip().upper()
    # getLevelName maps known names to ints and anything else to a string
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name}: unknown log level {raw!r}")
    return level


@dataclass(frozen=True)
class StoreConfig:
    root:      Path = Path(DEFAULT_ROOT)
    fsync:     bool = True
    log_level: str  = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        known   = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        config = cls()
        if "root" in data:
            config = replace(config, root=Path(data["root"]))
        if "fsync" in data:
            config = replace(config, fsync=_parse_bool(data["fsync"], "fsync"))
        if "log_level" in data:
            config = replace(
                config, log_level=_parse_level(data["log_level"], "log_level")
            )
        return config

    @classmethod
    def from_yaml(cls, config_file: Path) -> "StoreConfig":
        """Load config from a YAML file. An empty file yields the defaults."""
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{config_file}: top level must be a mapping")
        return cls.from_dict(data)

    def with_env(self, environ: Optional[Dict[str, str]] = None) -> "StoreConfig":
        """Overlay JCSSTORE_* environment variables."""
        environ = os.environ if environ is None else environ
        config  = self
        if environ.get("JCSSTORE_ROOT"):
            config = replace(config, root=Path(environ["JCSSTORE_ROOT"]))
        if environ.get("JCSSTORE_FSYNC"):
            config = replace(
                config,
                fsync=_parse_bool(environ["JCSSTORE_FSYNC"], "JCSSTORE_FSYNC"),
            )
        if environ.get("JCSSTORE_LOG_LEVEL"):
            config = replace(
                config,
                log_level=_parse_level(
                    environ["JCSSTORE_LOG_LEVEL"], "JCSSTORE_LOG_LEVEL"
                ),
            )
        return config

    @classmethod
    def load(
        cls,
        config_file: Optional[Path] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> "StoreConfig":
        base = cls.from_yaml(config_file) if config_file else cls()
        return base.with_env(environ)
