"""LoaderConfig describes where plugins live and how they are loaded."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from typing import Dict, List, Optional

from errors import ConfigError

DEFAULT_NAMESPACE = "ProxyLoader"
DEFAULT_EXTENSIONS = [".py", ".pyc"]
HOME_ENV = "PROXY_LOADER_HOME"


def expand_path(path: str) -> str:
    return os.path.abspath(os.path.expandvars(os.path.expanduser(path)))


def default_locations() -> List[str]:
    base = os.environ.get(HOME_ENV) or os.path.join("~", "Plugins")
    return [expand_path(base)]


@dataclass
class LoaderConfig:
    namespace: str = DEFAULT_NAMESPACE
    locations: List[str] = field(default_factory=default_locations)
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    sort_files: bool = True
    preload: List[str] = field(default_factory=list)
    settings_path: Optional[str] = None
    show_stats: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.locations = [expand_path(p) for p in self.locations]
        if any(not e.strip().lstrip(".") for e in self.extensions):
            raise ConfigError(f"empty entry in 'extensions': {self.extensions!r}")
        self.extensions = [e.lower() if e.startswith(".") else f".{e.lower()}" for e in self.extensions]
        if self.settings_path:
            self.settings_path = expand_path(self.settings_path)

    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Dict) -> "LoaderConfig":
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict = {}
        for key, value in data.items():
            if key not in known:
                continue
            if key in ("locations", "extensions", "preload"):
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"'{key}' must be a list of strings")
            elif key in ("sort_files", "show_stats"):
                if not isinstance(value, bool):
                    raise ConfigError(f"'{key}' must be true or false")
            elif key == "settings_path":
                if value is not None and not isinstance(value, str):
                    raise ConfigError("'settings_path' must be a string")
            elif not isinstance(value, str):
                raise ConfigError(f"'{key}' must be a string")
            kwargs[key] = value
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str) -> "LoaderConfig":
        if not os.path.isfile(path):
            raise ConfigError(f"configuration file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"cannot read {path}: {exc}") from exc
        return cls.from_dict(data)

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)
