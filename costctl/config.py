"""
CLI configuration stored as TOML.

Lookup order for the file: explicit path, ``$COSTCTL_CONFIG``, then
``~/.costctl/config.toml``. ``COSTCTL_API_KEY`` and ``COSTCTL_BASE_URL``
override stored values without being written back.
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://cost-katana-backend.store"
DEFAULT_CONFIG_PATH = Path.home() / ".costctl" / "config.toml"

ENV_CONFIG_PATH = "COSTCTL_CONFIG"
ENV_OVERRIDES = {
    "api_key": "COSTCTL_API_KEY",
    "base_url": "COSTCTL_BASE_URL",
}


class ConfigurationError(Exception):
    """Required settings are missing."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(
            f"Configuration incomplete ({', '.join(missing)} not set). "
            'Run "costctl init" to set up your API key and base URL.'
        )


@dataclass
class CLIConfig:
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    project_name: str = "My AI Project"
    current_project: Optional[str] = None
    output_format: str = "table"
    debug_mode: bool = False

    @classmethod
    def keys(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CLIConfig":
        known = {k: v for k, v in data.items() if k in cls.keys()}
        unknown = sorted(set(data) - set(known))
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        # TOML has no null
        return {k: v for k, v in asdict(self).items() if v is not None}


def _coerce(key: str, value: str) -> Any:
    default = CLIConfig.__dataclass_fields__[key].default
    if isinstance(default, bool):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"{key} expects a boolean, got {value!r}")
    return value


class ConfigManager:
    """Loads and saves the CLI configuration file."""

    def __init__(self, path: Optional[Path] = None):
        env_path = os.environ.get(ENV_CONFIG_PATH)
        self.path = Path(path or env_path or DEFAULT_CONFIG_PATH).expanduser()
        self._config = self._load()

    def _load(self) -> CLIConfig:
        if not self.path.exists():
            logger.debug("No config file at %s, using defaults", self.path)
            return CLIConfig()
        with open(self.path) as f:
            data = toml.load(f)
        logger.debug("Loaded config from %s", self.path)
        return CLIConfig.from_dict(data)

    @property
    def config(self) -> CLIConfig:
        """Stored values with environment overrides applied."""
        data = asdict(self._config)
        for key, env_var in ENV_OVERRIDES.items():
            if os.environ.get(env_var):
                data[key] = os.environ[env_var]
        return CLIConfig(**data)

    def get(self, key: str) -> Any:
        if key not in CLIConfig.keys():
            raise KeyError(key)
        return getattr(self.config, key)

    def set(self, key: str, value: Any) -> None:
        if key not in CLIConfig.keys():
            raise KeyError(key)
        if isinstance(value, str):
            value = _coerce(key, value)
        setattr(self._config, key, value)
        self.save()
        logger.debug("Configuration updated: %s", key)

    def unset(self, key: str) -> None:
        if key not in CLIConfig.keys():
            raise KeyError(key)
        setattr(self._config, key, CLIConfig.__dataclass_fields__[key].default)
        self.save()

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            toml.dump(self._config.to_dict(), f)

    def require_api(self) -> CLIConfig:
        """Return the effective config, raising if API access is not configured."""
        config = self.config
        missing = []
        if not config.api_key:
            missing.append("api_key")
        if not config.base_url:
            missing.append("base_url")
        if missing:
            raise ConfigurationError(missing)
        return config
