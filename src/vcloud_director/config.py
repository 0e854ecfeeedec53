"""Connection settings for the vCloud Director client."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, Field

DEBUG_ENV_VAR = "VCLOUD_API_DEBUG"
CONFIG_PATH_ENV_VAR = "VCLOUD_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "conf/vcloud.yml"

_REQUIRED_KEYS = ("HOSTNAME", "USERNAME", "PASSWORD")


def _debug_from_env() -> bool:
    value = os.environ.get(DEBUG_ENV_VAR, "").strip()
    if not value:
        return False
    try:
        return float(value) != 0
    except ValueError:
        return True


def _resolve_config_location(spec: Path | str, *, source: str) -> Path:
    raw = Path(spec).expanduser()
    location = raw if raw.is_absolute() else Path.cwd() / raw
    if not location.exists():
        raise FileNotFoundError(f"Settings file not found for {source}: {location}")
    return location.resolve()


def _load_normalized(location: Path) -> dict[str, Any]:
    config = OmegaConf.to_container(OmegaConf.load(location), resolve=True)
    if not isinstance(config, dict):
        raise ValueError("Settings file must contain a mapping of setting keys.")
    normalized: dict[str, Any] = {}
    for key, value in config.items():
        name = str(key).upper()
        normalized[name.removeprefix("VCLOUD_")] = value
    return normalized


class Settings(BaseModel):
    """Validated vCloud Director connection settings."""

    hostname: str = Field(
        min_length=1,
        description="Hostname of the vCloud server (https on port 443)",
        examples=["vcloud.example.com"],
    )
    username: str = Field(min_length=1, description="User to log in as")
    password: str = Field(min_length=1, description="Password for the user")
    orgname: str = Field("System", min_length=1, description="Organisation to log in to")
    timeout: float = Field(120.0, gt=0, description="Per-request timeout in seconds")
    ssl_verify: bool = Field(True, description="Verify the server TLS certificate")
    ssl_ca_file: Path | None = Field(None, description="CA bundle used for verification")
    api_version: str = Field("31.0", pattern=r"^\d+\.\d+$")
    debug: bool = Field(default_factory=_debug_from_env)
    trace_directory: Path | None = Field(
        None, description="Directory receiving one file per request/response exchange"
    )

    @property
    def base_url(self) -> str:
        return f"https://{self.hostname}"

    @property
    def login_name(self) -> str:
        return f"{self.username}@{self.orgname}"

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> Settings:
        """Create settings from a YAML file, ``conf/vcloud.yml`` by default."""
        env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
        if env_path:
            location = _resolve_config_location(env_path, source=CONFIG_PATH_ENV_VAR)
        elif path is not None:
            location = _resolve_config_location(path, source="path")
        else:
            location = _resolve_config_location(DEFAULT_CONFIG_PATH, source="default")

        normalized = _load_normalized(location)
        missing = [key for key in _REQUIRED_KEYS if not normalized.get(key)]
        if missing:
            raise ValueError(f"Missing vCloud settings: {', '.join(missing)}")
        fields = {
            key.lower(): value
            for key, value in normalized.items()
            if key.lower() in cls.model_fields and value is not None
        }
        return cls(**fields)
