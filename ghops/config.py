"""Configuration loading: YAML file, .env and environment overrides."""

import os
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".ghops.yaml"
PUBLIC_HOST = "github.com"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Configuration:
    """Defaults consumed by every command."""
    access_token: Optional[str] = None
    default_owner_name: Optional[str] = None
    default_repository_name: Optional[str] = None
    api_host: str = PUBLIC_HOST
    disable_pipeline_support: bool = False
    default_no_status: bool = False
    log_level: str = "INFO"

    @property
    def web_host(self) -> str:
        return self.api_host

    @property
    def api_base_url(self) -> str:
        if self.api_host == PUBLIC_HOST:
            return "https://api.github.com"
        return f"https://{self.api_host}/api/v3"

    @property
    def decorate_results(self) -> bool:
        return not self.disable_pipeline_support


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def normalize_log_level(value) -> Optional[str]:
    """Upper-case a level name, or None when logging does not know it."""
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return None
    return level


def _apply(config: Configuration, values: dict, source: str) -> None:
    known = {f.name: f for f in fields(config)}
    for key, value in values.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting {key!r} from {source}")
            continue
        if known[key].type in (bool, "bool"):
            value = _as_bool(value)
        elif key == "log_level":
            level = normalize_log_level(value)
            if level is None:
                logger.warning(f"Ignoring unknown log level {value!r} from {source}")
                continue
            value = level
        setattr(config, key, value)


def _from_environment() -> dict:
    values = {}

    repository = os.environ.get("GITHUB_REPOSITORY")
    if repository:
        owner, _, name = repository.partition("/")
        if owner and name:
            values["default_owner_name"] = owner
            values["default_repository_name"] = name
        else:
            logger.warning(f"GITHUB_REPOSITORY should be in owner/name format, got {repository!r}")

    env_map = {
        "GITHUB_TOKEN": "access_token",
        "GHOPS_OWNER": "default_owner_name",
        "GHOPS_REPOSITORY": "default_repository_name",
        "GHOPS_API_HOST": "api_host",
        "GHOPS_DISABLE_PIPELINE_SUPPORT": "disable_pipeline_support",
        "GHOPS_NO_STATUS": "default_no_status",
        "LOG_LEVEL": "log_level",
    }
    for env_name, key in env_map.items():
        value = os.environ.get(env_name)
        if value:
            values[key] = value
    return values


def load_configuration(config_path: Optional[str | Path] = None, use_dotenv: bool = True) -> Configuration:
    """Build the configuration.

    Precedence, lowest first: built-in defaults, the YAML file, then the
    environment (including a ``.env`` file when ``use_dotenv`` is set).
    """
    if use_dotenv:
        load_dotenv()

    config = Configuration()

    path = Path(config_path) if config_path else Path(os.environ.get("GHOPS_CONFIG", DEFAULT_CONFIG_PATH))
    if path.exists():
        with open(path) as f:
            values = yaml.safe_load(f) or {}
        if not isinstance(values, dict):
            logger.warning(f"Config file {path} is not a mapping, using defaults")
        else:
            _apply(config, values, str(path))
            logger.debug(f"Loaded configuration from {path}")
    elif config_path:
        logger.warning(f"Config file not found: {path}, using defaults")

    _apply(config, _from_environment(), "environment")
    return config
