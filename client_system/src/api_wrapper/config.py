"""
config.py

Configuration helpers for the API wrapper.

Loading: endpoint configuration files (YAML or JSON) are parsed and
    validated into APIInfo models. The file layout follows the APIInfo
    field aliases, e.g.

        apiBaseUrl: https://api.example.com/
        headers: {Authorization: Bearer ...}
        endpoints:
          - {name: getPage, path: "pages/:pageId", method: GET}
        defaultParams:
          getPage: {params: {pageId: home}}

Defaults: the retry budget and request-logging flag resolve late, in order
    1) programmatic default if set
    2) environment variable (API_WRAPPER_MAX_RETRIES / API_WRAPPER_LOG_REQUESTS)
    3) built-in fallback (5 retries / logging off)
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .data_structure.models import APIInfo
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5
_MAX_RETRIES: Optional[int] = None
_TRUTHY = {"1", "true", "yes", "on"}


def set_default_max_retries(n: Optional[int]) -> None:
    """
    Programmatically set the default retry budget (overrides env).
    Pass None to go back to env/fallback resolution.
    """
    global _MAX_RETRIES
    if n is not None and (not isinstance(n, int) or n < 0):
        raise ValueError(f"max retries must be a non-negative integer, got {n}")
    _MAX_RETRIES = n


def get_default_max_retries() -> int:
    """Resolve the default retry budget from programmatic set, env, or fallback."""
    if _MAX_RETRIES is not None:
        return _MAX_RETRIES
    env_val = os.environ.get("API_WRAPPER_MAX_RETRIES")
    if env_val:
        try:
            n = int(env_val)
            if n >= 0:
                return n
        except ValueError:
            pass
        logger.warning(
            f"Ignoring invalid API_WRAPPER_MAX_RETRIES={env_val!r}; "
            f"using default {DEFAULT_MAX_RETRIES}"
        )
    return DEFAULT_MAX_RETRIES


def get_default_log_requests() -> bool:
    env_val = os.environ.get("API_WRAPPER_LOG_REQUESTS", "")
    return env_val.strip().lower() in _TRUTHY


def _read_config_file(path: str | Path) -> Any:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e


def parse_api_info(data: Any, source: str = "<config>") -> APIInfo:
    """Validate an already-loaded mapping into an APIInfo."""
    if not isinstance(data, dict):
        raise ConfigError(
            f"{source}: expected a mapping at the top level, "
            f"got {type(data).__name__}"
        )
    try:
        return APIInfo.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{source}: invalid API configuration\n{e}") from e


def load_api_info(path: str | Path) -> APIInfo:
    """Load and validate a single API configuration file (.yml/.yaml/.json)."""
    return parse_api_info(_read_config_file(path), source=str(path))


def load_registry_config(path: str | Path) -> Dict[str, APIInfo]:
    """
    Load a file holding several APIs keyed by API name, e.g.

        default: {apiBaseUrl: ..., endpoints: [...]}
        billing: {apiBaseUrl: ..., endpoints: [...]}
    """
    data = _read_config_file(path)
    if not isinstance(data, dict) or not data:
        raise ConfigError(
            f"{path}: expected a non-empty mapping of API name to configuration"
        )
    return {
        str(name): parse_api_info(cfg, source=f"{path}:{name}")
        for name, cfg in data.items()
    }
