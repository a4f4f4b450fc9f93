"""Configuration loading for the SleepIQ bed position tool."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .const import CONF_PASSWORD, CONF_POLL_INTERVAL, CONF_POLL_MAX, CONF_USERNAME, CONFIG_KEYS
from .exceptions import ConfigError
from .models import Configuration
from .redaction import redact_data
from .validators import validate_config_data

_LOGGER = logging.getLogger(__name__)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as err:
        raise ConfigError(f"error reading config file {path}, {err}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"error parsing config file {path}, {err}") from err

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a YAML mapping at the root")
    return data


def apply_env_overrides(
    data: dict[str, Any], environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Override configuration keys from the environment.

    A variable named exactly as the key wins over its upper-cased form
    (``SleepIQPassword`` over ``SLEEPIQPASSWORD``). Empty variables are ignored.
    """
    env = os.environ if environ is None else environ
    merged = dict(data)
    for key in CONFIG_KEYS:
        for env_name in (key, key.upper()):
            value = env.get(env_name)
            if value:
                _LOGGER.debug("Configuration key %s overridden by environment variable %s", key, env_name)
                merged[key] = value
                break
    return merged


def load_configuration(
    path: str | os.PathLike[str], environ: Mapping[str, str] | None = None
) -> Configuration:
    """Load and validate the configuration file.

    Raises:
        ConfigError: The file cannot be read or parsed, or a value is invalid.
    """
    config_path = Path(path)
    data = apply_env_overrides(_read_yaml(config_path), environ)
    _LOGGER.debug("Loaded configuration from %s: %s", config_path, redact_data(data))

    values = validate_config_data(data)
    return Configuration(
        username=values[CONF_USERNAME],
        password=values[CONF_PASSWORD],
        poll_interval=values[CONF_POLL_INTERVAL],
        poll_max=values[CONF_POLL_MAX],
    )
