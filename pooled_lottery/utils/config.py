"""
Configuration Management
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from pooled_lottery.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = Path(__file__).parent.parent.parent / "config" / "lottery.conf"

DEFAULT_CONFIG: Dict[str, Any] = {
    "chain": {
        "genesis_timestamp_ms": 1_700_000_000_000,
        "block_time_ms": 6000,
        "minimum_balance": 0,
    },
    "lottery": {
        "init_value": False,
    },
    "storage": {
        "directory": "",
    },
    "events": {
        "capacity": 1000,
    },
}

# Environment prefixes mapped to config sections
_ENV_SECTIONS = {
    "CHAIN_": "chain",
    "LOTTERY_": "lottery",
    "STORAGE_": "storage",
    "EVENTS_": "events",
}


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from defaults, a JSON file and environment variables"""
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config file {config_path}: {e}")
        else:
            _merge(config, file_config)
            logger.info(f"Loaded configuration from {config_path}")
    else:
        logger.debug(f"Config file {config_path} not found. Using defaults and environment variables.")

    # .env in the working directory feeds the environment overrides below
    load_dotenv()
    config = _apply_env_overrides(config)

    logger.debug(f"Configuration after applying environment overrides: {json.dumps(config, indent=2)}")
    return config


def _merge(config: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for section, values in overrides.items():
        if section in config and isinstance(config[section], dict) and isinstance(values, dict):
            config[section].update(values)
        else:
            config[section] = values


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration"""
    for key, value in os.environ.items():
        for prefix, section in _ENV_SECTIONS.items():
            if key.startswith(prefix):
                name = key[len(prefix):].lower()
                default = DEFAULT_CONFIG.get(section, {}).get(name)
                config.setdefault(section, {})[name] = _coerce(value, default)
                break

    return config


def _coerce(value: str, default: Any) -> Any:
    """Convert an env string to the type of the built-in default; other keys stay strings."""
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value.strip())
        except ValueError:
            logger.warning(f"Ignoring non-integer value {value!r} for numeric setting")
            return default
    return value


def save_config(config: Dict[str, Any], config_file: Optional[str] = None):
    """Save configuration to file"""
    config_path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")


def get_config_value(config: Dict[str, Any], key_path: str, default=None):
    """Get configuration value by dot-separated key path"""
    keys = key_path.split('.')
    value = config

    try:
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError):
        return default
