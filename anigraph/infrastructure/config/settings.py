"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.anigraph/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from anigraph.version import __version__

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".anigraph"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "ANIGRAPH_"

DEFAULT_API_URL = "https://graphql.anilist.co"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RATE_LIMIT_BUFFER_SECONDS = 0.5

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # Overrides set through set_config
_loaded = False

def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ('api': {'url': x} -> 'api.url')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat

def _env_key(key: str) -> str:
    return ENV_PREFIX + key.upper().replace(".", "_")

def _coerce(value: str) -> Any:
    """Converts common string forms from the environment to Python types."""
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value

def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Values set with set_config
    2. Environment Variables (ANIGRAPH_ prefix, dots become underscores)
    3. .env file
    4. YAML configuration file
    5. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    _loaded = True
    logger.info("Configuration loading process completed.")

def reset_configuration() -> None:
    """Forgets loaded values and overrides so configuration can be reloaded."""
    global _config, _test_config, _loaded
    _config = {}
    _test_config = {}
    _loaded = False

def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value by dotted key (e.g. 'api.max_attempts').

    Priority:
    1. Overrides from set_config
    2. Environment variable (ANIGRAPH_API_MAX_ATTEMPTS)
    3. YAML config
    4. Default value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = _env_key(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default

def set_config(key: str, value: Any) -> None:
    """Overrides a configuration value for the rest of the process.

    Args:
        key: Configuration key (e.g., 'logging.level')
        value: Value to set
    """
    logger.debug(f"Setting config: {key} = {value}")
    _test_config[key] = value

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        if value.lower() in ('true', '1', 'yes'):
            return True
        if value.lower() in ('false', '0', 'no'):
            return False
        logger.warning(f"Unexpected boolean config value: '{value}'. Defaulting to {default}.")
        return default
    return bool(value)

def get_api_url() -> str:
    return str(get_config('api.url', DEFAULT_API_URL))

def get_timeout_seconds() -> float:
    return float(get_config('http.timeout_seconds', DEFAULT_TIMEOUT_SECONDS))

def get_user_agent() -> str:
    return str(get_config('http.user_agent', f"anigraph/{__version__}"))

def get_max_attempts() -> int:
    attempts = int(get_config('api.max_attempts', DEFAULT_MAX_ATTEMPTS))
    if attempts < 1:
        logger.warning(f"api.max_attempts={attempts} is invalid. Using {DEFAULT_MAX_ATTEMPTS}.")
        return DEFAULT_MAX_ATTEMPTS
    return attempts

def get_rate_limit_buffer_seconds() -> float:
    return float(get_config('api.rate_limit_buffer_seconds', DEFAULT_RATE_LIMIT_BUFFER_SECONDS))

def get_raise_on_exhausted() -> bool:
    """Whether retry exhaustion raises instead of resolving to an absent result."""
    return _as_bool(get_config('api.raise_on_exhausted'), False)

def get_log_level() -> int:
    name = str(get_config('logging.level', 'WARNING')).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING

def get_log_file() -> Optional[str]:
    log_file = get_config('logging.file')
    return str(log_file) if log_file else None
