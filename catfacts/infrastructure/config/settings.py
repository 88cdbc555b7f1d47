"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (~/.catfacts/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".catfacts"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "CATFACTS_"

DEFAULTS: Dict[str, Any] = {
    'catfact.base_url': "https://catfact.ninja/",
    'catfact.path': "fact",
    'service.max_attempts': 5,
    'service.backoff_ms': 300,
    'client.retry_count': 5,
    'client.retry_delay_ms': 500,
    'client.timeout_seconds': 10.0,
    'fault.failure_rate': 0.5,
    'logging.level': "INFO",
    'logging.format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False

def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ({'a': {'b': 1}} -> {'a.b': 1})."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{full_key}."))
        else:
            flat[full_key] = value
    return flat

def env_var_name(key: str) -> str:
    """Environment variable consulted for a config key ('client.retry_count' -> 'CATFACTS_CLIENT_RETRY_COUNT')."""
    return ENV_PREFIX + key.upper().replace('.', '_')

def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. DEFAULTS

    Args:
        config_file: Path to the YAML configuration file (DEFAULT_CONFIG_FILE if None).
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. Load from YAML file (Lowest priority)
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

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False): # override=False: ENV VARS take precedence
            logger.info(f"Loaded environment variables from: {dotenv_path}")
        else:
            logger.debug(f"No variables loaded from {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (path not found).")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.info("Configuration loading process completed.")

def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() reads again."""
    global _config, _loaded
    _config = {}
    _loaded = False

def _coerce(value: str) -> Any:
    """Converts common string forms from the environment to bool/int/float."""
    if value.lower() == 'true':
        return True
    elif value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        else:
            return int(value)
    except (ValueError, TypeError):
        return value

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration
    2. Environment variable (CATFACTS_<KEY>)
    3. YAML config
    4. DEFAULTS, then the `default` argument

    Args:
        key: The dotted configuration key
        default: Value returned when the key is found nowhere

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    if default is None and key in DEFAULTS:
        return DEFAULTS[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def _int_at_least(key: str, minimum: int) -> int:
    raw = get_config(key)
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValueError(f"Config '{key}' must be an integer, got {raw!r}")
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Config '{key}' must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"Config '{key}' must be >= {minimum}, got {value}")
    return value

def _non_negative_float(key: str) -> float:
    value = float(get_config(key))
    if value < 0:
        raise ValueError(f"Config '{key}' must be non-negative, got {value}")
    return value

def get_base_url() -> str:
    """Base address of the cat fact endpoint."""
    return str(get_config('catfact.base_url'))

def get_fact_path() -> str:
    return str(get_config('catfact.path'))

def get_service_max_attempts() -> int:
    """Total attempts (first one included) made by the service-level retry policy."""
    return _int_at_least('service.max_attempts', 1)

def get_service_backoff_seconds() -> float:
    """Linear backoff unit of the service-level retry policy, in seconds."""
    return _non_negative_float('service.backoff_ms') / 1000.0

def get_client_retry_count() -> int:
    """Retries (after the first try) made by the HTTP client for transient errors."""
    return _int_at_least('client.retry_count', 0)

def get_client_retry_delay_seconds() -> float:
    return _non_negative_float('client.retry_delay_ms') / 1000.0

def get_client_timeout_seconds() -> float:
    return _non_negative_float('client.timeout_seconds')

def get_failure_rate() -> float:
    """Probability that the demo injects a simulated transient failure."""
    rate = float(get_config('fault.failure_rate'))
    if not 0.0 <= rate <= 1.0:
        raise ValueError(f"Config 'fault.failure_rate' must be between 0 and 1, got {rate}")
    return rate

def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")

def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
