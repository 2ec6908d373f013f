"""Configuration loading and validation for edgebridge.

Configuration comes from the EDGEBRIDGE_CONFIG environment variable (a JSON
document written by the deployment pipeline) or, for local runs, from
config.yaml.
"""

import json
import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from core.config_schema import BridgeConfig
from core.logging_utils import is_debug_enabled

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EDGEBRIDGE_CONFIG"


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


def validate_config_structure(config: Any) -> BridgeConfig:
    """Validate a parsed configuration document.

    Args:
        config: Parsed configuration (from YAML or JSON)

    Returns:
        Validated configuration model

    Raises:
        ConfigurationError: If structure is invalid
    """
    if not isinstance(config, dict):
        raise ConfigurationError("Configuration must be a dictionary")

    if "app" not in config:
        raise ConfigurationError(
            "Configuration missing 'app' entry. "
            "Point it at your ASGI application, e.g. app: \"myproject.asgi:app\"."
        )

    try:
        return BridgeConfig.model_validate(config)
    except ValidationError as e:
        problems = "\n".join(
            f"  • {'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration:\n{problems}") from e


def load_and_validate_config(config_path: str = "config.yaml") -> BridgeConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated configuration model

    Raises:
        ConfigurationError: If validation fails
        FileNotFoundError: If config file doesn't exist
    """
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            "Create config.yaml based on the template in the repository."
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")

    if config is None:
        raise ConfigurationError(f"Configuration file {config_path} is empty")

    validated = validate_config_structure(config)
    logger.info(f"Configuration validated: serving {validated.app}")
    return validated


def load_config(
    config_path: str = "config.yaml", environ: Optional[Mapping[str, str]] = None
) -> BridgeConfig:
    """Load configuration from the environment, falling back to config.yaml.

    Raises:
        ConfigurationError: If the configuration is invalid
        FileNotFoundError: If neither source is available
    """
    environ = os.environ if environ is None else environ

    config_json = environ.get(CONFIG_ENV_VAR)
    if config_json:
        try:
            config = json.loads(config_json)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {CONFIG_ENV_VAR}: {e}") from e
        logger.info("Loaded configuration from environment variable")
        return validate_config_structure(config)

    return load_and_validate_config(config_path)


def get_logging_config(config: BridgeConfig, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Get logging configuration, honouring the DEBUG flag.

    Args:
        config: Validated configuration

    Returns:
        Dictionary with 'level' and 'pretty'
    """
    level = "DEBUG" if is_debug_enabled(environ) else config.logging.level
    return {"level": level, "pretty": config.logging.pretty}
