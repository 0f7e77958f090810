"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.splicer.runtime.config.config_data import ConfigData
from src.splicer.runtime.config.settings import EnvironmentVariables

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match[str]) -> str:
        var_expr = match.group(1)

        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        if ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        value = os.getenv(var_expr)
        if value is None:
            raise ValueError(f"Required environment variable {var_expr} not set")
        return value

    return _PLACEHOLDER.sub(replacer, text)


def _promote_environment_overrides(env_mode: str) -> None:
    """Re-export ``<ENV>_NAME`` variables as ``NAME`` for the active environment."""
    prefix = f"{env_mode.upper()}_"
    overrides = [(var, value) for var, value in os.environ.items() if var.startswith(prefix)]
    if overrides:
        logger.info(
            "Applying environment-specific overrides: {}", [name for name, _ in overrides]
        )

    for var_name, var_value in overrides:
        os.environ[var_name[len(prefix):]] = var_value


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed and validated configuration

    Raises:
        ValueError: If required environment variables are missing or the file is invalid
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    env = EnvironmentVariables()
    logger.info("Loading configuration for environment: {}", env.environment)
    _promote_environment_overrides(env.environment)

    substituted_content = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted_content)
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    config_data = loaded.get("config", {}) or {}
    app_section = config_data.setdefault("app", {}) or {}
    app_section.setdefault("environment", env.environment)
    config_data["app"] = app_section

    try:
        config = ConfigData(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    if env.log_level:
        config.logging.level = env.log_level.upper()

    return config


def load_config() -> ConfigData:
    """Load the configuration file named by ``CONFIG_FILE``, or defaults if absent."""
    env = EnvironmentVariables()
    path = Path(env.config_file)
    if not path.exists():
        logger.warning("Configuration file {} not found; using defaults", path)
        return ConfigData.model_validate({"app": {"environment": env.environment}})
    return load_templated_yaml(path)
