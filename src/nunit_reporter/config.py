"""
Configuration management for the NUnit reporter.
"""

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Module-level lock for thread-safe config loading
_config_lock = threading.Lock()

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


@dataclass
class ReporterConfig:
    """Main configuration for the NUnit reporter."""

    # Where the XML report is written, relative to root_dir
    output_path: str = "./test-report.xml"
    # Package root; test file paths in session names are made relative to it.
    # Defaults to the current working directory.
    root_dir: Optional[str] = None
    # Value of the root element's name attribute
    report_name: str = ""
    # Accepted for compatibility with the browser reporter options; the
    # NUnit 2 schema has no element for captured logs.
    report_logs: bool = False

    def resolved_root_dir(self) -> Path:
        """Return root_dir as an absolute path."""
        return Path(self.root_dir or os.getcwd()).resolve()

    def resolved_output_path(self) -> Path:
        """Return output_path resolved against root_dir."""
        return self.resolved_root_dir() / self.output_path


def _parse_env_bool(var_name: str) -> Optional[bool]:
    """
    Safely parse a boolean from an environment variable.

    Args:
        var_name: Name of the environment variable

    Returns:
        Parsed boolean value, or None if the variable is not set

    Raises:
        ConfigurationError: If the value is not a recognised boolean
    """
    value = os.environ.get(var_name)
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Environment variable {var_name} must be a boolean (true/false), got: '{value}'"
    )


def load_config(config_file: Optional[str] = None) -> ReporterConfig:
    """
    Load configuration from file and environment variables.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. Configuration file
    3. Default values

    Args:
        config_file: Path to YAML configuration file (optional)

    Returns:
        ReporterConfig object with merged configuration

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
        ConfigurationError: If config file has invalid YAML or env vars are invalid
    """
    with _config_lock:
        config_data: Dict[str, Any] = {}

        if config_file:
            logger.info("Loading configuration from %s", config_file)
            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file '{config_file}': {e}")
            except FileNotFoundError:
                raise FileNotFoundError(f"Configuration file not found: {config_file}")
            except PermissionError:
                raise ConfigurationError(f"Permission denied reading config file '{config_file}'")
            except OSError as e:
                raise ConfigurationError(f"Unable to read config file '{config_file}': {e}")
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Config file '{config_file}' must contain a mapping at the top level"
                )
            config_data.update(file_config)

        env_overrides = _load_from_env()
        config_data.update(env_overrides)
        if env_overrides:
            logger.debug("Applied environment variable overrides: %s", list(env_overrides.keys()))

        try:
            return ReporterConfig(**config_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")


def _load_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Supported environment variables:
    - NUNIT_OUTPUT_PATH: Report output path
    - NUNIT_ROOT_DIR: Package root directory
    - NUNIT_REPORT_NAME: Name attribute of the report root
    - NUNIT_REPORT_LOGS: Whether browser logs are requested (true/false)

    Returns:
        Dictionary of configuration values from environment

    Raises:
        ConfigurationError: If environment variable values are invalid
    """
    env_config: Dict[str, Any] = {}

    if "NUNIT_OUTPUT_PATH" in os.environ:
        env_config["output_path"] = os.environ["NUNIT_OUTPUT_PATH"]

    if "NUNIT_ROOT_DIR" in os.environ:
        env_config["root_dir"] = os.environ["NUNIT_ROOT_DIR"]

    if "NUNIT_REPORT_NAME" in os.environ:
        env_config["report_name"] = os.environ["NUNIT_REPORT_NAME"]

    report_logs = _parse_env_bool("NUNIT_REPORT_LOGS")
    if report_logs is not None:
        env_config["report_logs"] = report_logs

    return env_config


def validate_config(config: ReporterConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: ReporterConfig to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors: List[str] = []

    if not config.output_path or not str(config.output_path).strip():
        errors.append("output_path is required")
    elif str(config.output_path).endswith(("/", os.sep)):
        errors.append(f"output_path must name a file, not a directory: {config.output_path}")

    if config.root_dir is not None and not os.path.isdir(config.root_dir):
        errors.append(f"root_dir does not exist or is not a directory: {config.root_dir}")

    if not isinstance(config.report_name, str):
        errors.append(f"report_name must be a string: {config.report_name!r}")

    if not isinstance(config.report_logs, bool):
        errors.append(f"report_logs must be true or false: {config.report_logs!r}")

    return errors
