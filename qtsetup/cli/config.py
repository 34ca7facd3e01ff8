"""
Input resolution for the CLI.

Each input is taken from the first source that provides it:
1. Command-line option
2. GitHub Actions input variable (INPUT_<NAME>)
3. YAML configuration file (qtsetup.yaml)
4. Default (empty)
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from qtsetup.core.exceptions import ConfigurationError
from qtsetup.installer.request import InstallRequest

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "qtsetup.yaml"

INPUT_FIELDS = ("version", "platform", "packages", "installer_args", "cachedir")

# Action input names as the runner exports them; first match wins
INPUT_VARIABLES = {
    "version": ("INPUT_VERSION",),
    "platform": ("INPUT_PLATFORM",),
    "packages": ("INPUT_PACKAGES",),
    "installer_args": ("INPUT_INSTALLER-ARGS", "INPUT_INSTALLER_ARGS", "INPUT_IARGS"),
    "cachedir": ("INPUT_CACHEDIR",),
}

# Separators used when a YAML file gives a list instead of a string
LIST_SEPARATORS = {"packages": ",", "installer_args": " "}

REQUIRED_FIELDS = ("version", "platform")


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, is not valid
            YAML, or does not contain a mapping

    Example:
        >>> config = load_yaml_config(Path("qtsetup.yaml"))
        >>> config.get("version")
        '5.15.2'
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Invalid configuration in {config_file}: expected a mapping"
        )

    return _normalize_config(config)


def _normalize_config(config: Dict[str, Any]) -> Dict[str, str]:
    """Convert config values to input strings; unknown keys are ignored."""
    normalized = {}
    for key, value in config.items():
        field = str(key).replace("-", "_")
        if field not in INPUT_FIELDS:
            logger.warning(f"Ignoring unknown configuration key: {key}")
            continue
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            separator = LIST_SEPARATORS.get(field)
            if separator is None:
                raise ConfigurationError(f"Configuration key '{key}' must be a string")
            value = separator.join(str(v) for v in value)
        normalized[field] = str(value)
    return normalized


def resolve_inputs(
    cli_values: Mapping[str, Optional[str]],
    environ: Mapping[str, str],
    config: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Merge all input sources.

    Args:
        cli_values: Values from command-line options (None when not given)
        environ: Process environment
        config: Normalized configuration file values

    Returns:
        Value for every input field

    Raises:
        ConfigurationError: If version or platform is missing
    """
    config = config or {}
    resolved = {}

    for field in INPUT_FIELDS:
        value = cli_values.get(field)
        source = "command line"
        if value is None:
            value = next(
                (environ[v] for v in INPUT_VARIABLES[field] if environ.get(v)), None
            )
            source = "action input"
        if value is None:
            value = config.get(field)
            source = "config file"
        if value is None:
            value = ""
            source = "default"
        resolved[field] = value
        logger.debug(f"Input {field}={value!r} ({source})")

    missing = [field for field in REQUIRED_FIELDS if not resolved[field].strip()]
    if missing:
        raise ConfigurationError(f"Missing required input(s): {', '.join(missing)}")

    return resolved


def build_request(inputs: Mapping[str, str]) -> InstallRequest:
    """Create the InstallRequest from resolved inputs."""
    return InstallRequest.from_inputs(
        version=inputs["version"],
        platform=inputs["platform"],
        packages=inputs.get("packages", ""),
        installer_args=inputs.get("installer_args", ""),
        cache_dir=inputs.get("cachedir", ""),
    )
