"""Converter settings, optionally loaded from a YAML file."""
import logging
import os
import yaml
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from core.exceptions import ConfigError
from models.ruleset import DEFAULT_CONFIDENCE

logger = logging.getLogger(__name__)

DEFAULT_FORMAT_VERSION = "1.0.4"
DEFAULT_AUTHOR = "Your Name"


@dataclass(frozen=True)
class ConverterSettings:
    format_version: str = DEFAULT_FORMAT_VERSION
    author: str = DEFAULT_AUTHOR
    confidence: float = DEFAULT_CONFIDENCE


def load_config(config_file: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_file: Path to the YAML configuration file

    Returns:
        Dictionary containing the configuration data (empty if the file does not exist)
    """
    if not os.path.exists(config_file):
        return {}

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load {config_file}: {e}", details={"path": config_file})

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a YAML mapping", details={"path": config_file})
    return data


def load_settings(config_file: Optional[str] = None) -> ConverterSettings:
    """
    Build the converter settings, overriding defaults with values from config_file.

    Args:
        config_file: Optional YAML file with format_version, author and/or confidence

    Returns:
        ConverterSettings instance
    """
    settings = ConverterSettings()
    if not config_file:
        return settings

    if not os.path.exists(config_file):
        logger.warning(f"Config file {config_file} not found, using default settings")
        return settings

    data = load_config(config_file)
    known = {f.name for f in fields(ConverterSettings)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(
            f"Unknown settings in {config_file}: {', '.join(sorted(unknown))}",
            details={"path": config_file},
        )

    overrides: Dict[str, Any] = {}
    if "format_version" in data:
        overrides["format_version"] = str(data["format_version"])
    if "author" in data:
        overrides["author"] = str(data["author"])
    if "confidence" in data:
        confidence = data["confidence"]
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise ConfigError(f"confidence must be a number, got {confidence!r}", details={"path": config_file})
        overrides["confidence"] = confidence
    return replace(settings, **overrides)
