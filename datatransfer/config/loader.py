"""
Configuration file loading.

Layers, lowest precedence first:
    1. The settings file (JSON or YAML)
    2. ``DATATRANSFER_``-prefixed environment variables (``__`` separates levels)
    3. Explicit overrides passed by the caller (CLI options)

String values may reference environment variables using ``${VAR}``,
``${VAR:-default}`` or ``${VAR:?message}``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from datatransfer.config.model import TransferConfig, flat_to_tree, merge_layers
from datatransfer.core.env import ENV_PREFIX, get_env
from datatransfer.core.exceptions import ConfigurationError
from datatransfer.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SETTINGS_FILE = "migrationsettings.json"

_YAML_SUFFIXES = {".yaml", ".yml"}


def read_document(path: str | Path) -> dict[str, Any]:
    """
    Parse a settings file into a nested mapping.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file is not valid JSON/YAML or not a mapping
    """
    path = Path(path)
    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text) if text.strip() else None
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        msg = f"Could not parse configuration file {path}: {e}"
        raise ConfigurationError(msg, details={"path": str(path)}) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Configuration file {path} must contain a mapping at the top level"
        raise ConfigurationError(msg, details={"path": str(path)})
    return data


def load_config(
    path: str | Path | None = None,
    *,
    substitute_env: bool = True,
    env_prefix: str | None = ENV_PREFIX,
    overrides: Mapping[str, Any] | None = None,
) -> TransferConfig:
    """
    Build a TransferConfig from a settings file plus environment and overrides.

    Args:
        path: Settings file; when None the file is optional and only the
              environment and overrides are used
        substitute_env: Resolve ``${VAR}`` references in string values
        env_prefix: Prefix of environment overrides, None to disable them
        overrides: Flat colon-delimited keys applied last

    Example:
        >>> config = load_config("migrationsettings.json", overrides={"Sink": "JSON"})
    """
    env = get_env()

    document: dict[str, Any] = {}
    if path is not None:
        document = read_document(path)
        logger.debug(f"Loaded configuration from {path}")

    env_layer = flat_to_tree(env.overrides(env_prefix)) if env_prefix else {}
    override_layer = flat_to_tree(overrides) if overrides else {}

    merged = merge_layers(document, env_layer, override_layer)
    if substitute_env:
        merged = env.substitute_value(merged)

    return TransferConfig.from_mapping(merged)
