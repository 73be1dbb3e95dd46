"""
Configuration model, settings bags and file loading.

Usage:
    >>> from datatransfer.config import load_config
    >>> config = load_config("migrationsettings.json")
    >>> config.source, config.sink
    ('JSON', 'Cosmos-nosql')
"""

from datatransfer.config.loader import DEFAULT_SETTINGS_FILE, load_config, read_document
from datatransfer.config.model import (
    OperationOverride,
    TransferConfig,
    expand_flat,
    flat_to_tree,
    merge_layers,
)
from datatransfer.config.settings import EMPTY_SETTINGS, SettingsBag

__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "EMPTY_SETTINGS",
    "OperationOverride",
    "SettingsBag",
    "TransferConfig",
    "expand_flat",
    "flat_to_tree",
    "load_config",
    "merge_layers",
    "read_document",
]
