"""
datatransfer core: errors, logging, environment handling and cancellation.
"""

from datatransfer.core.cancellation import CancellationScope
from datatransfer.core.exceptions import (
    ConfigurationError,
    ContainerConflictError,
    DataTransferError,
    DuplicateExtensionError,
    ExtensionNotFoundError,
    MissingExtensionConfigError,
    OperationCancelledError,
    SettingsTypeError,
)
from datatransfer.core.logger import configure_default_logging, get_logger, set_logger

__all__ = [
    "CancellationScope",
    "ConfigurationError",
    "ContainerConflictError",
    "DataTransferError",
    "DuplicateExtensionError",
    "ExtensionNotFoundError",
    "MissingExtensionConfigError",
    "OperationCancelledError",
    "SettingsTypeError",
    "configure_default_logging",
    "get_logger",
    "set_logger",
]
