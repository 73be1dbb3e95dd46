"""
datatransfer - Pluggable source-to-sink data transfer orchestration.

Streams records from a configured source extension to a configured sink
extension, one or more times per configuration document:
- Extensions resolved by display name from an explicit registry
- Fan-out / fan-in operation planning from per-operation overrides
- A guard against recreating the container a transfer is reading from
- Bounded-memory streaming over async iterators with shared cancellation

Usage:
    >>> from datatransfer import TransferRunner, default_registry, load_config
    >>>
    >>> config = load_config("migrationsettings.json")
    >>> runner = TransferRunner(default_registry())
    >>> exit_code = await runner.run(config)

Configuration:
    {
        "Source": "JSON",
        "Sink": "InMemory",
        "SourceSettings": {"FilePath": "in.json"},
        "Operations": [
            {"SinkSettings": {"Collection": "a"}},
            {"SinkSettings": {"Collection": "b"}}
        ]
    }
"""

from datatransfer.config import SettingsBag, TransferConfig, load_config
from datatransfer.core import (
    CancellationScope,
    ConfigurationError,
    ContainerConflictError,
    DataTransferError,
    ExtensionNotFoundError,
    MissingExtensionConfigError,
    OperationCancelledError,
    SettingsTypeError,
)
from datatransfer.engine import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    Operation,
    RunResult,
    TransferRunner,
    plan_operations,
)
from datatransfer.extensions import (
    DataItem,
    DataSinkExtension,
    DataSourceExtension,
    DictDataItem,
    ExtensionRegistry,
    default_registry,
)

__version__ = "1.0.0"

__all__ = [
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "CancellationScope",
    "ConfigurationError",
    "ContainerConflictError",
    "DataItem",
    "DataSinkExtension",
    "DataSourceExtension",
    "DataTransferError",
    "DictDataItem",
    "ExtensionNotFoundError",
    "ExtensionRegistry",
    "MissingExtensionConfigError",
    "Operation",
    "OperationCancelledError",
    "RunResult",
    "SettingsBag",
    "SettingsTypeError",
    "TransferConfig",
    "TransferRunner",
    "default_registry",
    "load_config",
    "plan_operations",
]
