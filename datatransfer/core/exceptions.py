"""
Unified error hierarchy for data transfer runs.

All errors raised by the orchestration core inherit from DataTransferError,
so callers embedding the engine can catch them in one place. Faults raised
by extensions themselves are never wrapped.
"""

from typing import Any


class DataTransferError(Exception):
    """
    Base exception for the orchestration core.

    Carries a human-readable message plus a ``details`` dict with the names
    and settings keys involved, so a failed run can be diagnosed from the
    message alone.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ConfigurationError(DataTransferError):
    """Configuration is missing, malformed or self-contradictory."""


class MissingExtensionConfigError(ConfigurationError):
    """
    ``Source`` or ``Sink`` is empty or absent.

    This is the one recoverable failure of a run: the runner reports it as
    exit code 1 before touching any extension.
    """

    def __init__(self, capability: str, setting: str):
        super().__init__(
            f"{setting} extension must be specified",
            details={"capability": capability, "setting": setting},
        )
        self.capability = capability
        self.setting = setting


class SettingsTypeError(ConfigurationError):
    """
    A setting holds a value of the wrong type.

    Raised by the typed accessors of SettingsBag instead of coercing.
    """

    def __init__(self, key: str, expected: str, value: Any):
        super().__init__(
            f"Setting '{key}' must be {expected}, got {type(value).__name__}: {value!r}",
            details={"key": key, "expected": expected},
        )
        self.key = key
        self.expected = expected
        self.value = value


class ContainerConflictError(ConfigurationError):
    """
    The sink would recreate the very container the source is reading.

    Raised by the conflict guard before any I/O for the operation starts.
    """

    def __init__(
        self,
        extension: str,
        endpoint: str,
        database: str,
        container: str,
        setting: str = "RecreateContainer",
        operation_index: int | None = None,
    ):
        message = (
            f"Source and sink both point at the same Cosmos DB container "
            f"'{database}/{container}' on {endpoint} and sink setting "
            f"'{setting}' is true. Recreating the container would delete the "
            f"data while it is still being read. Use a different sink "
            f"container or set '{setting}' to false."
        )
        super().__init__(
            message,
            details={
                "extension": extension,
                "database": database,
                "container": container,
                "setting": setting,
                "operation": operation_index,
            },
        )
        self.extension = extension
        self.endpoint = endpoint
        self.database = database
        self.container = container
        self.setting = setting
        self.operation_index = operation_index


class ExtensionNotFoundError(DataTransferError, LookupError):
    """
    A configured extension name matches nothing in the registry.

    Treated as a deployment defect rather than user input: the run aborts
    with this exception instead of returning an exit code.
    """

    def __init__(self, name: str, capability: str, available: list[str] | None = None):
        available = sorted(available or [])
        super().__init__(
            f"No {capability} extension named '{name}' is registered",
            details={"extension": name, "capability": capability, "available": available},
        )
        self.name = name
        self.capability = capability
        self.available = available


class DuplicateExtensionError(DataTransferError):
    """Two extensions of the same capability share a display name."""

    def __init__(self, name: str, capability: str):
        super().__init__(
            f"A {capability} extension named '{name}' is already registered",
            details={"extension": name, "capability": capability},
        )
        self.name = name
        self.capability = capability


class OperationCancelledError(DataTransferError):
    """The run's cancellation scope was tripped."""

    def __init__(self, message: str = "Transfer cancelled", reason: str | None = None):
        super().__init__(message, details={"reason": reason} if reason else None)
        self.reason = reason
