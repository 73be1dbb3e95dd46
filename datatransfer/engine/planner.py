"""
Operation Planner - expands a configuration into concrete transfers.

One configuration document yields ``max(1, len(Operations))`` operations.
Each operation takes its own SourceSettings/SinkSettings when present and
falls back to the global sections otherwise, which covers:

- one source fanned out to many sinks (global SourceSettings, per-op sinks)
- many sources fanned in to one sink (per-op sources, global SinkSettings)
- fully independent pairs (both sides per operation)
- the single transfer when Operations is absent
"""

from __future__ import annotations

from dataclasses import dataclass

from datatransfer.config.model import SINK_KEY, SOURCE_KEY, TransferConfig
from datatransfer.config.settings import EMPTY_SETTINGS, SettingsBag
from datatransfer.core.exceptions import MissingExtensionConfigError
from datatransfer.core.logger import get_logger
from datatransfer.extensions.base import (
    SINK,
    SOURCE,
    DataSinkExtension,
    DataSourceExtension,
)
from datatransfer.extensions.registry import ExtensionRegistry

logger = get_logger(__name__)


@dataclass(frozen=True)
class Operation:
    """One planned source -> sink transfer."""

    index: int
    source: DataSourceExtension
    source_settings: SettingsBag
    sink: DataSinkExtension
    sink_settings: SettingsBag

    @property
    def label(self) -> str:
        return f"{self.source.display_name} -> {self.sink.display_name}"


def require_extension_names(config: TransferConfig) -> tuple[str, str]:
    """
    Return the configured (source, sink) names.

    Raises:
        MissingExtensionConfigError: If either name is empty or absent
    """
    if not config.source or not config.source.strip():
        raise MissingExtensionConfigError(SOURCE, SOURCE_KEY)
    if not config.sink or not config.sink.strip():
        raise MissingExtensionConfigError(SINK, SINK_KEY)
    return config.source, config.sink


def plan_operations(config: TransferConfig, registry: ExtensionRegistry) -> list[Operation]:
    """
    Resolve extensions and build the ordered operation list.

    Raises:
        MissingExtensionConfigError: Source or Sink not configured
        ExtensionNotFoundError: A configured name matches no extension
    """
    source_name, sink_name = require_extension_names(config)

    source = registry.get_source(source_name)
    sink = registry.get_sink(sink_name)

    overrides = config.operations or []
    count = max(1, len(overrides))

    operations = []
    for index in range(count):
        override = overrides[index] if index < len(overrides) else None

        source_settings = _first_present(
            override.source_settings if override else None, config.source_settings
        )
        sink_settings = _first_present(
            override.sink_settings if override else None, config.sink_settings
        )
        operations.append(Operation(index, source, source_settings, sink, sink_settings))

    logger.debug(f"Planned {len(operations)} operation(s) for {source_name} -> {sink_name}")
    return operations


def _first_present(*candidates: SettingsBag | None) -> SettingsBag:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return EMPTY_SETTINGS
