"""
Typed view over a transfer configuration document.

The document is a hierarchical key/value tree:

    Source: JSON
    Sink: Cosmos-nosql
    SourceSettings: {FilePath: in.json}
    SinkSettings: {Database: db, Container: c}
    Operations:
      - SinkSettings: {Container: other}

Binding is purely structural. A section that is not present stays ``None``
so the planner can tell "not configured" apart from "configured but empty".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from datatransfer.config.settings import SettingsBag
from datatransfer.core.exceptions import ConfigurationError

KEY_DELIMITER = ":"

SOURCE_KEY = "Source"
SINK_KEY = "Sink"
SOURCE_SETTINGS_KEY = "SourceSettings"
SINK_SETTINGS_KEY = "SinkSettings"
OPERATIONS_KEY = "Operations"


@dataclass(frozen=True)
class OperationOverride:
    """Per-operation settings; either side may be absent."""

    source_settings: SettingsBag | None = None
    sink_settings: SettingsBag | None = None


@dataclass(frozen=True)
class TransferConfig:
    """
    Root of a configuration document.

    Attributes:
        source: Display name of the source extension
        sink: Display name of the sink extension
        source_settings: Global source settings, None when absent
        sink_settings: Global sink settings, None when absent
        operations: Ordered per-operation overrides, None when absent
    """

    source: str | None = None
    sink: str | None = None
    source_settings: SettingsBag | None = None
    sink_settings: SettingsBag | None = None
    operations: list[OperationOverride] | None = field(default=None)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> TransferConfig:
        """Bind a nested mapping, as parsed from JSON or YAML."""
        root = SettingsBag(data or {})

        operations = None
        entries = root.get_list(OPERATIONS_KEY)
        if entries is not None:
            operations = [_bind_operation(i, entry) for i, entry in enumerate(entries)]

        return cls(
            source=root.get_str(SOURCE_KEY),
            sink=root.get_str(SINK_KEY),
            source_settings=root.get_section(SOURCE_SETTINGS_KEY),
            sink_settings=root.get_section(SINK_SETTINGS_KEY),
            operations=operations,
        )

    @classmethod
    def from_flat(cls, pairs: Mapping[str, Any]) -> TransferConfig:
        """
        Bind a flat collection of colon-delimited keys.

        Example:
            >>> TransferConfig.from_flat({
            ...     "Source": "JSON",
            ...     "Operations:0:SinkSettings:FilePath": "out.json",
            ... })
        """
        return cls.from_mapping(expand_flat(pairs))


def _bind_operation(index: int, entry: Any) -> OperationOverride:
    if entry is None:
        return OperationOverride()
    if not isinstance(entry, Mapping):
        msg = f"{OPERATIONS_KEY}[{index}] must be a section, got {type(entry).__name__}"
        raise ConfigurationError(msg, details={"operation": index})

    section = SettingsBag(entry)
    return OperationOverride(
        source_settings=section.get_section(SOURCE_SETTINGS_KEY),
        sink_settings=section.get_section(SINK_SETTINGS_KEY),
    )


# =============================================================================
# Flat key/value trees
# =============================================================================


def expand_flat(pairs: Mapping[str, Any]) -> dict[str, Any]:
    """
    Expand ``{"A:B:0:C": v}`` into ``{"A": {"B": [{"C": v}]}}``.

    Numeric segments become list positions. Gaps are closed, so the
    resulting list holds only the entries that were defined, in index order.
    """
    return _listify(flat_to_tree(pairs))


def flat_to_tree(pairs: Mapping[str, Any]) -> dict[str, Any]:
    """
    Nest colon-delimited keys without turning numeric segments into lists.

    Used for override layers, whose indexes must stay absolute until they
    are merged over the document.
    """
    tree: dict[str, Any] = {}
    for key, value in pairs.items():
        parts = [part for part in key.split(KEY_DELIMITER) if part]
        if not parts:
            continue
        node = tree
        for part in parts[:-1]:
            child = _lookup(node, part)
            if not isinstance(child, dict):
                child = {}
                _assign(node, part, child)
            node = child
        _assign(node, parts[-1], value)
    return tree


def merge_layers(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Overlay configuration trees; later layers win key by key.

    Lists are merged position by position so a flat override such as
    ``Operations:1:SinkSettings:FilePath`` only touches the second operation.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged = _merge(merged, _index_lists(layer))
    return _listify(merged)


def _lookup(node: dict[str, Any], key: str) -> Any:
    folded = key.casefold()
    for existing, value in node.items():
        if existing.casefold() == folded:
            return value
    return None


def _assign(node: dict[str, Any], key: str, value: Any) -> None:
    folded = key.casefold()
    for existing in node:
        if existing.casefold() == folded:
            node[existing] = value
            return
    node[key] = value


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in overlay.items():
        current = _lookup(result, key)
        if isinstance(current, dict) and isinstance(value, dict):
            _assign(result, key, _merge(current, value))
        else:
            _assign(result, key, value)
    return result


def _index_lists(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _index_lists(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        if not value:
            return []
        return {str(i): _index_lists(item) for i, item in enumerate(value)}
    return value


def _listify(value: Any) -> Any:
    if isinstance(value, dict):
        converted = {key: _listify(item) for key, item in value.items()}
        if converted and all(key.isdigit() for key in converted):
            return [converted[key] for key in sorted(converted, key=int)]
        return converted
    if isinstance(value, list):
        return [_listify(item) for item in value]
    return value
