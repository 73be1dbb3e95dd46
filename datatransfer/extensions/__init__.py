"""
Extension contracts, registry and bundled extensions.

Usage:
    >>> from datatransfer.extensions import ExtensionRegistry, default_registry
    >>> registry = default_registry()
    >>> [source.display_name for source in registry.sources]
    ['JSON', 'InMemory']
"""

from datatransfer.extensions.base import (
    SINK,
    SOURCE,
    DataItem,
    DataSinkExtension,
    DataSourceExtension,
)
from datatransfer.extensions.items import DictDataItem, to_plain
from datatransfer.extensions.json_file import JsonFileSink, JsonFileSource
from datatransfer.extensions.memory import InMemorySink, InMemorySource, InMemoryStore
from datatransfer.extensions.registry import (
    SINK_ENTRY_POINT_GROUP,
    SOURCE_ENTRY_POINT_GROUP,
    ExtensionRegistry,
    default_registry,
)

__all__ = [
    "SINK",
    "SINK_ENTRY_POINT_GROUP",
    "SOURCE",
    "SOURCE_ENTRY_POINT_GROUP",
    "DataItem",
    "DataSinkExtension",
    "DataSourceExtension",
    "DictDataItem",
    "ExtensionRegistry",
    "InMemorySink",
    "InMemorySource",
    "InMemoryStore",
    "JsonFileSink",
    "JsonFileSource",
    "default_registry",
    "to_plain",
]
