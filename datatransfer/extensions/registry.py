"""
Extension Registry - named source and sink implementations.

The registry is populated once at process start (bundled extensions plus
whatever installed packages advertise through entry points) and only ever
queried by exact display name afterwards.

Usage:
    >>> registry = ExtensionRegistry()
    >>> registry.register_source(JsonFileSource())
    >>> registry.register_sink(JsonFileSink())
    >>> registry.get_source("JSON")
    <JsonFileSource 'JSON'>

Third-party packages expose extensions in their packaging metadata:

    [project.entry-points."datatransfer.sources"]
    parquet = "my_package.parquet:ParquetSource"
"""

from importlib.metadata import entry_points
from typing import Any

from datatransfer.core.exceptions import DuplicateExtensionError, ExtensionNotFoundError
from datatransfer.core.logger import get_logger
from datatransfer.extensions.base import (
    SINK,
    SOURCE,
    DataSinkExtension,
    DataSourceExtension,
)

logger = get_logger(__name__)

SOURCE_ENTRY_POINT_GROUP = "datatransfer.sources"
SINK_ENTRY_POINT_GROUP = "datatransfer.sinks"


class ExtensionRegistry:
    """Mapping from capability to named extension instances."""

    def __init__(
        self,
        sources: list[DataSourceExtension] | None = None,
        sinks: list[DataSinkExtension] | None = None,
    ):
        self._extensions: dict[str, dict[str, Any]] = {SOURCE: {}, SINK: {}}
        for source in sources or []:
            self.register_source(source)
        for sink in sinks or []:
            self.register_sink(sink)

    def register_source(self, extension: DataSourceExtension, replace: bool = False) -> None:
        if not isinstance(extension, DataSourceExtension):
            msg = f"{extension!r} is not a DataSourceExtension"
            raise TypeError(msg)
        self._register(SOURCE, extension, replace)

    def register_sink(self, extension: DataSinkExtension, replace: bool = False) -> None:
        if not isinstance(extension, DataSinkExtension):
            msg = f"{extension!r} is not a DataSinkExtension"
            raise TypeError(msg)
        self._register(SINK, extension, replace)

    def _register(self, capability: str, extension: Any, replace: bool) -> None:
        name = extension.display_name
        if not name:
            msg = f"{type(extension).__name__} has no display_name"
            raise ValueError(msg)
        if name in self._extensions[capability] and not replace:
            raise DuplicateExtensionError(name, capability)
        self._extensions[capability][name] = extension
        logger.debug(f"Registered {capability} extension '{name}'")

    def get(self, capability: str, name: str) -> Any:
        """
        Look up an extension by exact, case-sensitive display name.

        Raises:
            ExtensionNotFoundError: If nothing of that capability has the name
        """
        extensions = self._extensions[capability]
        if name not in extensions:
            raise ExtensionNotFoundError(name, capability, list(extensions))
        return extensions[name]

    def get_source(self, name: str) -> DataSourceExtension:
        return self.get(SOURCE, name)

    def get_sink(self, name: str) -> DataSinkExtension:
        return self.get(SINK, name)

    @property
    def sources(self) -> list[DataSourceExtension]:
        return list(self._extensions[SOURCE].values())

    @property
    def sinks(self) -> list[DataSinkExtension]:
        return list(self._extensions[SINK].values())

    def load_entry_points(self) -> int:
        """
        Register extensions advertised by installed distributions.

        Each entry point must resolve to an extension class (instantiated
        with no arguments) or an instance. Returns the number registered.
        """
        loaded = 0
        for group, register in (
            (SOURCE_ENTRY_POINT_GROUP, self.register_source),
            (SINK_ENTRY_POINT_GROUP, self.register_sink),
        ):
            for entry_point in entry_points(group=group):
                target = entry_point.load()
                extension = target() if isinstance(target, type) else target
                register(extension)
                loaded += 1
                logger.debug(f"Loaded '{extension.display_name}' from {entry_point.value}")
        return loaded


def default_registry(load_entry_points: bool = True) -> ExtensionRegistry:
    """Registry with the bundled extensions and, optionally, installed ones."""
    from datatransfer.extensions.json_file import JsonFileSink, JsonFileSource
    from datatransfer.extensions.memory import InMemorySink, InMemorySource

    registry = ExtensionRegistry(
        sources=[JsonFileSource(), InMemorySource()],
        sinks=[JsonFileSink(), InMemorySink()],
    )
    if load_entry_points:
        registry.load_entry_points()
    return registry
