"""
Extension contracts.

Sources produce a lazy, single-pass stream of DataItems; sinks consume it
to exhaustion exactly once. Neither side sees the configuration document,
only its own SettingsBag. The logger and cancellation scope of the run are
passed in explicitly.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Set
from typing import Any

from datatransfer.config.settings import SettingsBag
from datatransfer.core.cancellation import CancellationScope

SOURCE = "source"
SINK = "sink"


class DataItem(ABC):
    """A single self-describing record flowing from a source to a sink."""

    @abstractmethod
    def field_names(self) -> Set[str]:
        """Names of the fields present in this record (order irrelevant)."""
        ...

    @abstractmethod
    def get_value(self, name: str) -> Any | None:
        """Value of a field, or None when absent."""
        ...


class DataSourceExtension(ABC):
    """
    Abstract base class for source extensions.

    Implementations set ``display_name`` and implement ``read`` as an async
    generator:

        class CsvSource(DataSourceExtension):
            display_name = "CSV"

            async def read(self, settings, logger, cancellation):
                async for row in _rows(settings.get_str("FilePath")):
                    cancellation.raise_if_cancelled()
                    yield DictDataItem(row)
    """

    display_name: str = ""

    @abstractmethod
    def read(
        self,
        settings: SettingsBag,
        logger: Any,
        cancellation: CancellationScope,
    ) -> AsyncIterator[DataItem]:
        """
        Stream records from the store described by ``settings``.

        Must stop promptly once ``cancellation`` is tripped.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.display_name!r}>"


class DataSinkExtension(ABC):
    """
    Abstract base class for sink extensions.

    ``write`` pulls every item from ``items`` exactly once or raises. The
    source extension is passed for provenance-specific behaviour (for example
    to keep system fields only when copying between stores of one kind); a
    sink may look at its ``display_name`` but nothing else.
    """

    display_name: str = ""

    @abstractmethod
    async def write(
        self,
        items: AsyncIterator[DataItem],
        settings: SettingsBag,
        source: DataSourceExtension,
        logger: Any,
        cancellation: CancellationScope,
    ) -> None:
        """Consume ``items`` and write them to the store described by ``settings``."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.display_name!r}>"
