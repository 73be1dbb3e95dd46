"""
In-memory source and sink.

Records live in named collections of an InMemoryStore shared by the source
and sink instances created from it. Useful for development, tests and for
embedding the engine in a process that already holds its data.

Settings:
    Collection: Collection name (default "default")
    Items: Inline list of records (source only; used instead of the store)
    RecreateCollection: Empty the collection before writing (sink only)
"""

import asyncio
from typing import Any

from datatransfer.config.settings import SettingsBag
from datatransfer.core.cancellation import CancellationScope
from datatransfer.core.exceptions import SettingsTypeError
from datatransfer.extensions.base import DataSinkExtension, DataSourceExtension
from datatransfer.extensions.items import DictDataItem, to_plain

DISPLAY_NAME = "InMemory"
DEFAULT_COLLECTION = "default"


class InMemoryStore:
    """Named lists of plain-dict records."""

    def __init__(self):
        self._collections: dict[str, list[dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    def collection(self, name: str = DEFAULT_COLLECTION) -> list[dict[str, Any]]:
        return self._collections.setdefault(name, [])

    def put(self, name: str, records: list[dict[str, Any]]) -> None:
        self._collections[name] = [dict(record) for record in records]

    async def append(self, name: str, record: dict[str, Any]) -> None:
        async with self._lock:
            self.collection(name).append(record)

    def clear(self, name: str | None = None) -> None:
        if name is None:
            self._collections.clear()
        else:
            self._collections.pop(name, None)


default_store = InMemoryStore()


class InMemorySource(DataSourceExtension):
    display_name = DISPLAY_NAME

    def __init__(self, store: InMemoryStore | None = None):
        self.store = store or default_store

    async def read(self, settings: SettingsBag, logger: Any, cancellation: CancellationScope):
        inline = settings.get_list("Items")
        if inline is not None:
            records = inline
        else:
            name = settings.get_str("Collection", DEFAULT_COLLECTION)
            # snapshot, so a sink writing to the same collection cannot extend the read
            records = list(self.store.collection(name))

        for record in records:
            cancellation.raise_if_cancelled()
            if not isinstance(record, dict):
                raise SettingsTypeError("Items", "a list of sections", record)
            yield DictDataItem(record)
            # let the consumer run between items
            await asyncio.sleep(0)


class InMemorySink(DataSinkExtension):
    display_name = DISPLAY_NAME

    def __init__(self, store: InMemoryStore | None = None):
        self.store = store or default_store

    async def write(
        self,
        items,
        settings: SettingsBag,
        source: DataSourceExtension,
        logger: Any,
        cancellation: CancellationScope,
    ) -> None:
        name = settings.get_str("Collection", DEFAULT_COLLECTION)
        if settings.get_bool("RecreateCollection", False):
            self.store.clear(name)

        count = 0
        async for item in items:
            cancellation.raise_if_cancelled()
            await self.store.append(name, to_plain(item))
            count += 1

        logger.debug(f"Wrote {count} item(s) to in-memory collection '{name}'")
