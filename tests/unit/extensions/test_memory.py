"""Tests for the in-memory source and sink."""

import logging

import pytest

from datatransfer.config import SettingsBag, TransferConfig
from datatransfer.core import CancellationScope, OperationCancelledError, SettingsTypeError
from datatransfer.engine import EXIT_SUCCESS, TransferRunner
from datatransfer.extensions import (
    DictDataItem,
    ExtensionRegistry,
    InMemorySink,
    InMemorySource,
    InMemoryStore,
)

logger = logging.getLogger(__name__)


async def collect(source, settings, cancellation=None):
    return [
        item.to_dict()
        async for item in source.read(SettingsBag(settings), logger, cancellation or CancellationScope())
    ]


async def items_of(*records):
    for record in records:
        yield DictDataItem(record)


@pytest.fixture
def store():
    return InMemoryStore()


class TestInMemorySource:
    @pytest.mark.asyncio
    async def test_reads_inline_items(self, store):
        result = await collect(InMemorySource(store), {"Items": [{"a": 1}, {"a": 2}]})
        assert result == [{"a": 1}, {"a": 2}]

    @pytest.mark.asyncio
    async def test_reads_named_collection(self, store):
        store.put("people", [{"name": "Ada"}])

        result = await collect(InMemorySource(store), {"Collection": "people"})

        assert result == [{"name": "Ada"}]

    @pytest.mark.asyncio
    async def test_default_collection(self, store):
        store.put("default", [{"x": 1}])
        assert await collect(InMemorySource(store), {}) == [{"x": 1}]

    @pytest.mark.asyncio
    async def test_inline_items_must_be_sections(self, store):
        with pytest.raises(SettingsTypeError):
            await collect(InMemorySource(store), {"Items": ["scalar"]})

    @pytest.mark.asyncio
    async def test_stops_when_cancelled(self, store):
        scope = CancellationScope()
        scope.cancel()

        with pytest.raises(OperationCancelledError):
            await collect(InMemorySource(store), {"Items": [{"a": 1}]}, scope)


class TestInMemorySink:
    @pytest.mark.asyncio
    async def test_appends_to_collection(self, store):
        store.put("out", [{"old": True}])
        sink = InMemorySink(store)

        await sink.write(
            items_of({"a": 1}), SettingsBag({"Collection": "out"}), None, logger, CancellationScope()
        )

        assert store.collection("out") == [{"old": True}, {"a": 1}]

    @pytest.mark.asyncio
    async def test_recreate_collection(self, store):
        store.put("out", [{"old": True}])
        sink = InMemorySink(store)

        await sink.write(
            items_of({"a": 1}, {"a": 2}),
            SettingsBag({"Collection": "out", "RecreateCollection": "true"}),
            None,
            logger,
            CancellationScope(),
        )

        assert store.collection("out") == [{"a": 1}, {"a": 2}]

    @pytest.mark.asyncio
    async def test_nested_items_are_stored_plain(self, store):
        await InMemorySink(store).write(
            items_of({"address": {"city": "Oslo"}, "tags": [{"t": 1}]}),
            SettingsBag(),
            None,
            logger,
            CancellationScope(),
        )

        assert store.collection() == [{"address": {"city": "Oslo"}, "tags": [{"t": 1}]}]


class TestInMemoryTransfer:
    @pytest.mark.asyncio
    async def test_fan_out_to_collections(self, store):
        store.put("input", [{"id": 1}, {"id": 2}])
        registry = ExtensionRegistry(sources=[InMemorySource(store)], sinks=[InMemorySink(store)])
        config = TransferConfig.from_mapping(
            {
                "Source": "InMemory",
                "Sink": "InMemory",
                "SourceSettings": {"Collection": "input"},
                "Operations": [
                    {"SinkSettings": {"Collection": "a"}},
                    {"SinkSettings": {"Collection": "b"}},
                ],
            }
        )

        result = await TransferRunner(registry).execute(config)

        assert result.exit_code == EXIT_SUCCESS
        assert result.total_items == 4
        assert store.collection("a") == [{"id": 1}, {"id": 2}]
        assert store.collection("b") == [{"id": 1}, {"id": 2}]

    @pytest.mark.asyncio
    async def test_copy_into_source_collection_reads_snapshot(self, store):
        store.put("loop", [{"id": 1}])
        registry = ExtensionRegistry(sources=[InMemorySource(store)], sinks=[InMemorySink(store)])
        config = TransferConfig.from_flat(
            {
                "Source": "InMemory",
                "Sink": "InMemory",
                "SourceSettings:Collection": "loop",
                "SinkSettings:Collection": "loop",
            }
        )

        assert await TransferRunner(registry).run(config) == EXIT_SUCCESS
        assert store.collection("loop") == [{"id": 1}, {"id": 1}]
