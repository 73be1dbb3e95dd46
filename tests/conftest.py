"""
Pytest configuration and shared fixtures for datatransfer tests.

Provides recording source/sink extensions that remember every invocation,
so tests can assert how the engine called them without any real store.
"""

import pytest

from datatransfer.extensions import (
    DataSinkExtension,
    DataSourceExtension,
    DictDataItem,
    ExtensionRegistry,
    to_plain,
)

# ============================================
# RECORDING EXTENSIONS
# ============================================


class RecordingSource(DataSourceExtension):
    """Source yielding fixed records and recording the settings of every read."""

    def __init__(self, display_name: str = "testSource", records: list[dict] | None = None):
        self.display_name = display_name
        self.records = records or []
        self.calls = []
        self.events = []

    async def read(self, settings, logger, cancellation):
        self.calls.append(settings)
        for i, record in enumerate(self.records):
            cancellation.raise_if_cancelled()
            self.events.append(("produced", i))
            yield DictDataItem(record)


class RecordingSink(DataSinkExtension):
    """Sink draining the stream and recording settings, provenance and items."""

    def __init__(self, display_name: str = "testSink", events: list | None = None):
        self.display_name = display_name
        self.calls = []
        self.events = events

    async def write(self, items, settings, source, logger, cancellation):
        received = []
        async for item in items:
            if self.events is not None:
                self.events.append(("consumed", len(received)))
            received.append(to_plain(item))
        self.calls.append({"settings": settings, "source": source, "items": received})


# ============================================
# FIXTURES
# ============================================


@pytest.fixture
def make_source():
    return RecordingSource


@pytest.fixture
def make_sink():
    return RecordingSink


@pytest.fixture
def source():
    return RecordingSource()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def registry(source, sink):
    return ExtensionRegistry(sources=[source], sinks=[sink])


@pytest.fixture
def cosmos_registry():
    """Registry where source and sink share the Cosmos DB NoSQL display name."""
    return ExtensionRegistry(
        sources=[RecordingSource("Cosmos-nosql")],
        sinks=[RecordingSink("Cosmos-nosql")],
    )
