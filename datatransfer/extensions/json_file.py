"""
JSON file source and sink.

Source settings:
    FilePath: File to read. ``.jsonl``/``.ndjson`` files are read line by
              line; anything else must hold a JSON array (one item per
              element, decoded incrementally) or a single JSON object.

Sink settings:
    FilePath: File to write, as a JSON array.
    Indented: Pretty-print each item (default false)
    IncludeNullFields: Keep fields whose value is null (default false)
"""

import json
import re
from pathlib import Path
from typing import Any

import aiofiles

from datatransfer.config.settings import SettingsBag
from datatransfer.core.cancellation import CancellationScope
from datatransfer.core.exceptions import ConfigurationError
from datatransfer.extensions.base import DataSinkExtension, DataSourceExtension
from datatransfer.extensions.items import DictDataItem, to_plain

DISPLAY_NAME = "JSON"
LINE_DELIMITED_SUFFIXES = {".jsonl", ".ndjson"}
CHUNK_SIZE = 64 * 1024

_DECODER = json.JSONDecoder()
_WHITESPACE = re.compile(r"[ \t\n\r]*")

# array reader states
_FIRST, _SEPARATOR, _ELEMENT = range(3)


def _require_path(settings: SettingsBag, capability: str) -> Path:
    file_path = settings.get_str("FilePath")
    if not file_path:
        msg = f"JSON {capability} requires the 'FilePath' setting"
        raise ConfigurationError(msg, details={"setting": "FilePath"})
    return Path(file_path)


def _as_item(value: Any, path: Path) -> DictDataItem:
    if not isinstance(value, dict):
        msg = f"{path}: expected JSON objects, got {type(value).__name__}"
        raise ValueError(msg)
    return DictDataItem(value)


class JsonFileSource(DataSourceExtension):
    display_name = DISPLAY_NAME

    async def read(self, settings: SettingsBag, logger: Any, cancellation: CancellationScope):
        path = _require_path(settings, "source")
        logger.debug(f"Reading JSON from {path}")

        if path.suffix.lower() in LINE_DELIMITED_SUFFIXES:
            async with aiofiles.open(path, encoding="utf-8") as f:
                async for line in f:
                    cancellation.raise_if_cancelled()
                    if line.strip():
                        yield _as_item(json.loads(line), path)
            return

        async with aiofiles.open(path, encoding="utf-8") as f:
            head = ""
            while not head:
                chunk = await f.read(CHUNK_SIZE)
                if not chunk:
                    return
                head = chunk.lstrip()

            if not head.startswith("["):
                yield _as_item(json.loads(head + await f.read()), path)
                return

            async for record in _iter_array(f, head[1:]):
                cancellation.raise_if_cancelled()
                yield _as_item(record, path)


async def _iter_array(f, buffer: str):
    """
    Decode the elements of a JSON array one at a time.

    ``buffer`` holds whatever was already read past the opening ``[``; more
    text is pulled from ``f`` in ``CHUNK_SIZE`` pieces only when the next
    element does not fit, so at most one element plus one chunk is held.

    Raises:
        json.JSONDecodeError: On a missing or trailing comma, a malformed
            element or an array that is never closed
    """
    pos = 0
    eof = False
    expecting = _FIRST
    while True:
        pos = _WHITESPACE.match(buffer, pos).end()
        if pos < len(buffer):
            char = buffer[pos]
            if char == "]" and expecting != _ELEMENT:
                return
            if expecting == _SEPARATOR:
                if char != ",":
                    raise json.JSONDecodeError("Expecting ',' delimiter", buffer, pos)
                pos += 1
                expecting = _ELEMENT
                continue
            if char == "]":
                raise json.JSONDecodeError("Trailing comma before ']'", buffer, pos)
            try:
                value, end = _DECODER.raw_decode(buffer, pos)
            except json.JSONDecodeError:
                if eof:
                    raise
            else:
                # a number ending exactly at the chunk boundary may continue
                if end < len(buffer) or eof:
                    yield value
                    pos = end
                    expecting = _SEPARATOR
                    continue
        elif eof:
            raise json.JSONDecodeError("Unterminated array", buffer, pos)

        chunk = await f.read(CHUNK_SIZE)
        buffer = buffer[pos:] + chunk
        pos = 0
        eof = not chunk


class JsonFileSink(DataSinkExtension):
    display_name = DISPLAY_NAME

    async def write(
        self,
        items,
        settings: SettingsBag,
        source: DataSourceExtension,
        logger: Any,
        cancellation: CancellationScope,
    ) -> None:
        path = _require_path(settings, "sink")
        indent = 2 if settings.get_bool("Indented", False) else None
        include_nulls = settings.get_bool("IncludeNullFields", False)

        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        count = 0
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write("[")
            async for item in items:
                cancellation.raise_if_cancelled()
                record = to_plain(item, include_nulls)
                separator = "," if count else ""
                if indent:
                    separator += "\n"
                await f.write(separator + json.dumps(record, indent=indent, default=str))
                count += 1
            await f.write("\n]" if indent and count else "]")

        logger.debug(f"Wrote {count} item(s) to {path}")
