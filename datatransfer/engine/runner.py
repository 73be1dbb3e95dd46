"""
Execution Engine - runs planned operations source -> sink.

Each operation is a producer/consumer pair over one async iterator: the
source's ``read`` is started and handed, unconsumed, to the sink's
``write``. The sink pulls items at its own pace, so memory stays bounded
whatever the size of the record set. Operations run one after another in
planned order.

Usage:
    >>> runner = TransferRunner(default_registry())
    >>> exit_code = await runner.run(load_config("migrationsettings.json"))
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import aclosing, suppress
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from datatransfer.config.model import TransferConfig
from datatransfer.core.cancellation import CancellationScope
from datatransfer.core.exceptions import MissingExtensionConfigError, OperationCancelledError
from datatransfer.core.logger import get_logger
from datatransfer.engine.guard import check_operations
from datatransfer.engine.planner import Operation, plan_operations, require_extension_names
from datatransfer.extensions.base import DataItem
from datatransfer.extensions.registry import ExtensionRegistry

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


@dataclass
class OperationResult:
    """
    Outcome of one completed operation.

    Attributes:
        index: Position in the planned order
        source: Source display name
        sink: Sink display name
        items: Number of items the sink pulled from the source
        duration_seconds: Wall time from read start to write completion
    """

    index: int
    source: str
    sink: str
    items: int = 0
    duration_seconds: float = 0.0

    @property
    def items_per_second(self) -> float:
        if self.duration_seconds == 0:
            return 0.0
        return self.items / self.duration_seconds


@dataclass
class RunResult:
    """Outcome of a whole run: exit code plus per-operation statistics."""

    exit_code: int = EXIT_SUCCESS
    operations: list[OperationResult] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == EXIT_SUCCESS

    @property
    def total_items(self) -> int:
        return sum(op.items for op in self.operations)


class TransferRunner:
    """
    Plans, validates and executes the operations of one configuration.

    Failure model:
    - ``Source``/``Sink`` not configured: exit code 1, no extension touched
    - unknown extension name, container conflict, extension faults and
      cancellation: the exception propagates to the caller
    """

    def __init__(self, registry: ExtensionRegistry, logger: Any = None):
        self.registry = registry
        self.logger = logger or get_logger("datatransfer.engine")

    async def run(
        self,
        config: TransferConfig,
        cancellation: CancellationScope | None = None,
    ) -> int:
        """Run every operation and return the process exit code."""
        result = await self.execute(config, cancellation)
        return result.exit_code

    async def execute(
        self,
        config: TransferConfig,
        cancellation: CancellationScope | None = None,
    ) -> RunResult:
        cancellation = cancellation or CancellationScope()

        try:
            require_extension_names(config)
        except MissingExtensionConfigError as e:
            self.logger.error(f"{e.message}. Set '{e.setting}' in the configuration.")
            return RunResult(exit_code=EXIT_FAILURE, error=e.message)

        operations = plan_operations(config, self.registry)
        check_operations(operations)

        result = RunResult()
        total = len(operations)
        try:
            for operation in operations:
                cancellation.raise_if_cancelled()
                self.logger.info(
                    f"Starting operation {operation.index + 1}/{total}: {operation.label}"
                )
                op_result = await self.run_operation(operation, cancellation)
                result.operations.append(op_result)
                self.logger.info(
                    f"Completed operation {operation.index + 1}/{total}: "
                    f"{op_result.items} item(s) in {op_result.duration_seconds:.2f}s"
                )
        except OperationCancelledError as e:
            self.logger.warning(
                f"Transfer cancelled after {len(result.operations)}/{total} operation(s)"
                f"{f': {e.reason}' if e.reason else ''}"
            )
            raise

        self.logger.info(
            f"Transfer complete: {total} operation(s), {result.total_items} item(s)"
        )
        return result

    async def run_operation(
        self,
        operation: Operation,
        cancellation: CancellationScope,
    ) -> OperationResult:
        """
        Pipe one source stream into its sink.

        The pipe runs as its own task raced against the cancellation scope,
        so a source or sink blocked on I/O is interrupted as soon as the
        scope is tripped rather than at its next item.
        """
        started_at = datetime.now(UTC)
        op_result = OperationResult(
            index=operation.index,
            source=operation.source.display_name,
            sink=operation.sink.display_name,
        )

        pipe = asyncio.create_task(self._pipe(operation, op_result, cancellation))
        cancelled = asyncio.create_task(cancellation.wait())
        try:
            done, _ = await asyncio.wait({pipe, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not pipe.done():
                pipe.cancel()
                with suppress(asyncio.CancelledError):
                    await pipe

        if pipe not in done:
            raise OperationCancelledError(reason=cancellation.reason)
        pipe.result()

        op_result.duration_seconds = (datetime.now(UTC) - started_at).total_seconds()
        return op_result

    async def _pipe(
        self,
        operation: Operation,
        op_result: OperationResult,
        cancellation: CancellationScope,
    ) -> None:
        stream = operation.source.read(operation.source_settings, self.logger, cancellation)
        # closes the source even when the sink stops early or raises
        async with aclosing(self._relay(stream, op_result, cancellation)) as items:
            await operation.sink.write(
                items,
                operation.sink_settings,
                operation.source,
                self.logger,
                cancellation,
            )

    async def _relay(
        self,
        stream: AsyncIterator[DataItem],
        op_result: OperationResult,
        cancellation: CancellationScope,
    ) -> AsyncIterator[DataItem]:
        """Pass items through one at a time, counting them and honouring cancellation."""
        try:
            async for item in stream:
                cancellation.raise_if_cancelled()
                op_result.items += 1
                yield item
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
