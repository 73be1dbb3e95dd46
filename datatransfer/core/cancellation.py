"""
Cooperative cancellation shared by one transfer run.

A single CancellationScope is created per run and handed explicitly to the
runner, every source read and every sink write. Extensions call
``raise_if_cancelled()`` at their suspension points; the runner also checks
it before each item crosses from source to sink and before each operation.
"""

import asyncio
import signal

from datatransfer.core.exceptions import OperationCancelledError
from datatransfer.core.logger import get_logger

logger = get_logger(__name__)


class CancellationScope:
    """
    Run-wide cancellation flag backed by an asyncio.Event.

    Example:
        >>> scope = CancellationScope()
        >>> scope.install_signal_handlers()
        >>> await runner.run(config, scope)
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Idempotent; the first reason wins."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        logger.info(f"Cancellation requested{f': {reason}' if reason else ''}")

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(reason=self._reason)

    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._event.wait()

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Tie SIGINT and SIGTERM to this scope."""
        loop = loop or asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self.cancel, sig.name)
            except NotImplementedError:  # pragma: no cover
                pass  # Windows doesn't support add_signal_handler
