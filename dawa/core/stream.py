"""Bounded producer/consumer hand-off between a decoder and its caller."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from time import perf_counter
from typing import Any, AsyncIterator, Callable, Generic, Iterable, List, Optional, TypeVar

from dawa.constants import BUFFER_SIZE, STOP_IMPORT
from dawa.errors import EndOfStream, StreamClosed

logger = logging.getLogger(__name__)

T = TypeVar("T")

Closer = Callable[[], Any]


class RecordStream(Generic[T]):
    """Records decoded by a background task, handed over through a bounded queue.

    The producer suspends once ``buffer_size`` records are waiting, so a slow
    consumer holds memory bounded. Records arrive in source order. After the
    last record, :meth:`next` raises the terminal condition on every call:
    :class:`~dawa.errors.EndOfStream` on a clean finish, otherwise the decode
    error that stopped the producer.

    ``async for`` iterates until the clean end and re-raises decode errors.
    """

    def __init__(
        self,
        records: AsyncIterator[T],
        *,
        buffer_size: int = BUFFER_SIZE,
        closers: Iterable[Closer] = (),
        name: str = "import",
    ) -> None:
        self.name = name
        self.produced = 0
        self.consumed = 0
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max(1, buffer_size))
        # Written once by the producer, before STOP_IMPORT is queued
        self._terminal: Optional[BaseException] = None
        self._observed = False
        self._closed = False
        self._closers: List[Closer] = list(closers)
        self._closers_run = False
        self._task = asyncio.create_task(self._produce(records), name=f"{name}-producer")

    # ──────────────────────────────────────────────────────────────────────
    # Producer side
    # ──────────────────────────────────────────────────────────────────────
    async def _produce(self, records: AsyncIterator[T]) -> None:
        start = perf_counter()
        try:
            async for record in records:
                await self._queue.put(record)
                self.produced += 1
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._terminal = exc
            logger.error(
                "%s: decoding stopped after %d records: %s", self.name, self.produced, exc
            )
        else:
            self._terminal = EndOfStream()
            duration = perf_counter() - start
            rate = self.produced / duration if duration > 0 else 0.0
            logger.info(
                "%s: decoded %d records in %.2fs (%.1f rec/s)",
                self.name, self.produced, duration, rate,
            )
        finally:
            aclose = getattr(records, "aclose", None)
            if aclose is not None:
                try:
                    await aclose()
                except Exception as exc:
                    logger.warning("%s: closing the decoder failed: %s", self.name, exc)
        await self._queue.put(STOP_IMPORT)

    # ──────────────────────────────────────────────────────────────────────
    # Consumer side
    # ──────────────────────────────────────────────────────────────────────
    @property
    def buffered(self) -> int:
        """Records decoded but not yet taken by the consumer."""
        return self._queue.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def done(self) -> bool:
        """True once the producer has stopped, for whatever reason."""
        return self._task.done()

    async def next(self) -> T:
        """Return the next record.

        Raises the terminal condition once the stream is exhausted, and
        :class:`~dawa.errors.StreamClosed` after :meth:`aclose`.
        """
        if self._observed:
            assert self._terminal is not None
            raise self._terminal
        if self._closed:
            raise StreamClosed(f"{self.name}: stream closed")

        item = await self._queue.get()
        if item is STOP_IMPORT and self._closed:
            # pass the wake-up on to any other waiting consumer
            self._queue.put_nowait(STOP_IMPORT)
            raise StreamClosed(f"{self.name}: stream closed")
        if item is STOP_IMPORT:
            self._observed = True
            assert self._terminal is not None
            raise self._terminal
        self.consumed += 1
        return item

    def __aiter__(self) -> "RecordStream[T]":
        return self

    async def __anext__(self) -> T:
        try:
            return await self.next()
        except EndOfStream:
            raise StopAsyncIteration from None

    # ──────────────────────────────────────────────────────────────────────
    # Shutdown
    # ──────────────────────────────────────────────────────────────────────
    def add_closer(self, closer: Closer) -> None:
        """Register a resource to release on :meth:`aclose` (sync or async callable)."""
        self._closers.append(closer)

    async def aclose(self) -> None:
        """Stop the producer and release every registered resource.

        Consumers waiting in :meth:`next` wake up with
        :class:`~dawa.errors.StreamClosed`. Safe to call more than once. All
        closers run even if one fails; the first failure is raised afterwards.
        """
        self._closed = True
        if not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            logger.debug(
                "%s: closed early after %d of %d decoded records were consumed",
                self.name, self.consumed, self.produced,
            )
        # release consumers blocked in next(): drop what is buffered, queue the sentinel
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(STOP_IMPORT)
        if self._closers_run:
            return
        self._closers_run = True

        first_error: Optional[BaseException] = None
        for closer in self._closers:
            try:
                result = closer()
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.warning("%s: closing resource failed: %s", self.name, exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    async def __aenter__(self) -> "RecordStream[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
