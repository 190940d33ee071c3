"""
In-memory byte pipe bridging a push-style writer to a pull-style reader.

The writer side (``write``/``close``/``abort``) is handed to the caller of a
streaming upload; the reader side (``async for chunk in pipe``) is handed to
the HTTP client as the request body.
"""

import asyncio
import logging
from typing import AsyncIterator, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNKS = 16


class _EndOfStream:
    pass


class _Aborted:
    def __init__(self, error: BaseException):
        self.error = error


_EOF = _EndOfStream()


class AsyncPipe:
    """
    Bounded-buffer channel with backpressure.

    ``write`` suspends while ``max_chunks`` chunks are waiting to be read.
    The reader ends after ``close`` and raises after ``abort``. Once the
    reader has failed (``fail``), pending and later writes raise
    ``BrokenPipeError`` instead of waiting forever.
    """

    def __init__(self, max_chunks: int = DEFAULT_MAX_CHUNKS):
        if max_chunks < 1:
            raise ValueError("max_chunks must be >= 1")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_chunks)
        self._closed = False
        self._error: Optional[BaseException] = None
        self._bytes_written = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def broken(self) -> bool:
        return self._error is not None

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    def _check_writable(self) -> None:
        if self._error is not None:
            raise BrokenPipeError(f"reader side failed: {self._error}") from self._error
        if self._closed:
            raise ValueError("write to closed pipe")

    # --- Writer side -------------------------------------------------------

    async def write(self, data: Union[bytes, bytearray, memoryview, str]) -> int:
        """Queue a chunk, waiting while the buffer is full. Returns bytes queued."""
        self._check_writable()
        if isinstance(data, str):
            data = data.encode("utf-8")
        chunk = bytes(data)
        if not chunk:
            return 0
        await self._queue.put(chunk)
        # The reader may have failed while we were waiting for room
        if self._error is not None:
            raise BrokenPipeError(f"reader side failed: {self._error}") from self._error
        self._bytes_written += len(chunk)
        return len(chunk)

    async def close(self) -> None:
        """Signal end of data. Waits for room for the end marker."""
        if self._closed:
            return
        self._closed = True
        if self._error is None:
            await self._queue.put(_EOF)

    def abort(self, error: Optional[BaseException] = None) -> None:
        """
        Cancel the stream: buffered chunks are dropped and the reader raises
        ``error`` (ConnectionAbortedError by default).
        """
        if self._error is not None:
            return
        self._closed = True
        self._drain()
        self._queue.put_nowait(_Aborted(error or ConnectionAbortedError("upload stream aborted by writer")))

    async def __aenter__(self) -> "AsyncPipe":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc is None:
            await self.close()
        else:
            self.abort(exc)

    # --- Reader side -------------------------------------------------------

    def fail(self, error: BaseException) -> None:
        """Mark the reader as failed and release writers blocked on a full buffer."""
        if self._error is not None:
            return
        self._error = error
        self._drain()
        logger.debug(f"Pipe broken by reader failure: {error}")

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return

    async def chunks(self) -> AsyncIterator[bytes]:
        while True:
            item = await self._queue.get()
            if item is _EOF:
                return
            if isinstance(item, _Aborted):
                raise item.error
            yield item

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.chunks()
