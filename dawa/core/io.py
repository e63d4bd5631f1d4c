"""Byte sources for the decoders: files, HTTP bodies, in-memory buffers."""

from __future__ import annotations

import codecs
import inspect
import re
from pathlib import Path
from typing import Any, AsyncIterator, Optional, Union

import aiofiles

from dawa.constants import CHUNK_SIZE
from dawa.errors import FramingError

_WS = b" \t\r\n"
_OPEN = (ord("{"), ord("["))
_QUOTE = ord('"')
_BACKSLASH = ord("\\")

# Next structural byte outside a string, next interesting byte inside one,
# and the first byte after a bare scalar.
_STRUCT = re.compile(rb'["{}\[\]]')
_STRING_END = re.compile(rb'["\\]')
_SCALAR_END = re.compile(rb"[\s,\]}]")

Source = Union[bytes, bytearray, memoryview, str, Any]


async def as_chunks(source: Source, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield ``source`` as byte chunks.

    Accepts bytes or text, an async iterable of chunks (``httpx`` response
    bodies), a binary file object with a sync or async ``read`` (``aiofiles``
    handles), or a sync iterable of chunks.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    if isinstance(source, (bytes, bytearray, memoryview)):
        if source:
            yield bytes(source)
        return

    # aiofiles handles are also async-iterable, but by line
    read = getattr(source, "read", None)
    if read is not None:
        while True:
            chunk = read(chunk_size)
            if inspect.isawaitable(chunk):
                chunk = await chunk
            if not chunk:
                return
            yield chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)

    if hasattr(source, "__aiter__"):
        async for chunk in source:
            yield chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)
        return

    for chunk in source:
        yield chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)


class ByteReader:
    """Buffered cursor over an async byte-chunk iterator.

    Provides the primitives the JSON scanner and CSV reader need (single
    bytes, delimiter search, whole JSON values, text lines) and an async
    ``read(n)`` so it can also be handed to ``ijson``.
    """

    def __init__(self, source: Source, chunk_size: int = CHUNK_SIZE) -> None:
        self._chunks = as_chunks(source, chunk_size).__aiter__()
        self._buf = b""
        self._pos = 0
        self._eof = False
        # bytes consumed before the start of _buf
        self._base = 0

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._base + self._pos

    async def _fill(self) -> bool:
        """Append the next non-empty chunk to the buffer; False at end of input."""
        while not self._eof:
            try:
                chunk = await self._chunks.__anext__()
            except StopAsyncIteration:
                self._eof = True
                break
            if not chunk:
                continue
            self._base += self._pos
            self._buf = self._buf[self._pos:] + chunk
            self._pos = 0
            return True
        return False

    async def aclose(self) -> None:
        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            await aclose()

    # ──────────────────────────────────────────────────────────────────────
    # Raw reads
    # ──────────────────────────────────────────────────────────────────────
    async def read(self, n: int = -1) -> bytes:
        """Return up to ``n`` bytes (all remaining when ``n < 0``); ``b""`` at EOF."""
        if self._pos >= len(self._buf) and not await self._fill():
            return b""
        if n is None or n < 0:
            while await self._fill():
                pass
            data = self._buf[self._pos:]
        else:
            data = self._buf[self._pos:self._pos + n]
        self._pos += len(data)
        return data

    async def read_byte(self) -> Optional[int]:
        if self._pos >= len(self._buf) and not await self._fill():
            return None
        b = self._buf[self._pos]
        self._pos += 1
        return b

    async def peek_non_space(self) -> Optional[int]:
        """Skip JSON whitespace and return the next byte without consuming it."""
        while True:
            while self._pos < len(self._buf):
                b = self._buf[self._pos]
                if b not in _WS:
                    return b
                self._pos += 1
            if not await self._fill():
                return None

    async def next_non_space(self) -> Optional[int]:
        b = await self.peek_non_space()
        if b is not None:
            self._pos += 1
        return b

    async def skip_through(self, delim: bytes) -> bool:
        """Consume input up to and including ``delim``; False if it never appears."""
        while True:
            idx = self._buf.find(delim, self._pos)
            if idx >= 0:
                self._pos = idx + len(delim)
                return True
            self._pos = len(self._buf)
            if not await self._fill():
                return False

    # ──────────────────────────────────────────────────────────────────────
    # JSON values
    # ──────────────────────────────────────────────────────────────────────
    async def read_value(self) -> bytes:
        """Return the raw bytes of the next complete JSON value.

        Only nesting and string escapes are tracked; the caller decodes the
        value and reports syntax errors. Raises
        :class:`~dawa.errors.FramingError` if input ends inside the value.
        """
        first = await self.peek_non_space()
        if first is None:
            raise FramingError(f"unexpected end of input at byte {self.offset}, expected a value")

        start = self._pos
        i = start
        depth = 0
        in_str = False
        scalar = first not in _OPEN and first != _QUOTE

        while True:
            buf = self._buf
            if scalar:
                m = _SCALAR_END.search(buf, i)
                if m is not None:
                    return self._take(start, m.start())
                i = len(buf)
            elif in_str:
                m = _STRING_END.search(buf, i)
                if m is None:
                    i = len(buf)
                elif buf[m.start()] == _BACKSLASH:
                    if m.start() + 1 < len(buf):
                        i = m.start() + 2
                        continue
                    # escape split across chunks: rescan from the backslash
                    i = m.start()
                else:
                    in_str = False
                    i = m.start() + 1
                    if depth == 0:
                        return self._take(start, i)
                    continue
            else:
                m = _STRUCT.search(buf, i)
                if m is None:
                    i = len(buf)
                else:
                    j = m.start()
                    c = buf[j]
                    i = j + 1
                    if c == _QUOTE:
                        in_str = True
                    elif c in _OPEN:
                        depth += 1
                    else:
                        depth -= 1
                        if depth == 0:
                            return self._take(start, i)
                    continue

            rel = i - start
            if not await self._fill():
                if scalar:
                    return self._take(self._pos, len(self._buf))
                raise FramingError(
                    f"unexpected end of input at byte {self._base + len(self._buf)} inside a JSON value"
                )
            # _fill drops consumed bytes, so the value now begins at _pos
            start = self._pos
            i = start + rel

    def _take(self, start: int, end: int) -> bytes:
        value = self._buf[start:end]
        self._pos = end
        return value

    # ──────────────────────────────────────────────────────────────────────
    # Text lines
    # ──────────────────────────────────────────────────────────────────────
    async def lines(self) -> AsyncIterator[str]:
        """Yield UTF-8 text lines, each ending in ``"\\n"`` except possibly the last.

        A leading byte-order mark is dropped.
        """
        decoder = codecs.getincrementaldecoder("utf-8-sig")()
        tail = ""
        while True:
            if self._pos >= len(self._buf) and not await self._fill():
                break
            data = self._buf[self._pos:]
            self._pos = len(self._buf)
            parts = (tail + decoder.decode(data)).split("\n")
            tail = parts.pop()
            for part in parts:
                yield part + "\n"
        tail += decoder.decode(b"", final=True)
        if tail:
            yield tail


async def open_export(path: Union[str, Path]) -> Any:
    """Open an export file for reading with ``aiofiles``; the caller closes it."""
    return await aiofiles.open(Path(path), "rb")
