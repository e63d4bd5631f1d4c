"""Stream records out of a top-level JSON array.

Two framings are supported:

* ``SCAN`` reads one array element at a time with :class:`ByteReader` and
  decodes it with ``orjson``. The framing is checked between elements: a
  comma continues, ``]`` ends the stream, anything else is an error.
* ``BULK`` hands the whole input to ``ijson``'s incremental parser.

Both yield the same records for well-formed input.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, AsyncIterator, Callable, Iterable, Type, TypeVar

import ijson
import orjson

from dawa.constants import BUFFER_SIZE, CHUNK_SIZE
from dawa.core.io import ByteReader, Source
from dawa.core.stream import Closer, RecordStream
from dawa.errors import FramingError
from dawa.models import (
    AdgangsAdresse,
    Adresse,
    AutocompleteHit,
    Postnummer,
    Record,
    ResourceKind,
    SupplerendeBynavn,
    Vejstykke,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound=Record)

_COMMA = ord(",")
_RBRACKET = ord("]")
_LBRACKET = ord("[")


class JSONFraming(str, Enum):
    SCAN = "scan"
    BULK = "bulk"


async def _scan_elements(reader: ByteReader) -> AsyncIterator[Any]:
    """Yield decoded elements; the opening ``[`` has already been consumed."""
    if await reader.peek_non_space() == _RBRACKET:
        await reader.next_non_space()
        return

    while True:
        offset = reader.offset
        raw = await reader.read_value()
        try:
            value = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise FramingError(f"invalid JSON value at byte {offset}: {exc}") from exc
        yield value

        delim = await reader.next_non_space()
        if delim == _COMMA:
            continue
        if delim == _RBRACKET:
            return
        if delim is None:
            raise FramingError(f"unexpected end of input at byte {reader.offset}, array not closed")
        raise FramingError(
            f"invalid character {chr(delim)!r} after array element at byte {reader.offset - 1}"
        )


async def _bulk_elements(reader: ByteReader) -> AsyncIterator[Any]:
    try:
        async for value in ijson.items_async(reader, "item", use_float=True):
            yield value
    except ijson.JSONError as exc:
        raise FramingError(f"invalid JSON near byte {reader.offset}: {exc}") from exc


async def _decoded(
    elements: AsyncIterator[Any], decode: Callable[[Any], T]
) -> AsyncIterator[T]:
    async for element in elements:
        yield decode(element)


async def import_values(
    decode: Callable[[Any], T],
    source: Source,
    *,
    framing: JSONFraming = JSONFraming.SCAN,
    buffer_size: int = BUFFER_SIZE,
    chunk_size: int = CHUNK_SIZE,
    closers: Iterable[Closer] = (),
    name: str = "json import",
) -> RecordStream[T]:
    """Start streaming the elements of a JSON array through ``decode``.

    The input is read up to the opening ``[`` before this returns (``SCAN``
    consumes it, ``BULK`` leaves it for ``ijson``); input that is not an array
    raises :class:`~dawa.errors.FramingError` here rather than from the stream.
    """
    framing = JSONFraming(framing)
    reader = ByteReader(source, chunk_size)
    try:
        if framing is JSONFraming.SCAN:
            found = await reader.skip_through(b"[")
        else:
            # the document itself must be an array
            found = await reader.peek_non_space() == _LBRACKET
    except BaseException:
        await reader.aclose()
        raise
    if not found:
        await reader.aclose()
        raise FramingError("no JSON array found in input")
    if framing is JSONFraming.SCAN:
        elements = _scan_elements(reader)
    else:
        elements = _bulk_elements(reader)
    logger.debug("%s: streaming with %s framing", name, framing.value)

    return RecordStream(
        _decoded(elements, decode),
        buffer_size=buffer_size,
        closers=[*closers, reader.aclose],
        name=name,
    )


async def import_json(
    record_type: Type[R],
    source: Source,
    *,
    framing: JSONFraming = JSONFraming.SCAN,
    strict: bool = False,
    buffer_size: int = BUFFER_SIZE,
    chunk_size: int = CHUNK_SIZE,
    closers: Iterable[Closer] = (),
) -> RecordStream[R]:
    """Stream ``record_type`` records from a JSON array.

    ``strict`` rejects any object key the record does not declare.
    """

    def decode(value: Any) -> R:
        return record_type.from_json(value, strict=strict)

    return await import_values(
        decode,
        source,
        framing=framing,
        buffer_size=buffer_size,
        chunk_size=chunk_size,
        closers=closers,
        name=f"{record_type.__name__} json import",
    )


async def import_autocomplete_json(
    kind: ResourceKind | str,
    source: Source,
    *,
    framing: JSONFraming = JSONFraming.SCAN,
    strict: bool = False,
    buffer_size: int = BUFFER_SIZE,
    chunk_size: int = CHUNK_SIZE,
    closers: Iterable[Closer] = (),
) -> RecordStream[AutocompleteHit[Any]]:
    """Stream autocomplete suggestions for ``kind``."""
    kind = ResourceKind.parse(kind)
    record_type, key = kind.record_type, kind.autocomplete_key

    def decode(value: Any) -> AutocompleteHit[Any]:
        return AutocompleteHit.from_json(value, record_type, key, strict=strict)

    return await import_values(
        decode,
        source,
        framing=framing,
        buffer_size=buffer_size,
        chunk_size=chunk_size,
        closers=closers,
        name=f"{kind.value} autocomplete import",
    )


# ──────────────────────────────────────────────────────────────────────────────
# Per-kind entry points
# ──────────────────────────────────────────────────────────────────────────────
async def import_adresser_json(source: Source, **kwargs: Any) -> RecordStream[Adresse]:
    return await import_json(Adresse, source, **kwargs)


async def import_adgangsadresser_json(
    source: Source, **kwargs: Any
) -> RecordStream[AdgangsAdresse]:
    return await import_json(AdgangsAdresse, source, **kwargs)


async def import_postnumre_json(source: Source, **kwargs: Any) -> RecordStream[Postnummer]:
    return await import_json(Postnummer, source, **kwargs)


async def import_vejstykker_json(source: Source, **kwargs: Any) -> RecordStream[Vejstykke]:
    return await import_json(Vejstykke, source, **kwargs)


async def import_supplerendebynavne_json(
    source: Source, **kwargs: Any
) -> RecordStream[SupplerendeBynavn]:
    return await import_json(SupplerendeBynavn, source, **kwargs)

