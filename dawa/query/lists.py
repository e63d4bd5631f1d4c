"""Generic list queries and reverse geocoding over any :class:`ResourceKind`."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, AsyncIterator, Optional

import orjson

from dawa.core.stream import RecordStream
from dawa.errors import DecodeError
from dawa.models import ResourceKind

from .base import ResourceQuery

if TYPE_CHECKING:
    from dawa.clients.dawa import DawaClient


def format_coordinate(value: float) -> str:
    """Shortest decimal text for ``value`` without an exponent (``12.0`` -> ``"12"``)."""
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


class ListQuery(ResourceQuery):
    """List or autocomplete any resource kind, e.g. ``ListQuery("kommuner").q("køb*")``.

    Unknown kinds raise ``ValueError`` here, before any request is made.
    """

    def q(self, text: str):
        return self._set("q", [text], multi=True)

    def kode(self, *codes: str):
        return self._set("kode", codes, multi=True)

    def navn(self, name: str):
        return self._set("navn", [name], multi=True)


class ReverseQuery(ResourceQuery):
    """Find the ``kind`` record containing the point ``(x, y)``.

    ``x`` is longitude (or easting in ETRS89/UTM32) and ``y`` latitude (or
    northing). ``srid`` selects the coordinate system, default 4326 (WGS84).
    The result holds zero or one records.
    """

    def __init__(
        self,
        kind: ResourceKind | str,
        x: float,
        y: float,
        srid: Optional[str] = None,
        *,
        host: Optional[str] = None,
    ) -> None:
        super().__init__(kind, host=host)
        self.on_path(self.kind.path + "/reverse")
        self._set("x", [format_coordinate(x)])
        self._set("y", [format_coordinate(y)])
        if srid:
            self._set("srid", [srid])

    async def get(self, client: "DawaClient", *, strict: Optional[bool] = None) -> Optional[Any]:
        """Return the record at the point, or ``None`` when the body is ``null``."""
        strict = client.strict_fields if strict is None else strict
        url = self._execution_url()
        body = await client.fetch(url)
        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError as exc:
            raise DecodeError(f"invalid JSON from {url}: {exc}") from exc
        if payload is None:
            return None
        return self._decoder(strict)(payload)

    async def iter(
        self,
        client: "DawaClient",
        *,
        strict: Optional[bool] = None,
        buffer_size: Optional[int] = None,
        **_ignored: Any,
    ) -> RecordStream[Any]:
        """Stream the zero or one results, for symmetry with the list queries.

        The single JSON object is decoded before this returns, so decode
        errors raise here rather than from the stream.
        """
        record = await self.get(client, strict=strict)

        async def single() -> AsyncIterator[Any]:
            if record is not None:
                yield record

        return RecordStream(
            single(),
            buffer_size=buffer_size or client.buffer_size,
            name=f"GET {self.path}",
        )
