"""Query builder shared by every endpoint, plus execution against a client."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

import httpx
import orjson

from dawa.constants import DEFAULT_HOST
from dawa.core.stream import RecordStream
from dawa.errors import DecodeError, EndOfStream, MergeError
from dawa.geojson import FeatureCollection
from dawa.importers.jsonarray import JSONFraming, import_values
from dawa.models import AutocompleteHit, ResourceKind

from .params import Parameter

if TYPE_CHECKING:
    from dawa.clients.dawa import DawaClient

logger = logging.getLogger(__name__)


class Query:
    """An endpoint path plus ordered query parameters.

    Setting a single-valued parameter twice keeps the first value and
    records a warning. Setting a multi-valued one again appends its values.
    Setters return the query so calls chain.
    """

    def __init__(self, path: str = "", host: Optional[str] = None) -> None:
        self.host = (host or DEFAULT_HOST).rstrip("/")
        self.path = path
        self._params: Dict[str, Parameter] = {}
        self._warnings: List[str] = []

    def _add(self, param: Parameter) -> "Query":
        key = param.key
        old = self._params.get(key)
        if old is None:
            # dicts keep insertion order, which is the rendering order
            self._params[key] = param
            return self
        if not param.multi:
            self._warn(f"Ignoring second value of key {key}")
            return self
        try:
            old.merge(param)
        except MergeError as exc:
            self._warn(f"Error while adding second value of key {key}:{exc}")
        return self

    def _warn(self, message: str) -> None:
        logger.warning("%s", message)
        self._warnings.append(message)

    def _set(self, name: str, values: Iterable[Any], *, multi: bool = False,
             null: bool = False) -> "Query":
        return self._add(Parameter(name, [str(v) for v in values], multi=multi, null=null))

    def add(self, key: str, value: str) -> "Query":
        """Add an arbitrary single-valued ``key=value`` pair, unencoded."""
        return self._set(key, [value], null=True)

    def warnings(self) -> List[str]:
        """Problems met while building the query, in the order they occurred."""
        return list(self._warnings)

    def has_warnings(self) -> bool:
        return bool(self._warnings)

    def with_host(self, host: str) -> "Query":
        self.host = host.rstrip("/")
        return self

    def on_path(self, path: str) -> "Query":
        self.path = path
        return self

    def no_format(self) -> "Query":
        """Ask the service for compact output."""
        return self._set("noformat", [], null=True)

    def url(self) -> str:
        out = self.host + self.path
        if not self._params:
            return out
        return out + "?" + "&".join(p.render() for p in self._params.values())

    async def request(self, client: "DawaClient") -> httpx.Response:
        """Issue the GET and return the streamed response (status below 400).

        The caller owns the response and must close it.
        """
        return await client.open_stream(self.url())

    def clone(self) -> "Query":
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.url()!r})"


class GeoJSONQuery(Query):
    """A query whose endpoint can also answer as a GeoJSON FeatureCollection."""

    def _execution_url(self) -> str:
        query = self.clone()
        if "noformat" not in query._params:
            query.no_format()
        return query.url()

    async def geojson(self, client: "DawaClient") -> FeatureCollection:
        """Fetch the results as GeoJSON; the query itself is left unchanged."""
        query = self.clone()
        query.add("format", "geojson")
        url = query._execution_url()
        body = await client.fetch(url)
        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError as exc:
            raise DecodeError(f"invalid GeoJSON from {url}: {exc}") from exc
        return FeatureCollection.from_json(payload)


class ResourceQuery(GeoJSONQuery):
    """Query over one resource kind, executed as a stream of typed records.

    With ``autocomplete`` set the query targets ``/<kind>/autocomplete``
    and yields :class:`~dawa.models.AutocompleteHit` values instead.
    """

    def __init__(
        self,
        kind: ResourceKind | str,
        *,
        autocomplete: bool = False,
        host: Optional[str] = None,
    ) -> None:
        self.kind = ResourceKind.parse(kind)
        self.autocomplete = autocomplete
        path = self.kind.path + ("/autocomplete" if autocomplete else "")
        super().__init__(path, host)

    def _decoder(self, strict: bool):
        record_type = self.kind.record_type
        if self.autocomplete:
            key = self.kind.autocomplete_key
            return lambda value: AutocompleteHit.from_json(value, record_type, key, strict=strict)
        return lambda value: record_type.from_json(value, strict=strict)

    async def iter(
        self,
        client: "DawaClient",
        *,
        framing: JSONFraming = JSONFraming.SCAN,
        strict: Optional[bool] = None,
        buffer_size: Optional[int] = None,
    ) -> RecordStream[Any]:
        """Run the query and stream the results.

        The response body is released when the stream is closed. Request
        failures raise here; decode failures are raised by the stream.
        ``strict`` and ``buffer_size`` default to the client's settings.
        """
        strict = client.strict_fields if strict is None else strict
        url = self._execution_url()
        response = await client.open_stream(url)
        try:
            return await import_values(
                self._decoder(strict),
                response.aiter_bytes(),
                framing=framing,
                buffer_size=buffer_size or client.buffer_size,
                chunk_size=client.chunk_size,
                closers=[response.aclose],
                name=f"GET {self.kind.path}",
            )
        except BaseException:
            await response.aclose()
            raise

    async def all(self, client: "DawaClient", **kwargs: Any) -> List[Any]:
        """Run the query and collect every result."""
        async with await self.iter(client, **kwargs) as stream:
            return [record async for record in stream]

    async def first(self, client: "DawaClient", **kwargs: Any) -> Optional[Any]:
        """Return the first result, or ``None`` when there are none."""
        async with await self.iter(client, **kwargs) as stream:
            try:
                return await stream.next()
            except EndOfStream:
                return None
