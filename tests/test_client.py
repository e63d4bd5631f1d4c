from __future__ import annotations

import asyncio

import httpx
import orjson
import pytest
from shapely.geometry import Point

from dawa.clients import DawaClient, error_from_body
from dawa.config import Config
from dawa.errors import DecodeError, FramingError, RequestError, ServiceError
from dawa.models import AutocompleteHit, Kommune, Postnummer
from dawa.query import (
    AdresseQuery,
    ListQuery,
    PostnummerQuery,
    ReverseQuery,
    get_postnummer,
)


def _json(payload, status: int = 200) -> httpx.Response:
    return httpx.Response(status, content=orjson.dumps(payload))


def _run(transport, scenario, **client_kwargs):
    async def main():
        async with DawaClient(transport=transport, **client_kwargs) as client:
            return await scenario(client)

    return asyncio.run(main())


def test_list_query_streams_records(fake_service, kommuner):
    transport = fake_service({"/kommuner": lambda r: _json(kommuner)})

    async def scenario(client):
        return await ListQuery("kommuner").q("k*").all(client)

    records = _run(transport, scenario)
    assert records == [Kommune.from_json(k) for k in kommuner]

    params = transport.requests[0].url.params
    assert params["q"] == "k*"
    assert params["noformat"] == ""


def test_explicit_noformat_is_not_repeated(fake_service, kommuner):
    transport = fake_service({"/kommuner": lambda r: _json(kommuner)})
    _run(transport, lambda client: ListQuery("kommuner").no_format().all(client))
    assert transport.requests[0].url.query.count(b"noformat") == 1


def test_query_streams_large_bodies_in_chunks(fake_service, postnumre_json):
    transport = fake_service(
        {"/postnumre": lambda r: httpx.Response(200, content=postnumre_json)}
    )

    async def scenario(client):
        stream = await PostnummerQuery().nr("9981", "9982", "9990").iter(client)
        async with stream:
            return [p async for p in stream]

    records = _run(transport, scenario, chunk_size=16, buffer_size=1)
    assert [p.nr for p in records] == ["9981", "9982", "9990"]
    assert all(isinstance(p, Postnummer) for p in records)


def test_truncated_body_fails_the_stream(fake_service, postnumre_json):
    body = postnumre_json[:-20]
    transport = fake_service({"/postnumre": lambda r: httpx.Response(200, content=body)})

    async def scenario(client):
        got = []
        with pytest.raises(FramingError):
            async with await PostnummerQuery().iter(client) as stream:
                async for p in stream:
                    got.append(p)
        return got

    assert len(_run(transport, scenario)) == 2


def test_service_error_payload(fake_service):
    payload = {
        "type": "QueryParameterFormatError",
        "title": "One or more query parameters was ill-formed.",
        "details": [["postnr", "String does not match pattern ^\\d{4}$"]],
    }
    transport = fake_service({"/adresser": lambda r: _json(payload, 400)})

    async def scenario(client):
        with pytest.raises(ServiceError) as info:
            await AdresseQuery().postnr("abc").iter(client)
        return info.value

    error = _run(transport, scenario)
    assert error.type == "QueryParameterFormatError"
    assert error.title == payload["title"]
    assert error.details == payload["details"]
    assert error.status_code == 400
    assert str(error).startswith("QueryParameterFormatError:One or more query parameters")
    assert "Request URL:http://dawa.aws.dk/adresser?postnr=abc&noformat=" in str(error)


def test_error_without_payload(fake_service):
    transport = fake_service({"/adresser": lambda r: httpx.Response(500)})

    async def scenario(client):
        with pytest.raises(RequestError) as info:
            await AdresseQuery().all(client)
        return info.value

    error = _run(transport, scenario)
    assert not isinstance(error, ServiceError)
    assert str(error) == "Error with request http://dawa.aws.dk/adresser?noformat="


@pytest.mark.parametrize("body", [b"", b"<html>", b"[1]", b'{"title": "no type"}'])
def test_unstructured_error_bodies(body):
    error = error_from_body("http://x/y", 502, body)
    assert type(error) is RequestError
    assert error.url == "http://x/y"


def test_unknown_path_is_a_service_error(fake_service):
    transport = fake_service({})

    async def scenario(client):
        with pytest.raises(ServiceError) as info:
            await ListQuery("sogne").first(client)
        return info.value

    assert _run(transport, scenario).type == "ResourceNotFoundError"


def test_lookup_of_missing_record_returns_none(fake_service):
    transport = fake_service({"/postnumre": lambda r: _json([])})
    assert _run(transport, lambda client: get_postnummer(client, "0000")) is None
    assert transport.requests[0].url.params["nr"] == "0000"


def test_autocomplete(fake_service):
    hits = [{"tekst": "9982 Ålbæk", "postnummer": {"nr": "9982", "navn": "Ålbæk"}}]
    transport = fake_service({"/postnumre/autocomplete": lambda r: _json(hits)})

    async def scenario(client):
        return await PostnummerQuery.autocomplete_query().q("ål").all(client)

    result = _run(transport, scenario)
    assert len(result) == 1
    assert isinstance(result[0], AutocompleteHit)
    assert result[0].item.nr == "9982"


def test_geojson(fake_service):
    collection = {
        "type": "FeatureCollection",
        "crs": {"type": "name", "properties": {"name": "EPSG:4326"}},
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [8.40179905638495, 55.4454386963562]},
                "properties": {"id": "0a3f50b9-68b1-32b8-e044-0003ba298018", "etage": "1"},
            }
        ],
    }
    transport = fake_service({"/adresser": lambda r: _json(collection)})
    query = AdresseQuery().postnr("6720")

    result = _run(transport, query.geojson)
    assert len(result) == 1
    feature = next(iter(result))
    assert isinstance(feature.geometry, Point)
    assert feature.geometry.x == pytest.approx(8.40179905638495)
    assert feature.properties["etage"] == "1"
    assert result.to_json()["crs"] == collection["crs"]

    params = transport.requests[0].url.params
    assert params["format"] == "geojson"
    assert params["noformat"] == ""
    # the query itself is unchanged
    assert query.url() == "http://dawa.aws.dk/adresser?postnr=6720"


def test_reverse(fake_service, kommuner):
    transport = fake_service({"/kommuner/reverse": lambda r: _json(kommuner[0])})
    query = ReverseQuery("kommuner", 12.5851471984198, 55.6832383751223)

    record = _run(transport, query.get)
    assert record == Kommune.from_json(kommuner[0])
    params = transport.requests[0].url.params
    assert params["x"] == "12.5851471984198"
    assert params["y"] == "55.6832383751223"


def test_reverse_outside_every_area(fake_service):
    transport = fake_service({"/sogne/reverse": lambda r: httpx.Response(200, content=b"null")})
    query = ReverseQuery("sogne", 0.0, 0.0)

    assert _run(transport, query.get) is None

    async def scenario(client):
        async with await query.iter(client) as stream:
            return [r async for r in stream]

    assert _run(transport, scenario) == []


def test_empty_body_is_a_failed_request(fake_service):
    transport = fake_service({"/kommuner/reverse": lambda r: httpx.Response(200)})
    with pytest.raises(RequestError):
        _run(transport, ReverseQuery("kommuner", 1.0, 2.0).get)


def test_blank_body_is_invalid_json(fake_service):
    transport = fake_service({"/kommuner/reverse": lambda r: httpx.Response(200, content=b" \n")})
    with pytest.raises(DecodeError, match="invalid JSON"):
        _run(transport, ReverseQuery("kommuner", 1.0, 2.0).get)


def test_client_must_be_entered():
    async def scenario():
        await DawaClient().fetch("http://dawa.aws.dk/kommuner")

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())


def test_from_config():
    config = Config(
        host="https://api.dataforsyningen.dk/",
        request_timeout=5.0,
        max_connections=2,
        buffer_size=7,
        chunk_size=1024,
        strict_fields=True,
    )
    client = DawaClient.from_config(config)
    assert client.host == "https://api.dataforsyningen.dk"
    assert client.buffer_size == 7
    assert client.chunk_size == 1024
    assert client.strict_fields is True
