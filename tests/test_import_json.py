from __future__ import annotations

import asyncio
import io

import pytest

from dawa.errors import EndOfStream, FramingError, UnknownFieldError
from dawa.importers import (
    JSONFraming,
    import_autocomplete_json,
    import_file,
    import_json,
    import_postnumre_json,
    import_values,
)
from dawa.models import Adresse, Kommune, Postnummer

BOTH = pytest.mark.parametrize("framing", [JSONFraming.SCAN, JSONFraming.BULK])


async def _collect(stream):
    async with stream:
        return [record async for record in stream]


def _pieces(data: bytes, size: int):
    return [data[i:i + size] for i in range(0, len(data), size)]


@BOTH
def test_postnumre_export(postnumre_json, framing):
    async def scenario():
        stream = await import_postnumre_json(postnumre_json, framing=framing)
        records = [await stream.next() for _ in range(3)]
        for _ in range(2):
            with pytest.raises(EndOfStream):
                await stream.next()
        await stream.aclose()
        return records

    records = asyncio.run(scenario())
    assert [p.nr for p in records] == ["9981", "9982", "9990"]
    assert records[1].navn == "Ålbæk"
    assert [k.navn for k in records[1].kommuner] == ["Frederikshavn", "Hjørring"]
    assert all(isinstance(p, Postnummer) for p in records)


@BOTH
def test_tiny_chunks_give_the_same_records(postnumre_json, framing):
    whole = asyncio.run(_run(import_json(Postnummer, postnumre_json, framing=framing)))
    pieces = asyncio.run(
        _run(import_json(Postnummer, _pieces(postnumre_json, 3), framing=framing))
    )
    from_file = asyncio.run(
        _run(import_json(Postnummer, io.BytesIO(postnumre_json), framing=framing, chunk_size=5))
    )
    assert whole == pieces == from_file
    assert len(whole) == 3


async def _run(started):
    return await _collect(await started)


def test_strings_with_structural_characters():
    data = rb'[{"navn": "a]b,\"}{c\\", "kode": "1"} , {"navn":"x","kode":"2"}]'
    for size in (1, 2, 7, len(data)):
        records = asyncio.run(_run(import_json(Kommune, _pieces(data, size))))
        assert [k.navn for k in records] == ['a]b,"}{c\\', "x"]


@BOTH
def test_empty_array(framing):
    assert asyncio.run(_run(import_json(Postnummer, b"  [ ]\n", framing=framing))) == []


def test_truncated_input_fails_after_complete_records(postnumre_json):
    cut = postnumre_json[: postnumre_json.index(b'"nr": "9990"')]

    async def scenario():
        stream = await import_postnumre_json(cut)
        got = [await stream.next(), await stream.next()]
        with pytest.raises(FramingError, match="end of input"):
            await stream.next()
        # the failure is sticky
        with pytest.raises(FramingError):
            await stream.next()
        await stream.aclose()
        return got

    got = asyncio.run(scenario())
    assert [p.nr for p in got] == ["9981", "9982"]


def test_unclosed_array_fails_after_last_record():
    async def scenario():
        stream = await import_values(lambda v: v, b"[1, 2")
        got = [await stream.next(), await stream.next()]
        with pytest.raises(FramingError, match="array not closed"):
            await stream.next()
        await stream.aclose()
        return got

    assert asyncio.run(scenario()) == [1, 2]


def test_bad_delimiter_between_elements():
    async def scenario():
        stream = await import_values(lambda v: v, b'[{"a": 1} ; {"a": 2}]')
        first = await stream.next()
        with pytest.raises(FramingError, match="invalid character ';'"):
            await stream.next()
        await stream.aclose()
        return first

    assert asyncio.run(scenario()) == {"a": 1}


def test_bulk_framing_rejects_broken_json():
    async def scenario():
        stream = await import_values(lambda v: v, b'[{"a": 1}, {"a": }]', framing=JSONFraming.BULK)
        return await _collect(stream)

    with pytest.raises(FramingError):
        asyncio.run(scenario())


@BOTH
@pytest.mark.parametrize("data", [b'{"nr": "9981"}', b"", b"  null  "])
def test_input_without_array_is_rejected_up_front(framing, data):
    with pytest.raises(FramingError, match="no JSON array"):
        asyncio.run(import_postnumre_json(data, framing=framing))


def test_strict_decoding_stops_the_stream(postnumre_json):
    data = postnumre_json.replace(b'"navn": "Skagen",', b'"navn": "Skagen", "nyt": true,')

    async def scenario():
        stream = await import_postnumre_json(data, strict=True)
        got = [await stream.next(), await stream.next()]
        with pytest.raises(UnknownFieldError):
            await stream.next()
        await stream.aclose()
        return got

    assert len(asyncio.run(scenario())) == 2
    lenient = asyncio.run(_run(import_postnumre_json(data)))
    assert [p.navn for p in lenient][-1] == "Skagen"


def test_autocomplete_export():
    data = (
        '[{"tekst": "9981 Jerup", "postnummer": {"nr": "9981", "navn": "Jerup"}},'
        ' {"tekst": "9982 Ålbæk", "postnummer": {"nr": "9982", "navn": "Ålbæk"}}]'
    )
    hits = asyncio.run(_run(import_autocomplete_json("postnumre", data)))
    assert [h.tekst for h in hits] == ["9981 Jerup", "9982 Ålbæk"]
    assert hits[1].item.navn == "Ålbæk"


def test_import_file_reads_and_closes_the_export(tmp_path, adresse_object):
    import orjson

    path = tmp_path / "adresser.json"
    path.write_bytes(orjson.dumps([adresse_object, adresse_object]))

    async def scenario():
        stream = await import_file(path, "adresser", chunk_size=64)
        records = await _collect(stream)
        return records

    records = asyncio.run(scenario())
    assert len(records) == 2
    assert all(isinstance(a, Adresse) for a in records)
    assert records[0].adgangsadresse.kvh == "05630110___1"


def test_import_file_rejects_csv_for_kinds_without_csv_export(tmp_path):
    with pytest.raises(ValueError):
        asyncio.run(import_file(tmp_path / "x.csv", "postnumre", fmt="csv"))
