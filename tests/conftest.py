"""Shared fixtures: sample export payloads and a fake DAWA transport."""

from __future__ import annotations

from typing import Callable, Dict, List

import httpx
import orjson
import pytest

ADRESSER_CSV = """\
id,status,oprettet,ændret,vejkode,vejnavn,husnr,etage,dør,supplerendebynavn,postnr,postnrnavn,kommunekode,kommunenavn,ejerlavkode,ejerlavnavn,matrikelnr,esrejendomsnr,etrs89koordinat_øst,etrs89koordinat_nord,wgs84koordinat_bredde,wgs84koordinat_længde,nøjagtighed,kilde,tekniskstandard,tekstretning,ddkn_m100,ddkn_km1,ddkn_km10,adressepunktændringsdato,adgangsadresseid,adgangsadresse_status,adgangsadresse_oprettet,adgangsadresse_ændret,kvhx,regionskode,regionsnavn,sognekode,sognenavn,politikredskode,politikredsnavn,retskredskode,retskredsnavn,opstillingskredskode,opstillingskredsnavn,zone
0a3f50b7-6545-32b8-e044-0003ba298018,1,2000-02-05T18:09:56.000,2000-02-16T21:58:33.000,0001,A Hansensvej,6,,,Vråby,6792,Rømø,0550,Tønder,1470852,"Kirkeby, Rømø",76,9097,470620,6105713,55.0972751504817,8.53959543878291,A,5,UF,200,100m_61057_4706,1km_6105_470,10km_610_47,2004-10-08T00:00:00.000,0a3f508c-3307-32b8-e044-0003ba298018,1,2000-02-05T18:09:56.000,2009-11-24T03:15:25.000,05500001___6_______,1083,Region Syddanmark,9062,Rømø,1464,Syd- og Sønderjyllands Politi,1147,Retten i Sønderborg,0051,Tønder,Landzone
0a3f50b7-6544-32b8-e044-0003ba298018,1,2000-02-05T18:09:53.000,2000-02-16T21:58:33.000,0001,A Hansensvej,5,,,Vråby,6792,Rømø,0550,Tønder,1470852,"Kirkeby, Rømø",720,8848,470531,6105718,55.0973148017997,8.53820028085436,A,5,UF,200,100m_61057_4705,1km_6105_470,10km_610_47,2004-10-08T00:00:00.000,0a3f508c-3306-32b8-e044-0003ba298018,1,2000-02-05T18:09:53.000,2009-11-24T03:15:25.000,05500001___5_______,1083,Region Syddanmark,9062,Rømø,1464,Syd- og Sønderjyllands Politi,1147,Retten i Sønderborg,0051,Tønder,Landzone
0a3f50b7-6547-32b8-e044-0003ba298018,1,2000-02-05T18:09:49.000,2004-02-12T16:05:28.000,0001,A Hansensvej,8,,,Vråby,6792,Rømø,0550,Tønder,1470852,"Kirkeby, Rømø",770,8559,470587,6105811,55.0981538216665,8.5390681928166,A,5,UF,200,100m_61058_4705,1km_6105_470,10km_610_47,2004-10-08T00:00:00.000,0a3f508c-3309-32b8-e044-0003ba298018,1,2000-02-05T18:09:49.000,2009-11-24T03:15:25.000,05500001___8_______,1083,Region Syddanmark,9062,Rømø,1464,Syd- og Sønderjyllands Politi,1147,Retten i Sønderborg,0051,Tønder,Landzone
"""

POSTNUMRE_JSON = """
[
 {
  "href": "http://dawa.aws.dk/postnumre/9981",
  "nr": "9981",
  "navn": "Jerup",
  "stormodtageradresser": null,
  "kommuner": [
    {"href": "http://dawa.aws.dk/kommuner/813", "kode": "0813", "navn": "Frederikshavn"}
  ]
}, {
  "href": "http://dawa.aws.dk/postnumre/9982",
  "nr": "9982",
  "navn": "Ålbæk",
  "stormodtageradresser": null,
  "kommuner": [
    {"href": "http://dawa.aws.dk/kommuner/813", "kode": "0813", "navn": "Frederikshavn"},
    {"href": "http://dawa.aws.dk/kommuner/860", "kode": "0860", "navn": "Hjørring"}
  ]
}, {
  "href": "http://dawa.aws.dk/postnumre/9990",
  "nr": "9990",
  "navn": "Skagen",
  "stormodtageradresser": null,
  "kommuner": [
    {"href": "http://dawa.aws.dk/kommuner/813", "kode": "0813", "navn": "Frederikshavn"}
  ]
}
]
"""

ADRESSE_JSON_OBJECT = {
    "id": "0a3f50b9-68b1-32b8-e044-0003ba298018",
    "kvhx": "05630110___1__1____",
    "status": 1,
    "href": "http://dawa.aws.dk/adresser/0a3f50b9-68b1-32b8-e044-0003ba298018",
    "historik": {"oprettet": "2000-02-05T18:30:56.000", "ændret": "2000-02-16T22:02:44.000"},
    "etage": "1",
    "dør": None,
    "adressebetegnelse": "A B C Sti 1, 1., Nordby, 6720 Fanø",
    "adgangsadresse": {
        "href": "http://dawa.aws.dk/adgangsadresser/0a3f508d-d915-32b8-e044-0003ba298018",
        "id": "0a3f508d-d915-32b8-e044-0003ba298018",
        "kvh": "05630110___1",
        "status": 1,
        "vejstykke": {"href": "http://dawa.aws.dk/vejstykker/563/110", "navn": "A B C Sti", "kode": "0110"},
        "husnr": "1",
        "supplerendebynavn": "Nordby",
        "postnummer": {"href": "http://dawa.aws.dk/postnumre/6720", "nr": "6720", "navn": "Fanø"},
        "kommune": {"href": "http://dawa.aws.dk/kommuner/563", "kode": "0563", "navn": "Fanø"},
        "ejerlav": {"kode": 1351151, "navn": "Odden By, Nordby"},
        "esrejendomsnr": "10045",
        "matrikelnr": "320",
        "historik": {"oprettet": "2000-02-05T18:30:56.000", "ændret": "2009-11-24T03:15:25.000"},
        "adgangspunkt": {
            "koordinater": [8.40179905638495, 55.4454386963562],
            "nøjagtighed": "A",
            "kilde": 1,
            "tekniskstandard": "TK",
            "tekstretning": 125.9,
            "ændret": "2000-09-18T00:00:00.000",
        },
        "DDKN": {"m100": "100m_61445_4621", "km1": "1km_6144_462", "km10": "10km_614_46"},
        "sogn": {"kode": "8923", "navn": "Nordby", "href": "http://dawa.aws.dk/sogne/8923"},
        "region": {"kode": "1083", "navn": "Region Syddanmark", "href": "http://dawa.aws.dk/regioner/1083"},
    },
}

KOMMUNER = [
    {"href": "http://dawa.aws.dk/kommuner/101", "kode": "0101", "navn": "København"},
    {"href": "http://dawa.aws.dk/kommuner/147", "kode": "0147", "navn": "Frederiksberg"},
]


@pytest.fixture
def adresser_csv() -> bytes:
    return ADRESSER_CSV.encode("utf-8")


@pytest.fixture
def postnumre_json() -> bytes:
    return POSTNUMRE_JSON.encode("utf-8")


@pytest.fixture
def adresse_object() -> dict:
    return orjson.loads(orjson.dumps(ADRESSE_JSON_OBJECT))


@pytest.fixture
def kommuner() -> List[dict]:
    return [dict(k) for k in KOMMUNER]


Route = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def fake_service():
    """Build an ``httpx.MockTransport`` serving fixed responses by path.

    Every request is recorded in ``transport.requests``.
    """

    def factory(routes: Dict[str, Route]) -> httpx.MockTransport:
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            route = routes.get(request.url.path)
            if route is None:
                body = {"type": "ResourceNotFoundError", "title": "not found", "details": []}
                return httpx.Response(404, content=orjson.dumps(body))
            return route(request)

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return factory
