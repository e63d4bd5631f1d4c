"""Fluent query builders for the DAWA endpoints."""

from __future__ import annotations

from .addresses import AdgangsAdresseQuery, AdresseQuery, get_adgangsadresse, get_adresse
from .base import GeoJSONQuery, Query, ResourceQuery
from .lists import ListQuery, ReverseQuery, format_coordinate
from .params import Parameter
from .postnumre import PostnummerQuery, get_postnummer
from .vejstykker import VejstykkeQuery

__all__ = [
    "AdgangsAdresseQuery",
    "AdresseQuery",
    "GeoJSONQuery",
    "ListQuery",
    "Parameter",
    "PostnummerQuery",
    "Query",
    "ResourceQuery",
    "ReverseQuery",
    "VejstykkeQuery",
    "format_coordinate",
    "get_adgangsadresse",
    "get_adresse",
    "get_postnummer",
]
