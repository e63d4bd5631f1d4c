"""Small records embedded in addresses and served by the list endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .base import Record, json_field


@dataclass(frozen=True, slots=True)
class DDKN(Record):
    """Cell ids of the address in the Danish square grid (Det Danske Kvadratnet)."""

    km1: str = ""
    km10: str = ""
    m100: str = ""


@dataclass(frozen=True, slots=True)
class Adgangspunkt(Record):
    """Access point: where the named road gives access to the parcel or building."""

    kilde: Optional[int] = None
    # (x, y): longitude/latitude in WGS84, east/north in ETRS89
    koordinater: Tuple[float, ...] = ()
    noejagtighed: str = json_field("nøjagtighed", default="")
    tekniskstandard: str = ""
    tekstretning: Optional[float] = None
    aendret: Optional[datetime] = json_field("ændret", default=None)


@dataclass(frozen=True, slots=True)
class Historik(Record):
    oprettet: Optional[datetime] = None
    aendret: Optional[datetime] = json_field("ændret", default=None)


@dataclass(frozen=True, slots=True)
class Ejerlav(Record):
    """Cadastral district. ``kode`` has up to 7 digits."""

    kode: Optional[int] = None
    navn: str = ""
    href: str = ""


@dataclass(frozen=True, slots=True)
class Kommune(Record):
    href: str = ""
    kode: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class Region(Record):
    href: str = ""
    kode: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class Sogn(Record):
    href: str = ""
    kode: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class Retskreds(Record):
    href: str = ""
    kode: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class Politikreds(Record):
    href: str = ""
    kode: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class Opstillingskreds(Record):
    href: str = ""
    kode: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class Valglandsdel(Record):
    href: str = ""
    bogstav: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class PostnummerRef(Record):
    href: str = ""
    navn: str = ""
    nr: str = ""


@dataclass(frozen=True, slots=True)
class VejstykkeRef(Record):
    href: str = ""
    kode: str = ""
    navn: str = ""


@dataclass(frozen=True, slots=True)
class AdgangsAdresseRef(Record):
    href: str = ""
    id: str = ""
