"""Top-level resource records: addresses, access addresses, streets, postal codes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, Type, TypeVar

from dawa.errors import FieldParseError

from .base import Record, json_field
from .refs import (
    DDKN,
    AdgangsAdresseRef,
    Adgangspunkt,
    Ejerlav,
    Historik,
    Kommune,
    Opstillingskreds,
    Politikreds,
    PostnummerRef,
    Region,
    Retskreds,
    Sogn,
    VejstykkeRef,
)

T = TypeVar("T", bound=Record)


@dataclass(frozen=True, slots=True)
class AdgangsAdresse(Record):
    """Access address: a distinct access to a parcel or building.

    Unlike :class:`Adresse` it carries no floor or door.
    """

    id: str = ""
    href: str = ""
    # 1 = final, 3 = provisional
    status: Optional[int] = None
    kvh: str = ""
    husnr: str = ""
    supplerendebynavn: str = ""
    matrikelnr: str = ""
    esrejendomsnr: str = ""
    zone: str = ""
    historik: Optional[Historik] = None
    vejstykke: Optional[VejstykkeRef] = None
    postnummer: Optional[PostnummerRef] = None
    kommune: Optional[Kommune] = None
    ejerlav: Optional[Ejerlav] = None
    adgangspunkt: Optional[Adgangspunkt] = None
    ddkn: Optional[DDKN] = json_field("DDKN", default=None)
    sogn: Optional[Sogn] = None
    region: Optional[Region] = None
    retskreds: Optional[Retskreds] = None
    politikreds: Optional[Politikreds] = None
    opstillingskreds: Optional[Opstillingskreds] = None


@dataclass(frozen=True, slots=True)
class Adresse(Record):
    """Address: an access address plus optional floor (``etage``) and door (``dør``)."""

    id: str = ""
    href: str = ""
    status: Optional[int] = None
    kvhx: str = ""
    etage: str = ""
    doer: str = json_field("dør", default="")
    adressebetegnelse: str = ""
    historik: Optional[Historik] = None
    adgangsadresse: Optional[AdgangsAdresse] = None


@dataclass(frozen=True, slots=True)
class Postnummer(Record):
    href: str = ""
    nr: str = ""
    navn: str = ""
    kommuner: Tuple[Kommune, ...] = ()
    # only set for large-recipient postal codes
    stormodtageradresser: Tuple[AdgangsAdresseRef, ...] = ()


@dataclass(frozen=True, slots=True)
class Vejstykke(Record):
    """Street segment: a road bounded by one municipality.

    Identified by municipality code plus ``kode`` (four digits).
    """

    href: str = ""
    kode: str = ""
    navn: str = ""
    adresseringsnavn: str = ""
    kommune: Optional[Kommune] = None
    postnumre: Tuple[PostnummerRef, ...] = ()
    historik: Optional[Historik] = None


@dataclass(frozen=True, slots=True)
class SupplerendeBynavn(Record):
    """Supplementary town name set by the municipality inside a postal code."""

    href: str = ""
    navn: str = ""
    kommuner: Tuple[Kommune, ...] = ()
    postnumre: Tuple[PostnummerRef, ...] = ()


@dataclass(frozen=True)
class AutocompleteHit(Generic[T]):
    """One autocomplete suggestion: display text plus the (partial) record."""

    tekst: str
    item: Optional[T] = None

    @classmethod
    def from_json(
        cls,
        obj: Mapping[str, Any],
        record_type: Type[T],
        key: str,
        *,
        strict: bool = False,
    ) -> "AutocompleteHit[T]":
        if not isinstance(obj, Mapping):
            raise FieldParseError("autocomplete", obj, "expected an object")
        raw = obj.get(key)
        item = record_type.from_json(raw, strict=strict) if raw is not None else None
        return cls(tekst=str(obj.get("tekst") or ""), item=item)

    def to_json(self) -> Dict[str, Any]:
        return {"tekst": self.tekst, "item": self.item.to_json() if self.item else None}
