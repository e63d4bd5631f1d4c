"""The closed set of resource kinds the service can list."""

from __future__ import annotations

from enum import Enum
from typing import Type

from .base import Record
from .records import AdgangsAdresse, Adresse, Postnummer, SupplerendeBynavn, Vejstykke
from .refs import (
    Ejerlav,
    Kommune,
    Opstillingskreds,
    Politikreds,
    Region,
    Retskreds,
    Sogn,
    Valglandsdel,
)


class ResourceKind(str, Enum):
    """Resource kinds; the value is the path segment on the service."""

    ADRESSER = "adresser"
    ADGANGSADRESSER = "adgangsadresser"
    POSTNUMRE = "postnumre"
    VEJSTYKKER = "vejstykker"
    SUPPLERENDEBYNAVNE = "supplerendebynavne"
    REGIONER = "regioner"
    KOMMUNER = "kommuner"
    SOGNE = "sogne"
    RETSKREDSE = "retskredse"
    POLITIKREDSE = "politikredse"
    OPSTILLINGSKREDSE = "opstillingskredse"
    VALGLANDSDELE = "valglandsdele"
    EJERLAV = "ejerlav"

    @classmethod
    def parse(cls, value: "ResourceKind | str") -> "ResourceKind":
        """Return the member for ``value``; unknown names raise ``ValueError``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().strip("/").lower())
        except ValueError:
            known = ", ".join(k.value for k in cls)
            raise ValueError(f"unknown resource kind {value!r} (expected one of: {known})") from None

    @property
    def path(self) -> str:
        return "/" + self.value

    @property
    def record_type(self) -> Type[Record]:
        return _RECORD_TYPES[self]

    @property
    def autocomplete_key(self) -> str:
        """Key holding the record inside an autocomplete suggestion."""
        return _AUTOCOMPLETE_KEYS[self]


_RECORD_TYPES: dict[ResourceKind, Type[Record]] = {
    ResourceKind.ADRESSER: Adresse,
    ResourceKind.ADGANGSADRESSER: AdgangsAdresse,
    ResourceKind.POSTNUMRE: Postnummer,
    ResourceKind.VEJSTYKKER: Vejstykke,
    ResourceKind.SUPPLERENDEBYNAVNE: SupplerendeBynavn,
    ResourceKind.REGIONER: Region,
    ResourceKind.KOMMUNER: Kommune,
    ResourceKind.SOGNE: Sogn,
    ResourceKind.RETSKREDSE: Retskreds,
    ResourceKind.POLITIKREDSE: Politikreds,
    ResourceKind.OPSTILLINGSKREDSE: Opstillingskreds,
    ResourceKind.VALGLANDSDELE: Valglandsdel,
    ResourceKind.EJERLAV: Ejerlav,
}

_AUTOCOMPLETE_KEYS: dict[ResourceKind, str] = {
    ResourceKind.ADRESSER: "adresse",
    ResourceKind.ADGANGSADRESSER: "adgangsadresse",
    ResourceKind.POSTNUMRE: "postnummer",
    ResourceKind.VEJSTYKKER: "vejstykke",
    ResourceKind.SUPPLERENDEBYNAVNE: "supplerendebynavn",
    ResourceKind.REGIONER: "region",
    ResourceKind.KOMMUNER: "kommune",
    ResourceKind.SOGNE: "sogn",
    ResourceKind.RETSKREDSE: "retskreds",
    ResourceKind.POLITIKREDSE: "politikreds",
    ResourceKind.OPSTILLINGSKREDSE: "opstillingskreds",
    ResourceKind.VALGLANDSDELE: "valglandsdel",
    ResourceKind.EJERLAV: "ejerlav",
}
