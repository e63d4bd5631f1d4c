"""Typed records for the resources served by DAWA."""

from __future__ import annotations

from .base import Record
from .kinds import ResourceKind
from .records import (
    AdgangsAdresse,
    Adresse,
    AutocompleteHit,
    Postnummer,
    SupplerendeBynavn,
    Vejstykke,
)
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
    Valglandsdel,
    VejstykkeRef,
)

__all__ = [
    "Record",
    "ResourceKind",
    "AdgangsAdresse",
    "Adresse",
    "AutocompleteHit",
    "Postnummer",
    "SupplerendeBynavn",
    "Vejstykke",
    "DDKN",
    "AdgangsAdresseRef",
    "Adgangspunkt",
    "Ejerlav",
    "Historik",
    "Kommune",
    "Opstillingskreds",
    "Politikreds",
    "PostnummerRef",
    "Region",
    "Retskreds",
    "Sogn",
    "Valglandsdel",
    "VejstykkeRef",
]
