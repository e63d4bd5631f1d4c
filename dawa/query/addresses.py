"""Search queries for addresses (``/adresser``) and access addresses (``/adgangsadresser``).

Parameter semantics follow the service documentation at
http://dawa.aws.dk/adressedok. Multi-valued setters take several values;
the service matches any of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from dawa.models import AdgangsAdresse, Adresse, ResourceKind

from .base import ResourceQuery

if TYPE_CHECKING:
    from dawa.clients.dawa import DawaClient


class _AddressFilters(ResourceQuery):
    """Filters shared by addresses and access addresses."""

    def q(self, text: str):
        """Free-text search over street name, house number, floor, door,
        supplementary town name and postal code. Every word must match; a
        trailing ``*`` is a wildcard. Case-insensitive.
        """
        return self._set("q", [text])

    def id(self, *ids: str):
        return self._set("id", ids, multi=True)

    def status(self, status: int | str):
        """1 = final, 3 = provisional."""
        return self._set("status", [status])

    def vejkode(self, *codes: str):
        """Street code, four digits."""
        return self._set("vejkode", codes, multi=True)

    def vejnavn(self, *names: str):
        """Street name, case-sensitive. Searching for no value is allowed."""
        return self._set("vejnavn", names, multi=True, null=True)

    def husnr(self, *numbers: str):
        """House number: up to four digits, optionally followed by a letter."""
        return self._set("husnr", numbers, multi=True)

    def supplerendebynavn(self, *names: str):
        return self._set("supplerendebynavn", names, multi=True, null=True)

    def postnr(self, *numbers: str):
        """Postal code, four digits."""
        return self._set("postnr", numbers, multi=True)

    def kommunekode(self, *codes: str):
        """Municipality code, four digits."""
        return self._set("kommunekode", codes, multi=True)

    def ejerlavkode(self, *codes: str):
        """Code of the cadastral district the address lies in."""
        return self._set("ejerlavkode", codes, multi=True)

    def zonekode(self, *codes: str):
        """Zone status: 1 = urban, 2 = rural, 3 = summer-house area."""
        return self._set("zonekode", codes, multi=True)

    def matrikelnr(self, *numbers: str):
        """Cadastral number, unique within a cadastral district."""
        return self._set("matrikelnr", numbers, multi=True)

    def esrejendomsnr(self, *numbers: str):
        """ESR property number, up to seven digits."""
        return self._set("esrejendomsnr", numbers, multi=True)

    def srid(self, srid: str):
        """Coordinate system of geometry parameters and results. Default 4326 (WGS84)."""
        return self._set("srid", [srid])

    def polygon(self, polygon: str):
        """Restrict to addresses inside a polygon given as a GeoJSON-style
        coordinate array, e.g. ``[[[10.3,55.3],[10.4,55.3],[10.4,55.31],[10.3,55.3]]]``.
        """
        return self._set("polygon", [polygon])

    def cirkel(self, cirkel: str):
        """Restrict to a circle given as ``x,y,radius`` (radius in metres)."""
        return self._set("cirkel", [cirkel])

    def regionskode(self, *codes: str):
        return self._set("regionskode", codes, multi=True, null=True)

    def sognekode(self, *codes: str):
        return self._set("sognekode", codes, multi=True, null=True)

    def opstillingskredskode(self, *codes: str):
        return self._set("opstillingskredskode", codes, multi=True, null=True)

    def retskredskode(self, *codes: str):
        return self._set("retskredskode", codes, multi=True, null=True)

    def politikredskode(self, *codes: str):
        return self._set("politikredskode", codes, multi=True, null=True)

    def side(self, page: int):
        """Page number, starting at 1. Fetching further pages is up to the caller."""
        return self._set("side", [page], null=True)

    def per_side(self, size: int):
        return self._set("per_side", [size], null=True)


class AdresseQuery(_AddressFilters):
    """Search for :class:`~dawa.models.Adresse` records.

    >>> AdresseQuery().vejnavn("Rødkildevej").husnr("46").url()
    'http://dawa.aws.dk/adresser?vejnavn=R%C3%B8dkildevej&husnr=46'
    """

    def __init__(self, *, autocomplete: bool = False, host: Optional[str] = None) -> None:
        super().__init__(ResourceKind.ADRESSER, autocomplete=autocomplete, host=host)

    @classmethod
    def autocomplete_query(cls, host: Optional[str] = None) -> "AdresseQuery":
        return cls(autocomplete=True, host=host)

    def adgangsadresseid(self, *ids: str):
        """Id of the access address the address belongs to."""
        return self._set("adgangsadresseid", ids, multi=True)

    def etage(self, *floors: str):
        """Floor: 1-99, ``st``, ``kl``, ``kl2`` up to ``kl9``. Searching for no value is allowed."""
        return self._set("etage", floors, multi=True, null=True)

    def doer(self, *doors: str):
        """Door (``dør``): 1-9999, letters, ``/`` and ``-``. Searching for no value is allowed."""
        return self._set("dør", doors, multi=True, null=True)

    def kvhx(self, key: str):
        """19-character KVHX key: municipality, street, house number, floor, door."""
        return self._set("kvhx", [key])


class AdgangsAdresseQuery(_AddressFilters):
    """Search for :class:`~dawa.models.AdgangsAdresse` records."""

    def __init__(self, *, autocomplete: bool = False, host: Optional[str] = None) -> None:
        super().__init__(ResourceKind.ADGANGSADRESSER, autocomplete=autocomplete, host=host)

    @classmethod
    def autocomplete_query(cls, host: Optional[str] = None) -> "AdgangsAdresseQuery":
        return cls(autocomplete=True, host=host)

    def kvh(self, key: str):
        """12-character KVH key: municipality, street, house number."""
        return self._set("kvh", [key])


async def get_adresse(client: "DawaClient", id: str) -> Optional[Adresse]:
    """Look up one address by id; ``None`` if it does not exist."""
    return await AdresseQuery(host=client.host).id(id).first(client)


async def get_adgangsadresse(client: "DawaClient", id: str) -> Optional[AdgangsAdresse]:
    """Look up one access address by id; ``None`` if it does not exist."""
    return await AdgangsAdresseQuery(host=client.host).id(id).first(client)
