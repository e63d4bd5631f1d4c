"""Postal code queries (``/postnumre``)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from dawa.models import Postnummer, ResourceKind

from .base import ResourceQuery

if TYPE_CHECKING:
    from dawa.clients.dawa import DawaClient


class PostnummerQuery(ResourceQuery):
    """Search for :class:`~dawa.models.Postnummer` records."""

    def __init__(self, *, autocomplete: bool = False, host: Optional[str] = None) -> None:
        super().__init__(ResourceKind.POSTNUMRE, autocomplete=autocomplete, host=host)

    @classmethod
    def autocomplete_query(cls, host: Optional[str] = None) -> "PostnummerQuery":
        return cls(autocomplete=True, host=host)

    def nr(self, *numbers: str):
        """Postal code, four digits."""
        return self._set("nr", numbers, multi=True)

    def navn(self, *names: str):
        """Postal district name, exact match."""
        return self._set("navn", names, multi=True)

    def kommunekode(self, *codes: str):
        """Codes of municipalities the postal code overlaps."""
        return self._set("kommunekode", codes, multi=True)

    def q(self, text: str):
        return self._set("q", [text], null=True)

    def stormodtagere(self, include: bool):
        """Include postal codes reserved for single large recipients."""
        return self._set("stormodtagere", ["true" if include else "false"])


async def get_postnummer(client: "DawaClient", nr: str) -> Optional[Postnummer]:
    """Look up one postal code; ``None`` if it does not exist."""
    return await PostnummerQuery(host=client.host).nr(nr).first(client)
