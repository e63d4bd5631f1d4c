"""Street segment queries (``/vejstykker``)."""

from __future__ import annotations

from typing import Optional

from dawa.models import ResourceKind

from .base import ResourceQuery


class VejstykkeQuery(ResourceQuery):
    """Search for :class:`~dawa.models.Vejstykke` records."""

    def __init__(self, *, autocomplete: bool = False, host: Optional[str] = None) -> None:
        super().__init__(ResourceKind.VEJSTYKKER, autocomplete=autocomplete, host=host)

    def kode(self, *codes: str):
        """Street code, four digits, unique within a municipality."""
        return self._set("kode", codes, multi=True)

    def navn(self, *names: str):
        return self._set("navn", names, multi=True)

    def kommunekode(self, *codes: str):
        return self._set("kommunekode", codes, multi=True)

    def q(self, text: str):
        return self._set("q", [text])
