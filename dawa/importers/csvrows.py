"""Stream address records out of the service's flat CSV exports.

The first row names the columns; every later row is mapped to a record by
column name, so column order does not matter. Key columns (``status`` and
the creation/change timestamps) must parse or the stream stops with an
error. Every other numeric column is lenient: blank or malformed values
become ``None``.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Tuple

from dawa.awstime import parse_time
from dawa.constants import BUFFER_SIZE, CHUNK_SIZE
from dawa.core.io import ByteReader, Source
from dawa.core.stream import Closer, RecordStream
from dawa.errors import CsvFormatError
from dawa.models import (
    DDKN,
    AdgangsAdresse,
    Adgangspunkt,
    Adresse,
    Ejerlav,
    Historik,
    Kommune,
    Opstillingskreds,
    Politikreds,
    PostnummerRef,
    Region,
    ResourceKind,
    Retskreds,
    Sogn,
    VejstykkeRef,
)
from dawa.models.base import optional_float, optional_int, parse_int

logger = logging.getLogger(__name__)

Row = Dict[str, str]


# ──────────────────────────────────────────────────────────────────────────────
# Row splitting
# ──────────────────────────────────────────────────────────────────────────────
async def _csv_records(reader: ByteReader) -> AsyncIterator[Tuple[int, List[str]]]:
    """Yield ``(line number, cells)`` for each CSV record.

    Quoted cells may span lines; blank lines are skipped. Bytes that are not
    UTF-8 raise :class:`~dawa.errors.CsvFormatError`.
    """
    pending = ""
    start_line = 0
    line_no = 0
    try:
        async for line in reader.lines():
            line_no += 1
            if not pending:
                start_line = line_no
            pending += line
            # an odd number of quotes means a quoted cell continues on the next line
            if pending.count('"') % 2:
                continue
            text, pending = pending, ""
            if not text.strip():
                continue
            yield start_line, next(csv.reader(io.StringIO(text)))
    except UnicodeDecodeError as exc:
        raise CsvFormatError(
            f"invalid UTF-8 in CSV input after line {line_no}: {exc.reason}", line_no + 1
        ) from exc

    if pending:
        raise CsvFormatError(f"record on line {start_line}: unterminated quoted field", start_line)


async def _mapped_rows(
    header: List[str], records: AsyncIterator[Tuple[int, List[str]]]
) -> AsyncIterator[Tuple[int, Row]]:
    async for line, cells in records:
        if len(cells) != len(header):
            raise CsvFormatError(
                f"record on line {line}: wrong number of fields "
                f"(expected {len(header)}, got {len(cells)})",
                line,
            )
        yield line, dict(zip(header, cells))


async def _built(
    rows: AsyncIterator[Tuple[int, Row]], build: Callable[[Row], Any]
) -> AsyncIterator[Any]:
    async for _line, row in rows:
        yield build(row)


# ──────────────────────────────────────────────────────────────────────────────
# Row -> record
# ──────────────────────────────────────────────────────────────────────────────
def _time(row: Row, column: str) -> datetime:
    return parse_time(row.get(column, ""), column)


def _coordinates(row: Row) -> Tuple[float, ...]:
    # (x, y) = (længde, bredde), the same order as the JSON "koordinater"
    x = optional_float(row.get("wgs84koordinat_længde"))
    y = optional_float(row.get("wgs84koordinat_bredde"))
    if x is None or y is None:
        return ()
    return (x, y)


def _access_fields(row: Row, status_column: str, created: str, changed: str,
                   strict_status: bool) -> Dict[str, Any]:
    """Columns shared by both exports, as :class:`AdgangsAdresse` keyword arguments."""
    raw_status = row.get(status_column, "")
    status = parse_int(raw_status, status_column) if strict_status else optional_int(raw_status)
    return dict(
        status=status,
        historik=Historik(oprettet=_time(row, created), aendret=_time(row, changed)),
        vejstykke=VejstykkeRef(kode=row.get("vejkode", ""), navn=row.get("vejnavn", "")),
        husnr=row.get("husnr", ""),
        supplerendebynavn=row.get("supplerendebynavn", ""),
        postnummer=PostnummerRef(nr=row.get("postnr", ""), navn=row.get("postnrnavn", "")),
        kommune=Kommune(kode=row.get("kommunekode", ""), navn=row.get("kommunenavn", "")),
        ejerlav=Ejerlav(kode=optional_int(row.get("ejerlavkode")), navn=row.get("ejerlavnavn", "")),
        matrikelnr=row.get("matrikelnr", ""),
        esrejendomsnr=row.get("esrejendomsnr", ""),
        adgangspunkt=Adgangspunkt(
            kilde=optional_int(row.get("kilde")),
            koordinater=_coordinates(row),
            noejagtighed=row.get("nøjagtighed", ""),
            tekniskstandard=row.get("tekniskstandard", ""),
            tekstretning=optional_float(row.get("tekstretning")),
            aendret=_time(row, "adressepunktændringsdato"),
        ),
        ddkn=DDKN(
            km1=row.get("ddkn_km1", ""),
            km10=row.get("ddkn_km10", ""),
            m100=row.get("ddkn_m100", ""),
        ),
        region=Region(kode=row.get("regionskode", ""), navn=row.get("regionsnavn", "")),
        sogn=Sogn(kode=row.get("sognekode", ""), navn=row.get("sognenavn", "")),
        politikreds=Politikreds(
            kode=row.get("politikredskode", ""), navn=row.get("politikredsnavn", "")
        ),
        retskreds=Retskreds(kode=row.get("retskredskode", ""), navn=row.get("retskredsnavn", "")),
        opstillingskreds=Opstillingskreds(
            kode=row.get("opstillingskredskode", ""), navn=row.get("opstillingskredsnavn", "")
        ),
        zone=row.get("zone", ""),
    )


def adgangsadresse_from_row(row: Row) -> AdgangsAdresse:
    """Build an access address from one row of the ``adgangsadresser`` export."""
    kvh = row.get("kvh") or row.get("kvhx", "")[:12]
    return AdgangsAdresse(
        id=row.get("id", ""),
        kvh=kvh,
        **_access_fields(row, "status", "oprettet", "ændret", strict_status=True),
    )


def adresse_from_row(row: Row) -> Adresse:
    """Build an address from one row of the ``adresser`` export.

    The embedded access address comes from the ``adgangsadresse*`` columns
    and its ``kvh`` is the first 12 characters of ``kvhx``.
    """
    kvhx = row.get("kvhx", "")
    status = parse_int(row.get("status", ""), "status")
    historik = Historik(oprettet=_time(row, "oprettet"), aendret=_time(row, "ændret"))
    access = AdgangsAdresse(
        id=row.get("adgangsadresseid", ""),
        kvh=kvhx[:12],
        **_access_fields(
            row,
            "adgangsadresse_status",
            "adgangsadresse_oprettet",
            "adgangsadresse_ændret",
            strict_status=False,
        ),
    )
    return Adresse(
        id=row.get("id", ""),
        status=status,
        kvhx=kvhx,
        etage=row.get("etage", ""),
        doer=row.get("dør", ""),
        historik=historik,
        adgangsadresse=access,
    )


ROW_BUILDERS: Dict[ResourceKind, Callable[[Row], Any]] = {
    ResourceKind.ADRESSER: adresse_from_row,
    ResourceKind.ADGANGSADRESSER: adgangsadresse_from_row,
}


# ──────────────────────────────────────────────────────────────────────────────
# Entry points
# ──────────────────────────────────────────────────────────────────────────────
async def import_csv(
    build: Callable[[Row], Any],
    source: Source,
    *,
    buffer_size: int = BUFFER_SIZE,
    chunk_size: int = CHUNK_SIZE,
    closers: Iterable[Closer] = (),
    name: str = "csv import",
) -> RecordStream[Any]:
    """Start streaming CSV rows through ``build``.

    The header row is read before this returns: input without one raises
    :class:`~dawa.errors.CsvFormatError` here rather than from the stream.
    """
    reader = ByteReader(source, chunk_size)
    records = _csv_records(reader)
    try:
        _line, header = await records.__anext__()
    except StopAsyncIteration:
        await reader.aclose()
        raise CsvFormatError("no header row in CSV input") from None
    except BaseException:
        await records.aclose()
        await reader.aclose()
        raise

    header = [column.strip() for column in header]
    logger.debug("%s: %d columns", name, len(header))
    return RecordStream(
        _built(_mapped_rows(header, records), build),
        buffer_size=buffer_size,
        closers=[*closers, reader.aclose],
        name=name,
    )


async def import_adresser_csv(source: Source, **kwargs: Any) -> RecordStream[Adresse]:
    return await import_csv(adresse_from_row, source, name="Adresse csv import", **kwargs)


async def import_adgangsadresser_csv(
    source: Source, **kwargs: Any
) -> RecordStream[AdgangsAdresse]:
    return await import_csv(
        adgangsadresse_from_row, source, name="AdgangsAdresse csv import", **kwargs
    )
