"""Streaming importers for DAWA JSON and CSV exports."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from dawa.core.io import open_export
from dawa.core.stream import RecordStream
from dawa.models import ResourceKind

from .csvrows import (
    ROW_BUILDERS,
    adgangsadresse_from_row,
    adresse_from_row,
    import_adgangsadresser_csv,
    import_adresser_csv,
    import_csv,
)
from .jsonarray import (
    JSONFraming,
    import_adgangsadresser_json,
    import_adresser_json,
    import_autocomplete_json,
    import_json,
    import_postnumre_json,
    import_supplerendebynavne_json,
    import_values,
    import_vejstykker_json,
)

__all__ = [
    "ROW_BUILDERS",
    "JSONFraming",
    "adgangsadresse_from_row",
    "adresse_from_row",
    "import_adgangsadresser_csv",
    "import_adgangsadresser_json",
    "import_adresser_csv",
    "import_adresser_json",
    "import_autocomplete_json",
    "import_csv",
    "import_file",
    "import_json",
    "import_postnumre_json",
    "import_supplerendebynavne_json",
    "import_values",
    "import_vejstykker_json",
]


async def import_file(
    path: Union[str, Path],
    kind: ResourceKind | str,
    *,
    fmt: str = "json",
    **kwargs: Any,
) -> RecordStream[Any]:
    """Open an export file and stream its records.

    The file is closed when the returned stream is closed. ``fmt`` is
    ``"json"`` or ``"csv"``; CSV exports exist for addresses and access
    addresses only.
    """
    kind = ResourceKind.parse(kind)
    fmt = fmt.lower()
    if fmt == "csv" and kind not in ROW_BUILDERS:
        raise ValueError(f"no CSV export format for {kind.value}")
    if fmt not in ("json", "csv"):
        raise ValueError(f"unknown export format {fmt!r} (expected json or csv)")

    handle = await open_export(path)
    try:
        if fmt == "csv":
            # CSV columns are fixed; strict key checking only applies to JSON
            kwargs.pop("strict", None)
            return await import_csv(
                ROW_BUILDERS[kind],
                handle,
                closers=[handle.close],
                name=f"{Path(path).name} import",
                **kwargs,
            )
        return await import_json(kind.record_type, handle, closers=[handle.close], **kwargs)
    except BaseException:
        await handle.close()
        raise
