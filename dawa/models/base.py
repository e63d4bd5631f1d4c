"""Shared decoding for the frozen record dataclasses.

Attribute names are ASCII; where the service key differs (``ændret``,
``nøjagtighed``, ``dør``, ``DDKN``) the dataclass field carries the service
key in its metadata, see :func:`json_field`.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

from dawa.awstime import format_time, parse_time
from dawa.errors import FieldParseError, UnknownFieldError

R = TypeVar("R", bound="Record")

_NONE = type(None)


def json_field(key: str, **kwargs: Any) -> Any:
    """Declare a dataclass field whose service key differs from its name."""
    return dataclasses.field(metadata={"json": key}, **kwargs)


class Record:
    """Mixin for immutable records decoded from the service's JSON."""

    __slots__ = ()

    @classmethod
    def from_json(cls: Type[R], obj: Mapping[str, Any], *, strict: bool = False) -> R:
        """Build a record from a decoded JSON object.

        Keys without a matching field are skipped unless ``strict`` is set,
        in which case :class:`~dawa.errors.UnknownFieldError` is raised.
        """
        return _decode_record(cls, obj, strict, cls.__name__)

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-ready dict keyed by the service's field names."""
        out: Dict[str, Any] = {}
        for f in dataclasses.fields(self):  # type: ignore[arg-type]
            out[f.metadata.get("json", f.name)] = _encode(getattr(self, f.name))
        return out


def _encode(value: Any) -> Any:
    if isinstance(value, Record):
        return value.to_json()
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, tuple):
        return [_encode(v) for v in value]
    return value


@lru_cache(maxsize=None)
def _field_table(cls: type) -> Dict[str, Tuple[str, Any]]:
    """Map service key -> (attribute name, resolved type) for ``cls``."""
    hints = typing.get_type_hints(cls)
    return {
        f.metadata.get("json", f.name): (f.name, hints[f.name])
        for f in dataclasses.fields(cls)
        if f.init
    }


def _decode_record(cls: type, obj: Any, strict: bool, path: str) -> Any:
    if not isinstance(obj, Mapping):
        raise FieldParseError(path, obj, f"expected an object for {cls.__name__}")
    table = _field_table(cls)
    kwargs: Dict[str, Any] = {}
    for key, raw in obj.items():
        entry = table.get(key)
        if entry is None:
            if strict:
                raise UnknownFieldError(cls.__name__, key)
            continue
        name, hint = entry
        kwargs[name] = _convert(hint, raw, strict, f"{path}.{key}")
    return cls(**kwargs)


def _unwrap_optional(hint: Any) -> Tuple[Any, bool]:
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(hint) if a is not _NONE]
        if len(args) == 1:
            return args[0], True
    return hint, False


def _convert(hint: Any, raw: Any, strict: bool, path: str) -> Any:
    hint, optional = _unwrap_optional(hint)

    if hint is Any:
        return raw
    if raw is None:
        if optional:
            return None
        if hint is str:
            return ""
        if typing.get_origin(hint) is tuple:
            return ()
        raise FieldParseError(path, raw, "null not allowed")

    if hint is str:
        if isinstance(raw, str):
            return raw
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return str(raw)
        raise FieldParseError(path, raw, "expected a string")

    if hint is int:
        if isinstance(raw, bool):
            raise FieldParseError(path, raw, "expected an integer")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        if isinstance(raw, str):
            return parse_int(raw, path)
        raise FieldParseError(path, raw, "expected an integer")

    if hint is float:
        if isinstance(raw, bool):
            raise FieldParseError(path, raw, "expected a number")
        if isinstance(raw, (int, float)):
            return float(raw)
        if isinstance(raw, str):
            return parse_float(raw, path)
        # ijson without use_float hands out Decimal
        try:
            return float(raw)
        except (TypeError, ValueError) as exc:
            raise FieldParseError(path, raw, "expected a number") from exc

    if hint is datetime:
        if not isinstance(raw, str):
            raise FieldParseError(path, raw, "expected a timestamp string")
        return parse_time(raw, path)

    if typing.get_origin(hint) is tuple:
        if not isinstance(raw, list):
            raise FieldParseError(path, raw, "expected an array")
        (item_hint, *_rest) = typing.get_args(hint)
        return tuple(
            _convert(item_hint, item, strict, f"{path}[{i}]")
            for i, item in enumerate(raw)
        )

    if isinstance(hint, type) and issubclass(hint, Record):
        return _decode_record(hint, raw, strict, path)

    raise FieldParseError(path, raw, f"unsupported field type {hint!r}")


# ──────────────────────────────────────────────────────────────────────────────
# Scalar parsers shared with the CSV importers
# ──────────────────────────────────────────────────────────────────────────────
def parse_int(text: str, field: str) -> int:
    try:
        return int(text.strip())
    except ValueError as exc:
        raise FieldParseError(field, text, "not an integer") from exc


def parse_float(text: str, field: str) -> float:
    try:
        return float(text.strip())
    except ValueError as exc:
        raise FieldParseError(field, text, "not a number") from exc


def optional_int(text: Optional[str]) -> Optional[int]:
    """Lenient integer for non-key CSV columns: blank or garbage gives ``None``."""
    if not text or not text.strip():
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def optional_float(text: Optional[str]) -> Optional[float]:
    if not text or not text.strip():
        return None
    try:
        return float(text.strip())
    except ValueError:
        return None
