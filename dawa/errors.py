"""Exception hierarchy raised by the DAWA client and its decoders."""

from __future__ import annotations

from typing import Any, List, Optional


class DawaError(Exception):
    """Base class for every error raised by this package."""


class RequestError(DawaError):
    """A request failed and the service did not explain why."""

    def __init__(self, url: str, message: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message or f"Error with request {url}")


class ServiceError(RequestError):
    """Structured error payload reported by the service (HTTP status >= 400)."""

    def __init__(
        self,
        url: str,
        type: str,
        title: str = "",
        details: Optional[List[Any]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.type = type
        self.title = title
        self.details = list(details or [])
        self.status_code = status_code
        super().__init__(
            url,
            f"{type}:{title}. Details:{self.details}. Request URL:{url}",
        )


class DecodeError(DawaError):
    """Base class for failures while decoding a record stream."""


class FramingError(DecodeError):
    """The JSON array framing was malformed or the input ended too early."""


class FieldParseError(DecodeError, ValueError):
    """A field value could not be converted to its declared type."""

    def __init__(self, field: str, value: Any, reason: str = "") -> None:
        self.field = field
        self.value = value
        msg = f"cannot parse field {field!r} from {value!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class TimeFormatError(FieldParseError):
    """Timestamp text matched neither the export grammar nor ISO-8601."""

    def __init__(self, text: str, field: str = "time") -> None:
        self.text = text
        super().__init__(field, text, "not a DAWA or ISO-8601 timestamp")


class CsvFormatError(DecodeError):
    """CSV input has no header row, or a row does not line up with it."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        super().__init__(message)


class UnknownFieldError(DecodeError):
    """Strict decoding met a key that maps to no record field."""

    def __init__(self, record: str, key: str) -> None:
        self.record = record
        self.key = key
        super().__init__(f"{record}: no field matches key {key!r}")


class MergeError(DawaError):
    """Two values for the same query parameter cannot be merged."""


class MergeKeyMismatch(MergeError):
    """Parameters with different names were asked to merge."""


class StreamClosed(DawaError):
    """The record stream was closed by the caller before it was exhausted."""


class EndOfStream(Exception):
    """Normal end of a record stream. Not a failure."""

    def __init__(self) -> None:
        super().__init__("end of stream")
