"""Named query parameters and their URL rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List
from urllib.parse import quote_plus

from dawa.errors import MergeError, MergeKeyMismatch

# Joins the values of a multi-valued parameter, unescaped
MULTI_SEPARATOR = "|"


def _escape(text: str) -> str:
    # form encoding: space -> "+", everything outside [A-Za-z0-9_.~-] -> %XX of UTF-8
    return quote_plus(text, safe="")


@dataclass
class Parameter:
    """One query-string parameter.

    ``multi`` parameters accept several values, rendered joined by ``|``.
    ``null`` parameters render as a bare ``name=`` when they carry no value.
    Values are stored unencoded.
    """

    name: str
    values: List[str] = field(default_factory=list)
    multi: bool = False
    null: bool = False

    @property
    def key(self) -> str:
        return self.name

    def render(self) -> str:
        """Return ``name=value`` with both sides form-encoded.

        A single-valued parameter renders only its first value.
        """
        out = _escape(self.name) + "="
        if not self.values:
            return out
        if not self.multi:
            return out + _escape(self.values[0])
        return out + MULTI_SEPARATOR.join(_escape(v) for v in self.values)

    def merge(self, other: "Parameter") -> None:
        """Append ``other``'s values to this parameter."""
        if self.key != other.key:
            raise MergeKeyMismatch(f"merge: key value mismatch '{self.key}' != '{other.key}'")
        if not self.multi:
            raise MergeError(f"merge: cannot merge multiple values of key {self.key}")
        self.values.extend(other.values)
