"""
jcsstore/core/models.py

Entry — the unit of storage.

CONTRACT — Address
    entry.address == address_of_bytes(entry.canonical_bytes)
    An Entry breaking this contract is never handed to a caller as valid.
    check() raises IntegrityError; to_value() checks before parsing.

CONTRACT — Identity
    Entries are frozen. Two entries with the same address are the same
    document; equality and hashing use the address only.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from jcsstore.core.canonical import address_of_bytes, canonicalize
from jcsstore.core.exceptions import IntegrityError, ParseError


@dataclass(frozen=True)
class Entry:
    """A canonical JSON document and its content address."""
    address:         str
    canonical_bytes: bytes = field(compare=False, repr=False)

    @classmethod
    def from_value(cls, value: Any) -> "Entry":
        """
        Build an Entry from a JSON value.

        Raises EncodingError if the value has no canonical form.
        """
        canonical_bytes = canonicalize(value)
        return cls(
            address=         address_of_bytes(canonical_bytes),
            canonical_bytes= canonical_bytes,
        )

    @property
    def json_text(self) -> str:
        return self.canonical_bytes.decode("utf-8")

    def is_valid(self) -> bool:
        return self.address == address_of_bytes(self.canonical_bytes)

    def check(self) -> "Entry":
        """Return self if the address matches the bytes, else raise IntegrityError."""
        actual = address_of_bytes(self.canonical_bytes)
        if actual != self.address:
            raise IntegrityError(
                "Invalid hash",
                {"expected": self.address, "actual": actual},
            )
        return self

    def to_value(self) -> Any:
        """
        Verify, then parse the canonical bytes back into a JSON value.

        Raises:
            IntegrityError — address does not match the bytes
            ParseError     — bytes are not UTF-8 JSON
        """
        self.check()
        try:
            return json.loads(
                self.canonical_bytes.decode("utf-8"),
                parse_constant=_reject_constant,
            )
        except ValueError as exc:
            raise ParseError(
                f"Stored bytes are not JSON: {exc}",
                {"address": self.address},
            ) from exc

    def __repr__(self) -> str:
        text = self.canonical_bytes.decode("utf-8", errors="replace")
        return f"Entry(address={self.address!r}, json={text!r})"


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN / Infinity / -Infinity; JSON does not
    raise ValueError(f"{name} is not a JSON value")
