"""
jcsstore: Canonical JSON Encoding and Content Addressing — RFC 8785 (JCS)

This is the ONLY canonicalization and addressing code in jcsstore.
Every address written to or checked against disk comes from this module.

RFC 8785: https://www.rfc-editor.org/rfc/rfc8785

Address format (locked — existing stores depend on it):
    address = base64(sha256(canonical_bytes)), padded, with every "/" -> "+"

The substitution is NOT a URL-safe base64 alphabet. "+" stays "+".
"""

import base64
import hashlib
import math
import re
from typing import Any

from jcsstore.core.exceptions import EncodingError

try:
    import jcs as _jcs
except ImportError as exc:
    raise ImportError(
        "jcsstore requires the 'jcs' package for RFC 8785 compliance.\n"
        "Install with: pip install jcs\n"
        f"Original error: {exc}"
    ) from exc


# 32-byte digest -> 44 base64 characters, one "=" of padding
ADDRESS_LENGTH = 44

_ADDRESS_RE = re.compile(r"^[A-Za-z0-9+]{43}=$")

# I-JSON safe integer range (RFC 7493 section 2.2)
MAX_SAFE_INTEGER = 2 ** 53 - 1


def canonicalize(value: Any) -> bytes:
    """
    Encode a JSON value to RFC 8785 canonical JSON bytes.

    Output is deterministic regardless of key insertion order.
    Values must be JSON-primitive (dict with str keys, list, str, int,
    float, bool, None).

    Raises:
        EncodingError: the value has no exact RFC 8785 form (NaN, Infinity,
        integers beyond +/-(2**53 - 1), non-string keys, unsupported
        types, circular references).
    """
    _reject_unrepresentable_numbers(value)
    try:
        return _jcs.canonicalize(value)
    except (TypeError, ValueError, AttributeError, RecursionError) as exc:
        raise EncodingError(
            f"Value cannot be canonicalized: {exc}",
            {"type": type(value).__name__},
        ) from exc


def digest(data: bytes) -> bytes:
    """SHA-256 over the exact bytes. No salt, no truncation."""
    return hashlib.sha256(data).digest()


def encode_address(digest_bytes: bytes) -> str:
    """Standard padded base64, then every "/" replaced by "+"."""
    return base64.b64encode(digest_bytes).decode("ascii").replace("/", "+")


def address_of_bytes(data: bytes) -> str:
    """
    Address of an already-canonical byte sequence.

    Used on the read path: stored bytes are hashed as-is, never
    re-canonicalized.
    """
    return encode_address(digest(data))


def address_of(value: Any) -> str:
    """Address of a JSON value: address_of_bytes(canonicalize(value))."""
    return address_of_bytes(canonicalize(value))


def is_address(text: str) -> bool:
    """True if text has the shape of an address (and is thus a safe filename)."""
    return isinstance(text, str) and _ADDRESS_RE.match(text) is not None


def _reject_unrepresentable_numbers(value: Any) -> None:
    # RFC 8785 numbers are IEEE 754 doubles: no NaN or Infinity, and
    # integers past MAX_SAFE_INTEGER would come back changed. Containers
    # are visited once, so circular values fall through to the encoder.
    stack = [value]
    seen = set()
    while stack:
        item = stack.pop()
        if isinstance(item, float) and not math.isfinite(item):
            raise EncodingError(
                "Value cannot be canonicalized: non-finite number",
                {"number": repr(item)},
            )
        if (
            isinstance(item, int)
            and not isinstance(item, bool)
            and abs(item) > MAX_SAFE_INTEGER
        ):
            raise EncodingError(
                "Value cannot be canonicalized: integer outside the exact double range",
                {"bits": item.bit_length()},
            )
        if isinstance(item, (dict, list, tuple)):
            if id(item) in seen:
                continue
            seen.add(id(item))
            stack.extend(item.values() if isinstance(item, dict) else item)
