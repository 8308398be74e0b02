"""
jcsstore/__init__.py

jcsstore: Content-Addressed Store for Canonical JSON Documents

Documents are encoded with RFC 8785 (JCS), addressed by
base64(SHA-256(canonical bytes)) with "/" replaced by "+", and stored
one file per address. Every read re-verifies the address.
"""

__version__ = "0.1.0"

from jcsstore.core.canonical import (
    ADDRESS_LENGTH,
    address_of,
    address_of_bytes,
    canonicalize,
    digest,
    encode_address,
    is_address,
)
from jcsstore.core.config import StoreConfig
from jcsstore.core.exceptions import (
    EncodingError,
    FilesystemError,
    IntegrityError,
    JcsStoreError,
    NotFoundError,
    ParseError,
    PathConflict,
)
from jcsstore.core.models import Entry
from jcsstore.store import Store, StoreViolation, VerifySummary

__all__ = [
    # Core types
    "Entry",
    "Store",
    "StoreConfig",
    "StoreViolation",
    "VerifySummary",
    # Canonicalization and addressing
    "canonicalize",
    "digest",
    "encode_address",
    "address_of",
    "address_of_bytes",
    "is_address",
    # Errors
    "JcsStoreError",
    "PathConflict",
    "FilesystemError",
    "EncodingError",
    "ParseError",
    "NotFoundError",
    "IntegrityError",
    # Constants
    "ADDRESS_LENGTH",
]
