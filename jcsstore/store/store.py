"""
Content-addressed store for canonical JSON documents.

Layout: one flat directory, one file per entry.
    filename = entry.address
    content  = entry.canonical_bytes (no trailing newline)

Write contract:
    put_raw() creates root/address only if absent. The file appears
    atomically (temp file + os.link), so a reader never sees a partial
    entry. Concurrent writers of the same document are safe: one link
    wins, the others see FileExistsError and return.

Read contract:
    get_raw() re-hashes the bytes read and raises IntegrityError on
    mismatch. Unverified bytes are never returned.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from jcsstore.core.canonical import address_of_bytes, canonicalize, is_address
from jcsstore.core.config import StoreConfig
from jcsstore.core.exceptions import (
    EncodingError,
    FilesystemError,
    IntegrityError,
    NotFoundError,
    ParseError,
    PathConflict,
)
from jcsstore.core.models import Entry


logger = logging.getLogger(__name__)

# Temp files start with ".", which is not a base64 character
_TEMP_PREFIX = ".tmp-"


@dataclass
class StoreViolation:
    """A single problem found by Store.verify()."""
    address:        str
    violation_type: str   # "integrity" | "parse" | "non_canonical"
    detail:         str


@dataclass
class VerifySummary:
    """Aggregate result of a full store sweep."""
    root:          str
    total_entries: int = 0
    valid_entries: int = 0
    violations:    List[StoreViolation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        return {
            "root":            self.root,
            "total_entries":   self.total_entries,
            "valid_entries":   self.valid_entries,
            "is_valid":        self.is_valid,
            "violation_count": len(self.violations),
            "violations": [
                {
                    "address":        v.address,
                    "violation_type": v.violation_type,
                    "detail":         v.detail,
                }
                for v in self.violations
            ],
        }


class Store:
    """
    Append-only, deduplicating, integrity-checked JSON store.

    Holds no in-memory index and no locks. The directory is the index.
    """

    def __init__(self, root: Union[str, Path], fsync: bool = True):
        self.root  = Path(root)
        self.fsync = fsync
        self._ensure_root()

    @classmethod
    def open(cls, root: Union[str, Path], fsync: bool = True) -> "Store":
        """
        Open a store, creating the directory (and parents) if absent.

        Raises:
            PathConflict    — something other than a directory is at root
            FilesystemError — the directory could not be created or inspected
        """
        return cls(root, fsync=fsync)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "Store":
        return cls(config.root, fsync=config.fsync)

    # ── Write path ────────────────────────────────────────────

    def put_raw(self, entry: Entry) -> None:
        """
        Save an entry. Does nothing if the address already exists.

        Raises:
            IntegrityError  — entry.address is not a well-formed address
            FilesystemError — any OS failure while checking or writing
        """
        if not is_address(entry.address):
            raise IntegrityError("Not a valid address", {"address": entry.address})

        path = self._path_for(entry.address)

        try:
            path.stat()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise FilesystemError(
                f"Failed to inspect entry: {exc}",
                {"address": entry.address},
            ) from exc
        else:
            logger.debug("Entry %s already stored", entry.address)
            return

        try:
            fd, temp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, dir=self.root)
        except OSError as exc:
            raise FilesystemError(
                f"Failed to create temp file: {exc}",
                {"root": str(self.root)},
            ) from exc

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(entry.canonical_bytes)
                f.flush()
                if self.fsync:
                    os.fsync(f.fileno())

            # Atomic create-if-absent: link fails if the name is taken
            try:
                os.link(temp_path, path)
            except FileExistsError:
                logger.debug("Entry %s written concurrently", entry.address)
            else:
                logger.debug(
                    "Stored entry %s (%d bytes)",
                    entry.address, len(entry.canonical_bytes),
                )
        except OSError as exc:
            raise FilesystemError(
                f"Failed to write entry: {exc}",
                {"address": entry.address},
            ) from exc
        finally:
            try:
                temp_path.unlink()
            except FileNotFoundError:
                pass

    def put_value(self, value: Any) -> Entry:
        """
        Canonicalize and save a JSON value. Does nothing if it exists.

        Raises EncodingError or FilesystemError.
        """
        entry = Entry.from_value(value)
        self.put_raw(entry)
        return entry

    # ── Read path ─────────────────────────────────────────────

    def get_raw(self, address: str) -> Entry:
        """
        Read an entry from disk and verify its address.

        Raises:
            NotFoundError   — no entry at this address
            IntegrityError  — the bytes on disk hash to a different address
            FilesystemError — the file could not be read
        """
        if not is_address(address):
            raise NotFoundError("Not a valid address", {"address": address})

        path = self._path_for(address)
        try:
            canonical_bytes = path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError("No entry at address", {"address": address}) from exc
        except OSError as exc:
            raise FilesystemError(
                f"Failed to read entry: {exc}",
                {"address": address},
            ) from exc

        actual = address_of_bytes(canonical_bytes)
        if actual != address:
            logger.warning(
                "Integrity failure at %s: content hashes to %s", address, actual
            )
            raise IntegrityError(
                "Invalid hash",
                {"expected": address, "actual": actual},
            )

        logger.debug("Read entry %s", address)
        return Entry(address=address, canonical_bytes=canonical_bytes)

    def get_value(self, address: str) -> Any:
        """
        Read, verify and parse an entry.

        Raises NotFoundError, IntegrityError, ParseError or FilesystemError.
        """
        return self.get_raw(address).to_value()

    def contains(self, address: str) -> bool:
        """True if a file exists at the address. Content is not verified."""
        return is_address(address) and self._path_for(address).is_file()

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self.contains(address)

    def iter_addresses(self) -> Iterator[str]:
        """Yield stored addresses in sorted order. Temp files are skipped."""
        try:
            names = sorted(os.listdir(self.root))
        except OSError as exc:
            raise FilesystemError(
                f"Failed to list store: {exc}",
                {"root": str(self.root)},
            ) from exc

        for name in names:
            if is_address(name):
                yield name

    # ── Verification ──────────────────────────────────────────

    def verify(self) -> VerifySummary:
        """
        Check every entry: address, JSON, canonical form.

        Read-only. Corrupt entries are reported, never removed.
        """
        summary = VerifySummary(root=str(self.root))

        for address in self.iter_addresses():
            summary.total_entries += 1
            violation = self._verify_one(address)
            if violation is None:
                summary.valid_entries += 1
            else:
                logger.warning(
                    "Verify: %s at %s: %s",
                    violation.violation_type, address, violation.detail,
                )
                summary.violations.append(violation)

        return summary

    # ── Internal ──────────────────────────────────────────────

    def _verify_one(self, address: str) -> Optional[StoreViolation]:
        try:
            entry = self.get_raw(address)
            value = entry.to_value()
        except NotFoundError:
            # Removed between listing and reading
            return None
        except IntegrityError as exc:
            return StoreViolation(address, "integrity", str(exc))
        except ParseError as exc:
            return StoreViolation(address, "parse", str(exc))

        try:
            recanonical = canonicalize(value)
        except EncodingError as exc:
            return StoreViolation(address, "non_canonical", str(exc))

        if recanonical != entry.canonical_bytes:
            return StoreViolation(
                address,
                "non_canonical",
                "content is valid JSON but not in RFC 8785 canonical form",
            )
        return None

    def _path_for(self, address: str) -> Path:
        return self.root / address

    def _ensure_root(self) -> None:
        """Create root as a directory if absent; refuse anything else."""
        try:
            if not self.root.exists():
                self.root.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            # Lost a race with a non-directory; reported below
            pass
        except OSError as exc:
            raise FilesystemError(
                f"Failed to create store directory: {exc}",
                {"root": str(self.root)},
            ) from exc

        try:
            is_dir = self.root.is_dir()
        except OSError as exc:
            raise FilesystemError(
                f"Failed to inspect store directory: {exc}",
                {"root": str(self.root)},
            ) from exc

        if not is_dir:
            raise PathConflict(
                "File exists at store directory",
                {"root": str(self.root)},
            )

    def __repr__(self) -> str:
        return f"Store(root={str(self.root)!r})"
