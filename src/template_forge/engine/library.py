"""
Module: engine.library

Purpose:
    File-backed spec library standing in for the row store. Each row
    holds one layout or module spec with its id, display name and kind.

Key Classes:
    - SpecRecord: One stored layout/module row
    - SpecLibrary: In-memory lookup by id and kind
    - LibraryError: Unreadable directory or row

Key Functions:
    - SpecLibrary.from_directory(): Load every ``*.json`` row in a folder
    - SpecLibrary.save(): Write a row back as ``<id>.json``

Dependencies:
    - core.utils.serialization: Spec parsing and JSON writing

Used By:
    - engine.controller: Layout and module resolution
    - cli: ``--library`` option

Row Format:
    {"id": "...", "name": "...", "kind": "layout"|"module",
     "spec_json": {...} or "<json text>", "client_id": "..."}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from template_forge.core.models import SpecKind, Spec
from template_forge.core.schemas import ValidationError
from template_forge.core.utils import parse_spec_json, save_json

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Error loading or saving library rows."""
    pass


@dataclass(frozen=True)
class SpecRecord:
    """
    A stored layout or module.

    Attributes:
        id: Row id
        name: Display name
        kind: LAYOUT or MODULE
        spec: Parsed spec
        client_id: Owning client (informational only)
    """
    id: str
    name: str
    kind: SpecKind
    spec: Spec
    client_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "spec_json": self.spec.to_dict(),
        }
        if self.client_id is not None:
            d["client_id"] = self.client_id
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SpecRecord:
        """
        Parse a row.

        Raises:
            LibraryError: If the row is missing fields or its spec is invalid
        """
        missing = [f for f in ("id", "kind", "spec_json") if f not in data]
        if missing:
            raise LibraryError(f"Row missing required fields: {missing}")
        try:
            kind = SpecKind(str(data["kind"]))
        except ValueError:
            raise LibraryError(f"Row {data['id']!r} has invalid kind {data['kind']!r}")
        try:
            spec = parse_spec_json(data["spec_json"], kind=kind)
        except (ValidationError, ValueError) as e:
            raise LibraryError(f"Row {data['id']!r} has an invalid spec: {e}") from e

        client_id = data.get("client_id")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or "Untitled"),
            kind=kind,
            spec=spec,
            client_id=None if client_id is None else str(client_id),
        )


class SpecLibrary:
    """
    Lookup of layout and module records by id.

    Insertion order is kept so listings are stable.

    Example:
        >>> library = SpecLibrary.from_directory(Path("library"))
        >>> [r.name for r in library.layouts()]
        ['Two column', 'Grid 2x2']
    """

    def __init__(self, records: Iterable[SpecRecord] = ()):
        self._records: Dict[str, SpecRecord] = {}
        for record in records:
            self.add(record)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def add(self, record: SpecRecord) -> None:
        """Add or replace a record."""
        if record.id in self._records:
            logger.debug(f"Replacing library record {record.id}")
        self._records[record.id] = record

    def get(self, record_id: str) -> Optional[SpecRecord]:
        return self._records.get(record_id)

    def layouts(self) -> List[SpecRecord]:
        return [r for r in self._records.values() if r.kind is SpecKind.LAYOUT]

    def modules(self) -> List[SpecRecord]:
        return [r for r in self._records.values() if r.kind is SpecKind.MODULE]

    def modules_by_id(self, ids: Iterable[str]) -> Dict[str, Spec]:
        """Module id -> spec for the given ids; unknown ids are left out."""
        out: Dict[str, Spec] = {}
        for record_id in ids:
            record = self._records.get(record_id)
            if record is not None and record.kind is SpecKind.MODULE:
                out[record_id] = record.spec
        return out

    def names(self) -> Dict[str, str]:
        """Record id -> display name."""
        return {r.id: r.name for r in self._records.values()}

    # ─────────────────────────────────────────────────────────────────────────
    # Persistence
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_directory(cls, directory: Path) -> SpecLibrary:
        """
        Load every ``*.json`` row in a directory (sorted by file name).

        Rows that cannot be read or parsed are skipped with a warning.

        Raises:
            LibraryError: If the directory is missing
        """
        if not directory.is_dir():
            raise LibraryError(f"Library directory does not exist: {directory}")

        library = cls()
        for path in sorted(directory.glob("*.json")):
            try:
                library.add(_read_row(path))
            except LibraryError as e:
                logger.warning(f"Skipping library row {path.name}: {e}")

        logger.info(
            f"Loaded library from {directory}: {len(library.layouts())} layout(s), "
            f"{len(library.modules())} module(s)"
        )
        return library

    @staticmethod
    def save(record: SpecRecord, directory: Path) -> Path:
        """Write a record as ``<id>.json`` and return the path."""
        path = directory / f"{record.id}.json"
        save_json(record.to_dict(), path)
        return path


def _read_row(path: Path) -> SpecRecord:
    """Parse one row file; every failure is reported as LibraryError."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise LibraryError(f"Cannot read library row {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise LibraryError(f"Library row {path.name} is not an object")
    return SpecRecord.from_dict(data)
