# -*- coding: utf-8 -*-
"""
Reference Snapshot

``ReferenceTables`` is an immutable snapshot of the seven normalized
reference tables. It is built once per refresh from the raw rows handed over
by the data provider and passed explicitly into ``calculate``; the engine
never reads reference data from module state.

``SnapshotStore`` is the owner-side holder for processes that refresh the
data periodically: ``replace`` swaps in a complete new snapshot under a lock
and readers always receive either the old or the new snapshot, never a mix.

Example:
    >>> tables = ReferenceTables.from_raw({
    ...     "sewage_ratings": [["Income", "N_removal_rating"],
    ...                        ["High-income countries", "0.6"]],
    ... })
    >>> tables.is_populated
    True
    >>> store = SnapshotStore()
    >>> store.replace(tables)
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

import yaml

from nprint.config import get_config
from nprint.exceptions import SnapshotError
from nprint.normalizer import (
    TableName,
    get_schema,
    normalize,
    resolve_table_name,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ReferenceTables",
    "SnapshotStore",
    "load_reference_tables",
]

RawTables = Mapping[str, Optional[Sequence[Sequence[Any]]]]


def _is_row_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _check_rows(name: str, rows: Any) -> None:
    """Reject a table that is not a list of row lists (blank rows allowed)."""
    if rows is None:
        return
    if not _is_row_sequence(rows):
        raise SnapshotError(
            f"Rows of reference table '{name}' must be a list, "
            f"got {type(rows).__name__}",
            context={"table": name},
        )
    for index, row in enumerate(rows):
        if row is not None and not _is_row_sequence(row):
            raise SnapshotError(
                f"Row {index} of reference table '{name}' must be a list, "
                f"got {type(row).__name__}",
                context={"table": name, "row": index},
            )


class ReferenceTables:
    """Immutable snapshot of normalized reference tables.

    Each table is a tuple of read-only records; a table absent from the
    source is an empty tuple.
    """

    __slots__ = ("_tables",)

    def __init__(
        self,
        tables: Optional[Mapping[TableName, Sequence[Mapping[str, Any]]]] = None,
    ):
        frozen: Dict[TableName, Tuple[Mapping[str, Any], ...]] = {
            name: () for name in TableName
        }
        for name, records in (tables or {}).items():
            frozen[TableName(name)] = tuple(
                MappingProxyType(dict(record)) for record in records
            )
        self._tables = MappingProxyType(frozen)

    @classmethod
    def from_raw(
        cls,
        raw_tables: RawTables,
        header_policy: Optional[str] = None,
    ) -> ReferenceTables:
        """Normalize raw row arrays into a snapshot.

        Args:
            raw_tables: Table name (logical name or source sheet name) to raw
                rows, header row first.
            header_policy: ``strict`` or ``warn``; defaults to the configured
                policy.

        Returns:
            New ReferenceTables snapshot.

        Raises:
            SnapshotError: If a table name is not recognized,
                or its rows are not a list of row lists.
            HeaderMismatchError: If a header row does not match its schema
                under the ``strict`` policy.
        """
        policy = header_policy or get_config().header_policy
        tables: Dict[TableName, Sequence[Mapping[str, Any]]] = {}

        for name, rows in raw_tables.items():
            table = resolve_table_name(name)
            if table is None:
                raise SnapshotError(
                    f"Unknown reference table: {name}",
                    context={"table": name, "known": [t.value for t in TableName]},
                )
            _check_rows(name, rows)
            tables[table] = normalize(rows, get_schema(table), policy=policy)

        snapshot = cls(tables)
        logger.info(
            "Built reference snapshot: %s",
            ", ".join(f"{t.value}={len(snapshot[t])}" for t in TableName),
        )
        return snapshot

    def __getitem__(self, table: TableName) -> Tuple[Mapping[str, Any], ...]:
        return self._tables[TableName(table)]

    def __iter__(self) -> Iterator[TableName]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def get(self, table: TableName) -> Tuple[Mapping[str, Any], ...]:
        return self[table]

    @property
    def is_populated(self) -> bool:
        """True once any table holds at least one record."""
        return any(self._tables.values())

    def row_counts(self) -> Dict[str, int]:
        return {table.value: len(records) for table, records in self._tables.items()}

    def __repr__(self) -> str:
        return f"ReferenceTables({self.row_counts()})"


class SnapshotStore:
    """Thread-safe holder of the current reference snapshot."""

    def __init__(self, initial: Optional[ReferenceTables] = None):
        self._lock = threading.Lock()
        self._snapshot = initial or ReferenceTables()
        self._version = 0

    def current(self) -> ReferenceTables:
        """Return the current snapshot (never a partially replaced one)."""
        with self._lock:
            return self._snapshot

    @property
    def version(self) -> int:
        """Number of successful replacements so far."""
        with self._lock:
            return self._version

    def replace(self, snapshot: ReferenceTables) -> None:
        """Swap in a complete new snapshot.

        Args:
            snapshot: Fully built replacement.
        """
        if not isinstance(snapshot, ReferenceTables):
            raise TypeError(
                f"Expected ReferenceTables, got {type(snapshot).__name__}"
            )
        with self._lock:
            self._snapshot = snapshot
            self._version += 1
            version = self._version
        logger.info("Reference snapshot replaced (version %d)", version)

    def refresh_from_raw(
        self, raw_tables: RawTables, header_policy: Optional[str] = None,
    ) -> ReferenceTables:
        """Normalize ``raw_tables`` and swap the result in.

        Normalization happens before the lock is taken; if it fails, the
        current snapshot stays in place.
        """
        snapshot = ReferenceTables.from_raw(raw_tables, header_policy=header_policy)
        self.replace(snapshot)
        return snapshot


def load_reference_tables(
    path: Union[str, Path], header_policy: Optional[str] = None,
) -> ReferenceTables:
    """Load raw tables from a JSON or YAML file and normalize them.

    The file holds a mapping of table name to raw rows (header row first).

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file.
        header_policy: ``strict`` or ``warn``; defaults to the configured
            policy.

    Raises:
        SnapshotError: If the file is missing, unparseable or not a mapping.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                raw = json.load(f)
            else:
                raw = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise SnapshotError(
            f"Reference table file not found: {path}", source=str(path),
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotError(
            f"Failed to read reference table file {path}: {e}",
            source=str(path),
        ) from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotError(
            f"Failed to parse reference table file {path}: {e}",
            source=str(path),
        ) from e

    if not isinstance(raw, dict):
        raise SnapshotError(
            "Reference table file must hold a mapping of table name to rows",
            source=str(path),
        )

    logger.info("Loading reference tables from %s", path)
    return ReferenceTables.from_raw(raw, header_policy=header_policy)
