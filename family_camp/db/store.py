from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..config.loader import TablesConfig
from ..models.registrant import MIN_AGE, Registrant
from .batch_upsert import BatchUpsertError, quote_identifier, batch_upsert

"""Registrant store: the queries the roster tools run against PostgreSQL.

Every method either returns rows or raises StoreError carrying the driver
message; callers decide whether that is fatal. The cursor is expected to
yield mapping rows (RealDictCursor).
"""

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Transport / query failure reported by the store."""


class RegistrantStore:
    def __init__(self, cursor: Any, tables: TablesConfig | None = None) -> None:
        self.cursor = cursor
        self.tables = tables or TablesConfig()

    def _select(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        try:
            self.cursor.execute(sql, tuple(params))
            return [dict(r) for r in self.cursor.fetchall()]
        except Exception as e:
            raise StoreError(str(e)) from e

    def fetch_eligible(self, min_age: int = MIN_AGE) -> list[Registrant]:
        """Registrants aged min_age+, by assigned group (nulls last) then full name."""
        sql = (
            f"SELECT * FROM {quote_identifier(self.tables.registrants)} WHERE age >= %s "
            "ORDER BY assigned_group ASC NULLS LAST, full_name ASC"
        )
        return [Registrant.from_row(r) for r in self._select(sql, (min_age,))]

    def fetch_recent(self, min_age: int = MIN_AGE) -> list[Registrant]:
        """Registrants aged min_age+, newest first."""
        sql = (
            f"SELECT * FROM {quote_identifier(self.tables.registrants)} WHERE age >= %s "
            "ORDER BY created_at DESC"
        )
        return [Registrant.from_row(r) for r in self._select(sql, (min_age,))]

    def insert(self, values: dict[str, Any]) -> Registrant:
        columns = list(values.keys())
        cols_sql = ",".join(quote_identifier(c) for c in columns)
        placeholders = ",".join(["%s"] * len(columns))
        sql = f"INSERT INTO {quote_identifier(self.tables.registrants)} ({cols_sql}) VALUES ({placeholders}) RETURNING *"
        rows = self._select(sql, [values[c] for c in columns])
        if not rows:
            raise StoreError("insert returned no row")
        return Registrant.from_row(rows[0])

    def upsert(self, rows: list[dict[str, Any]], conflict_column: str = "full_name") -> int:
        """Upsert a batch keyed on conflict_column. Returns the exact affected row count."""
        if not rows:
            return 0
        columns = list(rows[0].keys())
        try:
            result = batch_upsert(
                self.cursor,
                self.tables.registrants,
                columns,
                [tuple(r.get(c) for c in columns) for r in rows],
                conflict_column=conflict_column,
                metrics_callback=lambda m: logger.debug(
                    f"upsert batch_size={m.batch_size} elapsed_sec={m.elapsed_seconds:.3f}"
                ),
            )
        except BatchUpsertError as e:
            raise StoreError(str(e)) from e
        return result.affected_rows

    def fetch_profile(self, user_id: str) -> dict[str, Any] | None:
        sql = f"SELECT * FROM {quote_identifier(self.tables.profiles)} WHERE id = %s"
        rows = self._select(sql, (user_id,))
        return rows[0] if rows else None
