from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

"""Batched INSERT ... ON CONFLICT using psycopg2.extras.execute_values.

The whole batch goes through one statement per page inside the caller's
transaction, so from the caller's point of view it is all-or-nothing:
either every page commits with the surrounding transaction or the
exception propagates and the transaction is rolled back.

RETURNING is always requested so the affected row count is exact even when
execute_values splits the batch into several pages (cursor.rowcount only
reflects the last page).
"""


class BatchUpsertError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing data for one upsert call."""
    batch_size: int
    elapsed_seconds: float
    start_time: float
    end_time: float


@dataclass(frozen=True)
class UpsertResult:
    affected_rows: int
    returned_values: list[Any] | None = None


def quote_identifier(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def build_upsert_sql(table: str, columns: Sequence[str], conflict_column: str) -> str:
    cols_sql = ",".join(quote_identifier(c) for c in columns)
    updates = [c for c in columns if c != conflict_column]
    if updates:
        set_sql = ", ".join(f"{quote_identifier(c)} = EXCLUDED.{quote_identifier(c)}" for c in updates)
        action = f"DO UPDATE SET {set_sql}"
    else:
        action = "DO NOTHING"
    return (
        f"INSERT INTO {quote_identifier(table)} ({cols_sql}) VALUES %s "
        f"ON CONFLICT ({quote_identifier(conflict_column)}) {action} RETURNING id"
    )


def batch_upsert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    conflict_column: str,
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> UpsertResult:
    """Insert rows, updating existing rows that collide on conflict_column.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: target table (validated by the config schema)
    columns: column order of every row tuple
    rows: row tuples
    conflict_column: ON CONFLICT target
    page_size: execute_values page size
    metrics_callback: receives BatchMetrics after the call; not invoked for
        an empty batch (the function returns early)
    """
    rows_list = list(rows)
    if not rows_list:
        return UpsertResult(affected_rows=0, returned_values=[])

    sql = build_upsert_sql(table, columns, conflict_column)

    start_time = time.time()
    try:
        returned = execute_values(cursor, sql, rows_list, page_size=page_size, fetch=True)
    except Exception as e:
        raise BatchUpsertError(str(e)) from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    batch_size=len(rows_list),
                    elapsed_seconds=end_time - start_time,
                    start_time=start_time,
                    end_time=end_time,
                )
            )

    returned = list(returned or [])
    return UpsertResult(affected_rows=len(returned), returned_values=returned)
