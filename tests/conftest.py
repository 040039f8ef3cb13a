# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from family_camp.db.store import StoreError
from family_camp.logging.init import reset_logging
from family_camp.models.registrant import MIN_AGE, Registrant


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """event_title: Test Camp
require_admin: false
tables:
  registrants: registrants
  profiles: profiles
export:
  output_directory: ./exports
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "camp.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


def write_workbook(path: Path, rows: list[list[Any]], sheet: str = "Registrants") -> Path:
    """Write rows verbatim (first row is the header) to an xlsx file."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    def _make(rows: list[list[Any]], name: str = "upload.xlsx") -> Path:
        return write_workbook(tmp_path / name, rows)
    return _make


def make_registrant(
    full_name: str,
    group: int | None = None,
    age: int = 20,
    gender: str = "Female",
    location: str = "Calamba",
    rid: Any = None,
) -> Registrant:
    return Registrant.from_row(
        {
            "id": rid if rid is not None else full_name.lower().replace(" ", "-"),
            "full_name": full_name,
            "age": age,
            "gender": gender,
            "church_location": location,
            "assigned_group": group,
            "created_at": datetime(2025, 4, 1, 8, 0, 0),
        }
    )


class FakeStore:
    """In-memory stand-in for RegistrantStore."""

    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        self.rows: list[dict[str, Any]] = [dict(r) for r in (rows or [])]
        self.upsert_calls: list[tuple[list[dict[str, Any]], str]] = []
        self.inserted: list[dict[str, Any]] = []
        self.profiles: dict[str, dict[str, Any]] = {}
        self.fail_fetch: str | None = None
        self.fail_upsert: str | None = None
        self.fail_insert: str | None = None
        self.fail_profile: str | None = None
        self._next_id = 1000

    def _eligible(self, min_age: int) -> list[dict[str, Any]]:
        if self.fail_fetch:
            raise StoreError(self.fail_fetch)
        return [r for r in self.rows if r["age"] >= min_age]

    def fetch_eligible(self, min_age: int = MIN_AGE) -> list[Registrant]:
        rows = sorted(
            self._eligible(min_age),
            key=lambda r: (r.get("assigned_group") is None, r.get("assigned_group") or 0, r["full_name"]),
        )
        return [Registrant.from_row(r) for r in rows]

    def fetch_recent(self, min_age: int = MIN_AGE) -> list[Registrant]:
        rows = sorted(self._eligible(min_age), key=lambda r: r.get("created_at") or datetime.min, reverse=True)
        return [Registrant.from_row(r) for r in rows]

    def insert(self, values: dict[str, Any]) -> Registrant:
        if self.fail_insert:
            raise StoreError(self.fail_insert)
        row = dict(values, id=self._next_id, created_at=datetime(2025, 4, 2))
        self._next_id += 1
        self.rows.append(row)
        self.inserted.append(values)
        return Registrant.from_row(row)

    def upsert(self, rows: list[dict[str, Any]], conflict_column: str = "full_name") -> int:
        self.upsert_calls.append(([dict(r) for r in rows], conflict_column))
        if self.fail_upsert:
            raise StoreError(self.fail_upsert)
        for incoming in rows:
            existing = next((r for r in self.rows if r[conflict_column] == incoming[conflict_column]), None)
            if existing is not None:
                existing.update(incoming)
            else:
                self.rows.append(dict(incoming, id=self._next_id, assigned_group=None))
                self._next_id += 1
        return len(rows)

    def fetch_profile(self, user_id: str) -> dict[str, Any] | None:
        if self.fail_profile:
            raise StoreError(self.fail_profile)
        return self.profiles.get(user_id)


def registrant_row(full_name: str, group: int | None = None, age: int = 20, **extra: Any) -> dict[str, Any]:
    row = {
        "id": full_name.lower().replace(" ", "-"),
        "full_name": full_name,
        "age": age,
        "gender": "Male",
        "church_location": "Calamba",
        "assigned_group": group,
        "created_at": datetime(2025, 4, 1),
    }
    row.update(extra)
    return row


@pytest.fixture()
def fake_store() -> FakeStore:
    return FakeStore()
