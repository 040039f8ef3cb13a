from __future__ import annotations

from datetime import date
from pathlib import Path

from conftest import FakeStore, registrant_row

from family_camp.services.exporter import export_roster
from family_camp.services.importer import import_file
from family_camp.services.roster import load_roster


def _store() -> FakeStore:
    return FakeStore(
        [
            registrant_row("Ana Cruz", 2, gender="Female", church_location="Bay"),
            registrant_row("Ben Uy", 4, age=16),
            registrant_row("Cy Tan", None, church_location="Los Baños"),
            registrant_row("Dee Ong", 2, age=45, gender="Female", church_location="Santa Cruz"),
        ]
    )


def test_export_then_reimport_skips_nothing(tmp_path: Path):
    store = _store()
    loaded = load_roster(store)
    exported = export_roster(loaded.registrants, event_title="Camp", today=date(2025, 5, 1))
    path = exported.write_to(tmp_path)

    result = import_file(path, store)

    assert result.success
    assert result.skipped_count == 0
    assert result.errors == []
    assert result.processed_rows == 4
    assert result.upserted_count == 4
    # upsert keyed on full_name: no duplicates, groups untouched
    names = [r["full_name"] for r in store.rows]
    assert sorted(names) == ["Ana Cruz", "Ben Uy", "Cy Tan", "Dee Ong"]
    assert load_roster(store).groups.keys() == loaded.groups.keys()


def test_reimport_is_idempotent(tmp_path: Path):
    store = _store()
    exported = export_roster(load_roster(store).registrants)
    path = exported.write_to(tmp_path)

    first = import_file(path, store)
    before = [dict(r) for r in store.rows]
    second = import_file(path, store)

    assert first.skipped_count == second.skipped_count == 0
    assert store.rows == before


def test_export_of_groups_two_and_four_only():
    from io import BytesIO

    from openpyxl import load_workbook

    store = FakeStore([registrant_row("Ana Cruz", 2), registrant_row("Ben Uy", 4)])
    exported = export_roster(load_roster(store).registrants)
    assert load_workbook(BytesIO(exported.content)).sheetnames == ["All Participants", "Group 2", "Group 4"]


def test_na_like_names_survive_roundtrip(tmp_path: Path):
    store = FakeStore(
        [
            registrant_row("NA", 1),
            registrant_row("None", None),
            registrant_row("Nan", 3, gender="Female"),
        ]
    )
    path = export_roster(load_roster(store).registrants).write_to(tmp_path)

    result = import_file(path, store)

    assert result.skipped_count == 0
    assert result.errors == []
    assert sorted(r["full_name"] for r in store.rows) == ["NA", "Nan", "None"]
