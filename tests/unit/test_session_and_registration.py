from __future__ import annotations

import pytest
from conftest import FakeStore

from family_camp.models.registrant import ChurchLocation, Gender
from family_camp.services.registration import register
from family_camp.services.session import PermissionDeniedError, SessionContext


def test_admin_session_lifecycle():
    store = FakeStore()
    store.profiles["u1"] = {"id": "u1", "role": "admin", "full_name": "Pastor Jo"}
    session = SessionContext.start(store, "u1")
    assert session.is_authenticated
    assert session.is_admin
    session.require_admin()

    session.clear()
    assert not session.is_authenticated
    assert not session.is_admin
    with pytest.raises(PermissionDeniedError):
        session.require_admin()


def test_missing_profile_is_not_admin():
    session = SessionContext.start(FakeStore(), "ghost")
    assert session.is_authenticated
    assert session.profile is None
    assert not session.is_admin


def test_profile_fetch_error_leaves_session_without_profile():
    store = FakeStore()
    store.fail_profile = "timeout"
    session = SessionContext.start(store, "u1")
    assert session.profile is None


def test_anonymous_session():
    session = SessionContext.start(FakeStore(), None)
    assert not session.is_authenticated


def test_register_inserts_unassigned_registrant():
    store = FakeStore()
    outcome = register(store, "Ana Cruz", "15", "female", "Calamba")
    assert outcome.success
    assert store.inserted == [
        {"full_name": "Ana Cruz", "age": 15, "gender": "Female", "church_location": "Calamba", "assigned_group": None}
    ]
    assert outcome.registrant.gender is Gender.FEMALE
    assert outcome.registrant.church_location is ChurchLocation.CALAMBA


def test_register_rejects_invalid_form():
    store = FakeStore()
    outcome = register(store, "A", 11, "Male", "Calamba")
    assert not outcome.success
    assert store.inserted == []
    assert "Full name must be at least 2 characters." in outcome.errors
    assert "Must be 12 or older to register." in outcome.errors
    assert outcome.message.startswith("Registration failed: ")


def test_register_store_failure():
    store = FakeStore()
    store.fail_insert = "permission denied for table registrants"
    outcome = register(store, "Ana Cruz", 15, "Female", "Bay")
    assert not outcome.success
    assert outcome.message == "Registration failed: permission denied for table registrants"
