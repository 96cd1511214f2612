"""Tests for the registration store adapter, log appender and queries."""

from __future__ import annotations

import pytest

from core.errors import StoreUnavailable
from database import crud
from database.db import build_engine, make_session_factory


def test_insert_if_absent_creates_once(db) -> None:
    reg, created = crud.insert_registration_if_absent(db, "TAG1", True)
    assert created is True
    assert reg.tag_id == "TAG1"
    assert reg.status is True

    again, created = crud.insert_registration_if_absent(db, "TAG1", False)
    assert created is False
    assert again.status is True
    assert len(crud.list_registrations(db)) == 1


def test_update_if_present_returns_previous(db) -> None:
    crud.insert_registration_if_absent(db, "TAG1", True)

    reg, previous = crud.update_registration_if_present(db, "TAG1", False)
    assert previous is True
    assert reg.status is False
    assert crud.find_registration(db, "TAG1").status is False


def test_update_if_present_missing_tag(db) -> None:
    assert crud.update_registration_if_present(db, "GHOST", True) is None
    assert crud.find_registration(db, "GHOST") is None


def test_list_logs_newest_first(db) -> None:
    crud.append_log(db, "TAG1", True, "2024-05-01 08:00:02")
    crud.append_log(db, "TAG1", False, "2024-05-01 08:00:03")
    crud.append_log(db, "TAG1", True, "2024-05-01 08:00:01")

    stamps = [e.timestamp for e in crud.list_logs(db)]
    assert stamps == ["2024-05-01 08:00:03", "2024-05-01 08:00:02", "2024-05-01 08:00:01"]


def test_list_logs_ties_most_recent_insert_first(db) -> None:
    first = crud.append_log(db, "TAG1", True, "2024-05-01 08:00:00")
    second = crud.append_log(db, "TAG2", None, "2024-05-01 08:00:00")

    assert [e.id for e in crud.list_logs(db)] == [second.id, first.id]


def test_unknown_sentinel_is_stored_as_null(db) -> None:
    entry = crud.append_log(db, "GHOST", None, "2024-05-01 08:00:00")
    assert entry.status is None
    assert crud.list_logs(db)[0].status is None


def test_filter_by_status(db) -> None:
    mix = {"A": True, "B": False, "C": True, "D": False, "E": True}
    for tag_id, status in mix.items():
        crud.insert_registration_if_absent(db, tag_id, status)

    active = [r.tag_id for r in crud.list_registrations_by_status(db, True)]
    inactive = [r.tag_id for r in crud.list_registrations_by_status(db, False)]
    assert active == ["A", "C", "E"]
    assert inactive == ["B", "D"]


def test_missing_tables_surface_as_store_unavailable(tmp_path) -> None:
    engine = build_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    session = make_session_factory(engine)()
    try:
        with pytest.raises(StoreUnavailable):
            crud.list_logs(session)
        with pytest.raises(StoreUnavailable):
            crud.update_registration_if_present(session, "TAG1", True)
        with pytest.raises(StoreUnavailable):
            crud.append_log(session, "TAG1", True, "2024-05-01 08:00:00")
    finally:
        session.close()
        engine.dispose()
