import sqlite3
from dataclasses import replace

from lsr import db


def _locked():
    raise sqlite3.OperationalError("database is locked")


def test_log_event_roundtrip():
    assert db.log_event("info", "hello", service_name="web", address="10.0.0.1:80") is True
    row = db.latest_events(1)[0]
    assert row["level"] == "INFO"
    assert (row["service_name"], row["address"], row["message"]) == ("web", "10.0.0.1:80", "hello")


def test_unwritable_journal_does_not_raise(monkeypatch, capsys):
    monkeypatch.setattr(db, "connect", _locked)
    assert db.log_event("ERROR", "tick failed") is False
    assert "database is locked" in capsys.readouterr().err


def test_journal_keeps_newest_rows(monkeypatch):
    monkeypatch.setattr(db, "settings", replace(db.settings, events_max=3))
    for i in range(10):
        db.log_event("INFO", f"event {i}")

    rows = db.latest_events(100)
    assert [r["message"] for r in rows] == ["event 9", "event 8", "event 7"]


def test_journal_unbounded_when_max_is_zero(monkeypatch):
    monkeypatch.setattr(db, "settings", replace(db.settings, events_max=0))
    for i in range(5):
        db.log_event("INFO", f"event {i}")
    assert len(db.latest_events(100)) == 5


def test_directory_path_gets_db_file(tmp_path, monkeypatch):
    target = tmp_path / "mounted"
    target.mkdir()
    monkeypatch.setattr(db, "_db_path", str(target))
    db.init_db()
    db.log_event("INFO", "inside dir")
    assert (target / "lsr.db").exists()
