"""Tests for engine setup and local schema creation"""

from sqlalchemy import inspect

import database


def test_init_db_creates_tables(monkeypatch):
    monkeypatch.setattr(database, "_engine", None)

    database.init_db()

    tables = inspect(database.get_engine()).get_table_names()
    assert {"document", "processed_message"} <= set(tables)


def test_engine_is_created_once(monkeypatch):
    monkeypatch.setattr(database, "_engine", None)

    assert database.get_engine() is database.get_engine()
