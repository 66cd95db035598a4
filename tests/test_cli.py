"""Mini README: Tests for the Typer command line entry point.

The CLI is pointed at a SQLite database inside ``tmp_path`` through
environment variables so commands run against real, isolated storage.
"""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from fundtracker.configuration import get_settings
from fundtracker.storage import Database, SqlCollectionStore
from main_fund_tracker import cli

runner = CliRunner()


@pytest.fixture()
def sql_store(monkeypatch, tmp_path) -> SqlCollectionStore:
    monkeypatch.setenv("FUNDTRACKER_STORAGE_BACKEND", "sql")
    monkeypatch.setenv("FUNDTRACKER_DATA_DIRECTORY", str(tmp_path))
    monkeypatch.delenv("FUNDTRACKER_DATABASE_URL", raising=False)
    monkeypatch.setenv("FUNDTRACKER_CURRENCY_SYMBOL", "$")
    get_settings.cache_clear()
    store = SqlCollectionStore(Database(f"sqlite:///{tmp_path.resolve() / 'fundtracker.db'}"))
    yield store
    get_settings.cache_clear()


def test_init_db_creates_tables(sql_store, tmp_path) -> None:
    result = runner.invoke(cli, ["init-db"])

    assert result.exit_code == 0
    assert "collections, contributors" in result.output
    assert (tmp_path / "fundtracker.db").exists()


def test_summary_prints_totals(sql_store) -> None:
    sql_store.initialise()
    collection = sql_store.create_collection("Trip fund")
    first = sql_store.add_contributor(collection.collection_id, "Ann", 1000)
    sql_store.add_contributor(collection.collection_id, "Bob", 500)
    sql_store.update_contributor(collection.collection_id, first.contributor_id, 250)

    result = runner.invoke(cli, ["summary", collection.collection_id])

    assert result.exit_code == 0
    assert "Trip fund (2 contributors)" in result.output
    assert "Pledged:   $1,500.00" in result.output
    assert "Remaining: $1,250.00" in result.output
    assert "Progress:  17%" in result.output
    assert "Partially paid: 1" in result.output


def test_summary_unknown_collection_fails(sql_store) -> None:
    sql_store.initialise()

    result = runner.invoke(cli, ["summary", "42"])

    assert result.exit_code == 1


def test_init_db_memory_backend_has_no_tables(monkeypatch) -> None:
    monkeypatch.setenv("FUNDTRACKER_STORAGE_BACKEND", "memory")
    get_settings.cache_clear()
    try:
        result = runner.invoke(cli, ["init-db"])
    finally:
        get_settings.cache_clear()

    assert result.exit_code == 0
    assert "memory store has no tables to create" in result.output
