"""Mini README: Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fundtracker.configuration import FundTrackerSettings, get_settings
from fundtracker.ledger import OverpaymentPolicy


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("FUNDTRACKER_STORAGE_BACKEND", "sql")
    monkeypatch.setenv("FUNDTRACKER_DATA_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("FUNDTRACKER_OVERPAYMENT_POLICY", "reject")
    monkeypatch.setenv("FUNDTRACKER_MAX_WRITE_ATTEMPTS", "5")

    settings = FundTrackerSettings()

    assert settings.storage_backend == "sql"
    assert settings.resolved_database_url == f"sqlite:///{tmp_path.resolve() / 'fundtracker.db'}"
    assert settings.overpayment_policy is OverpaymentPolicy.REJECT
    assert settings.max_write_attempts == 5


def test_defaults_keep_clamping_and_guarded_writes(monkeypatch) -> None:
    for name in ("FUNDTRACKER_OVERPAYMENT_POLICY", "FUNDTRACKER_COMPARE_AND_SWAP", "FUNDTRACKER_STORAGE_BACKEND"):
        monkeypatch.delenv(name, raising=False)

    settings = FundTrackerSettings()

    assert settings.overpayment_policy is OverpaymentPolicy.CLAMP
    assert settings.compare_and_swap is True
    assert settings.storage_backend == "memory"


@pytest.mark.parametrize(
    "overrides",
    [{"storage_backend": "postgres"}, {"interface_port": 0}, {"max_write_attempts": 0}],
)
def test_invalid_settings_are_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        FundTrackerSettings(**overrides)


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()
    assert get_settings() is get_settings()


def test_explicit_database_url_wins(monkeypatch) -> None:
    monkeypatch.setenv("FUNDTRACKER_DATABASE_URL", "postgresql://fund:secret@db/fundtracker")

    settings = FundTrackerSettings(storage_backend="sql")

    assert settings.resolved_database_url == "postgresql://fund:secret@db/fundtracker"
