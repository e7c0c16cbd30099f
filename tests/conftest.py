"""Shared fixtures: keep the switches this package reads out of the test environment."""

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("GENV_ALLOW_DEFAULT", "ENV", "TEST_VAR"):
        monkeypatch.delenv(key, raising=False)
