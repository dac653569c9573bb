"""Shared fixtures for postgrestest tests."""

from __future__ import annotations

import os

import pytest

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def _clean_pgtest_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's PGTEST* and PGTEST_LOG_* variables from leaking into tests."""
    for var in list(os.environ):
        if var.upper().startswith("PGTEST"):
            monkeypatch.delenv(var, raising=False)
