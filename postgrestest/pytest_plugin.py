"""pytest fixtures for ephemeral schemas.

Registered through the ``pytest11`` entry point, so installing the package is
enough::

    async def test_users(postgres_schema):
        await postgres_schema.aexecute("CREATE TABLE users (name text)")

Tests requesting ``postgres_schema`` are skipped when ``PGTESTDISABLE`` is set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import pytest_asyncio

from .core.exceptions import DisabledError
from .logger import LoggingConfig, configure_logging
from .postgres.config import PostgresTestSettings
from .postgres.schema import EphemeralSchema

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("postgrestest")
    group.addoption(
        "--pgtest-log-level",
        action="store",
        default=None,
        choices=("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"),
        help="Send postgrestest log events to stderr at this level.",
    )


def pytest_configure(config: pytest.Config) -> None:
    level = config.getoption("--pgtest-log-level", default=None)
    if level:
        configure_logging(LoggingConfig(level=level))


@pytest.fixture
def postgres_test_settings() -> PostgresTestSettings:
    """Settings used by ``postgres_schema``. Override to inject values."""
    return PostgresTestSettings()


@pytest_asyncio.fixture
async def postgres_schema(postgres_test_settings: PostgresTestSettings) -> AsyncIterator[EphemeralSchema]:
    """Provide a fresh schema per test, dropped afterwards."""
    try:
        schema = await EphemeralSchema.acreate(postgres_test_settings)
    except DisabledError as e:
        pytest.skip(str(e))

    try:
        yield schema
    finally:
        await schema.ateardown(postgres_test_settings)
